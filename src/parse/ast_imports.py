"""AST-based import analysis for Python sources."""

from __future__ import annotations

import ast
from dataclasses import dataclass


@dataclass(frozen=True)
class PyImport:
    """One imported module as written in source.

    ``names`` holds the names of a from-import (empty for ``import x``);
    ``level`` is 0 for absolute imports, 1+ for relative imports.
    """

    line: int
    module: str
    names: tuple[str, ...] = ()
    level: int = 0


def _process_import_node(node: ast.Import, imports: list[PyImport]) -> None:
    """Process a standard import node (import x)."""
    for name in node.names:
        imports.append(PyImport(line=node.lineno, module=name.name))


def _process_import_from_node(node: ast.ImportFrom, imports: list[PyImport]) -> None:
    """Process a from-import node (from x import y)."""
    names = tuple(name.name for name in node.names if name.name != "*")
    imports.append(
        PyImport(
            line=node.lineno,
            module=node.module or "",
            names=names,
            level=node.level,
        )
    )


def extract_imports(source: str | bytes, filename: str = "<unknown>") -> list[PyImport]:
    """Extract import statements from Python source using AST.

    Args:
        source: Python source text
        filename: Label used in syntax error messages

    Returns:
        Imports in source order. Sources that fail to parse yield no imports.
    """
    imports: list[PyImport] = []

    try:
        tree = ast.parse(source, filename)
    except (SyntaxError, ValueError):
        # Invalid syntax or null bytes: treat as no imports to keep scans deterministic.
        return imports

    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            _process_import_node(node, imports)
        elif isinstance(node, ast.ImportFrom):
            _process_import_from_node(node, imports)

    imports.sort(key=lambda imp: imp.line)
    return imports


def resolve_relative_import(
    importing_module: str,
    relative_module: str,
    level: int,
) -> str:
    """Resolve a relative import to an absolute module name.

    Args:
        importing_module: The module doing the import (e.g., "pkg.sub.mod")
        relative_module: The relative module name (e.g., "foo" from ".foo")
        level: Number of dots (1 for ".", 2 for "..", etc.)

    Returns:
        Absolute module name (e.g., "pkg.sub.foo")

    Examples:
        >>> resolve_relative_import("pkg.sub.mod", "foo", 1)
        'pkg.sub.foo'
        >>> resolve_relative_import("pkg.sub.mod", "", 1)
        'pkg.sub'
        >>> resolve_relative_import("pkg.sub.mod", "bar", 2)
        'pkg.bar'
    """
    parts = importing_module.split(".")

    if level > len(parts):
        return relative_module or importing_module

    base_parts = parts[: len(parts) - level]

    if relative_module:
        return ".".join([*base_parts, relative_module])
    if base_parts:
        return ".".join(base_parts)
    return importing_module


__all__ = ["PyImport", "extract_imports", "resolve_relative_import"]
