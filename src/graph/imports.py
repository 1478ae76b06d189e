"""File-level import graph for Go, JavaScript/TypeScript and Python.

Only imports that resolve to files inside the corpus become edges; third
party and standard library imports are dropped.
"""

from __future__ import annotations

import logging
import posixpath
from collections import defaultdict
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from parse.ast_imports import PyImport, extract_imports, resolve_relative_import
from parse.imports import JS_EXTENSIONS, extract_go_imports, extract_js_imports
from utils import path_to_module

if TYPE_CHECKING:
    from collections.abc import Iterable

    from xref.corpus import Corpus

logger = logging.getLogger(__name__)

PY_EXTENSIONS: tuple[str, ...] = (".py", ".pyi")
_IMPORTABLE_EXTENSIONS = frozenset((".go", *JS_EXTENSIONS, *PY_EXTENSIONS))


def _suffix(path: str) -> str:
    return PurePosixPath(path).suffix


def _parent_dir(path: str) -> str:
    return posixpath.dirname(path)


def resolve_go_import(import_path: str, go_files: Iterable[str]) -> list[str]:
    """Non-test Go files whose directory equals a suffix of ``import_path``.

    ``github.com/user/project/utils`` matches files in ``utils/`` or
    ``project/utils/``.
    """
    parts = import_path.split("/")
    suffixes = {"/".join(parts[i:]) for i in range(len(parts))}
    return sorted(
        path
        for path in go_files
        if not path.endswith("_test.go") and _parent_dir(path) in suffixes
    )


def resolve_js_import(
    specifier: str,
    importer: str,
    indexed: frozenset[str],
) -> list[str]:
    """Resolve a relative JS/TS specifier against the importer's directory."""
    if not specifier.startswith("."):
        return []

    resolved = posixpath.normpath(posixpath.join(_parent_dir(importer), specifier))
    candidates = [
        resolved,
        *(resolved + ext for ext in JS_EXTENSIONS),
        *(posixpath.join(resolved, "index" + ext) for ext in JS_EXTENSIONS),
    ]
    for candidate in candidates:
        if candidate in indexed:
            return [candidate]
    return []


class _PythonModules:
    """Module name -> path table for the Python files of a corpus."""

    def __init__(self, paths: Iterable[str], indexed: frozenset[str]) -> None:
        self.indexed = indexed
        self.by_module: dict[str, str] = {}
        for path in sorted(paths):
            self.by_module.setdefault(path_to_module(path), path)

    def _lookup(self, module: str, importer_dir: str) -> str | None:
        if not module:
            return None
        if module in self.by_module:
            return self.by_module[module]

        parts = module.split(".")
        candidates = [
            posixpath.join(importer_dir, *parts) + ".py",
            posixpath.join(*parts) + ".py",
            posixpath.join(*parts, "__init__.py"),
        ]
        for candidate in candidates:
            candidate = posixpath.normpath(candidate)
            if candidate in self.indexed:
                return candidate
        return None

    def resolve(self, imp: PyImport, importer: str) -> list[str]:
        base = imp.module
        if imp.level > 0:
            importing_module = path_to_module(importer)
            if PurePosixPath(importer).stem == "__init__":
                # A package's __init__ resolves "." to the package itself.
                importing_module = f"{importing_module}.__init__"
            base = resolve_relative_import(importing_module, imp.module, imp.level)

        importer_dir = _parent_dir(importer)
        resolved: list[str] = []
        for name in imp.names:
            submodule = self._lookup(f"{base}.{name}" if base else name, importer_dir)
            if submodule is not None:
                resolved.append(submodule)

        if not resolved:
            parts = base.split(".")
            for end in range(len(parts), 0, -1):
                target = self._lookup(".".join(parts[:end]), importer_dir)
                if target is not None:
                    resolved.append(target)
                    break

        return resolved


class ImportGraph:
    """Resolved import edges between files of a corpus."""

    def __init__(self, imports: dict[str, list[str]]) -> None:
        self._imports = {
            path: sorted(set(targets)) for path, targets in imports.items()
        }
        importers: dict[str, set[str]] = defaultdict(set)
        for path, targets in self._imports.items():
            for target in targets:
                importers[target].add(path)
        self._importers = {
            path: sorted(sources) for path, sources in importers.items()
        }

    @classmethod
    def build(cls, corpus: Corpus) -> ImportGraph:
        """Extract and resolve the imports of every file in ``corpus``."""
        indexed = frozenset(corpus.paths)
        go_files = [path for path in corpus.paths if _suffix(path) == ".go"]
        py_modules = _PythonModules(
            (path for path in corpus.paths if _suffix(path) in PY_EXTENSIONS),
            indexed,
        )

        imports: dict[str, list[str]] = {}
        for path in corpus.paths:
            ext = _suffix(path)
            if ext not in _IMPORTABLE_EXTENSIONS:
                continue
            content = corpus.read_bytes(path)
            if content is None:
                continue

            targets: list[str] = []
            if ext == ".go":
                for import_path in extract_go_imports(content):
                    targets.extend(resolve_go_import(import_path, go_files))
            elif ext in JS_EXTENSIONS:
                text = content.decode("utf8", errors="replace")
                for specifier in extract_js_imports(text):
                    targets.extend(resolve_js_import(specifier, path, indexed))
            else:
                for imp in extract_imports(content, path):
                    targets.extend(py_modules.resolve(imp, path))

            imports[path] = [target for target in targets if target != path]

        logger.debug("Resolved imports for %d files", len(imports))
        return cls(imports)

    def imports_of(self, path: str) -> list[str]:
        return list(self._imports.get(path, []))

    def importers_of(self, path: str) -> list[str]:
        return list(self._importers.get(path, []))


__all__ = ["ImportGraph", "resolve_go_import", "resolve_js_import"]
