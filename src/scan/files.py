"""File scanning utilities for refmap-core."""

from __future__ import annotations

from fnmatch import fnmatch
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator
    from pathlib import Path

# Directories never descended into, in addition to hidden ones.
SKIP_DIRS = frozenset(
    {
        "node_modules",
        "vendor",
        "__pycache__",
        "dist",
        "build",
        "target",
        "venv",
    }
)


def _is_skipped_dir(name: str) -> bool:
    return name in SKIP_DIRS or name.startswith(".")


def _should_include_file(
    path: Path,
    directory: Path,
    ignore_matches: Callable[[str], bool] | None,
    include_patterns: list[str] | None,
    exclude_patterns: list[str] | None,
    extensions: frozenset[str] | None = None,
) -> bool:
    """Check if a file should be included based on all filtering rules."""
    if not path.is_file() or path.is_symlink():
        return False

    if extensions is not None and path.suffix not in extensions:
        return False

    if not _is_within_root(path, directory):
        return False

    try:
        rel_path = path.relative_to(directory)
    except ValueError:
        return False

    rel_path_str = rel_path.as_posix()

    if any(_is_skipped_dir(part) for part in rel_path.parts[:-1]):
        return False

    if ignore_matches is not None and ignore_matches(str(path)):
        return False

    if include_patterns and not any(
        fnmatch(rel_path_str, pat) for pat in include_patterns
    ):
        return False

    has_excluded_match = exclude_patterns and any(
        fnmatch(rel_path_str, pat) for pat in exclude_patterns
    )
    return not has_excluded_match


def _is_within_root(path: Path, root: Path) -> bool:
    """Return True when the resolved path stays within the resolved root."""
    try:
        root_resolved = root.resolve()
        path_resolved = path.resolve()
    except OSError:
        return False

    try:
        path_resolved.relative_to(root_resolved)
    except ValueError:
        return False

    return True


def _iter_gitignore_files(root: Path) -> list[Path]:
    """Return sorted list of .gitignore files under root (including root)."""
    gitignore_paths = [root / ".gitignore"]
    gitignore_paths.extend(root.rglob(".gitignore"))
    unique_paths = {
        path for path in gitignore_paths if path.is_file() and not path.is_symlink()
    }
    return sorted(unique_paths, key=lambda p: p.relative_to(root).as_posix())


def _combine(matchers: list[Callable[[str], bool]]) -> Callable[[str], bool] | None:
    if not matchers:
        return None
    if len(matchers) == 1:
        return matchers[0]

    def matches(path_str: str) -> bool:
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                continue
        return False

    return matches


def _build_ignore_matcher(
    root: Path,
    *,
    nested_gitignore: bool,
    ignore_file: str | None = None,
) -> Callable[[str], bool] | None:
    """Compose .gitignore rules with the project ignore file, if present."""
    if nested_gitignore:
        gitignore_paths = _iter_gitignore_files(root)
    else:
        gitignore_paths = [root / ".gitignore"]

    if ignore_file:
        gitignore_paths.append(root / ignore_file)

    matchers = [
        cast("Callable[[str], bool]", parse_gitignore(path))
        for path in gitignore_paths
        if path.is_file()
    ]
    return _combine(matchers)


def find_source_files(
    directory: Path,
    *,
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
    nested_gitignore: bool = False,
    ignore_file: str | None = None,
    extensions: Iterable[str] | None = None,
) -> Iterator[Path]:
    """Find indexable files in a directory, respecting ignore files.

    Args:
        directory: Directory to search
        include_patterns: Optional list of fnmatch patterns; if provided,
            files must match at least one pattern to be included
        exclude_patterns: Optional list of fnmatch patterns; files matching
            any pattern are excluded
        nested_gitignore: Compose every .gitignore below ``directory``
            instead of only the root one
        ignore_file: Extra gitignore-syntax file at the root (e.g. ".refmapignore")
        extensions: Restrict results to these suffixes; ``None`` yields every file

    Yields:
        Path objects for each file found, sorted lexicographically by
        relative path for deterministic ordering.
    """
    ignore_matches = _build_ignore_matcher(
        directory,
        nested_gitignore=nested_gitignore,
        ignore_file=ignore_file,
    )
    allowed = frozenset(extensions) if extensions is not None else None

    matched_files = [
        path
        for path in directory.rglob("*")
        if _should_include_file(
            path,
            directory,
            ignore_matches,
            include_patterns,
            exclude_patterns,
            allowed,
        )
    ]

    matched_files.sort(key=lambda p: p.relative_to(directory).as_posix())

    yield from matched_files


__all__ = ["SKIP_DIRS", "find_source_files"]
