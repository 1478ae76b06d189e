"""Shared utilities for refmap-core."""

from __future__ import annotations

from pathlib import Path

# Bytes inspected when deciding whether a file is binary.
BINARY_SNIFF_BYTES = 512


def path_to_module(file_path: str | Path) -> str:
    """Convert a file path to a Python module name.

    Args:
        file_path: Relative file path (e.g., "src/refmap/cli.py" or Path object)

    Returns:
        Module name (e.g., "refmap.cli")

    Examples:
        >>> path_to_module("src/refmap/cli.py")
        'refmap.cli'
        >>> path_to_module("src/refmap/__init__.py")
        'refmap'
        >>> path_to_module(Path("foo/bar.pyi"))
        'foo.bar'
    """
    path_str = file_path.as_posix() if isinstance(file_path, Path) else str(file_path)
    normalized_parts = [part for part in path_str.replace("\\", "/").split("/") if part]

    # Python source under src/<package>/... maps to <package>.<submodules>.
    module_parts = (
        normalized_parts[1:]
        if len(normalized_parts) >= 2 and normalized_parts[0] == "src"
        else normalized_parts
    )

    if module_parts:
        for suffix in (".py", ".pyi"):
            if module_parts[-1].endswith(suffix):
                module_parts[-1] = module_parts[-1][: -len(suffix)]
                break

    if module_parts and module_parts[-1] == "__init__":
        module_parts = module_parts[:-1]

    return ".".join(module_parts)


def is_binary(head: bytes) -> bool:
    """True when a null byte occurs within the first ``BINARY_SNIFF_BYTES``."""
    return b"\x00" in head[:BINARY_SNIFF_BYTES]


def read_source(path: Path) -> bytes | None:
    """Read a file fully, returning ``None`` for binary files.

    ``OSError`` propagates; callers scanning many files decide whether a
    failed read is fatal.
    """
    content = path.read_bytes()
    if is_binary(content):
        return None
    return content
