"""Query errors for reference and impact analysis."""

from __future__ import annotations


class TargetFileNotIndexedError(Exception):
    """Raised when a file-mode impact target is not part of the indexed corpus."""

    def __init__(self, path: str) -> None:
        super().__init__(f"file {path} not found in index")
        self.path = path


__all__ = ["TargetFileNotIndexedError"]
