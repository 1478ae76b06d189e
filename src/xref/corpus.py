"""The indexed file set that reference and impact queries run over."""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from parse.errors import ParseError
from parse.registry import parse_source
from scan.files import find_source_files
from utils import read_source

if TYPE_CHECKING:
    from collections.abc import Iterable

    from models.symbols import Symbol
    from rules.config import RefMapConfig

logger = logging.getLogger(__name__)


class Corpus:
    """Sorted, repo-relative POSIX paths under ``root``.

    Nothing read through a corpus is cached: every call goes back to disk so
    results always reflect current file contents.
    """

    def __init__(self, root: Path, paths: Iterable[str]) -> None:
        self.root = root
        self.paths: tuple[str, ...] = tuple(sorted(set(paths)))
        self._members = frozenset(self.paths)

    @classmethod
    def scan(cls, root: Path, config: RefMapConfig | None = None) -> Corpus:
        """Enumerate ``root`` with the configured include/exclude rules."""
        files = find_source_files(
            root,
            include_patterns=config.include if config else None,
            exclude_patterns=config.exclude if config else None,
            nested_gitignore=config.nested_gitignore if config else False,
            ignore_file=config.ignore_file if config else None,
        )
        return cls(root, (path.relative_to(root).as_posix() for path in files))

    def __contains__(self, path: object) -> bool:
        return path in self._members

    def __len__(self) -> int:
        return len(self.paths)

    def relativize(self, target: str) -> str:
        """Repo-relative POSIX form of ``target`` (absolute paths under root)."""
        path = Path(target)
        if path.is_absolute():
            try:
                return path.resolve().relative_to(self.root.resolve()).as_posix()
            except (OSError, ValueError):
                return path.as_posix()
        return PurePosixPath(target.replace("\\", "/")).as_posix()

    def read_bytes(self, rel_path: str) -> bytes | None:
        """File contents, or ``None`` for binary or unreadable files."""
        try:
            content = read_source(self.root / rel_path)
        except OSError as exc:
            logger.debug("Skipping unreadable file %s: %s", rel_path, exc)
            return None
        if content is None:
            logger.debug("Skipping binary file %s", rel_path)
        return content

    def read_text(self, rel_path: str) -> str | None:
        content = self.read_bytes(rel_path)
        if content is None:
            return None
        return content.decode("utf8", errors="replace")

    def symbols(self, rel_path: str) -> list[Symbol]:
        """Parse one file; files that fail to parse contribute no symbols."""
        content = self.read_bytes(rel_path)
        if content is None:
            return []
        try:
            return parse_source(rel_path, content)
        except ParseError as exc:
            logger.debug("Skipping unparsable file: %s", exc)
            return []


__all__ = ["Corpus"]
