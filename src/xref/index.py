"""Flat symbol index over a corpus.

The index supplies the authoritative definition location used by
``find_refs`` to short-circuit its heuristic definition search.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from models.symbols import Symbol
    from xref.corpus import Corpus


@dataclass(frozen=True)
class IndexEntry:
    path: str
    symbol: Symbol


class SymbolIndex:
    """Every symbol of every parsable file, in corpus order."""

    def __init__(self, entries: list[IndexEntry]) -> None:
        self.entries = entries

    @classmethod
    def build(cls, corpus: Corpus) -> SymbolIndex:
        entries = [
            IndexEntry(path=path, symbol=symbol)
            for path in corpus.paths
            for symbol in corpus.symbols(path)
        ]
        return cls(entries)

    def lookup(self, name: str) -> list[IndexEntry]:
        return [entry for entry in self.entries if entry.symbol.name == name]

    def definition_hint(self, name: str) -> tuple[str, int] | None:
        """First indexed ``(path, line)`` declaring ``name``."""
        for entry in self.entries:
            if entry.symbol.name == name and entry.symbol.line > 0:
                return entry.path, entry.symbol.line
        return None


__all__ = ["IndexEntry", "SymbolIndex"]
