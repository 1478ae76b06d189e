"""Reference models for textual symbol occurrences."""

from __future__ import annotations

from pydantic import BaseModel, Field


class RefMatch(BaseModel):
    """A single line containing a word-boundary match of a symbol name."""

    path: str
    line: int
    content: str
    is_definition: bool = False


class RefsResult(BaseModel):
    """Definition plus usages of a symbol across the corpus."""

    symbol: str
    definition: RefMatch | None = None
    references: list[RefMatch] = Field(default_factory=list)
    total_references: int = 0


__all__ = ["RefMatch", "RefsResult"]
