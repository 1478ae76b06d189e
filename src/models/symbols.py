"""Symbol models for extracted declarations.

A ``Symbol`` describes one declaration in one source file, independent of the
language it was extracted from.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

SymbolKind = Literal[
    "func",
    "method",
    "struct",
    "interface",
    "type",
    "const",
    "var",
    "class",
    "enum",
]


class Symbol(BaseModel):
    """A declaration extracted from a source file."""

    model_config = ConfigDict(frozen=True)

    name: str
    kind: SymbolKind
    line: int
    end_line: int = Field(
        default=0, description="Last line of the declaration (0 = unknown)"
    )
    exported: bool
    signature: str = ""
    parent: str = Field(default="", description="Owning type for methods")

    @property
    def effective_end_line(self) -> int:
        """End line with the unknown-end sentinel folded onto ``line``."""
        return self.end_line or self.line

    def contains(self, line: int) -> bool:
        return self.line <= line <= self.effective_end_line


__all__ = ["Symbol", "SymbolKind"]
