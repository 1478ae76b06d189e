"""Extension -> parser lookup.

Every supported language has exactly one parser class exposing the
extensions it handles and a ``parse(path, content)`` method. The built-in
parsers are registered once, when this module is first imported.
"""

from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import Protocol

from models.symbols import Symbol
from parse.brace_symbols import BraceParser
from parse.indent_symbols import IndentParser
from parse.treesitter_go import GoParser

logger = logging.getLogger(__name__)


class Parser(Protocol):
    """Capability implemented by every per-language extractor."""

    extensions: tuple[str, ...]

    def parse(self, path: str, content: bytes) -> list[Symbol]: ...


_REGISTRY: dict[str, Parser] = {}


def register(parser: Parser) -> None:
    """Bind ``parser`` to each extension it declares; later registration wins."""
    for ext in parser.extensions:
        previous = _REGISTRY.get(ext)
        if previous is not None and previous is not parser:
            logger.debug(
                "Extension %s moved from %s to %s",
                ext,
                type(previous).__name__,
                type(parser).__name__,
            )
        _REGISTRY[ext] = parser


def for_extension(ext: str) -> Parser | None:
    """Parser registered for ``ext`` (case-sensitive, leading dot included)."""
    return _REGISTRY.get(ext)


def registered_extensions() -> list[str]:
    return sorted(_REGISTRY)


def parse_source(path: str, content: bytes) -> list[Symbol]:
    """Parse ``content`` with the parser registered for ``path``'s extension.

    Unsupported extensions yield an empty list. ``ParseError`` from the
    grammar-parsed extractor propagates to the caller.
    """
    parser = for_extension(PurePosixPath(path).suffix)
    if parser is None:
        return []
    return parser.parse(path, content)


def _register_builtin_parsers() -> None:
    for parser in (GoParser(), BraceParser(), IndentParser()):
        register(parser)


_register_builtin_parsers()


__all__ = [
    "Parser",
    "for_extension",
    "parse_source",
    "register",
    "registered_extensions",
]
