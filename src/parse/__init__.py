"""Per-language symbol and import extraction."""

from parse.errors import ParseError
from parse.registry import (
    Parser,
    for_extension,
    parse_source,
    register,
    registered_extensions,
)

__all__ = [
    "ParseError",
    "Parser",
    "for_extension",
    "parse_source",
    "register",
    "registered_extensions",
]
