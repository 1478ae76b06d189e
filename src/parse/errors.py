"""Parse failure types."""

from __future__ import annotations


class ParseError(Exception):
    """Raised when a grammar-parsed source file is malformed.

    Callers scanning many files treat this as "skip this file".
    """

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message


__all__ = ["ParseError"]
