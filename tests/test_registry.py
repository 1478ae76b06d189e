from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from models.symbols import Symbol
from parse import registry
from parse.brace_symbols import BraceParser
from parse.errors import ParseError
from parse.indent_symbols import IndentParser
from parse.treesitter_go import GoParser

if TYPE_CHECKING:
    from collections.abc import Iterator


class _MarkdownParser:
    extensions: tuple[str, ...] = (".md", ".ts")

    def parse(self, path: str, content: bytes) -> list[Symbol]:
        return [Symbol(name=path, kind="const", line=1, exported=False)]


@pytest.fixture
def isolated_registry(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setattr(registry, "_REGISTRY", dict(registry._REGISTRY))
    yield


def test_builtin_parsers_are_registered() -> None:
    assert isinstance(registry.for_extension(".go"), GoParser)
    assert isinstance(registry.for_extension(".py"), IndentParser)
    for ext in (".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx"):
        assert isinstance(registry.for_extension(ext), BraceParser)
    assert registry.registered_extensions() == sorted(
        [".cjs", ".go", ".js", ".jsx", ".mjs", ".py", ".pyi", ".ts", ".tsx"]
    )


def test_lookup_is_case_sensitive() -> None:
    assert registry.for_extension(".GO") is None
    assert registry.for_extension("go") is None


def test_unsupported_extension_yields_no_symbols() -> None:
    assert registry.parse_source("notes/readme.txt", b"func Helper() {}") == []
    assert registry.parse_source("Makefile", b"all:\n") == []


def test_parse_source_dispatches_by_extension() -> None:
    symbols = registry.parse_source("pkg/a.go", b"package a\n\nfunc Run() {}\n")

    assert [(s.name, s.kind, s.exported) for s in symbols] == [("Run", "func", True)]


def test_parse_error_propagates_from_grammar_parser() -> None:
    with pytest.raises(ParseError):
        registry.parse_source("bad.go", b"package a\n\nfunc (\n")


@pytest.mark.usefixtures("isolated_registry")
def test_later_registration_wins() -> None:
    parser = _MarkdownParser()

    registry.register(parser)

    assert registry.for_extension(".md") is parser
    assert registry.for_extension(".ts") is parser
    assert isinstance(registry.for_extension(".tsx"), BraceParser)
    assert registry.parse_source("doc.md", b"# title\n")[0].name == "doc.md"
