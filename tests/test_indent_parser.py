from __future__ import annotations

import pytest

from models.symbols import Symbol
from parse.indent_symbols import IndentParser, find_block_end, line_indent

SAMPLE_PY = """\
\"\"\"Sample module.\"\"\"

import os

MAX_RETRIES = 3
_CACHE_SIZE: int = 128
lowercase_value = 1


def helper(x):
    def inner():
        return x
    return inner()


async def fetch(url: str) -> bytes:
    return b""


class Service:
    \"\"\"A service.\"\"\"

    TIMEOUT = 5

    def __init__(self, client):
        self.client = client

    @property
    def name(self):
        return "svc"

    async def run(
        self,
        retries: int = MAX_RETRIES,
    ):
        for _ in range(retries):
            pass

    def _reset(self):
        pass


@dataclass
class _Record:
    key: str


def after_class():
    return Service
"""


def _parse(source: str = SAMPLE_PY) -> list[Symbol]:
    return IndentParser().parse("sample.py", source.encode("utf-8"))


def _by_key(symbols: list[Symbol]) -> dict[tuple[str, str], Symbol]:
    return {(symbol.parent, symbol.name): symbol for symbol in symbols}


@pytest.mark.parametrize(
    ("parent", "name", "kind", "exported"),
    [
        ("", "MAX_RETRIES", "const", True),
        ("", "_CACHE_SIZE", "const", False),
        ("", "helper", "func", True),
        ("", "fetch", "func", True),
        ("", "Service", "class", True),
        ("Service", "__init__", "method", False),
        ("Service", "name", "method", True),
        ("Service", "run", "method", True),
        ("Service", "_reset", "method", False),
        ("", "_Record", "class", False),
        ("", "after_class", "func", True),
    ],
)
def test_python_declarations(
    parent: str, name: str, kind: str, exported: bool
) -> None:
    symbol = _by_key(_parse())[(parent, name)]

    assert symbol.kind == kind
    assert symbol.exported is exported


def test_python_skips_nested_functions_and_plain_assignments() -> None:
    names = {symbol.name for symbol in _parse()}

    assert "inner" not in names
    assert "lowercase_value" not in names
    assert "TIMEOUT" not in names
    assert "os" not in names


def test_python_block_ranges() -> None:
    by_key = _by_key(_parse())

    helper = by_key[("", "helper")]
    assert (helper.line, helper.end_line) == (10, 13)

    run = by_key[("Service", "run")]
    assert (run.line, run.end_line) == (32, 37)

    service = by_key[("", "Service")]
    assert (service.line, service.end_line) == (20, 40)

    assert by_key[("", "MAX_RETRIES")].end_line == 5


def test_python_decorators_join_the_signature() -> None:
    by_key = _by_key(_parse())

    assert by_key[("Service", "name")].signature == "@property\ndef name(self):"
    assert by_key[("", "_Record")].signature == "@dataclass\nclass _Record:"
    assert by_key[("", "helper")].signature == "def helper(x):"


def test_python_decorator_separated_by_comment_is_dropped() -> None:
    source = "@cache\n# unrelated\ndef compute():\n    return 1\n"

    (symbol,) = _parse(source)

    assert symbol.signature == "def compute():"


def test_python_methods_close_with_their_class() -> None:
    source = (
        "class A:\n"
        "    def a(self):\n"
        "        pass\n"
        "\n"
        "def b():\n"
        "    def c():\n"
        "        pass\n"
    )

    assert [(s.parent, s.name, s.kind) for s in _parse(source)] == [
        ("", "A", "class"),
        ("A", "a", "method"),
        ("", "b", "func"),
    ]


def test_python_unparseable_source_still_yields_symbols() -> None:
    source = "def ok():\n    print 'legacy'\n\ndef also_ok(:\n    pass\n"

    assert [s.name for s in _parse(source)] == ["ok", "also_ok"]


def test_python_empty_source() -> None:
    assert _parse("") == []
    assert _parse("# only a comment\n") == []


def test_line_indent() -> None:
    assert line_indent("    x") == 4
    assert line_indent("\tx") == 1
    assert line_indent("x") == 0


def test_find_block_end_ignores_closing_brackets() -> None:
    lines = [
        "CONFIG = {",
        "    'a': 1,",
        "}",
        "",
        "OTHER = 2",
    ]

    assert find_block_end(lines, 0) == 3
    assert find_block_end(lines, 4) == 5


def test_python_functions_nested_in_methods_belong_to_the_class() -> None:
    source = (
        "class Svc:\n"
        "    def run(self):\n"
        "        def inner():\n"
        "            pass\n"
    )

    assert [(s.parent, s.name, s.kind) for s in _parse(source)] == [
        ("", "Svc", "class"),
        ("Svc", "run", "method"),
        ("Svc", "inner", "method"),
    ]


def test_python_multiline_class_header_keeps_class_open() -> None:
    source = (
        "class Svc(\n"
        "    Base,\n"
        "):\n"
        "    def run(self):\n"
        "        pass\n"
    )

    svc, run = _parse(source)

    assert (svc.name, svc.line, svc.end_line) == ("Svc", 1, 5)
    assert (run.parent, run.name, run.kind) == ("Svc", "run", "method")
    assert (run.line, run.end_line) == (4, 5)


def test_python_parse_is_idempotent() -> None:
    parser = IndentParser()
    content = SAMPLE_PY.encode("utf-8")

    assert parser.parse("a.py", content) == parser.parse("a.py", content)
