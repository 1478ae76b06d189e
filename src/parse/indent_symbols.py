"""Heuristic symbol extraction for Python source files.

Blocks are inferred from leading-whitespace width rather than from a syntax
tree, so files that do not parse (or target another interpreter version)
still yield symbols. Module-level functions, classes and constants are
recorded. Any function indented inside an open module-level class is a method
of that class, including functions nested in its methods; indented functions
outside a class are skipped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from models.symbols import Symbol, SymbolKind

if TYPE_CHECKING:
    from collections.abc import Callable

_FUNC_RE = re.compile(r"^(?:async\s+)?def\s+(\w+)\s*[\(\[]")
_CLASS_RE = re.compile(r"^class\s+(\w+)")
_CONST_RE = re.compile(r"^(_*[A-Z][A-Z0-9_]*)\s*(?::[^=]+)?=(?!=)")
_DECORATOR_RE = re.compile(r"^@\S+")


def line_indent(line: str) -> int:
    """Number of leading whitespace characters."""
    return len(line) - len(line.lstrip())


def _is_skippable(trimmed: str) -> bool:
    return not trimmed or trimmed.startswith("#")


def _opens_with_closing_bracket(trimmed: str) -> bool:
    return trimmed.startswith((")", "]", "}"))


def find_block_end(lines: list[str], start: int) -> int:
    """1-based last line of the block whose header is ``lines[start]``.

    The block ends before the next line indented no deeper than the header.
    Blank and comment lines are ignored, as are lines opening with a closing
    bracket (the tail of a multi-line signature or literal):

        >>> find_block_end(["class Svc(", "    Base,", "):", "    x = 1"], 0)
        4
    """
    base = line_indent(lines[start])
    last = start

    for i in range(start + 1, len(lines)):
        trimmed = lines[i].strip()
        if _is_skippable(trimmed):
            continue
        if line_indent(lines[i]) <= base and not _opens_with_closing_bracket(trimmed):
            break
        last = i

    return last + 1


@dataclass
class _IndentState:
    open_class: str = ""
    open_class_indent: int = 0
    decorators: list[str] = field(default_factory=list)


@dataclass
class _Line:
    index: int
    indent: int
    text: str
    lines: list[str]
    symbols: list[Symbol]


def _signature(state: _IndentState, text: str) -> str:
    return "\n".join([*state.decorators, text])


def _rule_close_class(state: _IndentState, line: _Line) -> bool:
    # The "):" ending a multi-line class header stays inside the class.
    if (
        state.open_class
        and line.indent <= state.open_class_indent
        and not _opens_with_closing_bracket(line.text)
    ):
        state.open_class = ""
    return False


def _rule_decorator(state: _IndentState, line: _Line) -> bool:
    if _DECORATOR_RE.match(line.text):
        state.decorators.append(line.text)
        return True
    return False


def _rule_class(state: _IndentState, line: _Line) -> bool:
    if line.indent != 0:
        return False
    match = _CLASS_RE.match(line.text)
    if match is None:
        return False

    name = match.group(1)
    line.symbols.append(
        Symbol(
            name=name,
            kind="class",
            line=line.index + 1,
            end_line=find_block_end(line.lines, line.index),
            exported=not name.startswith("_"),
            signature=_signature(state, line.text),
        )
    )
    state.open_class = name
    state.open_class_indent = 0
    state.decorators.clear()
    return True


def _rule_function(state: _IndentState, line: _Line) -> bool:
    match = _FUNC_RE.match(line.text)
    if match is None:
        return False

    name = match.group(1)
    signature = _signature(state, line.text)
    state.decorators.clear()

    kind: SymbolKind = "func"
    parent = ""
    if line.indent > 0:
        if not state.open_class or line.indent <= state.open_class_indent:
            # Local function outside any class.
            return True
        kind = "method"
        parent = state.open_class

    line.symbols.append(
        Symbol(
            name=name,
            kind=kind,
            line=line.index + 1,
            end_line=find_block_end(line.lines, line.index),
            exported=not name.startswith("_"),
            signature=signature,
            parent=parent,
        )
    )
    return True


def _rule_constant(state: _IndentState, line: _Line) -> bool:
    if line.indent != 0:
        return False
    match = _CONST_RE.match(line.text)
    if match is None:
        return False

    name = match.group(1)
    line.symbols.append(
        Symbol(
            name=name,
            kind="const",
            line=line.index + 1,
            end_line=find_block_end(line.lines, line.index),
            exported=not name.startswith("_"),
            signature=line.text,
        )
    )
    state.decorators.clear()
    return True


def _rule_other(state: _IndentState, line: _Line) -> bool:
    state.decorators.clear()
    return True


_RULES: tuple[Callable[[_IndentState, _Line], bool], ...] = (
    _rule_close_class,
    _rule_decorator,
    _rule_class,
    _rule_function,
    _rule_constant,
    _rule_other,
)


class IndentParser:
    """Extracts Python declarations by tracking indentation line by line."""

    extensions: tuple[str, ...] = (".py", ".pyi")

    def parse(self, path: str, content: bytes) -> list[Symbol]:
        lines = content.decode("utf8", errors="replace").split("\n")
        symbols: list[Symbol] = []
        state = _IndentState()

        for index, raw in enumerate(lines):
            trimmed = raw.strip()
            if _is_skippable(trimmed):
                state.decorators.clear()
                continue

            line = _Line(
                index=index,
                indent=line_indent(raw),
                text=trimmed,
                lines=lines,
                symbols=symbols,
            )
            for rule in _RULES:
                if rule(state, line):
                    break

        return symbols


__all__ = ["IndentParser", "find_block_end", "line_indent"]
