"""Heuristic symbol extraction for JavaScript and TypeScript.

There is no grammar here: lines are walked one at a time while a brace-depth
counter (string- and template-literal aware) tracks nesting. Top-level lines
are matched against declaration patterns; lines one level inside an open
class body are matched against a method pattern.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from models.symbols import Symbol, SymbolKind

if TYPE_CHECKING:
    from collections.abc import Callable

_FUNC_RE = re.compile(
    r"^(?:export\s+)?(?:default\s+)?(?:async\s+)?function\s*\*?\s*(\w+)"
)
_CLASS_RE = re.compile(r"^(?:export\s+)?(?:default\s+)?(?:abstract\s+)?class\s+(\w+)")
_INTERFACE_RE = re.compile(r"^(?:export\s+)?(?:declare\s+)?interface\s+(\w+)")
_ENUM_RE = re.compile(r"^(?:export\s+)?(?:declare\s+)?(?:const\s+)?enum\s+(\w+)")
_TYPE_RE = re.compile(r"^(?:export\s+)?(?:declare\s+)?type\s+(\w+)\b")
_VAR_RE = re.compile(r"^(?:export\s+)?(?:declare\s+)?(?:const|let|var)\s+(\w+)")
_METHOD_RE = re.compile(
    r"^(?:(?:public|private|protected|static|readonly|abstract|override|async"
    r"|get|set)\s+)*"
    r"\*?\s*(#?\w+)\s*[<(]"
)
_CONSTRUCTOR_RE = re.compile(r"^constructor\s*\(")

_KEYWORDS = frozenset(
    {
        "if", "else", "for", "while", "do", "switch", "case", "break",
        "continue", "return", "throw", "try", "catch", "finally",
        "new", "delete", "typeof", "instanceof", "void", "in", "of",
        "class", "extends", "super", "import", "export", "default",
        "function", "const", "let", "var", "this", "true", "false", "null",
    }
)  # fmt: skip

# A declaration line ending in one of these continues on the next line.
_CONTINUATIONS = ("(", ",", "=", "=>", "|", "&", "<", ":", "extends", "implements")

# Top-level declaration shapes, in priority order. The bool selects whether
# the signature is cut at the first "{".
_TOP_LEVEL_PATTERNS: tuple[tuple[SymbolKind, re.Pattern[str], bool], ...] = (
    ("func", _FUNC_RE, False),
    ("class", _CLASS_RE, True),
    ("interface", _INTERFACE_RE, True),
    ("enum", _ENUM_RE, True),
    ("type", _TYPE_RE, False),
    ("const", _VAR_RE, False),
)


def count_braces(line: str) -> int:
    """Net ``{`` minus ``}`` in a line, ignoring braces inside string literals."""
    depth = 0
    quote = ""
    escaped = False

    for ch in line:
        if escaped:
            escaped = False
            continue
        if ch == "\\":
            escaped = True
            continue
        if quote:
            if ch == quote:
                quote = ""
            continue
        if ch in ("'", '"', "`"):
            quote = ch
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1

    return depth


def strip_comments(text: str) -> tuple[str, bool]:
    """Remove comments from one line outside of string literals.

    Returns the remaining code and whether an unterminated ``/*`` left a
    block comment open at the end of the line.
    """
    out: list[str] = []
    quote = ""
    escaped = False
    i = 0
    while i < len(text):
        ch = text[i]
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif quote:
            if ch == quote:
                quote = ""
        elif ch in ("'", '"', "`"):
            quote = ch
        elif text.startswith("//", i):
            break
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            if end < 0:
                return "".join(out), True
            out.append(" ")
            i = end + 2
            continue
        out.append(ch)
        i += 1
    return "".join(out), False


@dataclass
class _BraceState:
    depth: int = 0
    in_block_comment: bool = False
    open_class: str = ""
    open_class_depth: int = 0


def _code_portion(state: _BraceState, raw: str) -> str:
    """Return the code portion of a line, updating block-comment state."""
    trimmed = raw.strip()

    if state.in_block_comment:
        end = trimmed.find("*/")
        if end < 0:
            return ""
        state.in_block_comment = False
        trimmed = trimmed[end + 2 :]

    code, state.in_block_comment = strip_comments(trimmed)
    return code.strip()


def find_block_end(lines: list[str], start: int, depth: int) -> int:
    """1-based last line of the declaration starting at ``lines[start]``.

    Scans forward until the brace depth returns to ``depth``. A declaration
    that never opens a block ends on its own line unless that line is
    visibly continued (trailing ``(``, ``,``, ``=`` ...), in which case it
    ends at the line that closes its block or terminates with ``;``.
    """
    scan = _BraceState(depth=depth)
    opened = False
    for i in range(start, len(lines)):
        code = _code_portion(scan, lines[i])
        if not code:
            continue
        scan.depth += count_braces(code)
        if scan.depth > depth:
            opened = True
            continue
        if opened or code.endswith(";"):
            return i + 1
        if i == start and not code.endswith(_CONTINUATIONS):
            return i + 1
    return len(lines)


def _cut_at_brace(text: str) -> str:
    idx = text.find("{")
    if idx > 0:
        return text[:idx].strip()
    return text


@dataclass
class _Line:
    """One source line as seen by the rules."""

    index: int
    text: str
    lines: list[str]
    symbols: list[Symbol]


def _match_top_level(trimmed: str, line_no: int) -> Symbol | None:
    exported = trimmed.startswith("export ")
    for kind, pattern, cut in _TOP_LEVEL_PATTERNS:
        match = pattern.match(trimmed)
        if match is None:
            continue
        return Symbol(
            name=match.group(1),
            kind=kind,
            line=line_no,
            exported=exported,
            signature=_cut_at_brace(trimmed) if cut else trimmed,
        )
    return None


def _match_method(trimmed: str, line_no: int, class_name: str) -> Symbol | None:
    if trimmed in ("}", "};"):
        return None

    if _CONSTRUCTOR_RE.match(trimmed):
        return Symbol(
            name="constructor",
            kind="method",
            line=line_no,
            exported=True,
            signature=trimmed,
            parent=class_name,
        )

    match = _METHOD_RE.match(trimmed)
    if match is None:
        return None
    name = match.group(1)
    if name in _KEYWORDS:
        return None
    exported = not name.startswith(("_", "#")) and not trimmed.startswith("private ")
    return Symbol(
        name=name,
        kind="method",
        line=line_no,
        exported=exported,
        signature=trimmed,
        parent=class_name,
    )


def _advance(state: _BraceState, text: str) -> None:
    state.depth += count_braces(text)
    if state.open_class and state.depth <= state.open_class_depth:
        state.open_class = ""


def _record(state: _BraceState, line: _Line, symbol: Symbol) -> None:
    end_line = find_block_end(line.lines, line.index, state.depth)
    line.symbols.append(symbol.model_copy(update={"end_line": end_line}))


def _rule_skip_annotation(state: _BraceState, line: _Line) -> bool:
    if line.text.startswith("@"):
        _advance(state, line.text)
        return True
    return False


def _rule_import(state: _BraceState, line: _Line) -> bool:
    if line.text.startswith(("import ", "import{", "require(")):
        _advance(state, line.text)
        return True
    return False


def _rule_top_level(state: _BraceState, line: _Line) -> bool:
    if state.depth != 0:
        return False
    symbol = _match_top_level(line.text, line.index + 1)
    if symbol is None:
        return False
    if symbol.kind == "class":
        state.open_class = symbol.name
        state.open_class_depth = state.depth
    _record(state, line, symbol)
    _advance(state, line.text)
    return True


def _rule_class_member(state: _BraceState, line: _Line) -> bool:
    if not state.open_class or state.depth != state.open_class_depth + 1:
        return False
    symbol = _match_method(line.text, line.index + 1, state.open_class)
    if symbol is None:
        return False
    _record(state, line, symbol)
    _advance(state, line.text)
    return True


def _rule_track_depth(state: _BraceState, line: _Line) -> bool:
    _advance(state, line.text)
    return True


_RULES: tuple[Callable[[_BraceState, _Line], bool], ...] = (
    _rule_skip_annotation,
    _rule_import,
    _rule_top_level,
    _rule_class_member,
    _rule_track_depth,
)


class BraceParser:
    """Extracts JS/TS declarations by tracking brace depth line by line."""

    extensions: tuple[str, ...] = (".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx")

    def parse(self, path: str, content: bytes) -> list[Symbol]:
        lines = content.decode("utf8", errors="replace").split("\n")
        symbols: list[Symbol] = []
        state = _BraceState()

        for index, raw in enumerate(lines):
            text = _code_portion(state, raw)
            if not text:
                continue
            line = _Line(index=index, text=text, lines=lines, symbols=symbols)
            for rule in _RULES:
                if rule(state, line):
                    break

        return symbols


__all__ = [
    "BraceParser",
    "count_braces",
    "find_block_end",
    "strip_comments",
]
