"""Definition and usage lookup for a symbol name across a corpus.

Every line containing a word-boundary match of the name is either the
definition or a reference. The definition is the location supplied by the
symbol index when one is given; otherwise it is the first line, in corpus
order, that matches one of the declaration shapes below. With two equally
plausible definitions (the same method name on two types, say) the earlier
file wins.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import TYPE_CHECKING

from models.refs import RefMatch, RefsResult

if TYPE_CHECKING:
    from xref.corpus import Corpus

# Authoritative (path, line) of a symbol name, from the broader index.
DefinitionHint = Callable[[str], tuple[str, int] | None]

logger = logging.getLogger(__name__)

# One regex per declaration shape; NAME is replaced by the escaped symbol.
DEFINITION_SHAPES: tuple[str, ...] = (
    r"func\s+NAME\b",  # Go function
    r"func\s+\([^)]+\)\s+NAME\b",  # Go method
    r"type\s+NAME\b",  # Go type, TS type alias
    r"var\s+NAME\b",
    r"const\s+NAME\b",
    r"class\s+NAME\b",
    r"def\s+NAME\b",  # Python function
    r"let\s+NAME\b",
    r"function\s+NAME\b",
    r"interface\s+NAME\b",
    r"struct\s+NAME\b",
    r"enum\s+NAME\b",
)


def _definition_patterns(name: str) -> list[re.Pattern[str]]:
    escaped = re.escape(name)
    return [re.compile(shape.replace("NAME", escaped)) for shape in DEFINITION_SHAPES]


def _hinted_definition(
    corpus: Corpus,
    word_re: re.Pattern[str],
    hint: tuple[str, int],
) -> RefMatch | None:
    """The hinted line as a definition, if it still mentions the name."""
    path, line_no = hint
    if path not in corpus:
        return None
    text = corpus.read_text(path)
    if text is None:
        return None
    lines = text.split("\n")
    if not 0 < line_no <= len(lines) or not word_re.search(lines[line_no - 1]):
        logger.debug("Ignoring stale definition hint %s:%d", path, line_no)
        return None
    return RefMatch(
        path=path,
        line=line_no,
        content=lines[line_no - 1].strip(),
        is_definition=True,
    )


def find_refs(
    corpus: Corpus,
    name: str,
    max_results: int,
    *,
    definition_hint: DefinitionHint | None = None,
) -> RefsResult:
    """Find the definition and up to ``max_results`` references of ``name``.

    Binary and unreadable files are skipped. Once ``max_results`` references
    are held the scan continues only while the definition is still unknown,
    and records no further references.
    """
    result = RefsResult(symbol=name)
    if not name:
        return result

    word_re = re.compile(rf"\b{re.escape(name)}\b")
    def_patterns = _definition_patterns(name)

    hint = definition_hint(name) if definition_hint is not None else None
    if hint is not None:
        result.definition = _hinted_definition(corpus, word_re, hint)
    hinted = result.definition is not None

    limit = max(max_results, 0)
    for path in corpus.paths:
        if len(result.references) >= limit and result.definition is not None:
            break
        text = corpus.read_text(path)
        if text is None:
            continue

        for line_no, line in enumerate(text.split("\n"), start=1):
            if not word_re.search(line):
                continue

            if hinted:
                if (path, line_no) == hint:
                    continue
            elif result.definition is None and any(
                pattern.search(line) for pattern in def_patterns
            ):
                result.definition = RefMatch(
                    path=path,
                    line=line_no,
                    content=line.strip(),
                    is_definition=True,
                )
                continue

            if len(result.references) < limit:
                result.references.append(
                    RefMatch(path=path, line=line_no, content=line.strip())
                )
            elif result.definition is not None:
                break

    result.total_references = len(result.references)
    return result


def format_refs(result: RefsResult) -> str:
    """Human-readable rendering of a refs query."""
    out: list[str] = []
    if result.definition is not None:
        definition = result.definition
        out.append("Definition:")
        out.append(f"  {definition.path}:{definition.line}  {definition.content}")
        out.append("")

    if not result.references:
        if result.definition is None:
            out.append("no matches found")
        else:
            out.append("No references found")
    else:
        out.append(f"References ({result.total_references} matches):")
        out.extend(
            f"  {ref.path}:{ref.line}  {ref.content}" for ref in result.references
        )

    return "\n".join(out) + "\n"


__all__ = ["DEFINITION_SHAPES", "DefinitionHint", "find_refs", "format_refs"]
