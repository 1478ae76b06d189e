"""Cross-reference queries: definitions, references and impact."""

from xref.corpus import Corpus
from xref.errors import TargetFileNotIndexedError
from xref.impact import analyze_impact, format_impact
from xref.index import SymbolIndex
from xref.refs import find_refs, format_refs

__all__ = [
    "Corpus",
    "SymbolIndex",
    "TargetFileNotIndexedError",
    "analyze_impact",
    "find_refs",
    "format_impact",
    "format_refs",
]
