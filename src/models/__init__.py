"""Model namespace for refmap-core records."""

from models.impact import (
    ImpactLayer,
    ImpactRef,
    ImpactResult,
    ImpactSummary,
    ImpactTarget,
)
from models.refs import RefMatch, RefsResult
from models.symbols import Symbol, SymbolKind

__all__ = [
    "ImpactLayer",
    "ImpactRef",
    "ImpactResult",
    "ImpactSummary",
    "ImpactTarget",
    "RefMatch",
    "RefsResult",
    "Symbol",
    "SymbolKind",
]
