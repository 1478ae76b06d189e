"""Impact (blast radius) models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ImpactTarget(BaseModel):
    """The symbol or file an impact query was issued for."""

    name: str
    file: str = ""
    line: int = 0
    kind: str = "symbol"


class ImpactRef(BaseModel):
    """A single dependent site within a layer."""

    file: str
    line: int = 0
    content: str = ""
    enclosing_symbol: str = ""


class ImpactLayer(BaseModel):
    """Dependent sites discovered at one traversal depth."""

    depth: int
    label: str
    refs: list[ImpactRef] = Field(default_factory=list)


class ImpactSummary(BaseModel):
    """Totals across all layers of an impact result."""

    total_files: int = 0
    total_ref_sites: int = 0
    max_depth_reached: int = 0


class ImpactResult(BaseModel):
    """Layered output of an impact analysis."""

    target: ImpactTarget
    layers: list[ImpactLayer] = Field(default_factory=list)
    summary: ImpactSummary = Field(default_factory=ImpactSummary)


__all__ = [
    "ImpactLayer",
    "ImpactRef",
    "ImpactResult",
    "ImpactSummary",
    "ImpactTarget",
]
