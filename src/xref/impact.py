"""Blast-radius analysis for a symbol or a file.

Symbol mode walks the reference graph breadth first: depth 1 holds the
references to the target, and each later depth holds the references to the
symbols enclosing the previous depth's references. File mode does the same
over the importer graph. A ``visited`` set scoped to one call (symbol names
or file paths) keeps cyclic graphs from being walked twice.

Symbols are tracked by bare name, so two functions sharing a name in
different files are indistinguishable here.
"""

from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Protocol

from graph.imports import ImportGraph
from models.impact import (
    ImpactLayer,
    ImpactRef,
    ImpactResult,
    ImpactSummary,
    ImpactTarget,
)
from xref.errors import TargetFileNotIndexedError
from xref.refs import find_refs

if TYPE_CHECKING:
    from models.refs import RefMatch
    from models.symbols import Symbol
    from xref.corpus import Corpus
    from xref.refs import DefinitionHint

logger = logging.getLogger(__name__)


class ImportResolver(Protocol):
    def importers_of(self, path: str) -> list[str]: ...


def is_file_target(target: str) -> bool:
    """Targets containing a path separator or a dot are file paths."""
    return "/" in target or "." in target


def enclosing_symbol(symbols: list[Symbol], line: int) -> Symbol | None:
    """Smallest symbol whose line range contains ``line``.

    Ties on range size go to the symbol starting latest, so the innermost
    declaration wins.
    """
    best: Symbol | None = None
    for symbol in symbols:
        if not symbol.contains(line):
            continue
        if best is None:
            best = symbol
            continue
        span = symbol.effective_end_line - symbol.line
        best_span = best.effective_end_line - best.line
        if span < best_span or (span == best_span and symbol.line > best.line):
            best = symbol
    return best


def _layer_label(depth: int, noun: str) -> str:
    if depth == 1:
        return f"direct {noun}"
    if depth == 2:
        return f"transitive {noun}"
    return f"depth-{depth} {noun}"


def summarize(layers: list[ImpactLayer]) -> ImpactSummary:
    files = {ref.file for layer in layers for ref in layer.refs}
    return ImpactSummary(
        total_files=len(files),
        total_ref_sites=sum(len(layer.refs) for layer in layers),
        max_depth_reached=max((layer.depth for layer in layers), default=0),
    )


class _SymbolWalk:
    """State of one symbol-mode traversal."""

    def __init__(self, corpus: Corpus, max_results: int) -> None:
        self.corpus = corpus
        self.max_results = max_results
        self.total = 0
        self._symbols: dict[str, list[Symbol]] = {}

    def symbols_of(self, path: str) -> list[Symbol]:
        if path not in self._symbols:
            self._symbols[path] = self.corpus.symbols(path)
        return self._symbols[path]

    def budget(self) -> int:
        return self.max_results - self.total

    def to_impact_refs(self, matches: list[RefMatch]) -> list[ImpactRef]:
        refs: list[ImpactRef] = []
        for match in matches:
            if self.total >= self.max_results:
                break
            enclosing = enclosing_symbol(self.symbols_of(match.path), match.line)
            refs.append(
                ImpactRef(
                    file=match.path,
                    line=match.line,
                    content=match.content,
                    enclosing_symbol=enclosing.name if enclosing else "",
                )
            )
            self.total += 1
        return refs


def _symbol_target(
    walk: _SymbolWalk,
    name: str,
    definition: RefMatch | None,
) -> ImpactTarget:
    if definition is None:
        return ImpactTarget(name=name)
    kind = "symbol"
    for symbol in walk.symbols_of(definition.path):
        if symbol.name == name and symbol.line == definition.line:
            kind = symbol.kind
            break
    return ImpactTarget(
        name=name,
        file=definition.path,
        line=definition.line,
        kind=kind,
    )


def _impact_symbol(
    corpus: Corpus,
    name: str,
    max_depth: int,
    max_results: int,
    definition_hint: DefinitionHint | None,
) -> ImpactResult:
    walk = _SymbolWalk(corpus, max_results)
    direct = find_refs(corpus, name, max_results, definition_hint=definition_hint)
    target = _symbol_target(walk, name, direct.definition)

    if max_depth < 1:
        return ImpactResult(target=target)

    layers: list[ImpactLayer] = []
    refs = walk.to_impact_refs(direct.references)
    if refs:
        layers.append(
            ImpactLayer(depth=1, label=_layer_label(1, "references"), refs=refs)
        )

    visited = {name}
    previous = refs
    for depth in range(2, max_depth + 1):
        if not previous or walk.total >= max_results:
            break

        next_names: list[str] = []
        for ref in previous:
            if ref.enclosing_symbol and ref.enclosing_symbol not in visited:
                visited.add(ref.enclosing_symbol)
                next_names.append(ref.enclosing_symbol)
        if not next_names:
            break
        logger.debug("Depth %d: expanding %s", depth, ", ".join(next_names))

        layer_refs: list[ImpactRef] = []
        for next_name in next_names:
            if walk.total >= max_results:
                break
            found = find_refs(
                corpus,
                next_name,
                walk.budget(),
                definition_hint=definition_hint,
            )
            layer_refs.extend(walk.to_impact_refs(found.references))

        if not layer_refs:
            break
        layers.append(
            ImpactLayer(
                depth=depth,
                label=_layer_label(depth, "dependents"),
                refs=layer_refs,
            )
        )
        previous = layer_refs

    return ImpactResult(target=target, layers=layers, summary=summarize(layers))


def _impact_file(
    corpus: Corpus,
    target: str,
    max_depth: int,
    max_results: int,
    import_resolver: ImportResolver | None,
) -> ImpactResult:
    rel_path = corpus.relativize(target)
    if rel_path not in corpus:
        raise TargetFileNotIndexedError(rel_path)

    impact_target = ImpactTarget(
        name=PurePosixPath(rel_path).name,
        file=rel_path,
        kind="file",
    )
    if max_depth < 1:
        return ImpactResult(target=impact_target)

    resolver = import_resolver
    if resolver is None:
        resolver = ImportGraph.build(corpus)

    visited = {rel_path}
    total = 0
    layers: list[ImpactLayer] = []
    frontier = [rel_path]

    for depth in range(1, max_depth + 1):
        if total >= max_results:
            break

        layer_refs: list[ImpactRef] = []
        for path in frontier:
            for importer in resolver.importers_of(path):
                if total >= max_results:
                    break
                if importer in visited:
                    continue
                visited.add(importer)
                layer_refs.append(ImpactRef(file=importer))
                total += 1

        if not layer_refs:
            break
        layers.append(
            ImpactLayer(
                depth=depth,
                label=_layer_label(depth, "importers"),
                refs=layer_refs,
            )
        )
        frontier = [ref.file for ref in layer_refs]

    return ImpactResult(
        target=impact_target,
        layers=layers,
        summary=summarize(layers),
    )


def analyze_impact(
    corpus: Corpus,
    target: str,
    max_depth: int,
    max_results: int,
    *,
    definition_hint: DefinitionHint | None = None,
    import_resolver: ImportResolver | None = None,
) -> ImpactResult:
    """Compute the layered blast radius of ``target``.

    Args:
        corpus: Indexed file set to search
        target: A bare symbol name, or a file path (symbol vs file mode)
        max_depth: Deepest layer to emit
        max_results: Budget on reference sites across all layers
        definition_hint: Authoritative definition lookup, used by every
            reference query of the walk
        import_resolver: Importer lookup for file mode; defaults to an
            ``ImportGraph`` built from ``corpus``

    Returns:
        The layered result. An unknown symbol yields zero layers.

    Raises:
        TargetFileNotIndexedError: A file target is not part of ``corpus``.
    """
    if is_file_target(target):
        return _impact_file(corpus, target, max_depth, max_results, import_resolver)
    return _impact_symbol(corpus, target, max_depth, max_results, definition_hint)


def format_impact(result: ImpactResult) -> str:
    """Human-readable rendering of an impact result."""
    target = result.target
    if target.kind == "file":
        out = [f'Impact analysis for file "{target.file}"']
    elif target.file:
        out = [
            f'Impact analysis for symbol "{target.name}" '
            f"({target.file}:{target.line})"
        ]
    else:
        out = [f'Impact analysis for "{target.name}"']

    layers = [layer for layer in result.layers if layer.refs]
    if not layers:
        out.extend(["", "  No dependents found"])
        return "\n".join(out) + "\n"

    for layer in layers:
        out.append("")
        out.append(f"Depth {layer.depth} - {layer.label} ({len(layer.refs)}):")
        for ref in layer.refs:
            if ref.content:
                out.append(f"  {ref.file}:{ref.line}  {ref.content}")
            else:
                out.append(f"  {ref.file}")

    out.append("")
    out.append(
        f"Total blast radius: {result.summary.total_files} files, "
        f"{result.summary.total_ref_sites} reference sites"
    )
    return "\n".join(out) + "\n"


__all__ = [
    "ImportResolver",
    "analyze_impact",
    "enclosing_symbol",
    "format_impact",
    "is_file_target",
    "summarize",
]
