"""Command-line interface for refmap-core."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import orjson

from graph.imports import ImportGraph
from parse.errors import ParseError
from parse.registry import for_extension, parse_source
from rules.config import ConfigError, RefMapConfig, load_config
from xref.corpus import Corpus
from xref.errors import TargetFileNotIndexedError
from xref.impact import analyze_impact, format_impact
from xref.index import SymbolIndex
from xref.refs import find_refs, format_refs

logger = logging.getLogger(__name__)


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        default=".",
        help="Repository root (default: .)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit JSON instead of text",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log skipped files and traversal progress",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="refmap")
    subparsers = parser.add_subparsers(dest="command", required=True)

    symbols_parser = subparsers.add_parser("symbols", help="List symbols of a file")
    symbols_parser.add_argument("file", help="Source file to parse")
    _add_common_options(symbols_parser)

    refs_parser = subparsers.add_parser(
        "refs", help="Find the definition and references of a symbol"
    )
    refs_parser.add_argument("name", help="Symbol name")
    refs_parser.add_argument(
        "--max",
        type=int,
        default=None,
        help="Maximum references to report (default: config max_results)",
    )
    _add_common_options(refs_parser)

    impact_parser = subparsers.add_parser(
        "impact", help="Blast radius of a symbol or file"
    )
    impact_parser.add_argument("target", help="Symbol name or file path")
    impact_parser.add_argument(
        "--depth",
        type=int,
        default=None,
        help="Maximum traversal depth (default: config max_depth)",
    )
    impact_parser.add_argument(
        "--max",
        type=int,
        default=None,
        help="Maximum reference sites (default: config max_results)",
    )
    _add_common_options(impact_parser)

    importers_parser = subparsers.add_parser(
        "importers", help="Imports and importers of a file"
    )
    importers_parser.add_argument("file", help="Indexed file path")
    _add_common_options(importers_parser)

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _emit_json(payload: Any) -> None:
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    sys.stdout.write(orjson.dumps(payload, option=opts).decode("utf-8") + "\n")


def _handle_symbols(file: str, as_json: bool) -> int:
    path = Path(file).expanduser()
    if for_extension(path.suffix) is None:
        sys.stderr.write(f"error: no parser available for {path.suffix} files\n")
        return 2
    try:
        symbols = parse_source(path.as_posix(), path.read_bytes())
    except (OSError, ParseError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    if as_json:
        _emit_json([symbol.model_dump() for symbol in symbols])
        return 0

    sys.stdout.write(f"{file}:\n")
    for symbol in symbols:
        signature = symbol.signature.replace("\n", " ")
        sys.stdout.write(f"  {signature:<60} :{symbol.line}\n")
    return 0


def _handle_refs(
    corpus: Corpus,
    config: RefMapConfig,
    name: str,
    max_results: int | None,
    as_json: bool,
) -> int:
    index = SymbolIndex.build(corpus)
    result = find_refs(
        corpus,
        name,
        max_results if max_results is not None else config.max_results,
        definition_hint=index.definition_hint,
    )
    if as_json:
        _emit_json(result.model_dump())
    else:
        sys.stdout.write(format_refs(result))
    return 0


def _handle_impact(
    corpus: Corpus,
    config: RefMapConfig,
    target: str,
    max_depth: int | None,
    max_results: int | None,
    as_json: bool,
) -> int:
    index = SymbolIndex.build(corpus)
    result = analyze_impact(
        corpus,
        target,
        max_depth if max_depth is not None else config.max_depth,
        max_results if max_results is not None else config.max_results,
        definition_hint=index.definition_hint,
    )
    if as_json:
        _emit_json(result.model_dump())
    else:
        sys.stdout.write(format_impact(result))
    return 0


def _handle_importers(corpus: Corpus, file: str, as_json: bool) -> int:
    rel_path = corpus.relativize(file)
    if rel_path not in corpus:
        raise TargetFileNotIndexedError(rel_path)

    graph = ImportGraph.build(corpus)
    imports = graph.imports_of(rel_path)
    importers = graph.importers_of(rel_path)

    if as_json:
        _emit_json({"file": rel_path, "imports": imports, "importers": importers})
        return 0

    sys.stdout.write(f"{rel_path}\n")
    for label, paths in (("imports", imports), ("importers", importers)):
        sys.stdout.write(f"\n{label} ({len(paths)}):\n")
        for path in paths:
            sys.stdout.write(f"  {path}\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "symbols":
        return _handle_symbols(args.file, args.json)

    root = Path(args.root).expanduser().resolve()
    try:
        config = load_config(root)
        corpus = Corpus.scan(root, config)
        logger.debug("Indexed %d files under %s", len(corpus), root)

        if args.command == "refs":
            return _handle_refs(corpus, config, args.name, args.max, args.json)

        if args.command == "impact":
            return _handle_impact(
                corpus, config, args.target, args.depth, args.max, args.json
            )

        if args.command == "importers":
            return _handle_importers(corpus, args.file, args.json)
    except (ConfigError, TargetFileNotIndexedError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
