"""
kd_search CLI Entrypoint

Commands:
    kdsearch query    Load records, build the index, print the k nearest
    kdsearch version  Show version info
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from typing import Optional, Sequence, TextIO

from kd_search.core.config import PipelineConfig
from kd_search.core.errors import ConfigError, Err, Ok, Result
from kd_search.core.types import QueryResult
from kd_search.observability.logging import LogLevel, get_logger, setup_logging

logger = get_logger("kd_search.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kdsearch",
        description="Semantic nearest-neighbor search over a k-d tree",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument(
        "--log-level",
        choices=[level.name.lower() for level in LogLevel],
        default="warning",
        help="Minimum log level (default: warning)",
    )
    parser.add_argument(
        "--plain-logs",
        action="store_true",
        help="Plain-text logs instead of JSON lines",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    query_parser = subparsers.add_parser("query", help="Query a record library")
    query_parser.add_argument(
        "--records", "-r",
        default="data/books.json",
        help="JSON record library (default: data/books.json)",
    )
    query_parser.add_argument(
        "--collection",
        default="books",
        help="Key holding the record list (default: books)",
    )
    query_parser.add_argument(
        "--text", "-t",
        required=True,
        help="Query text",
    )
    query_parser.add_argument(
        "-k",
        type=int,
        default=None,
        help="Number of neighbors (default: KDSEARCH_TOP_K or 10)",
    )
    query_parser.add_argument(
        "--text-field",
        default=None,
        help="Record field to embed (default: summary)",
    )
    query_parser.add_argument(
        "--label-field",
        default="title",
        help="Record field printed for each hit (default: title)",
    )
    query_parser.add_argument(
        "--model", "-m",
        default=None,
        help="sentence-transformers model name",
    )
    query_parser.add_argument(
        "--mock",
        action="store_true",
        help="Use the deterministic mock embedder (no model download)",
    )
    query_parser.add_argument(
        "--mock-dimension",
        type=int,
        default=384,
        help="Mock embedding dimension (default: 384)",
    )
    query_parser.add_argument(
        "--dimensions",
        type=int,
        default=None,
        help="Index only the leading N embedding coordinates",
    )
    query_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Threads used to embed records",
    )
    query_parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON",
    )

    subparsers.add_parser("version", help="Show version")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entrypoint. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(
        level=LogLevel.parse(args.log_level),
        json_output=not args.plain_logs,
    )

    if args.command == "query":
        return _run_query(args)
    if args.command == "version":
        print(f"kdsearch {_get_version()}")
        return 0

    parser.print_help()
    return 0


def _get_version() -> str:
    from kd_search import __version__
    return __version__


def _resolve_config(args: argparse.Namespace) -> Result[PipelineConfig, ConfigError]:
    """Environment defaults overridden by explicit flags."""
    env = PipelineConfig.from_env()
    if env.is_err():
        return env
    base = env.unwrap()
    overrides = {
        "text_field": args.text_field,
        "top_k": args.k,
        "dimensions": args.dimensions,
        "embed_workers": args.workers,
        "model_name": args.model,
    }
    config = replace(base, **{k: v for k, v in overrides.items() if v is not None})

    if error_msg := config.validate():
        return Err(ConfigError.invalid("arguments", None, error_msg))
    return Ok(config)


def _run_query(args: argparse.Namespace, out: Optional[TextIO] = None) -> int:
    from kd_search.pipeline import QueryPipeline, load_records

    out = out or sys.stdout

    configured = _resolve_config(args)
    if configured.is_err():
        print(f"error: {configured.error}", file=sys.stderr)
        return 1
    config = configured.unwrap()

    records = load_records(args.records, args.collection, config.text_field)
    if records.is_err():
        print(f"error: {records.error}", file=sys.stderr)
        return 1
    logger.info("Loaded records", path=args.records, count=len(records.unwrap()))

    if args.mock:
        from kd_search.embeddings import MockEmbedder
        embedder = MockEmbedder(dimension=args.mock_dimension)
    else:
        from kd_search.embeddings import HuggingFaceEmbedder
        embedder = HuggingFaceEmbedder(model=config.model_name)

    try:
        pipeline = QueryPipeline(embedder, config)
    except ValueError as e:
        error = ConfigError.invalid("dimensions", config.dimensions, str(e))
        print(f"error: {error}", file=sys.stderr)
        return 1

    built = pipeline.build_index(records.unwrap())
    if built.is_err():
        print(f"error: {built.error}", file=sys.stderr)
        return 1

    if not args.json:
        print(f"Querying: {args.text}", file=out)

    result = pipeline.search(built.unwrap(), args.text, config.top_k)
    if result.is_err():
        print(f"error: {result.error}", file=sys.stderr)
        return 1

    _print_result(result.unwrap(), args, out)
    return 0


def _print_result(result: QueryResult, args: argparse.Namespace, out: TextIO) -> None:
    if args.json:
        json.dump(result.to_dict(), out, indent=2, default=str)
        out.write("\n")
        return

    for neighbor in result:
        label = neighbor.payload.label((args.label_field,))
        print(f"nearest: {label}", file=out)
        print(f"distance: {neighbor.squared_distance}", file=out)


if __name__ == "__main__":
    sys.exit(main())
