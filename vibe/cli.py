#!/usr/bin/env python3
"""Vibe Insights command line interface.

Usage:
    vibe search "parse config file" -d ./src
    vibe search "retry http request" --type function --format html -o results.html
    vibe search "database connection" --no-embeddings --ext js,py

Semantic search needs an OpenAI API key, taken from --api-key or the
OPENAI_API_KEY environment variable (a .env file in the working directory
is loaded first). Without a key the search falls back to keyword matching.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from . import __version__
from .code_search import CodeSearcher
from .config import get_config, load_env_file, resolve_api_key
from .formatting import FORMATS, format_results
from .models import ConstructKind, SearchOptions

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _split_extensions(values: Optional[Sequence[str]]) -> List[str]:
    extensions: List[str] = []
    for value in values or []:
        extensions.extend(part for part in value.split(",") if part.strip())
    return extensions


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive number, got {value}")
    return number


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative number, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    search_defaults = get_config().search

    parser = argparse.ArgumentParser(
        prog="vibe",
        description="Vibe Insights - AI-powered repository analysis",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    search_parser = subparsers.add_parser("search", help="Search code using natural language")
    search_parser.add_argument("query", help="Natural language query or keywords")
    search_parser.add_argument("-d", "--directory", default=".", help="Repository directory")
    search_parser.add_argument("-l", "--limit", type=_positive_int, default=search_defaults.limit,
                               help="Maximum number of results")
    search_parser.add_argument("-c", "--context", type=_non_negative_int,
                               default=search_defaults.context_lines,
                               help="Lines of context to show")
    search_parser.add_argument("-k", "--api-key", help="OpenAI API key")
    search_parser.add_argument("--no-embeddings", dest="embeddings", action="store_false",
                               help="Use simple keyword search instead of semantic search")
    search_parser.add_argument("-t", "--type", dest="construct_type",
                               choices=[k.value for k in ConstructKind],
                               help="Only search functions, classes or variables")
    search_parser.add_argument("-e", "--ext", action="append", dest="extensions",
                               help="File extensions to include (repeatable or comma separated)")
    search_parser.add_argument("-f", "--format", choices=FORMATS, default="text",
                               help="Output format")
    search_parser.add_argument("-o", "--output", help="Write output to a file instead of stdout")
    search_parser.add_argument("--no-color", dest="color", action="store_false",
                               help="Disable ANSI colors in text output")
    search_parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return parser


def run_search(args: argparse.Namespace) -> int:
    config = get_config()
    api_key = None
    if args.embeddings:
        api_key = resolve_api_key(args.api_key)
        if not api_key:
            print("No API key provided. Falling back to keyword search.", file=sys.stderr)

    options = SearchOptions(
        directory=args.directory,
        limit=args.limit,
        context_lines=args.context,
        use_embeddings=args.embeddings and bool(api_key),
        api_key=api_key,
        construct_filter=args.construct_type,
        file_extensions=tuple(_split_extensions(args.extensions)),
    )
    searcher = CodeSearcher(
        embedding_config=config.embedding,
        batch_size=config.search.batch_size,
        max_file_chars=config.search.max_file_chars,
        min_chunk_chars=config.search.min_chunk_chars,
        chunk_window=config.search.chunk_lines,
    )
    result = asyncio.run(searcher.search(args.query, options))

    color = args.color and args.output is None and sys.stdout.isatty()
    rendered = format_results(result, args.format, color=color)

    if args.output:
        Path(args.output).write_text(rendered, encoding="utf-8")
        print(f"Wrote {result.count} results to {args.output}")
    else:
        print(rendered)

    if args.format == "text" and result.elapsed_ms is not None:
        print(f"Search completed in {result.elapsed_ms:.0f}ms", file=sys.stderr)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    # .env must be loaded before the config singleton reads the environment
    load_env_file()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING,
        format=LOG_FORMAT,
    )

    try:
        if args.command == "search":
            return run_search(args)
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return 130
    except Exception as e:
        logger.debug("Search failed", exc_info=True)
        print(f"Error searching codebase: {e}", file=sys.stderr)
        return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
