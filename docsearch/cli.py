"""
Command line interface.

Subcommands: ingest, search, serve.

Dependencies: argparse, uvicorn, docsearch.core, docsearch.api
System role: Operator entry point for ingestion runs and ad-hoc queries
"""

import argparse
import asyncio
import json
import logging
import sys

from dotenv import load_dotenv

from docsearch.configs import Settings, get_settings
from docsearch.core.exceptions import DocSearchException
from docsearch.models.document import FRAMEWORKS
from docsearch.observability import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docsearch",
        description="Ingest markdown documentation and search it",
    )
    parser.add_argument("--log-level", default=None, help="Log level (default from settings)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest = subparsers.add_parser("ingest", help="Chunk, embed and index a documentation tree")
    ingest.add_argument("--docs-dir", help="Markdown root directory")
    ingest.add_argument(
        "--strategy",
        choices=["smart", "rebuild", "upsert"],
        help="Index update strategy",
    )
    mode = ingest.add_mutually_exclusive_group()
    mode.add_argument(
        "--hierarchical",
        dest="hierarchical",
        action="store_true",
        default=None,
        help="Link chunks into a parent/child tree",
    )
    mode.add_argument(
        "--flat",
        dest="hierarchical",
        action="store_false",
        help="Do not build parent/child links",
    )
    ingest.add_argument(
        "--random-ids",
        action="store_true",
        help="Use random chunk IDs (every smart update becomes a full replacement)",
    )

    search = subparsers.add_parser("search", help="Run a hybrid search query")
    search.add_argument("query", help="Query text")
    search.add_argument("--framework", choices=FRAMEWORKS, help="Restrict to one framework")
    search.add_argument("--max-results", type=int, default=None, help="1..20")
    search.add_argument("--max-tokens", type=int, default=None, help="100..5000")

    serve = subparsers.add_parser("serve", help="Start the HTTP API")
    serve.add_argument("--host", default="0.0.0.0", help="Bind address")
    serve.add_argument("--port", type=int, default=8000, help="Bind port")

    return parser


async def run_ingest(args: argparse.Namespace, settings: Settings) -> int:
    from docsearch.core.ingestion import IngestionPipeline

    if args.random_ids:
        ingestion = settings.ingestion.model_copy(update={"deterministic_ids": False})
        settings = settings.model_copy(update={"ingestion": ingestion})

    pipeline = IngestionPipeline(settings=settings)
    report = await pipeline.run(
        docs_dir=args.docs_dir,
        strategy=args.strategy,
        hierarchical=args.hierarchical,
    )

    print(report.model_dump_json(indent=2))
    if not report.update.orphan_detection:
        print(
            "warning: the vector store could not list existing IDs; orphaned chunks "
            "were not deleted. Use --strategy rebuild for a clean index.",
            file=sys.stderr,
        )
    return 0


async def run_search(args: argparse.Namespace, settings: Settings) -> int:
    from docsearch.api.deps.dependencies import ServiceCache

    service = ServiceCache(settings).search_service
    results = await service.search(
        args.query,
        max_results=args.max_results,
        max_tokens=args.max_tokens,
        framework=args.framework,
    )
    print(json.dumps([r.model_dump() for r in results], indent=2))
    return 0


def run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run(
        "docsearch.api.main:create_app",
        factory=True,
        host=args.host,
        port=args.port,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """
    Parse arguments and run a subcommand.

    Args:
        argv: Argument list (sys.argv[1:] if None)

    Returns:
        int: Process exit code
    """
    args = build_parser().parse_args(argv)
    load_dotenv()
    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)

    try:
        if args.command == "ingest":
            return asyncio.run(run_ingest(args, settings))
        if args.command == "search":
            return asyncio.run(run_search(args, settings))
        return run_serve(args)
    except DocSearchException as e:
        logger.error(f"{__name__}:main - {type(e).__name__}: {e}")
        print(f"error: {e.message}", file=sys.stderr)
        return 1
