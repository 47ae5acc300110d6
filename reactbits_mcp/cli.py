"""Command-line entry point for the ReactBits scraper, loader and tool server."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path
from typing import Sequence

from .client import explore
from .config import DEFAULT_DB_PATH, DEFAULT_OUTPUT_DIR, FirecrawlConfig, ScrapeConfig
from .crawler import run_scraper
from .firecrawl import FirecrawlClient
from .loader import load_artifacts
from .markdown import write_readme
from .mcp_server import run_server
from .sitemap import CuratedSiteMapper, FirecrawlSiteMapper
from .store import ComponentStore

logger = logging.getLogger("reactbits_mcp.cli")


def _configure_logging(verbose: bool = False, stream=None) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=stream or sys.stderr,
        force=True,
    )


def _add_scrape_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output",
        default=DEFAULT_OUTPUT_DIR,
        type=Path,
        help="Directory where component artifacts should be written",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of items to process per category",
    )
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Re-scrape items whose JSON artifact already exists",
    )
    parser.add_argument(
        "--mapper",
        choices=("curated", "firecrawl"),
        default="curated",
        help="How to discover component URLs",
    )
    parser.add_argument(
        "--no-structured",
        action="store_true",
        help="Skip the structured-extraction service and use the browser only",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Navigation timeout in seconds",
    )
    parser.add_argument(
        "--no-readme",
        action="store_true",
        help="Do not regenerate README.md in the output directory",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Scrape ReactBits components, load them into SQLite and serve them over MCP.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scrape_parser = subparsers.add_parser(
        "scrape", help="Discover and scrape component pages into JSON and code files"
    )
    _add_scrape_arguments(scrape_parser)

    load_parser = subparsers.add_parser(
        "load", help="Replace the database contents with the scraped artifacts"
    )
    load_parser.add_argument("--input", default=DEFAULT_OUTPUT_DIR, type=Path)
    load_parser.add_argument("--db", default=DEFAULT_DB_PATH, type=Path)
    load_parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    readme_parser = subparsers.add_parser(
        "readme", help="Regenerate README.md for the scraped artifacts"
    )
    readme_parser.add_argument("--input", default=DEFAULT_OUTPUT_DIR, type=Path)

    serve_parser = subparsers.add_parser(
        "serve", help="Answer tool requests over stdin/stdout"
    )
    serve_parser.add_argument("--db", default=DEFAULT_DB_PATH, type=Path)
    serve_parser.add_argument(
        "--base-dir",
        default=Path("."),
        type=Path,
        help="Directory that stored code file paths are relative to",
    )
    serve_parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    explore_parser = subparsers.add_parser(
        "explore", help="Browse the catalog interactively through the tool server"
    )
    explore_parser.add_argument("--db", default=DEFAULT_DB_PATH, type=Path)
    explore_parser.add_argument("--base-dir", default=Path("."), type=Path)

    return parser.parse_args(list(sys.argv[1:] if argv is None else argv))


def _run_scrape(args: argparse.Namespace) -> int:
    _configure_logging(args.verbose)
    config = ScrapeConfig(
        output_root=Path(args.output).resolve(),
        limit=args.limit,
        force=args.force,
        navigation_timeout=args.timeout,
        use_structured=not args.no_structured,
        write_readme=not args.no_readme,
    )
    firecrawl = FirecrawlClient(FirecrawlConfig())
    if config.use_structured and not firecrawl.enabled:
        logger.info("FIRECRAWL_API_KEY not set; using the browser for every page")

    if args.mapper == "firecrawl":
        mapper = FirecrawlSiteMapper(firecrawl)
    else:
        mapper = CuratedSiteMapper()

    overall_start = time.perf_counter()
    try:
        stats = asyncio.run(run_scraper(config, mapper, firecrawl))
    except Exception:  # pylint: disable=broad-except
        logger.exception("Fatal error during scraping")
        return 1
    logger.info(
        "Finished in %.2fs (%d succeeded, %d failed, %d skipped)",
        time.perf_counter() - overall_start,
        stats.successful,
        stats.failed,
        stats.skipped,
    )
    return 0


def _run_load(args: argparse.Namespace) -> int:
    _configure_logging(args.verbose)
    root = Path(args.input).resolve()
    with ComponentStore.open(args.db) as store:
        count = load_artifacts(store, root, base_dir=Path.cwd())
    logger.info("Database created at %s with %d components", args.db, count)
    return 0


def _run_readme(args: argparse.Namespace) -> int:
    _configure_logging()
    write_readme(Path(args.input))
    return 0


def _run_serve(args: argparse.Namespace) -> int:
    _configure_logging(args.verbose, stream=sys.stderr)
    try:
        run_server(args.db, args.base_dir)
    except FileNotFoundError as exc:
        logger.error("%s", exc)
        return 1
    return 0


def _run_explore(args: argparse.Namespace) -> int:
    _configure_logging()
    logging.getLogger().setLevel(logging.WARNING)
    try:
        asyncio.run(explore(args.db, args.base_dir))
    except KeyboardInterrupt:
        print("\nExiting...")
    return 0


COMMANDS = {
    "scrape": _run_scrape,
    "load": _run_load,
    "readme": _run_readme,
    "serve": _run_serve,
    "explore": _run_explore,
}


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    sys.exit(COMMANDS[args.command](args))


if __name__ == "__main__":
    main()
