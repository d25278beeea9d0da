#!/usr/bin/env python
import argparse
import json
import logging
import os

from dotenv import load_dotenv

load_dotenv()

from uslex.core.exceptions import UslexParsingError
from uslex.core.http import HttpClient
from uslex.core.utils import set_logging_level
from uslex.legislation.loader import build_store
from uslex.legislation.parser import PARSERS, ExtractionChain
from uslex.legislation.pipeline import pipe_states, write_seed
from uslex.settings import DB_PATH, MANIFEST_PATH, SEED_DIR

# Environment settings
ENVIRONMENT = os.getenv("ENVIRONMENT", "localhost")

logger = logging.getLogger(__name__)


def run_fetch(args) -> None:
    http_client = HttpClient(enable_cache=not args.no_cache)
    written = 0
    for seed in pipe_states(
        states=args.states,
        limit=args.limit,
        manifest_path=args.manifest,
        http_client=http_client,
    ):
        write_seed(seed, args.seed_dir)
        written += 1
    logger.info(f"Wrote {written} seed files to {args.seed_dir}")


def run_build(args) -> None:
    metadata = build_store(args.db, args.seed_dir)
    logger.info(
        f"Database ready: {metadata['legal_documents']} documents, "
        f"{metadata['legal_provisions']} provisions, "
        f"{metadata['state_requirements']} requirements"
    )


def run_parse(args) -> None:
    with open(args.file, "r", encoding="utf-8") as f:
        html = f.read()
    chain = ExtractionChain.for_parser(args.parser, args.url)
    provisions = chain.extract(html, args.url or "")
    if not provisions:
        raise UslexParsingError(f"No provisions extracted from {args.file}")
    print(json.dumps([p.model_dump() for p in provisions], indent=2, ensure_ascii=False))


def main():
    """
    Run the statute ingest pipeline locally
    """
    parser = argparse.ArgumentParser(description="Fetch, parse and load US statute text")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch = subparsers.add_parser("fetch", help="Fetch manifest statutes and write seed files")
    fetch.add_argument(
        "-s",
        "--states",
        type=str,
        nargs="+",
        default=None,
        help="Jurisdiction codes or abbreviations to fetch (default: all in the manifest)",
    )
    fetch.add_argument(
        "-l",
        "--limit",
        type=int,
        default=None,
        help="Limit number of jurisdictions to fetch (default: no limit)",
    )
    fetch.add_argument(
        "--no-cache", action="store_true", help="Ignore and do not write the page cache"
    )
    fetch.add_argument("--manifest", type=str, default=MANIFEST_PATH, help="Manifest JSON file")
    fetch.add_argument("--seed-dir", type=str, default=SEED_DIR, help="Seed output directory")
    fetch.set_defaults(func=run_fetch)

    build = subparsers.add_parser("build", help="Build the SQLite database from seed files")
    build.add_argument("--db", type=str, default=DB_PATH, help="Database file to create or update")
    build.add_argument("--seed-dir", type=str, default=SEED_DIR, help="Seed input directory")
    build.set_defaults(func=run_build)

    parse = subparsers.add_parser("parse", help="Run the extraction chain on a local HTML file")
    parse.add_argument("file", type=str, help="HTML file to parse")
    parse.add_argument(
        "-p",
        "--parser",
        type=str,
        choices=list(PARSERS),
        default=None,
        help="Strategy to try first (default: chosen from the URL host)",
    )
    parse.add_argument("-u", "--url", type=str, default=None, help="Source URL of the page")
    parse.set_defaults(func=run_parse)

    args = parser.parse_args()

    set_logging_level(
        logging.DEBUG if args.verbose else logging.INFO,
        service_name="pipeline",
        environment=ENVIRONMENT,
    )

    try:
        logger.info(f"Starting {args.command}")
        args.func(args)
        logger.info(f"{args.command} completed successfully")
    except Exception as e:
        logger.error(f"{args.command} failed: {str(e)}", exc_info=True)
        raise


if __name__ == "__main__":
    main()
