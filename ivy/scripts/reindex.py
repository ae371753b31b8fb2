"""
Corpus re-index command.

Usage:
    python -m ivy.scripts.reindex
    python -m ivy.scripts.reindex --source local --content-dir ./content

Builds a new chunk index generation from the configured content store and
makes it current. Prints the ReindexReport as JSON.

Dependencies: python-dotenv, ivy.api.deps
System role: Operator entry point for re-indexing outside the API
"""

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

from ivy.api.deps.dependencies import ServiceCache
from ivy.configs import Settings
from ivy.core.exceptions import IvyException
from ivy.observability import configure_logging

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rebuild the Ivy chunk index")
    parser.add_argument("--source", choices=["local", "s3"], help="Override CONTENT_SOURCE_TYPE")
    parser.add_argument("--content-dir", help="Override CONTENT_LOCAL_DIR")
    parser.add_argument("--index-dir", help="Override VECTOR_STORE_INDEX_DIR")
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    settings = Settings()
    if args.source:
        settings.content.source_type = args.source
    if args.content_dir:
        settings.content.local_dir = args.content_dir
    if args.index_dir:
        settings.vector_store.index_dir = args.index_dir
    return settings


async def run(settings: Settings) -> int:
    cache = ServiceCache(settings)
    try:
        report = await cache.indexer.areindex()
    except IvyException as e:
        logger.error(f"{__name__}:run - Re-index failed: {type(e).__name__}: {e.message}")
        return 1
    print(report.model_dump_json(indent=2))
    return 0


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    args = parse_args(argv)
    settings = build_settings(args)
    configure_logging(settings.log_level)
    sys.exit(asyncio.run(run(settings)))


if __name__ == "__main__":
    main()
