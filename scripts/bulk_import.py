#!/usr/bin/env python3
"""
Bulk import recommendation URLs from a text file.

The file holds one URL per line; blank lines and lines starting with ``#``
are ignored. Every URL goes through the same extract, classify and publish
pipeline as a chat message, keyed by a synthetic identity derived from the
normalized URL, so re-running the same file never creates duplicates.

Usage:
    python scripts/bulk_import.py urls.txt
    python scripts/bulk_import.py urls.txt --dry-run
    python scripts/bulk_import.py urls.txt --failed-output failed.txt
"""

import argparse
import os
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from curator.core.db import init_db
from curator.core.logging import get_logger, setup_logging
from curator.pipeline.bulk_import import read_url_file, write_failed_urls
from curator.pipeline.factory import build_pipeline

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Bulk import recommendation URLs")
    parser.add_argument("file", type=Path, help="Text file with one URL per line")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report which URLs would be imported without processing them",
    )
    parser.add_argument(
        "--failed-output",
        type=Path,
        default=None,
        help="Where to write URLs that failed (default: <file>.failed.txt)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging()

    if not args.file.exists():
        print(f"File not found: {args.file}")
        return 1

    urls = read_url_file(args.file)
    print(f"Found {len(urls)} URLs in {args.file}")
    if not urls:
        return 0

    init_db()
    pipeline = build_pipeline()
    try:
        result = pipeline.bulk_importer().run(urls, dry_run=args.dry_run)
    finally:
        pipeline.close()

    print("\nBulk import summary")
    print("=" * 30)
    print(f"Total URLs:          {result.total}")
    print(f"Processed:           {result.processed}")
    print(f"Skipped (duplicate): {result.skipped_duplicates}")
    print(f"Failed:              {result.failed}")

    if result.failed_urls:
        failed_path = args.failed_output or args.file.with_suffix(".failed.txt")
        write_failed_urls(failed_path, result.failed_urls)
        print(f"\nFailed URLs written to {failed_path}")
        logger.warning(f"{result.failed} URLs failed during bulk import")

    return 1 if result.failed else 0


if __name__ == "__main__":
    sys.exit(main())
