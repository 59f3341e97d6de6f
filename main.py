#!/usr/bin/env python3
"""
ONIX Books Sync - Main Entry Point
Import ONIX 3.0 publisher feeds into the books table.

Usage:
    python main.py                      # Import all *.xml files from INPUT_DIR
    python main.py --input /vlb         # Import from another folder
    python main.py --log-level DEBUG    # Show every applied record
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from config.settings import settings
from onix_sync.database import open_database
from onix_sync.exceptions import ConfigurationError, OnixSyncError, StoreConnectionError
from onix_sync.importer import OnixImporter
from onix_sync.logging_config import setup_logging
from onix_sync.models import ImportSummary, SyncOutcome
from onix_sync.parser import OnixParser
from onix_sync.sync import BookSynchronizer

EXIT_OK = 0
EXIT_ERRORS = 1
EXIT_FATAL = 2


def run_import(input_dir: Path) -> ImportSummary:
    """
    Import every ONIX file in input_dir into the configured store.

    Args:
        input_dir: Folder containing ONIX 3.0 XML files

    Returns:
        ImportSummary with per-file results
    """
    logger = logging.getLogger(__name__)
    logger.info(f"{'='*60}")
    logger.info("Starting ONIX Books Sync")
    logger.info(f"Input: {input_dir}")
    logger.info(f"Database: {settings.db_backend}")
    logger.info(f"{'='*60}")

    if settings.db_backend == "postgresql" and not settings.postgres_configured:
        raise ConfigurationError("PostgreSQL host, database and user are required", setting="db_host")

    parser = OnixParser(fix_text=settings.fix_text_encoding)

    with open_database(settings) as db:
        logger.info(f"💾 Books in database: {db.count()}")
        importer = OnixImporter(parser, BookSynchronizer(db), fail_fast=settings.fail_fast)
        summary = importer.import_folder(input_dir)
        logger.info(f"💾 Books in database: {db.count()}")

    return summary


def print_report(summary: ImportSummary):
    """Print final import report to console."""
    print("\n" + "="*60)
    print("📊 IMPORT REPORT")
    print("="*60)

    status = "✅ SUCCESS" if summary.success else "❌ ERRORS FOUND"
    print(f"Status: {status}")
    print(f"Started: {summary.started_at.strftime('%Y-%m-%d %H:%M:%S')}")
    print()

    print(f"📄 Files: {len(summary.files)} ({summary.files_failed} failed)")
    print(f"📚 Records applied: {summary.total_records}")
    print()

    print(f"✨ Inserted: {summary.total(SyncOutcome.INSERTED)}")
    print(f"⏭️  Already present: {summary.total(SyncOutcome.SKIPPED)}")
    print(f"🔄 Updated: {summary.total(SyncOutcome.UPSERTED)}")
    print(f"🗑️  Deleted: {summary.total(SyncOutcome.DELETED)}")
    print(f"👻 Delete without row: {summary.total(SyncOutcome.NOT_FOUND)}")
    print(f"➖ Unknown notification type: {summary.total(SyncOutcome.IGNORED)}")
    print()

    if summary.errors:
        print(f"❌ Errors: {len(summary.errors)}")
        for e in summary.errors[:5]:
            print(f"   • {e}")
        print()

    print("="*60)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="ONIX Books Sync - Import ONIX 3.0 feeds into the books table"
    )
    parser.add_argument(
        "--input", "-i",
        type=Path,
        default=None,
        help="Folder with ONIX XML files (default: INPUT_DIR setting)",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: LOG_LEVEL setting)",
    )

    args = parser.parse_args()

    setup_logging(
        args.log_level,
        json_format=settings.log_json_format,
        log_file=str(settings.log_file) if settings.log_file else None,
    )
    logger = logging.getLogger(__name__)

    try:
        summary = run_import(args.input or settings.input_dir)
    except StoreConnectionError as e:
        logger.critical(f"❌ Database connection failed, aborting: {e}")
        sys.exit(EXIT_FATAL)
    except OnixSyncError as e:
        logger.critical(f"❌ Import aborted: {e}")
        sys.exit(EXIT_FATAL)

    print_report(summary)
    sys.exit(EXIT_OK if summary.success else EXIT_ERRORS)


if __name__ == "__main__":
    main()
