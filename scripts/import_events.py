"""One-off import of the side-events sheet from an exported file.

Usage:
    python -m scripts.import_events [--file scripts/events-data.tsv] [--table side-events]
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from config import get_settings
from processor.importer import import_rows
from scraper.sheet_fetcher import parse_csv_to_rows
from storage.dynamodb_manager import DynamoDBManager

ROOT = Path(__file__).resolve().parent.parent
DEFAULT_DATA_FILE = ROOT / "scripts" / "events-data.tsv"

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import side events from a CSV/TSV export")
    parser.add_argument("--file", default=str(DEFAULT_DATA_FILE), help="Path to the sheet export")
    parser.add_argument("--table", default=None, help="DynamoDB table (default: TABLE_NAME)")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    load_dotenv(ROOT / ".env.local")
    load_dotenv(ROOT / ".env")
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    args = parse_args(argv)
    settings = get_settings()

    text = Path(args.file).read_text(encoding="utf-8-sig")
    rows = parse_csv_to_rows(text)
    logger.info("Read %d rows from %s", len(rows), args.file)

    manager = DynamoDBManager(table_name=args.table or settings.table_name)
    result = import_rows(rows, "file", manager)
    if result.errors:
        for error in result.errors:
            logger.warning(error)
    logger.info("Imported %d events to %s", result.imported, manager.table_name)
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except Exception:
        logger.exception("Import failed")
        sys.exit(1)
