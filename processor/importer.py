"""Full-replace import of sheet rows into storage."""
import logging
from typing import List, Optional

from processor.event_processor import EventProcessor
from processor.models import ImportResult
from processor.sheet_parser import parse_sheet_rows
from storage.dynamodb_manager import DynamoDBManager

logger = logging.getLogger(__name__)

NO_EVENTS_MESSAGE = 'No event rows found in sheet.'


class StorageWriteError(Exception):
    """Raised when a replace leaves some records unwritten."""


def import_rows(
    rows: List[List[str]],
    source: str,
    dynamodb_manager: DynamoDBManager,
    processor: Optional[EventProcessor] = None
) -> ImportResult:
    """
    Parse sheet rows and replace the stored events with the result.

    Stored events are left untouched when the sheet yields no events.

    Args:
        rows: Tokenized sheet rows, title and header included
        source: Where the rows came from ("csv", "sheets_api", "upload", "file")
        dynamodb_manager: Storage to replace
        processor: EventProcessor to use (default: a new one)

    Returns:
        ImportResult summary

    Raises:
        StorageWriteError: If any record failed to write
    """
    processor = processor or EventProcessor()
    parsed = parse_sheet_rows(rows)

    if not parsed.events:
        logger.warning(f"No event rows found in {len(rows)} rows from {source}")
        return ImportResult(
            source=source,
            parsed=0,
            imported=0,
            duplicates=0,
            deleted=0,
            errors=[NO_EVENTS_MESSAGE]
        )

    records = processor.process_events(parsed.events)
    deleted, written = dynamodb_manager.replace_events(records)

    if written < len(records):
        raise StorageWriteError(
            f"{len(records) - written} of {len(records)} events failed to write "
            f"after {deleted} stored events were removed"
        )

    logger.info(
        f"Imported {written} events from {source} "
        f"({processor.last_duplicate_count} duplicates dropped, {deleted} replaced)"
    )
    return ImportResult(
        source=source,
        parsed=len(parsed.events),
        imported=written,
        duplicates=processor.last_duplicate_count,
        deleted=deleted,
        errors=[]
    )
