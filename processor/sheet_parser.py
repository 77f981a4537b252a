"""Row classifier and event extractor for the side-events sheet.

The sheet is a human-edited table: a title row, a header row, then blocks of
events grouped under date rows such as "17 February, Tuesday". Event rows
start with a time of day and inherit the date of the most recent date row.
Multi-day events carry their own range ("Feb 12-26") instead of a time.

Columns:
    0  time, date row or date range
    1  end time
    2  event name
    3  organizer
    4  venue
    5  registration link
    6  registration link or notes

Rows that match nothing are dropped and counted, never raised.
"""
import logging
import re
from typing import List, Optional, Sequence, Tuple

from processor.models import ParsedEvent, ParseResult, RowKind

logger = logging.getLogger(__name__)

# Year of the event season; every parsed date uses it.
EVENT_SEASON_YEAR = 2026

# Title row and column header row precede the data.
DATA_START_ROW = 2

MONTH_NAMES = {
    'january': 1,
    'february': 2,
    'march': 3,
    'april': 4,
    'may': 5,
    'june': 6,
    'july': 7,
    'august': 8,
    'september': 9,
    'october': 10,
    'november': 11,
    'december': 12,
}

_MONTH_ALTERNATION = '|'.join(MONTH_NAMES)

DATE_HEADER_PATTERN = re.compile(
    rf'^(\d{{1,2}})\s+({_MONTH_ALTERNATION}),?\s+\w+',
    re.IGNORECASE
)
DATE_RANGE_PATTERN = re.compile(r'^([A-Za-z]+)\s+(\d{1,2})-(\d{1,2})(?:\s+(\d{4}))?\s*$')
TIME_PATTERNS = (
    re.compile(r'^\d{1,2}:\d{2}\s*(am|pm)?$', re.IGNORECASE),
    re.compile(r'^\d{1,2}\s*(am|pm)$', re.IGNORECASE),
)


def _format_date(month: int, day: int) -> Optional[str]:
    if day < 1 or day > 31:
        return None
    return f"{EVENT_SEASON_YEAR}-{month:02d}-{day:02d}"


def parse_date_header(cell: str) -> Optional[str]:
    """
    Parse a date row such as "17 February, Tuesday".

    Args:
        cell: First cell of the row

    Returns:
        YYYY-MM-DD string in the event season year, or None if the cell
        is not a date row or names an impossible day
    """
    match = DATE_HEADER_PATTERN.match((cell or '').strip())
    if not match:
        return None
    return _format_date(MONTH_NAMES[match.group(2).lower()], int(match.group(1)))


def _resolve_month(token: str) -> Optional[int]:
    token = token.lower()
    if token in MONTH_NAMES:
        return MONTH_NAMES[token]
    for name, number in MONTH_NAMES.items():
        if token.startswith(name[:3]):
            return number
    return None


def parse_date_range_start(cell: str) -> Optional[str]:
    """
    Parse the start date of a range such as "Feb 12-26" or "February 13-15 2026".

    Only the month and the first day are used; the closing day and any
    explicit year are matched but ignored.

    Args:
        cell: First cell of the row

    Returns:
        YYYY-MM-DD string for the first day of the range, or None
    """
    match = DATE_RANGE_PATTERN.match((cell or '').strip())
    if not match:
        return None
    month = _resolve_month(match.group(1))
    if not month:
        return None
    return _format_date(month, int(match.group(2)))


def is_date_header(cell: str) -> bool:
    return bool(DATE_HEADER_PATTERN.match((cell or '').strip()))


def is_date_range(cell: str) -> bool:
    return bool(DATE_RANGE_PATTERN.match((cell or '').strip()))


def is_time_like(cell: str) -> bool:
    """Return True for "6:00 pm", "10:30", "9am" and similar."""
    trimmed = (cell or '').strip()
    return any(pattern.match(trimmed) for pattern in TIME_PATTERNS)


def looks_like_url(value: str) -> bool:
    trimmed = (value or '').strip()
    return trimmed.startswith('http://') or trimmed.startswith('https://')


def _cells(row: Sequence[Optional[str]], count: int = 7) -> List[str]:
    """Return the first `count` cells trimmed, padding short rows with ''."""
    cells = [(cell or '').strip() for cell in list(row or [])[:count]]
    return cells + [''] * (count - len(cells))


def _build_event(
    cells: List[str],
    event_date: str,
    start_time: str,
    end_time: Optional[str]
) -> ParsedEvent:
    link, extra = cells[5], cells[6]
    if looks_like_url(link):
        registration_url = link
    elif looks_like_url(extra):
        registration_url = extra
    else:
        registration_url = link or None

    notes = extra if extra and not looks_like_url(extra) else None

    return ParsedEvent(
        event_date=event_date,
        start_time=start_time,
        end_time=end_time,
        event_name=cells[2],
        organizer=cells[3] or None,
        venue=cells[4] or None,
        registration_url=registration_url,
        notes=notes
    )


def _fold_row(
    current_date: Optional[str],
    row: Sequence[Optional[str]]
) -> Tuple[Optional[str], RowKind, Optional[ParsedEvent]]:
    """
    Classify one row against the carried date.

    Args:
        current_date: Date set by the most recent date row, if any
        row: Raw cells of the row

    Returns:
        Tuple of (next current_date, row kind, event or None)
    """
    cells = _cells(row)
    first, name = cells[0], cells[2]

    if not first:
        return current_date, RowKind.BLANK, None

    if is_date_header(first):
        parsed = parse_date_header(first)
        if parsed:
            return parsed, RowKind.DATE_HEADER, None
        return current_date, RowKind.SKIPPED, None

    if is_date_range(first) and name:
        event_date = parse_date_range_start(first)
        if event_date:
            return current_date, RowKind.DATE_RANGE, _build_event(cells, event_date, first, None)
        return current_date, RowKind.SKIPPED, None

    if is_time_like(first) and name and current_date:
        event = _build_event(cells, current_date, first, cells[1] or None)
        return current_date, RowKind.EVENT, event

    return current_date, RowKind.SKIPPED, None


def parse_sheet_rows(rows: Sequence[Sequence[Optional[str]]]) -> ParseResult:
    """
    Extract events from sheet rows.

    Args:
        rows: Rows of cell strings, title and header rows included

    Returns:
        ParseResult with events in sheet order and counts of dropped rows
    """
    result = ParseResult()
    current_date = None

    for index, row in enumerate(rows[DATA_START_ROW:], start=DATA_START_ROW):
        current_date, kind, event = _fold_row(current_date, row)

        if event:
            result.events.append(event)
        elif kind is RowKind.BLANK:
            result.blank_rows += 1
        elif kind is RowKind.SKIPPED:
            result.skipped_rows += 1
            logger.debug(f"Skipping unrecognised row {index + 1}: {list(row)[:3]}")

    logger.info(
        f"Parsed {len(result.events)} events from {max(len(rows) - DATA_START_ROW, 0)} rows "
        f"({result.skipped_rows} skipped, {result.blank_rows} blank)"
    )
    return result
