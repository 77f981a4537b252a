"""Data models for side-event parsing and storage."""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class RowKind(Enum):
    """Classification of a single sheet row."""
    BLANK = 'blank'
    DATE_HEADER = 'date_header'
    DATE_RANGE = 'date_range'
    EVENT = 'event'
    SKIPPED = 'skipped'


@dataclass
class ParsedEvent:
    """Event recovered from one sheet row."""
    event_date: str
    start_time: str
    end_time: Optional[str]
    event_name: str
    organizer: Optional[str]
    venue: Optional[str]
    registration_url: Optional[str]
    notes: Optional[str]


@dataclass
class ParseResult:
    """Events extracted from a sheet plus counts of rows that were dropped."""
    events: List[ParsedEvent] = field(default_factory=list)
    skipped_rows: int = 0
    blank_rows: int = 0


@dataclass
class EventRecord:
    """Stored event, keyed by a hash of date, name and start time."""
    event_id: str
    event_date: str
    start_time: str
    end_time: Optional[str]
    event_name: str
    organizer: Optional[str]
    venue: Optional[str]
    registration_url: Optional[str]
    notes: Optional[str]
    created_at: int
    updated_at: int
    image_url: Optional[str] = None


@dataclass
class ImportResult:
    """Result of an import run."""
    source: str
    parsed: int
    imported: int
    duplicates: int
    deleted: int
    errors: list[str]
