"""Event processor for deduplicating parsed events and assigning ids."""
import hashlib
import logging
import time
from typing import List

from processor.models import EventRecord, ParsedEvent

logger = logging.getLogger(__name__)


class EventProcessor:
    """Turns parsed sheet events into storable records."""

    EVENT_ID_LENGTH = 36

    def __init__(self):
        self.last_duplicate_count = 0

    def process_events(self, parsed_events: List[ParsedEvent]) -> List[EventRecord]:
        """
        Deduplicate parsed events and convert them to records.

        The first occurrence of each (date, name, start time) key wins.

        Args:
            parsed_events: Events in sheet order

        Returns:
            List of EventRecord objects in sheet order
        """
        records = []
        seen = set()
        duplicates = 0
        now = int(time.time())

        for event in parsed_events:
            event_id = self.generate_event_id(
                event_date=event.event_date,
                event_name=event.event_name,
                start_time=event.start_time
            )
            if event_id in seen:
                duplicates += 1
                logger.warning(
                    f"Dropping duplicate event '{event.event_name}' on "
                    f"{event.event_date} at {event.start_time}"
                )
                continue
            seen.add(event_id)
            records.append(self._to_record(event, event_id, now))

        self.last_duplicate_count = duplicates
        logger.info(
            f"Processed {len(records)} unique events out of "
            f"{len(parsed_events)} parsed events"
        )
        return records

    def _to_record(self, event: ParsedEvent, event_id: str, now: int) -> EventRecord:
        return EventRecord(
            event_id=event_id,
            event_date=event.event_date,
            start_time=event.start_time,
            end_time=event.end_time,
            event_name=event.event_name,
            organizer=event.organizer,
            venue=event.venue,
            registration_url=event.registration_url,
            notes=event.notes,
            created_at=now,
            updated_at=now
        )

    def generate_event_id(self, event_date: str, event_name: str, start_time: str) -> str:
        """
        Generate a stable identifier from date + name + start time.

        Args:
            event_date: Event date (YYYY-MM-DD)
            event_name: Event name as it appears in the sheet
            start_time: Start time or date range as it appears in the sheet

        Returns:
            First 36 hex characters of the SHA256 hash
        """
        composite = f"{event_date}|{event_name}|{start_time}"
        hash_obj = hashlib.sha256(composite.encode('utf-8'))
        return hash_obj.hexdigest()[:self.EVENT_ID_LENGTH]
