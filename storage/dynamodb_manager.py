"""DynamoDB manager for side-event storage operations."""
import logging
import time
from typing import Dict, List, Optional, Tuple

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from processor.models import EventRecord

logger = logging.getLogger(__name__)


class DynamoDBManager:
    """Manager for DynamoDB operations."""

    BATCH_SIZE = 25  # DynamoDB batch operation limit
    DATE_INDEX = 'date-index'
    MAX_PAGE_SIZE = 500

    OPTIONAL_FIELDS = (
        'end_time',
        'organizer',
        'venue',
        'registration_url',
        'notes',
        'image_url',
    )

    def __init__(self, table_name: str):
        """
        Initialize DynamoDB client and table reference.

        Args:
            table_name: Name of the DynamoDB table
        """
        self.table_name = table_name
        self.dynamodb = boto3.resource('dynamodb')
        self.table = self.dynamodb.Table(table_name)
        logger.info(f"Initialized DynamoDBManager for table: {table_name}")

    def get_all_events(self) -> Dict[str, EventRecord]:
        """
        Retrieve all events from DynamoDB using Scan operation.

        Returns:
            Dictionary mapping event_id to EventRecord objects
        """
        logger.info("Scanning DynamoDB table for all events")
        try:
            items = self._collect(self.table.scan)
        except ClientError as e:
            logger.error(f"Error scanning DynamoDB table: {e}")
            raise

        events = {}
        for item in items:
            event = self._item_to_record(item)
            if event:
                events[event.event_id] = event

        logger.info(f"Retrieved {len(events)} events from DynamoDB")
        return events

    def list_events(
        self,
        event_date: Optional[str] = None,
        limit: int = MAX_PAGE_SIZE,
        offset: int = 0
    ) -> List[EventRecord]:
        """
        List events ordered by date and start time.

        Args:
            event_date: Only return events on this date (YYYY-MM-DD)
            limit: Page size, capped at 500
            offset: Number of events to skip

        Returns:
            One page of EventRecord objects
        """
        limit = min(limit, self.MAX_PAGE_SIZE) if limit and limit > 0 else self.MAX_PAGE_SIZE
        offset = max(0, offset or 0)

        try:
            if event_date:
                items = self._collect(
                    self.table.query,
                    IndexName=self.DATE_INDEX,
                    KeyConditionExpression=Key('event_date').eq(event_date)
                )
            else:
                items = self._collect(self.table.scan)
        except ClientError as e:
            logger.error(f"Error listing events: {e}")
            raise

        records = [record for record in map(self._item_to_record, items) if record]
        records.sort(key=lambda record: (record.event_date, record.start_time))
        return records[offset:offset + limit]

    def replace_events(self, records: List[EventRecord]) -> Tuple[int, int]:
        """
        Replace every stored event with the given records.

        Args:
            records: Deduplicated records from the latest import

        Returns:
            Tuple of (deleted count, written count)
        """
        existing_ids = list(self.get_all_events().keys())
        logger.info(
            f"Replacing {len(existing_ids)} stored events with {len(records)} new events"
        )
        deleted = self.batch_delete_events(existing_ids)
        written = self.batch_write_events(records)
        return deleted, written

    def batch_write_events(self, events: List[EventRecord]) -> int:
        """
        Write events to DynamoDB in batches of 25 items.

        Args:
            events: List of EventRecord objects to write

        Returns:
            Count of successfully written events
        """
        if not events:
            return 0

        logger.info(f"Writing {len(events)} events to DynamoDB")
        success_count = 0

        for i in range(0, len(events), self.BATCH_SIZE):
            batch = events[i:i + self.BATCH_SIZE]

            try:
                with self.table.batch_writer() as writer:
                    for event in batch:
                        writer.put_item(Item=self._record_to_item(event))
                success_count += len(batch)

            except ClientError as e:
                logger.error(
                    f"Error writing batch {i // self.BATCH_SIZE + 1}: {e}"
                )
                continue

        logger.info(f"Successfully wrote {success_count} events")
        return success_count

    def batch_delete_events(self, event_ids: List[str]) -> int:
        """
        Delete events from DynamoDB in batches of 25 items.

        Args:
            event_ids: List of event IDs to delete

        Returns:
            Count of successfully deleted events
        """
        if not event_ids:
            return 0

        logger.info(f"Deleting {len(event_ids)} events from DynamoDB")
        success_count = 0

        for i in range(0, len(event_ids), self.BATCH_SIZE):
            batch = event_ids[i:i + self.BATCH_SIZE]

            try:
                with self.table.batch_writer() as writer:
                    for event_id in batch:
                        writer.delete_item(Key={'event_id': event_id})
                success_count += len(batch)

            except ClientError as e:
                logger.error(
                    f"Error deleting batch {i // self.BATCH_SIZE + 1}: {e}"
                )
                continue

        logger.info(f"Successfully deleted {success_count} events")
        return success_count

    def get_events_with_registration_url(self) -> List[EventRecord]:
        """Return stored events whose registration URL is an http(s) link."""
        return [
            event for event in self.get_all_events().values()
            if event.registration_url and event.registration_url.startswith('http')
        ]

    def update_image_url(self, event_id: str, image_url: str) -> None:
        """
        Store the scraped image URL on an event.

        Args:
            event_id: Event to update
            image_url: Absolute image URL
        """
        self.table.update_item(
            Key={'event_id': event_id},
            UpdateExpression='SET image_url = :image_url, updated_at = :updated_at',
            ExpressionAttributeValues={
                ':image_url': image_url,
                ':updated_at': int(time.time())
            }
        )

    def _collect(self, operation, **kwargs) -> List[dict]:
        """Run a scan or query, following LastEvaluatedKey pagination."""
        response = operation(**kwargs)
        items = response.get('Items', [])

        while 'LastEvaluatedKey' in response:
            response = operation(
                ExclusiveStartKey=response['LastEvaluatedKey'],
                **kwargs
            )
            items.extend(response.get('Items', []))

        return items

    def _item_to_record(self, item: dict) -> Optional[EventRecord]:
        """
        Convert DynamoDB item to EventRecord object.

        Args:
            item: DynamoDB item dictionary

        Returns:
            EventRecord object or None if conversion fails
        """
        try:
            return EventRecord(
                event_id=item['event_id'],
                event_date=item['event_date'],
                start_time=item['start_time'],
                event_name=item['event_name'],
                created_at=int(item['created_at']),
                updated_at=int(item['updated_at']),
                **{name: item.get(name) for name in self.OPTIONAL_FIELDS}
            )
        except (KeyError, ValueError) as e:
            logger.warning(f"Failed to convert item to EventRecord: {e}")
            return None

    def _record_to_item(self, event: EventRecord) -> dict:
        """
        Convert EventRecord object to DynamoDB item.

        Args:
            event: EventRecord object

        Returns:
            DynamoDB item dictionary
        """
        item = {
            'event_id': event.event_id,
            'event_date': event.event_date,
            'start_time': event.start_time,
            'event_name': event.event_name,
            'created_at': event.created_at,
            'updated_at': event.updated_at
        }

        # Add optional fields if present
        for name in self.OPTIONAL_FIELDS:
            value = getattr(event, name)
            if value:
                item[name] = value

        return item
