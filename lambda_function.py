"""AWS Lambda handler for the side-events API and sheet import."""
import base64
import binascii
import json
import logging
import time
from typing import Any, Dict, Optional

from config import Settings, get_settings
from processor.event_processor import EventProcessor
from processor.importer import import_rows
from processor.models import EventRecord
from scraper.sheet_fetcher import SheetFetcher, parse_csv_to_rows
from storage.dynamodb_manager import DynamoDBManager
from web.upload_page import render_upload_page

EVENTS_PATH = '/events'
IMPORT_PATH = '/events/import'
UPLOAD_PATH = '/upload-events'

ROUTES = {
    EVENTS_PATH: 'GET',
    IMPORT_PATH: 'POST',
    UPLOAD_PATH: 'GET',
}


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    # Attributes every LogRecord has; anything else came from extra=
    RESERVED_ATTRS = frozenset(
        vars(logging.LogRecord('', 0, '', 0, '', None, None))
    ) | {'message', 'asctime'}

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in self.RESERVED_ATTRS and key not in log_data:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


logger = logging.getLogger(__name__)


def json_response(status_code: int, body: Dict[str, Any]) -> Dict[str, Any]:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(body)
    }


def html_response(status_code: int, html: str) -> Dict[str, Any]:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'text/html; charset=utf-8'},
        'body': html
    }


def record_to_json(record: EventRecord) -> Dict[str, Any]:
    """Serialize an EventRecord with the API's camelCase field names."""
    return {
        'id': record.event_id,
        'eventDate': record.event_date,
        'startTime': record.start_time,
        'endTime': record.end_time,
        'eventName': record.event_name,
        'organizer': record.organizer,
        'venue': record.venue,
        'registrationUrl': record.registration_url,
        'imageUrl': record.image_url,
        'notes': record.notes,
        'createdAt': record.created_at,
        'updatedAt': record.updated_at
    }


def _request_line(event: Dict[str, Any]) -> tuple[Optional[str], Optional[str]]:
    """Return (method, path) for REST (v1) and HTTP API (v2) proxy events."""
    if 'httpMethod' in event:
        return event['httpMethod'].upper(), event.get('path') or '/'
    http = (event.get('requestContext') or {}).get('http')
    if http:
        return http.get('method', '').upper(), event.get('rawPath') or http.get('path') or '/'
    return None, None


def _parse_int(value: Optional[str], default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _request_body(event: Dict[str, Any]) -> str:
    body = event.get('body') or ''
    if body and event.get('isBase64Encoded'):
        body = base64.b64decode(body).decode('utf-8-sig')
    return body


def handle_list_events(event: Dict[str, Any], settings: Settings) -> Dict[str, Any]:
    """
    GET /events: list stored events.

    Query parameters: eventDate (YYYY-MM-DD), limit (max 500), offset.
    """
    params = event.get('queryStringParameters') or {}
    limit = _parse_int(params.get('limit'), DynamoDBManager.MAX_PAGE_SIZE)
    offset = _parse_int(params.get('offset'), 0)

    try:
        dynamodb_manager = DynamoDBManager(table_name=settings.table_name)
        records = dynamodb_manager.list_events(
            event_date=params.get('eventDate') or None,
            limit=limit,
            offset=offset
        )
    except Exception as e:
        logger.error(
            f"Events list error: {str(e)}",
            extra={'error_type': type(e).__name__},
            exc_info=True
        )
        return json_response(500, {'error': str(e)})

    return json_response(200, {'events': [record_to_json(record) for record in records]})


def handle_import(event: Dict[str, Any], settings: Settings) -> Dict[str, Any]:
    """
    POST /events/import: replace stored events with an uploaded or fetched sheet.

    A non-empty request body is treated as the CSV/TSV export itself;
    otherwise the configured sheet is fetched.
    """
    start_time = time.time()

    try:
        body = _request_body(event)
    except (binascii.Error, UnicodeDecodeError) as e:
        logger.warning(f"Could not decode upload body: {e}")
        return json_response(400, {'ok': False, 'error': 'Request body is not valid UTF-8 text'})

    try:
        if body.strip():
            logger.info("Parsing uploaded sheet export")
            rows, source = parse_csv_to_rows(body), 'upload'
        else:
            fetcher = SheetFetcher(
                csv_url=settings.sheets_csv_url,
                api_key=settings.google_sheets_api_key,
                sheet_id=settings.sheet_id,
                timeout=settings.timeout_seconds
            )
            logger.info("Fetching events sheet")
            rows, source = fetcher.fetch_rows()
    except Exception as e:
        logger.error(
            f"Failed to load events sheet: {str(e)}",
            extra={'error_type': type(e).__name__},
            exc_info=True
        )
        return json_response(500, {
            'ok': False,
            'error': str(e),
            'error_type': type(e).__name__
        })

    try:
        dynamodb_manager = DynamoDBManager(table_name=settings.table_name)
        result = import_rows(rows, source, dynamodb_manager, EventProcessor())
    except Exception as e:
        logger.error(
            f"Events import error: {str(e)}",
            extra={'error_type': type(e).__name__},
            exc_info=True
        )
        return json_response(500, {
            'ok': False,
            'error': str(e),
            'error_type': type(e).__name__
        })

    duration = time.time() - start_time
    logger.info(
        "Events import completed",
        extra={
            'source': source,
            'events_parsed': result.parsed,
            'events_imported': result.imported,
            'duplicates': result.duplicates,
            'events_deleted': result.deleted,
            'duration_seconds': round(duration, 2)
        }
    )

    response_body = {'ok': True, 'imported': result.imported, 'source': source}
    if result.errors:
        response_body['parseErrors'] = result.errors
    return json_response(200, response_body)


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Main Lambda handler.

    API Gateway proxy events are routed by path; anything else (an
    EventBridge schedule) triggers a sheet import.

    Args:
        event: API Gateway proxy event or EventBridge payload
        context: Lambda context object

    Returns:
        API Gateway proxy response
    """
    settings = get_settings()
    setup_logging(settings.log_level)

    method, path = _request_line(event or {})
    logger.info(
        "Lambda execution started",
        extra={'method': method, 'path': path, 'table_name': settings.table_name}
    )

    if method is None:
        logger.info("Scheduled invocation, importing events sheet")
        return handle_import({}, settings)

    path = path.rstrip('/') or '/'
    allowed = ROUTES.get(path)
    if allowed is None:
        return json_response(404, {'error': 'Not found'})
    if method != allowed:
        response = json_response(405, {'ok': False, 'error': 'Method not allowed'})
        response['headers']['Allow'] = allowed
        return response

    if path == EVENTS_PATH:
        return handle_list_events(event, settings)
    if path == IMPORT_PATH:
        return handle_import(event, settings)
    return html_response(200, render_upload_page(IMPORT_PATH))
