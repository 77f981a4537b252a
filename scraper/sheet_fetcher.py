"""Fetch the side-events sheet and split it into rows."""
import csv
import io
import logging
import time
from typing import List, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

SHEETS_API_URL = "https://sheets.googleapis.com/v4/spreadsheets/{sheet_id}/values/A:G"


class SheetSourceNotConfigured(Exception):
    """Raised when neither a CSV URL nor a Sheets API key is configured."""


def detect_delimiter(text: str) -> str:
    """
    Pick the delimiter from the first line: tab if it has more tabs than commas.

    Args:
        text: Raw CSV or TSV export

    Returns:
        '\\t' or ','
    """
    first_line = text.splitlines()[0] if text else ''
    return '\t' if first_line.count('\t') > first_line.count(',') else ','


def parse_csv_to_rows(text: str) -> List[List[str]]:
    """
    Split CSV or TSV text into rows of trimmed cells.

    Rows may have different lengths. Empty lines are skipped.

    Args:
        text: Raw export text

    Returns:
        List of rows
    """
    delimiter = detect_delimiter(text)
    reader = csv.reader(io.StringIO(text), delimiter=delimiter)
    return [[cell.strip() for cell in row] for row in reader if row]


class SheetFetcher:
    """Fetches sheet rows from a published CSV URL or the Google Sheets API."""

    MAX_RETRIES = 3
    BASE_DELAY = 1  # seconds

    def __init__(
        self,
        csv_url: Optional[str] = None,
        api_key: Optional[str] = None,
        sheet_id: Optional[str] = None,
        timeout: int = 30
    ):
        """
        Initialize the sheet fetcher.

        Args:
            csv_url: Published-to-web CSV export URL (preferred)
            api_key: Google Sheets API key, used when no CSV URL is set
            sheet_id: Spreadsheet id for the Sheets API
            timeout: HTTP request timeout in seconds (default: 30)
        """
        self.csv_url = csv_url
        self.api_key = api_key
        self.sheet_id = sheet_id
        self.timeout = timeout

    def fetch_rows(self) -> Tuple[List[List[str]], str]:
        """
        Fetch the sheet as rows of cells.

        Returns:
            Tuple of (rows, source) where source is "csv" or "sheets_api"

        Raises:
            SheetSourceNotConfigured: If no source is configured
            requests.RequestException: If all retry attempts fail
        """
        if self.csv_url:
            logger.info("Fetching sheet from published CSV URL")
            text = self._get(self.csv_url).text
            rows = parse_csv_to_rows(text)
            logger.info(f"Fetched {len(rows)} rows from CSV export")
            return rows, 'csv'

        if self.api_key and self.sheet_id:
            logger.info(f"Fetching sheet {self.sheet_id} via Sheets API")
            response = self._get(
                SHEETS_API_URL.format(sheet_id=self.sheet_id),
                params={'key': self.api_key}
            )
            rows = response.json().get('values') or []
            logger.info(f"Fetched {len(rows)} rows from Sheets API")
            return rows, 'sheets_api'

        raise SheetSourceNotConfigured(
            'Set SHEETS_CSV_URL (publish sheet to web as CSV) or '
            'GOOGLE_SHEETS_API_KEY and SHEET_ID to import events.'
        )

    def _get(self, url: str, params: Optional[dict] = None) -> requests.Response:
        """
        GET a URL with retry logic.

        Args:
            url: URL to fetch
            params: Optional query parameters

        Returns:
            Successful response

        Raises:
            requests.RequestException: If all retry attempts fail
        """
        for attempt in range(self.MAX_RETRIES):
            try:
                logger.info(f"Requesting sheet (attempt {attempt + 1}/{self.MAX_RETRIES})")
                response = requests.get(url, params=params, timeout=self.timeout)
                response.raise_for_status()
                return response

            except requests.RequestException as e:
                if attempt < self.MAX_RETRIES - 1:
                    delay = self.BASE_DELAY * (2 ** attempt)
                    logger.warning(
                        f"Request failed (attempt {attempt + 1}/{self.MAX_RETRIES}): {e}. "
                        f"Retrying in {delay} seconds..."
                    )
                    time.sleep(delay)
                else:
                    logger.error(
                        f"All {self.MAX_RETRIES} retry attempts failed. Last error: {e}"
                    )
                    raise
