"""Environment-driven settings for the handler and scripts."""
import logging
import os
from dataclasses import dataclass
from typing import Optional

# Published side-events sheet; SHEET_ID overrides it.
DEFAULT_SHEET_ID = '1TYpWZwW2u5V32QBMpl_EY8wjxN744E7ttZ0YrQrMKOI'


@dataclass
class Settings:
    table_name: str
    log_level: str
    timeout_seconds: int
    sheets_csv_url: Optional[str]
    google_sheets_api_key: Optional[str]
    sheet_id: Optional[str]


def get_settings() -> Settings:
    try:
        timeout_seconds = int(os.getenv('TIMEOUT_SECONDS', '30'))
    except ValueError:
        logging.warning("Invalid TIMEOUT_SECONDS %s, falling back to 30", os.getenv('TIMEOUT_SECONDS'))
        timeout_seconds = 30

    return Settings(
        table_name=os.getenv('TABLE_NAME', 'side-events'),
        log_level=os.getenv('LOG_LEVEL', 'INFO'),
        timeout_seconds=timeout_seconds,
        sheets_csv_url=os.getenv('SHEETS_CSV_URL') or None,
        google_sheets_api_key=os.getenv('GOOGLE_SHEETS_API_KEY') or None,
        sheet_id=os.getenv('SHEET_ID') or DEFAULT_SHEET_ID,
    )
