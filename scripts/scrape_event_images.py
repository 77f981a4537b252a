"""Backfill event images from the og:image of each registration page.

Usage:
    python -m scripts.scrape_event_images [--delay 0.5] [--table side-events]
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from botocore.exceptions import ClientError
from dotenv import load_dotenv

from config import get_settings
from scraper.og_image import OgImageScraper
from storage.dynamodb_manager import DynamoDBManager

ROOT = Path(__file__).resolve().parent.parent

logger = logging.getLogger(__name__)


def scrape_images(manager: DynamoDBManager, scraper: OgImageScraper, delay: float = 0.5) -> int:
    """
    Look up and store an image for every event with a registration link.

    Returns:
        Number of events updated
    """
    events = manager.get_events_with_registration_url()
    logger.info("Found %d events with registration URLs", len(events))

    updated = 0
    for i, event in enumerate(events, start=1):
        image_url = scraper.fetch_image_url(event.registration_url)
        if image_url:
            try:
                manager.update_image_url(event.event_id, image_url)
            except ClientError as e:
                logger.warning("[%d/%d] %s: failed to store image: %s", i, len(events), event.event_id, e)
            else:
                updated += 1
                logger.info("[%d/%d] %s -> %s", i, len(events), event.event_id, image_url)
        else:
            logger.info("[%d/%d] %s: no image", i, len(events), event.event_id)
        if delay and i < len(events):
            time.sleep(delay)

    logger.info("Updated %d of %d events with images", updated, len(events))
    return updated


def main(argv=None) -> int:
    load_dotenv(ROOT / ".env.local")
    load_dotenv(ROOT / ".env")
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    parser = argparse.ArgumentParser(description="Scrape og:image for stored events")
    parser.add_argument("--delay", type=float, default=0.5, help="Seconds between page requests")
    parser.add_argument("--table", default=None, help="DynamoDB table (default: TABLE_NAME)")
    args = parser.parse_args(argv)

    settings = get_settings()
    manager = DynamoDBManager(table_name=args.table or settings.table_name)
    scrape_images(manager, OgImageScraper(), delay=args.delay)
    return 0


if __name__ == "__main__":
    sys.exit(main())
