"""Open Graph image lookup for event registration pages."""
import logging
import re
from typing import Optional
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

OG_IMAGE_PROPERTY = re.compile(r'^og:image$', re.IGNORECASE)


class OgImageScraper:
    """Finds the og:image of a registration page."""

    USER_AGENT = 'Mozilla/5.0 (compatible; SideEventImageScraper/1.0)'

    def __init__(self, timeout: int = 15):
        self.timeout = timeout

    def fetch_image_url(self, url: str) -> Optional[str]:
        """
        Fetch a page and return its absolute og:image URL.

        Args:
            url: Registration page URL

        Returns:
            Image URL, or None when the page cannot be fetched or has no image
        """
        try:
            response = requests.get(
                url,
                headers={'User-Agent': self.USER_AGENT},
                timeout=self.timeout,
                allow_redirects=True
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning(f"Failed to fetch {url}: {e}")
            return None

        image_url = self.extract_og_image(response.text)
        if image_url and not image_url.startswith('http'):
            return urljoin(response.url or url, image_url)
        return image_url

    @staticmethod
    def extract_og_image(html: str) -> Optional[str]:
        """
        Extract the og:image content from HTML.

        Args:
            html: Page HTML

        Returns:
            Raw content attribute, or None
        """
        soup = BeautifulSoup(html, 'html.parser')
        tag = soup.find('meta', attrs={'property': OG_IMAGE_PROPERTY})
        if not tag:
            return None
        content = (tag.get('content') or '').strip()
        return content or None
