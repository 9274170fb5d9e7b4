"""fudousan.or.jp scraping strategy.

Fetches a search results page and parses each result row into a Listing.
Rows are <li class="list-group-item" data-id="..."> elements; rows without
a data-id (ads, headings) are skipped.
"""

import httpx
import logging
from typing import List, Optional
from bs4 import BeautifulSoup, Tag

from roomwatch.scraper.base_strategy import BaseScrapeStrategy
from roomwatch.pipeline.normalizer import clean_text, join_fragments
from roomwatch.api.schemas import Listing
from roomwatch.errors import FetchError

logger = logging.getLogger(__name__)

ITEM_SELECTOR = "li.list-group-item"
TITLE_SELECTOR = "span.prop-title-link"
PRICE_SELECTOR = "div.price"
LAYOUT_LABEL = "間取り"
SIZE_LABEL = "専有面積"

DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; roomwatch/1.0)",
    "Accept": "text/html,application/xhtml+xml",
}


class FudousanStrategy(BaseScrapeStrategy):
    """Concrete strategy for scraping fudousan.or.jp search results."""

    source_name = "fudousan"

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.transport = transport

    async def fetch(self) -> List[Listing]:
        logger.info("Fetching listings page: %s", self.url)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport, follow_redirects=True
            ) as client:
                response = await client.get(self.url, headers=DEFAULT_HEADERS)
                response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchError(str(e)) from e

        listings = parse_listings(response.text)
        logger.info("%s: fetched %d listings", self.source_name, len(listings))
        return listings


def parse_listings(html: str) -> List[Listing]:
    """Parse every identifiable result row of a search results page, in document order."""
    soup = BeautifulSoup(html, "lxml")
    listings = []
    for item in soup.select(ITEM_SELECTOR):
        listing = _parse_item(item)
        if listing is not None:
            listings.append(listing)
    return listings


def _parse_item(item: Tag) -> Optional[Listing]:
    listing_id = item.get("data-id")
    if listing_id is None:
        return None

    titles = [span.get_text() for span in item.select(TITLE_SELECTOR)]

    return Listing(
        id=listing_id,
        title=join_fragments(titles),
        price=_first_child_text(item.select_one(PRICE_SELECTOR)),
        layout=_labelled_value(item, LAYOUT_LABEL),
        size=_labelled_value(item, SIZE_LABEL),
    )


def _first_child_text(container: Optional[Tag]) -> str:
    if container is None:
        return ""
    child = container.find(True, recursive=False)
    if child is None:
        return ""
    return clean_text(child.get_text())


def _labelled_value(item: Tag, label: str) -> str:
    """Value cell next to a label, e.g. <div><span>間取り</span><span>1K</span></div>.

    The label text can also appear in the title, so the last matching span
    is used; the value is the last element among its siblings.
    """
    matches = item.select(f'span:-soup-contains("{label}")')
    if not matches or matches[-1].parent is None:
        return ""
    label_span = matches[-1]
    siblings = label_span.parent.find_all(True, recursive=False)
    if not siblings:
        return ""
    return clean_text(siblings[-1].get_text())
