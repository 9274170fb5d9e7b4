"""Abstract base strategy for listing page scrapers.

Each listings site gets its own concrete strategy class that implements
fetch(). The pipeline only depends on this interface, which keeps the
orchestrator testable with in-memory fakes.
"""

from abc import ABC, abstractmethod
from typing import List
from roomwatch.api.schemas import Listing


class BaseScrapeStrategy(ABC):
    """Abstract base class for all listing scraping strategies."""

    source_name = "unknown"

    @abstractmethod
    async def fetch(self) -> List[Listing]:
        """Fetch the current listings from the source.

        Raises:
            FetchError: the page could not be retrieved.
        """
        ...
