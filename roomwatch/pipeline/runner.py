"""Crawl orchestration: fetch → load snapshot → diff → notify → save.

Fetching and loading are fatal. Once a diff exists, notifying and saving
are both attempted regardless of each other's outcome, and their failures
are reported together.
"""

import logging
from typing import Optional

from roomwatch.config import Settings
from roomwatch.errors import CrawlError, FetchError, NotifyError, PipelineError, StoreError
from roomwatch.notify.slack import SlackNotifier
from roomwatch.pipeline.change_detector import build_change_summary, detect_changes
from roomwatch.scraper.base_strategy import BaseScrapeStrategy
from roomwatch.scraper.fudousan_strategy import FudousanStrategy
from roomwatch.store.sheets import SheetsSnapshotStore

logger = logging.getLogger(__name__)


class CrawlPipeline:
    """Runs one crawl against a scraper, a snapshot store and a notifier."""

    def __init__(self, strategy: BaseScrapeStrategy, store, notifier):
        self.strategy = strategy
        self.store = store
        self.notifier = notifier

    async def run(self) -> None:
        """Run one crawl.

        Raises:
            FetchError: the listings page could not be fetched.
            StoreError: the previous snapshot could not be loaded.
            PipelineError: notifying and/or saving failed.
        """
        try:
            listings = await self.strategy.fetch()
        except FetchError as e:
            raise FetchError(f"failed to fetch listings: {e}") from e

        try:
            previous = await self.store.load()
        except StoreError as e:
            raise StoreError(f"failed to load previous listings: {e}") from e

        diff = detect_changes(listings, previous)
        if diff is None:
            logger.info("no diff detected.")
            return

        logger.info("Diff detected: %s", build_change_summary(diff))

        errors = []
        try:
            await self.notifier.notify_diff(diff)
        except NotifyError as e:
            logger.error("Failed to notify diff: %s", e)
            errors.append(f"failed to notify diff: {e}")

        try:
            await self.store.save(listings)
        except StoreError as e:
            logger.error("Failed to save listings: %s", e)
            errors.append(f"failed to save listings: {e}")

        if errors:
            raise PipelineError(errors)

    async def report_failure(self, err: CrawlError) -> Optional[str]:
        """Forward a failed run's error to the notifier.

        Returns None once the alert is delivered, or a message combining
        both errors when the alert itself could not be sent.
        """
        try:
            await self.notifier.notify_error(err)
        except NotifyError as notify_err:
            message = f"failed to notify err. notify err: {notify_err}, err: {err}"
            logger.error(message)
            return message
        return None


def build_pipeline(settings: Settings) -> CrawlPipeline:
    return CrawlPipeline(
        strategy=FudousanStrategy(settings.rooms_url, timeout=settings.http_timeout),
        store=SheetsSnapshotStore(
            settings.spreadsheet_id,
            settings.google_credentials_json,
            sheet_range=settings.sheet_range,
        ),
        notifier=SlackNotifier(
            settings.slack_webhook_url,
            detail_url_template=settings.detail_url_template,
            timeout=settings.http_timeout,
        ),
    )
