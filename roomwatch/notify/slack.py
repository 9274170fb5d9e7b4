"""Slack incoming-webhook notifications.

Renders a Diff as Block Kit sections (one per listing) and posts it to the
webhook as a form-encoded `payload` field. Pipeline failures go through
the same webhook as a single plain section.
"""

import json
import httpx
import logging
from typing import List, Optional

from roomwatch.api.schemas import Diff, Listing
from roomwatch.errors import NotifyError

logger = logging.getLogger(__name__)

DEFAULT_DETAIL_URL_TEMPLATE = "https://www.fudousan.or.jp/property/detail?p_no={id}"


def _section(text: str) -> dict:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


class SlackNotifier:
    """Posts listing changes and run failures to a Slack webhook."""

    def __init__(
        self,
        webhook_url: str,
        detail_url_template: str = DEFAULT_DETAIL_URL_TEMPLATE,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.webhook_url = webhook_url
        self.detail_url_template = detail_url_template
        self.timeout = timeout
        self.transport = transport

    def listing_url(self, listing: Listing) -> str:
        try:
            return self.detail_url_template.format(id=listing.id)
        except (KeyError, IndexError, ValueError) as e:
            raise NotifyError(f"bad detail url template {self.detail_url_template!r}: {e!r}") from e

    def build_diff_blocks(self, diff: Diff) -> List[dict]:
        """One section per added, updated, and removed listing, in that order."""
        blocks = []
        for listing in diff.added:
            blocks.append(_section(
                f"New: {listing.title}\n"
                f"{listing.price} {listing.layout} {listing.size}\n"
                f"{self.listing_url(listing)}"
            ))
        for pair in diff.updated:
            blocks.append(_section(
                f"Updated: {pair.new.title}\n"
                f"{pair.new.price}\n"
                f"{self.listing_url(pair.new)}"
            ))
        for listing in diff.removed:
            blocks.append(_section(f"Removed: {listing.title}"))
        return blocks

    def build_error_blocks(self, err: Exception) -> List[dict]:
        return [_section(str(err))]

    async def notify_diff(self, diff: Diff) -> None:
        await self._post({"blocks": self.build_diff_blocks(diff)})

    async def notify_error(self, err: Exception) -> None:
        await self._post({"blocks": self.build_error_blocks(err)})

    async def _post(self, payload: dict) -> None:
        body = json.dumps(payload, ensure_ascii=False)
        logger.debug("Slack payload: %s", body)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.webhook_url, data={"payload": body})
                response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NotifyError(str(e)) from e
