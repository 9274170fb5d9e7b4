"""Tests for Slack webhook notifications."""

import json
from urllib.parse import parse_qs

import httpx
import pytest

from roomwatch.api.schemas import Diff, Listing, ListingPair
from roomwatch.errors import NotifyError
from roomwatch.notify.slack import SlackNotifier

WEBHOOK = "https://hooks.slack.com/services/T000/B000/XXXX"


def make_listing(**kwargs):
    defaults = {"id": "1", "title": "A", "price": "100", "layout": "1K", "size": "20"}
    defaults.update(kwargs)
    return Listing(**defaults)


def texts(blocks):
    return [b["text"]["text"] for b in blocks]


class TestBuildBlocks:
    def test_listing_url(self):
        notifier = SlackNotifier(WEBHOOK)
        assert notifier.listing_url(make_listing(id="42")) == (
            "https://www.fudousan.or.jp/property/detail?p_no=42"
        )

    def test_diff_blocks_in_order(self):
        notifier = SlackNotifier(WEBHOOK, detail_url_template="https://example.com/{id}")
        diff = Diff(
            added=[make_listing(id="1", title="New flat", price="8万円", layout="1K", size="20m²")],
            updated=[ListingPair(
                new=make_listing(id="2", title="Old flat", price="7万円"),
                old=make_listing(id="2", title="Old flat", price="7.5万円"),
            )],
            removed=[make_listing(id="3", title="Gone flat")],
        )
        assert texts(notifier.build_diff_blocks(diff)) == [
            "New: New flat\n8万円 1K 20m²\nhttps://example.com/1",
            "Updated: Old flat\n7万円\nhttps://example.com/2",
            "Removed: Gone flat",
        ]

    def test_block_shape(self):
        notifier = SlackNotifier(WEBHOOK)
        block = notifier.build_diff_blocks(Diff(removed=[make_listing()]))[0]
        assert block["type"] == "section"
        assert block["text"]["type"] == "mrkdwn"

    def test_error_blocks(self):
        notifier = SlackNotifier(WEBHOOK)
        assert texts(notifier.build_error_blocks(RuntimeError("boom"))) == ["boom"]


class TestPost:
    @pytest.mark.asyncio
    async def test_posts_form_encoded_payload(self):
        received = []

        def handler(request):
            received.append(request)
            return httpx.Response(200, text="ok")

        notifier = SlackNotifier(WEBHOOK, transport=httpx.MockTransport(handler))
        await notifier.notify_diff(Diff(removed=[make_listing(title="サンハイツ")]))

        assert len(received) == 1
        request = received[0]
        assert str(request.url) == WEBHOOK
        assert request.headers["content-type"] == "application/x-www-form-urlencoded"
        form = parse_qs(request.content.decode())
        payload = json.loads(form["payload"][0])
        assert texts(payload["blocks"]) == ["Removed: サンハイツ"]

    @pytest.mark.asyncio
    async def test_notify_error(self):
        received = []

        def handler(request):
            received.append(parse_qs(request.content.decode()))
            return httpx.Response(200)

        notifier = SlackNotifier(WEBHOOK, transport=httpx.MockTransport(handler))
        await notifier.notify_error(RuntimeError("failed to fetch listings: 503"))

        payload = json.loads(received[0]["payload"][0])
        assert texts(payload["blocks"]) == ["failed to fetch listings: 503"]

    @pytest.mark.asyncio
    async def test_rejected_webhook_raises_notify_error(self):
        notifier = SlackNotifier(
            WEBHOOK,
            transport=httpx.MockTransport(lambda request: httpx.Response(404, text="no_service")),
        )
        with pytest.raises(NotifyError):
            await notifier.notify_error(RuntimeError("x"))

    @pytest.mark.asyncio
    async def test_missing_webhook_raises_notify_error(self):
        notifier = SlackNotifier("")
        with pytest.raises(NotifyError):
            await notifier.notify_error(RuntimeError("x"))


class TestBadTemplate:
    @pytest.mark.parametrize("template", ["https://example.com/{b}", "https://example.com/{}"])
    def test_listing_url_raises_notify_error(self, template):
        notifier = SlackNotifier(WEBHOOK, detail_url_template=template)
        with pytest.raises(NotifyError, match="bad detail url template"):
            notifier.listing_url(make_listing())

    @pytest.mark.asyncio
    async def test_notify_diff_raises_notify_error(self):
        notifier = SlackNotifier(
            WEBHOOK,
            detail_url_template="https://example.com/{b}",
            transport=httpx.MockTransport(lambda request: httpx.Response(200)),
        )
        with pytest.raises(NotifyError):
            await notifier.notify_diff(Diff(added=[make_listing()]))
