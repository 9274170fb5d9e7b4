"""Tests for the HTTP crawl trigger."""

import pytest
from fastapi.testclient import TestClient

from roomwatch.config import Settings
from roomwatch.main import create_app
from tests.fakes import FakeNotifier, FakeStore, FakeStrategy, make_listing, make_pipeline


def client_for(pipeline):
    return TestClient(create_app(Settings(_env_file=None), pipeline=pipeline))


class TestTriggerCrawl:
    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "PATCH", "TRACE", "PROPFIND"])
    def test_non_post_is_rejected(self, method):
        store = FakeStore([])
        client = client_for(make_pipeline(current=[make_listing()], store=store))
        response = client.request(method, "/")
        assert response.status_code == 405
        assert response.content == b""
        assert store.saved is None

    def test_success(self):
        store = FakeStore([])
        client = client_for(make_pipeline(current=[make_listing()], store=store))
        response = client.post("/")
        assert response.status_code == 200
        assert response.text == "ok"
        assert store.saved == [make_listing()]

    def test_any_path_triggers(self):
        client = client_for(make_pipeline())
        assert client.post("/run").text == "ok"

    def test_failure_returns_error_text(self):
        notifier = FakeNotifier()
        client = client_for(make_pipeline(strategy=FakeStrategy(error="timeout"), notifier=notifier))
        response = client.post("/")
        assert response.status_code == 500
        assert response.text == "failed to fetch listings: timeout"
        assert notifier.alerts == ["failed to fetch listings: timeout"]

    def test_failure_with_undelivered_alert(self):
        client = client_for(make_pipeline(
            strategy=FakeStrategy(error="timeout"),
            notifier=FakeNotifier(alert_error="webhook down"),
        ))
        response = client.post("/")
        assert response.status_code == 500
        assert response.text == (
            "failed to notify err. notify err: webhook down, err: failed to fetch listings: timeout"
        )
