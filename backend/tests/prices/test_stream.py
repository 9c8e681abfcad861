"""Tests for the price streaming router."""

import json
from itertools import count
from types import SimpleNamespace

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.prices.feed import PriceFeed
from app.prices.fluctuation import FluctuationGenerator
from app.prices.stream import _generate_events, _parse_mints, create_stream_router
from app.prices.watcher import PriceWatcher


def _make_feed() -> PriceFeed:
    clock = count(1_700_000_000)
    return PriceFeed(generator=FluctuationGenerator(seed=8), clock=lambda: float(next(clock)))


class _FakeRequest:
    """Minimal stand-in for a Starlette request."""

    def __init__(self, disconnect_after: int) -> None:
        self.client = SimpleNamespace(host="127.0.0.1")
        self._checks = 0
        self._disconnect_after = disconnect_after

    async def is_disconnected(self) -> bool:
        self._checks += 1
        return self._checks > self._disconnect_after


class TestParseMints:
    def test_splits_and_strips(self):
        assert _parse_mints(" mint-A, mint-B ,,") == ["mint-A", "mint-B"]

    def test_empty(self):
        assert _parse_mints("") == []


@pytest.mark.asyncio
class TestGenerateEvents:
    """Tests for the SSE event generator."""

    async def test_emits_retry_then_prices(self):
        """The stream starts with a retry directive and then price data."""
        feed = _make_feed()
        watcher = PriceWatcher(feed, ["mint-A"])
        events = _generate_events(watcher, _FakeRequest(disconnect_after=2), interval=0.01)

        assert await events.__anext__() == "retry: 1000\n\n"
        feed.tick()
        event = await events.__anext__()

        assert event.startswith("data: ")
        payload = json.loads(event[len("data: "):])
        assert set(payload) == {"mint-A"}
        assert payload["mint-A"]["currency"] == "SOL"
        assert payload["mint-A"]["price"] >= 0.01

        await events.aclose()

    async def test_detaches_on_disconnect(self):
        """The watcher is released once the client goes away."""
        feed = _make_feed()
        watcher = PriceWatcher(feed, ["mint-A"])
        events = [
            event
            async for event in _generate_events(
                watcher, _FakeRequest(disconnect_after=1), interval=0.01
            )
        ]

        assert events == ["retry: 1000\n\n"]
        assert feed.get_tracked() == []

    async def test_detaches_on_close(self):
        """Closing the generator mid-stream detaches the watcher."""
        feed = _make_feed()
        watcher = PriceWatcher(feed, ["mint-A"])
        events = _generate_events(watcher, _FakeRequest(disconnect_after=100), interval=0.01)

        await events.__anext__()
        feed.tick()
        await events.__anext__()
        assert feed.get_tracked() == ["mint-A"]

        await events.aclose()
        assert feed.get_tracked() == []


class TestLatestPriceRoute:
    """Tests for GET /api/stream/prices/{mint}."""

    def test_latest_price(self):
        feed = _make_feed()
        feed.track("mint-A")
        feed.tick()
        app = FastAPI()
        app.include_router(create_stream_router(feed))

        response = TestClient(app).get("/api/stream/prices/mint-A")

        assert response.status_code == 200
        body = response.json()
        assert body["mint_address"] == "mint-A"
        assert body["price"] == feed.latest("mint-A").price

    def test_unknown_mint_is_404(self):
        app = FastAPI()
        app.include_router(create_stream_router(_make_feed()))

        response = TestClient(app).get("/api/stream/prices/mint-A")

        assert response.status_code == 404
