"""SSE streaming endpoint for live NFT price updates."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import StreamingResponse

from .feed import PriceFeed
from .watcher import PriceWatcher

logger = logging.getLogger(__name__)


def _parse_mints(raw: str) -> list[str]:
    return [mint.strip() for mint in raw.split(",") if mint.strip()]


def create_stream_router(feed: PriceFeed) -> APIRouter:
    """Create the price streaming router bound to ``feed``.

    This factory pattern lets us inject the PriceFeed without globals.
    """
    router = APIRouter(prefix="/api/stream", tags=["streaming"])

    @router.get("/prices")
    async def stream_prices(
        request: Request,
        mints: str = Query("", description="Comma-separated mint addresses"),
    ) -> StreamingResponse:
        """SSE endpoint for live price updates of the requested mints.

        Each connection gets its own PriceWatcher. Events look like:

            data: {"<mint>": {"mint_address": "<mint>", "price": 42.1, ...}, ...}
        """
        watcher = PriceWatcher(feed, _parse_mints(mints))
        return StreamingResponse(
            _generate_events(watcher, request),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "X-Accel-Buffering": "no",  # Disable nginx buffering if proxied
            },
        )

    @router.get("/prices/{mint_address}")
    async def latest_price(mint_address: str) -> dict:
        """Latest known sample for one mint."""
        sample = feed.latest(mint_address)
        if sample is None:
            raise HTTPException(status_code=404, detail=f"No price yet for {mint_address}")
        return sample.to_dict()

    return router


async def _generate_events(
    watcher: PriceWatcher,
    request: Request,
    interval: float = 0.5,
) -> AsyncGenerator[str, None]:
    """Async generator that yields SSE-formatted price events.

    Attaches ``watcher`` for the lifetime of the stream and emits its prices
    whenever they change. Detaches when the client disconnects.
    """
    client_ip = request.client.host if request.client else "unknown"
    watcher.attach()
    logger.info("SSE client connected: %s (%d mints)", client_ip, len(watcher.mints))

    try:
        # Tell the client to retry after 1 second if the connection drops
        yield "retry: 1000\n\n"

        last_version = -1
        while True:
            if await request.is_disconnected():
                logger.info("SSE client disconnected: %s", client_ip)
                break

            current_version = watcher.version
            if current_version != last_version:
                last_version = current_version
                prices = watcher.prices

                if prices:
                    data = {mint: sample.to_dict() for mint, sample in prices.items()}
                    yield f"data: {json.dumps(data)}\n\n"

            await asyncio.sleep(interval)
    except asyncio.CancelledError:
        logger.info("SSE stream cancelled for: %s", client_ip)
    finally:
        watcher.detach()
