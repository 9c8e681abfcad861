"""Factory for creating price feeds from environment configuration."""

from __future__ import annotations

import logging
import os

from .defaults import DEFAULT_UPDATE_INTERVAL, INTERVAL_ENV_VAR, SEED_ENV_VAR
from .feed import PriceFeed
from .fluctuation import FluctuationGenerator

logger = logging.getLogger(__name__)


def _interval_from_env() -> float:
    raw = os.environ.get(INTERVAL_ENV_VAR, "").strip()
    if not raw:
        return DEFAULT_UPDATE_INTERVAL
    try:
        interval_ms = float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r", INTERVAL_ENV_VAR, raw)
        return DEFAULT_UPDATE_INTERVAL
    if interval_ms <= 0:
        logger.warning("Ignoring non-positive %s=%r", INTERVAL_ENV_VAR, raw)
        return DEFAULT_UPDATE_INTERVAL
    return interval_ms / 1000.0


def _seed_from_env() -> int | None:
    raw = os.environ.get(SEED_ENV_VAR, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", SEED_ENV_VAR, raw)
        return None


def create_price_feed(
    autostart: bool = True,
    interval: float | None = None,
    seed: int | None = None,
) -> PriceFeed:
    """Create a PriceFeed configured from environment variables.

    - PRICE_UPDATE_INTERVAL_MS → tick period (default 3000 ms)
    - PRICE_FEED_SEED          → seed for reproducible fluctuations

    Explicit arguments win over the environment. With ``autostart`` the tick
    loop is started immediately, which requires a running event loop.
    """
    if interval is None:
        interval = _interval_from_env()
    if seed is None:
        seed = _seed_from_env()

    feed = PriceFeed(interval=interval, generator=FluctuationGenerator(seed=seed))
    logger.info("Price feed created: %.1fs interval, seed=%s", interval, seed)
    if autostart:
        feed.start()
    return feed
