"""Pytest configuration and fixtures."""

from itertools import count

import pytest

from app.prices.feed import PriceFeed
from app.prices.fluctuation import FluctuationGenerator


@pytest.fixture
def event_loop_policy():
    """Use the default event loop policy for all async tests."""
    import asyncio

    return asyncio.DefaultEventLoopPolicy()


@pytest.fixture
def feed() -> PriceFeed:
    """An unstarted, seeded feed whose clock advances one second per tick."""
    clock = count(1_700_000_000)
    return PriceFeed(
        generator=FluctuationGenerator(seed=2024),
        clock=lambda: float(next(clock)),
    )
