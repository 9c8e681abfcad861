"""Simulated real-time NFT price feed.

Public API:
    PriceSample          - Immutable price observation dataclass
    FluctuationGenerator - Hash-seeded price jitter
    PriceFeed            - Interval-driven feed with track/subscribe/destroy
    PriceWatcher         - Per-consumer latest-price view over a feed
    Subscription         - Disposable handle returned by subscribe()
    PriceCache           - Thread-safe latest-sample store
    create_price_feed    - Factory configured from the environment
    create_stream_router - FastAPI router factory for the SSE endpoint
"""

from .cache import PriceCache
from .factory import create_price_feed
from .feed import PriceFeed
from .fluctuation import FluctuationGenerator, base_price
from .models import PriceSample
from .stream import create_stream_router
from .subscribers import Subscription
from .watcher import PriceWatcher

__all__ = [
    "PriceSample",
    "FluctuationGenerator",
    "base_price",
    "PriceFeed",
    "PriceWatcher",
    "Subscription",
    "PriceCache",
    "create_price_feed",
    "create_stream_router",
]
