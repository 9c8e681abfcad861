"""Interval-driven price feed: generates samples for tracked mints and fans them out."""

from __future__ import annotations

import asyncio
import logging
import math
import time
from collections.abc import Callable, Hashable, Iterable
from threading import Lock
from typing import TYPE_CHECKING

from .cache import PriceCache
from .defaults import DEFAULT_UPDATE_INTERVAL
from .fluctuation import FluctuationGenerator
from .models import PriceSample
from .subscribers import PriceCallback, SubscriberRegistry, Subscription
from .tracking import TrackedSet

if TYPE_CHECKING:
    from .watcher import PriceWatcher

logger = logging.getLogger(__name__)


class PriceFeed:
    """Simulated real-time price feed.

    Runs a background asyncio task that calls ``tick()`` every ``interval``
    seconds. Each tick produces one PriceSample per tracked mint, stores it in
    the PriceCache and delivers it to every subscriber.

    Lifecycle:
        feed = PriceFeed(interval=3.0)
        feed.start()                 # needs a running event loop
        sub = feed.subscribe(on_price)
        feed.track("mint-A")
        # ... app runs ...
        sub.dispose()
        feed.destroy()               # or: await feed.stop()

    Once destroyed, a feed stays destroyed. ``track``, ``untrack``,
    ``subscribe``, ``start`` and ``tick`` become silent no-ops so that UI
    teardown can run in any order.
    """

    def __init__(
        self,
        interval: float = DEFAULT_UPDATE_INTERVAL,
        generator: FluctuationGenerator | None = None,
        price_cache: PriceCache | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._interval = interval
        self._generator = generator or FluctuationGenerator()
        self._cache = price_cache if price_cache is not None else PriceCache()
        self._clock = clock
        self._tracked = TrackedSet()
        self._subscribers = SubscriberRegistry()
        self._task: asyncio.Task | None = None
        self._tick_lock = Lock()
        self._last_timestamp = 0.0
        self._destroyed = False

    # --- Lifecycle ---

    def start(self) -> None:
        """Begin the tick loop on the running event loop. No-op if already running."""
        if self._destroyed:
            logger.debug("Price feed already destroyed; start() ignored")
            return
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(
            self._run_loop(), name="price-feed-loop"
        )
        logger.info("Price feed started: %.1fs interval", self._interval)

    def destroy(self) -> None:
        """Stop ticking and release all subscriptions and tracked mints. Idempotent."""
        if self._destroyed:
            return
        self._destroyed = True
        if self._task and not self._task.done():
            self._task.cancel()
        self._subscribers.clear()
        self._tracked.clear()
        self._cache.clear()
        logger.info("Price feed destroyed")

    async def stop(self) -> None:
        """Destroy the feed and wait for the loop task to finish cancelling."""
        task = self._task
        self.destroy()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._task = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done() and not self._destroyed

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    @property
    def interval(self) -> float:
        return self._interval

    # --- Registration ---

    def track(self, mint_address: str, owner: Hashable | None = None) -> None:
        """Include a mint in subsequent ticks. Idempotent."""
        if self._destroyed:
            logger.debug("Price feed destroyed; track(%s) ignored", mint_address)
            return
        self._tracked.track(mint_address, owner)

    def untrack(self, mint_address: str, owner: Hashable | None = None) -> None:
        """Stop generating prices for a mint. No-op if it is not tracked."""
        if self._destroyed:
            return
        if self._tracked.untrack(mint_address, owner):
            self._cache.remove(mint_address)

    def subscribe(self, callback: PriceCallback) -> Subscription:
        """Register ``callback`` for every sample. Dispose the handle to unsubscribe."""
        if self._destroyed:
            logger.debug("Price feed destroyed; subscribe() returns an inert handle")
            return Subscription.inert(callback)
        return self._subscribers.subscribe(callback)

    def watch(
        self,
        mint_addresses: Iterable[str] = (),
        on_update: PriceCallback | None = None,
    ) -> PriceWatcher:
        """Attach and return a PriceWatcher for ``mint_addresses``."""
        from .watcher import PriceWatcher

        return PriceWatcher(self, mint_addresses, on_update=on_update).attach()

    # --- Accessors ---

    def latest(self, mint_address: str) -> PriceSample | None:
        """Latest sample for a mint, or None if no tick has covered it yet."""
        return self._cache.get(mint_address)

    def get_prices(self) -> dict[str, PriceSample]:
        return self._cache.get_all()

    def get_tracked(self) -> list[str]:
        return self._tracked.snapshot()

    # --- Ticking ---

    def tick(self) -> int:
        """Run one update cycle. Returns the number of samples published.

        Ticks are serialized per feed and each tick gets a strictly later
        timestamp than the one before, so samples for a mint reach subscribers
        in increasing timestamp order.
        """
        with self._tick_lock:
            if self._destroyed:
                return 0
            mints = self._tracked.snapshot()
            if not mints:
                return 0

            timestamp = self._clock()
            if timestamp <= self._last_timestamp:
                timestamp = math.nextafter(self._last_timestamp, math.inf)
            self._last_timestamp = timestamp

            published = 0
            for sample in self._generator.step(mints, timestamp):
                # Destroyed or untracked by a callback earlier in this tick
                if self._destroyed or sample.mint_address not in self._tracked:
                    continue
                self._cache.put(sample)
                self._subscribers.publish(sample)
                published += 1
            logger.debug("Price tick: published %d/%d samples", published, len(mints))
            return published

    async def _run_loop(self) -> None:
        """Core loop: sleep one interval, tick, repeat."""
        while not self._destroyed:
            await asyncio.sleep(self._interval)
            try:
                self.tick()
            except Exception:
                logger.exception("Price tick failed")
