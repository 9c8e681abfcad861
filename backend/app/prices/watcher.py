"""Per-consumer view over a PriceFeed."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from threading import Lock
from typing import TYPE_CHECKING

from .models import PriceSample
from .subscribers import PriceCallback, Subscription

if TYPE_CHECKING:
    from .feed import PriceFeed

logger = logging.getLogger(__name__)


class PriceWatcher:
    """Latest prices for the mints one consumer cares about.

    On attach, tracks each mint on the feed (under this watcher's own claim)
    and subscribes a filter that keeps only matching samples. Detach reverses
    both. Several watchers may watch the same mint; detaching one leaves the
    others receiving updates.

    Usage:
        with feed.watch(["mint-A"]) as watcher:
            ...
            watcher.get("mint-A")   # PriceSample or None
    """

    def __init__(
        self,
        feed: PriceFeed,
        mint_addresses: Iterable[str] = (),
        on_update: PriceCallback | None = None,
    ) -> None:
        self._feed = feed
        self._on_update = on_update
        self._mints: set[str] = set(mint_addresses)
        self._latest: dict[str, PriceSample] = {}
        self._subscription: Subscription | None = None
        self._lock = Lock()
        self._version = 0

    def attach(self) -> PriceWatcher:
        """Start receiving updates. Idempotent."""
        if self._subscription is not None:
            return self
        for mint in list(self._mints):
            self._feed.track(mint, owner=self)
        self._subscription = self._feed.subscribe(self._on_sample)
        return self

    def detach(self) -> None:
        """Stop receiving updates and drop local state.

        Safe to call repeatedly, and after the feed has been destroyed.
        """
        sub = self._subscription
        if sub is None:
            return
        self._subscription = None
        sub.dispose()
        for mint in list(self._mints):
            self._feed.untrack(mint, owner=self)
        with self._lock:
            self._latest.clear()

    def watch(self, mint_address: str) -> None:
        """Add a mint to this watcher's interest set."""
        with self._lock:
            if mint_address in self._mints:
                return
            self._mints.add(mint_address)
        if self._subscription is not None:
            self._feed.track(mint_address, owner=self)

    def unwatch(self, mint_address: str) -> None:
        """Remove a mint from this watcher's interest set. No-op if absent."""
        with self._lock:
            if mint_address not in self._mints:
                return
            self._mints.discard(mint_address)
            self._latest.pop(mint_address, None)
        if self._subscription is not None:
            self._feed.untrack(mint_address, owner=self)

    def get(self, mint_address: str) -> PriceSample | None:
        """Latest sample seen for ``mint_address``, or None if none yet."""
        with self._lock:
            return self._latest.get(mint_address)

    @property
    def prices(self) -> dict[str, PriceSample]:
        """Snapshot of the latest sample per watched mint."""
        with self._lock:
            return dict(self._latest)

    @property
    def mints(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._mints)

    @property
    def version(self) -> int:
        """Bumped on every accepted sample. Useful for change detection."""
        return self._version

    @property
    def is_connected(self) -> bool:
        return self._subscription is not None and self._feed.is_running

    def _on_sample(self, sample: PriceSample) -> None:
        with self._lock:
            if sample.mint_address not in self._mints:
                return
            self._latest[sample.mint_address] = sample
            self._version += 1
        if self._on_update is not None:
            self._on_update(sample)

    def __enter__(self) -> PriceWatcher:
        return self.attach()

    def __exit__(self, *exc_info) -> None:
        self.detach()
