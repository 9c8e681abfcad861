"""Observer list that fans price samples out to callbacks."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from threading import Lock

from .models import PriceSample

logger = logging.getLogger(__name__)

PriceCallback = Callable[[PriceSample], None]


class Subscription:
    """Handle returned by ``SubscriberRegistry.subscribe``.

    Disposing it (``sub.dispose()``, ``sub()`` or leaving a ``with`` block)
    removes exactly this callback. Disposal is idempotent.
    """

    __slots__ = ("_registry", "_key", "callback", "_active")

    def __init__(
        self,
        registry: SubscriberRegistry | None,
        key: int,
        callback: PriceCallback,
    ) -> None:
        self._registry = registry
        self._key = key
        self.callback = callback
        self._active = registry is not None

    @property
    def active(self) -> bool:
        return self._active

    def dispose(self) -> None:
        registry = self._registry
        if registry is not None:
            registry._remove(self)
        self._registry = None
        self._active = False

    def __call__(self) -> None:
        self.dispose()

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info) -> None:
        self.dispose()

    @classmethod
    def inert(cls, callback: PriceCallback) -> Subscription:
        """An already-disposed handle, for subscriptions that were never registered."""
        return cls(None, -1, callback)


class SubscriberRegistry:
    """Ordered, thread-safe set of price callbacks.

    Fan-out iterates a snapshot taken at the start of ``publish``, so callbacks
    may subscribe or unsubscribe while being notified. Callbacks run without the
    registry lock held. Each handle is re-checked right before its delivery, so
    a handle disposed from any thread is skipped by every delivery that has not
    started yet; a callback already running is allowed to finish.
    """

    def __init__(self) -> None:
        self._subscriptions: dict[int, Subscription] = {}
        self._keys = itertools.count()
        self._lock = Lock()

    def subscribe(self, callback: PriceCallback) -> Subscription:
        with self._lock:
            sub = Subscription(self, next(self._keys), callback)
            self._subscriptions[sub._key] = sub
            return sub

    def publish(self, sample: PriceSample) -> int:
        """Deliver ``sample`` to every subscriber in subscription order.

        A failing callback is logged and skipped; the rest still receive the
        sample. Returns the number of callbacks that completed.
        """
        with self._lock:
            snapshot = list(self._subscriptions.values())

        delivered = 0
        for sub in snapshot:
            if not sub.active:
                continue
            try:
                sub.callback(sample)
                delivered += 1
            except Exception:
                logger.exception(
                    "Price subscriber %r failed on update for %s",
                    sub.callback,
                    sample.mint_address,
                )
        return delivered

    def clear(self) -> None:
        """Dispose every subscription."""
        with self._lock:
            subs = list(self._subscriptions.values())
        for sub in subs:
            sub.dispose()

    def _remove(self, sub: Subscription) -> None:
        with self._lock:
            self._subscriptions.pop(sub._key, None)
            sub._active = False

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscriptions)
