"""Thread-safe in-memory cache of the latest sample per mint."""

from __future__ import annotations

from threading import Lock

from .models import PriceSample


class PriceCache:
    """Latest PriceSample for each tracked mint.

    Writer: PriceFeed, once per sample per tick.
    Readers: ``PriceFeed.latest`` / ``get_prices``, the latest-price route.
    """

    def __init__(self) -> None:
        self._samples: dict[str, PriceSample] = {}
        self._lock = Lock()

    def put(self, sample: PriceSample) -> None:
        """Store ``sample`` as the latest for its mint, replacing any previous one."""
        with self._lock:
            self._samples[sample.mint_address] = sample

    def get(self, mint_address: str) -> PriceSample | None:
        """Latest sample for a single mint, or None if none yet."""
        with self._lock:
            return self._samples.get(mint_address)

    def get_all(self) -> dict[str, PriceSample]:
        """Snapshot of all current samples. Returns a shallow copy."""
        with self._lock:
            return dict(self._samples)

    def remove(self, mint_address: str) -> None:
        """Forget a mint (e.g. once nothing tracks it any more)."""
        with self._lock:
            self._samples.pop(mint_address, None)

    def clear(self) -> None:
        with self._lock:
            self._samples.clear()
