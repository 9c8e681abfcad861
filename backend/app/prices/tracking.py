"""Thread-safe registry of mints the feed is generating prices for."""

from __future__ import annotations

from collections.abc import Hashable
from threading import Lock

# Claim key used when the caller does not identify itself
_ANONYMOUS = object()


class TrackedSet:
    """Set of tracked mint addresses, built from per-owner claims.

    A mint stays tracked while at least one owner holds a claim on it. Callers
    that pass no owner share a single anonymous claim, so plain
    ``track``/``untrack`` pairs behave like ordinary set add/discard. Consumers
    that watch the same mint independently pass distinct owners and do not
    interfere with each other.
    """

    def __init__(self) -> None:
        self._claims: dict[str, set[Hashable]] = {}
        self._lock = Lock()

    def track(self, mint_address: str, owner: Hashable | None = None) -> None:
        """Add a claim on ``mint_address``. No-op if this owner already holds one."""
        key = _ANONYMOUS if owner is None else owner
        with self._lock:
            self._claims.setdefault(mint_address, set()).add(key)

    def untrack(self, mint_address: str, owner: Hashable | None = None) -> bool:
        """Drop this owner's claim. No-op if absent.

        Returns True when no claims remain, i.e. the mint is no longer tracked.
        """
        key = _ANONYMOUS if owner is None else owner
        with self._lock:
            owners = self._claims.get(mint_address)
            if owners is None:
                return True
            owners.discard(key)
            if owners:
                return False
            del self._claims[mint_address]
            return True

    def snapshot(self) -> list[str]:
        """Tracked mints in first-tracked order. Returns a copy."""
        with self._lock:
            return list(self._claims)

    def clear(self) -> None:
        with self._lock:
            self._claims.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._claims)

    def __contains__(self, mint_address: str) -> bool:
        with self._lock:
            return mint_address in self._claims
