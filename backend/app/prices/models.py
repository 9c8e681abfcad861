"""Data models for the price feed."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from .defaults import DEFAULT_CURRENCY


@dataclass(frozen=True, slots=True)
class PriceSample:
    """Immutable price observation for a single mint at a point in time.

    A newer sample for the same mint replaces this one wholesale; fields are
    never merged across samples.
    """

    mint_address: str
    price: float
    currency: str = DEFAULT_CURRENCY
    timestamp: float = field(default_factory=time.time)  # Unix seconds
    change_pct: float = 0.0
    volume: float = 0.0

    @property
    def direction(self) -> str:
        """'up', 'down', or 'flat'."""
        if self.change_pct > 0:
            return "up"
        elif self.change_pct < 0:
            return "down"
        return "flat"

    def to_dict(self) -> dict:
        """Serialize for JSON / SSE transmission."""
        return {
            "mint_address": self.mint_address,
            "price": self.price,
            "currency": self.currency,
            "timestamp": self.timestamp,
            "change_pct": self.change_pct,
            "volume": self.volume,
            "direction": self.direction,
        }
