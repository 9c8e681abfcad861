"""Hash-seeded price fluctuation generator."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from functools import lru_cache

import numpy as np

from .defaults import (
    BASE_PRICE_FLOOR,
    BASE_PRICE_SPAN,
    DEFAULT_CURRENCY,
    MAX_FLUCTUATION,
    MAX_VOLUME,
    MIN_PRICE,
)
from .models import PriceSample

logger = logging.getLogger(__name__)


def _mint_hash(mint_address: str) -> int:
    """31x rolling hash over character codes, wrapped to a signed 32-bit int.

    Hashes Unicode code points. A browser hashing UTF-16 code units gets a
    different value for characters outside the Basic Multilingual Plane, such
    as emoji. Base58 mint addresses are ASCII and hash the same either way.
    """
    h = 0
    for ch in mint_address:
        h = ((h << 5) - h + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


@lru_cache(maxsize=4096)
def base_price(mint_address: str) -> float:
    """Stable reference price for a mint, in [10, 110) SOL."""
    return float(abs(_mint_hash(mint_address)) % BASE_PRICE_SPAN + BASE_PRICE_FLOOR)


def apply_fluctuation(base: float, fluctuation: float) -> float:
    """Perturb ``base`` by a relative ``fluctuation``, never going below MIN_PRICE."""
    return max(MIN_PRICE, base * (1 + fluctuation))


class FluctuationGenerator:
    """Produces PriceSamples by jittering each mint's base price.

    Math:
        u      ~ U[0, 1)
        f      = (u - 0.5) * 2 * max_fluctuation     # default +/-5%
        price  = max(0.01, base_price(mint) * (1 + f))

    Every sample is independent of the previous one: prices oscillate around
    the base price rather than drifting.
    """

    def __init__(
        self,
        currency: str = DEFAULT_CURRENCY,
        max_fluctuation: float = MAX_FLUCTUATION,
        max_volume: float = MAX_VOLUME,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self._currency = currency
        self._max_fluctuation = max_fluctuation
        self._max_volume = max_volume
        self._rng = rng if rng is not None else np.random.default_rng(seed)

    @property
    def currency(self) -> str:
        return self._currency

    def sample(self, mint_address: str, timestamp: float) -> PriceSample:
        """Generate a single sample for one mint."""
        return self.step([mint_address], timestamp)[0]

    def step(self, mint_addresses: Sequence[str], timestamp: float) -> list[PriceSample]:
        """Generate one sample per mint, in input order, sharing ``timestamp``."""
        n = len(mint_addresses)
        if n == 0:
            return []

        # One batch of uniforms per tick: column 0 drives price, column 1 volume
        draws = self._rng.random((n, 2))
        fluctuations = (draws[:, 0] - 0.5) * 2 * self._max_fluctuation
        volumes = draws[:, 1] * self._max_volume

        samples: list[PriceSample] = []
        for i, mint in enumerate(mint_addresses):
            fluctuation = float(fluctuations[i])
            samples.append(
                PriceSample(
                    mint_address=mint,
                    price=apply_fluctuation(base_price(mint), fluctuation),
                    currency=self._currency,
                    timestamp=timestamp,
                    change_pct=fluctuation * 100,
                    volume=float(volumes[i]),
                )
            )
        logger.debug("Generated %d price samples", n)
        return samples
