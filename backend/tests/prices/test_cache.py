"""Tests for PriceCache."""

from app.prices.cache import PriceCache
from app.prices.models import PriceSample


def _sample(mint: str, price: float, timestamp: float = 1.0) -> PriceSample:
    return PriceSample(mint_address=mint, price=price, timestamp=timestamp)


class TestPriceCache:
    """Unit tests for the PriceCache."""

    def test_put_and_get(self):
        """Test storing and retrieving a sample."""
        cache = PriceCache()
        sample = _sample("mint-A", 42.0)
        cache.put(sample)
        assert cache.get("mint-A") is sample

    def test_get_unknown(self):
        """Unknown mints return None."""
        assert PriceCache().get("mint-A") is None

    def test_newer_sample_replaces_previous(self):
        """A new sample fully replaces the old one."""
        cache = PriceCache()
        cache.put(_sample("mint-A", 42.0, timestamp=1.0))
        newer = _sample("mint-A", 43.0, timestamp=2.0)
        cache.put(newer)
        assert cache.get("mint-A") is newer

    def test_remove(self):
        """Test removing a mint from cache."""
        cache = PriceCache()
        cache.put(_sample("mint-A", 42.0))
        cache.remove("mint-A")
        assert cache.get("mint-A") is None

    def test_remove_nonexistent(self):
        """Test removing a mint that doesn't exist."""
        PriceCache().remove("mint-A")  # Should not raise

    def test_get_all(self):
        """Test getting all samples."""
        cache = PriceCache()
        cache.put(_sample("mint-A", 42.0))
        cache.put(_sample("mint-B", 17.0))
        assert set(cache.get_all()) == {"mint-A", "mint-B"}

    def test_clear(self):
        cache = PriceCache()
        cache.put(_sample("mint-A", 42.0))
        cache.clear()
        assert cache.get_all() == {}
