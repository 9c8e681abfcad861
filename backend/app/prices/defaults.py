"""Defaults for the simulated NFT price feed."""

# All listings on the marketplace are quoted in SOL
DEFAULT_CURRENCY = "SOL"

# Floor applied to every generated price
MIN_PRICE = 0.01

# Base prices are derived from the mint hash into [BASE_PRICE_FLOOR, BASE_PRICE_FLOOR + BASE_PRICE_SPAN)
BASE_PRICE_FLOOR = 10
BASE_PRICE_SPAN = 100

# Per-tick perturbation band: +/-5% of the base price
MAX_FLUCTUATION = 0.05

# Simulated 24h volume is uniform in [0, MAX_VOLUME)
MAX_VOLUME = 1000.0

# Tick period in seconds
DEFAULT_UPDATE_INTERVAL = 3.0

# Environment variables read by the factory
INTERVAL_ENV_VAR = "PRICE_UPDATE_INTERVAL_MS"
SEED_ENV_VAR = "PRICE_FEED_SEED"
