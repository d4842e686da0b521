"""
Yield monitor configuration.

RPC endpoints, aggregator settings, retention limits and default thresholds.
"""

import os

# RPC endpoints per chain - override with environment variables
RPC_URLS = {
    "base": os.getenv("BASE_RPC_URL", "https://mainnet.base.org"),
    "ethereum": os.getenv("ETH_RPC_URL", "https://eth.llamarpc.com"),
    "polygon": os.getenv("POLYGON_RPC_URL", "https://polygon-rpc.com"),
}

# Chains that need the POA extraData middleware
POA_CHAINS = {"base", "polygon"}

# DefiLlama yields dataset
AGGREGATOR_CONFIG = {
    "url": os.getenv("DEFILLAMA_YIELDS_URL", "https://yields.llama.fi/pools"),
    "timeout_seconds": float(os.getenv("AGGREGATOR_TIMEOUT_SECONDS", 8)),
    "max_unfiltered_records": 30,
}

# Cost / latency bounds and in-memory retention
LIMITS = {
    "max_reserves_per_fetch": 10,
    "max_chains_per_fetcher": 2,
    "history_per_pool": 100,
    "alert_log_size": 1000,
    "fetch_workers": int(os.getenv("FETCH_WORKERS", 4)),
}

# Alert thresholds (percent)
DEFAULT_THRESHOLDS = {
    "apy_change_threshold": 5.0,
    "tvl_change_threshold": 20.0,
    "apy_drop_threshold": 3.0,    # carried, not consulted
    "tvl_drain_threshold": 15.0,  # carried, not consulted
}

DEFAULT_CHAINS = ["base", "ethereum"]

DEFAULT_ALERT_LIMIT = 50

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

VERSION = "1.0.0"
