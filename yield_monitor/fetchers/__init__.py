"""
Metric fetchers.

Each fetcher returns a list of PoolMetric and never raises: a source that
fails or is not configured contributes an empty list.

Available fetchers:
- aave: Aave V3 reserves (on-chain)
- compound: Compound V3 base market (on-chain)
- defillama: DefiLlama yields dataset (HTTP)
"""

from .aave import fetch_reserve_metrics
from .compound import fetch_market_metrics
from .defillama import fetch_aggregated_metrics

__all__ = [
    "fetch_reserve_metrics",
    "fetch_market_metrics",
    "fetch_aggregated_metrics",
]
