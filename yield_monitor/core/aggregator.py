"""
Metrics Aggregator - Routes a request to the sources that should serve it.

Source selection:
- DefiLlama: no protocol ids given, or any id that is not read on-chain
- Aave V3 / Compound V3: explicitly requested, or no protocol ids and at most
  two chains requested
On-chain sources only look at the first two chains. Output is concatenated
source by source, chain by chain, without de-duplication.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Sequence

from ..config.settings import LIMITS
from ..fetchers import (
    fetch_aggregated_metrics,
    fetch_market_metrics,
    fetch_reserve_metrics,
)
from .models import PoolMetric
from .registry import ProtocolRegistry

logger = logging.getLogger(__name__)

AAVE_V3 = "aave_v3"
COMPOUND_V3 = "compound_v3"


class MetricsAggregator:
    """
    Merge on-chain and aggregator metrics for one tick.

    Args:
        registry: Protocol registry handed to the on-chain fetchers
        aggregated_fetcher: f(protocol_filters) -> list of PoolMetric
        reserve_fetcher: f(chain, pools, registry=...) -> list of PoolMetric
        market_fetcher: f(chain, registry=...) -> list of PoolMetric
        max_workers: Thread pool size for per-chain fetches
    """

    def __init__(self, registry: ProtocolRegistry = None,
                 aggregated_fetcher: Callable = fetch_aggregated_metrics,
                 reserve_fetcher: Callable = fetch_reserve_metrics,
                 market_fetcher: Callable = fetch_market_metrics,
                 max_workers: int = LIMITS["fetch_workers"]):
        self.registry = registry or ProtocolRegistry()
        self.aggregated_fetcher = aggregated_fetcher
        self.reserve_fetcher = reserve_fetcher
        self.market_fetcher = market_fetcher
        self.max_workers = max_workers

    def should_fetch_aggregated(self, protocol_ids: Sequence[str]) -> bool:
        if not protocol_ids:
            return True
        return any(not self.registry.is_onchain(p) for p in protocol_ids)

    def should_fetch_onchain(self, protocol: str, protocol_ids: Sequence[str],
                             chains: Sequence[str]) -> bool:
        if protocol in protocol_ids:
            return True
        return not protocol_ids and len(chains) <= LIMITS["max_chains_per_fetcher"]

    def _fetch_per_chain(self, fetch: Callable[[str], List[PoolMetric]],
                         chains: Sequence[str]) -> List[PoolMetric]:
        """Run fetch for each chain concurrently; results stay in chain order."""
        chains = list(chains)[:LIMITS["max_chains_per_fetcher"]]
        if not chains:
            return []

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            per_chain = list(executor.map(fetch, chains))

        return [metric for chain_metrics in per_chain for metric in chain_metrics]

    def fetch_pool_metrics(self, protocol_ids: Sequence[str] = (),
                           pools: Sequence[str] = (),
                           chains: Sequence[str] = ("base",)) -> List[PoolMetric]:
        """
        Fetch metrics from every source selected for this request.

        Args:
            protocol_ids: Protocols to watch; empty means broad coverage
            pools: Reserve symbols / addresses for the Aave filter
            chains: Chains for the on-chain sources

        Returns:
            Concatenated metrics: DefiLlama, then Aave by chain, then Compound by chain
        """
        protocol_ids = list(protocol_ids)
        pools = list(pools)
        chains = list(chains)
        all_metrics = []

        if self.should_fetch_aggregated(protocol_ids):
            all_metrics.extend(self.aggregated_fetcher(protocol_ids))

        if self.should_fetch_onchain(AAVE_V3, protocol_ids, chains):
            all_metrics.extend(self._fetch_per_chain(
                lambda chain: self.reserve_fetcher(chain, pools, registry=self.registry),
                chains,
            ))

        if self.should_fetch_onchain(COMPOUND_V3, protocol_ids, chains):
            all_metrics.extend(self._fetch_per_chain(
                lambda chain: self.market_fetcher(chain, registry=self.registry),
                chains,
            ))

        logger.info(f"Collected {len(all_metrics)} pool metrics")
        return all_metrics
