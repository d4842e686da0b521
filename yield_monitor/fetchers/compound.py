"""
Compound V3 Fetcher - Base-asset supply APY and TVL from a Comet market.
"""

import logging
from typing import List

from ..core.models import PoolMetric
from ..core.registry import ProtocolRegistry
from .rpc import get_contract, get_web3

logger = logging.getLogger(__name__)

PROTOCOL_ID = "compound_v3"
BASE_ASSET = "USDC"

SECONDS_PER_YEAR = 31_536_000
RATE_SCALE = 10 ** 18
TVL_DECIMALS = 6

COMET_ABI = [
    {"inputs": [], "name": "getUtilization", "outputs": [{"type": "uint256"}], "stateMutability": "view", "type": "function"},
    {"inputs": [{"type": "uint256"}], "name": "getSupplyRate", "outputs": [{"type": "uint64"}], "stateMutability": "view", "type": "function"},
    {"inputs": [], "name": "totalSupply", "outputs": [{"type": "uint256"}], "stateMutability": "view", "type": "function"},
]


def supply_rate_to_apy(supply_rate: int) -> float:
    """Per-second supply rate (1e18) -> APY percent."""
    supply_apr = supply_rate * SECONDS_PER_YEAR * 100 // RATE_SCALE
    return supply_apr / 100


def fetch_market_metrics(chain: str, registry: ProtocolRegistry = None) -> List[PoolMetric]:
    """
    Fetch supply APY and TVL of the Compound V3 base market on a chain.

    Returns:
        Single-element list, or empty if not configured or any call fails
    """
    registry = registry or ProtocolRegistry()
    config = registry.get_chain_config(PROTOCOL_ID, chain)
    if config is None:
        return []

    try:
        w3 = get_web3(config.rpc_url, chain)
        comet = get_contract(w3, config.contract_address, COMET_ABI)

        utilization = comet.functions.getUtilization().call()
        supply_rate = comet.functions.getSupplyRate(utilization).call()
        total_supply = comet.functions.totalSupply().call()

        metric = PoolMetric(
            protocol=PROTOCOL_ID,
            chain=chain,
            pool=BASE_ASSET,
            address=config.contract_address,
            apy=supply_rate_to_apy(supply_rate),
            tvl=total_supply / 10 ** TVL_DECIMALS,
        )
        logger.info(f"Compound {chain}: APY={metric.apy:.2f}%, TVL=${metric.tvl:,.2f}")
        return [metric]

    except Exception as e:
        logger.error(f"Error fetching Compound metrics for {chain}: {e}")
        return []
