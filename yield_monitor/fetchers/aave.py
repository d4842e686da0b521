"""
Aave V3 Fetcher - Supply APY and TVL per reserve from the PoolDataProvider.

Rates come back as ray (1e27) per-second values. APR is annualized linearly
and scaled down to the reported APY; TVL is the aToken supply at 18 decimals.
"""

import logging
from typing import List, Sequence

from ..config.settings import LIMITS
from ..core.models import PoolMetric
from ..core.registry import ProtocolRegistry
from .rpc import get_contract, get_web3

logger = logging.getLogger(__name__)

PROTOCOL_ID = "aave_v3"

RAY = 10 ** 27
SECONDS_PER_YEAR = 31_536_000
APY_DIVISOR = 10_000
TVL_DECIMALS = 18

# getReserveData output positions
TOTAL_ATOKEN_INDEX = 2
LIQUIDITY_RATE_INDEX = 5

POOL_DATA_PROVIDER_ABI = [
    {"inputs": [], "name": "getAllReservesTokens", "outputs": [{"components": [{"name": "symbol", "type": "string"}, {"name": "tokenAddress", "type": "address"}], "name": "", "type": "tuple[]"}], "stateMutability": "view", "type": "function"},
    {"inputs": [{"name": "asset", "type": "address"}], "name": "getReserveData", "outputs": [{"name": "unbacked", "type": "uint256"}, {"name": "accruedToTreasuryScaled", "type": "uint256"}, {"name": "totalAToken", "type": "uint256"}, {"name": "totalStableDebt", "type": "uint256"}, {"name": "totalVariableDebt", "type": "uint256"}, {"name": "liquidityRate", "type": "uint256"}, {"name": "variableBorrowRate", "type": "uint256"}, {"name": "stableBorrowRate", "type": "uint256"}, {"name": "averageStableBorrowRate", "type": "uint256"}, {"name": "liquidityIndex", "type": "uint256"}, {"name": "variableBorrowIndex", "type": "uint256"}, {"name": "lastUpdateTimestamp", "type": "uint40"}], "stateMutability": "view", "type": "function"},
]


def liquidity_rate_to_apy(liquidity_rate: int) -> float:
    """Ray per-second liquidity rate -> reported APY."""
    deposit_apr = liquidity_rate * SECONDS_PER_YEAR // RAY
    return deposit_apr / APY_DIVISOR


def matches_pool_filter(symbol: str, address: str, pools: Sequence[str]) -> bool:
    """True when no filter is set, or an entry names the reserve symbol or address."""
    if not pools:
        return True
    symbol = symbol.lower()
    address = address.lower()
    return any(symbol in p.lower() or p.lower() == address for p in pools)


def fetch_reserve_metrics(chain: str, pools: Sequence[str] = (),
                          registry: ProtocolRegistry = None) -> List[PoolMetric]:
    """
    Fetch supply APY and TVL for Aave V3 reserves on a chain.

    Args:
        chain: Chain id (e.g. 'base')
        pools: Optional reserve symbols / token addresses to keep
        registry: Protocol registry, default deployments if None

    Returns:
        PoolMetric per retained reserve. Empty if the chain is not configured
        or any call fails.
    """
    registry = registry or ProtocolRegistry()
    config = registry.get_chain_config(PROTOCOL_ID, chain)
    if config is None:
        return []

    try:
        w3 = get_web3(config.rpc_url, chain)
        provider = get_contract(w3, config.contract_address, POOL_DATA_PROVIDER_ABI)

        reserves = provider.functions.getAllReservesTokens().call()
        metrics = []

        for symbol, token_address in reserves[:LIMITS["max_reserves_per_fetch"]]:
            if not matches_pool_filter(symbol, token_address, pools):
                continue

            reserve_data = provider.functions.getReserveData(token_address).call()
            apy = liquidity_rate_to_apy(reserve_data[LIQUIDITY_RATE_INDEX])
            tvl = reserve_data[TOTAL_ATOKEN_INDEX] / 10 ** TVL_DECIMALS

            metrics.append(PoolMetric(
                protocol=PROTOCOL_ID,
                chain=chain,
                pool=symbol,
                address=token_address,
                apy=apy,
                tvl=tvl,
            ))

        logger.info(f"Fetched {len(metrics)} Aave reserves on {chain}")
        return metrics

    except Exception as e:
        logger.error(f"Error fetching Aave metrics for {chain}: {e}")
        return []
