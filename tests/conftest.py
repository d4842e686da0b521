"""
Pytest configuration and fixtures for the DeFi yield monitor.

This file contains shared fixtures used across all test modules.
Fixtures follow the pattern: factory functions with mocked external calls.
"""

import pytest
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List
from unittest.mock import MagicMock, patch

from yield_monitor.core.engine import DeltaAlertEngine
from yield_monitor.core.models import PoolMetric
from yield_monitor.core.registry import ProtocolRegistry
from yield_monitor.core.state import MonitorState


# =============================================================================
# METRIC FIXTURES
# =============================================================================

@pytest.fixture
def metric_factory():
    """
    Factory fixture for creating PoolMetric records.

    Usage:
        def test_something(metric_factory):
            metric = metric_factory(apy=12.5, pool="WETH")
    """
    def _create_metric(**overrides) -> PoolMetric:
        base = {
            "protocol": "aave_v3",
            "chain": "base",
            "pool": "USDC",
            "address": "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",
            "apy": 5.0,
            "tvl": 1_000_000.0,
            "timestamp": datetime(2024, 1, 1, tzinfo=timezone.utc),
        }
        base.update(overrides)
        return PoolMetric(**base)

    return _create_metric


@pytest.fixture
def registry() -> ProtocolRegistry:
    return ProtocolRegistry()


@pytest.fixture
def engine() -> DeltaAlertEngine:
    """Engine with a fresh, empty state."""
    return DeltaAlertEngine(MonitorState())


# =============================================================================
# MOCK FIXTURES FOR ON-CHAIN CALLS
# =============================================================================

USDC_BASE = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
WETH_BASE = "0x4200000000000000000000000000000000000006"

RAY = 10 ** 27


def reserve_data(total_atoken: int, liquidity_rate: int) -> tuple:
    """getReserveData output tuple with only the fields the fetcher reads set."""
    return (0, 0, total_atoken, 0, 0, liquidity_rate, 0, 0, 0, RAY, RAY, 1704067200)


@pytest.fixture
def mock_pool_data_provider():
    """
    Mock AaveProtocolDataProvider with two reserves.

    USDC: liquidityRate 1e24 -> APY 3.1536, 2.5M aTokens
    WETH: liquidityRate 2e24 -> APY 6.3072, 1.2K aTokens
    """
    reserves = {
        USDC_BASE: reserve_data(2_500_000 * 10 ** 18, RAY // 1000),
        WETH_BASE: reserve_data(1_200 * 10 ** 18, 2 * RAY // 1000),
    }

    mock = MagicMock()
    mock.functions.getAllReservesTokens.return_value.call.return_value = [
        ("USDC", USDC_BASE),
        ("WETH", WETH_BASE),
    ]
    mock.functions.getReserveData.side_effect = (
        lambda address: MagicMock(**{"call.return_value": reserves[address]})
    )
    return mock


@pytest.fixture
def mock_comet():
    """
    Mock Compound V3 Comet contract.

    supplyRate 1e12 -> APY 31.53, 150M USDC supplied.
    """
    mock = MagicMock()
    mock.functions.getUtilization.return_value.call.return_value = 850_000_000_000_000_000
    mock.functions.getSupplyRate.return_value.call.return_value = 10 ** 12
    mock.functions.totalSupply.return_value.call.return_value = 150_000_000 * 10 ** 6
    return mock


@pytest.fixture
def patch_contract():
    """
    Patch web3 setup in an on-chain fetcher module and return a given contract.

    Usage:
        def test_x(patch_contract, mock_comet):
            with patch_contract("compound", mock_comet):
                fetch_market_metrics("base")
    """
    @contextmanager
    def _patch(module: str, contract):
        target = f"yield_monitor.fetchers.{module}"
        with patch(f"{target}.get_web3", return_value=MagicMock()) as mock_get_web3, \
                patch(f"{target}.get_contract", return_value=contract):
            yield mock_get_web3

    return _patch


# =============================================================================
# MOCK FIXTURES FOR THE DEFILLAMA API
# =============================================================================

@pytest.fixture
def llama_pools() -> List[Dict[str, Any]]:
    """Sample records from the DefiLlama yields dataset."""
    return [
        {"project": "aave-v3", "chain": "Ethereum", "symbol": "USDC",
         "pool": "aa70268e-4b52-42bf-a116-608b370f9501", "apy": 4.12, "tvlUsd": 350_000_000},
        {"project": "compound-v3", "chain": "Base", "symbol": "USDC",
         "pool": "0c8567f8-ba5b-41ad-80de-00a71895eb19", "apy": 6.8, "tvlUsd": 42_000_000},
        {"project": "lido", "chain": "Ethereum", "symbol": "STETH",
         "pool": "747c1d2a-c668-4682-b9f9-296708a3dd90", "apy": None, "tvlUsd": None},
        {"project": "Morpho-Blue", "chain": "Base", "symbol": "WETH",
         "pool": "e1b5a1e4-0a1f-4b0a-9d6c-cf1c1c5bd6b2", "apy": 2.3, "tvlUsd": 9_500_000},
    ]


@pytest.fixture
def mock_requests_get(llama_pools):
    """
    Mock requests.get in the DefiLlama fetcher.

    Usage:
        def test_fetch(mock_requests_get):
            # requests.get is already mocked
            metrics = fetch_aggregated_metrics()
    """
    with patch("yield_monitor.fetchers.defillama.requests.get") as mock_get:
        mock_response = MagicMock()
        mock_response.json.return_value = {"status": "success", "data": llama_pools}
        mock_response.status_code = 200
        mock_get.return_value = mock_response
        yield mock_get

