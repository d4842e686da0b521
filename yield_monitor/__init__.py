"""
DeFi Yield Monitor.

Samples APY and TVL for lending pools from on-chain reads and DefiLlama, keeps
a bounded history per pool and raises alerts on large tick-over-tick changes.

Quick Start:
    from yield_monitor import Watcher

    watcher = Watcher()
    output = watcher.watch({"protocol_ids": ["aave_v3"], "chains": ["base"]})
    print(f"Triggered {output['summary']['alerts_triggered']} alerts")
"""

__version__ = "1.0.0"

from .core import (
    # Models
    Alert,
    AlertType,
    Delta,
    InputValidationError,
    PoolMetric,
    Severity,
    ThresholdRules,
    TickResult,
    make_pool_key,
    # Components
    ProtocolRegistry,
    HistoryStore,
    MonitorState,
    DeltaAlertEngine,
    MetricsAggregator,
    WatchRequest,
    Watcher,
)

from .fetchers import (
    fetch_reserve_metrics,
    fetch_market_metrics,
    fetch_aggregated_metrics,
)

__all__ = [
    "__version__",
    # Models
    "Alert",
    "AlertType",
    "Delta",
    "InputValidationError",
    "PoolMetric",
    "Severity",
    "ThresholdRules",
    "TickResult",
    "make_pool_key",
    # Components
    "ProtocolRegistry",
    "HistoryStore",
    "MonitorState",
    "DeltaAlertEngine",
    "MetricsAggregator",
    "WatchRequest",
    "Watcher",
    # Fetchers
    "fetch_reserve_metrics",
    "fetch_market_metrics",
    "fetch_aggregated_metrics",
]
