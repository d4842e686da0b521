"""Core monitoring components."""

from .models import (
    Alert,
    AlertType,
    Delta,
    InputValidationError,
    PoolMetric,
    Severity,
    ThresholdRules,
    TickResult,
    make_pool_key,
    resolve_threshold_rules,
)

from .registry import ChainConfig, ProtocolRegistry, SUPPORTED_PROTOCOLS

from .history import HistoryStore

from .alerts import (
    AlertLog,
    check_delta_against_thresholds,
    check_threshold,
    compute_delta,
)

from .state import MonitorState

from .engine import DeltaAlertEngine

from .aggregator import MetricsAggregator

from .watcher import WatchRequest, Watcher

__all__ = [
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
    "resolve_threshold_rules",
    # Registry
    "ChainConfig",
    "ProtocolRegistry",
    "SUPPORTED_PROTOCOLS",
    # History / alerts
    "HistoryStore",
    "AlertLog",
    "check_delta_against_thresholds",
    "check_threshold",
    "compute_delta",
    "MonitorState",
    # Engine
    "DeltaAlertEngine",
    # Aggregation
    "MetricsAggregator",
    "WatchRequest",
    "Watcher",
]
