"""
Record types shared by the fetchers, history store and alert engine.

All records are plain dataclasses. PoolMetric is frozen: once a fetcher
produces it, nothing downstream changes it.
"""

import math
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from ..config.settings import DEFAULT_THRESHOLDS


class InputValidationError(ValueError):
    """Malformed tick or watch parameters. Raised before any state changes."""


class AlertType(Enum):
    APY_SPIKE = "apy_spike"
    APY_DROP = "apy_drop"
    TVL_SPIKE = "tvl_spike"
    TVL_DRAIN = "tvl_drain"


class Severity(Enum):
    MEDIUM = "medium"
    HIGH = "high"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def make_pool_key(protocol: str, chain: str, pool: str) -> str:
    """Build the `protocol:chain:pool-symbol` grouping key."""
    return f"{protocol}:{chain}:{pool}"


@dataclass(frozen=True)
class PoolMetric:
    """One observation of a pool's yield and liquidity."""
    protocol: str
    chain: str
    pool: str
    address: str
    apy: float  # percent
    tvl: float  # USD
    timestamp: datetime = field(default_factory=utc_now)

    @property
    def key(self) -> str:
        return make_pool_key(self.protocol, self.chain, self.pool)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "protocol": self.protocol,
            "chain": self.chain,
            "pool": self.pool,
            "address": self.address,
            "apy": self.apy,
            "tvl": self.tvl,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class Delta:
    """Change between the two most recent observations of a pool."""
    pool: str
    apy_change_percent: float
    tvl_change_percent: float
    previous_apy: float
    current_apy: float
    previous_tvl: float
    current_tvl: float
    time_window: str = "1_block"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pool": self.pool,
            "apy_change_percent": self.apy_change_percent,
            "tvl_change_percent": self.tvl_change_percent,
            "time_window": self.time_window,
            "previous_apy": self.previous_apy,
            "current_apy": self.current_apy,
            "previous_tvl": self.previous_tvl,
            "current_tvl": self.current_tvl,
        }


@dataclass(frozen=True)
class Alert:
    """A threshold breach on one pool."""
    type: AlertType
    pool: str
    change: float
    threshold: float
    severity: Severity
    message: str
    timestamp: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "pool": self.pool,
            "change": self.change,
            "threshold": self.threshold,
            "severity": self.severity.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class ThresholdRules:
    """
    Alert thresholds in percent.

    Only the two *_change_threshold fields drive alerts; they apply to both
    directions. apy_drop_threshold and tvl_drain_threshold are accepted and
    carried so callers can send the full rule set.
    """
    apy_change_threshold: float = DEFAULT_THRESHOLDS["apy_change_threshold"]
    tvl_change_threshold: float = DEFAULT_THRESHOLDS["tvl_change_threshold"]
    apy_drop_threshold: float = DEFAULT_THRESHOLDS["apy_drop_threshold"]
    tvl_drain_threshold: float = DEFAULT_THRESHOLDS["tvl_drain_threshold"]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ThresholdRules":
        """
        Build rules from a partial mapping.

        Missing or None fields take their defaults, unknown keys are ignored.

        Raises:
            InputValidationError: if data is not a mapping or a value is not
                a finite number
        """
        if not isinstance(data, Mapping):
            raise InputValidationError(
                f"threshold_rules must be an object, got {type(data).__name__}"
            )

        values = {}
        for f in fields(cls):
            value = data.get(f.name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InputValidationError(f"{f.name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise InputValidationError(f"{f.name} must be finite, got {value!r}")
            values[f.name] = float(value)

        return cls(**values)

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def resolve_threshold_rules(rules: Optional[Any] = None) -> ThresholdRules:
    """Merge caller rules over the defaults. None means all defaults."""
    if rules is None:
        return ThresholdRules()
    if isinstance(rules, ThresholdRules):
        return rules
    return ThresholdRules.from_dict(rules)


@dataclass
class TickResult:
    """Deltas and newly triggered alerts from one tick."""
    deltas: List[Delta] = field(default_factory=list)
    alerts: List[Alert] = field(default_factory=list)
