"""
Alert System - Delta computation, threshold checks and the bounded alert log.

Only breaches are logged; passing deltas leave no trace in the log.
"""

import logging
from typing import List

from ..config.settings import LIMITS
from .models import (
    Alert,
    AlertType,
    Delta,
    PoolMetric,
    Severity,
    ThresholdRules,
)

logger = logging.getLogger(__name__)

# Denominator floors so near-zero baselines give finite changes
MIN_APY_BASE = 0.01
MIN_TVL_BASE = 1.0


def percent_change(previous: float, current: float, floor: float) -> float:
    """Relative change in percent against max(previous, floor)."""
    return (current - previous) / max(previous, floor) * 100


def compute_delta(key: str, previous: PoolMetric, current: PoolMetric) -> Delta:
    """Compare the newest observation against the one right before it."""
    return Delta(
        pool=key,
        apy_change_percent=percent_change(previous.apy, current.apy, MIN_APY_BASE),
        tvl_change_percent=percent_change(previous.tvl, current.tvl, MIN_TVL_BASE),
        previous_apy=previous.apy,
        current_apy=current.apy,
        previous_tvl=previous.tvl,
        current_tvl=current.tvl,
    )


def check_threshold(change: float, threshold: float) -> bool:
    """A change breaches only when its magnitude strictly exceeds the threshold."""
    return abs(change) > threshold


def severity_for(change: float, threshold: float) -> Severity:
    return Severity.HIGH if abs(change) > threshold * 2 else Severity.MEDIUM


def _direction(change: float) -> str:
    return "increased" if change > 0 else "decreased"


def check_delta_against_thresholds(delta: Delta, rules: ThresholdRules) -> List[Alert]:
    """
    Check one delta against the APY and TVL change thresholds.

    Args:
        delta: Delta for a single pool
        rules: Resolved threshold rules

    Returns:
        Triggered alerts, APY first (empty if none)
    """
    triggered = []

    apy_change = delta.apy_change_percent
    if check_threshold(apy_change, rules.apy_change_threshold):
        triggered.append(Alert(
            type=AlertType.APY_SPIKE if apy_change > 0 else AlertType.APY_DROP,
            pool=delta.pool,
            change=apy_change,
            threshold=rules.apy_change_threshold,
            severity=severity_for(apy_change, rules.apy_change_threshold),
            message=(
                f"APY {_direction(apy_change)} by {abs(apy_change):.2f}% "
                f"(from {delta.previous_apy:.2f}% to {delta.current_apy:.2f}%)"
            ),
        ))

    tvl_change = delta.tvl_change_percent
    if check_threshold(tvl_change, rules.tvl_change_threshold):
        triggered.append(Alert(
            type=AlertType.TVL_SPIKE if tvl_change > 0 else AlertType.TVL_DRAIN,
            pool=delta.pool,
            change=tvl_change,
            threshold=rules.tvl_change_threshold,
            severity=severity_for(tvl_change, rules.tvl_change_threshold),
            message=(
                f"TVL {_direction(tvl_change)} by {abs(tvl_change):.2f}% "
                f"(from ${delta.previous_tvl:.2f} to ${delta.current_tvl:.2f})"
            ),
        ))

    for alert in triggered:
        logger.warning(f"[{alert.pool}] {alert.message} [{alert.severity.value}]")

    return triggered


class AlertLog:
    """Global alert log, bulk-trimmed to the newest `max_entries`."""

    def __init__(self, max_entries: int = LIMITS["alert_log_size"]):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._alerts: List[Alert] = []

    def extend(self, alerts: List[Alert]) -> int:
        """
        Append alerts and trim the oldest past the cap.

        Returns:
            Number of alerts dropped by the trim
        """
        self._alerts.extend(alerts)
        overflow = len(self._alerts) - self.max_entries
        if overflow > 0:
            del self._alerts[:overflow]
            return overflow
        return 0

    def recent(self, limit: int) -> List[Alert]:
        """Most recent `limit` alerts, newest last."""
        if limit <= 0:
            return []
        return self._alerts[-limit:]

    def __len__(self) -> int:
        return len(self._alerts)
