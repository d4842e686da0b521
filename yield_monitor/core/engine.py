"""
Delta / Alert Engine - Records a tick of metrics and evaluates thresholds.

Per metric, in input order:
1. Record into the pool's history
2. With two or more observations, compute the delta newest vs. previous
3. Check APY and TVL changes against the resolved threshold rules
Alerts from the tick are appended to the global log once, at the end.
"""

import logging
from typing import Any, Dict, List, Optional

from ..config.settings import DEFAULT_ALERT_LIMIT
from .alerts import check_delta_against_thresholds, compute_delta
from .models import (
    Alert,
    InputValidationError,
    PoolMetric,
    TickResult,
    resolve_threshold_rules,
)
from .state import MonitorState

logger = logging.getLogger(__name__)


class DeltaAlertEngine:
    """
    Stateful delta and alert evaluation over a MonitorState.

    Args:
        state: State container to use; a fresh empty one by default
    """

    def __init__(self, state: MonitorState = None):
        self.state = state if state is not None else MonitorState()

    def process_tick(self, metrics: List[PoolMetric], rules: Optional[Any] = None) -> TickResult:
        """
        Record a tick of metrics and evaluate alerts.

        Args:
            metrics: Observations from one fetch, in source order
            rules: ThresholdRules, a partial mapping of rule values, or None
                for the defaults

        Returns:
            TickResult with this tick's deltas and newly triggered alerts

        Raises:
            InputValidationError: on malformed rules or metrics. Nothing is
                recorded in that case.
        """
        resolved = resolve_threshold_rules(rules)
        if not isinstance(metrics, (list, tuple)):
            raise InputValidationError(
                f"metrics must be a list of PoolMetric records, got {type(metrics).__name__}"
            )
        metrics = list(metrics)
        for metric in metrics:
            if not isinstance(metric, PoolMetric):
                raise InputValidationError(
                    f"metrics must contain PoolMetric records, got {type(metric).__name__}"
                )

        result = TickResult()

        with self.state.exclusive() as state:
            for metric in metrics:
                key = state.history.record(metric)

                pair = state.history.latest_pair(key)
                if pair is None:
                    continue

                previous, current = pair
                delta = compute_delta(key, previous, current)
                result.deltas.append(delta)
                result.alerts.extend(check_delta_against_thresholds(delta, resolved))

            dropped = state.alert_log.extend(result.alerts)

        if dropped:
            logger.debug(f"Alert log trimmed {dropped} oldest alerts")
        logger.info(
            f"Processed {len(metrics)} metrics: "
            f"{len(result.deltas)} deltas, {len(result.alerts)} alerts"
        )
        return result

    def get_alerts(self, limit: int = DEFAULT_ALERT_LIMIT) -> List[Alert]:
        """Most recent `limit` alerts across all ticks, newest last."""
        with self.state.exclusive() as state:
            return state.alert_log.recent(limit)

    def get_history(self, key: str) -> List[PoolMetric]:
        """Retained observations for a pool key, oldest first."""
        with self.state.exclusive() as state:
            return state.history.read(key)

    def get_stats(self) -> Dict[str, int]:
        with self.state.exclusive() as state:
            return {
                "key_count": state.history.key_count(),
                "total_alerts": len(state.alert_log),
            }
