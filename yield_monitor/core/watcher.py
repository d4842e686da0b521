"""
Watcher - One monitoring tick from a request payload.

Validates the request, fetches metrics, records them and evaluates alerts,
and shapes the output as JSON-ready dicts.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..config.settings import DEFAULT_CHAINS, VERSION
from .aggregator import MetricsAggregator
from .engine import DeltaAlertEngine
from .models import (
    InputValidationError,
    ThresholdRules,
    resolve_threshold_rules,
    utc_now,
)

logger = logging.getLogger(__name__)


def _string_list(payload: Mapping[str, Any], name: str, default: List[str]) -> List[str]:
    value = payload.get(name)
    if value is None:
        return list(default)
    if not isinstance(value, (list, tuple)):
        raise InputValidationError(f"{name} must be a list of strings")
    for item in value:
        if not isinstance(item, str):
            raise InputValidationError(f"{name} must be a list of strings, got {item!r}")
    return list(value)


@dataclass
class WatchRequest:
    """Parameters of a watch tick."""
    protocol_ids: List[str] = field(default_factory=list)
    pools: List[str] = field(default_factory=list)
    chains: List[str] = field(default_factory=lambda: list(DEFAULT_CHAINS))
    threshold_rules: Optional[ThresholdRules] = None

    @classmethod
    def from_dict(cls, payload: Optional[Mapping[str, Any]]) -> "WatchRequest":
        """
        Parse and validate a request payload. Unknown keys are ignored.

        Raises:
            InputValidationError: on a malformed payload
        """
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise InputValidationError("request body must be an object")

        rules = payload.get("threshold_rules")
        return cls(
            protocol_ids=_string_list(payload, "protocol_ids", []),
            pools=_string_list(payload, "pools", []),
            chains=_string_list(payload, "chains", DEFAULT_CHAINS),
            threshold_rules=resolve_threshold_rules(rules) if rules is not None else None,
        )


class Watcher:
    """Runs watch ticks against an aggregator and an engine."""

    def __init__(self, aggregator: MetricsAggregator = None, engine: DeltaAlertEngine = None):
        self.aggregator = aggregator or MetricsAggregator()
        self.engine = engine or DeltaAlertEngine()

    def watch(self, request: Any = None) -> Dict[str, Any]:
        """
        Run one tick.

        Args:
            request: WatchRequest or a raw payload dict

        Returns:
            Dict with pool_metrics, deltas, alerts and a summary
        """
        if not isinstance(request, WatchRequest):
            request = WatchRequest.from_dict(request)

        metrics = self.aggregator.fetch_pool_metrics(
            request.protocol_ids,
            request.pools,
            request.chains,
        )
        tick = self.engine.process_tick(metrics, request.threshold_rules)

        if tick.alerts:
            logger.warning(f"Watch tick triggered {len(tick.alerts)} alerts")

        return {
            "pool_metrics": [m.to_dict() for m in metrics],
            "deltas": [d.to_dict() for d in tick.deltas],
            "alerts": [a.to_dict() for a in tick.alerts],
            "summary": {
                "total_pools_monitored": len(metrics),
                "alerts_triggered": len(tick.alerts),
                "timestamp": utc_now().isoformat(),
            },
        }

    def health(self) -> Dict[str, Any]:
        stats = self.engine.get_stats()
        return {
            "status": "healthy",
            "timestamp": utc_now().isoformat(),
            "pools_tracked": stats["key_count"],
            "total_alerts": stats["total_alerts"],
            "version": VERSION,
        }
