"""
History Store - Bounded per-pool series of PoolMetric observations.

Each pool key keeps at most `max_entries` observations, oldest evicted first.
The store itself is not synchronized; MonitorState owns the lock.
"""

from collections import deque
from typing import Deque, Dict, List, Optional, Tuple

from ..config.settings import LIMITS
from .models import PoolMetric


class HistoryStore:
    """In-memory FIFO history keyed by `protocol:chain:pool`."""

    def __init__(self, max_entries: int = LIMITS["history_per_pool"]):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._series: Dict[str, Deque[PoolMetric]] = {}

    def record(self, metric: PoolMetric) -> str:
        """
        Append a metric to its pool's series.

        Returns:
            The pool key the metric was recorded under
        """
        key = metric.key
        series = self._series.get(key)
        if series is None:
            series = deque(maxlen=self.max_entries)
            self._series[key] = series
        series.append(metric)
        return key

    def read(self, key: str) -> List[PoolMetric]:
        """Full retained series for key, oldest first. Empty if unknown."""
        return list(self._series.get(key, ()))

    def latest_pair(self, key: str) -> Optional[Tuple[PoolMetric, PoolMetric]]:
        """(previous, current) for key, or None with fewer than two observations."""
        series = self._series.get(key)
        if not series or len(series) < 2:
            return None
        return series[-2], series[-1]

    def key_count(self) -> int:
        return len(self._series)
