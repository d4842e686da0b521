"""
Monitor State - Owned container for pool history and the alert log.

Every read and write of monitor state goes through `lock`, so ticks from
several threads are serialized.
"""

import threading
from contextlib import contextmanager

from ..config.settings import LIMITS
from .alerts import AlertLog
from .history import HistoryStore


class MonitorState:
    """History store, alert log and the lock that guards both."""

    def __init__(self, history_size: int = LIMITS["history_per_pool"],
                 alert_log_size: int = LIMITS["alert_log_size"]):
        self.history = HistoryStore(max_entries=history_size)
        self.alert_log = AlertLog(max_entries=alert_log_size)
        self.lock = threading.Lock()

    @contextmanager
    def exclusive(self):
        """
        Hold the state lock for a block.

        Usage:
            with state.exclusive():
                state.history.record(metric)
        """
        with self.lock:
            yield self
