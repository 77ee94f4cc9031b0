"""
Single-flight guards for scheduled jobs
A tick that finds its job still running is skipped instead of queued
"""

import logging
import threading
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class JobAlreadyRunning(Exception):
    """Raised when a guarded job is entered while a previous run is in progress"""


class JobGuard:
    def __init__(self, name: str):
        self.name = name
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def hold(self):
        if not self._lock.acquire(blocking=False):
            logger.warning(f"⚠️ {self.name} is still running - skipping this tick")
            raise JobAlreadyRunning(self.name)
        try:
            yield self
        finally:
            self._lock.release()


# Process-wide guards, shared by the cron worker and the admin routes
deadline_sweep_guard = JobGuard("deadline_sweep")
deadline_reminder_guard = JobGuard("deadline_reminder")
