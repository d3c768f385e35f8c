"""Shared counters mutated by the worker threads."""

import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class StatsSnapshot:
    """Settled view of the counters, used for the final summary."""
    checked: int
    updated: int
    unclean: int
    total: int

    def summary_line(self) -> str:
        return f"Checked: {self.checked}, Updated: {self.updated}, Unclean: {self.unclean}"


class SharedStats:
    """Thread-safe checked/updated/unclean counters with a fixed total.

    Counters only move through the ``increment_*`` methods; each one holds
    the lock for a single read-modify-write so no increment is lost.
    """

    def __init__(self, total: int):
        if total < 0:
            raise ValueError("total must be non-negative")
        self._total = total
        self._checked = 0
        self._updated = 0
        self._unclean = 0
        self._lock = threading.Lock()

    @property
    def total(self) -> int:
        return self._total

    def increment_checked(self) -> int:
        """Count a dequeued task.

        Returns:
            The checked count including this task
        """
        with self._lock:
            self._checked += 1
            return self._checked

    def increment_updated(self) -> int:
        with self._lock:
            self._updated += 1
            return self._updated

    def increment_unclean(self) -> int:
        with self._lock:
            self._unclean += 1
            return self._unclean

    def snapshot(self) -> StatsSnapshot:
        with self._lock:
            return StatsSnapshot(
                checked=self._checked,
                updated=self._updated,
                unclean=self._unclean,
                total=self._total
            )
