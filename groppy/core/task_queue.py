"""Closeable FIFO channel of repository paths."""

import threading
from collections import deque
from typing import Deque, Iterable, Optional


class QueueClosedError(Exception):
    """Raised when putting into a closed queue."""


class TaskQueue:
    """Single-producer, multi-consumer queue that is filled once and closed.

    ``get`` blocks while the queue is open and empty, and returns None once
    it is closed and drained, which is the signal for a worker to stop.
    """

    def __init__(self, capacity: Optional[int] = None):
        self.capacity = capacity
        self._items: Deque[str] = deque()
        self._closed = False
        self._cond = threading.Condition()

    def put(self, repo_path: str) -> None:
        """Enqueue a task; never blocks.

        Raises:
            QueueClosedError: If close() was already called
            OverflowError: If the queue is at capacity
        """
        with self._cond:
            if self._closed:
                raise QueueClosedError("cannot put into a closed queue")
            if self.capacity is not None and len(self._items) >= self.capacity:
                raise OverflowError(f"queue is full ({self.capacity} tasks)")
            self._items.append(repo_path)
            self._cond.notify()

    def fill(self, repo_paths: Iterable[str]) -> None:
        """Enqueue every task, then close the queue."""
        for repo_path in repo_paths:
            self.put(repo_path)
        self.close()

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def get(self) -> Optional[str]:
        """Take the next task, or None once closed and empty."""
        with self._cond:
            while not self._items and not self._closed:
                self._cond.wait()
            if self._items:
                return self._items.popleft()
            return None

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)
