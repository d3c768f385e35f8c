"""Repository manager for orchestrating a parallel update run."""

import logging
from dataclasses import dataclass
from typing import List, Optional

from .logger import console_through
from .stats import SharedStats, StatsSnapshot
from .task_queue import TaskQueue
from .types import RepoOutcome
from .updater import RepoUpdater
from .worker_pool import WorkerPool, STATUS_MESSAGE
from ..utils.progress import ProgressReporter

logger = logging.getLogger('groppy')


@dataclass
class SyncReport:
    """Settled counters and every outcome of one run."""
    stats: StatsSnapshot
    outcomes: List[RepoOutcome]


class RepoManager:
    """Manager for updating a set of repositories in parallel."""

    def __init__(self, max_workers: int = 4, updater: Optional[RepoUpdater] = None):
        """Initialize repository manager.

        Args:
            max_workers: Number of worker threads (at least 1)
            updater: Per-repository updater (default: fast-forward from origin)

        Raises:
            ValueError: If max_workers is less than 1
        """
        if max_workers < 1:
            raise ValueError("Number of threads must be at least 1")
        self.max_workers = max_workers
        self.updater = updater or RepoUpdater()

    def sync(self, repos: List[str], reporter: ProgressReporter) -> SyncReport:
        """Update every repository and wait for all workers to finish.

        Args:
            repos: Repository roots; each entry is processed once
            reporter: Progress display, finished before returning

        Returns:
            SyncReport with the final counters and outcomes
        """
        total = len(repos)
        stats = SharedStats(total)
        queue = TaskQueue(capacity=total)

        logger.info(f"Updating {total} repositories with {self.max_workers} workers")

        reporter.start(STATUS_MESSAGE.format(checked=0, total=total))
        reporter.reset_percent()
        queue.fill(repos)

        pool = WorkerPool(self.max_workers, self.updater, stats, reporter)
        try:
            with console_through(reporter):
                outcomes = pool.run(queue)
        finally:
            reporter.finish()

        snapshot = stats.snapshot()
        logger.info(snapshot.summary_line())
        return SyncReport(stats=snapshot, outcomes=outcomes)
