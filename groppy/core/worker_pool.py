"""Fixed pool of worker threads draining the task queue."""

import logging
import threading
from typing import List
from concurrent.futures import ThreadPoolExecutor, as_completed

from .stats import SharedStats
from .task_queue import TaskQueue
from .types import RepoOutcome
from .updater import RepoUpdater
from ..utils.progress import ProgressReporter, colorize, GREEN, RED

logger = logging.getLogger('groppy')

STATUS_MESSAGE = "Updating repositories… ({checked}/{total})"


class WorkerPool:
    """N threads, each looping: take a task, update it, report it."""

    def __init__(
        self,
        num_workers: int,
        updater: RepoUpdater,
        stats: SharedStats,
        reporter: ProgressReporter
    ):
        """Initialize worker pool.

        Args:
            num_workers: Number of threads (at least 1)
            updater: Per-repository updater
            stats: Shared counters
            reporter: Shared progress display

        Raises:
            ValueError: If num_workers is less than 1
        """
        if num_workers < 1:
            raise ValueError("Number of threads must be at least 1")
        self.num_workers = num_workers
        self.updater = updater
        self.stats = stats
        self.reporter = reporter
        self._outcomes: List[RepoOutcome] = []
        self._outcomes_lock = threading.Lock()

    def run(self, queue: TaskQueue) -> List[RepoOutcome]:
        """Start the workers and wait for all of them to finish.

        Args:
            queue: Task queue; workers stop once it is closed and drained

        Returns:
            Outcomes in completion order
        """
        with ThreadPoolExecutor(
            max_workers=self.num_workers,
            thread_name_prefix="groppy-worker"
        ) as executor:
            # One long-lived pull loop per worker thread
            futures = [
                executor.submit(self._worker, queue)
                for _ in range(self.num_workers)
            ]
            for future in as_completed(futures):
                future.result()

        with self._outcomes_lock:
            return list(self._outcomes)

    def _worker(self, queue: TaskQueue) -> None:
        while True:
            repo_path = queue.get()
            if repo_path is None:
                return

            checked = self.stats.increment_checked()
            self.reporter.update_percent(checked, self.stats.total)
            self.reporter.set_message(
                STATUS_MESSAGE.format(checked=checked, total=self.stats.total)
            )

            outcome = self._process_repo(repo_path)
            self._report(outcome)

    def _process_repo(self, repo_path: str) -> RepoOutcome:
        try:
            return self.updater.update(repo_path)
        except Exception as e:
            logger.exception(f"Unexpected error processing {repo_path}")
            return RepoOutcome.error(repo_path, f"Unexpected error: {e}")

    def _report(self, outcome: RepoOutcome) -> None:
        """Record an outcome in the counters and on the display."""
        with self._outcomes_lock:
            self._outcomes.append(outcome)

        if outcome.is_updated:
            self.stats.increment_updated()
            self.reporter.println(colorize(
                f"Updated: {outcome.repo_path} ({outcome.files_changed} files changed)", GREEN
            ))
        elif outcome.is_unclean:
            self.stats.increment_unclean()
            self.reporter.println(colorize(f"Repository not clean: {outcome.repo_path}", RED))
        elif outcome.failed:
            logger.warning(f"Error updating {outcome.repo_path}: {outcome.detail}")
            self.reporter.println(f"Error updating {outcome.repo_path}: {outcome.detail}")
