"""Core package for groppy."""

from .types import (
    UpdateStatus,
    RepoOutcome,
    UpdateError,
)
from .stats import SharedStats, StatsSnapshot
from .task_queue import TaskQueue
from .updater import RepoUpdater
from .worker_pool import WorkerPool
from .repo_manager import RepoManager, SyncReport
from .logger import setup_logging

__all__ = [
    # Types
    'UpdateStatus',
    'RepoOutcome',
    'UpdateError',
    # Engine
    'SharedStats',
    'StatsSnapshot',
    'TaskQueue',
    'RepoUpdater',
    'WorkerPool',
    'RepoManager',
    'SyncReport',
    'setup_logging',
]
