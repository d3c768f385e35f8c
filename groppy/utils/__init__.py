"""Utilities package for groppy."""

from .discovery import find_repos
from .progress import ProgressReporter

__all__ = [
    'find_repos',
    'ProgressReporter',
]
