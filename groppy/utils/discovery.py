"""Repository discovery in the input directories."""

import os
import logging
from typing import Iterable, List

from .git import is_git_repo

logger = logging.getLogger('groppy')


def find_repos(directories: Iterable[str]) -> List[str]:
    """Find git repositories in the given directories, one level deep.

    Each directory is included if it is a repository root itself, and
    each immediate child directory that is a repository root is included
    too. Missing directories are skipped. Duplicates reachable from more
    than one input are kept; every entry is one task.

    Args:
        directories: Directories to scan

    Returns:
        Absolute repository paths in directory iteration order
    """
    repos = []

    for directory in directories:
        directory = os.path.abspath(directory)
        if not os.path.exists(directory):
            logger.debug(f"Skipping missing directory: {directory}")
            continue

        if is_git_repo(directory):
            repos.append(directory)

        try:
            with os.scandir(directory) as entries:
                for entry in entries:
                    if entry.is_dir() and is_git_repo(entry.path):
                        repos.append(entry.path)
        except OSError as e:
            logger.debug(f"Cannot list {directory}: {e}")

    logger.info(f"Found {len(repos)} repositories")
    return repos
