"""Configuration management for groppy."""

import os
from typing import List, Optional
from dataclasses import dataclass, field

DEFAULT_THREADS = 4


@dataclass
class Config:
    """Configuration for an update run.

    Merges environment variables with CLI arguments.
    CLI arguments take precedence over environment variables.
    """

    threads: int = DEFAULT_THREADS
    directories: List[str] = field(default_factory=list)
    log_dir: Optional[str] = None
    verbose: bool = False

    def __post_init__(self):
        if self.threads < 1:
            raise ValueError("Number of threads must be at least 1")

    @classmethod
    def from_env_and_args(
        cls,
        threads: Optional[int] = None,
        directories: Optional[List[str]] = None,
        log_dir: Optional[str] = None,
        verbose: bool = False
    ) -> 'Config':
        """Create config from environment variables and CLI arguments.

        Args:
            threads: Worker thread count (overrides GROPPY_THREADS)
            directories: Directories to scan (default: current directory)
            log_dir: Log file directory (overrides GROPPY_LOG_DIR)
            verbose: Show informational logs on the console

        Returns:
            Config instance

        Raises:
            ValueError: If the thread count is invalid
        """
        if threads is None:
            env_threads = os.getenv('GROPPY_THREADS')
            if env_threads:
                try:
                    threads = int(env_threads)
                except ValueError:
                    raise ValueError(
                        f"GROPPY_THREADS must be an integer, got {env_threads!r}"
                    ) from None
            else:
                threads = DEFAULT_THREADS

        return cls(
            threads=threads,
            directories=list(directories) if directories else [os.getcwd()],
            log_dir=log_dir or os.getenv('GROPPY_LOG_DIR') or None,
            verbose=verbose
        )
