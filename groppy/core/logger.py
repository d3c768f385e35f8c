"""Logging configuration and utilities."""

import os
import sys
import logging
from datetime import datetime
from contextlib import contextmanager
from typing import Iterator, Optional

from ..utils.progress import ProgressReporter


class ConsoleHandler(logging.StreamHandler):
    """Stream handler that prints through a ProgressReporter while one is live.

    Records then share the reporter's lock and land above the spinner line
    instead of being appended to it.
    """

    def __init__(self, stream=None):
        super().__init__(stream)
        self.reporter: Optional[ProgressReporter] = None

    def emit(self, record: logging.LogRecord) -> None:
        reporter = self.reporter
        if reporter is None:
            super().emit(record)
            return
        try:
            reporter.println(self.format(record), stream=self.stream)
        except Exception:
            self.handleError(record)


def setup_logging(verbose: bool = False, log_dir: Optional[str] = None) -> logging.Logger:
    """Configure logging to the console and, optionally, a file.

    The console handler writes to stderr and stays at ERROR unless verbose,
    so routine records do not interleave with the progress display.

    Args:
        verbose: Show INFO records on the console
        log_dir: Directory for a timestamped log file (None = no file)

    Returns:
        Configured logger instance
    """
    console = ConsoleHandler(sys.stderr)
    console.setLevel(logging.INFO if verbose else logging.ERROR)
    handlers = [console]

    log_file = None
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        log_file = os.path.join(log_dir, f'groppy_{timestamp}.log')
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.INFO)
        handlers.append(file_handler)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True  # Reset any existing configuration
    )

    logger = logging.getLogger('groppy')
    if log_file:
        logger.info(f"Log file: {log_file}")

    return logger


@contextmanager
def console_through(reporter: ProgressReporter) -> Iterator[None]:
    """Route console log records through the reporter for the duration."""
    handlers = [
        h for h in logging.getLogger().handlers + logging.getLogger('groppy').handlers
        if isinstance(h, ConsoleHandler)
    ]
    for handler in handlers:
        handler.reporter = reporter
    try:
        yield
    finally:
        for handler in handlers:
            handler.reporter = None
