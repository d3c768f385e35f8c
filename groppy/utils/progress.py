"""Progress display shared by the worker threads."""

import sys
import itertools
import threading
import logging
from typing import Optional, TextIO

logger = logging.getLogger('groppy')

# Catppuccin Macchiato
RED = "\x1b[38;2;237;135;150m"
GREEN = "\x1b[38;2;166;218;149m"
OVERLAY0 = "\x1b[38;2;110;115;141m"
RESET = "\x1b[0m"

SPINNER_FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"
TICK_INTERVAL = 0.1

CLEAR_LINE = "\r\x1b[2K"


def colorize(text: str, color: str) -> str:
    return f"{color}{text}{RESET}"


def progress_sequence(percent: Optional[int]) -> str:
    """Build the OSC 9;4 taskbar progress escape sequence.

    Args:
        percent: 0-100, or None for the "done" signal

    Returns:
        Escape sequence terminated by BEL
    """
    if percent is None:
        return "\x1b]9;4;0\x07"
    return f"\x1b]9;4;1;{percent}\x07"


def percent_complete(checked: int, total: int) -> int:
    if total <= 0:
        return 100
    return min(100, checked * 100 // total)


class ProgressReporter:
    """Owner of the live status line, printed lines and the percent signal.

    Every mutation goes through one lock, so callers on any thread can set
    the message or print a line without garbling the spinner.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        status_stream: Optional[TextIO] = None,
        spinner: Optional[bool] = None
    ):
        """Initialize progress reporter.

        Args:
            stream: Where printed lines and escape sequences go (stdout)
            status_stream: Where the spinner is drawn (stderr)
            spinner: Force the spinner on/off (default: on when status_stream is a tty)
        """
        self.stream = stream or sys.stdout
        self.status_stream = status_stream or sys.stderr
        if spinner is None:
            spinner = _isatty(self.status_stream)
        self.spinner = spinner

        self._lock = threading.Lock()
        self._message = ""
        self._percent = -1
        self._frames = itertools.cycle(SPINNER_FRAMES)
        self._frame = next(self._frames)
        self._stop = threading.Event()
        self._ticker: Optional[threading.Thread] = None

    @property
    def message(self) -> str:
        with self._lock:
            return self._message

    @property
    def percent(self) -> Optional[int]:
        with self._lock:
            return self._percent if self._percent >= 0 else None

    def start(self, message: str = "") -> None:
        """Show the status line and start the spinner ticker."""
        with self._lock:
            self._message = message
            self._draw()
        if self.spinner and self._ticker is None:
            self._ticker = threading.Thread(
                target=self._tick, name="groppy-spinner", daemon=True
            )
            self._ticker.start()

    def set_message(self, text: str) -> None:
        with self._lock:
            self._message = text
            self._draw()

    def println(self, line: str, stream: Optional[TextIO] = None) -> None:
        """Print a line above the status display.

        Args:
            line: Text without trailing newline
            stream: Destination (default: the reporter's output stream)
        """
        with self._lock:
            self._clear()
            self._write(stream or self.stream, line + "\n")
            self._draw()

    def reset_percent(self) -> None:
        """Emit the reset-to-zero progress signal."""
        with self._lock:
            self._percent = 0
            self._write(self.stream, progress_sequence(0))

    def update_percent(self, checked: int, total: int) -> None:
        """Emit checked/total as a percentage, never going backwards."""
        percent = percent_complete(checked, total)
        with self._lock:
            if percent < self._percent:
                return
            self._percent = percent
            self._write(self.stream, progress_sequence(percent))

    def finish(self) -> None:
        """Stop the spinner, clear the status line and emit the done signal."""
        self._stop.set()
        if self._ticker is not None:
            self._ticker.join()
            self._ticker = None
        with self._lock:
            self._clear()
            self._message = ""
            self._write(self.stream, progress_sequence(None))

    def _tick(self) -> None:
        while not self._stop.wait(TICK_INTERVAL):
            with self._lock:
                self._frame = next(self._frames)
                self._draw()

    def _draw(self) -> None:
        if self.spinner and not self._stop.is_set():
            self._write(self.status_stream, f"{CLEAR_LINE}{colorize(self._frame, GREEN)} {self._message}")

    def _clear(self) -> None:
        if self.spinner:
            self._write(self.status_stream, CLEAR_LINE)

    def _write(self, stream: TextIO, text: str) -> None:
        # Terminal output is best effort
        try:
            stream.write(text)
            stream.flush()
        except (OSError, ValueError) as e:
            logger.debug(f"Terminal write failed: {e}")


def _isatty(stream: TextIO) -> bool:
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False
