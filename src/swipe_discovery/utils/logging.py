"""Console logging formatter for the discovery front-end."""

from __future__ import annotations

import logging
import os
import sys


class ColoredFormatter(logging.Formatter):
    """Colours the level name and trims logger names to their last segment.

    ``swipe_discovery.application.services.track_queue`` prints as
    ``track_queue``. Colours are disabled when ``NO_COLOR`` is set or the
    stream is not a TTY.
    """

    COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",     # cyan
        logging.INFO: "\033[32m",      # green
        logging.WARNING: "\033[33m",   # yellow
        logging.ERROR: "\033[31m",     # red
        logging.CRITICAL: "\033[1;31m",  # bold red
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        *,
        short_names: bool = True,
        stream: object | None = None,
    ) -> None:
        super().__init__(fmt, datefmt)
        self._short_names = short_names
        self._stream = stream

    def _use_color(self) -> bool:
        if os.environ.get("NO_COLOR") is not None:
            return False
        stream = self._stream or sys.stderr
        isatty = getattr(stream, "isatty", None)
        return callable(isatty) and bool(isatty())

    def format(self, record: logging.LogRecord) -> str:
        use_color = self._use_color()
        if self._short_names or use_color:
            record = logging.makeLogRecord(record.__dict__)
        if self._short_names:
            record.name = record.name.rsplit(".", 1)[-1]
        if use_color:
            color = self.COLORS.get(record.levelno, "")
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)
