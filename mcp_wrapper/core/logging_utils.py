"""Console logging setup and structured lifecycle logging for the launcher and status server."""

import logging
import sys
from typing import Any, Optional

logger = logging.getLogger(__name__)

# ANSI color codes
_RESET = "\033[0m"
_BOLD = "\033[1m"
_GRAY = "\033[90m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_CYAN = "\033[36m"

_LEVEL_COLORS = {
    logging.DEBUG: _GRAY,
    logging.INFO: _CYAN,
    logging.WARNING: _YELLOW,
    logging.ERROR: _RED + _BOLD,
    logging.CRITICAL: _RED + _BOLD,
}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Wraps the level name in a per-level ANSI color. Formats a copy, so other handlers see the plain record."""

    def format(self, record: logging.LogRecord) -> str:
        tinted = logging.makeLogRecord(record.__dict__)
        tinted.levelname = _LEVEL_COLORS.get(record.levelno, _RESET) + f"[{record.levelname}]" + _RESET
        return super().format(tinted)


def setup_logging(debug: bool = False, stream: Optional[Any] = None) -> None:
    """Configure root logging. Colors only when the stream is a TTY, since the child shares the console."""
    stream = stream or sys.stderr
    handler = logging.StreamHandler(stream)
    fmt_cls = ColoredFormatter if getattr(stream, "isatty", lambda: False)() else logging.Formatter
    handler.setFormatter(fmt_cls(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    logging.root.handlers.clear()
    logging.root.addHandler(handler)
    logging.root.setLevel(logging.DEBUG if debug else logging.INFO)


def format_fields(fields: dict) -> str:
    """key=value pairs sorted by key; None values are dropped."""
    return " ".join(f"{k}={v}" for k, v in sorted(fields.items()) if v is not None)


def log_lifecycle(event: str, level: int = logging.INFO, **fields: Any) -> None:
    """Log a lifecycle step (child_started, listener_started, child_exited, ...) as structured key-value."""
    extra = dict(fields)
    extra["event"] = event
    logger.log(level, "lifecycle " + format_fields(extra))
