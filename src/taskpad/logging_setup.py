# src/taskpad/logging_setup.py

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Console thresholds by logger-name prefix; the longest matching prefix wins.
# Anything not listed (requests, urllib3, py.warnings, ...) needs ERROR.
_CONSOLE_MIN_LEVEL: dict[str, int] = {
    "taskpad": logging.NOTSET,
    "taskpad.offline": logging.WARNING,
}


class _ConsoleNoiseFilter(logging.Filter):
    """Keep the prompt readable: task and reminder logs pass, cache chatter and third-party noise do not."""

    def filter(self, record: logging.LogRecord) -> bool:
        threshold = logging.ERROR
        matched = ""
        for prefix, level in _CONSOLE_MIN_LEVEL.items():
            hit = record.name == prefix or record.name.startswith(prefix + ".")
            if hit and len(prefix) > len(matched):
                matched, threshold = prefix, level
        return record.levelno >= threshold


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskpad",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Send filtered records to stderr and everything to <log_dir>/taskpad.log.

    Replaces whatever handlers the root logger had. Returns the log file path.
    """
    log_file = Path(log_dir) / "taskpad.log"
    log_file.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.addFilter(_ConsoleNoiseFilter())

    # The reminder service can run for weeks.
    logfile = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
    logfile.setLevel(file_level)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(logging.DEBUG)
    for handler in (console, logfile):
        handler.setFormatter(formatter)
        root.addHandler(handler)

    logging.captureWarnings(True)
    # urllib3 logs every connection at DEBUG.
    logging.getLogger("urllib3").setLevel(logging.INFO)
    return log_file
