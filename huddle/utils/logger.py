"""
Logging for Huddle.

Every subsystem logs under the "huddle" namespace. The console handler
is colored through colorlog; an optional huddle.log file receives the
same records as plain text.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import colorlog

NAMESPACE = "huddle"
LOG_FILE = "huddle.log"

CONSOLE_FORMAT = "%(log_color)s%(levelname)-8s%(reset)s %(blue)s%(name)s%(reset)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

LEVEL_COLORS = {
    "DEBUG": "white",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}

_configured = False


def _console_handler(level: int) -> logging.Handler:
    handler = colorlog.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(colorlog.ColoredFormatter(CONSOLE_FORMAT, log_colors=LEVEL_COLORS))
    return handler


def _file_handler(log_dir: str, level: int) -> logging.Handler:
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(directory / LOG_FILE, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


def setup_logging(level: int = logging.INFO, log_dir: Optional[str] = None) -> logging.Logger:
    """
    (Re)configure the huddle logger tree.

    Handlers from an earlier call are closed and replaced, so the CLI can
    apply the loaded config after modules have already logged.

    Args:
        level: Threshold for the namespace and its handlers
        log_dir: Directory for huddle.log; console only when None

    Returns:
        The namespace logger
    """
    global _configured

    root = logging.getLogger(NAMESPACE)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    root.setLevel(level)
    root.addHandler(_console_handler(level))
    if log_dir:
        root.addHandler(_file_handler(log_dir, level))

    _configured = True
    return root


def get_logger(name: str) -> logging.Logger:
    """Logger for a subsystem ('identity', 'bids', 'auction', ...)."""
    if not _configured:
        setup_logging()
    return logging.getLogger(f"{NAMESPACE}.{name}")
