"""Timestamped status lines for the terminal, mirrored to the stdlib logger."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from tqdm import tqdm

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("decryptex")
logger.addHandler(logging.NullHandler())

_LEVEL_STYLES = {
    "debug": "dim",
    "info": None,
    "success": "green",
    "warning": "yellow",
    "error": "red",
}


def setup_debug_logger(log_path: Optional[Path] = None) -> Path:
    """Attach a file handler that records every status line at DEBUG level."""
    if log_path is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = Path(f"decryptex_debug_{timestamp}.log")

    logger.setLevel(logging.DEBUG)

    # Clear existing file handlers
    for handler in list(logger.handlers):
        if isinstance(handler, logging.FileHandler):
            logger.removeHandler(handler)
            handler.close()

    fh = logging.FileHandler(log_path, encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt=_TIMESTAMP_FORMAT,
    ))
    logger.addHandler(fh)
    return log_path


class StatusLogger:
    """Writes `[timestamp] message` lines without disturbing the progress bar.

    Debug lines only reach the console when ``verbose`` is set; every line
    is forwarded to the ``decryptex`` logger regardless.
    """

    def __init__(self, verbose: bool = False, console: Optional[Console] = None):
        self.verbose = verbose
        self.console = console or Console(highlight=False)

    def _emit(self, level: str, message: str) -> None:
        log_level = logging.INFO if level == "success" else getattr(logging, level.upper())
        logger.log(log_level, message)

        if level == "debug" and not self.verbose:
            return

        timestamp = datetime.now().strftime(_TIMESTAMP_FORMAT)
        line = f"[{timestamp}] {message}"
        style = _LEVEL_STYLES[level]
        with tqdm.external_write_mode():
            self.console.print(escape(line), style=style)

    def debug(self, message: str) -> None:
        self._emit("debug", message)

    def info(self, message: str) -> None:
        self._emit("info", message)

    def success(self, message: str) -> None:
        self._emit("success", message)

    def warning(self, message: str) -> None:
        self._emit("warning", message)

    def error(self, message: str) -> None:
        self._emit("error", message)
