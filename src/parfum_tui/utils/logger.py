import logging
import os
import sys
from typing import IO, Optional

from rich.console import Console
from rich.logging import RichHandler

# shared by every handler so records from all modules land in the same place
_console: Optional[Console] = None
_log_file: Optional[IO[str]] = None


def _get_console() -> Console:
    """
    The TUI owns stdout, so log to PARFUM_LOG_FILE when set, stderr otherwise.
    """
    global _console, _log_file
    if _console is None:
        log_file = os.getenv("PARFUM_LOG_FILE")
        if log_file:
            _log_file = open(log_file, "a")
            _console = Console(file=_log_file, width=120)
        else:
            _console = Console(stderr=True)
    return _console


def close_log_file() -> None:
    """
    Close PARFUM_LOG_FILE on shutdown. Records logged afterwards go to stderr.
    """
    global _log_file
    if _log_file is None:
        return
    if _console is not None:
        _console.file = sys.stderr
    _log_file.close()
    _log_file = None


def get_logger(name=None) -> logging.Logger:
    """
    Creates and returns a logger configured with RichHandler for rich output.
    """
    if name is None:
        name = "parfum"
    logger = logging.getLogger(name)
    log_level = logging.DEBUG if os.getenv("DEBUG") else logging.INFO
    logger.setLevel(log_level)

    if not logger.handlers:
        handler = RichHandler(
            console=_get_console(),
            show_time=True,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(logging.Formatter("[%(name)s]  %(message)s"))
        handler.setLevel(log_level)
        logger.addHandler(handler)

        logger.propagate = False
        logger.debug(f"Logger for '{name}' initialized with RichHandler.")

    return logger
