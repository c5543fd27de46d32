"""Logging setup for Dockterm.

Records go to a log file under the state directory. Only warnings and errors
reach stderr, and those are emitted before the terminal enters raw mode; while
a session is attached anything written to stderr would tear the footer.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from dockterm.paths import HostPaths

ROOT_LOGGER = "dockterm"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False


def is_debug_mode() -> bool:
    """True when DOCKTERM_DEBUG is set to a truthy value."""
    return os.getenv("DOCKTERM_DEBUG", "").lower() in ("1", "true", "yes", "on")


def configure_logging(
    debug: Optional[bool] = None,
    level: str = "info",
    log_file: Optional[Path] = None,
) -> None:
    """Configure the dockterm logger hierarchy.

    Safe to call more than once; only the first call installs handlers.

    Args:
        debug: Force debug level (defaults to DOCKTERM_DEBUG)
        level: Level name used when not in debug mode
        log_file: Log file path (defaults to HostPaths.log_file())
    """
    global _configured
    if _configured:
        return

    if debug is None:
        debug = is_debug_mode()

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False

    path = log_file or HostPaths.log_file()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)
    except OSError:
        # Read-only home; stderr still gets warnings
        pass

    stderr_handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
    )
    stderr_handler.setLevel(logging.WARNING)
    logger.addHandler(stderr_handler)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger below the dockterm namespace."""
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
