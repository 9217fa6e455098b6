"""Debug log file handling for monorun.

Attaches a DEBUG-level file handler to the `monorun` logger namespace so
every command invocation, phase transition and report fallback is recorded
without cluttering the console.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

_HANDLER_NAME = "monorun_debug"


def configure_debug_logging(log_path: Path | None) -> Path | None:
    """Attach a DEBUG file handler to the monorun logger.

    Best-effort: when the file cannot be opened (read-only filesystem,
    permission denied) logging continues without it.

    Args:
        log_path: Destination file, or None to leave logging unconfigured.

    Returns:
        The log path when a handler was attached, otherwise None.
    """
    if log_path is None:
        return None

    try:
        handler = logging.FileHandler(log_path)
    except OSError:
        return None

    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    handler.set_name(_HANDLER_NAME)

    package_logger = logging.getLogger("monorun")
    package_logger.setLevel(logging.DEBUG)

    # Remove any previous handler to avoid duplicates across repeated calls
    for existing in package_logger.handlers[:]:
        if existing.get_name() == _HANDLER_NAME:
            existing.close()
            package_logger.removeHandler(existing)

    package_logger.addHandler(handler)
    return log_path


def configure_console_logging(verbose: bool) -> None:
    """Route monorun warnings (and debug lines when verbose) to stderr."""
    package_logger = logging.getLogger("monorun")
    # sys.stderr may be a different stream than on the previous call
    for existing in package_logger.handlers[:]:
        if existing.get_name() == "monorun_console":
            package_logger.removeHandler(existing)

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name("monorun_console")
    handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    package_logger.addHandler(handler)
    if package_logger.level == logging.NOTSET or package_logger.level > logging.DEBUG:
        package_logger.setLevel(logging.DEBUG)
