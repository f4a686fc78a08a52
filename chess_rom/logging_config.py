"""Logging for the puzzle compiler.

Per-puzzle decisions (skip reasons, replayed moves, written units) are logged
at DEBUG and only show up with ``generate --verbose``. Run-level events such
as reaching ROM capacity are logged at INFO.
"""

import logging
import sys

PACKAGE_LOGGER = "chess_rom"

_handler: logging.Handler | None = None


def setup_logging(name: str | None = None) -> logging.Logger:
    """
    Return the logger for ``name``, a module inside the package.

    The first call attaches a single stderr handler to the package logger,
    printing ``module: message`` lines so they read like the CLI's own output
    and stay out of the progress bar's way.

    Args:
        name: Module name, usually ``__name__``. None gives the package logger.
    """
    global _handler

    if _handler is None:
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        package_logger.setLevel(logging.INFO)

        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        package_logger.addHandler(_handler)
        package_logger.propagate = False

    return logging.getLogger(name or PACKAGE_LOGGER)


def set_verbose(verbose: bool) -> logging.Logger:
    """Show per-puzzle DEBUG lines when ``verbose``, otherwise INFO and up.

    >>> set_verbose(True).level == logging.DEBUG
    True
    >>> set_verbose(False).level == logging.INFO
    True
    """
    package_logger = setup_logging()
    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return package_logger
