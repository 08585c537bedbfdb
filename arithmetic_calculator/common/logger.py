"""Shared logger for the arithmetic calculator."""
import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("arithmetic_calculator")

# Diagnostics go to stderr so stdout only carries results
if not logger.handlers:
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(_handler)
logger.setLevel(logging.WARNING)


def set_verbose(verbose: bool) -> None:
    """
    Switch the shared logger between INFO and WARNING level.

    :param bool verbose: True to log lifecycle messages
    """
    logger.setLevel(logging.INFO if verbose else logging.WARNING)
