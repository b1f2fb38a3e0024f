"""Package logger shared by all sandbox-ci modules."""

import logging
import sys

logger = logging.getLogger("sandbox_ci")


def setup_logging(level: str = "INFO") -> None:
    """Send package log output to stdout, where CI logs pick it up."""
    logger.setLevel(level)

    # Repeated CLI invocations in one process must not stack handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger.addHandler(handler)
