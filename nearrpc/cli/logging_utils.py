"""Loguru helpers for CLI output."""

from __future__ import annotations

import sys

from loguru import logger

_SINK_IDS: dict[str, int] = {}

# Handler id loguru assigns to its own stderr sink at import time.
_DEFAULT_HANDLER_ID = 0


def ensure_stderr_logging(verbose: bool = False) -> None:
    """Route nearrpc logs to stderr; DEBUG when verbose, WARNING otherwise.

    Only the sink added here and loguru's default handler are replaced; sinks
    added by a host application stay in place.
    """
    previous = _SINK_IDS.pop("stderr", None)
    if previous is not None:
        logger.remove(previous)
    else:
        try:
            logger.remove(_DEFAULT_HANDLER_ID)
        except ValueError:
            logger.debug("loguru default handler already removed")
    _SINK_IDS["stderr"] = logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format="<dim>{time:HH:mm:ss}</dim> <level>{level: <7}</level> {message}",
        backtrace=False,
        diagnose=False,
    )
    logger.enable("nearrpc")
