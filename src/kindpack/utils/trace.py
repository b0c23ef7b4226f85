"""Trace logging helpers.

Every kindpack module logs through ``logging.getLogger(__name__)`` and emits
DEBUG records only; the package itself installs a NullHandler. The helpers
here attach a stream handler when a caller wants to see the traces.
"""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional, TextIO

from ..config import TRUE_VALUES

TRACE_FORMAT = "%(name)s %(levelname)s: %(message)s"


class _TraceHandler(logging.StreamHandler):
    """Stream handler installed by configure_tracing()."""


def configure_tracing(
    enabled: bool = True,
    level: int = logging.DEBUG,
    stream: Optional[TextIO] = None,
) -> Optional[logging.Handler]:
    """Turn encode/decode trace output on or off.

    Calling this again replaces the handler installed by the previous call.

    Args:
        enabled: Attach a handler if True, remove it if False
        level: Level for the ``kindpack`` logger
        stream: Destination stream (defaults to stderr)

    Returns:
        The installed handler, or None when tracing was disabled

    Example:
        >>> import io
        >>> buf = io.StringIO()
        >>> _ = configure_tracing(stream=buf)
        >>> _ = encode({"a": 1})
        >>> "packed object" in buf.getvalue()
        True
    """
    logger = logging.getLogger("kindpack")
    for handler in list(logger.handlers):
        if isinstance(handler, _TraceHandler):
            logger.removeHandler(handler)

    if not enabled:
        logger.setLevel(logging.NOTSET)
        return None

    handler = _TraceHandler(stream)
    handler.setFormatter(logging.Formatter(TRACE_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler


def tracing_from_env(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Return True if ``KINDPACK_VERBOSE`` asks for trace output."""
    env = os.environ if environ is None else environ
    return env.get("KINDPACK_VERBOSE", "").lower() in TRUE_VALUES
