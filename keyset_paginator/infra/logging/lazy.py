"""Lazy evaluation support for logging.

Debug output in the paginator (decoded cursor contents, compiled seek
predicates, row counts) is only worth building when DEBUG is enabled. The
adapter here accepts callables as messages or arguments and only invokes
them once the level check has passed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any


class LazyLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that evaluates callable messages on demand.

    Example:
        ```python
        logger = get_lazy_logger(__name__)
        logger.debug(lambda: f"cursor decoded: {codec.decode(cursor)}")
        # decode() only runs if DEBUG is enabled

        logger.debug("rows fetched: %s", lambda: len(rows))
        ```
    """

    def log(
        self,
        level: int,
        msg: Any,
        *args: Any,
        **kwargs: Any,
    ) -> None:
        """Log message with lazy evaluation support.

        Args:
            level: Numeric log level (e.g., logging.DEBUG).
            msg: Log message or callable returning message.
            *args: Format arguments (may include callables).
            **kwargs: Additional kwargs for logging.
        """
        if not self.isEnabledFor(level):
            return

        if callable(msg):
            msg = msg()

        if args:
            args = tuple(arg() if callable(arg) else arg for arg in args)

        super().log(level, msg, *args, **kwargs)

    def debug(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.WARNING, msg, *args, **kwargs)


def get_lazy_logger(name: str, **context: Any) -> LazyLoggerAdapter:
    """Get logger with lazy evaluation support.

    Args:
        name: Logger name (usually __name__).
        **context: Optional context bound to every record as ``extra``.

    Returns:
        Logger adapter with lazy evaluation support.
    """
    return LazyLoggerAdapter(logging.getLogger(name), context or {})


__all__ = ["LazyLoggerAdapter", "get_lazy_logger"]
