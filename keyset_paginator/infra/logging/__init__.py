"""Logging helpers.

Modules log through standard ``logging`` loggers; debug output that is
expensive to build goes through the lazy adapter:

    from keyset_paginator.infra.logging import get_lazy_logger

    lazy_logger = get_lazy_logger(__name__)
    lazy_logger.debug(lambda: f"Expensive: {compute_heavy_data()}")
"""

from keyset_paginator.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = ["LazyLoggerAdapter", "get_lazy_logger"]
