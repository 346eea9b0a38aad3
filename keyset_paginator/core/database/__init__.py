"""Query execution seam for the paginator.

Query Executors:
    - QueryExecutor: Protocol the paginator drives (select/where/order/limit/execute)
    - SelectQuery: Immutable SQLAlchemy implementation over AsyncSession + Select
"""

from keyset_paginator.core.database.executor import QueryExecutor, SelectQuery

__all__ = ["QueryExecutor", "SelectQuery"]
