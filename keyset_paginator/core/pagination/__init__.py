"""Keyset (cursor) pagination for SQLAlchemy queries.

This package provides cursor-based pagination that is:
- Stable: rows don't shift or repeat when data changes between pages
- Performant: uses indexed seeks instead of OFFSET scans
- Bidirectional: after-cursors page forward, before-cursors page back

Usage:
    from keyset_paginator.core.database import SelectQuery
    from keyset_paginator.core.pagination import PagingQuery, build_paginator

    @router.get("/users")
    async def list_users(params: PagingQuery = Depends()):
        paginator = build_paginator(User, ["created_at"], "id", query=params)
        result = await paginator.paginate(SelectQuery(session, select(User)))
        return result.model_dump(by_alias=True)

The cursor encodes the ordering-key values needed to seek to the next page.
Cursors are opaque base64 strings that clients pass back unchanged.
"""

from keyset_paginator.core.pagination.cursor import CursorCodec, CursorParam
from keyset_paginator.core.pagination.exceptions import (
    InvalidCursorError,
    PaginationError,
    PaginatorConfigError,
)
from keyset_paginator.core.pagination.keys import (
    CustomKey,
    KeyType,
    OrderingKey,
    SimpleKey,
    TypeRegistry,
)
from keyset_paginator.core.pagination.order import Order, OrderPlanner, flip_order
from keyset_paginator.core.pagination.paginator import Paginator, build_paginator
from keyset_paginator.core.pagination.predicate import SeekPredicateBuilder
from keyset_paginator.core.pagination.schemas import PagingCursor, PagingQuery, PagingResult

__all__ = [
    # Cursor utilities
    "CursorCodec",
    "CursorParam",
    # Keys
    "CustomKey",
    # Exceptions
    "InvalidCursorError",
    "KeyType",
    # Ordering
    "Order",
    "OrderPlanner",
    "OrderingKey",
    "PaginationError",
    # Paginator
    "Paginator",
    "PaginatorConfigError",
    # Schemas
    "PagingCursor",
    "PagingQuery",
    "PagingResult",
    # Predicate
    "SeekPredicateBuilder",
    "SimpleKey",
    "TypeRegistry",
    "build_paginator",
    "flip_order",
]
