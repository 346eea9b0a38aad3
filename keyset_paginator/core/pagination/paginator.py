"""Keyset paginator.

``Paginator`` owns the configuration of one pagination request (ordering
keys, unique key, alias, limit, order, cursors) and drives the codec,
planner and predicate builder against a ``QueryExecutor``:

1. Decode the active cursor (after wins over before). Invalid cursors are
   rejected here, before any query runs.
2. Add the seek predicate, the effective ORDER BY and ``LIMIT limit + 1``.
3. ``has_more`` is whether the extra row came back; it is dropped.
4. Rows fetched backwards are reversed into declared order.
5. Boundary cursors are emitted:
   - after-cursor from the last row if a before-cursor was used or
     ``has_more``
   - before-cursor from the first row if an after-cursor was used, or
     ``has_more`` and a before-cursor was used

A paginator is single use. Build a new one per request.

Example:
    paginator = Paginator(User, ["created_at"], "id")
    paginator.set_limit(20)
    paginator.set_after_cursor(request_cursor)

    result = await paginator.paginate(SelectQuery(session, select(User)))
    result.data                 # up to 20 users
    result.cursor.after_cursor  # pass back for the next page
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import NoInspectionAvailable

from keyset_paginator.core.pagination.cursor import CursorCodec, CursorParam
from keyset_paginator.core.pagination.exceptions import (
    InvalidCursorError,
    PaginatorConfigError,
)
from keyset_paginator.core.pagination.keys import (
    CustomKey,
    KeyType,
    OrderingKey,
    TypeRegistry,
    normalize_keys,
    pascal_to_underscore,
)
from keyset_paginator.core.pagination.order import Order, OrderPlanner
from keyset_paginator.core.pagination.predicate import SeekPredicateBuilder
from keyset_paginator.core.pagination.schemas import PagingCursor, PagingQuery, PagingResult
from keyset_paginator.core.settings import PaginationSettings, get_pagination_settings
from keyset_paginator.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from keyset_paginator.core.database.executor import QueryExecutor

T = TypeVar("T")


def default_alias(entity: Any) -> str:
    """Name that qualifies bare field names for ``entity``.

    The table name for a mapped class, the alias name for an ``aliased()``
    entity, otherwise the snake_case class name.
    """
    try:
        selectable = getattr(sa_inspect(entity), "selectable", None)
    except NoInspectionAvailable:
        selectable = None
    name = getattr(selectable, "name", None)
    if isinstance(name, str) and name:
        return name
    return pascal_to_underscore(getattr(entity, "__name__", type(entity).__name__))


class Paginator(Generic[T]):
    """Keyset paginator for one request.

    Attributes:
        entity: Mapped class (or ``aliased()`` entity) being paginated
        keys: Normalized ordering keys; the unique key is always included
        unique_key: Tie-breaking key, unique across all records
    """

    __slots__ = (
        "_after_cursor",
        "_alias",
        "_before_cursor",
        "_codec",
        "_consumed",
        "_lazy",
        "_limit",
        "_logger",
        "_next_after_cursor",
        "_next_before_cursor",
        "_order",
        "entity",
        "keys",
        "unique_key",
    )

    def __init__(
        self,
        entity: Any,
        pagination_keys: Sequence[str | OrderingKey],
        pagination_unique_key: str,
        *,
        types: Mapping[str, KeyType | str] | None = None,
        settings: PaginationSettings | None = None,
    ) -> None:
        """Initialize paginator.

        Args:
            entity: Mapped class (or ``aliased()`` entity) being paginated
            pagination_keys: Ordering keys in priority order
            pagination_unique_key: Field guaranteed unique across records
            types: Cursor value types by key name; override what is read
                from the entity's mapped columns
            settings: Defaults for limit and order (cached settings if omitted)

        Raises:
            PaginatorConfigError: If a key name is empty, repeated or
                contains a cursor delimiter
        """
        settings = settings or get_pagination_settings()

        self.entity = entity
        self.unique_key = pagination_unique_key
        self.keys = normalize_keys(pagination_keys, pagination_unique_key)
        registry = TypeRegistry.from_entity(entity).merged(types)
        self._codec = CursorCodec(self.keys, registry, unique_key=pagination_unique_key)

        self._alias = default_alias(entity)
        self._limit = settings.default_limit
        self._order = Order(settings.default_order)
        self._after_cursor: str | None = None
        self._before_cursor: str | None = None
        self._next_after_cursor: str | None = None
        self._next_before_cursor: str | None = None
        self._consumed = False

        self._logger = logging.getLogger(__name__)
        self._lazy = get_lazy_logger(__name__)

    @property
    def alias(self) -> str:
        return self._alias

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def order(self) -> Order:
        return self._order

    def set_alias(self, alias: str) -> None:
        self._alias = alias

    def set_after_cursor(self, cursor: str | None) -> None:
        self._after_cursor = cursor

    def set_before_cursor(self, cursor: str | None) -> None:
        self._before_cursor = cursor

    def set_limit(self, limit: int) -> None:
        if limit < 1:
            raise PaginatorConfigError(f"limit must be at least 1, got {limit}", setting="limit")
        self._limit = limit

    def set_order(self, order: Order | str) -> None:
        try:
            self._order = Order(order.upper() if isinstance(order, str) else order)
        except ValueError as e:
            raise PaginatorConfigError(f"Unknown order {order!r}", setting="order") from e

    def has_after_cursor(self) -> bool:
        return self._after_cursor is not None

    def has_before_cursor(self) -> bool:
        return self._before_cursor is not None

    def encode(self, record: Any) -> str:
        """Encode ``record``'s position as a cursor for these keys."""
        return self._codec.encode(record)

    def decode(self, cursor: str) -> CursorParam:
        """Decode a cursor produced for these keys.

        Raises:
            InvalidCursorError: If the cursor cannot be decoded
        """
        try:
            return self._codec.decode(cursor)
        except InvalidCursorError as e:
            self._logger.info(
                "Rejected invalid cursor",
                extra={
                    "entity": getattr(self.entity, "__name__", repr(self.entity)),
                    "reason": e.reason,
                    "operation": "pagination.decode",
                },
            )
            raise

    async def paginate(self, query: QueryExecutor) -> PagingResult[T]:
        """Fetch one page.

        Args:
            query: Executor holding the base query (filters, joins)

        Returns:
            PagingResult with records in declared order and boundary cursors

        Raises:
            InvalidCursorError: If the active cursor cannot be decoded
            PaginatorConfigError: If this paginator was already used
        """
        if self._consumed:
            raise PaginatorConfigError(
                "Paginator already used; create a new one per request", setting="paginate"
            )
        self._consumed = True

        rows = list(await self._append_paging_query(query).execute())
        has_more = len(rows) > self._limit

        if has_more:
            rows.pop()

        if not rows:
            return self._to_paging_result(rows)

        if not self.has_after_cursor() and self.has_before_cursor():
            rows.reverse()

        if self.has_before_cursor() or has_more:
            self._next_after_cursor = self.encode(rows[-1])

        if self.has_after_cursor() or (has_more and self.has_before_cursor()):
            self._next_before_cursor = self.encode(rows[0])

        self._lazy.debug(
            lambda: f"pagination.paginate: {self._alias}(limit={self._limit}, order={self._order}) "
            f"-> {len(rows)} rows, has_more={has_more}"
        )
        return self._to_paging_result(rows)

    def _append_paging_query(self, query: QueryExecutor) -> QueryExecutor:
        cursors: CursorParam = {}
        if self.has_after_cursor():
            cursors = self.decode(self._after_cursor)  # type: ignore[arg-type]
        elif self.has_before_cursor():
            cursors = self.decode(self._before_cursor)  # type: ignore[arg-type]

        for item in self.keys:
            if isinstance(item, CustomKey) and item.select is not None:
                query = query.add_select(item.select_expression(), item.key)

        planner = OrderPlanner(
            self._order,
            has_after=self.has_after_cursor(),
            has_before=self.has_before_cursor(),
        )

        if cursors:
            builder = SeekPredicateBuilder(self.keys, self.unique_key, self._alias)
            query = query.where(builder.build(cursors, planner.operator))

        return query.limit(self._limit + 1).order_by(*planner.order_by(self.keys, self._alias))

    def _to_paging_result(self, rows: list[Any]) -> PagingResult[T]:
        return PagingResult(
            data=rows,
            cursor=PagingCursor(
                before_cursor=self._next_before_cursor,
                after_cursor=self._next_after_cursor,
            ),
        )


def build_paginator(
    entity: Any,
    pagination_keys: Sequence[str | OrderingKey],
    pagination_unique_key: str,
    *,
    alias: str | None = None,
    query: PagingQuery | None = None,
    types: Mapping[str, KeyType | str] | None = None,
    settings: PaginationSettings | None = None,
) -> Paginator[Any]:
    """Create a configured paginator in one call.

    Args:
        entity: Mapped class (or ``aliased()`` entity) being paginated
        pagination_keys: Ordering keys in priority order
        pagination_unique_key: Field guaranteed unique across records
        alias: Name qualifying bare field names (defaults from ``entity``)
        query: Cursors, limit and order supplied by the caller
        types: Cursor value types by key name
        settings: Defaults for limit and order

    Example:
        paginator = build_paginator(
            User,
            ["created_at"],
            "id",
            alias="u",
            query=PagingQuery(after_cursor=cursor, limit=20, order="ASC"),
        )
        result = await paginator.paginate(SelectQuery(session, stmt))
    """
    paginator: Paginator[Any] = Paginator(
        entity,
        pagination_keys,
        pagination_unique_key,
        types=types,
        settings=settings,
    )
    if alias:
        paginator.set_alias(alias)

    if query is not None:
        if query.after_cursor is not None:
            paginator.set_after_cursor(query.after_cursor)
        if query.before_cursor is not None:
            paginator.set_before_cursor(query.before_cursor)
        if query.limit is not None:
            paginator.set_limit(query.limit)
        if query.order is not None:
            paginator.set_order(query.order)

    return paginator


__all__ = ["Paginator", "build_paginator", "default_alias"]
