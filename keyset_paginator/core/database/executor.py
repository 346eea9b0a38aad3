"""Query executors used by the paginator.

The paginator never touches a session directly. It talks to a
``QueryExecutor``: something that can take an extra SELECT expression, an
additive WHERE predicate, an ORDER BY and a LIMIT, and then run.

``SelectQuery`` is the SQLAlchemy implementation. It is immutable: every
step returns a new ``SelectQuery`` wrapping a new generative ``Select``, so
one base query can back any number of pagination requests.

Example:
    from sqlalchemy import select

    base = SelectQuery(session, select(User).where(User.is_active == True))
    page_one = await paginator.paginate(base)
    page_two = await other_paginator.paginate(base)  # base is unchanged
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Protocol, Self

from keyset_paginator.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Select
    from sqlalchemy.ext.asyncio import AsyncSession

_lazy = get_lazy_logger(__name__)


class QueryExecutor(Protocol):
    """Contract between the paginator and the query engine."""

    def add_select(self, expression: Any, label: str) -> Self: ...

    def where(self, predicate: ColumnElement[bool]) -> Self: ...

    def order_by(self, *clauses: Any) -> Self: ...

    def limit(self, limit: int) -> Self: ...

    async def execute(self) -> list[Any]: ...


@dataclass(frozen=True, slots=True)
class SelectQuery:
    """Immutable ``QueryExecutor`` over an ``AsyncSession`` and a ``Select``.

    Attributes:
        session: Database session used by ``execute``
        statement: Current select statement

    ``execute`` returns the first entity of each row, so labelled
    expressions added with ``add_select`` only feed the ORDER BY.
    """

    session: AsyncSession
    statement: Select[Any]

    def add_select(self, expression: Any, label: str) -> SelectQuery:
        return replace(self, statement=self.statement.add_columns(expression.label(label)))

    def where(self, predicate: ColumnElement[bool]) -> SelectQuery:
        return replace(self, statement=self.statement.where(predicate))

    def order_by(self, *clauses: Any) -> SelectQuery:
        """Replace any existing ordering with ``clauses``."""
        return replace(self, statement=self.statement.order_by(None).order_by(*clauses))

    def limit(self, limit: int) -> SelectQuery:
        return replace(self, statement=self.statement.limit(limit))

    async def execute(self) -> list[Any]:
        _lazy.debug(lambda: f"db.execute: {self.statement}")
        result = await self.session.execute(self.statement)
        return list(result.scalars().all())


__all__ = ["QueryExecutor", "SelectQuery"]
