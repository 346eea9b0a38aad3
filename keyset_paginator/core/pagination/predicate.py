"""Seek predicate for keyset pagination.

Given the decoded cursor values and the operator chosen by the planner, the
builder produces one boolean SQLAlchemy expression selecting the rows
strictly beyond the cursor position.

Pagination by the unique key alone:
    id op :id

General case, non-unique keys K = (score, name) and unique key id:
    (score op :score AND name op :name)
    OR (score = :score AND name = :name AND id op :id)

A key whose cursor value is NULL contributes ``IS NOT NULL`` to the first
clause and ``IS NULL`` to the second.

All keys in K share one operator in the first clause rather than nesting
per-key lexicographic comparisons. With two or more non-unique keys this is
coarser than a full row-value comparison; existing cursors depend on it, so
it is kept as is.
"""

from __future__ import annotations

import operator as op
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, or_

from keyset_paginator.core.pagination.keys import OrderingKey

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement

    from keyset_paginator.core.pagination.cursor import CursorParam

OPERATORS = {
    ">": op.gt,
    "<": op.lt,
    "=": op.eq,
}


class SeekPredicateBuilder:
    """Build the WHERE condition that seeks past a cursor.

    Example:
        builder = SeekPredicateBuilder(
            [SimpleKey("score"), SimpleKey("id")],
            unique_key="id",
            alias="posts",
        )
        predicate = builder.build({"score": 10, "id": 2}, "<")
        # (posts.score < :p1) OR (posts.score = :p2 AND posts.id < :p3)
        stmt = stmt.where(predicate)
    """

    __slots__ = ("alias", "keys", "unique_key")

    def __init__(self, keys: Iterable[OrderingKey], unique_key: str, alias: str) -> None:
        self.keys = tuple(keys)
        self.unique_key = unique_key
        self.alias = alias

    @property
    def is_unique_key_pagination(self) -> bool:
        """Only the unique key orders the result."""
        return all(item.key == self.unique_key for item in self.keys)

    def build(self, cursors: CursorParam, operator: str) -> ColumnElement[bool]:
        """Build the seek predicate.

        Args:
            cursors: Decoded cursor values keyed by ordering-key name
            operator: ``>``, ``<`` or ``=`` from the order planner

        Returns:
            Boolean expression to AND into the query
        """
        compare = OPERATORS[operator]

        if self.is_unique_key_pagination:
            return and_(
                *(self._bounded(item, cursors, compare) for item in self.keys)
            )

        advance = []
        tie_break = []
        for item in self.keys:
            if item.key == self.unique_key:
                column = item.where_clause(self.alias)
                tie_break.append(compare(column, cursors.get(item.key)))
                continue
            advance.append(self._bounded(item, cursors, compare))
            tie_break.append(self._tied(item, cursors))

        return or_(and_(*advance), and_(*tie_break))

    def _bounded(self, item: OrderingKey, cursors: CursorParam, compare: Any) -> Any:
        column = item.where_clause(self.alias)
        value = cursors.get(item.key)
        if value is None:
            return column.is_not(None)
        return compare(column, value)

    def _tied(self, item: OrderingKey, cursors: CursorParam) -> Any:
        column = item.where_clause(self.alias)
        value = cursors.get(item.key)
        if value is None:
            return column.is_(None)
        return column == value


__all__ = ["OPERATORS", "SeekPredicateBuilder"]
