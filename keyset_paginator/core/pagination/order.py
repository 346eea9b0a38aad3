"""Sort direction planning for keyset pagination.

Forward traversal (an after-cursor is set) keeps the declared order and seeks
with ``>`` for ASC or ``<`` for DESC. Pure backward traversal (only a
before-cursor is set) walks toward the boundary in the opposite direction:
the ORDER BY is flipped for the fetch and the rows are reversed afterwards
so the caller still sees the declared order.

    after   before  order   operator
    yes     -       ASC     >
    yes     -       DESC    <
    -       yes     ASC     <
    -       yes     DESC    >
    -       -       any     =   (no seek predicate is built)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from keyset_paginator.core.pagination.keys import OrderingKey


class Order(StrEnum):
    """Declared sort order."""

    ASC = "ASC"
    DESC = "DESC"


def flip_order(order: Order) -> Order:
    """Return the opposite sort order."""
    return Order.DESC if order is Order.ASC else Order.ASC


@dataclass(frozen=True, slots=True)
class OrderPlanner:
    """Operator and effective ORDER BY for one pagination request.

    Attributes:
        order: Declared order
        has_after: Whether an after-cursor is set
        has_before: Whether a before-cursor is set

    Example:
        planner = OrderPlanner(Order.DESC, has_after=False, has_before=True)
        planner.operator         # ">"
        planner.effective_order  # Order.ASC
        planner.is_backward      # True
    """

    order: Order
    has_after: bool = False
    has_before: bool = False

    @property
    def is_backward(self) -> bool:
        """Only the before-cursor is set; rows must be reversed after fetching."""
        return self.has_before and not self.has_after

    @property
    def operator(self) -> str:
        if self.has_after:
            return ">" if self.order is Order.ASC else "<"
        if self.has_before:
            return "<" if self.order is Order.ASC else ">"
        return "="

    @property
    def effective_order(self) -> Order:
        if self.is_backward:
            return flip_order(self.order)
        return self.order

    def order_by(self, keys: Iterable[OrderingKey], alias: str) -> list[Any]:
        """Build ORDER BY clauses, every key in the effective direction."""
        clauses = []
        for item in keys:
            column = item.order_clause(alias)
            if self.effective_order is Order.DESC:
                clauses.append(column.desc())
            else:
                clauses.append(column.asc())
        return clauses


__all__ = ["Order", "OrderPlanner", "flip_order"]
