"""Unit tests for operator selection and ORDER BY planning."""
from __future__ import annotations

import pytest

from keyset_paginator.core.pagination.keys import CustomKey, SimpleKey
from keyset_paginator.core.pagination.order import Order, OrderPlanner, flip_order


class TestOperator:
    """The seek operator follows cursor presence and declared order."""

    @pytest.mark.parametrize(
        ("has_after", "has_before", "order", "expected"),
        [
            (True, False, Order.ASC, ">"),
            (True, False, Order.DESC, "<"),
            (False, True, Order.ASC, "<"),
            (False, True, Order.DESC, ">"),
            (False, False, Order.ASC, "="),
            (False, False, Order.DESC, "="),
            # A stale before-cursor never overrides the after-cursor
            (True, True, Order.ASC, ">"),
            (True, True, Order.DESC, "<"),
        ],
    )
    def test_operator_table(self, has_after, has_before, order, expected):
        planner = OrderPlanner(order, has_after=has_after, has_before=has_before)

        assert planner.operator == expected


class TestEffectiveOrder:
    """Only pure backward traversal flips the ORDER BY."""

    def test_flip_order(self):
        assert flip_order(Order.ASC) is Order.DESC
        assert flip_order(Order.DESC) is Order.ASC

    @pytest.mark.parametrize("order", [Order.ASC, Order.DESC])
    def test_backward_flips(self, order):
        planner = OrderPlanner(order, has_after=False, has_before=True)

        assert planner.is_backward is True
        assert planner.effective_order is flip_order(order)

    @pytest.mark.parametrize(
        ("has_after", "has_before"),
        [(True, False), (True, True), (False, False)],
    )
    def test_forward_keeps_declared_order(self, has_after, has_before):
        planner = OrderPlanner(Order.DESC, has_after=has_after, has_before=has_before)

        assert planner.is_backward is False
        assert planner.effective_order is Order.DESC

    def test_order_is_string_enum(self):
        """Order values compare equal to their SQL keywords."""
        assert Order("ASC") is Order.ASC
        assert Order.DESC == "DESC"


class TestOrderBy:
    """ORDER BY clauses apply one direction to every key."""

    def test_simple_keys_qualified_with_alias(self):
        planner = OrderPlanner(Order.DESC)

        clauses = planner.order_by([SimpleKey("score"), SimpleKey("id")], "posts")

        assert [str(clause) for clause in clauses] == ["posts.score DESC", "posts.id DESC"]

    def test_backward_order_by_is_flipped(self):
        planner = OrderPlanner(Order.DESC, has_before=True)

        clauses = planner.order_by([SimpleKey("score"), SimpleKey("id")], "posts")

        assert [str(clause) for clause in clauses] == ["posts.score ASC", "posts.id ASC"]

    def test_custom_key_ordered_by_label(self):
        planner = OrderPlanner(Order.ASC)
        key = CustomKey(key="title_lower", select="lower(posts.title)", get_cursor_value=str)

        clauses = planner.order_by([key], "posts")

        assert [str(clause) for clause in clauses] == ["title_lower ASC"]
