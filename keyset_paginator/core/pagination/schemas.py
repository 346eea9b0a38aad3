"""Pagination request and response schemas.

The response mirrors the wire shape consumers already rely on:

    {
        "data": [...],
        "cursor": {"beforeCursor": "...", "afterCursor": null}
    }

Fields use snake_case in Python and camelCase aliases when serialized with
``model_dump(by_alias=True)``; either name is accepted on input.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from keyset_paginator.core.pagination.order import Order
from keyset_paginator.core.settings import get_pagination_settings

T = TypeVar("T")


class PagingCursor(BaseModel):
    """Boundary cursors of a page.

    Attributes:
        before_cursor: Cursor of the first row, for fetching the previous page
        after_cursor: Cursor of the last row, for fetching the next page
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    before_cursor: str | None = Field(
        default=None,
        alias="beforeCursor",
        description="Cursor to fetch the previous page",
    )
    after_cursor: str | None = Field(
        default=None,
        alias="afterCursor",
        description="Cursor to fetch the next page",
    )


class PagingResult(BaseModel, Generic[T]):
    """One page of records plus its boundary cursors.

    Usage:
        result = await paginator.paginate(SelectQuery(session, stmt))
        for user in result.data:
            ...
        if result.cursor.after_cursor:
            next_page = await build_paginator(
                User, ["created_at"], "id",
                query=PagingQuery(after_cursor=result.cursor.after_cursor),
            ).paginate(SelectQuery(session, stmt))
    """

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    data: list[T] = Field(
        default_factory=list,
        description="Records in declared order",
    )
    cursor: PagingCursor = Field(
        default_factory=PagingCursor,
        description="Boundary cursors",
    )


class PagingQuery(BaseModel):
    """Caller-supplied pagination parameters.

    Suitable as a query-parameter model in an API layer. ``limit`` and
    ``order`` fall back to ``PaginationSettings`` when omitted.

    Attributes:
        after_cursor: Fetch the page after this cursor
        before_cursor: Fetch the page before this cursor
        limit: Page size, at most ``PaginationSettings.max_limit``
        order: Declared order
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    after_cursor: str | None = Field(default=None, alias="afterCursor")
    before_cursor: str | None = Field(default=None, alias="beforeCursor")
    limit: int | None = Field(default=None, ge=1, description="Page size")
    order: Order | None = Field(default=None, description="ASC or DESC")

    @field_validator("limit")
    @classmethod
    def _limit_within_max(cls, value: int | None) -> int | None:
        if value is None:
            return value
        max_limit = get_pagination_settings().max_limit
        if value > max_limit:
            msg = f"limit must be at most {max_limit}"
            raise ValueError(msg)
        return value

    @field_validator("order", mode="before")
    @classmethod
    def _normalize_order(cls, value: object) -> object:
        if isinstance(value, str):
            return value.upper()
        return value


__all__ = ["PagingCursor", "PagingQuery", "PagingResult"]
