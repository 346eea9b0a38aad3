"""Test utilities and helper functions.

Provides the mapped model the pagination tests run against and small
helpers for seeding rows and collecting pages.

Usage:
    from tests.utils import Post, seed_posts

    await seed_posts(db_session, [(1, 10), (2, 10), (3, 5)])
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.ext.asyncio import AsyncSession


class Base(DeclarativeBase):
    """Declarative base for test models."""


class Post(Base):
    """Test model with a nullable score, text and temporal columns."""

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    title: Mapped[str] = mapped_column(String(255), default="")
    published: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    def __repr__(self) -> str:
        return f"Post(id={self.id}, score={self.score})"


class Step(Base):
    """Test model whose ordering column is an SQL reserved word."""

    __tablename__ = "steps"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order: Mapped[int] = mapped_column(Integer)


async def seed_posts(
    session: AsyncSession,
    rows: Iterable[tuple[int, int | None] | dict[str, Any]],
) -> list[Post]:
    """Insert posts given as ``(id, score)`` tuples or column dicts."""
    posts = []
    for row in rows:
        if isinstance(row, dict):
            posts.append(Post(**row))
        else:
            post_id, score = row
            posts.append(Post(id=post_id, score=score, title=f"post {post_id}"))
    session.add_all(posts)
    await session.flush()
    return posts


def ids(records: Iterable[Post]) -> list[int]:
    """Primary keys of ``records`` in order."""
    return [record.id for record in records]
