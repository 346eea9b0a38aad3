"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: isolate cached pagination settings per test
    - Database Fixtures: in-memory SQLite engine and session with the
      test schema created
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from keyset_paginator.core.settings import get_pagination_settings
from tests.utils import Base

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Drop cached settings so env overrides in one test don't leak."""
    get_pagination_settings.cache_clear()
    yield
    get_pagination_settings.cache_clear()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Create async SQLite engine with the test schema.

    StaticPool keeps a single connection so the in-memory database
    survives across sessions.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide a session that is rolled back after the test."""
    session_factory = async_sessionmaker(db_engine, expire_on_commit=False)
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()
