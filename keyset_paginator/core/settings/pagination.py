"""Pagination settings for keyset paginators.

Centralized defaults for every ``Paginator`` created without an explicit
limit or order, so page sizes stay consistent and can be tuned per
deployment.

Environment variables use PAGINATION_ prefix.
Example: PAGINATION_DEFAULT_LIMIT=50, PAGINATION_DEFAULT_ORDER=ASC
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_LIMIT = 100


class PaginationSettings(BaseSettings):
    """Pagination configuration settings.

    Attributes:
        default_limit: Page size used when the caller does not set one.
            Follows max_limit down when only max_limit is configured.
        max_limit: Largest page size accepted from callers (hard limit).
        default_order: Declared order used when the caller does not set one.

    Example:
        settings = PaginationSettings()
        paginator.set_limit(min(requested_limit, settings.max_limit))
    """

    default_limit: int = Field(
        default=DEFAULT_LIMIT,
        ge=1,
        le=10000,
        description="Default page size when limit not specified",
    )
    max_limit: int = Field(
        default=1000,
        ge=1,
        le=10000,
        description="Maximum allowed page size (hard limit)",
    )
    default_order: Literal["ASC", "DESC"] = Field(
        default="DESC",
        description="Default declared order when order not specified",
    )

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _cap_default_limit(cls, data: Any) -> Any:
        # An unset default_limit follows a smaller max_limit
        if not isinstance(data, dict) or data.get("default_limit") is not None:
            return data
        max_limit = data.get("max_limit")
        if max_limit is None:
            return data
        return {**data, "default_limit": min(DEFAULT_LIMIT, int(max_limit))}

    @model_validator(mode="after")
    def _check_limits(self) -> PaginationSettings:
        if self.default_limit > self.max_limit:
            msg = f"default_limit ({self.default_limit}) exceeds max_limit ({self.max_limit})"
            raise ValueError(msg)
        return self
