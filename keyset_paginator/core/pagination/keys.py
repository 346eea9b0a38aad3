"""Ordering keys and the cursor value type registry.

An ordering key is either a plain mapped attribute (``SimpleKey``) or a
custom key (``CustomKey``) with its own SELECT expression and a function
that produces its cursor value from a record. Callers may pass bare strings
anywhere a key is expected; they are normalized to ``SimpleKey``.

Every key name maps to a ``KeyType`` that controls how its value is written
into and read back from a cursor. The mapping is declared once, when a
paginator is configured, either explicitly or from a mapped entity's column
types via ``TypeRegistry.from_entity``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any

from sqlalchemy import ColumnElement, literal_column
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.visitors import InternalTraversal

from keyset_paginator.core.pagination.exceptions import PaginatorConfigError

logger = logging.getLogger(__name__)

# Characters reserved by the cursor wire format
FIELD_SEPARATOR = ","
VALUE_SEPARATOR = ":"

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class QualifiedColumn(ColumnElement[Any]):
    """Column reference by name, optionally qualified with a table or alias name.

    Both names are quoted by the dialect when needed (reserved words, mixed
    case). Unlike a ``Table`` column it adds nothing to the FROM clause, so it
    can point at whatever the base query already selects from.
    """

    inherit_cache = True
    _traverse_internals = [
        ("table_name", InternalTraversal.dp_string),
        ("column_name", InternalTraversal.dp_string),
    ]

    def __init__(self, column_name: str, table_name: str | None = None) -> None:
        self.column_name = column_name
        self.table_name = table_name
        self.key = column_name


@compiles(QualifiedColumn)
def _compile_qualified_column(element: QualifiedColumn, compiler: Any, **kw: Any) -> str:
    quote = compiler.preparer.quote
    if element.table_name is None:
        return quote(element.column_name)
    return f"{quote(element.table_name)}.{quote(element.column_name)}"


class KeyType(StrEnum):
    """Type tag used to (de)serialize a cursor value."""

    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    DATETIME = "datetime"


@dataclass(frozen=True, slots=True)
class SimpleKey:
    """Ordering key backed by a mapped attribute.

    The WHERE and ORDER BY expressions qualify the field with the
    paginator's alias, e.g. ``users.created_at``, quoting either name where
    the dialect requires it. ``field`` is the column name in SQL and the
    attribute (or mapping key) read from records, so a mapped attribute
    whose column has a different name needs a ``CustomKey`` instead.
    """

    field: str

    @property
    def key(self) -> str:
        return self.field

    def where_clause(self, alias: str) -> Any:
        return QualifiedColumn(self.field, alias)

    def order_clause(self, alias: str) -> Any:
        return self.where_clause(alias)

    def cursor_value(self, record: Any) -> Any:
        if isinstance(record, Mapping):
            return record.get(self.field)
        return getattr(record, self.field, None)


@dataclass(frozen=True, slots=True)
class CustomKey:
    """Ordering key with a caller-supplied expression and cursor value.

    Attributes:
        key: Key name used in cursors and as the SELECT label
        get_cursor_value: Produces the key's cursor string from a record
        select: Optional SQL expression (string or column expression)
            added to the SELECT list under ``key``. When omitted, ``key``
            must already be selectable by that name.

    Example:
        CustomKey(
            key="name_lower",
            select="lower(users.name)",
            get_cursor_value=lambda user: user.name.lower(),
        )
    """

    key: str
    get_cursor_value: Callable[[Any], str]
    select: Any = None

    def select_expression(self) -> Any:
        if isinstance(self.select, str):
            return literal_column(self.select)
        return self.select

    def where_clause(self, alias: str) -> Any:
        if self.select is None:
            return QualifiedColumn(self.key)
        return self.select_expression()

    def order_clause(self, alias: str) -> Any:
        # ORDER BY references the SELECT label
        return QualifiedColumn(self.key)

    def cursor_value(self, record: Any) -> Any:
        return self.get_cursor_value(record)


OrderingKey = SimpleKey | CustomKey


def normalize_keys(
    pagination_keys: Iterable[str | OrderingKey],
    unique_key: str,
) -> tuple[OrderingKey, ...]:
    """Normalize caller keys and make sure the unique key is present.

    Bare strings become ``SimpleKey``. When ``unique_key`` is not among the
    ordering keys it is appended so cursors always carry the tie-breaker.

    Raises:
        PaginatorConfigError: If a key name is empty, repeated, or contains a
            cursor delimiter.
    """
    keys: list[OrderingKey] = [
        SimpleKey(item) if isinstance(item, str) else item for item in pagination_keys
    ]
    if not any(item.key == unique_key for item in keys):
        keys.append(SimpleKey(unique_key))

    seen: set[str] = set()
    for item in keys:
        validate_key_name(item.key)
        if item.key in seen:
            raise PaginatorConfigError(
                f"Duplicate pagination key {item.key!r}", setting="pagination_keys"
            )
        seen.add(item.key)
    return tuple(keys)


def validate_key_name(name: str) -> None:
    """Reject key names the cursor format cannot carry."""
    if not name:
        raise PaginatorConfigError("Pagination key name must not be empty", setting="pagination_keys")
    if FIELD_SEPARATOR in name or VALUE_SEPARATOR in name:
        raise PaginatorConfigError(
            f"Pagination key {name!r} must not contain {FIELD_SEPARATOR!r} or {VALUE_SEPARATOR!r}",
            setting="pagination_keys",
        )


def pascal_to_underscore(name: str) -> str:
    """Convert a class name to snake_case (``UserProfile`` -> ``user_profile``)."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def _type_for_python(python_type: type) -> KeyType:
    # bool before int: bool is an int subclass
    if issubclass(python_type, bool):
        return KeyType.BOOLEAN
    if issubclass(python_type, (int, float, Decimal)):
        return KeyType.NUMBER
    if issubclass(python_type, (datetime, date)):
        return KeyType.DATETIME
    return KeyType.STRING


class TypeRegistry:
    """Maps key names to ``KeyType``; unknown names resolve to STRING.

    Example:
        registry = TypeRegistry({"score": KeyType.NUMBER})
        registry.get("score")    # KeyType.NUMBER
        registry.get("missing")  # KeyType.STRING
    """

    __slots__ = ("_types",)

    def __init__(self, types: Mapping[str, KeyType | str] | None = None) -> None:
        self._types: dict[str, KeyType] = {
            name: KeyType(type_) for name, type_ in (types or {}).items()
        }

    def get(self, name: str) -> KeyType:
        return self._types.get(name, KeyType.STRING)

    def merged(self, overrides: Mapping[str, KeyType | str] | None) -> TypeRegistry:
        """Return a new registry with ``overrides`` taking precedence."""
        registry = TypeRegistry()
        registry._types = {**self._types, **TypeRegistry(overrides)._types}
        return registry

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __repr__(self) -> str:
        return f"TypeRegistry({self._types!r})"

    @classmethod
    def from_entity(cls, entity: Any) -> TypeRegistry:
        """Build a registry from a mapped class (or ``aliased()`` entity).

        Column types are read once from the mapper. Columns whose type has
        no Python equivalent fall back to STRING. Non-mapped entities yield
        an empty registry.
        """
        try:
            insp = sa_inspect(entity)
        except NoInspectionAvailable:
            logger.debug("No mapper for %r, cursor values default to strings", entity)
            return cls()

        mapper = getattr(insp, "mapper", insp)
        types: dict[str, KeyType] = {}
        for name, col in mapper.columns.items():
            try:
                python_type = col.type.python_type
            except NotImplementedError:
                continue
            types[name] = _type_for_python(python_type)
        return cls(types)


__all__ = [
    "FIELD_SEPARATOR",
    "VALUE_SEPARATOR",
    "CustomKey",
    "KeyType",
    "OrderingKey",
    "SimpleKey",
    "TypeRegistry",
    "normalize_keys",
    "pascal_to_underscore",
    "validate_key_name",
]
