"""Cursor encoding and decoding for keyset pagination.

A cursor is an opaque string holding the ordering-key values of one record,
which is the record's position in the declared ordering. The next query seeks
past those values instead of using OFFSET.

The cursor format is:
1. One ``key:value`` token per ordering key, joined with ``,``
2. Base64 URL-safe encoded for use in URLs

Values are written by the key's ``KeyType`` and then percent-encoded, so a
value may safely contain ``,`` or ``:``. Key names are not escaped and are
validated when the codec is built. A ``None`` value is written as the bare
key name with no ``:``.

Example payload:
    created_at:2025-01-15T10%3A30%3A00%2B00%3A00,id:42
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Iterable
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from urllib.parse import quote, unquote

from keyset_paginator.core.pagination.exceptions import InvalidCursorError
from keyset_paginator.core.pagination.keys import (
    FIELD_SEPARATOR,
    VALUE_SEPARATOR,
    KeyType,
    OrderingKey,
    SimpleKey,
    TypeRegistry,
    validate_key_name,
)
from keyset_paginator.infra.logging import get_lazy_logger

_lazy = get_lazy_logger(__name__)

CursorParam = dict[str, Any]

_TRUE = "true"
_FALSE = "false"


def encode_by_type(key_type: KeyType, value: Any) -> str:
    """Serialize a single cursor value to text (before percent-encoding)."""
    match key_type:
        case KeyType.BOOLEAN:
            return _TRUE if value else _FALSE
        case KeyType.DATETIME if isinstance(value, (datetime, date)):
            return value.isoformat()
        case KeyType.NUMBER if isinstance(value, Decimal):
            # Avoid scientific notation such as 1E+2
            return format(value, "f")
        case _:
            return str(value)


def decode_by_type(key_type: KeyType, raw: str) -> Any:
    """Parse a single cursor value.

    Raises:
        ValueError: If ``raw`` is not valid for ``key_type``.
    """
    match key_type:
        case KeyType.NUMBER:
            try:
                return int(raw)
            except ValueError:
                return float(raw)
        case KeyType.BOOLEAN:
            if raw == _TRUE:
                return True
            if raw == _FALSE:
                return False
            raise ValueError(f"boolean value must be {_TRUE!r} or {_FALSE!r}, got {raw!r}")
        case KeyType.DATETIME:
            if "T" in raw or " " in raw:
                return datetime.fromisoformat(raw)
            return date.fromisoformat(raw)
        case _:
            return raw


class CursorCodec:
    """Encode and decode pagination cursors for a fixed set of keys.

    Usage:
        codec = CursorCodec(
            [SimpleKey("score"), SimpleKey("id")],
            TypeRegistry({"score": KeyType.NUMBER, "id": KeyType.NUMBER}),
        )

        # Encoding
        cursor = codec.encode(row)

        # Decoding
        values = codec.decode(cursor)
        print(values)  # {"score": 10, "id": 2}
    """

    __slots__ = ("_keys", "_names", "_types", "_unique_key")

    def __init__(
        self,
        keys: Iterable[str | OrderingKey],
        types: TypeRegistry | None = None,
        unique_key: str | None = None,
    ) -> None:
        """Initialize codec.

        Args:
            keys: Ordering keys, in declared priority order
            types: Type registry; unknown key names default to STRING
            unique_key: Tie-breaking key; decoding rejects a NULL value for it

        Raises:
            PaginatorConfigError: If a key name contains a cursor delimiter
        """
        self._keys: tuple[OrderingKey, ...] = tuple(
            SimpleKey(item) if isinstance(item, str) else item for item in keys
        )
        for item in self._keys:
            validate_key_name(item.key)
        self._names = frozenset(item.key for item in self._keys)
        self._types = types or TypeRegistry()
        self._unique_key = unique_key

    @property
    def keys(self) -> tuple[OrderingKey, ...]:
        return self._keys

    def encode(self, record: Any) -> str:
        """Encode a record's position to an opaque cursor string.

        Args:
            record: Mapped instance, row or mapping holding the key values

        Returns:
            URL-safe base64 encoded string
        """
        tokens = []
        for item in self._keys:
            value = item.cursor_value(record)
            if value is None:
                tokens.append(item.key)
                continue
            if isinstance(item, SimpleKey):
                text = encode_by_type(self._types.get(item.key), value)
            else:
                text = str(value)
            tokens.append(f"{item.key}{VALUE_SEPARATOR}{quote(text, safe='')}")

        payload = FIELD_SEPARATOR.join(tokens)
        return base64.urlsafe_b64encode(payload.encode()).decode()

    def decode(self, cursor: str) -> CursorParam:
        """Decode a cursor string to a mapping of key name to value.

        Args:
            cursor: URL-safe base64 encoded cursor string

        Returns:
            Decoded values keyed by ordering-key name

        Raises:
            InvalidCursorError: If the cursor is malformed or was not
                produced for these keys
        """
        try:
            payload = base64.b64decode(cursor.encode("ascii"), altchars=b"-_", validate=True).decode(
                "utf-8"
            )
        except (binascii.Error, UnicodeError, ValueError) as e:
            raise InvalidCursorError(cursor, f"malformed base64 - {e}") from e

        if not payload:
            raise InvalidCursorError(cursor, "empty payload")

        values: CursorParam = {}
        for token in payload.split(FIELD_SEPARATOR):
            key, sep, raw = token.partition(VALUE_SEPARATOR)
            if not key:
                raise InvalidCursorError(cursor, f"missing key in token {token!r}")
            if key not in self._names:
                raise InvalidCursorError(cursor, f"unknown key {key!r}")
            if key in values:
                raise InvalidCursorError(cursor, f"duplicate key {key!r}")
            if not sep:
                values[key] = None
                continue

            key_type = self._types.get(key)
            try:
                values[key] = decode_by_type(key_type, unquote(raw, errors="strict"))
            except (ValueError, UnicodeError) as e:
                raise InvalidCursorError(
                    cursor, f"{key!r} is not a valid {key_type.value} - {e}"
                ) from e

        missing = [item.key for item in self._keys if item.key not in values]
        if missing:
            raise InvalidCursorError(cursor, f"missing keys {missing!r}")
        if self._unique_key is not None and values.get(self._unique_key) is None:
            raise InvalidCursorError(cursor, f"unique key {self._unique_key!r} must not be null")

        _lazy.debug(lambda: f"cursor.decode: {values!r}")
        return values


__all__ = ["CursorCodec", "CursorParam", "decode_by_type", "encode_by_type"]
