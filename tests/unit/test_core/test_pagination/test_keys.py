"""Unit tests for ordering keys, type registry and alias defaults."""
from __future__ import annotations

import pytest
from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import aliased

from keyset_paginator.core.pagination.exceptions import PaginatorConfigError
from keyset_paginator.core.pagination.keys import (
    CustomKey,
    KeyType,
    SimpleKey,
    TypeRegistry,
    normalize_keys,
    pascal_to_underscore,
)
from keyset_paginator.core.pagination.paginator import default_alias
from tests.utils import Post


class TestNormalizeKeys:
    """Caller keys are normalized and always end up including the unique key."""

    def test_strings_become_simple_keys(self):
        assert normalize_keys(["score", "id"], "id") == (SimpleKey("score"), SimpleKey("id"))

    def test_unique_key_appended_when_missing(self):
        assert normalize_keys(["score"], "id") == (SimpleKey("score"), SimpleKey("id"))

    def test_unique_key_position_preserved(self):
        assert normalize_keys(["id", "score"], "id") == (SimpleKey("id"), SimpleKey("score"))

    def test_custom_keys_kept(self):
        rank = CustomKey(key="rank", get_cursor_value=str)

        assert normalize_keys([rank], "id") == (rank, SimpleKey("id"))

    def test_duplicate_key_rejected(self):
        with pytest.raises(PaginatorConfigError, match="Duplicate"):
            normalize_keys(["score", "score"], "id")

    @pytest.mark.parametrize("name", ["a:b", "a,b"])
    def test_delimiter_rejected(self, name):
        with pytest.raises(PaginatorConfigError) as exc_info:
            normalize_keys([name], "id")

        assert exc_info.value.details == {"setting": "pagination_keys"}


class TestTypeRegistry:
    """Key types resolve from explicit declarations or mapped columns."""

    def test_unknown_defaults_to_string(self):
        registry = TypeRegistry({"score": KeyType.NUMBER})

        assert registry.get("score") is KeyType.NUMBER
        assert registry.get("missing") is KeyType.STRING
        assert "missing" not in registry

    def test_accepts_type_names(self):
        assert TypeRegistry({"at": "datetime"}).get("at") is KeyType.DATETIME

    def test_from_entity(self):
        registry = TypeRegistry.from_entity(Post)

        assert registry.get("id") is KeyType.NUMBER
        assert registry.get("score") is KeyType.NUMBER
        assert registry.get("title") is KeyType.STRING
        assert registry.get("published") is KeyType.BOOLEAN
        assert registry.get("created_at") is KeyType.DATETIME

    def test_from_aliased_entity(self):
        registry = TypeRegistry.from_entity(aliased(Post, name="p"))

        assert registry.get("score") is KeyType.NUMBER

    def test_from_unmapped_class_is_empty(self):
        class Plain:
            pass

        assert TypeRegistry.from_entity(Plain).get("id") is KeyType.STRING

    def test_merged_overrides_take_precedence(self):
        registry = TypeRegistry.from_entity(Post).merged({"title": KeyType.NUMBER})

        assert registry.get("title") is KeyType.NUMBER
        assert registry.get("id") is KeyType.NUMBER


class TestAlias:
    """Bare field names are qualified with the entity's name by default."""

    def test_mapped_class_uses_table_name(self):
        assert default_alias(Post) == "posts"

    def test_aliased_entity_uses_alias_name(self):
        assert default_alias(aliased(Post, name="p")) == "p"

    def test_plain_class_uses_snake_case_name(self):
        class UserProfile:
            pass

        assert default_alias(UserProfile) == "user_profile"

    @pytest.mark.parametrize(
        ("name", "expected"),
        [("User", "user"), ("UserProfile", "user_profile"), ("ABTest", "a_b_test")],
    )
    def test_pascal_to_underscore(self, name, expected):
        assert pascal_to_underscore(name) == expected


class TestKeyColumns:
    """Key columns are qualified with the alias and quoted per dialect."""

    def test_plain_names_unquoted(self):
        assert str(SimpleKey("score").where_clause("posts")) == "posts.score"

    @pytest.mark.parametrize("dialect", [sqlite.dialect(), postgresql.dialect()])
    def test_reserved_words_quoted(self, dialect):
        clause = SimpleKey("order").where_clause("group")

        assert str(clause.compile(dialect=dialect)) == '"group"."order"'

    def test_custom_key_label_quoted(self):
        key = CustomKey(key="select", get_cursor_value=str)

        assert str(key.order_clause("posts")) == '"select"'

    def test_no_extra_from_clause(self):
        statement = select(Post).where(SimpleKey("score").where_clause("posts") > 1)

        assert str(statement).count("FROM posts") == 1
        assert ", posts" not in str(statement)
