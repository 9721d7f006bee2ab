"""
Tests for the QueryBuilder: SQL rendering, immutability and row matching.
"""

from uuid import uuid4

import pytest

from gallery_cms.query_builder import QueryBuilder


class TestSelect:
    def test_basic_select_all(self):
        query, params = QueryBuilder("paintings").build()

        assert query == "SELECT * FROM paintings"
        assert params == []

    def test_select_specific_fields(self):
        query, _ = QueryBuilder("paintings").select("title", "year").build()

        assert query == "SELECT title, year FROM paintings"

    def test_where_and_order(self):
        query, params = (
            QueryBuilder("paintings")
            .where("is_featured", True)
            .order_by("display_order")
            .order_by("created_at")
            .build()
        )

        assert query == (
            "SELECT * FROM paintings WHERE is_featured = $1 "
            "ORDER BY display_order, created_at"
        )
        assert params == [True]

    def test_explicit_operator_and_desc(self):
        query, params = (
            QueryBuilder("paintings")
            .where("display_order", ">=", 3)
            .order_by_desc("display_order")
            .limit(5)
            .offset(10)
            .build()
        )

        assert query == (
            "SELECT * FROM paintings WHERE display_order >= $1 "
            "ORDER BY display_order DESC LIMIT 5 OFFSET 10"
        )
        assert params == [3]

    def test_none_becomes_is_null(self):
        query, params = (
            QueryBuilder("pages")
            .where("title_ar", None)
            .where("meta_description_ar", "!=", None)
            .build()
        )

        assert query == (
            "SELECT * FROM pages WHERE title_ar IS NULL AND meta_description_ar IS NOT NULL"
        )
        assert params == []

    def test_where_in(self):
        query, params = QueryBuilder("paintings").where_in("theme", ["Urban", "Portrait"]).build()

        assert query == "SELECT * FROM paintings WHERE theme IN ($1, $2)"
        assert params == ["Urban", "Portrait"]

    def test_empty_in_matches_nothing(self):
        query, params = QueryBuilder("paintings").where_in("theme", []).build()

        assert query == "SELECT * FROM paintings WHERE FALSE"
        assert params == []

    def test_fluent_interface_immutability(self):
        base = QueryBuilder("paintings")
        filtered = base.where("theme", "Urban")

        assert base is not filtered
        assert base.build() == ("SELECT * FROM paintings", [])
        assert filtered.build() == ("SELECT * FROM paintings WHERE theme = $1", ["Urban"])

    def test_rejects_unsafe_identifiers(self):
        with pytest.raises(ValueError, match="Invalid identifier"):
            QueryBuilder("paintings").where("title; DROP TABLE paintings", "x")

    def test_rejects_unknown_operator(self):
        with pytest.raises(ValueError, match="Unsupported operator"):
            QueryBuilder("paintings").where("title", "LIKE", "%a%")

    def test_where_arity(self):
        with pytest.raises(TypeError):
            QueryBuilder("paintings").where("title")


class TestWriteStatements:
    def test_count(self):
        query, params = QueryBuilder("paintings").where("collection", "Urban").build_count()

        assert query == "SELECT COUNT(*) FROM paintings WHERE collection = $1"
        assert params == ["Urban"]

    def test_insert_returning(self):
        query, params = QueryBuilder("gallery_settings").build_insert(
            {"name": "tagline", "value_en": "Hi"}
        )

        assert query == (
            "INSERT INTO gallery_settings (name, value_en) VALUES ($1, $2) RETURNING *"
        )
        assert params == ["tagline", "Hi"]

    def test_update_numbers_where_params_after_set_params(self):
        record_id = uuid4()
        query, params = (
            QueryBuilder("pages")
            .where("id", record_id)
            .build_update({"title_en": "New", "is_published": False})
        )

        assert query == (
            "UPDATE pages SET title_en = $1, is_published = $2 WHERE id = $3 RETURNING *"
        )
        assert params == ["New", False, record_id]

    def test_update_advancing_column_never_moves_backwards(self):
        query, params = (
            QueryBuilder("pages")
            .where("slug", "about")
            .build_update({"title_en": "New", "updated_at": "ts"}, advancing=("updated_at",))
        )

        assert query == (
            "UPDATE pages SET title_en = $1, "
            "updated_at = GREATEST($2, updated_at + interval '1 microsecond') "
            "WHERE slug = $3 RETURNING *"
        )
        assert params == ["New", "ts", "about"]

    def test_update_requires_conditions(self):
        with pytest.raises(ValueError, match="WHERE"):
            QueryBuilder("pages").build_update({"title_en": "x"})

    def test_delete(self):
        record_id = uuid4()
        query, params = QueryBuilder("paintings").where("id", record_id).build_delete()

        assert query == "DELETE FROM paintings WHERE id = $1"
        assert params == [record_id]

    def test_delete_requires_conditions(self):
        with pytest.raises(ValueError, match="Cannot delete without WHERE conditions"):
            QueryBuilder("paintings").build_delete()


class TestMatches:
    def test_equality_and_comparison(self):
        builder = QueryBuilder("paintings").where("is_featured", True).where("display_order", "<", 5)

        assert builder.matches({"is_featured": True, "display_order": 2})
        assert not builder.matches({"is_featured": True, "display_order": 5})
        assert not builder.matches({"is_featured": False, "display_order": 1})

    def test_null_comparisons_never_match(self):
        builder = QueryBuilder("paintings").where("display_order", ">", 1)

        assert not builder.matches({"display_order": None})

    def test_in(self):
        builder = QueryBuilder("paintings").where_not_in("theme", ["Urban"])

        assert builder.matches({"theme": "Portrait"})
        assert not builder.matches({"theme": "Urban"})
