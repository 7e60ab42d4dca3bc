"""Unit tests for parameter normalization."""

from __future__ import annotations

from row_aggregate.core.params import normalize_params


class TestNormalizeParams:
    def test_named_passthrough(self) -> None:
        sql = 'SELECT * FROM "task" WHERE "id" = :id'
        assert normalize_params(sql, "named") == sql

    def test_pyformat_conversion(self) -> None:
        sql = 'UPDATE "task" SET "title" = :title WHERE "id" = :id'
        expected = 'UPDATE "task" SET "title" = %(title)s WHERE "id" = %(id)s'
        assert normalize_params(sql, "pyformat") == expected

    def test_link_insert(self) -> None:
        sql = "INSERT INTO project_person (project_id, person_id) VALUES (:owner, :target)"
        expected = (
            "INSERT INTO project_person (project_id, person_id) VALUES (%(owner)s, %(target)s)"
        )
        assert normalize_params(sql, "pyformat") == expected

    def test_typecast_exclusion(self) -> None:
        sql = "SELECT created::date FROM task WHERE id = :id"
        expected = "SELECT created::date FROM task WHERE id = %(id)s"
        assert normalize_params(sql, "pyformat") == expected

    def test_string_literal_exclusion(self) -> None:
        sql = "SELECT * FROM task WHERE title = ':literal' AND id = :id"
        expected = "SELECT * FROM task WHERE title = ':literal' AND id = %(id)s"
        assert normalize_params(sql, "pyformat") == expected

    def test_repeated_param(self) -> None:
        sql = "SELECT * FROM t WHERE a = :val OR b = :val"
        expected = "SELECT * FROM t WHERE a = %(val)s OR b = %(val)s"
        assert normalize_params(sql, "pyformat") == expected

    def test_no_params(self) -> None:
        assert normalize_params('INSERT INTO "tag" DEFAULT VALUES', "pyformat") == (
            'INSERT INTO "tag" DEFAULT VALUES'
        )
