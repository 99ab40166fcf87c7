"""Tests for the error hierarchy and SQLite message translation."""

import sqlite3

import pytest

from treeqlite.errors import (
    ContractViolation,
    InvalidPathError,
    TranslationError,
    TreeQLiteError,
    TreeQLiteException,
    translate_error_in_place,
)


class TestTranslateErrorInPlace:
    def test_main_alias_rewritten(self):
        error = sqlite3.OperationalError("no such table: main.table_contents")

        translate_error_in_place({"main": "~/users"}, error)

        assert str(error) == "no such table: ~/users"

    def test_every_alias_rewritten(self):
        error = sqlite3.IntegrityError(
            "FOREIGN KEY between main.table_contents and db1.table_contents failed"
        )

        translate_error_in_place({"main": "~/users", "db1": "~/music/plays"}, error)

        assert str(error) == "FOREIGN KEY between ~/users and ~/music/plays failed"

    def test_similar_aliases_do_not_collide(self):
        error = sqlite3.OperationalError("no such table: db10.table_contents")

        translate_error_in_place({"db1": "~/one", "db10": "~/ten"}, error)

        assert str(error) == "no such table: ~/ten"

    def test_message_without_alias_unchanged(self):
        error = sqlite3.OperationalError('near "SELEC": syntax error')

        translate_error_in_place({"main": "~/users"}, error)

        assert str(error) == 'near "SELEC": syntax error'

    def test_error_attributes_survive(self):
        error = sqlite3.OperationalError("no such table: main.table_contents")
        error.sqlite_errorcode = 1

        translate_error_in_place({"main": "~/users"}, error)

        assert error.sqlite_errorcode == 1


class TestTreeQLiteError:
    def test_message_and_cause(self):
        query = 'SELECT * FROM "~/users"'
        error = sqlite3.OperationalError("no such table: main.table_contents")

        wrapped = TreeQLiteError({"main": "~/users"}, error, query)

        assert str(wrapped) == f"Error running query: {query}"
        assert wrapped.__cause__ is error
        assert wrapped.cause is error
        assert str(wrapped.cause) == "no such table: ~/users"
        assert wrapped.query == query
        assert wrapped.databases == {"main": "~/users"}


class TestHierarchy:
    @pytest.mark.parametrize(
        "error_class", [TranslationError, ContractViolation, InvalidPathError, TreeQLiteError]
    )
    def test_single_error_family(self, error_class):
        assert issubclass(error_class, TreeQLiteException)

    def test_translation_error_keeps_reason(self):
        error = TranslationError("unexpected token")

        assert error.reason == "unexpected token"
        assert str(error) == "Error translating query: unexpected token"
