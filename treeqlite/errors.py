"""Error types raised by TreeQLite and the SQLite error translator.

Every error TreeQLite raises on its own derives from TreeQLiteException, so
callers can catch a single family. Filesystem failures while provisioning
database files are not wrapped; they surface as the OSError that caused them.
"""

import sqlite3
from collections.abc import Mapping

from treeqlite.utils.constants import VALUES_TABLE_NAME


class TreeQLiteException(Exception):
    """Base class for all TreeQLite errors."""


class TranslationError(TreeQLiteException):
    """Raised when the SQL translator rejects a query.

    Attributes:
        reason: The translator's own failure message
    """

    def __init__(self, reason: str):
        super().__init__(f"Error translating query: {reason}")
        self.reason = reason


class ContractViolation(TreeQLiteException):
    """Raised when a translation does not yield exactly one statement.

    This is an inconsistency between the translator and the federation
    layer, never a storage error, so it is raised before any database is
    opened.
    """


class InvalidPathError(TreeQLiteException, ValueError):
    """Raised for a virtual path or alias that cannot be used safely."""


def translate_error_in_place(databases: Mapping[str, str], error: sqlite3.Error) -> None:
    """Rewrite alias references in a SQLite error message to virtual paths.

    SQLite reports tables by their physical name, e.g.
    ``no such table: db1.table_contents``. Each ``<alias>.table_contents``
    is replaced with the virtual path the alias stands for.

    Args:
        databases: Mapping of alias -> virtual path from the translation
        error: The SQLite error; its ``args`` are rewritten
    """
    if not error.args or not isinstance(error.args[0], str):
        return

    message = error.args[0]
    for alias, virtual_path in databases.items():
        message = message.replace(f"{alias}.{VALUES_TABLE_NAME}", virtual_path)

    error.args = (message, *error.args[1:])


class TreeQLiteError(TreeQLiteException):
    """A SQLite failure while running a federated query.

    The message names the query as the caller wrote it; the underlying
    sqlite3.Error (with aliases already rewritten to virtual paths) is
    available as ``__cause__``.

    Attributes:
        query: The original query text, before translation
        databases: Mapping of alias -> virtual path used for the call
    """

    def __init__(self, databases: Mapping[str, str], error: sqlite3.Error, query: str):
        translate_error_in_place(databases, error)
        super().__init__(f"Error running query: {query}")
        self.query = query
        self.databases = dict(databases)
        self.__cause__ = error

    @property
    def cause(self) -> sqlite3.Error:
        """The translated sqlite3.Error behind this failure."""
        return self.__cause__
