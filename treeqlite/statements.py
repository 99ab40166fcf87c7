"""Execution strategies for a single translated statement.

Each strategy receives an open connection, the one rewritten SQL string and
its positional parameters, and executes the statement exactly once.
"""

import sqlite3
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

Row = dict[str, Any]


@dataclass(frozen=True)
class QueryResult:
    """Effect counters of one statement."""

    changes: int
    last_insert_rowid: int


@dataclass(frozen=True)
class NoData:
    """The statement produced no row set."""

    result: QueryResult
    type: ClassVar[str] = "noData"


@dataclass(frozen=True)
class ReturnedData:
    """The statement produced a row set."""

    data: list[Row]
    type: ClassVar[str] = "returnedData"


ExecResult = NoData | ReturnedData


class Statement:
    """One SQL statement on one connection.

    sqlite3 only exposes a statement's columns once it has been stepped, so
    returns_rows() is answered from the executed cursor. The statement is
    still executed exactly once.
    """

    def __init__(self, conn: sqlite3.Connection, sql: str):
        self.conn = conn
        self.sql = sql
        self._cursor: sqlite3.Cursor | None = None

    def execute(self, params: Sequence[Any] | None = None) -> "Statement":
        if self._cursor is not None:
            raise RuntimeError("Statement has already been executed")
        self._cursor = self.conn.execute(self.sql, tuple(params or ()))
        return self

    @property
    def cursor(self) -> sqlite3.Cursor:
        if self._cursor is None:
            raise RuntimeError("Statement has not been executed")
        return self._cursor

    def returns_rows(self) -> bool:
        """Whether the statement yields a row set (SELECT, RETURNING, ...)."""
        return self.cursor.description is not None

    def fetch_rows(self) -> list[Row]:
        return [dict(row) for row in self.cursor.fetchall()]

    def counters(self) -> QueryResult:
        # Step to completion first: INSERT ... RETURNING only finishes its
        # writes once every row has been fetched
        self.cursor.fetchall()
        return QueryResult(
            changes=max(self.cursor.rowcount, 0),
            last_insert_rowid=self.cursor.lastrowid or 0,
        )

    def run(self, params: Sequence[Any] | None = None) -> QueryResult:
        return self.execute(params).counters()

    def all(self, params: Sequence[Any] | None = None) -> list[Row]:
        return self.execute(params).fetch_rows()


def run_mutate(conn: sqlite3.Connection, sql: str, params: Sequence[Any] | None = None) -> QueryResult:
    """Run the statement and report change count and last inserted rowid."""
    return Statement(conn, sql).run(params)


def run_all(conn: sqlite3.Connection, sql: str, params: Sequence[Any] | None = None) -> list[Row]:
    """Run the statement and return every row it produces."""
    return Statement(conn, sql).all(params)


def run_exec(conn: sqlite3.Connection, sql: str, params: Sequence[Any] | None = None) -> ExecResult:
    """Run the statement and pick the result shape from what it produced."""
    statement = Statement(conn, sql).execute(params)
    if statement.returns_rows():
        return ReturnedData(statement.fetch_rows())
    return NoData(statement.counters())
