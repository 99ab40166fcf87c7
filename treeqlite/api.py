"""Query functions bound to the default sqlparse-based translator."""

from collections.abc import Sequence
from typing import Any

from treeqlite import session
from treeqlite.config import TreeQLiteConfig
from treeqlite.statements import ExecResult, QueryResult, Row
from treeqlite.translator import translate_sql


def tql_query(config: TreeQLiteConfig, query: str, params: Sequence[Any] | None = None) -> QueryResult:
    return session.tql_query(translate_sql, config, query, params)


def tql_all(config: TreeQLiteConfig, query: str, params: Sequence[Any] | None = None) -> list[Row]:
    return session.tql_all(translate_sql, config, query, params)


def tql_exec(config: TreeQLiteConfig, query: str, params: Sequence[Any] | None = None) -> ExecResult:
    return session.tql_exec(translate_sql, config, query, params)
