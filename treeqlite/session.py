"""Federated execution of one SQL statement over a tree of SQLite files.

A call translates the query, resolves every alias to a database file under
the configured root, opens the ``main`` file (or an in-memory database),
attaches the rest, and runs the single rewritten statement through an
execution strategy. The connection is closed on every exit path; when the
call fails, files it created that are still unused and directories left
empty are removed again.

The functions here take the translator as their first argument. The
bindings in treeqlite.api supply the default one.
"""

import sqlite3
from collections.abc import Callable, Sequence
from contextlib import closing
from typing import Any, TypeVar

from treeqlite.config import TreeQLiteConfig
from treeqlite.errors import ContractViolation, TranslationError, TreeQLiteError
from treeqlite.paths import resolve_db_path
from treeqlite.provisioner import InstanceProvisioner
from treeqlite.statements import ExecResult, QueryResult, Row, run_all, run_exec, run_mutate
from treeqlite.translator import TranslateFn, TranslationFailure
from treeqlite.utils.constants import MAIN_ALIAS
from treeqlite.utils.logging import logger

T = TypeVar("T")


def execute_query(
    translate: TranslateFn,
    config: TreeQLiteConfig,
    run_statement: Callable[..., T],
    query: str,
    params: Sequence[Any] | None = None,
    *,
    log=None,
    provisioner: InstanceProvisioner | None = None,
) -> T:
    """Run query against the databases its virtual paths name.

    Args:
        translate: SQL translator (see treeqlite.translator)
        config: Root of the database tree
        run_statement: Execution strategy, called once with the open connection
        query: SQL with quoted virtual-path table references
        params: Positional parameters for the statement
        log: Loguru-style logger; defaults to the package logger
        provisioner: Provisioner for this call; a fresh one by default

    Raises:
        TranslationError: The translator rejected the query
        ContractViolation: The translation did not yield exactly one statement
        InvalidPathError: A virtual path escapes the root or cannot be attached safely
        TreeQLiteError: SQLite failed while opening, attaching or executing
        OSError: A directory or database file could not be created
    """
    log = log if log is not None else logger.bind(component="federation")

    translation = translate(query)
    if isinstance(translation, TranslationFailure):
        raise TranslationError(translation.reason)

    databases = translation.databases
    log.debug(f"databases: {databases}")
    log.debug(f"translated queries: {translation.queries}")

    if len(translation.queries) != 1:
        raise ContractViolation(
            f"Expected exactly one query, translation produced {len(translation.queries)}"
        )
    translated_query = translation.queries[0]

    resolved = {alias: resolve_db_path(config, path) for alias, path in databases.items()}
    log.debug(f"resolved paths: {resolved}")

    provisioner = provisioner if provisioner is not None else InstanceProvisioner()

    try:
        try:
            conn = provisioner.open(resolved.get(MAIN_ALIAS))
        except sqlite3.Error as e:
            raise _storage_error(log, databases, e, query) from e

        with closing(conn):
            try:
                for alias, db_path in resolved.items():
                    if alias == MAIN_ALIAS:
                        continue
                    provisioner.attach(conn, alias, db_path)

                return run_statement(conn, translated_query, params)
            except sqlite3.Error as e:
                raise _storage_error(log, databases, e, query) from e
    except BaseException:
        provisioner.discard()
        raise


def _storage_error(log, databases: dict[str, str], error: sqlite3.Error, query: str) -> TreeQLiteError:
    log.debug(f"Error running query: {error}")
    return TreeQLiteError(databases, error, query)


def tql_query(
    translate: TranslateFn,
    config: TreeQLiteConfig,
    query: str,
    params: Sequence[Any] | None = None,
) -> QueryResult:
    """Run a statement for its effect; returns change count and last rowid."""
    return execute_query(translate, config, run_mutate, query, params)


def tql_all(
    translate: TranslateFn,
    config: TreeQLiteConfig,
    query: str,
    params: Sequence[Any] | None = None,
) -> list[Row]:
    """Run a statement and return all of its rows."""
    return execute_query(translate, config, run_all, query, params)


def tql_exec(
    translate: TranslateFn,
    config: TreeQLiteConfig,
    query: str,
    params: Sequence[Any] | None = None,
) -> ExecResult:
    """Run a statement whose shape is not known in advance."""
    return execute_query(translate, config, run_exec, query, params)
