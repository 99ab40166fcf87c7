"""TreeQLite - SQL over a tree of SQLite files addressed by virtual paths."""

__version__ = "0.1.0"

from treeqlite.api import tql_all, tql_exec, tql_query
from treeqlite.config import TreeQLiteConfig
from treeqlite.errors import (
    ContractViolation,
    InvalidPathError,
    TranslationError,
    TreeQLiteError,
    TreeQLiteException,
)
from treeqlite.statements import ExecResult, NoData, QueryResult, ReturnedData

__all__ = [
    "__version__",
    "ContractViolation",
    "ExecResult",
    "InvalidPathError",
    "NoData",
    "QueryResult",
    "ReturnedData",
    "TranslationError",
    "TreeQLiteConfig",
    "TreeQLiteError",
    "TreeQLiteException",
    "tql_all",
    "tql_exec",
    "tql_query",
]
