"""Default SQL translator: virtual-path table references to attached aliases.

A table is referenced by quoting its virtual path::

    SELECT u.name FROM "~/users" u JOIN "~/music/plays" p ON p.user_id = u.id

Each distinct virtual path gets an alias: the first one becomes ``main``,
the following ones ``db1``, ``db2`` and so on. Every reference is rewritten
to ``<alias>.table_contents``, the table each database file holds::

    SELECT u.name FROM main.table_contents u JOIN db1.table_contents p ON ...

Only the tokenizer of sqlparse is relied on; no other part of the query is
interpreted.
"""

from collections.abc import Callable
from dataclasses import dataclass, field

import sqlparse
from sqlparse import tokens as T
from sqlparse.exceptions import SQLParseError

from treeqlite.utils.constants import (
    ATTACHED_ALIAS_PREFIX,
    MAIN_ALIAS,
    ROOT_MARKER,
    VALUES_TABLE_NAME,
)

_QUOTE_PAIRS = {'"': '"', "`": "`", "[": "]"}


@dataclass
class TranslatedQuery:
    """Result of a successful translation.

    Attributes:
        databases: alias -> virtual path, in order of first reference
        queries: Rewritten statements; the federation layer requires exactly one
    """

    databases: dict[str, str] = field(default_factory=dict)
    queries: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TranslationFailure:
    """The translator could not handle the query."""

    reason: str


TranslateFn = Callable[[str], TranslatedQuery | TranslationFailure]


def _unquote(value: str) -> str | None:
    """Return the identifier inside quotes, or None if value is not quoted."""
    if len(value) < 2:
        return None
    close = _QUOTE_PAIRS.get(value[0])
    if close is None or value[-1] != close:
        return None
    inner = value[1:-1]
    if close != "]":
        inner = inner.replace(close * 2, close)
    return inner


def _is_blank(statement) -> bool:
    return all(
        tok.is_whitespace or tok.ttype in T.Comment or tok.match(T.Punctuation, ";")
        for tok in statement.flatten()
    )


def translate_sql(sql: str) -> TranslatedQuery | TranslationFailure:
    """Rewrite virtual-path table references in sql.

    Returns:
        TranslatedQuery on success, TranslationFailure with a reason otherwise
    """
    try:
        statements = sqlparse.parse(sql)
    except SQLParseError as e:
        return TranslationFailure(f"could not tokenize query: {e}")

    aliases: dict[str, str] = {}
    queries: list[str] = []

    for statement in statements:
        if _is_blank(statement):
            continue

        parts = []
        for tok in statement.flatten():
            if tok.ttype in T.Error and tok.value[:1] in _QUOTE_PAIRS:
                return TranslationFailure(f"unterminated quoted identifier near {tok.value!r}")

            if tok.ttype in T.Name or tok.ttype in T.String.Symbol:
                name = _unquote(tok.value)
                if name is not None and name.startswith(ROOT_MARKER):
                    if name not in aliases:
                        aliases[name] = (
                            MAIN_ALIAS if not aliases else f"{ATTACHED_ALIAS_PREFIX}{len(aliases)}"
                        )
                    parts.append(f"{aliases[name]}.{VALUES_TABLE_NAME}")
                    continue

            parts.append(tok.value)

        queries.append("".join(parts).strip())

    return TranslatedQuery(
        databases={alias: path for path, alias in aliases.items()},
        queries=queries,
    )
