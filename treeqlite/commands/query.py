"""Query commands - run one SQL statement against the database tree.

Three commands share the same options and differ only in the execution
strategy: ``query`` reports effect counters, ``all`` prints rows, ``exec``
decides from the statement itself.
"""

import json
from dataclasses import asdict

import click

from treeqlite.api import tql_all, tql_exec, tql_query
from treeqlite.config import config_from_runtime
from treeqlite.statements import NoData, QueryResult
from treeqlite.ui import console, print_rows
from treeqlite.utils.error_handler import handle_exceptions


def _parse_params(ctx, param, value):
    if value is None:
        return []
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}") from e
    if not isinstance(parsed, list):
        raise click.BadParameter("must be a JSON array of positional parameters")
    return parsed


def query_options(func):
    """Options shared by every query command."""
    func = click.option(
        "--format", "output_format", default="text",
        type=click.Choice(["text", "json"]),
        help="Output format: text (human), json (machine)",
    )(func)
    func = click.option(
        "--params", callback=_parse_params,
        help='Positional parameters as a JSON array, e.g. \'["alice", 3]\'',
    )(func)
    func = click.option(
        "--root", "root_path", type=click.Path(file_okay=False),
        help="Root directory of the database tree (default: config or ./db)",
    )(func)
    func = click.argument("sql")(func)
    return func


def _echo_json(payload) -> None:
    click.echo(json.dumps(payload, indent=2, default=str))


def _print_result(result: QueryResult, output_format: str) -> None:
    if output_format == "json":
        _echo_json(asdict(result))
        return
    console.print(
        f"changes: {result.changes}  last_insert_rowid: {result.last_insert_rowid}",
        highlight=False,
    )


@click.command("query")
@query_options
@handle_exceptions
def query(sql, root_path, params, output_format):
    """Run a statement for its effect and print the change counters.

    \b
    EXAMPLES
      tql query 'CREATE TABLE "~/users" (id INTEGER PRIMARY KEY, name TEXT)'
      tql query 'INSERT INTO "~/users" (name) VALUES (?)' --params '["alice"]'
    """
    config = config_from_runtime(root_path=root_path)
    _print_result(tql_query(config, sql, params), output_format)


@click.command("all")
@query_options
@handle_exceptions
def all_rows(sql, root_path, params, output_format):
    """Run a statement and print every row it returns.

    \b
    EXAMPLES
      tql all 'SELECT * FROM "~/users"'
      tql all 'SELECT * FROM "~/users" WHERE id = ?' --params '[1]' --format json
    """
    config = config_from_runtime(root_path=root_path)
    rows = tql_all(config, sql, params)
    if output_format == "json":
        _echo_json(rows)
    else:
        print_rows(rows)


@click.command("exec")
@query_options
@handle_exceptions
def exec_statement(sql, root_path, params, output_format):
    """Run any statement; prints rows if it returns some, counters otherwise."""
    config = config_from_runtime(root_path=root_path)
    result = tql_exec(config, sql, params)

    if isinstance(result, NoData):
        if output_format == "json":
            _echo_json({"type": result.type, "result": asdict(result.result)})
        else:
            _print_result(result.result, output_format)
        return

    if output_format == "json":
        _echo_json({"type": result.type, "data": result.data})
    else:
        print_rows(result.data)
