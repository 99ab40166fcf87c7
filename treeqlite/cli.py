"""TreeQLite CLI - Main entry point and command registration hub."""
# ruff: noqa: E402 - Intentional lazy loading: commands imported after cli group definition

from pathlib import Path

import click

from treeqlite import __version__
from treeqlite.utils.logging import configure_file_logging, configure_logging, logger

LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.version_option(version=__version__, prog_name="tql")
@click.help_option("-h", "--help")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Console log level (overrides TREEQLITE_LOG_LEVEL)",
)
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Also write a rotating treeqlite.log into this directory",
)
@click.pass_context
def cli(ctx, log_level, log_dir):
    """TreeQLite - SQL over a tree of SQLite files.

    Tables are addressed by quoted virtual paths such as "~/users" or
    "~/music/albums". Each one is its own database file under the root
    directory; a statement touching several of them runs as one query.

    \b
    QUICK START
      tql init --root ./db
      tql query --root ./db 'CREATE TABLE "~/users" (id INTEGER PRIMARY KEY, name TEXT)'
      tql query --root ./db 'INSERT INTO "~/users" (name) VALUES (?)' --params '["alice"]'
      tql all --root ./db 'SELECT * FROM "~/users"'

    \b
    ENVIRONMENT
      TREEQLITE_ROOT_PATH   Default root (else .treeqlite/config.json, else ./db)
      TREEQLITE_LOG_LEVEL   DEBUG shows aliases and translated queries
      TREEQLITE_LOG_JSON    1 switches console logs to NDJSON on stdout
    """
    if log_level:
        configure_logging(level=log_level)
        ctx.call_on_close(configure_logging)
    if log_dir:
        handler_id = configure_file_logging(log_dir)
        ctx.call_on_close(lambda: logger.remove(handler_id))


from treeqlite.commands.init import init
from treeqlite.commands.query import all_rows, exec_statement, query

cli.add_command(init)
cli.add_command(query)
cli.add_command(all_rows)
cli.add_command(exec_statement)


def main():
    """Main entry point for console script."""
    cli()


if __name__ == "__main__":
    main()
