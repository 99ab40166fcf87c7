"""Init command - create the root directory of a database tree."""

import click

from treeqlite.config import config_from_runtime, ensure_root
from treeqlite.ui import print_success
from treeqlite.utils.error_handler import handle_exceptions


@click.command()
@click.option("--root", "root_path", type=click.Path(file_okay=False),
              help="Root directory to create (default: config or ./db)")
@handle_exceptions
def init(root_path):
    """Create the root directory every ~/ virtual path resolves against."""
    config = config_from_runtime(root_path=root_path)
    root = ensure_root(config)
    print_success(f"Database root ready: [path]{root}[/path]")
