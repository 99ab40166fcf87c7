"""Centralized constants for TreeQLite.

Single source of truth for the on-disk layout and the names shared between
the translator, the federation session and the error translator.
"""

from pathlib import Path

# ============================================================================
# VIRTUAL PATHS
# ============================================================================

# Prefix that anchors a virtual path at the configured root
ROOT_MARKER = "~/"

# Appended to every resolved path so a table file never collides with a
# directory of the same name (~/music next to ~/music/artists)
DB_FILE_SUFFIX = ".sqlite3"

# Name of the single table stored in every database file
VALUES_TABLE_NAME = "table_contents"

# ============================================================================
# ALIASES
# ============================================================================

MAIN_ALIAS = "main"
ATTACHED_ALIAS_PREFIX = "db"

# SQLite's volatile database
MEMORY_DATABASE = ":memory:"

# Journal siblings SQLite may leave next to a database file
DB_SIDECAR_SUFFIXES = ("-wal", "-shm", "-journal")

# ============================================================================
# CONFIGURATION
# ============================================================================

CONFIG_DIR = Path(".treeqlite")
CONFIG_FILE_NAME = "config.json"
ERROR_LOG_FILE = CONFIG_DIR / "error.log"

ENV_PREFIX = "TREEQLITE_"
DEFAULT_ROOT_PATH = "./db"
