"""Opening and attaching the SQLite files behind virtual paths.

An InstanceProvisioner serves exactly one federated call. It creates
directories and database files on demand and remembers which ones it
created, so a failed call can remove the ones still unused with discard().
"""

import sqlite3
from contextlib import closing
from pathlib import Path

from treeqlite.paths import validate_attach_target
from treeqlite.utils.constants import DB_FILE_SUFFIX, DB_SIDECAR_SUFFIXES, MEMORY_DATABASE
from treeqlite.utils.logging import logger


class InstanceProvisioner:
    """Provision the main connection and its attachments for one call."""

    def __init__(self, connection_factory: type[sqlite3.Connection] = sqlite3.Connection):
        """Initialize the provisioner.

        Args:
            connection_factory: sqlite3.Connection subclass handed to
                sqlite3.connect(factory=...)
        """
        self.connection_factory = connection_factory
        self.created_dirs: list[Path] = []
        self.created_files: list[Path] = []

    def open(self, physical_path: str | None) -> sqlite3.Connection:
        """Open the main database, or an in-memory one when no path is given.

        The file is ``physical_path + ".sqlite3"``; its directory is created
        if needed. The connection runs in autocommit mode with WAL
        journaling enabled before it is returned.
        """
        if physical_path is None:
            target = MEMORY_DATABASE
        else:
            db_file = self._prepare_file(physical_path)
            target = str(db_file)

        conn = sqlite3.connect(target, isolation_level=None, factory=self.connection_factory)
        try:
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL")
        except BaseException:
            conn.close()
            raise

        return conn

    def attach(self, conn: sqlite3.Connection, alias: str, physical_path: str) -> None:
        """Attach ``physical_path + ".sqlite3"`` to conn under alias."""
        validate_attach_target(alias, physical_path)
        db_file = self._prepare_file(physical_path)

        # The alias is allow-listed above; the file name is bound
        conn.execute(f"ATTACH DATABASE ? AS {alias}", (str(db_file),))

    def discard(self) -> None:
        """Remove the database files and directories this provisioner created.

        Call only after the connection is closed. A created file is removed
        only while it is still unused: no schema objects and no other writer
        holding it. Anything another caller stored in the meantime stays.
        Directories are removed deepest first and only while empty.
        """
        removed = []
        for db_file in reversed(self.created_files):
            if not db_file.exists() or not self._is_unused(db_file):
                continue
            for suffix in ("", *DB_SIDECAR_SUFFIXES):
                Path(f"{db_file}{suffix}").unlink(missing_ok=True)
            removed.append(db_file)

        for directory in reversed(self.created_dirs):
            if directory.is_dir() and not any(directory.iterdir()):
                directory.rmdir()

        if self.created_files or self.created_dirs:
            logger.debug(
                f"Discarded {len(removed)} of {len(self.created_files)} created database file(s) "
                f"after failed query; checked {len(self.created_dirs)} directory(ies)"
            )

        self.created_files.clear()
        self.created_dirs.clear()

    @staticmethod
    def _is_unused(db_file: Path) -> bool:
        # mode=rw never creates the file; BEGIN IMMEDIATE fails while another writer is active
        uri = f"{db_file.resolve().as_uri()}?mode=rw"
        try:
            with closing(sqlite3.connect(uri, uri=True, timeout=0, isolation_level=None)) as conn:
                conn.execute("BEGIN IMMEDIATE")
                (objects,) = conn.execute("SELECT count(*) FROM sqlite_master").fetchone()
                conn.execute("ROLLBACK")
        except sqlite3.Error as e:
            logger.debug(f"Keeping {db_file}: {e}")
            return False
        return objects == 0

    def _prepare_file(self, physical_path: str) -> Path:
        db_file = Path(f"{physical_path}{DB_FILE_SUFFIX}")
        self._ensure_dir(db_file.parent)
        if not db_file.exists():
            self.created_files.append(db_file)
        return db_file

    def _ensure_dir(self, directory: Path) -> None:
        missing = []
        current = directory
        while not current.exists():
            missing.append(current)
            if current.parent == current:
                break
            current = current.parent

        directory.mkdir(parents=True, exist_ok=True)

        # Outermost first, so reversed() in discard() goes deepest first
        self.created_dirs.extend(reversed(missing))
