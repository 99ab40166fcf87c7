"""Tests for opening, attaching and discarding database files."""

import sqlite3
from contextlib import closing

import pytest

from treeqlite.errors import InvalidPathError
from treeqlite.provisioner import InstanceProvisioner


class TestOpen:
    def test_in_memory_when_no_path(self, db_root):
        provisioner = InstanceProvisioner()

        with closing(provisioner.open(None)) as conn:
            assert conn.execute("PRAGMA database_list").fetchone()["file"] == ""

        assert list(db_root.iterdir()) == []
        assert provisioner.created_files == []

    def test_creates_directory_and_suffixed_file(self, db_root):
        provisioner = InstanceProvisioner()
        target = db_root / "music" / "albums"

        with closing(provisioner.open(target.as_posix())) as conn:
            conn.execute("CREATE TABLE table_contents (id INTEGER PRIMARY KEY)")

        assert (db_root / "music" / "albums.sqlite3").is_file()
        assert not (db_root / "music" / "albums").exists()
        assert provisioner.created_dirs == [db_root / "music"]

    def test_main_uses_wal(self, db_root):
        with closing(InstanceProvisioner().open((db_root / "users").as_posix())) as conn:
            assert conn.execute("PRAGMA journal_mode").fetchone()[0] == "wal"

    def test_connection_is_autocommit(self, db_root):
        with closing(InstanceProvisioner().open((db_root / "users").as_posix())) as conn:
            assert conn.isolation_level is None

    def test_existing_file_not_recorded_as_created(self, db_root):
        path = (db_root / "users").as_posix()
        sqlite3.connect(f"{path}.sqlite3").close()

        provisioner = InstanceProvisioner()
        provisioner.open(path).close()

        assert provisioner.created_files == []

    def test_connection_factory_is_used(self, db_root, counting_connection):
        provisioner = InstanceProvisioner(connection_factory=counting_connection)

        conn = provisioner.open(None)
        conn.close()

        assert isinstance(conn, counting_connection)
        assert conn.close_calls == 1


class TestAttach:
    def test_attached_database_is_queryable(self, db_root):
        provisioner = InstanceProvisioner()

        with closing(provisioner.open(None)) as conn:
            provisioner.attach(conn, "db1", (db_root / "music" / "plays").as_posix())
            conn.execute("CREATE TABLE db1.table_contents (id INTEGER PRIMARY KEY)")
            conn.execute("INSERT INTO db1.table_contents DEFAULT VALUES")
            assert conn.execute("SELECT COUNT(*) FROM db1.table_contents").fetchone()[0] == 1

        assert (db_root / "music" / "plays.sqlite3").is_file()

    def test_unsafe_alias_rejected_before_file_creation(self, db_root):
        provisioner = InstanceProvisioner()

        with closing(provisioner.open(None)) as conn:
            with pytest.raises(InvalidPathError):
                provisioner.attach(conn, "db1 AS x; --", (db_root / "plays").as_posix())

        assert list(db_root.iterdir()) == []

    def test_unsafe_path_rejected(self, db_root):
        provisioner = InstanceProvisioner()

        with closing(provisioner.open(None)) as conn:
            with pytest.raises(InvalidPathError):
                provisioner.attach(conn, "db1", (db_root / "it's").as_posix())


class TestDiscard:
    def test_removes_created_files_and_dirs(self, db_root):
        provisioner = InstanceProvisioner()
        conn = provisioner.open((db_root / "a" / "b" / "main").as_posix())
        provisioner.attach(conn, "db1", (db_root / "a" / "other").as_posix())
        conn.close()

        provisioner.discard()

        assert list(db_root.iterdir()) == []

    def test_keeps_preexisting_files_and_dirs(self, db_root):
        (db_root / "music").mkdir()
        keep = db_root / "music" / "albums.sqlite3"
        sqlite3.connect(keep).close()

        provisioner = InstanceProvisioner()
        conn = provisioner.open((db_root / "music" / "albums").as_posix())
        provisioner.attach(conn, "db1", (db_root / "music" / "plays").as_posix())
        conn.close()

        provisioner.discard()

        assert keep.is_file()
        assert not (db_root / "music" / "plays.sqlite3").exists()
        assert (db_root / "music").is_dir()

    def test_non_empty_created_dir_is_kept(self, db_root):
        provisioner = InstanceProvisioner()
        conn = provisioner.open((db_root / "music" / "albums").as_posix())
        conn.close()
        (db_root / "music" / "notes.txt").write_text("keep me")

        provisioner.discard()

        assert (db_root / "music" / "notes.txt").is_file()
        assert not (db_root / "music" / "albums.sqlite3").exists()

    def test_created_file_filled_by_another_caller_is_kept(self, db_root):
        provisioner = InstanceProvisioner()
        provisioner.open((db_root / "shared").as_posix()).close()

        with closing(sqlite3.connect(db_root / "shared.sqlite3")) as other:
            other.execute("CREATE TABLE table_contents (value INTEGER)")
            other.execute("INSERT INTO table_contents VALUES (42)")
            other.commit()

        provisioner.discard()

        with closing(sqlite3.connect(db_root / "shared.sqlite3")) as check:
            assert check.execute("SELECT value FROM table_contents").fetchall() == [(42,)]

    def test_created_file_locked_by_another_writer_is_kept(self, db_root):
        provisioner = InstanceProvisioner()
        provisioner.open((db_root / "busy").as_posix()).close()

        with closing(sqlite3.connect(db_root / "busy.sqlite3", isolation_level=None)) as writer:
            writer.execute("BEGIN IMMEDIATE")
            provisioner.discard()
            writer.execute("ROLLBACK")

        assert (db_root / "busy.sqlite3").is_file()

    def test_file_removed_behind_its_back_is_skipped(self, db_root):
        provisioner = InstanceProvisioner()
        provisioner.open((db_root / "music" / "albums").as_posix()).close()
        (db_root / "music" / "albums.sqlite3").unlink()

        provisioner.discard()

        assert list(db_root.iterdir()) == []
