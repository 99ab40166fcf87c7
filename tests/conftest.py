"""Pytest configuration and fixtures."""
import sqlite3
from pathlib import Path

import pytest

from treeqlite.config import TreeQLiteConfig, ensure_root
from treeqlite.translator import TranslatedQuery


@pytest.fixture
def db_root(tmp_path) -> Path:
    """Empty, existing root directory for a database tree."""
    root = tmp_path / "test-db"
    root.mkdir()
    return root


@pytest.fixture
def tql(db_root) -> TreeQLiteConfig:
    """Config pointing at the temporary root."""
    config = TreeQLiteConfig(root_path=str(db_root))
    ensure_root(config)
    return config


@pytest.fixture
def fixed_translation():
    """Build a translator that ignores its input and returns a canned result.

    Lets tests hand the federation layer translations the default
    translator would never produce (zero or several statements).
    """
    def make(databases: dict[str, str] | None = None, queries: list[str] | None = None):
        result = TranslatedQuery(databases=databases or {}, queries=queries or [])

        def translate(sql: str) -> TranslatedQuery:
            return result

        return translate

    return make


@pytest.fixture
def counting_connection():
    """sqlite3.Connection subclass recording every instance and close() call."""

    class CountingConnection(sqlite3.Connection):
        instances: list["CountingConnection"] = []

        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            self.close_calls = 0
            CountingConnection.instances.append(self)

        def close(self):
            self.close_calls += 1
            super().close()

    return CountingConnection


class RecordingLog:
    """Minimal loguru stand-in that keeps every message it is given."""

    def __init__(self):
        self.records: list[tuple[str, str]] = []

    def debug(self, message, *args, **kwargs):
        self.records.append(("DEBUG", message))

    def info(self, message, *args, **kwargs):
        self.records.append(("INFO", message))

    def messages(self) -> list[str]:
        return [message for _, message in self.records]


@pytest.fixture
def recording_log() -> RecordingLog:
    return RecordingLog()
