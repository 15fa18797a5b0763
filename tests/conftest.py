"""Shared test fixtures."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from tests.fakes import FakeAdapter


@pytest.fixture
def sqlite_db(tmp_path: Path) -> Path:
    """SQLite database file with a small products table."""
    db_path = tmp_path / "shop.db"
    conn = sqlite3.connect(db_path)
    conn.execute(
        "CREATE TABLE products ("
        "Id INTEGER PRIMARY KEY, Name TEXT, CategoryId INTEGER, Price REAL, Sku TEXT)"
    )
    conn.executemany(
        "INSERT INTO products (Id, Name, CategoryId, Price, Sku) VALUES (?, ?, ?, ?, ?)",
        [
            (1, "Keyboard", 1, 49.5, "100"),
            (2, "Mouse", 1, 19.0, "abc"),
            (3, None, 2, 5.25, "300"),
        ],
    )
    conn.commit()
    conn.close()
    return db_path


@pytest.fixture
def sqlite_dsn(sqlite_db: Path) -> str:
    """URL connection string for the products database."""
    return f"sqlite:///{sqlite_db}"


@pytest.fixture
def use_adapter(monkeypatch: pytest.MonkeyPatch):
    """Route ``select`` to the given adapter instead of loading a real driver.

    Usage:
        adapter = use_adapter(FakeAdapter(rows=[(1, "a")]))
    """

    def _use(adapter: FakeAdapter) -> FakeAdapter:
        monkeypatch.setattr("row_select.core.engine.load_adapter", lambda driver: adapter)
        return adapter

    return _use
