"""Contract tests for adapter protocol compliance."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from types import SimpleNamespace

import pytest

from row_select.adapters.protocol import AsyncAdapter
from row_select.adapters.sqlite import SqliteAsyncAdapter
from row_select.core.connection import ConnectionConfig
from row_select.core.enums import DatabaseBackend
from tests.fakes import FakeAdapter


@pytest.fixture
def sqlite_config(sqlite_db: Path) -> ConnectionConfig:
    return ConnectionConfig(driver="sqlite", database=str(sqlite_db))


class TestSqliteAsyncAdapterProtocol:
    def test_implements_async_protocol(self) -> None:
        assert isinstance(SqliteAsyncAdapter(), AsyncAdapter)

    def test_paramstyle(self) -> None:
        assert SqliteAsyncAdapter().paramstyle == "named"

    def test_backend(self) -> None:
        assert SqliteAsyncAdapter().backend is DatabaseBackend.SQLITE

    async def test_lifecycle(self, sqlite_config: ConnectionConfig) -> None:
        adapter = SqliteAsyncAdapter()
        conn = await adapter.connect(sqlite_config)

        cursor = await adapter.execute(
            conn, "SELECT Id, Name FROM products WHERE Id = :id", {"id": 1}, 30
        )
        assert [desc[0] for desc in cursor.description] == ["Id", "Name"]
        assert tuple(await adapter.fetch_row(cursor, 30)) == (1, "Keyboard")
        assert await adapter.fetch_row(cursor, 30) is None

        await adapter.close_cursor(cursor)
        await adapter.close(conn)

    async def test_stalled_fetch_times_out(self, sqlite_config: ConnectionConfig) -> None:
        adapter = SqliteAsyncAdapter()
        conn = await adapter.connect(sqlite_config)
        try:
            # The first row comes back at once; the search for a second never ends
            cursor = await adapter.execute(
                conn,
                "WITH RECURSIVE n(i) AS (SELECT 1 UNION ALL SELECT i + 1 FROM n) "
                "SELECT i FROM n WHERE i = 1",
                {},
                30,
            )
            with pytest.raises(TimeoutError, match="timed out"):
                await adapter.fetch_row(cursor, 0.2)
                await adapter.fetch_row(cursor, 0.2)
            await adapter.close_cursor(cursor)
        finally:
            await adapter.close(conn)

    async def test_driver_error_is_translated(self, sqlite_config: ConnectionConfig) -> None:
        adapter = SqliteAsyncAdapter()
        conn = await adapter.connect(sqlite_config)
        try:
            with pytest.raises(sqlite3.Error) as exc_info:
                await adapter.execute(conn, "SELECT * FROM missing", {}, 30)
        finally:
            await adapter.close(conn)

        error = adapter.database_error(exc_info.value)
        assert error is not None
        assert error.backend == "SQLite"
        assert error.code == 1
        assert "no such table" in error.detail

    def test_other_errors_are_not_translated(self) -> None:
        assert SqliteAsyncAdapter().database_error(RuntimeError("boom")) is None


class TestFakeAdapterProtocol:
    def test_test_double_implements_protocol(self) -> None:
        assert isinstance(FakeAdapter(), AsyncAdapter)


class TestMysqlAsyncAdapterProtocol:
    def test_implements_async_protocol(self) -> None:
        pytest.importorskip("aiomysql")
        from row_select.adapters.mysql import MysqlAsyncAdapter

        adapter = MysqlAsyncAdapter()
        assert isinstance(adapter, AsyncAdapter)
        assert adapter.paramstyle == "pyformat"
        assert adapter.backend is DatabaseBackend.MYSQL

    def test_server_error_is_translated(self) -> None:
        pytest.importorskip("aiomysql")
        import pymysql

        from row_select.adapters.mysql import MysqlAsyncAdapter

        exc = pymysql.err.ProgrammingError(1146, "Table 'shop.Missing' doesn't exist")
        error = MysqlAsyncAdapter().database_error(exc)
        assert error is not None
        assert error.code == 1146
        assert str(error) == "MySQL Error 1146: Table 'shop.Missing' doesn't exist"

    def test_error_without_errno(self) -> None:
        pytest.importorskip("aiomysql")
        import pymysql

        from row_select.adapters.mysql import MysqlAsyncAdapter

        error = MysqlAsyncAdapter().database_error(pymysql.err.InterfaceError("closed"))
        assert error is not None
        assert error.code is None
        assert str(error) == "MySQL Error: closed"

    def test_other_errors_are_not_translated(self) -> None:
        pytest.importorskip("aiomysql")
        from row_select.adapters.mysql import MysqlAsyncAdapter

        assert MysqlAsyncAdapter().database_error(ValueError("boom")) is None


class TestPostgresqlAsyncAdapterProtocol:
    def test_implements_async_protocol(self) -> None:
        pytest.importorskip("psycopg")
        from row_select.adapters.postgresql import PostgresqlAsyncAdapter

        adapter = PostgresqlAsyncAdapter()
        assert isinstance(adapter, AsyncAdapter)
        assert adapter.paramstyle == "pyformat"
        assert adapter.backend is DatabaseBackend.POSTGRESQL

    def test_server_error_is_translated(self) -> None:
        psycopg = pytest.importorskip("psycopg")
        from row_select.adapters.postgresql import PostgresqlAsyncAdapter

        exc = psycopg.errors.UndefinedTable('relation "missing" does not exist')
        error = PostgresqlAsyncAdapter().database_error(exc)
        assert error is not None
        assert error.code == "42P01"
        assert str(error) == 'PostgreSQL Error 42P01: relation "missing" does not exist'

    def test_other_errors_are_not_translated(self) -> None:
        pytest.importorskip("psycopg")
        from row_select.adapters.postgresql import PostgresqlAsyncAdapter

        assert PostgresqlAsyncAdapter().database_error(ValueError("boom")) is None


class TestOracleAsyncAdapterProtocol:
    def test_implements_async_protocol(self) -> None:
        pytest.importorskip("oracledb")
        from row_select.adapters.oracle import OracleAsyncAdapter

        adapter = OracleAsyncAdapter()
        assert isinstance(adapter, AsyncAdapter)
        assert adapter.paramstyle == "named"
        assert adapter.backend is DatabaseBackend.ORACLE

    def test_server_error_is_translated(self) -> None:
        oracledb = pytest.importorskip("oracledb")
        from row_select.adapters.oracle import OracleAsyncAdapter

        detail = SimpleNamespace(
            full_code="ORA-00942",
            code=942,
            message="ORA-00942: table or view does not exist",
        )
        error = OracleAsyncAdapter().database_error(oracledb.DatabaseError(detail))
        assert error is not None
        assert error.code == "ORA-00942"
        assert str(error) == "Oracle Error ORA-00942: table or view does not exist"

    def test_error_without_details(self) -> None:
        oracledb = pytest.importorskip("oracledb")
        from row_select.adapters.oracle import OracleAsyncAdapter

        error = OracleAsyncAdapter().database_error(oracledb.InterfaceError("not connected"))
        assert error is not None
        assert error.code is None
        assert str(error) == "Oracle Error: not connected"
