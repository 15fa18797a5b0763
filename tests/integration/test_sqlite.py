"""Integration tests for select() against a real SQLite database.

Covers: connection string forms, parameter binding, case-insensitive
mapping, NULL handling, conversion failures and driver errors end-to-end.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

import pytest
from pydantic import BaseModel

from row_select import ErrorKind, select

# --- Test models ---


@dataclass
class Product:
    Id: int = 0
    Name: str | None = None
    Extra: str = ""


class ProductModel(BaseModel):
    id: int = 0
    name: str = ""
    price: float = 0.0


class ProductSku:
    Id: int = 0
    Sku: int = 0


class Greeting:
    username: str = ""


# --- Integration Tests ---


@pytest.mark.integration
class TestSqliteSelect:
    async def test_rows_mapped_with_unmatched_attribute_at_default(self, sqlite_dsn: str) -> None:
        result = await select(sqlite_dsn, "SELECT Id, Name FROM products ORDER BY Id", Product)
        assert result.succeeded is True
        assert result.error_message is None
        assert len(result.records) == 3
        assert [p.Id for p in result.records] == [1, 2, 3]
        assert all(p.Extra == "" for p in result.records)

    async def test_null_column_leaves_default(self, sqlite_dsn: str) -> None:
        result = await select(sqlite_dsn, "SELECT Id, Name FROM products ORDER BY Id", Product)
        names = [p.Name for p in result.records]
        assert names == ["Keyboard", "Mouse", None]

    async def test_case_insensitive_column_match(self, sqlite_dsn: str) -> None:
        result = await select(
            sqlite_dsn, "SELECT ID, NAME, PRICE FROM products WHERE Id = 1", ProductModel
        )
        [product] = result.records
        assert (product.id, product.name, product.price) == (1, "Keyboard", 49.5)

    async def test_aliased_column(self, sqlite_dsn: str) -> None:
        result = await select(
            sqlite_dsn, "SELECT Name AS UserName FROM products WHERE Id = 2", Greeting
        )
        assert result.records[0].username == "Mouse"

    async def test_named_parameters(self, sqlite_dsn: str) -> None:
        result = await select(
            sqlite_dsn,
            "SELECT Id, Name FROM products WHERE CategoryId = :CategoryId ORDER BY Id",
            Product,
            parameters={"@CategoryId": 1},
        )
        assert [p.Id for p in result.records] == [1, 2]

    async def test_at_parameters(self, sqlite_dsn: str) -> None:
        result = await select(
            sqlite_dsn,
            "SELECT Id, Name FROM products WHERE CategoryId = @Id ORDER BY Id",
            Product,
            parameters={"@Id": 1},
        )
        assert [p.Id for p in result.records] == [1, 2]

    async def test_null_parameter(self, sqlite_dsn: str) -> None:
        result = await select(
            sqlite_dsn,
            "SELECT Id FROM products WHERE (:name IS NULL OR Name = :name) ORDER BY Id",
            Product,
            parameters={"name": None},
        )
        assert [p.Id for p in result.records] == [1, 2, 3]

    async def test_parameter_is_not_interpolated(self, sqlite_dsn: str) -> None:
        result = await select(
            sqlite_dsn,
            "SELECT Id FROM products WHERE Name = :name",
            Product,
            parameters={"name": "x' OR '1'='1"},
        )
        assert result.succeeded is True
        assert result.records == []

    async def test_conversion_failure_keeps_row(self, sqlite_dsn: str) -> None:
        result = await select(sqlite_dsn, "SELECT Id, Sku FROM products ORDER BY Id", ProductSku)
        assert result.succeeded is True
        assert [(s.Id, s.Sku) for s in result.records] == [(1, 100), (2, 0), (3, 300)]
        assert len(result.skipped) == 1
        assert result.skipped[0].row_index == 1
        assert result.skipped[0].attribute == "Sku"

    async def test_unpack_as_triple(self, sqlite_dsn: str) -> None:
        succeeded, error, products = await select(
            sqlite_dsn, "SELECT Id FROM products", Product
        )
        assert succeeded is True
        assert error is None
        assert len(products) == 3

    async def test_keyword_connection_string(self, sqlite_db: Path) -> None:
        result = await select(f"driver=sqlite;database={sqlite_db}", "SELECT Id FROM products", Product)
        assert len(result.records) == 3

    async def test_in_memory_database(self) -> None:
        result = await select("sqlite:///:memory:", "SELECT 7 AS Id, 'seven' AS Name", Product)
        assert [(p.Id, p.Name) for p in result.records] == [(7, "seven")]

    async def test_statement_without_result_set(self, sqlite_dsn: str) -> None:
        result = await select(sqlite_dsn, "CREATE TABLE scratch (id INTEGER)", Product)
        assert result.succeeded is True
        assert result.records == []


@pytest.mark.integration
class TestSqliteSelectFailures:
    async def test_invalid_table_reports_driver_code(self, sqlite_dsn: str) -> None:
        result = await select(sqlite_dsn, "SELECT Id FROM no_such_table", Product)
        assert result.succeeded is False
        assert result.kind is ErrorKind.DATABASE_ERROR
        assert result.error_message.startswith("SQLite Error 1:")
        assert "no such table" in result.error_message
        assert result.records == []

    async def test_syntax_error(self, sqlite_dsn: str) -> None:
        result = await select(sqlite_dsn, "SELEC Id FROM products", Product)
        assert result.kind is ErrorKind.DATABASE_ERROR

    async def test_missing_parameter_value(self, sqlite_dsn: str) -> None:
        result = await select(sqlite_dsn, "SELECT Id FROM products WHERE Id = :id", Product)
        assert result.succeeded is False
        assert result.kind is ErrorKind.DATABASE_ERROR

    async def test_canceled_before_start(self, sqlite_dsn: str) -> None:
        cancel = asyncio.Event()
        cancel.set()
        result = await select(sqlite_dsn, "SELECT Id FROM products", Product, cancel=cancel)
        assert result.succeeded is False
        assert result.error_message == "Query was canceled."
        assert result.records == []

