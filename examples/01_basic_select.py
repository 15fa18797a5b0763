"""
Example 01: Basic Select

This example demonstrates running a parameterized SELECT and mapping the
rows onto a plain class, a dataclass and a Pydantic model.
"""

import asyncio
import sqlite3
import tempfile
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel

from row_select import select


class Product:
    ProductId: int = 0
    ProductName: str = ""


@dataclass
class ProductRow:
    productid: int = 0
    productname: str | None = None
    discontinued: bool = False


class ProductModel(BaseModel):
    product_id: int = 0
    name: str = ""


async def main():
    # Set up database
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    conn = sqlite3.connect(db_path)
    conn.execute("""
        CREATE TABLE Products (
            ProductId INTEGER PRIMARY KEY,
            ProductName TEXT,
            CategoryId INTEGER NOT NULL
        )
    """)
    conn.execute("INSERT INTO Products VALUES (1, 'Keyboard', 5)")
    conn.execute("INSERT INTO Products VALUES (2, 'Mouse', 5)")
    conn.execute("INSERT INTO Products VALUES (3, NULL, 5)")
    conn.execute("INSERT INTO Products VALUES (4, 'Desk', 7)")
    conn.commit()
    conn.close()

    dsn = f"sqlite:///{db_path}"
    query = "SELECT ProductId, ProductName FROM Products WHERE CategoryId = :Id;"

    print("=== Basic Select ===\n")

    # Plain class
    print("1. Plain class:")
    success, error, products = await select(dsn, query, Product, parameters={"@Id": 5})
    if success:
        print(f"   Found {len(products)} products.")
        for product in products:
            print(f"   - {product.ProductId}: {product.ProductName!r}")
    else:
        print(f"   Error: {error}")
    print()

    # Dataclass, matched case-insensitively; NULL leaves the default
    print("2. Dataclass (case-insensitive columns):")
    result = await select(dsn, query, ProductRow, parameters={"Id": 5})
    for row in result.records:
        print(f"   {row}")
    print()

    # Pydantic model, using aliases in SQL
    print("3. Pydantic model:")
    result = await select(
        dsn,
        "SELECT ProductId AS product_id, ProductName AS name FROM Products WHERE CategoryId = :Id",
        ProductModel,
        parameters={"Id": 7},
    )
    print(f"   {result.records}\n")

    # Driver error
    print("4. Driver error:")
    result = await select(dsn, "SELECT * FROM Missing", Product)
    print(f"   succeeded={result.succeeded} error={result.error_message!r}\n")

    Path(db_path).unlink()


if __name__ == "__main__":
    asyncio.run(main())
