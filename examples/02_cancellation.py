"""
Example 02: Cancellation and Timeouts

This example demonstrates cooperative cancellation with an asyncio.Event,
per-command timeouts, and inspecting skipped conversions.
"""

import asyncio
import logging
import sqlite3
import tempfile
from pathlib import Path

from row_select import ErrorKind, select


class Reading:
    Id: int = 0
    Value: float = 0.0


async def main():
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    conn = sqlite3.connect(db_path)
    conn.execute("CREATE TABLE Readings (Id INTEGER PRIMARY KEY, Value TEXT)")
    conn.executemany(
        "INSERT INTO Readings (Id, Value) VALUES (?, ?)",
        [(i, "n/a" if i % 250 == 0 else str(i / 10)) for i in range(1, 1001)],
    )
    conn.commit()
    conn.close()

    dsn = f"sqlite:///{db_path}"

    print("=== Cancellation and Timeouts ===\n")

    # Skipped conversions are logged and reported, rows are kept
    print("1. Skipped conversions:")
    result = await select(dsn, "SELECT Id, Value FROM Readings ORDER BY Id", Reading)
    print(f"   {len(result.records)} readings, {len(result.skipped)} values skipped")
    for skip in result.skipped:
        print(f"   - row {skip.row_index}: {skip.column} ({skip.value_type}) {skip.error.splitlines()[0]}")
    print()

    # Cancel from another task while the query is running
    print("2. Cancel from another task:")
    cancel = asyncio.Event()
    slow = (
        "WITH RECURSIVE n(i) AS (SELECT 1 UNION ALL SELECT i + 1 FROM n LIMIT 5000000) "
        "SELECT i AS Id, i AS Value FROM n"
    )
    asyncio.get_running_loop().call_later(0.05, cancel.set)
    result = await select(dsn, slow, Reading, cancel=cancel)
    print(f"   kind={result.kind if not result.succeeded else None} error={result.error_message!r}")
    assert result.succeeded or result.kind is ErrorKind.CANCELED
    print()

    # Command timeout
    print("3. Command timeout:")
    result = await select(
        dsn,
        "WITH RECURSIVE n(i) AS (SELECT 1 UNION ALL SELECT i + 1 FROM n) SELECT COUNT(*) AS Id FROM n",
        Reading,
        timeout_seconds=0.5,
    )
    print(f"   error={result.error_message!r}\n")

    Path(db_path).unlink()


if __name__ == "__main__":
    asyncio.run(main())
