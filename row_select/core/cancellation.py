"""Cooperative cancellation and command timeouts.

A cancellation signal is a plain ``asyncio.Event``. Long suspension points
(connect, execute) race the driver call against the event. Cheap ones (row
fetches) poll it.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from row_select.core.exceptions import QueryCanceledError

T = TypeVar("T")


async def run_with_timeout(awaitable: Awaitable[T], timeout_seconds: float) -> T:
    """Await *awaitable*, giving up after *timeout_seconds*.

    Used by adapters whose driver has no per-command timeout of its own.
    A non-positive timeout waits indefinitely.
    """
    if timeout_seconds <= 0:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout_seconds)
    except asyncio.TimeoutError:
        raise TimeoutError(f"Command timed out after {timeout_seconds} seconds") from None


def raise_if_canceled(cancel: asyncio.Event | None) -> None:
    """Raise QueryCanceledError if *cancel* has been set."""
    if cancel is not None and cancel.is_set():
        raise QueryCanceledError()


async def run_cancellable(awaitable: Awaitable[T], cancel: asyncio.Event | None) -> T:
    """Await *awaitable* unless *cancel* is set first.

    If the operation completes in the same iteration as the signal, its
    result wins; the caller's next checkpoint observes the signal and the
    result is released through the normal scoped cleanup.

    Raises:
        QueryCanceledError: If the signal fires before the operation completes.
    """
    if cancel is None:
        return await awaitable

    operation = asyncio.ensure_future(awaitable)
    if cancel.is_set():
        operation.cancel()
        await asyncio.gather(operation, return_exceptions=True)
        raise QueryCanceledError()

    waiter = asyncio.ensure_future(cancel.wait())
    completed = False
    try:
        await asyncio.wait({operation, waiter}, return_when=asyncio.FIRST_COMPLETED)
        completed = operation.done()
    finally:
        if not waiter.done():
            waiter.cancel()
            await asyncio.gather(waiter, return_exceptions=True)
        if not operation.done():
            operation.cancel()
            await asyncio.gather(operation, return_exceptions=True)

    if not completed:
        raise QueryCanceledError()
    return operation.result()
