"""Fan-out primitives for the sync pipeline.

Every stage of a sync run fans out without a bound by default: all folders
of a traversal frontier are listed at once, every discovered note is
fetched at once, and every chunk upserts as soon as it is full.  Two
helpers express that:

1. **throttled_gather** -- ``asyncio.gather`` with fail-fast semantics.  The
   first failure cancels the sibling awaitables and is re-raised as-is.
2. **fail_fast_task_group** -- ``asyncio.TaskGroup`` for tasks spawned over
   time.  The first failure cancels the group body and every sibling, and
   the original exception is re-raised instead of an ``ExceptionGroup`` so
   callers can keep catching domain errors.

Both take an optional semaphore via :func:`guarded`.  ``None`` means
unbounded, the default everywhere; a semaphore is only installed when the
operator sets ``SYNC_MAX_CONCURRENCY``.  Only leaf I/O calls are guarded,
never a task that itself waits on guarded calls, so a bounded run cannot
deadlock on its own semaphore.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Iterable
from contextlib import asynccontextmanager
from typing import Any, TypeVar

_T = TypeVar("_T")


async def guarded(coro: Awaitable[_T], semaphore: asyncio.Semaphore | None) -> _T:
    """Await *coro*, holding *semaphore* for the duration when one is given."""
    if semaphore is None:
        return await coro
    async with semaphore:
        return await coro


async def _cancel_all(tasks: Iterable[asyncio.Future[Any]]) -> None:
    pending = [task for task in tasks if not task.done()]
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)


async def throttled_gather(
    coros: Iterable[Awaitable[_T]],
    semaphore: asyncio.Semaphore | None = None,
) -> list[_T]:
    """Run awaitables concurrently and return their results in input order.

    Parameters
    ----------
    coros:
        Awaitables to execute concurrently.
    semaphore:
        Optional semaphore bounding how many run at once.

    Raises
    ------
    BaseException
        The first exception raised by any awaitable.  Remaining awaitables
        are cancelled and awaited before it propagates.  Cancelling the
        caller cancels every awaitable.
    """
    tasks = [asyncio.ensure_future(guarded(c, semaphore)) for c in coros]
    if not tasks:
        return []
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        await _cancel_all(tasks)
        raise


def first_error(group: BaseExceptionGroup) -> BaseException:
    """Return the first leaf exception of a (possibly nested) exception group."""
    error: BaseException = group
    while isinstance(error, BaseExceptionGroup):
        error = error.exceptions[0]
    return error


@asynccontextmanager
async def fail_fast_task_group() -> AsyncIterator[asyncio.TaskGroup]:
    """``asyncio.TaskGroup`` that re-raises the first failure unwrapped."""
    try:
        async with asyncio.TaskGroup() as group:
            yield group
    except BaseExceptionGroup as exc:
        raise first_error(exc)
