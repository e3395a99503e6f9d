"""Unit tests for the fail-fast fan-out helpers."""

from __future__ import annotations

import asyncio

import pytest

from src.utils.concurrency import (
    fail_fast_task_group,
    first_error,
    guarded,
    throttled_gather,
)
from src.utils.errors import VaultError


class _Tracker:
    """Counts concurrent entries and records cancellations."""

    def __init__(self) -> None:
        self.active = 0
        self.peak = 0
        self.cancelled = 0

    async def work(self, value: int, delay: float = 0.01) -> int:
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            await asyncio.sleep(delay)
            return value
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        finally:
            self.active -= 1


async def _fail(after: float = 0.0) -> None:
    await asyncio.sleep(after)
    raise VaultError(message="listing failed", provider_name="test")


class TestGuarded:
    @pytest.mark.asyncio
    async def test_without_semaphore(self) -> None:
        tracker = _Tracker()
        assert await guarded(tracker.work(7), None) == 7

    @pytest.mark.asyncio
    async def test_holds_semaphore(self) -> None:
        semaphore = asyncio.Semaphore(1)
        tracker = _Tracker()

        await asyncio.gather(*(guarded(tracker.work(i), semaphore) for i in range(4)))

        assert tracker.peak == 1


class TestThrottledGather:
    @pytest.mark.asyncio
    async def test_results_in_input_order(self) -> None:
        tracker = _Tracker()
        results = await throttled_gather(
            [tracker.work(1, 0.03), tracker.work(2, 0.01), tracker.work(3, 0.02)]
        )
        assert results == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_empty_input(self) -> None:
        assert await throttled_gather([]) == []

    @pytest.mark.asyncio
    async def test_unbounded_by_default(self) -> None:
        tracker = _Tracker()
        await throttled_gather(tracker.work(i) for i in range(10))
        assert tracker.peak == 10

    @pytest.mark.asyncio
    async def test_semaphore_bounds_concurrency(self) -> None:
        tracker = _Tracker()
        await throttled_gather((tracker.work(i) for i in range(10)), asyncio.Semaphore(3))
        assert tracker.peak == 3

    @pytest.mark.asyncio
    async def test_first_failure_cancels_siblings(self) -> None:
        tracker = _Tracker()

        with pytest.raises(VaultError, match="listing failed"):
            await throttled_gather([tracker.work(1, 1.0), _fail(), tracker.work(2, 1.0)])

        assert tracker.cancelled == 2
        assert tracker.active == 0

    @pytest.mark.asyncio
    async def test_caller_cancellation_cancels_children(self) -> None:
        tracker = _Tracker()
        task = asyncio.ensure_future(throttled_gather([tracker.work(1, 1.0), tracker.work(2, 1.0)]))
        await asyncio.sleep(0.01)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert tracker.cancelled == 2


class TestFailFastTaskGroup:
    @pytest.mark.asyncio
    async def test_runs_all_tasks(self) -> None:
        tracker = _Tracker()
        async with fail_fast_task_group() as group:
            tasks = [group.create_task(tracker.work(i)) for i in range(5)]
        assert [task.result() for task in tasks] == list(range(5))

    @pytest.mark.asyncio
    async def test_reraises_original_exception(self) -> None:
        tracker = _Tracker()

        with pytest.raises(VaultError) as exc_info:
            async with fail_fast_task_group() as group:
                group.create_task(tracker.work(1, 1.0))
                group.create_task(_fail())

        assert not isinstance(exc_info.value, BaseExceptionGroup)
        assert tracker.cancelled == 1

    @pytest.mark.asyncio
    async def test_failure_cancels_group_body(self) -> None:
        reached_end = False

        with pytest.raises(VaultError):
            async with fail_fast_task_group() as group:
                group.create_task(_fail())
                await asyncio.sleep(1.0)
                reached_end = True

        assert reached_end is False

    @pytest.mark.asyncio
    async def test_body_exception_propagates(self) -> None:
        with pytest.raises(KeyError):
            async with fail_fast_task_group():
                raise KeyError("body")


class TestFirstError:
    def test_nested_group(self) -> None:
        leaf = VaultError(message="inner")
        group = ExceptionGroup("outer", [ExceptionGroup("inner", [leaf]), ValueError("x")])
        assert first_error(group) is leaf
