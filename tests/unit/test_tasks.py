"""Tests for batched task execution."""

import asyncio

import httpx
import pytest
from clinic_pipeline.extractors.fetch import FetchError
from clinic_pipeline.models import RawClinicData
from clinic_pipeline.search.tasks import (
    BUDGET_EXCEEDED,
    SearchTask,
    TaskResult,
    classify_error,
    run_batched,
    run_task,
)


def returning(name: str, count: int = 1) -> SearchTask:
    async def run():
        return [RawClinicData(source=name, name=f"{name} camp {i}") for i in range(count)]

    return SearchTask(name, run)


def raising(name: str, error: Exception) -> SearchTask:
    async def run():
        raise error

    return SearchTask(name, run)


def sleeping(name: str, seconds: float) -> SearchTask:
    async def run():
        await asyncio.sleep(seconds)
        return []

    return SearchTask(name, run)


class SteppingClock:
    """Advances by `step` seconds every time it is read."""

    def __init__(self, step: float):
        self.step = step
        self.now = 0.0

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        return value


class TestClassifyError:

    def test_fetch_errors(self):
        assert classify_error(FetchError("https://x.org", "404")) == ("error", "404")
        assert classify_error(FetchError("https://x.org", "timeout")) == ("timeout", "timeout")

    def test_http_errors(self):
        request = httpx.Request("GET", "https://api.example.com")
        response = httpx.Response(429, request=request)
        status_error = httpx.HTTPStatusError("rate limited", request=request, response=response)

        assert classify_error(status_error) == ("error", "429")
        assert classify_error(httpx.ReadTimeout("slow", request=request)) == ("timeout", "timeout")
        assert classify_error(httpx.ConnectError("refused", request=request)) == ("error", "connecterror")

    def test_other_exceptions(self):
        assert classify_error(ValueError("bad")) == ("error", "exception:ValueError")


class TestRunTask:

    def test_success(self):
        result = asyncio.run(run_task(returning("Rink A", 2), timeout=1))
        assert result.status == "success"
        assert len(result.results) == 2
        assert result.error is None

    def test_timeout(self):
        result = asyncio.run(run_task(sleeping("Slow Rink", 1), timeout=0.01))
        assert result.status == "timeout"
        assert result.error == "timeout"
        assert result.results == []

    def test_failure_becomes_data(self):
        result = asyncio.run(run_task(raising("Broken", KeyError("items")), timeout=1))
        assert result.status == "error"
        assert result.error == "exception:KeyError"

    def test_report(self):
        report = TaskResult("Rink A", results=[RawClinicData(source="x")]).to_report()
        assert report.name == "Rink A"
        assert report.count == 1
        assert report.status == "success"


class TestRunBatched:

    def test_every_task_reported_in_order(self):
        tasks = [
            returning("a"),
            raising("b", FetchError("https://b.org", "connection")),
            returning("c", 3),
            sleeping("d", 1),
        ]
        results = asyncio.run(run_batched(tasks, batch_size=2, task_timeout=0.05))

        assert [r.name for r in results] == ["a", "b", "c", "d"]
        assert [r.status for r in results] == ["success", "error", "success", "timeout"]
        assert results[1].error == "connection"
        assert len(results[2].results) == 3

    def test_one_failure_does_not_affect_siblings(self):
        tasks = [raising("bad", RuntimeError("boom")), returning("good", 2)]
        results = asyncio.run(run_batched(tasks, batch_size=2, task_timeout=1))
        assert results[1].status == "success"
        assert len(results[1].results) == 2

    def test_budget_skips_remaining_batches(self):
        # Clock reads: start=0, then checks at 10, 20 and 30 > 25
        clock = SteppingClock(step=10)
        tasks = [returning(name) for name in "abcde"]
        results = asyncio.run(run_batched(tasks, batch_size=2, task_timeout=1, time_budget=25, clock=clock))

        assert [r.name for r in results] == ["a", "b", "c", "d", "e"]
        assert [r.status for r in results[:4]] == ["success"] * 4
        assert results[4].status == "timeout"
        assert results[4].error == BUDGET_EXCEEDED
        assert results[4].results == []

    def test_zero_budget_launches_nothing(self):
        clock = SteppingClock(step=1)
        launched = []

        async def run():
            launched.append(True)
            return []

        tasks = [SearchTask(f"t{i}", run) for i in range(3)]
        results = asyncio.run(run_batched(tasks, batch_size=2, task_timeout=1, time_budget=0, clock=clock))

        assert launched == []
        assert all(r.error == BUDGET_EXCEEDED for r in results)
        assert len(results) == 3

    def test_batches_run_concurrently(self):
        tasks = [sleeping(f"t{i}", 0.05) for i in range(4)]

        async def timed():
            loop = asyncio.get_running_loop()
            started = loop.time()
            await run_batched(tasks, batch_size=4, task_timeout=1)
            return loop.time() - started

        assert asyncio.run(timed()) < 0.15

    @pytest.mark.parametrize("batch_size", [0, -3])
    def test_batch_size_floor(self, batch_size: int):
        results = asyncio.run(run_batched([returning("a"), returning("b")], batch_size, task_timeout=1))
        assert [r.status for r in results] == ["success", "success"]
