"""Batched execution of search tasks under a per-task timeout and a global budget.

Every task yields exactly one TaskResult, whether it ran, failed, timed out
or was never launched because the budget ran out.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

import httpx
from rich.console import Console

from clinic_pipeline.extractors.fetch import FetchError
from clinic_pipeline.models import RawClinicData, SourceReport
from clinic_pipeline.models.clinic import SourceStatus

console = Console()

BUDGET_EXCEEDED = "budget_exceeded"
TASK_TIMEOUT = "timeout"


@dataclass
class SearchTask:
    """A named unit of work producing raw candidates."""

    name: str
    run: Callable[[], Awaitable[list[RawClinicData]]]


@dataclass
class TaskResult:
    name: str
    results: list[RawClinicData] = field(default_factory=list)
    status: SourceStatus = "success"
    error: Optional[str] = None

    def to_report(self) -> SourceReport:
        return SourceReport(
            name=self.name,
            count=len(self.results),
            status=self.status,
            error=self.error,
        )


def classify_error(error: Exception) -> tuple[SourceStatus, str]:
    """Map a task exception to (status, short reason)."""
    if isinstance(error, FetchError):
        return ("timeout" if error.reason == TASK_TIMEOUT else "error"), error.reason
    if isinstance(error, httpx.TimeoutException):
        return "timeout", TASK_TIMEOUT
    if isinstance(error, httpx.HTTPStatusError):
        return "error", str(error.response.status_code)
    if isinstance(error, httpx.HTTPError):
        return "error", type(error).__name__.lower()
    return "error", f"exception:{type(error).__name__}"


async def run_task(task: SearchTask, timeout: float) -> TaskResult:
    """Race one task against its timeout; failures become data."""
    try:
        results = await asyncio.wait_for(task.run(), timeout=timeout)
    except asyncio.TimeoutError:
        return TaskResult(task.name, status="timeout", error=TASK_TIMEOUT)
    except Exception as e:
        status, reason = classify_error(e)
        console.print(f"[dim]{task.name}: {reason}[/dim]")
        return TaskResult(task.name, status=status, error=reason)
    return TaskResult(task.name, results=list(results))


async def run_batched(
    tasks: list[SearchTask],
    batch_size: int,
    task_timeout: float,
    time_budget: Optional[float] = None,
    clock: Callable[[], float] = time.monotonic,
) -> list[TaskResult]:
    """Run tasks in fixed-size batches, in order.

    Before each batch the elapsed time is checked against `time_budget`;
    once it is exceeded every remaining task is reported as a timeout
    without being started. Results keep the input order.
    """
    batch_size = max(1, batch_size)
    started = clock()
    results: list[TaskResult] = []

    for i in range(0, len(tasks), batch_size):
        if time_budget is not None and clock() - started > time_budget:
            skipped = tasks[i:]
            console.print(
                f"[yellow]Time budget exhausted, skipping {len(skipped)} tasks[/yellow]"
            )
            results.extend(
                TaskResult(t.name, status="timeout", error=BUDGET_EXCEEDED) for t in skipped
            )
            break

        batch = tasks[i:i + batch_size]
        results.extend(await asyncio.gather(*(run_task(t, task_timeout) for t in batch)))

    return results
