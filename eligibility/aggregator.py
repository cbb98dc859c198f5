"""
Concurrent aggregation of student records for one report.

`fetch_all` is a fan-out/fan-in barrier: one task per student identifier is
created up front, an optional semaphore caps how many fetches are in flight
at once, and the call returns only when the batch is settled. Results are
always returned in input identifier order, never completion order.

Two failure modes are supported:

- ``abort`` (default): the first detected failure cancels every still-pending
  fetch and raises `AggregateError`. No partial list is ever returned.
- ``partial``: every fetch runs to completion; successes are returned together
  with the per-student failures.
"""

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from eligibility.domain.models import StudentRecord
from eligibility.errors import AggregateError, FetchError
from eligibility.sources.abstract import RecordSource
from eligibility.utils.logging import get_logger

log = get_logger(__name__)


class FailureMode(str, enum.Enum):
    ABORT = "abort"
    PARTIAL = "partial"


@dataclass(frozen=True)
class StudentFailure:
    student_id: int
    error: FetchError


@dataclass(frozen=True)
class AggregateResult:
    """
    Outcome of a batch fetch.

    `records` holds successes in input order; `failures` is only ever
    non-empty in partial mode.
    """

    records: Tuple[StudentRecord, ...]
    failures: Tuple[StudentFailure, ...] = ()

    @property
    def complete(self) -> bool:
        return not self.failures


async def fetch_all(
    source: RecordSource,
    student_ids: Iterable[int],
    *,
    concurrency: Optional[int] = None,
    mode: FailureMode | str = FailureMode.ABORT,
) -> AggregateResult:
    """
    Fetch every student's records concurrently.

    Parameters
    ----------
    source : RecordSource
        Source used for each student; shared by all tasks.
    student_ids : iterable[int]
        Identifiers in report order. Duplicates are fetched (and reported) twice.
    concurrency : int | None
        Maximum simultaneous fetches. None means unbounded.
    mode : FailureMode | str
        ``abort`` or ``partial``; see module docstring.

    Returns
    -------
    AggregateResult
        Records in input order, plus failures in partial mode.

    Raises
    ------
    AggregateError
        In abort mode, when any student's fetch fails.
    """
    mode = FailureMode(mode)
    if concurrency is not None and concurrency < 1:
        raise ValueError(f"concurrency must be a positive integer or None, got {concurrency}")

    ids = list(student_ids)
    if not ids:
        return AggregateResult(records=())

    gate = asyncio.Semaphore(concurrency) if concurrency else None

    async def _fetch_one(student_id: int) -> StudentRecord:
        if gate is None:
            return await source.fetch(student_id)
        async with gate:
            return await source.fetch(student_id)

    log.debug(
        f"[AGGREGATE] fetching {len(ids)} students",
        extra={"students": len(ids), "concurrency": concurrency, "mode": mode.value},
    )
    tasks = [
        asyncio.create_task(_fetch_one(student_id), name=f"fetch-student-{student_id}")
        for student_id in ids
    ]
    try:
        if mode is FailureMode.ABORT:
            await _wait_abort_on_failure(tasks, ids)
        else:
            await asyncio.wait(tasks)
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()

    return _collect(tasks, ids)


async def _wait_abort_on_failure(tasks: List[asyncio.Task], ids: List[int]) -> None:
    position: Dict[asyncio.Task, int] = {task: i for i, task in enumerate(tasks)}
    pending = set(tasks)
    while pending:
        done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_EXCEPTION)
        failed = [task for task in done if task.exception() is not None]
        if not failed:
            continue

        first = min(failed, key=position.__getitem__)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

        exc = first.exception()
        student_id = ids[position[first]]
        if not isinstance(exc, FetchError):
            raise exc
        log.warning(
            f"[AGGREGATE ABORTED] student {student_id}: {exc}",
            extra={"student_id": student_id, "error_kind": exc.kind, "cancelled": len(pending)},
        )
        raise AggregateError(student_id, exc) from exc


def _collect(tasks: List[asyncio.Task], ids: List[int]) -> AggregateResult:
    records: List[StudentRecord] = []
    failures: List[StudentFailure] = []
    for student_id, task in zip(ids, tasks):
        exc = task.exception()
        if exc is None:
            records.append(task.result())
        elif isinstance(exc, FetchError):
            log.warning(
                f"[FETCH FAILED] student {student_id}: {exc}",
                extra={"student_id": student_id, "error_kind": exc.kind},
            )
            failures.append(StudentFailure(student_id=student_id, error=exc))
        else:
            raise exc
    return AggregateResult(records=tuple(records), failures=tuple(failures))


__all__ = ["AggregateResult", "FailureMode", "StudentFailure", "fetch_all"]
