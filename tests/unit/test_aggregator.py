from __future__ import annotations

import asyncio

import pytest

from eligibility.aggregator import FailureMode, fetch_all
from eligibility.errors import AggregateError, NetworkFetchError, NotFoundFetchError

from tests.fakes import FakeRecordSource

STUDENTS = {
    1: ("Ann", "One", 1.0),
    2: ("Ben", "Two", 2.0),
    3: ("Cy", "Three", 3.0),
}
MANY_STUDENTS = 10
CONCURRENCY_CAP = 3
SLOW_SECONDS = 5.0


@pytest.mark.asyncio
async def test_results_follow_input_order_not_completion_order() -> None:
    # 1 finishes first, then 2, then 3
    source = FakeRecordSource(STUDENTS, delays={3: 0.03, 1: 0.01, 2: 0.02})

    result = await fetch_all(source, [3, 1, 2])

    assert source.completed == [1, 2, 3]
    assert [record.student_id for record in result.records] == [3, 1, 2]
    assert result.complete


@pytest.mark.asyncio
async def test_single_failure_fails_whole_batch() -> None:
    error = NotFoundFetchError(2, "gpas response is empty")
    source = FakeRecordSource(STUDENTS, errors={2: error})

    with pytest.raises(AggregateError) as excinfo:
        await fetch_all(source, [1, 2, 3])

    assert excinfo.value.student_id == 2
    assert excinfo.value.cause is error


@pytest.mark.asyncio
async def test_abort_cancels_in_flight_siblings() -> None:
    source = FakeRecordSource(
        STUDENTS,
        errors={1: NetworkFetchError(1, "connection refused")},
        delays={2: SLOW_SECONDS, 3: SLOW_SECONDS},
    )

    with pytest.raises(AggregateError):
        await asyncio.wait_for(fetch_all(source, [1, 2, 3]), timeout=1.0)

    assert sorted(source.cancelled) == [2, 3]
    assert source.completed == []


@pytest.mark.asyncio
async def test_abort_reports_earliest_input_among_simultaneous_failures() -> None:
    source = FakeRecordSource(
        STUDENTS,
        errors={3: NetworkFetchError(3, "boom"), 2: NetworkFetchError(2, "boom")},
    )

    with pytest.raises(AggregateError) as excinfo:
        await fetch_all(source, [1, 3, 2])

    assert excinfo.value.student_id == 3


@pytest.mark.asyncio
async def test_partial_mode_returns_successes_and_failures_in_input_order() -> None:
    source = FakeRecordSource(
        STUDENTS,
        errors={2: NetworkFetchError(2, "HTTP 500", status_code=500)},
        delays={3: 0.02},
    )

    result = await fetch_all(source, [3, 2, 1], mode="partial")

    assert [record.student_id for record in result.records] == [3, 1]
    assert [failure.student_id for failure in result.failures] == [2]
    assert result.failures[0].error.status_code == 500
    assert not result.complete


@pytest.mark.asyncio
async def test_concurrency_cap_limits_in_flight_fetches() -> None:
    ids = list(range(1, MANY_STUDENTS + 1))
    students = {i: (f"S{i}", "X", 2.0) for i in ids}
    delays = {i: 0.01 for i in ids}

    capped = FakeRecordSource(students, delays=delays)
    result = await fetch_all(capped, ids, concurrency=CONCURRENCY_CAP)

    assert [record.student_id for record in result.records] == ids
    assert capped.max_in_flight == CONCURRENCY_CAP

    unbounded = FakeRecordSource(students, delays=delays)
    await fetch_all(unbounded, ids)

    assert unbounded.max_in_flight == MANY_STUDENTS


@pytest.mark.asyncio
async def test_duplicate_ids_are_fetched_twice() -> None:
    source = FakeRecordSource(STUDENTS)

    result = await fetch_all(source, [1, 1, 2])

    assert [record.student_id for record in result.records] == [1, 1, 2]
    assert source.started.count(1) == 2


@pytest.mark.asyncio
async def test_empty_id_list_returns_empty_result() -> None:
    source = FakeRecordSource(STUDENTS)

    result = await fetch_all(source, [])

    assert result.records == ()
    assert source.started == []


@pytest.mark.asyncio
async def test_unexpected_errors_propagate_unwrapped() -> None:
    source = FakeRecordSource(STUDENTS, errors={1: KeyError("bug")})

    with pytest.raises(KeyError):
        await fetch_all(source, [1, 2], mode=FailureMode.PARTIAL)


@pytest.mark.asyncio
async def test_rejects_non_positive_concurrency() -> None:
    with pytest.raises(ValueError, match="concurrency"):
        await fetch_all(FakeRecordSource(STUDENTS), [1], concurrency=0)
