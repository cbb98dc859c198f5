from __future__ import annotations

from typing import Any, Callable, Dict, List

import httpx
import pytest

from eligibility.errors import DecodeFetchError, NetworkFetchError, NotFoundFetchError
from eligibility.sources.remote import RemoteRecordSource

BASE_URL = "https://sis.test/api/v5/"
SCHOOL = "994"
CERT = "secret-cert"
STUDENT_ID = 42

IDENTITY_OK = [{"FirstName": "Dana", "LastName": "Scully", "Grade": 11}]
GPA_OK = [{"GPA_GradeReportingTotal": 3.25}, {"GPA_GradeReportingTotal": 1.0}]


def _transport(
    identity: Callable[[], httpx.Response],
    gpa: Callable[[], httpx.Response],
    seen: List[httpx.Request] | None = None,
) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if "/students/" in request.url.path:
            return identity()
        if "/gpas/" in request.url.path:
            return gpa()
        return httpx.Response(404)

    return httpx.MockTransport(handler)


def _json(payload: Any, status: int = 200) -> Callable[[], httpx.Response]:
    return lambda: httpx.Response(status, json=payload)


async def _fetch(transport: httpx.MockTransport):
    async with httpx.AsyncClient(transport=transport) as client:
        source = RemoteRecordSource(client, BASE_URL, SCHOOL, CERT)
        return await source.fetch(STUDENT_ID)


def test_endpoints_are_derived_from_the_identifier() -> None:
    source = RemoteRecordSource(httpx.AsyncClient(), BASE_URL, SCHOOL, CERT)

    identity_url, score_url = source.endpoints_for(7)

    assert identity_url == "https://sis.test/api/v5/schools/994/students/7?cert=secret-cert"
    assert score_url == "https://sis.test/api/v5/schools/994/gpas/7?cert=secret-cert"


@pytest.mark.asyncio
async def test_fetch_takes_first_element_of_each_list() -> None:
    seen: List[httpx.Request] = []

    record = await _fetch(_transport(_json(IDENTITY_OK), _json(GPA_OK), seen))

    assert record.student_id == STUDENT_ID
    assert record.identity.full_name == "Dana Scully"
    assert record.score.score == 3.25
    assert sorted(r.url.path for r in seen) == [
        "/api/v5/schools/994/gpas/42",
        "/api/v5/schools/994/students/42",
    ]
    assert all(r.url.params["cert"] == CERT for r in seen)


@pytest.mark.parametrize(
    ("identity", "gpa", "error_type"),
    [
        (_json([]), _json(GPA_OK), NotFoundFetchError),
        (_json(IDENTITY_OK), _json([]), NotFoundFetchError),
        (_json({"FirstName": "x"}), _json(GPA_OK), DecodeFetchError),
        (_json(IDENTITY_OK), _json([{"GPA": 3.0}]), DecodeFetchError),
        (_json(IDENTITY_OK), _json([{"GPA_GradeReportingTotal": "n/a"}]), DecodeFetchError),
        (lambda: httpx.Response(200, text="<html>maintenance</html>"), _json(GPA_OK), DecodeFetchError),
        (_json(IDENTITY_OK), _json({"error": "nope"}, status=404), NetworkFetchError),
    ],
    ids=[
        "empty-identity",
        "empty-gpa",
        "identity-not-a-list",
        "gpa-missing-field",
        "gpa-not-numeric",
        "identity-not-json",
        "gpa-http-404",
    ],
)
@pytest.mark.asyncio
async def test_fetch_error_taxonomy(identity, gpa, error_type) -> None:
    with pytest.raises(error_type) as excinfo:
        await _fetch(_transport(identity, gpa))

    assert excinfo.value.student_id == STUDENT_ID


@pytest.mark.asyncio
async def test_http_error_status_is_recorded() -> None:
    with pytest.raises(NetworkFetchError) as excinfo:
        await _fetch(_transport(_json(IDENTITY_OK), _json([], status=503)))

    assert excinfo.value.status_code == 503


@pytest.mark.asyncio
async def test_transport_failure_is_network_error() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkFetchError) as excinfo:
        await _fetch(httpx.MockTransport(refuse))

    assert excinfo.value.status_code is None
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_both_requests_complete_when_one_fails() -> None:
    calls: Dict[str, int] = {"students": 0, "gpas": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        resource = "students" if "/students/" in request.url.path else "gpas"
        calls[resource] += 1
        if resource == "students":
            return httpx.Response(500)
        return httpx.Response(200, json=GPA_OK)

    with pytest.raises(NetworkFetchError):
        await _fetch(httpx.MockTransport(handler))

    assert calls == {"students": 1, "gpas": 1}
