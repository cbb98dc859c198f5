"""
Remote record source backed by the student information system's REST API.

Each student has two independent endpoints, one for identity and one for
GPA. Both respond with a JSON array of records; the first element is taken
as the canonical record. No retries are performed and the timeout is the
shared client's.
"""

from __future__ import annotations

import asyncio
from typing import Any, Tuple, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from eligibility.domain.models import IdentityRecord, ScoreRecord, StudentRecord
from eligibility.errors import DecodeFetchError, NetworkFetchError, NotFoundFetchError
from eligibility.sources.abstract import AbstractRecordSource
from eligibility.utils.logging import get_logger

log = get_logger(__name__)

_RecordT = TypeVar("_RecordT", bound=BaseModel)


class RemoteRecordSource(AbstractRecordSource):
    """
    Fetch identity and score records over HTTP with a shared AsyncClient.

    The client is owned by the caller (see `eligibility.infrastructure`) and
    reused for every request of a run.
    """

    name: str = "remote"

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        school_code: str,
        cert: str,
    ) -> None:
        self._client = client
        self.base_url = base_url.rstrip("/")
        self.school_code = school_code
        self._cert = cert

    def endpoints_for(self, student_id: int) -> Tuple[str, str]:
        """
        Return the (identity_url, score_url) pair for a student.
        """
        school = f"{self.base_url}/schools/{self.school_code}"
        identity_url = f"{school}/students/{student_id}?cert={self._cert}"
        score_url = f"{school}/gpas/{student_id}?cert={self._cert}"
        return identity_url, score_url

    async def fetch(self, student_id: int) -> StudentRecord:
        identity_url, score_url = self.endpoints_for(student_id)
        # Both requests always run to completion so neither is left dangling.
        identity_payload, score_payload = await asyncio.gather(
            self._get_json(student_id, identity_url, "students"),
            self._get_json(student_id, score_url, "gpas"),
            return_exceptions=True,
        )
        for outcome in (identity_payload, score_payload):
            if isinstance(outcome, BaseException):
                raise outcome

        identity = _first_record(student_id, identity_payload, IdentityRecord, "students")
        score = _first_record(student_id, score_payload, ScoreRecord, "gpas")
        log.debug(
            f"[FETCH] student {student_id} ok",
            extra={"student_id": student_id, "score": score.score},
        )
        return StudentRecord(student_id=student_id, identity=identity, score=score)

    async def _get_json(self, student_id: int, url: str, resource: str) -> Any:
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            raise NetworkFetchError(
                student_id, f"{resource} request failed: {type(exc).__name__}: {exc}"
            ) from exc

        if not response.is_success:
            raise NetworkFetchError(
                student_id,
                f"{resource} request returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise DecodeFetchError(student_id, f"{resource} response is not JSON") from exc


def _first_record(
    student_id: int, payload: Any, model: Type[_RecordT], resource: str
) -> _RecordT:
    """Validate a JSON array payload and return its first element as `model`."""
    if not isinstance(payload, list):
        raise DecodeFetchError(
            student_id, f"{resource} response is {type(payload).__name__}, expected a list"
        )
    if not payload:
        raise NotFoundFetchError(student_id, f"{resource} response is empty")
    try:
        return model.model_validate(payload[0])
    except ValidationError as exc:
        raise DecodeFetchError(
            student_id, f"{resource} record does not match schema: {exc.error_count()} error(s)"
        ) from exc


__all__ = ["RemoteRecordSource"]
