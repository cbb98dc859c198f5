"""
Exception taxonomy for the eligibility report runner.

Library code raises these; only the orchestrator (per report) and the CLI
(per process) catch them.
"""

from __future__ import annotations

from typing import Optional


class EligibilityError(Exception):
    """Base class for all report runner failures."""


class ConfigurationError(EligibilityError):
    """The report configuration file is unreadable or malformed."""


class UnknownReportError(ConfigurationError):
    """A requested report label is not in the configuration."""


class FetchError(EligibilityError):
    """A student's records could not be retrieved from the remote source."""

    kind: str = "fetch"

    def __init__(self, student_id: int, message: str) -> None:
        super().__init__(f"student {student_id}: {message}")
        self.student_id = student_id


class NetworkFetchError(FetchError):
    """Transport failure or non-success HTTP status."""

    kind = "network"

    def __init__(self, student_id: int, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(student_id, message)
        self.status_code = status_code


class DecodeFetchError(FetchError):
    """Response body is not a JSON list of the expected record shape."""

    kind = "decode"


class NotFoundFetchError(FetchError):
    """The remote source returned an empty list for the student."""

    kind = "not_found"


class AggregateError(EligibilityError):
    """A batch fetch was aborted because one student failed."""

    def __init__(self, student_id: int, cause: FetchError) -> None:
        super().__init__(f"aggregation aborted at student {student_id}: {cause}")
        self.student_id = student_id
        self.cause = cause


class RenderError(EligibilityError):
    """The report template is missing or could not be rendered."""


class OutputError(EligibilityError):
    """The rendered document could not be written."""


__all__ = [
    "EligibilityError",
    "ConfigurationError",
    "UnknownReportError",
    "FetchError",
    "NetworkFetchError",
    "DecodeFetchError",
    "NotFoundFetchError",
    "AggregateError",
    "RenderError",
    "OutputError",
]
