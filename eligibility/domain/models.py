"""
Domain models for the eligibility report runner.

Remote payloads and configuration tables use their own field names
(`FirstName`, `GPA_GradeReportingTotal`, `min_gpa`, ...); the models accept
those as aliases while the code works with the Python field names. All models
are frozen: fetched records and report definitions are immutable for the
duration of a run and are shared read-only across concurrent fetch tasks.
"""
from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, Field, NonNegativeInt, PositiveInt

_FROZEN = {
    "frozen": True,
    "populate_by_name": True,
}


class IdentityRecord(BaseModel):
    """
    Human-readable identity of a student as returned by the students endpoint.
    """

    first_name: str = Field(..., alias="FirstName")
    last_name: str = Field(..., alias="LastName")

    model_config = _FROZEN

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class ScoreRecord(BaseModel):
    """
    Numeric score (cumulative GPA) as returned by the GPA endpoint.
    """

    score: float = Field(..., alias="GPA_GradeReportingTotal")

    model_config = _FROZEN


class StudentRecord(BaseModel):
    """
    Identity and score of one student, fetched together for a report run.
    """

    student_id: int
    identity: IdentityRecord
    score: ScoreRecord

    model_config = _FROZEN


class RangeRule(BaseModel):
    """
    A named classification band over the half-open interval [min_score, max_score).
    """

    min_score: float = Field(..., alias="min_gpa", description="Inclusive lower bound.")
    max_score: float = Field(..., alias="max_gpa", description="Exclusive upper bound.")
    priority: NonNegativeInt = Field(..., description="Report ordering weight.")
    label: str = Field(..., alias="level")

    model_config = _FROZEN

    def matches(self, score: float) -> bool:
        return self.min_score <= score < self.max_score


class ReportingRecord(BaseModel):
    """
    Per-student row handed to the document renderer.
    """

    student_id: int
    full_name: str
    score: float
    matched_labels: Tuple[str, ...] = ()
    priority: int = Field(0, description="Max priority of the matched rules, 0 if none.")

    model_config = _FROZEN


class ReportDefinition(BaseModel):
    """
    One configured report: which students to fetch, how to classify them and
    which template renders the result.
    """

    label: str = Field(..., alias="report_label")
    schedule: str = Field("", alias="every", description="Opaque; not interpreted here.")
    recipients: Tuple[str, ...] = Field((), alias="to")
    template_name: str = Field(..., alias="template", min_length=1)
    rules: Tuple[RangeRule, ...] = Field((), alias="flags")
    student_ids: Tuple[PositiveInt, ...] = ()
    display_name: Optional[str] = Field(None, description="Greeting name; falls back to settings.")

    model_config = _FROZEN


class ReportConfig(BaseModel):
    """
    Top-level report configuration document.
    """

    reports: Tuple[ReportDefinition, ...] = Field((), alias="timed_reports")

    model_config = _FROZEN

    def labels(self) -> list[str]:
        return [report.label for report in self.reports]


__all__ = [
    "IdentityRecord",
    "ScoreRecord",
    "StudentRecord",
    "RangeRule",
    "ReportingRecord",
    "ReportDefinition",
    "ReportConfig",
]
