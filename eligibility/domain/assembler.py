"""
Report assembly: classify aggregated students and order them by severity.

`assemble` is pure and deterministic. Ordering is by the highest matched
rule priority, descending; `sorted` is stable, so students with equal
priority (including every unmatched student at priority 0) keep their
aggregation order, which is the report's input identifier order.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Sequence

from eligibility.domain.models import RangeRule, ReportDefinition, ReportingRecord, StudentRecord
from eligibility.domain.rules import matched_rules, sort_key


def to_reporting_record(record: StudentRecord, rules: Sequence[RangeRule]) -> ReportingRecord:
    """Classify a single aggregated student."""
    score = record.score.score
    matched = matched_rules(score, rules)
    return ReportingRecord(
        student_id=record.student_id,
        full_name=record.identity.full_name,
        score=score,
        matched_labels=tuple(rule.label for rule in matched),
        priority=sort_key(matched),
    )


def assemble(records: Iterable[StudentRecord], rules: Sequence[RangeRule]) -> List[ReportingRecord]:
    """
    Build reporting-ready rows and order them by descending priority.

    Parameters
    ----------
    records : iterable[StudentRecord]
        Aggregated students, in input identifier order.
    rules : sequence[RangeRule]
        The report's rules, in configured order.

    Returns
    -------
    List[ReportingRecord]
        One row per input record, highest priority first.
    """
    rows = [to_reporting_record(record, rules) for record in records]
    return sorted(rows, key=lambda row: row.priority, reverse=True)


def _student_payload(row: ReportingRecord) -> Dict[str, Any]:
    labels = list(row.matched_labels)
    # camelCase/gpa/flags keys keep templates written for the legacy tool working
    return {
        "student_id": row.student_id,
        "full_name": row.full_name,
        "fullName": row.full_name,
        "score": row.score,
        "gpa": row.score,
        "matched_labels": labels,
        "flags": labels,
        "priority": row.priority,
    }


def build_render_context(
    definition: ReportDefinition,
    rows: Sequence[ReportingRecord],
    display_name: str,
    failures: Sequence[Mapping[str, Any]] = (),
) -> Dict[str, Any]:
    """
    Package ordered rows and report metadata for the document renderer.

    `failures` holds one mapping per student missing from a partial report
    (``student_id``, ``kind``, ``error``); it is empty otherwise.
    """
    return {
        "name": display_name,
        "report": definition.label,
        "recipients": list(definition.recipients),
        "students": [_student_payload(row) for row in rows],
        "failures": [dict(failure) for failure in failures],
    }


__all__ = ["assemble", "build_render_context", "to_reporting_record"]
