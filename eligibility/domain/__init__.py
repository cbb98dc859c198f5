"""
Domain package for the eligibility report runner.

Exports the record models, the rule evaluator and the report assembler.
Keep this package pure: no I/O, no network, no filesystem access.
"""

from eligibility.domain.assembler import assemble, build_render_context
from eligibility.domain.models import (
    IdentityRecord,
    RangeRule,
    ReportConfig,
    ReportDefinition,
    ReportingRecord,
    ScoreRecord,
    StudentRecord,
)
from eligibility.domain.rules import matched_rules, sort_key

__all__ = [
    "IdentityRecord",
    "RangeRule",
    "ReportConfig",
    "ReportDefinition",
    "ReportingRecord",
    "ScoreRecord",
    "StudentRecord",
    "assemble",
    "build_render_context",
    "matched_rules",
    "sort_key",
]
