"""
Student eligibility reports - periodic per-student GPA classification.

This package fetches identity and GPA records for the students listed in each
configured report, classifies every student against the report's range rules,
orders them by rule priority and renders one document per report:

- Concurrent per-student fetching from the school's REST API
- All-or-nothing or partial aggregation per report
- Half-open range rules with priority-based, stable ordering
- Jinja2 templates for the rendered documents

Reports are isolated from each other: one failing report does not stop the
others from being written.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from eligibility.aggregator import AggregateResult, FailureMode, StudentFailure, fetch_all
from eligibility.config import Settings, get_settings
from eligibility.domain import (
    IdentityRecord,
    RangeRule,
    ReportConfig,
    ReportDefinition,
    ReportingRecord,
    ScoreRecord,
    StudentRecord,
    assemble,
    matched_rules,
)
from eligibility.orchestrator import ReportOutcome, RunConfig, run, run_report, run_reports
from eligibility.report_config import load_report_config
from eligibility.sources import RecordSource, RemoteRecordSource
from eligibility.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    "load_report_config",
    # Domain
    "IdentityRecord",
    "RangeRule",
    "ReportConfig",
    "ReportDefinition",
    "ReportingRecord",
    "ScoreRecord",
    "StudentRecord",
    "assemble",
    "matched_rules",
    # Fetching
    "RecordSource",
    "RemoteRecordSource",
    "AggregateResult",
    "FailureMode",
    "StudentFailure",
    "fetch_all",
    # Orchestration
    "ReportOutcome",
    "RunConfig",
    "run",
    "run_report",
    "run_reports",
    # Logging
    "configure_logging",
    "get_logger",
]
