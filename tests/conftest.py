"""
Pytest configuration for the eligibility report runner.

Provides fixtures for:
- Settings with test-specific overrides
- An in-memory record source with per-student delays and failures
- Sample rules, templates and report configuration files
"""

from __future__ import annotations

from pathlib import Path
from typing import Tuple

import pytest

from eligibility.config import Settings
from eligibility.domain.models import RangeRule, ReportDefinition

from tests.fakes import FakeRecordSource

REPORT_TEMPLATE = """\
Hello {{ name }} - {{ report }}
{% for student in students -%}
{{ student.full_name }}|{{ student.score }}|{{ student.matched_labels | join(",") }}|{{ student.priority }}
{% endfor -%}
{% for failure in failures -%}
missing {{ failure.student_id }} ({{ failure.kind }})
{% endfor -%}
"""

SAMPLE_CONFIG_TOML = """\
[[timed_reports]]
report_label = "Weekly GPA check"
every = "1w"
to = ["counselor@example.org"]
template = "report"
student_ids = [101, 102, 103]

[[timed_reports.flags]]
min_gpa = 0.0
max_gpa = 2.0
priority = 1
level = "low"

[[timed_reports.flags]]
min_gpa = 2.0
max_gpa = 4.0
priority = 5
level = "mid"

[[timed_reports.flags]]
min_gpa = 4.0
max_gpa = 5.0
priority = 9
level = "high"
"""


@pytest.fixture
def sample_rules() -> Tuple[RangeRule, ...]:
    return (
        RangeRule(min_score=0.0, max_score=2.0, priority=1, label="low"),
        RangeRule(min_score=2.0, max_score=4.0, priority=5, label="mid"),
        RangeRule(min_score=4.0, max_score=5.0, priority=9, label="high"),
    )


@pytest.fixture
def scenario_source() -> FakeRecordSource:
    return FakeRecordSource(
        {
            101: ("Alice", "A", 1.5),
            102: ("Bob", "B", 3.0),
            103: ("Cara", "C", 4.5),
        }
    )


@pytest.fixture
def sample_definition(sample_rules) -> ReportDefinition:
    return ReportDefinition(
        label="Weekly GPA check",
        schedule="1w",
        recipients=("counselor@example.org",),
        template_name="report",
        rules=sample_rules,
        student_ids=(101, 102, 103),
    )


@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "templates"
    directory.mkdir()
    (directory / "report.html.j2").write_text(REPORT_TEMPLATE, encoding="utf-8")
    return directory


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(SAMPLE_CONFIG_TOML, encoding="utf-8")
    return path


@pytest.fixture
def test_settings(tmp_path: Path, templates_dir: Path, config_file: Path) -> Settings:
    """
    Settings fixture pointing every path at the test's tmp directory.
    """
    return Settings(
        source_base_url="https://sis.test/api/v5",
        source_school_code="994",
        source_cert="test-cert",
        report_config_path=str(config_file),
        templates_dir=str(templates_dir),
        output_dir=str(tmp_path / "out"),
        log_level="DEBUG",
    )
