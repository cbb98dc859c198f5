"""
Report definition loader.

Report definitions are read once at startup from a TOML document:

    [[timed_reports]]
    report_label = "Weekly GPA check"
    every = "1w"
    to = ["counselor@example.org"]
    template = "report"
    student_ids = [101, 102, 103]

    [[timed_reports.flags]]
    min_gpa = 0.0
    max_gpa = 2.0
    priority = 9
    level = "probation"

Any failure to read or validate the document is a `ConfigurationError`;
callers treat it as fatal and run no reports.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import ValidationError

from eligibility.domain.models import ReportConfig
from eligibility.errors import ConfigurationError
from eligibility.utils.logging import get_logger

log = get_logger(__name__)


def load_report_config(path: Path | str) -> ReportConfig:
    """
    Read and validate the report configuration file.

    Raises
    ------
    ConfigurationError
        If the file cannot be read, is not valid TOML, or does not match the
        report schema.
    """
    config_path = Path(path)
    try:
        raw = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"cannot read report config {config_path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"invalid TOML in {config_path}: {exc}") from exc

    try:
        config = ReportConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid report config {config_path}:\n{exc}") from exc

    log.info(
        f"Loaded {len(config.reports)} report definition(s)",
        extra={"config_path": str(config_path), "reports": config.labels()},
    )
    return config


__all__ = ["load_report_config"]
