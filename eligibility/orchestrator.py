"""
Orchestrator for generating eligibility reports.

Report definitions are processed one at a time. For each definition the
orchestrator fetches every listed student concurrently, classifies and orders
them, renders the configured template and writes the document. A failure in
one report is logged and recorded in its outcome; the remaining reports still
run.

Usage (example from CLI):
    from eligibility.orchestrator import run

    outcomes = run("config.toml")
    print([o["status"] for o in outcomes])
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, TypedDict

import httpx

from eligibility.aggregator import FailureMode, StudentFailure, fetch_all
from eligibility.config import Settings, get_settings
from eligibility.domain.assembler import assemble, build_render_context
from eligibility.domain.models import ReportConfig, ReportDefinition, ReportingRecord
from eligibility.errors import UnknownReportError
from eligibility.infrastructure.http_factory import remote_source
from eligibility.renderer import DocumentRenderer
from eligibility.report_config import load_report_config
from eligibility.sources.abstract import RecordSource
from eligibility.utils.logging import get_logger
from eligibility.utils.profiler import profile_block
from eligibility.writer import write_document

log = get_logger(__name__)


class ReportOutcome(TypedDict, total=False):
    """
    Result of processing one report definition.

    `status` is ``success``, ``partial`` (partial mode with some students
    missing) or ``failed`` (no document written).
    """

    report: str
    template: str
    status: str
    students: int
    failures: List[Dict[str, Any]]
    output_path: Optional[str]
    duration_seconds: float
    peak_rss_bytes: Optional[int]
    error: Optional[str]
    records: List[ReportingRecord]


@dataclass(frozen=True)
class RunConfig:
    """Per-run knobs, resolved from settings and CLI overrides."""

    concurrency: Optional[int] = None
    failure_mode: FailureMode = FailureMode.ABORT
    output_dir: Path = Path(".")
    output_extension: str = ".html"
    default_display_name: str = "Mr. Smith"
    keep_records: bool = False

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> "RunConfig":
        base = cls(
            concurrency=settings.concurrency_limit,
            failure_mode=FailureMode(settings.failure_mode),
            output_dir=Path(settings.output_dir),
            output_extension=settings.output_extension,
            default_display_name=settings.default_display_name,
        )
        explicit = {k: v for k, v in overrides.items() if v is not None}
        if "failure_mode" in explicit:
            explicit["failure_mode"] = FailureMode(explicit["failure_mode"])
        if "output_dir" in explicit:
            explicit["output_dir"] = Path(explicit["output_dir"])
        return replace(base, **explicit)


def _failure_payload(failure: StudentFailure) -> Dict[str, Any]:
    return {
        "student_id": failure.student_id,
        "kind": failure.error.kind,
        "error": str(failure.error),
    }


def select_reports(config: ReportConfig, only: Optional[Iterable[str]] = None) -> List[ReportDefinition]:
    """
    Return the definitions to run, optionally filtered by label.

    Raises
    ------
    UnknownReportError
        If any label in `only` is not configured.
    """
    if only is None:
        return list(config.reports)
    wanted = list(only)
    known = set(config.labels())
    unknown = [label for label in wanted if label not in known]
    if unknown:
        raise UnknownReportError(
            f"Unknown report(s) {', '.join(unknown)}. Available: {', '.join(config.labels())}"
        )
    return [report for report in config.reports if report.label in wanted]


async def generate_report(
    definition: ReportDefinition,
    source: RecordSource,
    renderer: DocumentRenderer,
    run_config: RunConfig,
) -> tuple[List[ReportingRecord], List[StudentFailure], Path]:
    """
    Fetch, classify, render and write one report.

    Raises
    ------
    EligibilityError
        AggregateError (abort mode), RenderError or OutputError.
    """
    aggregated = await fetch_all(
        source,
        definition.student_ids,
        concurrency=run_config.concurrency,
        mode=run_config.failure_mode,
    )
    rows = assemble(aggregated.records, definition.rules)
    for row in rows:
        log.debug(
            f"{row.full_name}: {', '.join(row.matched_labels) or 'no flags met'}",
            extra={"report": definition.label, "student_id": row.student_id, "priority": row.priority},
        )

    display_name = definition.display_name or run_config.default_display_name
    context = build_render_context(
        definition,
        rows,
        display_name,
        failures=[_failure_payload(failure) for failure in aggregated.failures],
    )

    text = renderer.render(definition.template_name, context)
    path = write_document(
        run_config.output_dir,
        definition.template_name,
        text,
        extension=run_config.output_extension,
    )
    return rows, list(aggregated.failures), path


async def run_report(
    definition: ReportDefinition,
    source: RecordSource,
    renderer: DocumentRenderer,
    run_config: RunConfig,
) -> ReportOutcome:
    """
    Run one report and describe the result.

    Any exception raised while generating the report is logged and recorded
    as ``status="failed"``; cancellation still propagates.
    """
    log.info(f"[REPORT START] {definition.label}", extra={"report": definition.label})
    outcome = ReportOutcome(
        report=definition.label,
        template=definition.template_name,
        students=0,
        failures=[],
        output_path=None,
        error=None,
    )
    with profile_block(definition.label) as stats:
        try:
            rows, failures, path = await generate_report(definition, source, renderer, run_config)
        except Exception as exc:  # noqa: BLE001 - one report must not stop the run
            log.exception(f"[REPORT FAILED] {definition.label}", extra={"report": definition.label})
            outcome["status"] = "failed"
            outcome["error"] = str(exc)
        else:
            outcome["status"] = "partial" if failures else "success"
            outcome["students"] = len(rows)
            outcome["failures"] = [_failure_payload(failure) for failure in failures]
            outcome["output_path"] = str(path)
            if run_config.keep_records:
                outcome["records"] = rows
            log.info(
                f"[REPORT {outcome['status'].upper()}] {definition.label}",
                extra={
                    "report": definition.label,
                    "students": len(rows),
                    "failed_students": len(failures),
                    "output_path": str(path),
                },
            )

    outcome["duration_seconds"] = round(stats.duration_seconds, 3)
    outcome["peak_rss_bytes"] = stats.peak_rss_bytes
    return outcome


async def run_reports(
    config: ReportConfig,
    *,
    source: Optional[RecordSource] = None,
    renderer: Optional[DocumentRenderer] = None,
    run_config: Optional[RunConfig] = None,
    settings: Optional[Settings] = None,
    only: Optional[Iterable[str]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[ReportOutcome]:
    """
    Run the configured reports sequentially.

    Parameters
    ----------
    config : ReportConfig
        Loaded report definitions.
    source : RecordSource | None
        Record source shared by all reports. When None, a remote source with
        one shared HTTP client is opened for the run and closed afterwards.
    renderer : DocumentRenderer | None
        Defaults to a renderer over `settings.templates_dir`.
    run_config : RunConfig | None
        Defaults to `RunConfig.from_settings(settings)`.
    settings : Settings | None
        Defaults to the cached process settings.
    only : iterable[str] | None
        Labels of the reports to run; all when None.
    transport : httpx.AsyncBaseTransport | None
        Transport for the default remote source's client.

    Returns
    -------
    List[ReportOutcome]
        One outcome per executed report, in configuration order.
    """
    settings = settings or get_settings()
    run_config = run_config or RunConfig.from_settings(settings)
    renderer = renderer or DocumentRenderer(settings.templates_dir)
    definitions = select_reports(config, only)

    if source is None:
        async with remote_source(settings, transport=transport) as remote:
            return await _run_sequentially(definitions, remote, renderer, run_config)
    return await _run_sequentially(definitions, source, renderer, run_config)


async def _run_sequentially(
    definitions: List[ReportDefinition],
    source: RecordSource,
    renderer: DocumentRenderer,
    run_config: RunConfig,
) -> List[ReportOutcome]:
    outcomes: List[ReportOutcome] = []
    for index, definition in enumerate(definitions, start=1):
        log.info(
            f"[REPORT {index}/{len(definitions)}] {definition.label}",
            extra={"report": definition.label, "students": len(definition.student_ids)},
        )
        outcomes.append(await run_report(definition, source, renderer, run_config))

    failed = [o["report"] for o in outcomes if o["status"] == "failed"]
    log.info(
        f"[RUN COMPLETE] {len(outcomes) - len(failed)}/{len(outcomes)} report(s) written",
        extra={"reports": len(outcomes), "failed_reports": failed},
    )
    return outcomes


def run(
    config_path: Path | str | None = None,
    *,
    settings: Optional[Settings] = None,
    **kwargs: Any,
) -> List[ReportOutcome]:
    """
    Load the report configuration and run it to completion.

    Raises
    ------
    ConfigurationError
        If the configuration cannot be loaded; no report is run.
    """
    settings = settings or get_settings()
    config = load_report_config(config_path or settings.report_config_path)
    return asyncio.run(run_reports(config, settings=settings, **kwargs))


__all__ = [
    "ReportOutcome",
    "RunConfig",
    "generate_report",
    "run",
    "run_report",
    "run_reports",
    "select_reports",
]
