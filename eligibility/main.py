from __future__ import annotations

import sys
from typing import List, Optional

import typer

from eligibility.aggregator import FailureMode
from eligibility.config import get_settings
from eligibility.errors import ConfigurationError
from eligibility.orchestrator import RunConfig, run
from eligibility.report_config import load_report_config
from eligibility.reporter import print_outcomes, print_reports, print_students
from eligibility.utils.logging import configure_logging

app = typer.Typer(help="Student eligibility report runner.")

EXIT_REPORT_FAILED = 1
EXIT_CONFIG_ERROR = 2

_CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="Report configuration TOML (default from REPORT_CONFIG_PATH).",
)


def _load_or_exit(config: Optional[str]):
    settings = get_settings()
    try:
        return load_report_config(config or settings.report_config_path)
    except ConfigurationError as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR) from exc


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    concurrency = settings.concurrency_limit or "unbounded"
    typer.echo(
        f"source={settings.source_base_url}/schools/{settings.source_school_code} | "
        f"concurrency={concurrency} failure_mode={settings.failure_mode} | "
        f"config={settings.report_config_path} templates={settings.templates_dir} "
        f"output={settings.output_dir}"
    )


@app.command("list")
def list_reports(config: Optional[str] = _CONFIG_OPTION) -> None:
    """
    List the configured reports.
    """
    configure_logging(level="WARNING")
    print_reports(_load_or_exit(config))


@app.command()
def check(config: Optional[str] = _CONFIG_OPTION) -> None:
    """
    Validate the report configuration without running anything.
    """
    configure_logging(level="WARNING")
    report_config = _load_or_exit(config)
    typer.echo(f"OK: {len(report_config.reports)} report definition(s).")


@app.command("run")
def run_command(
    config: Optional[str] = _CONFIG_OPTION,
    report: Optional[List[str]] = typer.Option(
        None,
        "--report",
        "-r",
        help="Run only the report with this label (repeatable).",
    ),
    concurrency: Optional[int] = typer.Option(
        None,
        "--concurrency",
        min=1,
        help="Maximum simultaneous student fetches (default from FETCH_CONCURRENCY).",
    ),
    failure_mode: Optional[FailureMode] = typer.Option(
        None,
        "--failure-mode",
        case_sensitive=False,
        help="abort: drop a report on the first failed student; partial: report the rest.",
    ),
    output_dir: Optional[str] = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for rendered documents (default from OUTPUT_DIR).",
    ),
    show_students: bool = typer.Option(
        False,
        "--show-students",
        help="Print each report's classified students.",
    ),
) -> None:
    """
    Run the configured reports and write one document per report.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    run_config = RunConfig.from_settings(
        settings,
        concurrency=concurrency,
        failure_mode=failure_mode,
        output_dir=output_dir,
        keep_records=show_students,
    )
    try:
        outcomes = run(config, settings=settings, run_config=run_config, only=report)
    except ConfigurationError as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR) from exc

    if show_students:
        for outcome in outcomes:
            if "records" in outcome:
                print_students(outcome["report"], outcome["records"])
    print_outcomes(outcomes)

    if any(outcome["status"] == "failed" for outcome in outcomes):
        raise typer.Exit(EXIT_REPORT_FAILED)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
