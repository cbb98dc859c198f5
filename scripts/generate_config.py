"""
Sample configuration generator for the eligibility report runner.

Emits a deterministic report configuration TOML (seeded student id sample and
the default probation/warning/honor-roll bands) and validates it with the same
loader the runner uses.
"""

from __future__ import annotations

import random
import sys
from pathlib import Path

import typer

from eligibility.errors import ConfigurationError
from eligibility.report_config import load_report_config

app = typer.Typer(help="Generate a sample report configuration TOML.")

DEFAULT_RULES = [
    (0.0, 2.0, 9, "probation"),
    (2.0, 2.5, 5, "warning"),
    (3.5, 5.0, 1, "honor roll"),
]


def _sample_student_ids(count: int, max_id: int, seed: int) -> list[int]:
    rng = random.Random(seed)
    return sorted(rng.sample(range(1, max_id + 1), count))


def _toml_string(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _render_config(
    label: str,
    template: str,
    recipients: list[str],
    student_ids: list[int],
    every: str,
) -> str:
    lines = [
        "[[timed_reports]]",
        f"report_label = {_toml_string(label)}",
        f"every = {_toml_string(every)}",
        "to = [" + ", ".join(_toml_string(r) for r in recipients) + "]",
        f"template = {_toml_string(template)}",
        "student_ids = [" + ", ".join(str(i) for i in student_ids) + "]",
    ]
    for min_gpa, max_gpa, priority, level in DEFAULT_RULES:
        lines += [
            "",
            "[[timed_reports.flags]]",
            f"min_gpa = {min_gpa:.1f}",
            f"max_gpa = {max_gpa:.1f}",
            f"priority = {priority}",
            f"level = {_toml_string(level)}",
        ]
    return "\n".join(lines) + "\n"


@app.command()
def main(
    output: Path = typer.Option(
        Path("config.toml"),
        "--output",
        "-o",
        help="Where to write the configuration.",
    ),
    students: int = typer.Option(
        25,
        "--students",
        "-n",
        min=1,
        help="Number of student ids to sample.",
    ),
    max_id: int = typer.Option(
        1_000,
        "--max-id",
        help="Largest student id to sample from.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    label: str = typer.Option("Weekly GPA check", "--label", help="Report label."),
    template: str = typer.Option("report", "--template", help="Template name."),
    recipient: list[str] = typer.Option(
        ["counselor@example.org"],
        "--recipient",
        help="Recipient (repeatable).",
    ),
) -> None:
    """
    Write a sample configuration and check that it loads.
    """
    if students > max_id:
        typer.echo(f"--students ({students}) cannot exceed --max-id ({max_id}).", err=True)
        raise typer.Exit(2)

    ids = _sample_student_ids(students, max_id, seed)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(_render_config(label, template, recipient, ids, "1w"), encoding="utf-8")

    try:
        config = load_report_config(output)
    except ConfigurationError as exc:
        typer.echo(f"Generated config failed validation: {exc}", err=True)
        raise typer.Exit(1) from exc
    typer.echo(f"Wrote {output} ({len(config.reports)} report, {len(ids)} students, seed={seed}).")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
