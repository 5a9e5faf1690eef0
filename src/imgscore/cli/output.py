"""Rich terminal output and shared CLI setup.

Renders evaluation outcomes, evaluation history, and artifact details
as compact key-value tables. Logs go to stderr so JSON output on
stdout stays machine-readable.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from imgscore.models.config import ConfigError, find_project_root, load_project_config
from imgscore.utils.logging import configure_logging

if TYPE_CHECKING:
    from imgscore.models.artifact import Artifact
    from imgscore.models.config import ProjectConfig
    from imgscore.models.record import EvaluationOutcome, EvaluationRecord

console = Console(stderr=True)

# Error code -> process exit code
EXIT_CODES: dict[str, int] = {
    "malformed_input": 1,
    "not_found": 1,
    "persistence_failed": 2,
}


def load_project() -> tuple[Path, ProjectConfig]:
    """Locate the project, load imgscore.yaml, and configure logging."""
    project_root = find_project_root()
    try:
        config = load_project_config(project_root)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=1)
    configure_logging(config.logging.level, json_format=config.logging.format == "json")
    return project_root, config


def _score_style(value: float) -> str:
    if value >= 70:
        return "green"
    if value >= 40:
        return "yellow"
    return "red"


def render_outcome(outcome: EvaluationOutcome, out: Console) -> None:
    """Render a successful evaluation's score breakdown."""
    table = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    table.add_column("Key", style="bold")
    table.add_column("Value")

    rows = [
        ("Size", outcome.size_score),
        ("Subject", outcome.subject_score),
        ("Creativity", outcome.creativity_score),
        ("Mood", outcome.mood_score),
    ]
    for label, value in rows:
        style = _score_style(value)
        table.add_row(label, f"[{style}]{value}[/{style}]")

    style = _score_style(outcome.composite_score)
    table.add_row("Composite", f"[bold {style}]{outcome.composite_score}[/bold {style}]")
    table.add_row("Artifact", outcome.artifact_id)
    table.add_row("Record", outcome.record_id)
    if not outcome.cache_updated:
        table.add_row("Cache", "[yellow]stale (update failed)[/yellow]")

    out.print()
    out.print(table)


def render_unsaved_scores(scores: dict[str, int], out: Console) -> None:
    """Show scores computed by a run whose record could not be saved."""
    if not scores:
        return
    summary = " ".join(f"{k.removesuffix('_score')}={v}" for k, v in scores.items())
    out.print(f"[dim]Computed (NOT saved): {summary}[/dim]")


def render_history(
    artifact_id: str, records: list[EvaluationRecord], out: Console
) -> None:
    """Render an artifact's evaluation records, oldest first."""
    if not records:
        out.print(f"No evaluations recorded for artifact '{artifact_id}'.")
        return

    table = Table(box=box.SIMPLE, title=f"Evaluations for {artifact_id}")
    table.add_column("Created (UTC)")
    table.add_column("Size", justify="right")
    table.add_column("Subject", justify="right")
    table.add_column("Creativity", justify="right")
    table.add_column("Mood", justify="right")
    table.add_column("Composite", justify="right", style="bold")
    table.add_column("Record", style="dim")

    for r in records:
        table.add_row(
            r.created_at.strftime("%Y-%m-%d %H:%M:%S"),
            str(r.size_score),
            str(r.subject_score),
            str(r.creativity_score),
            str(r.mood_score),
            str(r.composite_score),
            r.id,
        )
    out.print(table)


def render_artifact(artifact: Artifact, record_count: int, out: Console) -> None:
    table = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    table.add_column("Key", style="bold")
    table.add_column("Value")

    table.add_row("Artifact", artifact.id)
    table.add_row("Prompt", artifact.prompt)
    table.add_row("Image", artifact.image_path)
    if artifact.llm_model:
        table.add_row("Model", artifact.llm_model)
    if artifact.channel:
        table.add_row("Channel", artifact.channel)
    cached = "-" if artifact.cached_score is None else f"{artifact.cached_score:.1f}"
    table.add_row("Cached score", cached)
    table.add_row("Evaluations", str(record_count))
    out.print(table)


def render_artifact_list(
    artifacts: list[Artifact], counts: dict[str, int], out: Console
) -> None:
    """Render stored artifacts, newest first."""
    if not artifacts:
        out.print("No artifacts stored.")
        return

    table = Table(box=box.SIMPLE, title="Artifacts")
    table.add_column("Artifact", style="bold")
    table.add_column("Created (UTC)")
    table.add_column("Prompt")
    table.add_column("Cached score", justify="right")
    table.add_column("Evaluations", justify="right")

    for a in artifacts:
        created = a.timestamp.strftime("%Y-%m-%d %H:%M:%S") if a.timestamp else "-"
        cached = "-" if a.cached_score is None else f"{a.cached_score:.1f}"
        table.add_row(a.id, created, a.prompt, cached, str(counts.get(a.id, 0)))
    out.print(table)


def write_json(payload: str) -> None:
    """Write pure JSON to stdout with no Rich markup."""
    sys.stdout.write(payload)
    sys.stdout.write("\n")
