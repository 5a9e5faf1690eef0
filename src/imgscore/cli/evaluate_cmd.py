"""imgscore evaluate -- score one artifact and record the result."""

from __future__ import annotations

import typer

from imgscore.cli.output import (
    EXIT_CODES,
    console,
    load_project,
    render_outcome,
    render_unsaved_scores,
    write_json,
)
from imgscore.errors import EvaluationError, PersistenceFailure
from imgscore.pipeline.factory import build_pipeline


def evaluate(
    artifact_id: str = typer.Argument(..., help="ID of the artifact to evaluate"),
    format_json: bool = typer.Option(False, "--json", help="Output pure JSON to stdout"),
) -> None:
    """Run all scoring agents on an artifact and persist the evaluation."""
    project_root, config = load_project()

    try:
        pipeline = build_pipeline(config, project_root)
    except (ImportError, TypeError, ValueError) as exc:
        console.print(f"[bold red]Pipeline error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    try:
        outcome = pipeline.evaluate_sync(artifact_id)
    except EvaluationError as exc:
        console.print(f"[bold red]Error ({exc.code}):[/bold red] {exc.message}")
        if isinstance(exc, PersistenceFailure):
            render_unsaved_scores(exc.scores, console)
        raise typer.Exit(code=EXIT_CODES.get(exc.code, 1))

    if format_json:
        write_json(outcome.model_dump_json(indent=2))
    else:
        render_outcome(outcome, console)
