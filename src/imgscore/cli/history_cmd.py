"""imgscore history / show / list -- inspect stored artifacts and evaluations."""

from __future__ import annotations

import json

import typer

from imgscore.cli.output import (
    console,
    load_project,
    render_artifact,
    render_artifact_list,
    render_history,
    write_json,
)
from imgscore.storage.json_store import ArtifactStore, EvaluationStore


def history(
    artifact_id: str = typer.Argument(..., help="Artifact ID"),
    format_json: bool = typer.Option(False, "--json", help="Output pure JSON to stdout"),
) -> None:
    """List every evaluation recorded for an artifact, oldest first."""
    project_root, config = load_project()
    artifacts = ArtifactStore(project_root, config.storage_dir)
    if artifacts.find_by_id(artifact_id) is None:
        console.print(f"[bold red]Error:[/bold red] Artifact '{artifact_id}' not found")
        raise typer.Exit(code=1)

    records = EvaluationStore(project_root, config.storage_dir).list_records(artifact_id)
    if format_json:
        write_json(json.dumps([r.model_dump(mode="json") for r in records], indent=2))
    else:
        render_history(artifact_id, records, console)


def show(
    artifact_id: str = typer.Argument(..., help="Artifact ID"),
) -> None:
    """Show an artifact with its cached score and evaluation count."""
    project_root, config = load_project()
    artifact = ArtifactStore(project_root, config.storage_dir).find_by_id(artifact_id)
    if artifact is None:
        console.print(f"[bold red]Error:[/bold red] Artifact '{artifact_id}' not found")
        raise typer.Exit(code=1)

    count = EvaluationStore(project_root, config.storage_dir).count_records(artifact_id)
    render_artifact(artifact, count, console)


def list_artifacts(
    format_json: bool = typer.Option(False, "--json", help="Output pure JSON to stdout"),
) -> None:
    """List every artifact, newest first, with its evaluation count."""
    project_root, config = load_project()
    artifacts = ArtifactStore(project_root, config.storage_dir).list_artifacts()
    history = EvaluationStore(project_root, config.storage_dir)
    counts = {a.id: history.count_records(a.id) for a in artifacts}

    if format_json:
        payload = [
            {**a.model_dump(mode="json"), "evaluation_count": counts[a.id]}
            for a in artifacts
        ]
        write_json(json.dumps(payload, indent=2))
    else:
        render_artifact_list(artifacts, counts, console)
