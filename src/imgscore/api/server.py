"""FastAPI server for imgscore.

Exposes the evaluation pipeline as ``POST /evaluate`` plus read-only
history and liveness endpoints. Authentication is expected to sit in
front of this app.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from imgscore import __version__
from imgscore.errors import ArtifactNotFound, EvaluationError, MalformedInput
from imgscore.models.config import ProjectConfig, find_project_root, load_project_config
from imgscore.pipeline.factory import build_pipeline
from imgscore.pipeline.orchestrator import EvaluationPipeline
from imgscore.storage.json_store import ArtifactStore, EvaluationStore

logger = structlog.get_logger()


def get_pipeline(request: Request) -> EvaluationPipeline:
    """Dependency: the app's evaluation pipeline."""
    return request.app.state.pipeline


def get_artifact_store(request: Request) -> ArtifactStore:
    return request.app.state.artifacts


def get_evaluation_store(request: Request) -> EvaluationStore:
    return request.app.state.history


async def evaluation_error_handler(request: Request, exc: EvaluationError) -> JSONResponse:
    """Map pipeline errors to a ``{"success": false, "error": ...}`` envelope."""
    logger.info(
        "evaluation_request_failed",
        path=request.url.path,
        code=exc.code,
        status_code=exc.status_code,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.to_dict()},
    )


async def read_json_object(request: Request) -> dict[str, Any]:
    """Parse the request body as a JSON object; an empty body reads as {}.

    Raises:
        MalformedInput: The body is not valid JSON or not an object.
    """
    body = await request.body()
    if not body.strip():
        return {}
    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise MalformedInput(f"Request body is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise MalformedInput(
            f"Request body must be a JSON object, got {type(payload).__name__}"
        )
    return payload


def create_app(
    project_root: Path | None = None,
    config: ProjectConfig | None = None,
    pipeline: EvaluationPipeline | None = None,
) -> FastAPI:
    """Create the FastAPI app for one imgscore project.

    Args:
        project_root: Project directory; discovered from the cwd if omitted.
        config: Loaded project config; read from imgscore.yaml if omitted.
        pipeline: Prebuilt pipeline; built from ``config`` if omitted.
    """
    if project_root is None:
        project_root = find_project_root()
    if config is None:
        config = load_project_config(project_root)

    app = FastAPI(
        title="imgscore API",
        description="Multi-agent quality scoring for generated images",
        version=__version__,
    )
    app.state.pipeline = pipeline or build_pipeline(config, project_root)
    app.state.artifacts = ArtifactStore(project_root, config.storage_dir)
    app.state.history = EvaluationStore(project_root, config.storage_dir)
    app.add_exception_handler(EvaluationError, evaluation_error_handler)

    @app.get("/health")
    async def health_check() -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    @app.post("/evaluate")
    async def evaluate(
        request: Request,
        pipeline: EvaluationPipeline = Depends(get_pipeline),
    ) -> dict[str, Any]:
        """Score one artifact and persist the evaluation record."""
        payload = await read_json_object(request)
        artifact_id = payload.get("artifact_id")
        outcome = await pipeline.evaluate(artifact_id)
        return {"success": True, **outcome.model_dump()}

    @app.get("/artifacts")
    async def list_artifacts(
        artifacts: ArtifactStore = Depends(get_artifact_store),
        history: EvaluationStore = Depends(get_evaluation_store),
    ) -> dict[str, Any]:
        """List every artifact, newest first, with its evaluation summary."""
        items = []
        for artifact in artifacts.list_artifacts():
            latest = history.latest_record(artifact.id)
            items.append(
                {
                    **artifact.model_dump(mode="json"),
                    "evaluation_count": history.count_records(artifact.id),
                    "latest_evaluation": latest.model_dump(mode="json") if latest else None,
                }
            )
        return {"artifacts": items}

    @app.get("/artifacts/{artifact_id}/evaluations")
    async def list_evaluations(
        artifact_id: str,
        artifacts: ArtifactStore = Depends(get_artifact_store),
        history: EvaluationStore = Depends(get_evaluation_store),
    ) -> dict[str, Any]:
        """List an artifact's evaluation records, oldest first."""
        artifact = artifacts.find_by_id(artifact_id)
        if artifact is None:
            raise ArtifactNotFound(artifact_id)
        records = history.list_records(artifact_id)
        return {
            "artifact_id": artifact_id,
            "cached_score": artifact.cached_score,
            "evaluations": [r.model_dump(mode="json") for r in records],
        }

    return app
