"""Shared fixtures: a temporary project with Pillow-generated images."""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from imgscore.models.artifact import Artifact
from imgscore.storage.json_store import ArtifactStore, EvaluationStore


@pytest.fixture
def image_root(tmp_path: Path) -> Path:
    root = tmp_path / "public"
    root.mkdir()
    return root


@pytest.fixture
def write_image(image_root: Path):
    """Write a solid-color image under the project's image root."""

    def _write(image_ref: str, size: tuple[int, int] = (400, 400), fmt: str = "PNG") -> Path:
        path = image_root / image_ref.lstrip("/")
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", size, color=(200, 80, 40)).save(path, format=fmt)
        return path

    return _write


@pytest.fixture
def artifact_store(tmp_path: Path) -> ArtifactStore:
    return ArtifactStore(tmp_path)


@pytest.fixture
def evaluation_store(tmp_path: Path) -> EvaluationStore:
    return EvaluationStore(tmp_path)


@pytest.fixture
def seed_artifact(artifact_store: ArtifactStore, write_image):
    """Save an artifact (and, by default, its 400x400 image)."""

    def _seed(
        artifact_id: str = "42",
        prompt: str = "red fox",
        image_path: str = "/images/red-fox.png",
        size: tuple[int, int] | None = (400, 400),
    ) -> Artifact:
        if size is not None:
            write_image(image_path, size)
        artifact = Artifact(id=artifact_id, prompt=prompt, image_path=image_path)
        artifact_store.save_artifact(artifact)
        return artifact

    return _seed
