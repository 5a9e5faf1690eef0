"""JSON file storage for artifacts and evaluation history.

Stores Artifact objects under .imgscore/artifacts/ and immutable
EvaluationRecord objects under .imgscore/evaluations/, with an index
file mapping artifact IDs to their record IDs in append order. Uses
atomic writes to prevent corruption.
"""

from __future__ import annotations

import fcntl
import json
import os
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import quote
from uuid import uuid4

from pydantic import ValidationError

from imgscore.models.artifact import Artifact
from imgscore.models.record import EvaluationRecord


class StoreError(Exception):
    """Raised when a store write cannot be completed."""


def _atomic_write(path: Path, content: str) -> None:
    """Write to a unique .tmp sibling, then replace the target."""
    tmp_path = path.with_name(f"{path.name}.{uuid4().hex}.tmp")
    try:
        tmp_path.write_text(content, encoding="utf-8")
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


def _file_stem(identifier: str) -> str:
    # Percent-encode so arbitrary IDs can never escape the store directory
    return quote(identifier, safe="")


@contextmanager
def _file_lock(lock_path: Path) -> Iterator[None]:
    """Hold an exclusive advisory lock on lock_path across processes."""
    with open(lock_path, "a+b") as handle:
        fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


def _newest_first_key(artifact: Artifact) -> tuple[bool, datetime]:
    timestamp = artifact.timestamp
    if timestamp is None:
        return (False, datetime.min.replace(tzinfo=timezone.utc))
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return (True, timestamp)


class ArtifactStore:
    """Persist and query Artifact objects as JSON files.

    File layout:
        .imgscore/
            artifacts/
                {artifact-id}.json

    The evaluation pipeline reads artifacts and rewrites only the
    ``cached_score`` field via update_cached_score().
    """

    def __init__(self, project_root: Path, storage_dir: str | None = None) -> None:
        effective_dir = storage_dir or ".imgscore"
        self.root_dir = project_root / effective_dir
        self.artifacts_dir = self.root_dir / "artifacts"

    def ensure_dirs(self) -> None:
        self.artifacts_dir.mkdir(parents=True, exist_ok=True)

    def _artifact_file(self, artifact_id: str) -> Path:
        return self.artifacts_dir / f"{_file_stem(artifact_id)}.json"

    def save_artifact(self, artifact: Artifact) -> str:
        """Create or overwrite an artifact. Returns its ID."""
        self.ensure_dirs()
        _atomic_write(
            self._artifact_file(artifact.id),
            artifact.model_dump_json(indent=2),
        )
        return artifact.id

    def find_by_id(self, artifact_id: str) -> Artifact | None:
        """Load an artifact, or None if no artifact has that ID."""
        artifact_file = self._artifact_file(artifact_id)
        if not artifact_file.exists():
            return None
        content = artifact_file.read_text(encoding="utf-8")
        return Artifact.model_validate_json(content)

    def update_cached_score(self, artifact_id: str, value: float) -> None:
        """Overwrite the artifact's cached latest score.

        Raises:
            StoreError: If the artifact does not exist, cannot be read back,
                or cannot be written.
        """
        try:
            artifact = self.find_by_id(artifact_id)
        except (OSError, ValidationError) as exc:
            raise StoreError(f"Cannot read artifact '{artifact_id}': {exc}") from exc
        if artifact is None:
            raise StoreError(f"Artifact '{artifact_id}' does not exist")
        updated = artifact.model_copy(update={"cached_score": value})
        try:
            _atomic_write(
                self._artifact_file(artifact_id),
                updated.model_dump_json(indent=2),
            )
        except OSError as exc:
            raise StoreError(f"Cannot update artifact '{artifact_id}': {exc}") from exc

    def list_artifacts(self) -> list[Artifact]:
        """Return all stored artifacts, newest timestamp first.

        Artifacts without a timestamp come last, ordered by ID.
        """
        if not self.artifacts_dir.exists():
            return []
        artifacts = [
            Artifact.model_validate_json(f.read_text(encoding="utf-8"))
            for f in self.artifacts_dir.glob("*.json")
        ]
        artifacts.sort(key=lambda a: a.id)
        return sorted(artifacts, key=_newest_first_key, reverse=True)


class EvaluationStore:
    """Append-only history of EvaluationRecord objects.

    File layout:
        .imgscore/
            evaluations/
                {record-id}.json   # One immutable record per evaluation
            index.json             # Artifact ID -> [record IDs] mapping
            index.lock             # Guards index.json read-modify-write

    Records are never rewritten or deleted. If the index cannot be
    updated after a record file is written, the record file is removed
    so no orphaned record survives a failed append.
    """

    def __init__(self, project_root: Path, storage_dir: str | None = None) -> None:
        effective_dir = storage_dir or ".imgscore"
        self.root_dir = project_root / effective_dir
        self.evaluations_dir = self.root_dir / "evaluations"
        self.index_path = self.root_dir / "index.json"
        self.lock_path = self.root_dir / "index.lock"

    def ensure_dirs(self) -> None:
        self.evaluations_dir.mkdir(parents=True, exist_ok=True)

    def _record_file(self, record_id: str) -> Path:
        return self.evaluations_dir / f"{_file_stem(record_id)}.json"

    def append(self, record: EvaluationRecord) -> str:
        """Persist a new record and register it in the index.

        Returns:
            The record ID.

        Raises:
            StoreError: If the record already exists or cannot be written.
        """
        record_file = self._record_file(record.id)
        try:
            self.ensure_dirs()
            if record_file.exists():
                raise StoreError(f"Evaluation record '{record.id}' already exists")
            _atomic_write(record_file, record.model_dump_json(indent=2))
        except OSError as exc:
            raise StoreError(f"Cannot write evaluation record: {exc}") from exc

        try:
            self._update_index(record.artifact_id, record.id)
        except (OSError, ValueError) as exc:
            record_file.unlink(missing_ok=True)
            raise StoreError(f"Cannot update evaluation index: {exc}") from exc

        return record.id

    def load_record(self, record_id: str) -> EvaluationRecord:
        """Load a record by ID.

        Raises:
            FileNotFoundError: If no record with that ID exists.
        """
        content = self._record_file(record_id).read_text(encoding="utf-8")
        return EvaluationRecord.model_validate_json(content)

    def list_record_ids(self, artifact_id: str) -> list[str]:
        return list(self._load_index().get(artifact_id, []))

    def list_records(self, artifact_id: str) -> list[EvaluationRecord]:
        """Return the artifact's records, oldest first."""
        return [self.load_record(rid) for rid in self.list_record_ids(artifact_id)]

    def count_records(self, artifact_id: str) -> int:
        return len(self.list_record_ids(artifact_id))

    def latest_record(self, artifact_id: str) -> EvaluationRecord | None:
        record_ids = self.list_record_ids(artifact_id)
        if not record_ids:
            return None
        return self.load_record(record_ids[-1])

    def _load_index(self) -> dict[str, list[str]]:
        if self.index_path.exists():
            content = self.index_path.read_text(encoding="utf-8")
            return json.loads(content)
        return {}

    def _update_index(self, artifact_id: str, record_id: str) -> None:
        """Add a record ID under the artifact, atomically and under a file lock.

        The lock spans the whole read-modify-write, across processes.
        """
        with _file_lock(self.lock_path):
            index = self._load_index()
            index.setdefault(artifact_id, []).append(record_id)
            content = json.dumps(index, indent=2, ensure_ascii=False)
            _atomic_write(self.index_path, content)
