"""Storage layer: artifact and evaluation history stores, image access."""

from imgscore.storage.images import ImageMetadataReader, ImageReadError
from imgscore.storage.json_store import ArtifactStore, EvaluationStore, StoreError

__all__ = [
    "ArtifactStore",
    "EvaluationStore",
    "ImageMetadataReader",
    "ImageReadError",
    "StoreError",
]
