"""Image metadata access backed by Pillow.

Image references are paths relative to a configured image root (a
leading slash is tolerated, matching web-style ``/images/x.png`` refs).
Only the header is decoded to read dimensions.
"""

from __future__ import annotations

from pathlib import Path

from PIL import Image


class ImageReadError(Exception):
    """Raised when an image is missing, unreadable, or not decodable."""

    def __init__(self, image_ref: str, reason: str) -> None:
        self.image_ref = image_ref
        self.reason = reason
        super().__init__(f"Cannot read image '{image_ref}': {reason}")


class ImageMetadataReader:
    """Reads image dimensions and bytes from under ``image_root``."""

    def __init__(self, image_root: Path) -> None:
        self.image_root = image_root

    def resolve(self, image_ref: str) -> Path:
        return self.image_root / image_ref.lstrip("/\\")

    def read_dimensions(self, image_ref: str) -> tuple[int, int]:
        """Return ``(width, height)`` for the referenced image.

        Raises:
            ImageReadError: On missing files, I/O errors, or corrupt headers.
        """
        path = self.resolve(image_ref)
        try:
            with Image.open(path) as img:
                width, height = img.size
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise ImageReadError(image_ref, f"{type(exc).__name__}: {exc}") from exc
        return width, height

    def read_bytes(self, image_ref: str) -> tuple[bytes, str]:
        """Return the raw image bytes and their MIME type.

        Raises:
            ImageReadError: If the file cannot be read or identified.
        """
        path = self.resolve(image_ref)
        try:
            with Image.open(path) as img:
                media_type = Image.MIME.get(img.format or "", "application/octet-stream")
            data = path.read_bytes()
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise ImageReadError(image_ref, f"{type(exc).__name__}: {exc}") from exc
        return data, media_type
