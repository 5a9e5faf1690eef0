"""imgscore - multi-agent quality scoring for generated image artifacts."""

__version__ = "0.1.0"
