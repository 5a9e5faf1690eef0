"""imgscore command-line interface."""
