"""imgscore serve -- run the HTTP evaluation API with uvicorn."""

from __future__ import annotations

import typer

from imgscore.cli.output import load_project


def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", help="Bind port"),
) -> None:
    """Serve POST /evaluate for the current project."""
    import uvicorn

    from imgscore.api.server import create_app

    project_root, config = load_project()
    app = create_app(project_root=project_root, config=config)
    uvicorn.run(app, host=host, port=port, log_config=None)
