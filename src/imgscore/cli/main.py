"""imgscore CLI entry point."""

import typer

from imgscore import __version__
from imgscore.cli.evaluate_cmd import evaluate
from imgscore.cli.history_cmd import history, list_artifacts, show
from imgscore.cli.serve_cmd import serve

app = typer.Typer(
    name="imgscore",
    help="Multi-agent quality scoring for generated images",
    no_args_is_help=True,
)

app.command()(evaluate)
app.command()(history)
app.command()(show)
app.command("list")(list_artifacts)
app.command()(serve)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"imgscore {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Multi-agent quality scoring for generated images."""
