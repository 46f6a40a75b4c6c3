# src/ds_app/cli.py
from __future__ import annotations

import typer

from ds_app.commands.dedup import register as register_dedup
from ds_app.version import get_version

app = typer.Typer(help="Dupe Sweep CLI")

register_dedup(app)


@app.command("version")
def version() -> None:
    """Print the installed version."""
    typer.echo(get_version())


if __name__ == "__main__":
    app()
