from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from . import config
from .models import reset_engine
from .pipeline.ingest import load_export
from .pipeline.run import publish_curriculum

app = typer.Typer(help="Curriculum sheet publisher")


@app.callback()
def main() -> None:
    """Publish one print-ready curriculum PDF per rank."""


@app.command()
def build(
    input_path: Path = typer.Option(..., "--input", help="Curriculum export JSON"),
    out: Optional[Path] = typer.Option(None, "--out", help="Output directory"),
    preview: bool = typer.Option(True, "--preview/--no-preview", help="Render a PNG of each first page"),
    verbose: bool = typer.Option(False, "--verbose", help="Debug logging"),
) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)
    if out:
        config.set_out_dir(out)
        reset_engine()
    export = load_export(input_path)
    typer.echo(f"Loaded {len(export.ranks)} ranks for {export.style_name}")
    results = publish_curriculum(export, preview=preview, asset_dir=input_path.parent)
    if not results["PUBLISHED"] and not results["FAILED"]:
        typer.echo("No curriculum content to publish")
        return
    typer.echo(f"PUBLISHED: {len(results['PUBLISHED'])}")
    typer.echo(f"FAILED: {len(results['FAILED'])}")
    for name in results["FAILED"]:
        typer.echo(f"FAILED: {name}")


if __name__ == "__main__":
    app()
