"""CLI interface."""
from __future__ import annotations

import json
import logging
from typing import Optional

import typer

from framekit.compiler import compile_file
from framekit.object_tree import walk_objects
from framekit.renderer import Renderer
from framekit.schemas import CompiledTimeline
from framekit.utils.config import settings
from framekit.utils.file_utils import write_json_file

app = typer.Typer(add_completion=False)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output.")):
    """Compile and inspect framekit animation files."""
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _load(path: str) -> CompiledTimeline:
    try:
        return compile_file(path)
    except FileNotFoundError as exc:
        raise typer.BadParameter(f"File not found: {exc.filename or path}") from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command("compile")
def compile_command(
    path: str = typer.Argument(..., help="Animation JSON file."),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write the compiled timeline here."),
):
    """Compile an animation file to a flat, frame-absolute timeline."""
    timeline = _load(path)
    payload = timeline.to_dict()
    if output:
        written = write_json_file(output, payload)
        typer.echo(f"Wrote {written}")
        return
    typer.echo(json.dumps(payload, indent=2))


@app.command()
def targets(path: str = typer.Argument(..., help="Animation JSON file.")):
    """List object ids and animation targets with their track counts."""
    timeline = _load(path)
    result = {
        "objects": [obj.id for obj in walk_objects(timeline.objects) if obj.id],
        "targets": timeline.targets(),
    }
    typer.echo(json.dumps(result, indent=2))


@app.command()
def inspect(
    path: str = typer.Argument(..., help="Animation JSON file."),
    target: str = typer.Option(..., "--target", "-t", help="Full dotted object id."),
):
    """Show the compiled keyframes of one target."""
    timeline = _load(path)
    tracks = [anim.to_dict() for anim in timeline.animations if anim.target == target]
    if not tracks:
        raise typer.BadParameter(f"No animations for target '{target}'")
    typer.echo(json.dumps(tracks, indent=2))


@app.command()
def sample(
    path: str = typer.Argument(..., help="Animation JSON file."),
    frame: int = typer.Option(0, "--frame", "-f", min=0, help="Frame number to sample."),
):
    """Print the draw list of a single frame."""
    timeline = _load(path)
    items = Renderer(timeline).sample_frame(frame)
    typer.echo(json.dumps({"frame": frame, "items": [item.to_dict() for item in items]}, indent=2))


if __name__ == "__main__":
    app()
