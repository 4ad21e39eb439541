"""Command-line interface for activity timing."""

from __future__ import annotations

import json
import logging
import random
import time
from pathlib import Path
from typing import Optional

import typer

from .config import ConfigError, SettingsSource, TimingSettings
from .marker import Marker, create_marker
from .paths import get_config_path
from .reporting import render_structured, render_text, write_structured

app = typer.Typer(help="Nested activity timing and reports.")


@app.callback(no_args_is_help=True)
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@app.command()
def demo(
    iterations: int = typer.Option(
        20, "--iterations", "-n", min=1, help="Number of simulated transactions."
    ),
    fmt: str = typer.Option("text", "--format", help="Report format: text or xml."),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", path_type=Path, help="Write the report to this file."
    ),
    seed: int = typer.Option(0, "--seed", help="Seed for the simulated workload."),
) -> None:
    """Time a small synthetic workload and print its report."""
    if fmt not in ("text", "xml"):
        typer.echo(f"Unknown format: {fmt}", err=True)
        raise typer.Exit(code=2)

    marker = create_marker("App")
    _run_workload(marker, iterations, random.Random(seed))
    root = marker.end()

    if output is None:
        typer.echo(render_text(root) if fmt == "text" else render_structured(root), nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "xml":
        with output.open("wb") as sink:
            write_structured(root, sink)
    else:
        output.write_text(render_text(root), encoding="utf-8")
    typer.echo(f"Report written to {output}")


@app.command()
def config(
    path: Optional[Path] = typer.Option(
        None, "--path", path_type=Path, help="Configuration file to inspect."
    ),
) -> None:
    """Show the configuration file location and the effective settings."""
    config_path = path or get_config_path()
    try:
        settings = SettingsSource(config_path).current()
    except ConfigError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(f"Config file: {config_path}")
    typer.echo(json.dumps(settings.to_payload(), indent=2))


@app.command("init-config")
def init_config(
    path: Optional[Path] = typer.Option(
        None, "--path", path_type=Path, help="Where to write the configuration file."
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file."),
) -> None:
    """Write a configuration file holding the default settings."""
    config_path = path or get_config_path()
    if config_path.exists() and not force:
        typer.echo(f"{config_path} already exists; use --force to overwrite.", err=True)
        raise typer.Exit(code=1)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(
        json.dumps(TimingSettings().to_payload(), indent=2) + "\n", encoding="utf-8"
    )
    typer.echo(f"Wrote {config_path}")


def _run_workload(marker: Marker, iterations: int, rng: random.Random) -> None:
    with marker.activity("Load"):
        _pause(rng, 2.0)
    for i in range(iterations):
        with marker.activity("Txn"):
            if i % 5 == 0:
                for _ in range(3):
                    with marker.activity("Query"):
                        _pause(rng, 0.5)
            else:
                _pause(rng, 0.3)


def _pause(rng: random.Random, max_ms: float) -> None:
    time.sleep(rng.uniform(0.0, max_ms) / 1000.0)
