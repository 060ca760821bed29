from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from accessihome.config import (
    CONFIG_ENV_VAR,
    DevicesConfig,
    ScanningConfig,
    Settings,
    render_settings_toml,
    write_settings,
)

from .common import load_settings_or_exit, resolve_config_path_or_exit

app = typer.Typer(
    no_args_is_help=True, help="Inspect or create the AccessiHome config file"
)


@app.command("path")
def config_path() -> None:
    """Print where the config file is read from."""
    path, exists = resolve_config_path_or_exit(allow_missing=True)
    state = "exists" if exists else "not created yet"
    typer.echo(f"{path} ({state})")


@app.command("show")
def show_config(
    as_json: Annotated[
        bool, typer.Option("--json", help="Print effective settings as JSON")
    ] = False,
) -> None:
    """Print the effective settings, defaults included."""
    settings = load_settings_or_exit()
    if as_json:
        typer.echo(settings.model_dump_json(indent=2))
        return

    path, exists = resolve_config_path_or_exit(allow_missing=True)
    typer.echo(f"# source: {path if exists else 'built-in defaults'}")
    typer.echo(render_settings_toml(settings))


@app.command("init")
def init_config(
    catalog: Annotated[
        Path | None,
        typer.Option(
            "--catalog",
            "-c",
            help="Device catalog (YAML) to use instead of the demo devices",
            exists=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ] = None,
    interval: Annotated[
        float,
        typer.Option("--interval", min=0.1, help="Scanning dwell time in seconds"),
    ] = ScanningConfig().interval,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite existing config"),
    ] = False,
) -> None:
    """Write a starter config file."""
    path, exists = resolve_config_path_or_exit(allow_missing=True)

    if exists and not force:
        typer.echo(f"Config already exists at {path} (use --force to replace it)")
        raise typer.Exit(1)

    settings = Settings(
        devices=DevicesConfig(catalog=str(catalog) if catalog else ""),
        scanning=ScanningConfig(interval=interval),
    )
    write_settings(settings, path)
    typer.echo(f"Wrote config to {path}")
    typer.echo(f"Set {CONFIG_ENV_VAR} to use a different location.")
