from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from accessihome.core import save_catalog

from .common import (
    CatalogOption,
    device_table,
    load_registry_or_exit,
    load_settings_or_exit,
)


def register(app: typer.Typer) -> None:
    @app.command()
    def devices(catalog: CatalogOption = None) -> None:
        """List devices and their current state."""
        settings = load_settings_or_exit()
        registry = load_registry_or_exit(settings, catalog)

        console = Console()
        if not len(registry):
            console.print("No devices defined.")
            return
        console.print(device_table(registry.all()))

    @app.command("export")
    def export_catalog(
        path: Annotated[Path, typer.Argument(help="Where to write the YAML catalog")],
        catalog: CatalogOption = None,
    ) -> None:
        """Write the current device catalog to a YAML file for editing."""
        settings = load_settings_or_exit()
        registry = load_registry_or_exit(settings, catalog)
        save_catalog(registry, path)

        console = Console()
        console.print(f"[green]✓[/green] Wrote {len(registry)} device(s) to {path}")
