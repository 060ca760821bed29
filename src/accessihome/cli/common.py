from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from accessihome.config import Settings, get_settings, resolve_config_path
from accessihome.core import DeviceRegistry, load_catalog
from accessihome.core.voice import ManualEntry
from accessihome.home import Home, build_home, build_registry
from accessihome.models import ActionLogEntry, Device, LogSource

from .speech import ConsoleSpeech

SOURCE_STYLES = {
    LogSource.MANUAL: "blue",
    LogSource.VOICE: "magenta",
    LogSource.SCANNING: "yellow",
}


def load_settings_or_exit() -> Settings:
    try:
        return get_settings()
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def resolve_config_path_or_exit(allow_missing: bool = False) -> tuple[Path, bool]:
    try:
        return resolve_config_path(allow_missing=allow_missing)
    except FileNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def load_registry_or_exit(settings: Settings, catalog: Path | None) -> DeviceRegistry:
    try:
        if catalog is not None:
            return load_catalog(catalog)
        return build_registry(settings)
    except (OSError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def build_console_home(
    console: Console,
    catalog: Path | None = None,
    on_tick: Callable[[int, Device | None], None] | None = None,
    manual_entry: ManualEntry | None = None,
) -> Home:
    settings = load_settings_or_exit()
    registry = load_registry_or_exit(settings, catalog)
    return build_home(
        settings,
        registry=registry,
        speech=ConsoleSpeech(console),
        notify=lambda message: console.print(f"[yellow]![/yellow] {message}"),
        manual_entry=manual_entry,
        on_tick=on_tick,
    )


def device_table(devices: Iterable[Device], highlighted: str | None = None) -> Table:
    table = Table()
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Type")
    table.add_column("Location")
    table.add_column("State")

    for device in devices:
        state = "[green]ON[/green]" if device.is_on else "[dim]OFF[/dim]"
        style = "reverse" if device.id == highlighted else None
        table.add_row(
            device.id,
            device.name,
            device.type.value,
            device.location,
            state,
            style=style,
        )
    return table


def print_log(console: Console, entries: Iterable[ActionLogEntry]) -> None:
    for entry in entries:
        style = SOURCE_STYLES[entry.source]
        timestamp = entry.timestamp.astimezone().strftime("%H:%M:%S")
        console.print(
            f"[dim]{timestamp}[/dim] [{style}]{entry.source.value:<8}[/{style}] "
            f"{escape(entry.message)}"
        )


CatalogOption = Annotated[
    Path | None,
    typer.Option(
        "--catalog",
        "-c",
        help="Device catalog (YAML). Uses config or built-in devices if omitted.",
        exists=True,
        dir_okay=False,
    ),
]
