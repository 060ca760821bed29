from __future__ import annotations

import asyncio
from enum import Enum
from typing import Annotated

import typer
from rich.console import Console

from accessihome.home import Home
from accessihome.models import LogSource

from .common import CatalogOption, build_console_home, device_table, print_log


class PowerState(str, Enum):
    on = "on"
    off = "off"


def _finish(console: Console, home: Home, found: bool, device_id: str) -> None:
    print_log(console, home.action_log)
    if not found:
        console.print(f"[yellow]![/yellow] Device '{device_id}' not found")
        raise typer.Exit(1)
    console.print(device_table(home.registry.all(), highlighted=device_id))


def register(app: typer.Typer) -> None:
    @app.command()
    def toggle(
        device_id: Annotated[str, typer.Argument(help="Device id")],
        catalog: CatalogOption = None,
    ) -> None:
        """Flip a device, as a manual tap would."""
        console = Console()
        home = build_console_home(console, catalog)
        result = home.resolver.apply_toggle(device_id, LogSource.MANUAL)
        _finish(console, home, result.found, device_id)

    @app.command("set")
    def set_state(
        device_id: Annotated[str, typer.Argument(help="Device id")],
        state: Annotated[PowerState, typer.Argument(help="Desired state")],
        catalog: CatalogOption = None,
    ) -> None:
        """Switch a device to an explicit state."""
        console = Console()
        home = build_console_home(console, catalog)
        result = home.resolver.apply_explicit_state(
            device_id, state is PowerState.on, LogSource.MANUAL
        )
        _finish(console, home, result.found, device_id)

    @app.command()
    def say(
        command: Annotated[str, typer.Argument(help="What you would say out loud")],
        catalog: CatalogOption = None,
    ) -> None:
        """Run one voice command through the interpreter."""
        console = Console()
        home = build_console_home(console, catalog)

        async def _run() -> None:
            await home.voice.submit(command)

        with console.status("Processing..."):
            asyncio.run(_run())

        print_log(console, home.action_log)
        console.print(device_table(home.registry.all()))
