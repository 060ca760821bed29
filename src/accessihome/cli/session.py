from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from accessihome.home import Home
from accessihome.models import Device, LogSource

from .common import CatalogOption, build_console_home, device_table, print_log

HELP = """\
Commands:
  devices            show the device grid
  toggle ID          flip a device
  on ID | off ID     switch a device to a state
  scan               switch scanning mode on or off
  <enter> | select   pick the highlighted device while scanning
  voice              speak (or type) a command
  log                show the activity log
  help               show this help
  quit               leave the session"""


async def _read_line(console: Console, prompt: str) -> str | None:
    try:
        return await asyncio.to_thread(console.input, prompt)
    except EOFError:
        return None


async def _run_session(home: Home, console: Console) -> None:
    console.print(device_table(home.registry.all()))
    console.print("Type 'help' for commands.")

    try:
        while True:
            line = await _read_line(console, "> ")
            if line is None:
                break
            verb, _, arg = line.strip().partition(" ")
            verb = verb.lower()
            arg = arg.strip()

            if verb in ("quit", "exit"):
                break
            if verb in ("", "select"):
                if home.scanner.select() is None and verb:
                    console.print("Nothing to select; scanning is off.")
            elif verb == "help":
                console.print(HELP)
            elif verb == "devices":
                highlighted = home.scanner.highlighted
                console.print(
                    device_table(
                        home.registry.all(),
                        highlighted=highlighted.id if highlighted else None,
                    )
                )
            elif verb == "log":
                print_log(console, home.action_log)
            elif verb == "scan":
                active = home.scanner.toggle()
                console.print(
                    "[yellow]SCANNING MODE ACTIVE[/yellow] (press Enter to select)"
                    if active
                    else "Scanning mode off."
                )
            elif verb == "voice":
                await home.voice.toggle_listening()
            elif verb in ("toggle", "on", "off") and arg:
                if verb == "toggle":
                    result = home.resolver.apply_toggle(arg, LogSource.MANUAL)
                else:
                    result = home.resolver.apply_explicit_state(
                        arg, verb == "on", LogSource.MANUAL
                    )
                if result.found:
                    console.print(result.message)
                else:
                    console.print(f"[yellow]![/yellow] Device '{arg}' not found")
            else:
                console.print(f"Unknown command: {line.strip()}")
    finally:
        home.scanner.deactivate()


def register(app: typer.Typer) -> None:
    @app.command()
    def session(catalog: CatalogOption = None) -> None:
        """Interactive control with manual, scanning and voice input."""
        console = Console()

        def _on_tick(_cursor: int, device: Device | None) -> None:
            if device is not None:
                console.print(f"[reverse] ▶ {device.name} [/reverse]")

        async def _manual_entry() -> str | None:
            return await _read_line(console, "Enter command manually: ")

        home = build_console_home(
            console, catalog, on_tick=_on_tick, manual_entry=_manual_entry
        )

        try:
            asyncio.run(_run_session(home, console))
        except KeyboardInterrupt:
            pass
        console.print("\n[green]Session ended.[/green]")
