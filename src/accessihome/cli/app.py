from __future__ import annotations

from typing import Annotated

import typer

from accessihome.utils.logging import LOG_LEVELS, setup_logging

from . import config as config_cmd
from .control import register as register_control
from .devices import register as register_devices
from .session import register as register_session

app = typer.Typer(
    help="AccessiHome - assistive smart-home control", no_args_is_help=True
)

app.add_typer(config_cmd.app, name="config")

register_devices(app)
register_control(app)
register_session(app)


@app.callback(invoke_without_command=True)
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit"),
    ] = False,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Log level, defaults to $ACCESSIHOME_LOGLEVEL or INFO",
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Debug logging with source lines")
    ] = False,
) -> None:
    """AccessiHome CLI."""
    if log_level is not None and log_level.upper() not in LOG_LEVELS:
        raise typer.BadParameter(
            f"expected one of {', '.join(LOG_LEVELS)}", param_hint="--log-level"
        )
    setup_logging(log_level, verbose=verbose)

    if version:
        from importlib.metadata import version as get_version

        typer.echo(f"accessihome version {get_version('accessihome')}")
        raise typer.Exit()
