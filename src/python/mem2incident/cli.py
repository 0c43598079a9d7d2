"""Typer-based CLI entrypoint for the mem2incident service."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console

from mem2incident import __version__
from mem2incident.configs import DEFAULT_CONFIG_FILE, load_config
from mem2incident.exceptions import ConfigError
from mem2incident.service import configure_logging, run_service

PROGRAM_NAME = "redborder-mem2incident"

console = Console()
app = typer.Typer(
    help="Moves incidents stored in memcached into the incidents API.",
    pretty_exceptions_enable=False,
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Path = typer.Option(DEFAULT_CONFIG_FILE, "-c", "--config", help="Configuration file."),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level."),
) -> None:
    """Run the reconciliation loop until SIGINT/SIGTERM."""

    if ctx.invoked_subcommand is not None:
        return

    if not isinstance(logging.getLevelName(log_level.upper()), int):
        raise typer.BadParameter(f"Unknown log level '{log_level}'.", param_hint="--log-level")

    configure_logging(log_level)
    try:
        settings = load_config(config)
    except ConfigError as exc:
        logging.getLogger("mem2incident").error(exc.message)
        raise typer.Exit(code=1) from exc

    run_service(settings)


@app.command("version")
def version() -> None:
    """Print the program version and exit."""

    console.print(f"{PROGRAM_NAME} version {__version__}", highlight=False)


def run() -> None:
    app(prog_name="mem2incident")
