"""Main CLI application for commitstreak."""

from __future__ import annotations

import logging
from enum import IntEnum

import typer
from rich.console import Console
from rich.logging import RichHandler

from commitstreak.cli.atyper import ATyper
from commitstreak.errors.types import ErrorKind

# Create the main app
app = ATyper(
    name="commitstreak",
    help="Check whether you committed to GitHub today and track your streak",
    add_completion=True,
    no_args_is_help=True,
    invoke_without_command=True,
)


class ExitCode(IntEnum):
    """Exit codes for commitstreak."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    AUTH_ERROR = 2
    NETWORK_ERROR = 3
    CONFIG_ERROR = 4


# Error codes of a failed CheckResult mapped to process exit codes
ERROR_EXIT_CODES: dict[str, ExitCode] = {
    ErrorKind.AUTH.value: ExitCode.AUTH_ERROR,
    "invalid_token": ExitCode.AUTH_ERROR,
    ErrorKind.NETWORK.value: ExitCode.NETWORK_ERROR,
    ErrorKind.RATE_LIMIT.value: ExitCode.NETWORK_ERROR,
    ErrorKind.SERVER_API.value: ExitCode.NETWORK_ERROR,
    ErrorKind.VALIDATION.value: ExitCode.CONFIG_ERROR,
    ErrorKind.STORAGE.value: ExitCode.CONFIG_ERROR,
    "missing_credentials": ExitCode.CONFIG_ERROR,
}


def exit_code_for(error: str | None) -> ExitCode:
    """Exit code for a CheckResult error code (None means success)."""
    if error is None:
        return ExitCode.SUCCESS
    return ERROR_EXIT_CODES.get(error, ExitCode.GENERAL_ERROR)


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Send commitstreak logs to stderr through Rich."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logger = logging.getLogger("commitstreak")
    logger.handlers.clear()
    logger.addHandler(
        RichHandler(
            console=Console(stderr=True),
            show_path=verbose,
            rich_tracebacks=verbose,
        )
    )
    logger.setLevel(level)
    logger.propagate = False


@app.callback()
def main(
    ctx: typer.Context,
    json: bool = typer.Option(False, "--json", "-j", help="Enable JSON output mode"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose output"
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Enable quiet mode"),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
) -> None:
    """Commitstreak - Did you commit today?"""
    if version:
        from commitstreak import __version__

        typer.echo(f"commitstreak {__version__}")
        raise typer.Exit()

    # quiet wins over verbose
    if verbose and quiet:
        verbose = False

    ctx.meta["json"] = json
    ctx.meta["verbose"] = verbose
    ctx.meta["quiet"] = quiet

    configure_logging(verbose=verbose, quiet=quiet or json)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def run_app() -> None:
    """Run the CLI app."""
    app()


# Command modules register themselves on import; they must come after app
from commitstreak.cli.commands import check  # noqa: E402, F401
from commitstreak.cli.commands import config as config_cmd  # noqa: E402
from commitstreak.cli.commands import rate_limit  # noqa: E402, F401
from commitstreak.cli.commands import validate  # noqa: E402, F401
from commitstreak.cli.commands import watch  # noqa: E402, F401

app.add_typer(config_cmd.config_app, name="config")
