"""Token validation command for commitstreak."""

from __future__ import annotations

import typer
from rich.console import Console

from commitstreak.cli.app import ExitCode
from commitstreak.cli.app import app
from commitstreak.cli.app import exit_code_for
from commitstreak.config.credentials import resolve_credential
from commitstreak.config.settings import get_config
from commitstreak.core.checker import CommitChecker
from commitstreak.display.json import output_json_error
from commitstreak.display.json import output_json_pretty
from commitstreak.errors.classify import to_user_facing
from commitstreak.errors.messages import MISSING_CREDENTIALS_MESSAGE
from commitstreak.errors.messages import MISSING_CREDENTIALS_SOLUTIONS


@app.command("validate")
async def validate_command(
    ctx: typer.Context,
    username: str | None = typer.Option(None, "--username", "-u", help="GitHub username"),
    token: str | None = typer.Option(None, "--token", "-t", help="GitHub token"),
) -> None:
    """Check that the token works and belongs to the username."""
    console = Console()
    json_mode = ctx.meta.get("json", False)
    quiet = ctx.meta.get("quiet", False)

    credential = resolve_credential(username, token)
    if not credential.is_complete():
        if json_mode:
            output_json_error(
                MISSING_CREDENTIALS_MESSAGE,
                "missing_credentials",
                MISSING_CREDENTIALS_SOLUTIONS,
            )
        else:
            console.print(f"[red]{MISSING_CREDENTIALS_MESSAGE}[/red]")
            for solution in MISSING_CREDENTIALS_SOLUTIONS:
                console.print(f"  [dim]• {solution}[/dim]")
        raise typer.Exit(ExitCode.CONFIG_ERROR)

    async with CommitChecker(get_config()) as checker:
        try:
            validation = await checker.validate_token(
                credential.username, credential.token
            )
        except Exception as e:
            error = to_user_facing(e, "Validating token")
            if json_mode:
                output_json_error(error.message, error.kind.value, error.solutions)
            else:
                console.print(f"[red]{error.message}[/red]")
            raise typer.Exit(exit_code_for(error.kind.value)) from e

    if json_mode:
        output_json_pretty(validation)
    elif validation.valid:
        if quiet:
            console.print(validation.login)
        else:
            console.print(
                f"[green]✓[/green] Token is valid for [bold]{validation.login}[/bold]"
            )
            if validation.scopes:
                console.print(f"[dim]Scopes: {', '.join(validation.scopes)}[/dim]")
    else:
        console.print(f"[red]✗ {validation.error}[/red]")

    if not validation.valid:
        raise typer.Exit(ExitCode.AUTH_ERROR)
