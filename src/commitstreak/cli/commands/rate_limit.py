"""Rate limit inspection command for commitstreak."""

from __future__ import annotations

import typer
from rich.console import Console

from commitstreak.cli.app import app
from commitstreak.cli.app import exit_code_for
from commitstreak.config.credentials import find_token
from commitstreak.config.settings import get_config
from commitstreak.core.checker import CommitChecker
from commitstreak.display.json import output_json_error
from commitstreak.display.json import output_json_pretty
from commitstreak.display.rich import render_rate_limit
from commitstreak.errors.classify import to_user_facing


@app.command("rate-limit")
async def rate_limit_command(
    ctx: typer.Context,
    token: str | None = typer.Option(None, "--token", "-t", help="GitHub token"),
) -> None:
    """Show the remaining GitHub API quota for the token."""
    console = Console()
    json_mode = ctx.meta.get("json", False)

    token = (token or "").strip() or find_token() or ""

    async with CommitChecker(get_config()) as checker:
        try:
            status = await checker.get_remote_rate_limit(token)
        except Exception as e:
            error = to_user_facing(e, "Fetching rate limit")
            if json_mode:
                output_json_error(error.message, error.kind.value, error.solutions)
            else:
                console.print(f"[red]{error.message}[/red]")
            raise typer.Exit(exit_code_for(error.kind.value)) from e

    if json_mode:
        output_json_pretty(status)
        return

    if not token:
        console.print("[dim]No token set; showing the unauthenticated quota[/dim]")
    console.print(render_rate_limit(status))
