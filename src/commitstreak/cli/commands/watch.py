"""The watch command: poll on an interval until interrupted."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

import typer
from rich.console import Console
from rich.text import Text

from commitstreak.cli.app import ExitCode
from commitstreak.cli.app import app
from commitstreak.config.credentials import resolve_credential
from commitstreak.config.settings import get_config
from commitstreak.core.checker import CommitChecker
from commitstreak.display.json import check_result_to_dict
from commitstreak.display.json import output_json
from commitstreak.display.rich import format_status_line

logger = logging.getLogger(__name__)


@app.command("watch")
async def watch_command(
    ctx: typer.Context,
    username: str | None = typer.Option(None, "--username", "-u", help="GitHub username"),
    token: str | None = typer.Option(None, "--token", "-t", help="GitHub token"),
    interval: float | None = typer.Option(
        None,
        "--interval",
        "-i",
        min=0.1,
        help="Minutes between checks (default: check_interval_minutes)",
    ),
    count: int = typer.Option(
        0, "--count", "-n", min=0, help="Stop after N checks (0 runs forever)"
    ),
) -> None:
    """Check repeatedly, printing one line per check.

    Checks share one cache, so a short interval reuses recent responses
    instead of spending rate limit.
    """
    console = Console()
    json_mode = ctx.meta.get("json", False)
    config = get_config()
    minutes = interval if interval is not None else config.check_interval_minutes
    credential = resolve_credential(username, token)

    checks = 0
    try:
        async with CommitChecker(config) as checker:
            while True:
                result = await checker.check_commits(
                    credential.username, credential.token
                )
                checks += 1

                if json_mode:
                    output_json(check_result_to_dict(result))
                else:
                    line = Text(f"[{datetime.now():%H:%M:%S}] ", style="dim")
                    line.append_text(format_status_line(result))
                    console.print(line)

                if result.error == "missing_credentials":
                    raise typer.Exit(ExitCode.CONFIG_ERROR)
                if count and checks >= count:
                    break

                logger.debug("Next check in %.1f minute(s)", minutes)
                await asyncio.sleep(minutes * 60)
    except KeyboardInterrupt:
        if not json_mode:
            console.print("\n[yellow]Stopped[/yellow]")
