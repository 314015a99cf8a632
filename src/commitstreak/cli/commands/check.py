"""The check command: did the user commit today?"""

from __future__ import annotations

import logging
from datetime import date

import typer
from rich.console import Console

from commitstreak.cli.app import ExitCode
from commitstreak.cli.app import app
from commitstreak.cli.app import exit_code_for
from commitstreak.config.credentials import resolve_credential
from commitstreak.config.settings import get_config
from commitstreak.core.checker import CommitChecker
from commitstreak.display.json import check_result_to_dict
from commitstreak.display.json import output_json_pretty
from commitstreak.display.json import report_to_dict
from commitstreak.display.rich import format_status_line
from commitstreak.display.rich import render_check_result
from commitstreak.display.rich import render_methods_table

logger = logging.getLogger(__name__)


def parse_day(value: str | None) -> date | None:
    """Parse a ``YYYY-MM-DD`` option value."""
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Expected YYYY-MM-DD, got {value!r}") from None


@app.command("check")
async def check_command(
    ctx: typer.Context,
    username: str | None = typer.Option(
        None, "--username", "-u", help="GitHub username (default: from config)"
    ),
    token: str | None = typer.Option(
        None,
        "--token",
        "-t",
        help="GitHub token (default: COMMITSTREAK_TOKEN, GITHUB_TOKEN or GH_TOKEN)",
    ),
    day: str | None = typer.Option(
        None, "--date", "-d", help="Day to check as YYYY-MM-DD (default: today)"
    ),
    methods: bool = typer.Option(
        False, "--methods", "-m", help="Show the per-method breakdown"
    ),
    json_output: bool = typer.Option(
        False, "--json", "-j", help="Output in JSON format"
    ),
) -> None:
    """Check whether you committed today and show your streak."""
    console = Console()
    verbose = ctx.meta.get("verbose", False)
    quiet = ctx.meta.get("quiet", False)
    json_mode = json_output or ctx.meta.get("json", False)

    check_day = parse_day(day)
    credential = resolve_credential(username, token)

    async with CommitChecker(get_config()) as checker:
        result = await checker.check_commits(
            credential.username, credential.token, check_day
        )
        report = None
        if methods and result.success:
            # Served from the cache populated by the check above
            try:
                report = await checker.detect(
                    credential.username, credential.token, check_day
                )
            except Exception as e:
                logger.warning("Method breakdown unavailable: %s", e)

    if json_mode:
        data = check_result_to_dict(result)
        if report is not None:
            data["report"] = report_to_dict(report)
        output_json_pretty(data)
    elif quiet:
        console.print(format_status_line(result))
    else:
        console.print(render_check_result(result, verbose=verbose))
        if report is not None:
            console.print(render_methods_table(report))

    code = exit_code_for(result.error)
    if code is not ExitCode.SUCCESS:
        raise typer.Exit(code)
