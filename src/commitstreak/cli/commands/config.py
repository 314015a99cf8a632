"""Config commands for commitstreak."""

from __future__ import annotations

import msgspec.toml
import typer
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from commitstreak.cli.app import ExitCode
from commitstreak.cli.atyper import ATyper
from commitstreak.config.credentials import find_token
from commitstreak.config.paths import config_dir
from commitstreak.config.paths import config_file
from commitstreak.config.settings import Config
from commitstreak.config.settings import get_config
from commitstreak.config.settings import get_config_value
from commitstreak.config.settings import reset_config
from commitstreak.config.settings import set_config_value
from commitstreak.config.settings import settable_keys
from commitstreak.display.json import output_json_error
from commitstreak.display.json import output_json_pretty
from commitstreak.errors.types import ErrorKind

# Registered on the main app by commitstreak.cli.app
config_app = ATyper(
    help="Inspect and change configuration settings.", no_args_is_help=True
)


def effective_settings(config: Config) -> dict:
    """Every setting with defaults filled in, for display."""
    # to_builtins honors omit_defaults, so read the fields directly
    data: dict = {
        "username": config.username,
        "check_interval_minutes": config.check_interval_minutes,
    }
    for section in ("fetch", "retry", "cache", "detection"):
        values = getattr(config, section)
        data[section] = {
            name: getattr(values, name) for name in values.__struct_fields__
        }
    return data


def settings_table(config: Config) -> Table:
    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="dim")
    table.add_column("Value", style="bold")

    table.add_row("username", config.username or "[yellow]not set[/yellow]")
    table.add_row("token", "set" if find_token() else "[yellow]not set[/yellow]")
    table.add_row("check interval", f"{config.check_interval_minutes} min")
    table.add_row("methods", ", ".join(config.detection.methods))
    table.add_row(
        "exclude merges", "yes" if config.detection.exclude_merge_commits else "no"
    )
    table.add_row("max retries", str(config.retry.max_retries))
    table.add_row("api", config.fetch.base_url)
    return table


@config_app.command("show")
def config_show_command(ctx: typer.Context) -> None:
    """Display the effective settings and any overrides on disk."""
    console = Console()
    config = get_config()
    path = config_file()

    if ctx.meta.get("json", False):
        data = effective_settings(config)
        data["path"] = str(path)
        data["token_set"] = find_token() is not None
        output_json_pretty(data)
        return

    if ctx.meta.get("quiet", False):
        console.print(str(path))
        return

    console.print(Panel(settings_table(config), title="Effective settings"))

    overrides = msgspec.toml.encode(config).decode().strip()
    if overrides:
        console.print(Panel(Syntax(overrides, "toml"), title=f"Overrides: {path}"))
    elif ctx.meta.get("verbose", False):
        state = "present" if path.exists() else "not created yet"
        console.print(f"[dim]No overrides; config file {state}: {path}[/dim]")


@config_app.command("path")
def config_path_command(ctx: typer.Context) -> None:
    """Show the paths commitstreak reads configuration from."""
    console = Console()

    if ctx.meta.get("json", False):
        output_json_pretty(
            {"config_dir": str(config_dir()), "config_file": str(config_file())}
        )
        return

    if ctx.meta.get("quiet", False):
        console.print(str(config_file()))
        return

    console.print(f"Config dir:    {config_dir()}")
    console.print(f"Config file:   {config_file()}")
    console.print(f"[dim]Exists: {config_file().exists()}[/dim]")


@config_app.command("set")
def config_set_command(
    ctx: typer.Context,
    key: str = typer.Argument(
        ..., help="Setting name, e.g. username or detection.methods"
    ),
    value: str = typer.Argument(..., help="New value (comma-separated for lists)"),
) -> None:
    """Save one setting to the config file.

    The token is never stored; set COMMITSTREAK_TOKEN or GITHUB_TOKEN instead.
    """
    console = Console()
    json_mode = ctx.meta.get("json", False)

    try:
        config = set_config_value(key, value)
    except ValueError as e:
        solutions = (f"Settable keys: {', '.join(settable_keys())}",)
        if json_mode:
            output_json_error(str(e), ErrorKind.VALIDATION.value, solutions)
        else:
            console.print(f"[red]{e}[/red]")
            console.print(f"[dim]{solutions[0]}[/dim]")
        raise typer.Exit(ExitCode.CONFIG_ERROR) from None

    saved = get_config_value(config, key)
    if json_mode:
        output_json_pretty({"key": key, "value": saved, "path": str(config_file())})
        return

    console.print(f"[green]✓[/green] {key} = {saved!r}")
    if ctx.meta.get("verbose", False):
        console.print(f"[dim]Saved to {config_file()}[/dim]")


@config_app.command("reset")
def config_reset_command(
    ctx: typer.Context,
    confirm: bool = typer.Option(
        False, "--confirm", "-y", help="Skip confirmation prompt"
    ),
) -> None:
    """Delete the config file so every setting returns to its default."""
    console = Console()
    json_mode = ctx.meta.get("json", False)

    # JSON mode never prompts
    if not confirm and not json_mode:
        confirm = typer.confirm(
            "This will reset your configuration to defaults. Continue?",
            default=False,
        )
        if not confirm:
            console.print("Reset cancelled")
            raise typer.Exit()

    path = config_file()
    deleted = reset_config(path)

    if json_mode:
        output_json_pretty({"reset": deleted, "path": str(path)})
    elif deleted:
        console.print(f"[green]✓[/green] Configuration reset to defaults ({path})")
    else:
        console.print("[yellow]No custom configuration to reset[/yellow]")
