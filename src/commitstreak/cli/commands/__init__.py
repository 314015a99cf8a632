"""CLI commands for commitstreak."""

from commitstreak.cli.commands.check import check_command
from commitstreak.cli.commands.rate_limit import rate_limit_command
from commitstreak.cli.commands.validate import validate_command
from commitstreak.cli.commands.watch import watch_command

# Command group (registered with the main app in cli.app)
from commitstreak.cli.commands import config

__all__ = [
    "check_command",
    "watch_command",
    "validate_command",
    "rate_limit_command",
    "config",
]
