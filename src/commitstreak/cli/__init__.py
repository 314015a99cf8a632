"""CLI framework for commitstreak."""
from __future__ import annotations

from commitstreak.cli.app import ExitCode
from commitstreak.cli.app import app
from commitstreak.cli.app import run_app

__all__ = ["app", "run_app", "ExitCode"]
