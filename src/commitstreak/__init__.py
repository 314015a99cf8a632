"""commitstreak: Know whether you committed today, and keep the streak going."""

from __future__ import annotations

__version__ = "0.1.0"

from commitstreak.core.checker import CommitChecker
from commitstreak.models import ActivityEvent
from commitstreak.models import CheckResult
from commitstreak.models import Credential
from commitstreak.models import DetectionMethod
from commitstreak.models import DetectionReport
from commitstreak.models import EventType
from commitstreak.models import MethodResult
from commitstreak.models import RateLimitStatus
from commitstreak.models import StreakResult

__all__ = [
    "__version__",
    "CommitChecker",
    "ActivityEvent",
    "CheckResult",
    "Credential",
    "DetectionMethod",
    "DetectionReport",
    "EventType",
    "MethodResult",
    "RateLimitStatus",
    "StreakResult",
]


def main() -> None:
    """Entry point for the commitstreak CLI."""
    from commitstreak.cli.app import run_app

    run_app()
