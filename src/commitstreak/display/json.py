"""JSON output utilities for commitstreak."""

from __future__ import annotations

import json
import sys
from datetime import datetime

import msgspec

from commitstreak.models import CheckResult
from commitstreak.models import DetectionReport

__all__ = [
    "ErrorResponse",
    "ErrorData",
    "output_json",
    "output_json_pretty",
    "output_json_error",
    "check_result_to_dict",
    "report_to_dict",
]


class ErrorData(msgspec.Struct, frozen=True, omit_defaults=True):
    """Error payload with its code and remediation steps."""

    message: str
    error: str
    solutions: tuple[str, ...] = ()
    details: dict | None = None
    timestamp: str = msgspec.field(
        default_factory=lambda: datetime.now().astimezone().isoformat()
    )


class ErrorResponse(msgspec.Struct, frozen=True):
    """Top-level JSON error envelope: ``{"error": {...}}``."""

    error: ErrorData


def output_json(data: object) -> None:
    """Output data as compact JSON to stdout.

    Args:
        data: Any msgspec-serializable object (Struct, dict, list, etc.)
    """
    sys.stdout.buffer.write(msgspec.json.encode(data))
    sys.stdout.buffer.write(b"\n")


def output_json_pretty(data: object, indent: int = 2) -> None:
    """Output data as pretty-printed JSON to stdout."""
    # msgspec handles Structs, dates and enums; json handles the indentation
    python_obj = msgspec.json.decode(msgspec.json.encode(data))
    sys.stdout.write(json.dumps(python_obj, indent=indent))
    sys.stdout.write("\n")


def output_json_error(
    message: str,
    error: str = "unknown",
    solutions: tuple[str, ...] = (),
    details: dict | None = None,
) -> None:
    """Output an error in the standard JSON envelope."""
    output_json_pretty(
        ErrorResponse(
            error=ErrorData(
                message=message, error=error, solutions=solutions, details=details
            )
        )
    )


def check_result_to_dict(result: CheckResult) -> dict:
    """Plain dict form of a CheckResult, with ISO dates."""
    return msgspec.to_builtins(result)


def report_to_dict(report: DetectionReport) -> dict:
    """Plain dict form of a DetectionReport (method keys as strings)."""
    data = msgspec.to_builtins(report)
    data["streak"]["contribution_dates"] = sorted(
        data["streak"]["contribution_dates"]
    )
    return data
