"""Error types and classifications."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

import msgspec


class ErrorKind(StrEnum):
    """Closed taxonomy of failures a check can surface."""

    NETWORK = "network"
    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    VALIDATION = "validation"
    SERVER_API = "server_api"
    STORAGE = "storage"
    UNKNOWN = "unknown"


# Kinds worth retrying with backoff before giving up
RETRYABLE_KINDS: frozenset[ErrorKind] = frozenset(
    {ErrorKind.NETWORK, ErrorKind.RATE_LIMIT, ErrorKind.SERVER_API}
)


class ErrorInfo(msgspec.Struct, frozen=True):
    """Presentation text attached to an error kind."""

    title: str
    message: str
    solutions: tuple[str, ...]


class UserFacingError(msgspec.Struct, frozen=True):
    """Structured error with a human-readable message and remediation."""

    kind: ErrorKind
    title: str
    message: str
    solutions: tuple[str, ...] = ()
    technical: str | None = None
    http_status: int | None = None
    api_message: str | None = None
    rate_limit_remaining: int | None = None
    rate_limit_reset: datetime | None = None
    timestamp: datetime = msgspec.field(
        default_factory=lambda: datetime.now().astimezone()
    )
