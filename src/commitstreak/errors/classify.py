"""Exception classification for structured error handling."""

from __future__ import annotations

import socket
from datetime import UTC
from datetime import datetime

import httpx

from commitstreak.errors.messages import ERROR_MESSAGES
from commitstreak.errors.types import ErrorKind
from commitstreak.errors.types import UserFacingError

RATE_LIMIT_REMAINING_HEADER = "x-ratelimit-remaining"
RATE_LIMIT_RESET_HEADER = "x-ratelimit-reset"


def is_transport_error(error: BaseException) -> bool:
    """Check if an exception is a transport-level failure.

    Covers host lookup failures, refused or reset connections and timeouts,
    whether raised by httpx or by the socket layer directly.
    """
    return isinstance(
        error,
        (
            httpx.TimeoutException,
            httpx.NetworkError,
            httpx.RemoteProtocolError,
            socket.gaierror,
            ConnectionError,
            TimeoutError,
        ),
    )


def extract_api_message(response: httpx.Response) -> str | None:
    """Pull the ``message`` field out of a GitHub error body."""
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip() if response.text else ""
        return text[:200] or None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str):
            return message
    return None


def rate_limit_exhausted(response: httpx.Response) -> bool:
    """Check the remaining-quota header for an exhausted rate limit."""
    return response.headers.get(RATE_LIMIT_REMAINING_HEADER) == "0"


def _is_rate_limited(response: httpx.Response) -> bool:
    if rate_limit_exhausted(response):
        return True
    message = extract_api_message(response) or ""
    return "rate limit" in message.lower()


def classify(error: BaseException | None) -> ErrorKind:
    """Map an exception into the closed ErrorKind taxonomy.

    Rules apply in priority order: transport failures, rate limiting,
    authentication, server errors, other client errors, validation wording,
    filesystem errors, then unknown.
    """
    if error is None:
        return ErrorKind.UNKNOWN

    if is_transport_error(error):
        return ErrorKind.NETWORK

    if isinstance(error, httpx.HTTPStatusError):
        response = error.response
        status = response.status_code

        if status in (401, 403):
            if _is_rate_limited(response):
                return ErrorKind.RATE_LIMIT
            return ErrorKind.AUTH

        if status >= 500:
            return ErrorKind.SERVER_API

        if status >= 400:
            return ErrorKind.VALIDATION

    message = str(error).lower()
    if "required" in message or "invalid" in message:
        return ErrorKind.VALIDATION

    if isinstance(error, OSError):
        return ErrorKind.STORAGE

    return ErrorKind.UNKNOWN


def is_retryable_error(error: BaseException) -> bool:
    """Structural retry check independent of classification.

    Transport failures, 5xx, 429, and 403 with an exhausted quota header.
    """
    if is_transport_error(error):
        return True

    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        if status >= 500 or status == 429:
            return True
        if status == 403 and rate_limit_exhausted(error.response):
            return True

    return False


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def to_user_facing(error: BaseException, context: str = "") -> UserFacingError:
    """Build a user-facing error report for any exception.

    Args:
        error: The raw exception
        context: Short description of what was being attempted, prefixed
            to the message (e.g. "Fetching user events")

    Returns:
        UserFacingError with kind, message, remediation and any HTTP and
        rate limit details available on the error
    """
    kind = classify(error)
    info = ERROR_MESSAGES[kind]

    message = f"{context}: {info.message}" if context else info.message

    http_status = None
    api_message = None
    remaining = None
    reset_time = None

    if isinstance(error, httpx.HTTPStatusError):
        response = error.response
        http_status = response.status_code
        api_message = extract_api_message(response)
        remaining = _parse_int(response.headers.get(RATE_LIMIT_REMAINING_HEADER))
        reset = _parse_int(response.headers.get(RATE_LIMIT_RESET_HEADER))
        if reset is not None:
            reset_time = datetime.fromtimestamp(reset, tz=UTC)

    return UserFacingError(
        kind=kind,
        title=info.title,
        message=message,
        solutions=info.solutions,
        technical=str(error) or type(error).__name__,
        http_status=http_status,
        api_message=api_message,
        rate_limit_remaining=remaining,
        rate_limit_reset=reset_time,
    )
