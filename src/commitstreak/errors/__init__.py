"""Error handling for commitstreak."""

from commitstreak.errors.classify import (
    classify,
    extract_api_message,
    is_retryable_error,
    is_transport_error,
    rate_limit_exhausted,
    to_user_facing,
)
from commitstreak.errors.messages import (
    ERROR_MESSAGES,
    MISSING_CREDENTIALS_MESSAGE,
    MISSING_CREDENTIALS_SOLUTIONS,
    get_error_info,
)
from commitstreak.errors.types import (
    RETRYABLE_KINDS,
    ErrorInfo,
    ErrorKind,
    UserFacingError,
)

__all__ = [
    # Core types
    "ErrorKind",
    "ErrorInfo",
    "UserFacingError",
    "RETRYABLE_KINDS",
    # Classification functions
    "classify",
    "is_retryable_error",
    "is_transport_error",
    "rate_limit_exhausted",
    "extract_api_message",
    "to_user_facing",
    # Message templates
    "ERROR_MESSAGES",
    "MISSING_CREDENTIALS_MESSAGE",
    "MISSING_CREDENTIALS_SOLUTIONS",
    "get_error_info",
]
