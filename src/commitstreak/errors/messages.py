"""User-facing error text with remediation steps, one entry per error kind."""

from __future__ import annotations

from commitstreak.errors.types import ErrorInfo
from commitstreak.errors.types import ErrorKind

ERROR_MESSAGES: dict[ErrorKind, ErrorInfo] = {
    ErrorKind.NETWORK: ErrorInfo(
        title="Network Connection Error",
        message="Unable to connect to GitHub. Please check your internet connection.",
        solutions=(
            "Check your internet connection",
            "Try again in a few moments",
            "Check if GitHub is accessible from your browser",
        ),
    ),
    ErrorKind.AUTH: ErrorInfo(
        title="Authentication Error",
        message="GitHub token is invalid or has insufficient permissions.",
        solutions=(
            "Verify your GitHub token is correct",
            'Ensure the token has "repo" scope permissions',
            "Generate a new token at github.com/settings/tokens",
            "Make sure the token hasn't expired",
        ),
    ),
    ErrorKind.RATE_LIMIT: ErrorInfo(
        title="Rate Limit Exceeded",
        message="Too many requests to GitHub API. Please wait before trying again.",
        solutions=(
            "Wait a few minutes before trying again",
            "Use a GitHub token to get a higher rate limit",
            "Increase the check interval",
        ),
    ),
    ErrorKind.VALIDATION: ErrorInfo(
        title="Invalid Input",
        message="The provided information is not valid.",
        solutions=(
            "Check that your GitHub username is correct",
            "Ensure your token is properly formatted",
            "Remove any extra spaces from your input",
        ),
    ),
    ErrorKind.SERVER_API: ErrorInfo(
        title="GitHub API Error",
        message="GitHub API returned an unexpected response.",
        solutions=(
            "Try again in a few moments",
            "Check GitHub's status page at githubstatus.com",
            "Verify your token permissions",
        ),
    ),
    ErrorKind.STORAGE: ErrorInfo(
        title="Storage Error",
        message="Unable to save or load settings.",
        solutions=(
            "Check permissions on the commitstreak config directory",
            "Check disk space availability",
            "Run 'commitstreak config path' to locate the config file",
        ),
    ),
    ErrorKind.UNKNOWN: ErrorInfo(
        title="Unexpected Error",
        message="An unexpected error occurred.",
        solutions=(
            "Try again in a few moments",
            "Run again with --verbose for more details",
        ),
    ),
}

MISSING_CREDENTIALS_MESSAGE = "GitHub credentials not set"

MISSING_CREDENTIALS_SOLUTIONS: tuple[str, ...] = (
    "Set COMMITSTREAK_USERNAME or 'username' in config.toml",
    "Set GITHUB_TOKEN (or COMMITSTREAK_TOKEN) to a personal access token",
    "Pass --username and --token on the command line",
)


def get_error_info(kind: ErrorKind) -> ErrorInfo:
    """Get the presentation text for an error kind."""
    return ERROR_MESSAGES[kind]
