"""Credential lookup for commitstreak.

The token is never written to disk by commitstreak; it is read from the
environment (or passed explicitly) every time a check runs.
"""

from __future__ import annotations

import os

from commitstreak.models import Credential

# Checked in order; the first non-empty value wins
TOKEN_ENV_VARS: tuple[str, ...] = ("COMMITSTREAK_TOKEN", "GITHUB_TOKEN", "GH_TOKEN")


def find_token() -> str | None:
    """Find a GitHub token in the environment."""
    for env_var in TOKEN_ENV_VARS:
        if value := os.environ.get(env_var, "").strip():
            return value
    return None


def resolve_credential(
    username: str | None = None,
    token: str | None = None,
) -> Credential:
    """Resolve the credential to use for a check.

    Explicit arguments win over configuration and environment. Missing parts
    are left empty so the checker can report missing credentials itself.
    """
    from .settings import get_config

    resolved_username = (username or "").strip() or get_config().username or ""
    resolved_token = (token or "").strip() or find_token() or ""

    return Credential(username=resolved_username, token=resolved_token)
