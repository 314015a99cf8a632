"""Public entry point of the commit-detection core."""

from __future__ import annotations

import logging
from datetime import date
from datetime import tzinfo

import msgspec

from commitstreak.config.settings import Config
from commitstreak.config.settings import get_config
from commitstreak.core.api import GitHubAPI
from commitstreak.core.cache import CacheStats
from commitstreak.core.cache import ResponseCache
from commitstreak.core.detector import CommitDetector
from commitstreak.core.http import Gateway
from commitstreak.core.retry import RetryConfig
from commitstreak.errors.classify import to_user_facing
from commitstreak.errors.messages import MISSING_CREDENTIALS_MESSAGE
from commitstreak.errors.messages import MISSING_CREDENTIALS_SOLUTIONS
from commitstreak.errors.messages import get_error_info
from commitstreak.errors.types import ErrorKind
from commitstreak.models import CheckResult
from commitstreak.models import Credential
from commitstreak.models import DetectionReport
from commitstreak.models import RateLimitStatus
from commitstreak.models import TokenValidation

logger = logging.getLogger(__name__)

INVALID_TOKEN_ERROR = "invalid_token"
MISSING_CREDENTIALS_ERROR = "missing_credentials"


class CommitChecker:
    """Answers "has this user committed today?" with a streak attached.

    Owns one gateway, response cache and retry policy, shared by every
    check made through it so that repeated checks reuse cached responses.

    Usage:
        async with CommitChecker() as checker:
            result = await checker.check_commits("alice", token)
    """

    def __init__(
        self,
        config: Config | None = None,
        gateway: Gateway | None = None,
        cache: ResponseCache | None = None,
        tz: tzinfo | None = None,
    ) -> None:
        self.config = config or get_config()
        self.gateway = gateway or Gateway(fetch=self.config.fetch)
        self.cache = cache or ResponseCache(
            max_entries=self.config.cache.max_entries,
            default_ttl=self.config.cache.default_ttl,
            ttls=self.config.cache.ttls,
        )
        self.tz = tz
        self.api = GitHubAPI(
            self.gateway, self.cache, RetryConfig.from_settings(self.config.retry)
        )
        self.detector = CommitDetector(self.api, self.config, tz)

    async def detect(
        self,
        username: str,
        token: str,
        day: date | None = None,
    ) -> DetectionReport:
        """Run detection and return every per-method result. May raise."""
        return await self.detector.detect(username, token, day)

    async def validate_token(self, username: str, token: str) -> TokenValidation:
        """Check that ``token`` authenticates as ``username``. May raise."""
        return await self.api.validate_token(username, token)

    async def _check_token(self, username: str, token: str) -> CheckResult | None:
        """Return a failed result if the token is unusable, else None.

        Validation problems other than a rejected token are logged and the
        check proceeds; detection will surface them if they persist.
        """
        try:
            validation = await self.api.validate_token(username, token)
        except Exception as e:
            logger.warning(
                "Token validation skipped: %s", to_user_facing(e).technical
            )
            return None

        if validation.valid:
            return None

        if validation.login is None:
            info = get_error_info(ErrorKind.AUTH)
            return CheckResult.failure(
                ErrorKind.AUTH.value,
                f"Validating token: {info.message}",
                info.solutions,
            )

        return CheckResult.failure(
            INVALID_TOKEN_ERROR,
            f"Token belongs to {validation.login}, not {username}",
            (
                "Use a token generated by the account you are checking",
                "Check the configured username for typos",
            ),
        )

    async def check_commits(
        self,
        username: str,
        token: str,
        day: date | None = None,
    ) -> CheckResult:
        """Check whether ``username`` committed on ``day``.

        Never raises: every failure is reported as an unsuccessful
        CheckResult carrying an error code, message and remediation steps.
        """
        credential = Credential(username=(username or "").strip(), token=token or "")
        if not credential.is_complete():
            logger.warning("Check skipped: %s", MISSING_CREDENTIALS_MESSAGE)
            return CheckResult.failure(
                MISSING_CREDENTIALS_ERROR,
                MISSING_CREDENTIALS_MESSAGE,
                MISSING_CREDENTIALS_SOLUTIONS,
            )

        requests_before = self.gateway.request_count

        if self.config.detection.validate_token:
            failed = await self._check_token(credential.username, credential.token)
            if failed is not None:
                return failed

        try:
            report = await self.detector.detect(
                credential.username, credential.token, day
            )
        except Exception as e:
            error = to_user_facing(e, "Checking commits")
            logger.error("Commit check failed: %s (%s)", error.message, error.technical)
            return msgspec.structs.replace(
                CheckResult.failure(error.kind.value, error.message, error.solutions),
                rate_limit_remaining=self.gateway.rate_limit.remaining,
            )

        return msgspec.structs.replace(
            report.consolidated,
            cached=self.gateway.request_count == requests_before,
            rate_limit_remaining=self.gateway.rate_limit.remaining,
        )

    async def get_remote_rate_limit(self, token: str) -> RateLimitStatus:
        """Query the rate limit endpoint. May raise."""
        return await self.api.get_rate_limit(token)

    def get_rate_limit_status(self) -> RateLimitStatus:
        """Rate limit headroom as last observed by this checker's gateway."""
        return self.gateway.get_rate_limit_status()

    def get_cache_stats(self) -> CacheStats:
        return self.cache.stats()

    def clear_cache(self) -> None:
        self.cache.clear()

    async def aclose(self) -> None:
        await self.gateway.aclose()

    async def __aenter__(self) -> CommitChecker:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
