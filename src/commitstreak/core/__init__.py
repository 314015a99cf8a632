"""Commit detection core for commitstreak."""

from commitstreak.core.api import GitHubAPI
from commitstreak.core.cache import (
    CATEGORY_TTLS,
    CacheCategory,
    CacheEntry,
    CacheStats,
    ResponseCache,
    generate_key,
    hash_token,
)
from commitstreak.core.checker import CommitChecker
from commitstreak.core.consolidate import consolidate
from commitstreak.core.dates import day_window_utc, local_date, today
from commitstreak.core.detector import CommitDetector, build_strategies
from commitstreak.core.http import Gateway, RateLimitState, build_headers
from commitstreak.core.retry import (
    RetryConfig,
    calculate_retry_delay,
    should_retry_exception,
    with_retry,
)
from commitstreak.core.streak import StreakCalculator, compute_streak, contribution_dates

__all__ = [
    # http
    "Gateway",
    "RateLimitState",
    "build_headers",
    # retry
    "RetryConfig",
    "calculate_retry_delay",
    "should_retry_exception",
    "with_retry",
    # cache
    "CATEGORY_TTLS",
    "CacheCategory",
    "CacheEntry",
    "CacheStats",
    "ResponseCache",
    "generate_key",
    "hash_token",
    # api
    "GitHubAPI",
    # dates
    "day_window_utc",
    "local_date",
    "today",
    # detection
    "CommitDetector",
    "build_strategies",
    "StreakCalculator",
    "compute_streak",
    "contribution_dates",
    "consolidate",
    # facade
    "CommitChecker",
]
