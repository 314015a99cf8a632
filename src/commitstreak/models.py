"""Data models for commitstreak.

Normalized structures shared by the gateway, the detection strategies, the
streak calculator and the consolidator. Wire payloads from GitHub are parsed
into these types as early as possible so the rest of the code never touches
raw JSON.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from datetime import date
from datetime import datetime
from datetime import tzinfo
from enum import StrEnum

import msgspec


@dataclass(frozen=True)
class Credential:
    """GitHub username and token supplied for a single check."""

    username: str
    token: str = field(repr=False)

    def is_complete(self) -> bool:
        return bool(self.username and self.username.strip() and self.token)


class EventType(StrEnum):
    """Activity feed event types the detector understands."""

    PUSH = "PushEvent"
    CREATE = "CreateEvent"
    PULL_REQUEST = "PullRequestEvent"
    ISSUES = "IssuesEvent"
    PULL_REQUEST_REVIEW = "PullRequestReviewEvent"
    COMMIT_COMMENT = "CommitCommentEvent"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str | None) -> EventType:
        """Map a wire value to an EventType, falling back to OTHER."""
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


# Event types that count as a contribution for streak purposes
CONTRIBUTION_EVENT_TYPES: frozenset[EventType] = frozenset(
    {
        EventType.PUSH,
        EventType.CREATE,
        EventType.PULL_REQUEST,
        EventType.ISSUES,
        EventType.PULL_REQUEST_REVIEW,
        EventType.COMMIT_COMMENT,
    }
)


class PushedCommit(msgspec.Struct, frozen=True):
    """A commit embedded in a push event."""

    sha: str
    message: str = ""
    author_email: str | None = None
    author_name: str | None = None

    def is_merge(self) -> bool:
        return "merge" in self.message.lower()

    def has_author(self) -> bool:
        return bool(self.author_email and self.author_name)


class ActivityEvent(msgspec.Struct, frozen=True):
    """One entry of a user's public activity feed."""

    type: EventType
    created_at: datetime
    repository: str = ""
    pushed_commits: tuple[PushedCommit, ...] = ()
    push_size: int | None = None  # commit count reported by the feed itself

    def local_date(self, tz: tzinfo | None = None) -> date:
        """Calendar date of the event in ``tz`` (system local zone if None)."""
        return self.created_at.astimezone(tz).date()

    def is_contribution(self) -> bool:
        return self.type in CONTRIBUTION_EVENT_TYPES

    def commit_count(self, exclude_merges: bool = False) -> int:
        """Number of commits carried by a push event.

        With ``exclude_merges`` set, commits that look like merges or that
        lack author identity are not counted.
        """
        if self.type is not EventType.PUSH:
            return 0
        if not self.pushed_commits:
            return self.push_size or 0
        if not exclude_merges:
            return len(self.pushed_commits)
        return sum(
            1
            for commit in self.pushed_commits
            if commit.has_author() and not commit.is_merge()
        )


class Repository(msgspec.Struct, frozen=True):
    """A repository owned by the user, used to prioritize scans."""

    name: str
    updated_at: datetime | None = None
    full_name: str | None = None


class RepositoryCommit(msgspec.Struct, frozen=True):
    """One item of a repository's commit listing."""

    sha: str
    message: str = ""
    committed_at: datetime | None = None


class SearchResult(msgspec.Struct, frozen=True):
    """Summary of a commit search."""

    total_count: int = 0
    incomplete_results: bool = False


class DetectionMethod(StrEnum):
    """The closed set of commit detection strategies."""

    SEARCH = "search"
    EVENTS = "events"
    REPOSITORIES = "repositories"


# Preference when several methods agree: primary first, informational last
METHOD_PREFERENCE: tuple[DetectionMethod, ...] = (
    DetectionMethod.EVENTS,
    DetectionMethod.REPOSITORIES,
    DetectionMethod.SEARCH,
)

STREAK_INFERENCE_METHOD = "streak_inference"


class MethodResult(msgspec.Struct, frozen=True):
    """Outcome of one detection strategy within a single check."""

    method: DetectionMethod
    success: bool
    commit_count: int = 0
    has_committed: bool = False
    error: str | None = None
    error_kind: str | None = None
    details: dict = msgspec.field(default_factory=dict)

    @classmethod
    def ok(
        cls,
        method: DetectionMethod,
        commit_count: int,
        details: dict | None = None,
    ) -> MethodResult:
        return cls(
            method=method,
            success=True,
            commit_count=commit_count,
            has_committed=commit_count > 0,
            details=details or {},
        )

    @classmethod
    def fail(
        cls,
        method: DetectionMethod,
        error: str,
        error_kind: str | None = None,
    ) -> MethodResult:
        return cls(method=method, success=False, error=error, error_kind=error_kind)


class StreakResult(msgspec.Struct, frozen=True):
    """Consecutive-day contribution streak."""

    streak: int = 0
    contribution_dates: frozenset[date] = frozenset()
    committed_today: bool = False
    committed_yesterday: bool = False
    last_commit_date: date | None = None
    success: bool = True
    error: str | None = None

    @classmethod
    def failed(cls, error: str) -> StreakResult:
        return cls(success=False, error=error)


class CheckResult(msgspec.Struct, frozen=True):
    """Final answer of a commit check, as returned to the caller."""

    success: bool
    has_committed: bool = False
    commit_count: int = 0
    streak: int = 0
    method: str | None = None
    cached: bool = False
    inferred: bool = False
    day: date | None = None
    last_commit_date: date | None = None
    rate_limit_remaining: int | None = None
    error: str | None = None  # error code on failure
    message: str | None = None
    solutions: tuple[str, ...] = ()
    checked_at: datetime = msgspec.field(
        default_factory=lambda: datetime.now().astimezone()
    )

    @classmethod
    def failure(
        cls,
        error: str,
        message: str,
        solutions: tuple[str, ...] = (),
    ) -> CheckResult:
        return cls(success=False, error=error, message=message, solutions=solutions)


class DetectionReport(msgspec.Struct, frozen=True):
    """Everything a detection run produced, for debugging and display."""

    day: date
    methods: dict[DetectionMethod, MethodResult]
    streak: StreakResult
    consolidated: CheckResult


class RateLimitStatus(msgspec.Struct, frozen=True):
    """Remote request quota as last observed."""

    remaining: int | None = None
    reset: datetime | None = None
    last_request: datetime | None = None
    limit: int | None = None


class TokenValidation(msgspec.Struct, frozen=True):
    """Result of checking a token against the authenticated user endpoint."""

    valid: bool
    login: str | None = None
    error: str | None = None
    scopes: tuple[str, ...] = ()
