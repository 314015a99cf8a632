"""Cached, retrying access to the GitHub endpoints commitstreak needs.

Each endpoint method looks in the response cache first, then calls the
gateway through the retry executor, parses the payload into commitstreak
models and caches the parsed value under the endpoint's category TTL.
"""

from __future__ import annotations

import logging
from datetime import UTC
from datetime import date
from datetime import datetime
from typing import Any, Awaitable, Callable

import httpx
import msgspec

from commitstreak.core.cache import CacheCategory
from commitstreak.core.cache import ResponseCache
from commitstreak.core.cache import generate_key
from commitstreak.core.cache import hash_token
from commitstreak.core.http import Gateway
from commitstreak.core.http import build_headers
from commitstreak.core.retry import RetryConfig
from commitstreak.core.retry import with_retry
from commitstreak.errors.classify import classify
from commitstreak.errors.classify import extract_api_message
from commitstreak.errors.types import ErrorKind
from commitstreak.models import ActivityEvent
from commitstreak.models import EventType
from commitstreak.models import PushedCommit
from commitstreak.models import RateLimitStatus
from commitstreak.models import Repository
from commitstreak.models import RepositoryCommit
from commitstreak.models import SearchResult
from commitstreak.models import TokenValidation

logger = logging.getLogger(__name__)


# Wire formats. Only the fields commitstreak reads are declared; everything
# else in the payload is ignored.
class _WireRepoRef(msgspec.Struct):
    name: str = ""


class _WireEvent(msgspec.Struct):
    type: str | None
    created_at: datetime
    repo: _WireRepoRef = msgspec.field(default_factory=_WireRepoRef)
    payload: dict = msgspec.field(default_factory=dict)


class _WireRepository(msgspec.Struct):
    name: str
    full_name: str | None = None
    updated_at: datetime | None = None


class _WireGitActor(msgspec.Struct):
    date: datetime | None = None


class _WireGitCommit(msgspec.Struct):
    message: str = ""
    author: _WireGitActor | None = None
    committer: _WireGitActor | None = None


class _WireCommit(msgspec.Struct):
    sha: str
    commit: _WireGitCommit = msgspec.field(default_factory=_WireGitCommit)


class _WireSearchResult(msgspec.Struct):
    total_count: int = 0
    incomplete_results: bool = False


class _WireUser(msgspec.Struct):
    login: str


class _WireRateLimitCore(msgspec.Struct):
    limit: int | None = None
    remaining: int | None = None
    reset: int | None = None


class _WireRateLimitResources(msgspec.Struct):
    core: _WireRateLimitCore = msgspec.field(default_factory=_WireRateLimitCore)


class _WireRateLimit(msgspec.Struct):
    resources: _WireRateLimitResources = msgspec.field(
        default_factory=_WireRateLimitResources
    )


def _parse_pushed_commits(payload: dict) -> tuple[PushedCommit, ...]:
    commits = payload.get("commits")
    if not isinstance(commits, list):
        return ()
    parsed = []
    for item in commits:
        if not isinstance(item, dict):
            continue
        author = item.get("author") if isinstance(item.get("author"), dict) else {}
        parsed.append(
            PushedCommit(
                sha=str(item.get("sha", "")),
                message=str(item.get("message") or ""),
                author_email=author.get("email"),
                author_name=author.get("name"),
            )
        )
    return tuple(parsed)


def parse_events(content: bytes) -> tuple[ActivityEvent, ...]:
    """Parse an activity feed page into ActivityEvents."""
    wire_events = msgspec.json.decode(content, type=list[_WireEvent])
    events = []
    for wire in wire_events:
        event_type = EventType.parse(wire.type)
        pushed_commits: tuple[PushedCommit, ...] = ()
        push_size = None
        if event_type is EventType.PUSH:
            pushed_commits = _parse_pushed_commits(wire.payload)
            size = wire.payload.get("size")
            push_size = size if isinstance(size, int) else None
        events.append(
            ActivityEvent(
                type=event_type,
                created_at=wire.created_at,
                repository=wire.repo.name,
                pushed_commits=pushed_commits,
                push_size=push_size,
            )
        )
    return tuple(events)


def parse_repositories(content: bytes) -> tuple[Repository, ...]:
    """Parse a repository listing."""
    return tuple(
        Repository(name=r.name, updated_at=r.updated_at, full_name=r.full_name)
        for r in msgspec.json.decode(content, type=list[_WireRepository])
    )


def parse_commits(content: bytes) -> tuple[RepositoryCommit, ...]:
    """Parse a repository commit listing."""
    commits = []
    for c in msgspec.json.decode(content, type=list[_WireCommit]):
        actor = c.commit.committer or c.commit.author
        commits.append(
            RepositoryCommit(
                sha=c.sha,
                message=c.commit.message,
                committed_at=actor.date if actor else None,
            )
        )
    return tuple(commits)


def parse_search_result(content: bytes) -> SearchResult:
    """Parse a commit search response."""
    wire = msgspec.json.decode(content, type=_WireSearchResult)
    return SearchResult(
        total_count=wire.total_count, incomplete_results=wire.incomplete_results
    )


class GitHubAPI:
    """Endpoint methods over a shared gateway, cache and retry policy."""

    def __init__(
        self,
        gateway: Gateway,
        cache: ResponseCache,
        retry_config: RetryConfig | None = None,
    ) -> None:
        self.gateway = gateway
        self.cache = cache
        self.retry_config = retry_config or RetryConfig()

    async def _get(
        self,
        endpoint: str,
        token: str,
        params: dict | None = None,
    ) -> httpx.Response:
        headers = build_headers(token)
        return await with_retry(
            lambda: self.gateway.request(endpoint, params=params, headers=headers),
            self.retry_config,
        )

    async def _cached(
        self,
        category: CacheCategory,
        key: str,
        fetch: Callable[[], Awaitable[Any]],
    ) -> Any:
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        data = await fetch()
        self.cache.set(key, data, self.cache.ttl_for(category))
        return data

    async def search_commits(self, username: str, token: str, day: date) -> SearchResult:
        """Search commits authored by ``username`` with a committer date of ``day``."""
        key = generate_key(CacheCategory.SEARCH_COMMITS, username, day.isoformat())

        async def fetch() -> SearchResult:
            logger.info("Searching commits for %s on %s", username, day)
            response = await self._get(
                "/search/commits",
                token,
                {"q": f"author:{username} committer-date:{day.isoformat()}"},
            )
            return parse_search_result(response.content)

        return await self._cached(CacheCategory.SEARCH_COMMITS, key, fetch)

    async def get_user_events(
        self,
        username: str,
        token: str,
        per_page: int = 100,
        page: int = 1,
    ) -> tuple[ActivityEvent, ...]:
        """One page of the user's activity feed, newest first."""
        key = generate_key(CacheCategory.USER_EVENTS, username, per_page, page)

        async def fetch() -> tuple[ActivityEvent, ...]:
            logger.info("Getting user events for %s (page %d)", username, page)
            response = await self._get(
                f"/users/{username}/events",
                token,
                {"per_page": per_page, "page": page},
            )
            return parse_events(response.content)

        return await self._cached(CacheCategory.USER_EVENTS, key, fetch)

    async def get_user_repositories(
        self,
        username: str,
        token: str,
        per_page: int = 100,
    ) -> tuple[Repository, ...]:
        """The user's repositories, most recently updated first."""
        key = generate_key(CacheCategory.REPOSITORIES, username, per_page)

        async def fetch() -> tuple[Repository, ...]:
            logger.info("Getting repositories for %s", username)
            response = await self._get(
                f"/users/{username}/repos",
                token,
                {"per_page": per_page, "sort": "updated", "direction": "desc"},
            )
            return parse_repositories(response.content)

        return await self._cached(CacheCategory.REPOSITORIES, key, fetch)

    async def get_repository_commits(
        self,
        owner: str,
        repo: str,
        token: str,
        *,
        author: str,
        since: str,
        until: str,
        per_page: int = 100,
    ) -> tuple[RepositoryCommit, ...]:
        """Commits in ``owner/repo`` by ``author`` between ``since`` and ``until``."""
        params = {"author": author, "since": since, "until": until, "per_page": per_page}
        key = generate_key(
            CacheCategory.COMMITS, owner, repo, msgspec.json.encode(params).decode()
        )

        async def fetch() -> tuple[RepositoryCommit, ...]:
            logger.debug("Getting commits for %s/%s", owner, repo)
            response = await self._get(f"/repos/{owner}/{repo}/commits", token, params)
            return parse_commits(response.content)

        return await self._cached(CacheCategory.COMMITS, key, fetch)

    async def validate_token(self, username: str, token: str) -> TokenValidation:
        """Check the token works and belongs to ``username``.

        Authentication failures come back as an invalid TokenValidation;
        any other failure (network, server, rate limit) propagates.
        """
        key = generate_key(CacheCategory.USER_VALIDATION, username, hash_token(token))
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        logger.info("Validating token for %s", username)
        try:
            response = await self._get("/user", token)
        except httpx.HTTPStatusError as e:
            if classify(e) is not ErrorKind.AUTH:
                raise
            return TokenValidation(
                valid=False,
                error=extract_api_message(e.response) or "Bad credentials",
            )

        user = msgspec.json.decode(response.content, type=_WireUser)
        scopes_header = response.headers.get("x-oauth-scopes", "")
        scopes = tuple(s.strip() for s in scopes_header.split(",") if s.strip())

        if user.login.lower() != username.lower():
            logger.warning(
                "Username mismatch: provided %s, token belongs to %s",
                username,
                user.login,
            )
            validation = TokenValidation(
                valid=False,
                login=user.login,
                error="Token belongs to a different user",
                scopes=scopes,
            )
        else:
            validation = TokenValidation(valid=True, login=user.login, scopes=scopes)

        self.cache.set(
            key, validation, self.cache.ttl_for(CacheCategory.USER_VALIDATION)
        )
        return validation

    async def get_rate_limit(self, token: str) -> RateLimitStatus:
        """Current core quota from the rate limit endpoint (never cached)."""
        response = await self._get("/rate_limit", token)
        core = msgspec.json.decode(response.content, type=_WireRateLimit).resources.core
        status = self.gateway.get_rate_limit_status()
        return RateLimitStatus(
            remaining=core.remaining,
            reset=datetime.fromtimestamp(core.reset, tz=UTC) if core.reset else None,
            last_request=status.last_request,
            limit=core.limit,
        )
