"""Per-repository commit scan detection strategy."""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from datetime import timedelta
from datetime import tzinfo

from commitstreak.core.api import GitHubAPI
from commitstreak.core.dates import day_window_utc
from commitstreak.core.dates import local_date
from commitstreak.errors.classify import classify
from commitstreak.models import DetectionMethod
from commitstreak.models import MethodResult
from commitstreak.models import Repository
from commitstreak.strategies.base import DetectionStrategy

logger = logging.getLogger(__name__)


def select_repositories(
    repositories: tuple[Repository, ...] | list[Repository],
    day: date,
    *,
    recent_days: int = 7,
    fallback_count: int = 15,
    ceiling: int = 20,
    tz: tzinfo | None = None,
) -> list[Repository]:
    """Pick the repositories worth scanning for commits on ``day``.

    Repositories updated within ``recent_days`` before ``day`` (inclusive)
    are chosen, up to ``ceiling``. When none qualify, the first
    ``fallback_count`` of the listing are used, which is ordered most
    recently updated first.
    """
    earliest = day - timedelta(days=recent_days)
    recent = [
        repo
        for repo in repositories
        if repo.updated_at is not None
        and earliest <= local_date(repo.updated_at, tz) <= day
    ]
    if recent:
        return recent[:ceiling]
    return list(repositories[:fallback_count])


class RepositoriesStrategy(DetectionStrategy):
    """Scan recently updated repositories for the user's commits.

    The most expensive method: one listing request plus one commit listing
    per selected repository. Per-repository failures are logged and skipped.
    """

    def __init__(
        self,
        api: GitHubAPI,
        tz: tzinfo | None = None,
        *,
        recent_days: int = 7,
        max_repositories: int = 15,
        ceiling: int = 20,
        concurrency: int = 3,
    ) -> None:
        super().__init__(api, tz)
        self.recent_days = recent_days
        self.max_repositories = max_repositories
        self.ceiling = ceiling
        self.concurrency = max(1, concurrency)

    @property
    def method(self) -> DetectionMethod:
        return DetectionMethod.REPOSITORIES

    async def detect(self, username: str, token: str, day: date) -> MethodResult:
        repositories = await self.api.get_user_repositories(username, token)
        selected = select_repositories(
            repositories,
            day,
            recent_days=self.recent_days,
            fallback_count=self.max_repositories,
            ceiling=self.ceiling,
            tz=self.tz,
        )
        since, until = day_window_utc(day, self.tz)
        semaphore = asyncio.Semaphore(self.concurrency)

        async def scan(repo: Repository) -> int | None:
            owner, _, name = (repo.full_name or f"{username}/{repo.name}").partition("/")
            async with semaphore:
                try:
                    commits = await self.api.get_repository_commits(
                        owner,
                        name,
                        token,
                        author=username,
                        since=since,
                        until=until,
                    )
                except Exception as e:
                    logger.warning(
                        "Skipping %s/%s: %s (%s)", owner, name, classify(e), e
                    )
                    return None
            if commits:
                logger.debug("Found %d commit(s) in %s/%s", len(commits), owner, name)
            return len(commits)

        counts = await asyncio.gather(*(scan(repo) for repo in selected))
        scanned = [c for c in counts if c is not None]

        return MethodResult.ok(
            self.method,
            sum(scanned),
            details={
                "repositories_scanned": len(scanned),
                "repositories_failed": len(counts) - len(scanned),
            },
        )
