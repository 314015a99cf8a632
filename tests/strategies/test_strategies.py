"""Tests for the detection strategies."""

from __future__ import annotations

from datetime import UTC
from datetime import date
from datetime import datetime
from datetime import timedelta
from datetime import timezone

import httpx
import pytest

from commitstreak.models import ActivityEvent
from commitstreak.models import DetectionMethod
from commitstreak.models import EventType
from commitstreak.models import PushedCommit
from commitstreak.models import Repository
from commitstreak.models import RepositoryCommit
from commitstreak.models import SearchResult
from commitstreak.strategies.events import EventsStrategy
from commitstreak.strategies.repositories import RepositoriesStrategy
from commitstreak.strategies.repositories import select_repositories
from commitstreak.strategies.search import SearchStrategy
from conftest import TOKEN

DAY = date(2024, 1, 10)


def push(created_at: datetime, *messages: str, with_author: bool = True) -> ActivityEvent:
    return ActivityEvent(
        type=EventType.PUSH,
        created_at=created_at,
        repository="alice/project",
        pushed_commits=tuple(
            PushedCommit(
                sha=f"sha{i}",
                message=m,
                author_email="alice@example.com" if with_author else None,
                author_name="Alice" if with_author else None,
            )
            for i, m in enumerate(messages)
        ),
        push_size=len(messages),
    )


def repo(name: str, updated: datetime | None) -> Repository:
    return Repository(name=name, updated_at=updated, full_name=f"alice/{name}")


class TestSearchStrategy:
    """Tests for SearchStrategy."""

    @pytest.mark.asyncio
    async def test_count_is_total(self, mock_api):
        mock_api.search_commits.return_value = SearchResult(
            total_count=3, incomplete_results=True
        )

        result = await SearchStrategy(mock_api, UTC).detect("alice", TOKEN, DAY)

        assert result.method is DetectionMethod.SEARCH
        assert result.success
        assert result.commit_count == 3
        assert result.has_committed
        assert result.details["incomplete_results"] is True
        mock_api.search_commits.assert_awaited_once_with("alice", TOKEN, DAY)


class TestEventsStrategy:
    """Tests for EventsStrategy."""

    @pytest.mark.asyncio
    async def test_sums_push_commits_on_day(self, mock_api):
        mock_api.get_user_events.return_value = (
            push(datetime(2024, 1, 10, 9, tzinfo=UTC), "a", "b"),
            push(datetime(2024, 1, 10, 15, tzinfo=UTC), "c"),
            push(datetime(2024, 1, 9, 15, tzinfo=UTC), "d"),
            ActivityEvent(type=EventType.ISSUES, created_at=datetime(2024, 1, 10, tzinfo=UTC)),
        )

        result = await EventsStrategy(mock_api, UTC).detect("alice", TOKEN, DAY)

        assert result.commit_count == 3
        assert result.details["push_events"] == 2

    @pytest.mark.asyncio
    async def test_no_events(self, mock_api):
        mock_api.get_user_events.return_value = ()

        result = await EventsStrategy(mock_api, UTC).detect("alice", TOKEN, DAY)

        assert result.success
        assert result.commit_count == 0
        assert not result.has_committed

    @pytest.mark.asyncio
    async def test_inclusive_counts_merges(self, mock_api):
        mock_api.get_user_events.return_value = (
            push(datetime(2024, 1, 10, 9, tzinfo=UTC), "Merge branch 'main'", "fix"),
        )

        result = await EventsStrategy(mock_api, UTC).detect("alice", TOKEN, DAY)

        assert result.commit_count == 2

    @pytest.mark.asyncio
    async def test_exclusive_skips_merges_and_anonymous(self, mock_api):
        mock_api.get_user_events.return_value = (
            push(datetime(2024, 1, 10, 9, tzinfo=UTC), "Merge branch 'main'", "fix"),
            push(datetime(2024, 1, 10, 10, tzinfo=UTC), "bot", with_author=False),
        )

        strategy = EventsStrategy(mock_api, UTC, exclude_merges=True)
        result = await strategy.detect("alice", TOKEN, DAY)

        assert result.commit_count == 1

    @pytest.mark.asyncio
    async def test_local_day_boundary(self, mock_api):
        """A push at 03:00Z on the 11th is still the 10th in UTC-05:00."""
        mock_api.get_user_events.return_value = (
            push(datetime(2024, 1, 11, 3, tzinfo=UTC), "late night"),
        )
        eastern = timezone(timedelta(hours=-5))

        local = await EventsStrategy(mock_api, eastern).detect("alice", TOKEN, DAY)
        utc = await EventsStrategy(mock_api, UTC).detect("alice", TOKEN, DAY)

        assert local.commit_count == 1
        assert utc.commit_count == 0

    @pytest.mark.asyncio
    async def test_errors_propagate(self, mock_api):
        mock_api.get_user_events.side_effect = httpx.ConnectError("refused")

        with pytest.raises(httpx.ConnectError):
            await EventsStrategy(mock_api, UTC).detect("alice", TOKEN, DAY)


class TestSelectRepositories:
    """Tests for select_repositories."""

    def test_recent_repositories_selected(self):
        repos = [
            repo("today", datetime(2024, 1, 10, 8, tzinfo=UTC)),
            repo("last-week", datetime(2024, 1, 4, tzinfo=UTC)),
            repo("old", datetime(2023, 6, 1, tzinfo=UTC)),
        ]

        selected = select_repositories(repos, DAY, tz=UTC)

        assert [r.name for r in selected] == ["today", "last-week"]

    def test_recent_capped_at_ceiling(self):
        repos = [repo(f"r{i}", datetime(2024, 1, 10, tzinfo=UTC)) for i in range(30)]

        assert len(select_repositories(repos, DAY, ceiling=20, tz=UTC)) == 20

    def test_falls_back_to_most_recent(self):
        repos = [repo(f"r{i}", datetime(2023, 1, 1, tzinfo=UTC)) for i in range(30)]

        selected = select_repositories(repos, DAY, fallback_count=15, tz=UTC)

        assert [r.name for r in selected] == [f"r{i}" for i in range(15)]


class TestRepositoriesStrategy:
    """Tests for RepositoriesStrategy."""

    @pytest.mark.asyncio
    async def test_sums_commits_across_repositories(self, mock_api):
        mock_api.get_user_repositories.return_value = (
            repo("one", datetime(2024, 1, 10, tzinfo=UTC)),
            repo("two", datetime(2024, 1, 9, tzinfo=UTC)),
        )
        commits = {
            "one": (RepositoryCommit(sha="a"), RepositoryCommit(sha="b")),
            "two": (RepositoryCommit(sha="c"),),
        }

        async def get_commits(owner, name, token, **kwargs):
            return commits[name]

        mock_api.get_repository_commits.side_effect = get_commits

        result = await RepositoriesStrategy(mock_api, UTC).detect("alice", TOKEN, DAY)

        assert result.commit_count == 3
        assert result.details["repositories_scanned"] == 2
        kwargs = mock_api.get_repository_commits.await_args.kwargs
        assert kwargs["author"] == "alice"
        assert kwargs["since"] == "2024-01-10T00:00:00Z"
        assert kwargs["until"] == "2024-01-10T23:59:59Z"

    @pytest.mark.asyncio
    async def test_tolerates_per_repository_failures(self, mock_api):
        mock_api.get_user_repositories.return_value = (
            repo("good", datetime(2024, 1, 10, tzinfo=UTC)),
            repo("bad", datetime(2024, 1, 10, tzinfo=UTC)),
        )

        async def get_commits(owner, name, token, **kwargs):
            if name == "bad":
                raise httpx.ConnectError("reset")
            return (RepositoryCommit(sha="a"),)

        mock_api.get_repository_commits.side_effect = get_commits

        result = await RepositoriesStrategy(mock_api, UTC).detect("alice", TOKEN, DAY)

        assert result.success
        assert result.commit_count == 1
        assert result.details["repositories_failed"] == 1

    @pytest.mark.asyncio
    async def test_bounds_concurrency(self, mock_api):
        """No more than `concurrency` commit listings are in flight."""
        import asyncio

        mock_api.get_user_repositories.return_value = tuple(
            repo(f"r{i}", datetime(2024, 1, 10, tzinfo=UTC)) for i in range(10)
        )
        in_flight = 0
        peak = 0

        async def get_commits(owner, name, token, **kwargs):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0)
            in_flight -= 1
            return ()

        mock_api.get_repository_commits.side_effect = get_commits

        await RepositoriesStrategy(mock_api, UTC, concurrency=3).detect("alice", TOKEN, DAY)

        assert peak == 3
        assert mock_api.get_repository_commits.await_count == 10

    @pytest.mark.asyncio
    async def test_listing_failure_propagates(self, mock_api):
        mock_api.get_user_repositories.side_effect = httpx.ConnectError("refused")

        with pytest.raises(httpx.ConnectError):
            await RepositoriesStrategy(mock_api, UTC).detect("alice", TOKEN, DAY)
