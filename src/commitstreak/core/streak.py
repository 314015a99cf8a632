"""Consecutive-day contribution streak from the activity feed."""

from __future__ import annotations

import logging
from datetime import date
from datetime import timedelta
from datetime import tzinfo
from typing import Iterable

from commitstreak.core.api import GitHubAPI
from commitstreak.core.dates import today as local_today
from commitstreak.errors.classify import classify
from commitstreak.models import ActivityEvent
from commitstreak.models import EventType
from commitstreak.models import StreakResult

logger = logging.getLogger(__name__)


def contribution_dates(
    events: Iterable[ActivityEvent], tz: tzinfo | None = None
) -> frozenset[date]:
    """Unique local dates holding at least one contribution event."""
    return frozenset(e.local_date(tz) for e in events if e.is_contribution())


def compute_streak(dates: frozenset[date] | set[date], today: date) -> tuple[int, bool, bool]:
    """Walk back from today (or yesterday) while every day has a contribution.

    Returns:
        (streak, committed_today, committed_yesterday)
    """
    yesterday = today - timedelta(days=1)
    committed_today = today in dates
    committed_yesterday = yesterday in dates

    if committed_today:
        anchor = today
    elif committed_yesterday:
        anchor = yesterday
    else:
        return 0, False, False

    streak = 0
    current = anchor
    while current in dates:
        streak += 1
        current -= timedelta(days=1)
    return streak, committed_today, committed_yesterday


class StreakCalculator:
    """Computes a StreakResult from a bounded window of activity pages."""

    def __init__(
        self,
        api: GitHubAPI,
        pages: int = 3,
        per_page: int = 100,
        tz: tzinfo | None = None,
    ) -> None:
        self.api = api
        self.pages = max(1, pages)
        self.per_page = per_page
        self.tz = tz

    async def _fetch_events(self, username: str, token: str) -> list[ActivityEvent]:
        events: list[ActivityEvent] = []
        for page in range(1, self.pages + 1):
            try:
                batch = await self.api.get_user_events(
                    username, token, per_page=self.per_page, page=page
                )
            except Exception as e:
                if page == 1:
                    raise
                logger.warning(
                    "Stopping streak window at page %d: %s (%s)", page, classify(e), e
                )
                break
            events.extend(batch)
            if len(batch) < self.per_page:
                break
        return events

    async def calculate_streak(
        self,
        username: str,
        token: str,
        today: date | None = None,
    ) -> StreakResult:
        """Fetch recent activity and compute the current streak.

        Raises whatever the first events page raises.
        """
        today = today or local_today(self.tz)
        events = await self._fetch_events(username, token)

        dates = contribution_dates(events, self.tz)
        streak, committed_today, committed_yesterday = compute_streak(dates, today)
        push_dates = [e.local_date(self.tz) for e in events if e.type is EventType.PUSH]

        logger.info(
            "Streak for %s: %d day(s) from %d event(s)", username, streak, len(events)
        )
        return StreakResult(
            streak=streak,
            contribution_dates=dates,
            committed_today=committed_today,
            committed_yesterday=committed_yesterday,
            last_commit_date=max(push_dates) if push_dates else None,
        )
