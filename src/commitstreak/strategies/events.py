"""Activity feed detection strategy."""

from __future__ import annotations

import logging
from datetime import date
from datetime import tzinfo

from commitstreak.core.api import GitHubAPI
from commitstreak.models import DetectionMethod
from commitstreak.models import EventType
from commitstreak.models import MethodResult
from commitstreak.strategies.base import DetectionStrategy

logger = logging.getLogger(__name__)


class EventsStrategy(DetectionStrategy):
    """Count commits carried by push events on the given day.

    Reads the first page of the user's activity feed. The feed covers
    private activity visible to the token and updates quickly, which makes
    this the primary method.
    """

    def __init__(
        self,
        api: GitHubAPI,
        tz: tzinfo | None = None,
        per_page: int = 100,
        exclude_merges: bool = False,
    ) -> None:
        super().__init__(api, tz)
        self.per_page = per_page
        self.exclude_merges = exclude_merges

    @property
    def method(self) -> DetectionMethod:
        return DetectionMethod.EVENTS

    async def detect(self, username: str, token: str, day: date) -> MethodResult:
        events = await self.api.get_user_events(
            username, token, per_page=self.per_page, page=1
        )
        pushes = [
            event
            for event in events
            if event.type is EventType.PUSH and event.local_date(self.tz) == day
        ]
        commit_count = sum(e.commit_count(self.exclude_merges) for e in pushes)

        logger.debug(
            "Events: %d push event(s) with %d commit(s) for %s on %s",
            len(pushes),
            commit_count,
            username,
            day,
        )
        return MethodResult.ok(
            self.method,
            commit_count,
            details={"push_events": len(pushes), "events_scanned": len(events)},
        )
