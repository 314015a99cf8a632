"""Commit search detection strategy."""

from __future__ import annotations

import logging
from datetime import date

from commitstreak.models import DetectionMethod
from commitstreak.models import MethodResult
from commitstreak.strategies.base import DetectionStrategy

logger = logging.getLogger(__name__)


class SearchStrategy(DetectionStrategy):
    """Count commits through the commit search endpoint.

    Search is indexed lazily and only sees public commits, so the count is
    informational and may lag behind the activity feed.
    """

    @property
    def method(self) -> DetectionMethod:
        return DetectionMethod.SEARCH

    async def detect(self, username: str, token: str, day: date) -> MethodResult:
        result = await self.api.search_commits(username, token, day)
        logger.debug(
            "Search found %d commit(s) for %s on %s", result.total_count, username, day
        )
        return MethodResult.ok(
            self.method,
            result.total_count,
            details={"incomplete_results": result.incomplete_results},
        )
