"""Multi-method commit detection.

Runs every enabled detection strategy, records one MethodResult per
strategy, computes the streak once all strategies have settled, then hands
everything to the consolidator.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import date
from datetime import tzinfo

from commitstreak.config.settings import Config
from commitstreak.config.settings import get_config
from commitstreak.core.api import GitHubAPI
from commitstreak.core.consolidate import consolidate
from commitstreak.core.dates import today as local_today
from commitstreak.core.streak import StreakCalculator
from commitstreak.errors.classify import to_user_facing
from commitstreak.models import DetectionMethod
from commitstreak.models import DetectionReport
from commitstreak.models import MethodResult
from commitstreak.models import StreakResult
from commitstreak.strategies.base import DetectionStrategy
from commitstreak.strategies.events import EventsStrategy
from commitstreak.strategies.repositories import RepositoriesStrategy
from commitstreak.strategies.search import SearchStrategy

logger = logging.getLogger(__name__)

# Strategies are always constructed (and reported) in this order
STRATEGY_ORDER: tuple[DetectionMethod, ...] = (
    DetectionMethod.EVENTS,
    DetectionMethod.SEARCH,
    DetectionMethod.REPOSITORIES,
)

STRATEGY_CONTEXT: dict[DetectionMethod, str] = {
    DetectionMethod.EVENTS: "Fetching user events",
    DetectionMethod.SEARCH: "Searching commits",
    DetectionMethod.REPOSITORIES: "Scanning repositories",
}


def build_strategies(
    api: GitHubAPI,
    config: Config,
    tz: tzinfo | None = None,
) -> list[DetectionStrategy]:
    """Construct the strategies enabled in ``config.detection.methods``."""
    detection = config.detection
    enabled = {m.strip().lower() for m in detection.methods}
    strategies: list[DetectionStrategy] = []

    for method in STRATEGY_ORDER:
        if method.value not in enabled:
            continue
        if method is DetectionMethod.EVENTS:
            strategies.append(
                EventsStrategy(
                    api,
                    tz,
                    per_page=detection.events_per_page,
                    exclude_merges=detection.exclude_merge_commits,
                )
            )
        elif method is DetectionMethod.SEARCH:
            strategies.append(SearchStrategy(api, tz))
        else:
            strategies.append(
                RepositoriesStrategy(
                    api,
                    tz,
                    recent_days=detection.recent_days,
                    max_repositories=detection.max_repositories,
                    ceiling=detection.repository_ceiling,
                    concurrency=detection.repository_concurrency,
                )
            )
    return strategies


class CommitDetector:
    """Runs the detection strategies and the streak calculation for one day."""

    def __init__(
        self,
        api: GitHubAPI,
        config: Config | None = None,
        tz: tzinfo | None = None,
        strategies: list[DetectionStrategy] | None = None,
    ) -> None:
        self.config = config or get_config()
        self.tz = tz
        self.strategies = (
            strategies
            if strategies is not None
            else build_strategies(api, self.config, tz)
        )
        self.streak_calculator = StreakCalculator(
            api,
            pages=self.config.detection.streak_pages,
            per_page=self.config.detection.events_per_page,
            tz=tz,
        )

    async def _run_strategy(
        self,
        strategy: DetectionStrategy,
        username: str,
        token: str,
        day: date,
    ) -> tuple[MethodResult, Exception | None]:
        start_time = time.monotonic()
        try:
            result = await strategy.detect(username, token, day)
        except Exception as e:
            error = to_user_facing(e, STRATEGY_CONTEXT.get(strategy.method, ""))
            logger.warning(
                "%s detection failed after %.0fms: %s",
                strategy.method,
                (time.monotonic() - start_time) * 1000,
                error.technical,
            )
            return MethodResult.fail(strategy.method, error.message, error.kind.value), e

        logger.debug(
            "%s detection found %d commit(s) in %.0fms",
            strategy.method,
            result.commit_count,
            (time.monotonic() - start_time) * 1000,
        )
        return result, None

    async def detect(
        self,
        username: str,
        token: str,
        day: date | None = None,
    ) -> DetectionReport:
        """Detect commits by ``username`` on ``day`` (local today by default).

        Individual strategy failures are recorded, not raised. When every
        strategy failed, raises the raw error of the events strategy (or the
        first failed strategy) unless the streak supports an inferred commit.
        """
        day = day or local_today(self.tz)
        logger.info("Checking commits for %s on %s", username, day)

        if self.config.detection.concurrent_methods:
            outcomes = await asyncio.gather(
                *(self._run_strategy(s, username, token, day) for s in self.strategies)
            )
        else:
            outcomes = [
                await self._run_strategy(s, username, token, day)
                for s in self.strategies
            ]

        methods = {result.method: result for result, _ in outcomes}
        errors = {result.method: e for result, e in outcomes if e is not None}

        try:
            streak = await self.streak_calculator.calculate_streak(
                username, token, today=day
            )
        except Exception as e:
            logger.warning("Streak calculation failed: %s", to_user_facing(e).technical)
            streak = StreakResult.failed(to_user_facing(e, "Calculating streak").message)
            if not outcomes:
                raise

        consolidated = consolidate(methods.values(), streak, day=day)
        # With every method down, only an inferred commit is an answer
        if errors and len(errors) == len(outcomes) and not consolidated.inferred:
            raise errors.get(DetectionMethod.EVENTS) or next(iter(errors.values()))
        logger.info(
            "Consolidated: has_committed=%s count=%d method=%s streak=%d",
            consolidated.has_committed,
            consolidated.commit_count,
            consolidated.method,
            consolidated.streak,
        )
        return DetectionReport(
            day=day, methods=methods, streak=streak, consolidated=consolidated
        )
