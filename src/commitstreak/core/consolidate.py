"""Merge per-method detection results into one CheckResult."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from commitstreak.models import METHOD_PREFERENCE
from commitstreak.models import STREAK_INFERENCE_METHOD
from commitstreak.models import CheckResult
from commitstreak.models import MethodResult
from commitstreak.models import StreakResult

# Minimum streak length for inferring a commit nobody reported
INFERENCE_MIN_STREAK = 2


def _preference(result: MethodResult) -> int:
    try:
        return METHOD_PREFERENCE.index(result.method)
    except ValueError:
        return len(METHOD_PREFERENCE)


def consolidate(
    method_results: Iterable[MethodResult],
    streak: StreakResult,
    *,
    day: date | None = None,
) -> CheckResult:
    """Combine method results and the streak into the final answer.

    The count is the maximum over successful methods, and the user has
    committed if any successful method saw a commit. When no method saw one
    but the streak shows a contribution yesterday within a multi-day run,
    a commit is inferred (count floored at 1). That inference can be a false
    positive when yesterday's only event was unrelated to code.

    No I/O: the result depends only on the arguments.
    """
    successful = sorted(
        (r for r in method_results if r.success), key=_preference
    )

    commit_count = max((r.commit_count for r in successful), default=0)
    has_committed = any(r.has_committed for r in successful)

    method = None
    if successful:
        # sorted() is stable, so ties keep preference order
        best = max(successful, key=lambda r: r.commit_count)
        method = str(best.method)

    inferred = False
    if (
        not has_committed
        and streak.success
        and streak.committed_yesterday
        and streak.streak >= INFERENCE_MIN_STREAK
    ):
        has_committed = True
        commit_count = max(commit_count, 1)
        inferred = True
        method = STREAK_INFERENCE_METHOD

    return CheckResult(
        success=True,
        has_committed=has_committed,
        commit_count=commit_count,
        streak=streak.streak if streak.success else 0,
        method=method,
        inferred=inferred,
        day=day,
        last_commit_date=streak.last_commit_date,
    )
