"""Detection strategy base class."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from datetime import tzinfo

from commitstreak.core.api import GitHubAPI
from commitstreak.models import DetectionMethod
from commitstreak.models import MethodResult


class DetectionStrategy(ABC):
    """Base class for commit detection strategies.

    Each strategy answers "how many commits did this user make on this
    day?" through one API surface. Strategies raise on failure; the
    detector turns exceptions into failed MethodResults.
    """

    def __init__(self, api: GitHubAPI, tz: tzinfo | None = None) -> None:
        self.api = api
        self.tz = tz

    @property
    @abstractmethod
    def method(self) -> DetectionMethod:
        """Which detection method this strategy implements."""
        ...

    @abstractmethod
    async def detect(self, username: str, token: str, day: date) -> MethodResult:
        """
        Count the user's commits on ``day``.

        Returns a successful MethodResult; raises the underlying error
        (httpx or decode) when the data cannot be obtained.
        """
        ...
