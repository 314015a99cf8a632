"""Commit detection strategies."""

from commitstreak.strategies.base import DetectionStrategy
from commitstreak.strategies.events import EventsStrategy
from commitstreak.strategies.repositories import RepositoriesStrategy
from commitstreak.strategies.repositories import select_repositories
from commitstreak.strategies.search import SearchStrategy

__all__ = [
    "DetectionStrategy",
    "EventsStrategy",
    "RepositoriesStrategy",
    "SearchStrategy",
    "select_repositories",
]
