"""Pytest configuration and shared fixtures for commitstreak tests."""

from __future__ import annotations

from datetime import UTC
from datetime import date
from datetime import datetime
from typing import Callable
from unittest.mock import MagicMock

import httpx
import pytest

from commitstreak.config.settings import Config
from commitstreak.config.settings import DetectionConfig
from commitstreak.config.settings import RetrySettings
from commitstreak.core.api import GitHubAPI
from commitstreak.core.cache import ResponseCache
from commitstreak.core.checker import CommitChecker
from commitstreak.core.http import Gateway
from commitstreak.core.retry import RetryConfig

TOKEN = "ghp_testtoken1234567890"


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep tests away from the real config directory and token variables."""
    import commitstreak.config.settings

    monkeypatch.setenv("COMMITSTREAK_CONFIG_DIR", str(tmp_path / "config"))
    for var in (
        "COMMITSTREAK_CONFIG_FILE",
        "COMMITSTREAK_TOKEN",
        "GITHUB_TOKEN",
        "GH_TOKEN",
        "COMMITSTREAK_USERNAME",
        "COMMITSTREAK_CHECK_INTERVAL",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(commitstreak.config.settings, "_config", None)
    yield


@pytest.fixture
def today() -> date:
    """Fixed "today" for detection tests."""
    return date(2024, 1, 10)


def push_event(
    created_at: str,
    commits: int = 1,
    repo: str = "alice/project",
    messages: list[str] | None = None,
    with_author: bool = True,
) -> dict:
    """Wire-format PushEvent with ``commits`` embedded commits."""
    messages = messages or [f"commit {i}" for i in range(commits)]
    author = {"email": "alice@example.com", "name": "Alice"} if with_author else {}
    return {
        "id": "1",
        "type": "PushEvent",
        "created_at": created_at,
        "repo": {"id": 1, "name": repo},
        "payload": {
            "size": len(messages),
            "commits": [
                {"sha": f"sha{i}", "message": message, "author": author}
                for i, message in enumerate(messages)
            ],
        },
    }


def event(event_type: str, created_at: str, repo: str = "alice/project") -> dict:
    """Wire-format event of any other type."""
    return {
        "id": "2",
        "type": event_type,
        "created_at": created_at,
        "repo": {"id": 1, "name": repo},
        "payload": {"action": "opened"},
    }


def json_response(
    data: object,
    status_code: int = 200,
    remaining: int | None = 4999,
    headers: dict | None = None,
) -> httpx.Response:
    """Response with JSON body and rate limit headers."""
    all_headers = {"x-ratelimit-limit": "5000", "x-ratelimit-reset": "1704887400"}
    if remaining is not None:
        all_headers["x-ratelimit-remaining"] = str(remaining)
    all_headers.update(headers or {})
    return httpx.Response(status_code, json=data, headers=all_headers)


class FakeGitHub:
    """Routes MockTransport requests by URL path and records them.

    A route maps a path to a response, a list of responses (served in
    order, the last one repeating), a callable taking the request, or an
    exception instance to raise.
    """

    def __init__(self) -> None:
        self.routes: dict[str, object] = {}
        self.requests: list[httpx.Request] = []

    def route(self, path: str, response: object) -> None:
        self.routes[path] = response

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return json_response({"message": "Not Found"}, status_code=404)
        if isinstance(route, list):
            route = route.pop(0) if len(route) > 1 else route[0]
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(request)
        return route

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def github() -> FakeGitHub:
    """Fake GitHub API served through httpx.MockTransport."""
    return FakeGitHub()


@pytest.fixture
def fast_config() -> Config:
    """Config with no backoff delay and sequential detection."""
    return Config(
        retry=RetrySettings(max_retries=2, base_delay=0.0, max_delay=0.0),
        detection=DetectionConfig(concurrent_methods=False),
    )


@pytest.fixture
def gateway(github: FakeGitHub, fast_config: Config) -> Gateway:
    return Gateway(client=github.client(), fetch=fast_config.fetch)


@pytest.fixture
def api(gateway: Gateway) -> GitHubAPI:
    return GitHubAPI(
        gateway, ResponseCache(), RetryConfig(max_retries=2, base_delay=0.0, max_delay=0.0)
    )


@pytest.fixture
def make_checker(
    github: FakeGitHub, fast_config: Config
) -> Callable[..., CommitChecker]:
    """Factory for a CommitChecker wired to the fake API (UTC days)."""

    def factory(config: Config | None = None, tz=UTC) -> CommitChecker:
        config = config or fast_config
        gateway = Gateway(client=github.client(), fetch=config.fetch)
        return CommitChecker(config, gateway=gateway, tz=tz)

    return factory


@pytest.fixture
def mock_api() -> MagicMock:
    """GitHubAPI stand-in for strategy tests."""
    return MagicMock(spec=GitHubAPI)


@pytest.fixture
def utc_now() -> datetime:
    """Fixed UTC datetime for consistent testing."""
    return datetime(2024, 1, 10, 12, 0, 0, tzinfo=UTC)
