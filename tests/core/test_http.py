"""Tests for core/http.py (rate-aware gateway)."""

from __future__ import annotations

from datetime import UTC
from datetime import datetime
from unittest.mock import patch

import httpx
import pytest

from commitstreak.config.settings import Config
from commitstreak.config.settings import FetchConfig
from commitstreak.core.http import Gateway
from commitstreak.core.http import RateLimitState
from commitstreak.core.http import build_headers
from commitstreak.core.http import get_timeout_config
from conftest import json_response


class TestGetTimeoutConfig:
    """Tests for get_timeout_config function."""

    def test_uses_configured_timeouts(self):
        """Read timeout and connect timeout come from FetchConfig."""
        timeout = get_timeout_config(FetchConfig(timeout=45.0, connect_timeout=5.0))

        assert timeout.read == 45.0
        assert timeout.connect == 5.0

    def test_defaults_to_global_config(self):
        """Falls back to get_config().fetch when no FetchConfig is given."""
        with patch("commitstreak.core.http.get_config") as mock_get_config:
            mock_get_config.return_value = Config(fetch=FetchConfig(timeout=30.0))

            timeout = get_timeout_config()

            assert timeout.read == 30.0
            assert timeout.connect == 10.0


class TestBuildHeaders:
    """Tests for build_headers."""

    def test_includes_media_type_and_version(self):
        """Every request accepts the versioned GitHub media type."""
        headers = build_headers()

        assert headers["Accept"] == "application/vnd.github+json"
        assert headers["X-GitHub-Api-Version"] == "2022-11-28"
        assert "Authorization" not in headers

    def test_adds_bearer_token(self):
        """A token becomes a bearer authorization header."""
        assert build_headers("abc")["Authorization"] == "Bearer abc"


class TestRateLimitState:
    """Tests for RateLimitState."""

    def test_update_reads_headers(self):
        """Remaining, limit and reset are read from response headers."""
        state = RateLimitState()
        response = httpx.Response(
            200,
            headers={
                "x-ratelimit-remaining": "42",
                "x-ratelimit-limit": "5000",
                "x-ratelimit-reset": "1704887400",
            },
        )

        state.update(response)

        assert state.remaining == 42
        assert state.limit == 5000
        assert state.reset == 1704887400
        assert state.last_request is not None

    def test_update_ignores_missing_or_malformed_headers(self):
        """Previous values survive responses without usable headers."""
        state = RateLimitState(remaining=10)

        state.update(httpx.Response(200, headers={"x-ratelimit-remaining": "lots"}))

        assert state.remaining == 10

    def test_status_converts_reset_to_datetime(self):
        """status() exposes reset as an aware datetime."""
        state = RateLimitState(remaining=1, reset=1704887400)

        status = state.status()

        assert status.remaining == 1
        assert status.reset == datetime.fromtimestamp(1704887400, tz=UTC)


class TestGateway:
    """Tests for Gateway.request."""

    @pytest.mark.asyncio
    async def test_records_rate_limit_on_success(self, github, gateway):
        """Successful responses update the rate limit counters."""
        github.route("/user", json_response({"login": "alice"}, remaining=4321))

        response = await gateway.request("/user")

        assert response.json() == {"login": "alice"}
        assert gateway.get_rate_limit_status().remaining == 4321
        assert gateway.request_count == 1

    @pytest.mark.asyncio
    async def test_records_rate_limit_on_error_then_raises(self, github, gateway):
        """Non-2xx responses still update counters before raising."""
        github.route(
            "/user", json_response({"message": "API rate limit exceeded"}, 403, remaining=0)
        )

        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            await gateway.request("/user")

        assert exc_info.value.response.status_code == 403
        assert gateway.get_rate_limit_status().remaining == 0

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self, github, gateway):
        """Transport failures propagate as raw httpx errors."""
        github.route("/user", httpx.ConnectError("connection refused"))

        with pytest.raises(httpx.ConnectError):
            await gateway.request("/user")

        assert gateway.request_count == 1
        assert gateway.get_rate_limit_status().remaining is None

    @pytest.mark.asyncio
    async def test_sends_params_and_headers(self, github, gateway):
        """Query params and caller headers reach the server."""
        github.route("/users/alice/events", json_response([]))

        await gateway.request(
            "/users/alice/events",
            params={"per_page": 100},
            headers=build_headers("tok"),
        )

        request = github.calls("/users/alice/events")[0]
        assert request.url.params["per_page"] == "100"
        assert request.headers["Authorization"] == "Bearer tok"
        assert request.url.host == "api.github.com"

    @pytest.mark.asyncio
    async def test_separate_gateways_track_separately(self, github, fast_config):
        """Rate limit state is per gateway instance."""
        github.route("/user", json_response({"login": "alice"}, remaining=7))
        first = Gateway(client=github.client(), fetch=fast_config.fetch)
        second = Gateway(client=github.client(), fetch=fast_config.fetch)

        await first.request("/user")

        assert first.get_rate_limit_status().remaining == 7
        assert second.get_rate_limit_status().remaining is None

    @pytest.mark.asyncio
    async def test_aclose_leaves_injected_client_open(self, github, fast_config):
        """An injected client belongs to the caller."""
        client = github.client()
        gateway = Gateway(client=client, fetch=fast_config.fetch)

        await gateway.aclose()

        assert not client.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_context_manager_closes_owned_client(self, fast_config):
        """A gateway that created its client closes it on exit."""
        async with Gateway(fetch=fast_config.fetch) as gateway:
            client = gateway._client

        assert client.is_closed
