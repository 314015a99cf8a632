"""Rate-aware HTTP gateway to the GitHub REST API."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import UTC
from datetime import datetime

import httpx

from commitstreak.config.settings import FetchConfig
from commitstreak.config.settings import get_config
from commitstreak.models import RateLimitStatus

logger = logging.getLogger(__name__)

GITHUB_MEDIA_TYPE = "application/vnd.github+json"
GITHUB_API_VERSION = "2022-11-28"


def get_timeout_config(fetch: FetchConfig | None = None) -> httpx.Timeout:
    """Get timeout configuration from settings."""
    fetch = fetch or get_config().fetch
    return httpx.Timeout(fetch.timeout, connect=fetch.connect_timeout)


def build_headers(token: str | None = None) -> dict[str, str]:
    """Request headers for an API call, with bearer auth when a token is given."""
    headers = {
        "Accept": GITHUB_MEDIA_TYPE,
        "X-GitHub-Api-Version": GITHUB_API_VERSION,
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _parse_int_header(headers: httpx.Headers, name: str) -> int | None:
    value = headers.get(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


@dataclass
class RateLimitState:
    """Rate limit counters observed by one gateway.

    Owned by the gateway instance so that separate gateways (e.g. in tests)
    never share quota information.
    """

    remaining: int | None = None
    limit: int | None = None
    reset: int | None = None  # epoch seconds
    last_request: datetime | None = None
    request_count: int = 0

    def update(self, response: httpx.Response) -> None:
        """Record quota headers from a response."""
        self.last_request = datetime.now(UTC)
        headers = response.headers
        if (remaining := _parse_int_header(headers, "x-ratelimit-remaining")) is not None:
            self.remaining = remaining
        if (limit := _parse_int_header(headers, "x-ratelimit-limit")) is not None:
            self.limit = limit
        if (reset := _parse_int_header(headers, "x-ratelimit-reset")) is not None:
            self.reset = reset

    def status(self) -> RateLimitStatus:
        return RateLimitStatus(
            remaining=self.remaining,
            reset=datetime.fromtimestamp(self.reset, tz=UTC) if self.reset else None,
            last_request=self.last_request,
            limit=self.limit,
        )


class Gateway:
    """Issues GET requests against the API and tracks rate limit headroom.

    Usage:
        async with Gateway() as gateway:
            response = await gateway.request("/user", headers=build_headers(token))

    Transport failures and non-2xx responses propagate as raw httpx errors;
    classification is left to the caller.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        fetch: FetchConfig | None = None,
        rate_limit: RateLimitState | None = None,
    ) -> None:
        fetch = fetch or get_config().fetch
        self.base_url = fetch.base_url.rstrip("/")
        self.rate_limit = rate_limit or RateLimitState()
        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(
                timeout=get_timeout_config(fetch),
                limits=httpx.Limits(max_connections=20, max_keepalive_connections=5),
                headers={"User-Agent": fetch.user_agent},
                follow_redirects=True,
            )
        self._client = client

    @property
    def request_count(self) -> int:
        """Number of outbound requests issued so far."""
        return self.rate_limit.request_count

    async def request(
        self,
        endpoint: str,
        params: dict | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """GET an endpoint (path relative to the base URL, or a full URL).

        Raises:
            httpx.HTTPStatusError: For any non-2xx response
            httpx.TransportError: For connection level failures and timeouts
        """
        url = endpoint if endpoint.startswith("http") else f"{self.base_url}{endpoint}"
        request_headers = build_headers()
        if headers:
            request_headers.update(headers)

        self.rate_limit.request_count += 1
        start_time = time.monotonic()
        try:
            response = await self._client.get(
                url, params=params, headers=request_headers
            )
        except httpx.TransportError as e:
            logger.debug(
                "Request to %s failed after %.0fms: %s",
                endpoint,
                (time.monotonic() - start_time) * 1000,
                e,
            )
            raise

        self.rate_limit.update(response)
        logger.debug(
            "GET %s -> %s in %.0fms (rate limit remaining: %s)",
            endpoint,
            response.status_code,
            (time.monotonic() - start_time) * 1000,
            self.rate_limit.remaining,
        )

        response.raise_for_status()
        return response

    def get_rate_limit_status(self) -> RateLimitStatus:
        """Rate limit headroom as of the last response."""
        return self.rate_limit.status()

    async def aclose(self) -> None:
        """Close the underlying client if this gateway created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> Gateway:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
