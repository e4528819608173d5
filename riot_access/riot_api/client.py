"""Riot API request dispatcher: caching, rate limiting, transport and status handling."""

import asyncio
import time
from typing import Any, Callable, Dict, Optional

import httpx
import structlog

from ..config import Settings, get_global_settings
from .cache import ResponseCache
from .classifier import raise_for_status
from .constants import DEFAULT_HEADERS
from .endpoints import RiotAPIEndpoints, redact_api_key
from .errors import (
    RegionNotSupportedError,
    ResponsePayloadError,
    RiotAPIError,
    TransportError,
)
from .models import RequestDescriptor, Response
from .rate_limiter import RateLimiter

logger = structlog.get_logger(__name__)


class RiotAPIClient:
    """
    Executes request descriptors against the Riot API.

    One client owns one rate limiter, one response cache and one HTTP
    session; endpoint methods receive the client and share them.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        user_agent: Optional[str] = None,
        settings: Optional[Settings] = None,
        rate_limiter: Optional[RateLimiter] = None,
        cache: Optional[ResponseCache] = None,
        endpoints: Optional[RiotAPIEndpoints] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.time,
        request_callback: Optional[Callable[[str, int], None]] = None,
    ):
        """
        Initialize Riot API client.

        Args:
            api_key: Riot API key (uses config if None)
            user_agent: User-Agent header value (uses config if None)
            settings: Settings to read limits and cache options from
            rate_limiter: Shared rate limiter, built from settings if None
            cache: Shared response cache, built from settings if None
            endpoints: Endpoint selection, defaults to the public hosts
            transport: httpx transport, e.g. ``httpx.MockTransport`` in tests
            clock: Wall clock used for response ages
            request_callback: Optional callback for tracking API requests (metric_name, count)
        """
        settings = settings or get_global_settings()
        self.settings = settings
        self.api_key = api_key if api_key is not None else settings.api_key
        self.user_agent = user_agent if user_agent is not None else settings.user_agent
        self.cache_ttl = settings.cache_ttl_seconds
        self.cache_enabled = settings.cache_enabled
        self.request_callback = request_callback

        # Initialize components
        if rate_limiter is None:
            rate_limiter = RateLimiter(
                settings.rate_limit_config(), enabled=settings.rate_limit_enabled
            )
        self.rate_limiter = rate_limiter
        self.cache = (
            cache if cache is not None else ResponseCache(settings.effective_cache_capacity)
        )
        self.endpoints = endpoints or RiotAPIEndpoints()
        self._clock = clock

        # HTTP session
        self._transport = transport
        self.session: Optional[httpx.AsyncClient] = None
        self._session_lock = asyncio.Lock()

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start_session()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    async def start_session(self) -> None:
        """Start the httpx session."""
        if self.session is None or self.session.is_closed:
            async with self._session_lock:
                if self.session is None or self.session.is_closed:
                    headers = dict(DEFAULT_HEADERS)
                    if self.user_agent:
                        headers["User-Agent"] = self.user_agent

                    timeout = httpx.Timeout(self.settings.request_timeout_seconds)

                    self.session = httpx.AsyncClient(
                        headers=headers, timeout=timeout, transport=self._transport
                    )

                    logger.info(
                        "Riot API client session started",
                        user_agent=self.user_agent,
                        api_key_prefix="[REDACTED]" if self.api_key else "None",
                    )

    async def close(self) -> None:
        """Close the httpx session."""
        if self.session and not self.session.is_closed:
            await self.session.aclose()
            logger.info("Riot API client session closed")

    async def execute(
        self, descriptor: RequestDescriptor, timeout: Optional[float] = None
    ) -> Response:
        """
        Execute a request descriptor.

        Args:
            descriptor: The logical request
            timeout: Seconds the call may wait at the rate limiter

        Returns:
            A 200 response, or a pass-through response (404 and unclassified
            codes) for the endpoint method to interpret

        Raises:
            RegionNotSupportedError: Region not served by the method, before any I/O
            InvalidTemplateError: Operation template could not be resolved
            RateLimitTimeoutError: The rate limiter wait exceeded ``timeout``
            TransportError: The HTTP request failed
            ResponsePayloadError: A 200 response had an unparseable body
            ClientError: 400 or 401
            RateLimitExceededError: 429
            ServerError: 500 or 503
        """
        method = descriptor.method
        if not method.supports(descriptor.region):
            raise RegionNotSupportedError(
                method.display_name, descriptor.region, method.supported_regions
            )

        url = self.endpoints.build(descriptor, self.api_key)
        log_url = redact_api_key(url)
        use_cache = self.cache_enabled and not descriptor.skip_cache

        if use_cache:
            cached = self.cache.get(url)
            if cached is not None:
                now = self._clock()
                if not cached.is_stale(self.cache_ttl, now):
                    return cached
                logger.debug("Cached response stale", url=log_url, age=cached.age(now))

        if not descriptor.bypass_rate_limit:
            await self.rate_limiter.acquire_and_record(timeout)

        http_response = await self._send(url, log_url)
        status = http_response.status_code
        value = self._parse_body(http_response, log_url)

        raise_for_status(
            status,
            url=log_url,
            response_data=value,
            headers=http_response.headers,
        )

        response = Response(raw_value=value, status_code=status, created_at=self._clock())
        if status == 200 and use_cache:
            self.cache.put(url, response)
        elif status != 200:
            logger.debug("Passing status through", url=log_url, status_code=status)
        return response

    async def _send(self, url: str, log_url: str) -> httpx.Response:
        """Perform the GET request."""
        await self.start_session()

        if self.session is None:
            raise RiotAPIError("Session not initialized")

        try:
            response = await self.session.get(url)
        except httpx.HTTPError as e:
            logger.warning("Request failed", url=log_url, error=str(e))
            raise TransportError(f"Request failed: {e}", url=log_url) from e

        if self.request_callback:
            self.request_callback("riot_api_requests", 1)

        logger.debug("Request completed", url=log_url, status_code=response.status_code)
        return response

    @staticmethod
    def _parse_body(response: httpx.Response, log_url: str) -> Any:
        """
        Parse the JSON body.

        Bodies of non-200 responses are informational and parse leniently to
        None; a 200 body that is not JSON breaks the server contract.
        """
        try:
            return response.json()
        except ValueError as e:
            if response.status_code != 200:
                return None
            logger.error("Unparseable response body", url=log_url, error=str(e))
            raise ResponsePayloadError(
                "Failed to parse response",
                status_code=response.status_code,
                url=log_url,
            ) from e

    # Utility methods

    def set_cache_enabled(self, enabled: bool) -> None:
        """Turn response caching on or off."""
        self.cache_enabled = enabled

    def clear_cache(self) -> None:
        """Clear the response cache."""
        self.cache.clear()

    def set_rate_limit_enabled(self, enabled: bool) -> None:
        """Turn the rate limiter's spacing wait on or off."""
        self.rate_limiter.set_enabled(enabled)

    def is_rate_limit_enabled(self) -> bool:
        return self.rate_limiter.enabled

    def remaining_api_calls(self) -> int:
        """Number of calls left before hitting the 10 minute limit."""
        return self.rate_limiter.remaining_calls()

    def time_until_more_api_calls(self) -> float:
        """Seconds until another call fits under both the 10 second and 10 minute counts."""
        return max(
            self.rate_limiter.time_until_next_request(),
            self.rate_limiter.time_until_short_interval_frees(),
            self.rate_limiter.time_until_slot_frees(),
        )

    def get_stats(self) -> Dict[str, Any]:
        """Get cache and rate limiter statistics."""
        return {
            "cache_enabled": self.cache_enabled,
            "cache": self.cache.stats(),
            "rate_limiter": self.rate_limiter.get_stats(),
        }
