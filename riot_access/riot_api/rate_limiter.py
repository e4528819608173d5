"""Client-side rate limiting: request spacing gate plus rolling window tracking."""

import asyncio
import time
from collections import deque
from typing import Any, Awaitable, Callable, Deque, Dict, Optional

import structlog

from .errors import RateLimitTimeoutError
from .models import RateLimitConfig

logger = structlog.get_logger(__name__)


class RateLimiter:
    """
    Rate limiter enforcing a minimum spacing between limited requests.

    Every limited request passes through ``acquire_and_record``, a single
    FIFO gate guarded by ``self.lock``. The gate waits out the spacing
    (``short_interval / limit_per_10_seconds``) and records the call in a
    rolling window. The rolling window only reports usage; it never blocks.
    """

    def __init__(
        self,
        config: RateLimitConfig,
        enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Initialize rate limiter.

        Args:
            config: Spacing and rolling window limits
            enabled: Whether the spacing wait applies
            clock: Monotonic time source in seconds
            sleep: Coroutine used to suspend for the spacing delta
        """
        self.config = config
        self._enabled = enabled
        self._clock = clock
        self._sleep = sleep

        self.last_request_time: Optional[float] = None
        # Oldest first
        self.timestamps: Deque[float] = deque()

        # Lock for the gate, FIFO for waiting callers
        self.lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        """
        Turn the spacing wait on or off.

        Calls made while disabled are still recorded so that the rolling
        window count stays accurate.
        """
        if enabled != self._enabled:
            logger.info("Rate limiting toggled", enabled=enabled)
        self._enabled = enabled

    async def acquire_and_record(self, timeout: Optional[float] = None) -> float:
        """
        Wait until the spacing constraint allows a request, then record it.

        Args:
            timeout: Seconds the caller is willing to wait, queueing included

        Returns:
            The recorded request timestamp

        Raises:
            RateLimitTimeoutError: If the call could not pass within ``timeout``
        """
        if timeout is None:
            return await self._acquire()

        try:
            return await asyncio.wait_for(self._acquire(), timeout)
        except asyncio.TimeoutError as e:
            logger.warning(
                "Rate limiter wait exceeded timeout",
                timeout=timeout,
                spacing=self.config.min_spacing,
            )
            raise RateLimitTimeoutError(
                f"Rate limiter did not admit the request within {timeout}s"
            ) from e

    async def _acquire(self) -> float:
        async with self.lock:
            if self._enabled:
                wait_time = self.time_until_next_request()
                if wait_time > 0:
                    logger.debug(
                        "Request spacing, waiting",
                        wait_time=wait_time,
                        spacing=self.config.min_spacing,
                    )
                    # Cancellation here leaves no record behind
                    await self._sleep(wait_time)

            now = self._clock()
            self.last_request_time = now
            self.timestamps.append(now)
            self._trim(now)
            return now

    def time_until_next_request(self) -> float:
        """Seconds until the spacing constraint admits the next request."""
        if self.last_request_time is None:
            return 0.0
        elapsed = self._clock() - self.last_request_time
        return max(0.0, self.config.min_spacing - elapsed)

    def _trim(self, now: float) -> None:
        window = self.config.rolling_window
        while self.timestamps and now - self.timestamps[0] >= window:
            self.timestamps.popleft()

    def requests_in_window(self) -> int:
        """Number of recorded requests within the rolling window."""
        self._trim(self._clock())
        return len(self.timestamps)

    def requests_in_short_interval(self) -> int:
        """Number of recorded requests within the short (10 second) interval."""
        now = self._clock()
        self._trim(now)
        interval = self.config.short_interval
        return sum(1 for ts in self.timestamps if now - ts < interval)

    def remaining_calls(self) -> int:
        """Requests still available in the rolling window."""
        return max(0, self.config.rolling_window_limit - self.requests_in_window())

    def time_until_slot_frees(self) -> float:
        """Seconds until the rolling window drops below its limit, 0 if it already is."""
        if self.requests_in_window() < self.config.rolling_window_limit:
            return 0.0
        oldest = self.timestamps[0]
        return max(0.0, oldest + self.config.rolling_window - self._clock())

    def time_until_short_interval_frees(self) -> float:
        """Seconds until the short interval holds fewer than ``limit_per_10_seconds`` requests."""
        if self.requests_in_short_interval() < self.config.limit_per_10_seconds:
            return 0.0
        oldest = self.oldest_request_timestamp_older_than(self.config.short_interval)
        if oldest is None:
            return 0.0
        return max(0.0, oldest + self.config.short_interval - self._clock())

    def oldest_request_timestamp(self) -> Optional[float]:
        """Timestamp of the oldest request in the rolling window."""
        self._trim(self._clock())
        return self.timestamps[0] if self.timestamps else None

    def oldest_request_timestamp_older_than(self, max_age: float) -> Optional[float]:
        """
        Timestamp of the oldest request younger than ``max_age`` seconds.

        Used with the short interval to find when the burst window opens up
        again, e.g. ``oldest_request_timestamp_older_than(10)``.
        """
        now = self._clock()
        self._trim(now)
        for ts in self.timestamps:
            if now - ts < max_age:
                return ts
        return None

    async def reset(self) -> None:
        """Forget every recorded request."""
        async with self.lock:
            self.timestamps.clear()
            self.last_request_time = None
            logger.info("Rate limiter reset")

    def get_stats(self) -> Dict[str, Any]:
        """Get rate limiter statistics."""
        return {
            "enabled": self._enabled,
            "min_spacing": self.config.min_spacing,
            "requests_in_window": self.requests_in_window(),
            "requests_in_short_interval": self.requests_in_short_interval(),
            "rolling_window_limit": self.config.rolling_window_limit,
            "remaining_calls": self.remaining_calls(),
            "last_request_time": self.last_request_time,
        }
