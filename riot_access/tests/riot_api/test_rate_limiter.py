"""
Tests for the rate limiter.
"""

import asyncio

import pytest

from riot_access.riot_api.errors import RateLimitTimeoutError
from riot_access.riot_api.models import RateLimitConfig
from riot_access.riot_api.rate_limiter import RateLimiter


class FakeClock:
    """Manually advanced clock whose sleep moves time forward."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


def make_limiter(clock, per_10s=10, per_10m=500, enabled=True):
    config = RateLimitConfig(limit_per_10_seconds=per_10s, limit_per_10_minutes=per_10m)
    return RateLimiter(config, enabled=enabled, clock=clock, sleep=clock.sleep)


class TestRateLimiter:
    """Test cases for RateLimiter."""

    @pytest.mark.asyncio
    async def test_first_request_passes_immediately(self):
        """Test that an idle limiter does not wait."""
        clock = FakeClock(100.0)
        limiter = make_limiter(clock)

        recorded = await limiter.acquire_and_record()

        assert recorded == 100.0
        assert clock.sleeps == []
        assert limiter.last_request_time == 100.0

    @pytest.mark.asyncio
    async def test_spacing_between_requests(self):
        """Test that consecutive requests are at least 10/N seconds apart."""
        clock = FakeClock()
        limiter = make_limiter(clock, per_10s=10)

        stamps = [await limiter.acquire_and_record() for _ in range(3)]

        assert stamps == [0.0, 1.0, 2.0]
        assert clock.now - 0.0 >= 2.0

    @pytest.mark.asyncio
    async def test_spacing_with_concurrent_callers(self):
        """Test that concurrent callers pass the gate one at a time."""
        clock = FakeClock()
        limiter = make_limiter(clock, per_10s=5)

        stamps = await asyncio.gather(*(limiter.acquire_and_record() for _ in range(4)))

        ordered = sorted(stamps)
        gaps = [b - a for a, b in zip(ordered, ordered[1:])]
        assert all(gap >= 2.0 for gap in gaps)
        assert len(limiter.timestamps) == 4

    @pytest.mark.asyncio
    async def test_partial_wait(self):
        """Test that only the remaining spacing is waited."""
        clock = FakeClock()
        limiter = make_limiter(clock, per_10s=10)

        await limiter.acquire_and_record()
        clock.now = 0.4
        await limiter.acquire_and_record()

        assert clock.sleeps == [pytest.approx(0.6)]

    @pytest.mark.asyncio
    async def test_disabled_records_without_waiting(self):
        """Test that a disabled limiter still counts calls."""
        clock = FakeClock()
        limiter = make_limiter(clock, enabled=False)

        for _ in range(3):
            await limiter.acquire_and_record()

        assert clock.sleeps == []
        assert limiter.requests_in_window() == 3
        assert limiter.remaining_calls() == 497

    @pytest.mark.asyncio
    async def test_toggle_enabled(self):
        """Test switching the spacing wait back on."""
        clock = FakeClock()
        limiter = make_limiter(clock, enabled=False)
        await limiter.acquire_and_record()

        limiter.set_enabled(True)
        assert limiter.enabled
        await limiter.acquire_and_record()

        assert clock.sleeps == [1.0]

    @pytest.mark.asyncio
    async def test_rolling_window_trims_old_entries(self):
        """Test that entries leave the window once they are window-old."""
        clock = FakeClock()
        limiter = make_limiter(clock)
        await limiter.acquire_and_record()

        clock.now = 599.9
        assert limiter.requests_in_window() == 1

        clock.now = 600.0
        assert limiter.requests_in_window() == 0
        assert limiter.oldest_request_timestamp() is None

    @pytest.mark.asyncio
    async def test_rolling_window_never_blocks(self):
        """Test that a full window does not delay the next call."""
        clock = FakeClock()
        limiter = make_limiter(clock, per_10s=10, per_10m=2)

        for _ in range(3):
            await limiter.acquire_and_record()

        # Only spacing waits happened
        assert clock.sleeps == [1.0, 1.0]
        assert limiter.remaining_calls() == 0

    @pytest.mark.asyncio
    async def test_time_until_slot_frees(self):
        """Test the wait hint for a full rolling window."""
        clock = FakeClock()
        limiter = make_limiter(clock, per_10m=3, enabled=False)
        for t in (0.0, 1.0, 2.0):
            clock.now = t
            await limiter.acquire_and_record()

        clock.now = 10.0
        assert limiter.time_until_slot_frees() == 590.0

        limiter_with_room = make_limiter(FakeClock(), per_10m=3)
        assert limiter_with_room.time_until_slot_frees() == 0.0

    @pytest.mark.asyncio
    async def test_oldest_timestamp_helpers(self):
        """Test the oldest timestamp lookups."""
        clock = FakeClock()
        limiter = make_limiter(clock, enabled=False)
        for t in (0.0, 5.0, 12.0):
            clock.now = t
            await limiter.acquire_and_record()

        clock.now = 15.0
        assert limiter.oldest_request_timestamp() == 0.0
        assert limiter.oldest_request_timestamp_older_than(10.0) == 12.0
        assert limiter.oldest_request_timestamp_older_than(1.0) is None
        assert limiter.requests_in_short_interval() == 1

    @pytest.mark.asyncio
    async def test_short_interval_boundary_is_consistent(self):
        """Test that an entry exactly one interval old is outside for every helper."""
        clock = FakeClock()
        limiter = make_limiter(clock, enabled=False)
        await limiter.acquire_and_record()

        clock.now = 9.5
        assert limiter.requests_in_short_interval() == 1
        assert limiter.oldest_request_timestamp_older_than(10.0) == 0.0

        clock.now = 10.0
        assert limiter.requests_in_short_interval() == 0
        assert limiter.oldest_request_timestamp_older_than(10.0) is None

    @pytest.mark.asyncio
    async def test_time_until_short_interval_frees(self):
        """Test the wait hint for a full short interval."""
        clock = FakeClock()
        limiter = make_limiter(clock, per_10s=2, enabled=False)
        for t in (0.0, 3.0):
            clock.now = t
            await limiter.acquire_and_record()

        clock.now = 4.0
        assert limiter.time_until_short_interval_frees() == 6.0

        clock.now = 10.0
        assert limiter.time_until_short_interval_frees() == 0.0

    def test_time_until_next_request(self):
        """Test the spacing hint."""
        clock = FakeClock()
        limiter = make_limiter(clock, per_10s=4)
        assert limiter.time_until_next_request() == 0.0

        limiter.last_request_time = 0.0
        clock.now = 1.0
        assert limiter.time_until_next_request() == 1.5

    @pytest.mark.asyncio
    async def test_timeout_records_nothing(self):
        """Test that a caller giving up at the gate leaves no record."""
        config = RateLimitConfig(limit_per_10_seconds=1, limit_per_10_minutes=500)
        limiter = RateLimiter(config)

        await limiter.acquire_and_record()
        with pytest.raises(RateLimitTimeoutError):
            await limiter.acquire_and_record(timeout=0.05)

        assert len(limiter.timestamps) == 1
        assert not limiter.lock.locked()

    @pytest.mark.asyncio
    async def test_cancelled_waiter_records_nothing(self):
        """Test that a task cancelled while waiting at the gate leaves no record."""
        config = RateLimitConfig(limit_per_10_seconds=1, limit_per_10_minutes=500)
        limiter = RateLimiter(config)
        await limiter.acquire_and_record()

        task = asyncio.create_task(limiter.acquire_and_record())
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert len(limiter.timestamps) == 1
        assert limiter.requests_in_window() == 1
        assert not limiter.lock.locked()

    @pytest.mark.asyncio
    async def test_reset(self):
        """Test forgetting recorded requests."""
        clock = FakeClock()
        limiter = make_limiter(clock)
        await limiter.acquire_and_record()

        await limiter.reset()

        assert limiter.last_request_time is None
        assert limiter.requests_in_window() == 0
        assert limiter.time_until_next_request() == 0.0

    @pytest.mark.asyncio
    async def test_get_stats(self):
        """Test rate limiter statistics."""
        clock = FakeClock()
        limiter = make_limiter(clock, per_10s=10, per_10m=100)
        await limiter.acquire_and_record()

        stats = limiter.get_stats()
        assert stats["enabled"] is True
        assert stats["min_spacing"] == 1.0
        assert stats["requests_in_window"] == 1
        assert stats["remaining_calls"] == 99
