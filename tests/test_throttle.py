"""Tests for the request rate limiter."""
import pytest

from node_atlas.ingest.throttle import RateLimiter


class FakeClock:

    def __init__(self, now: float = 100.0):
        self.now = now
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.mark.asyncio
class TestRateLimiter:

    async def test_first_request_is_immediate(self):
        clock = FakeClock()
        limiter = RateLimiter(1.0, clock=clock, sleep=clock.sleep)

        await limiter.wait()

        assert clock.sleeps == []

    async def test_back_to_back_requests_are_spaced(self):
        clock = FakeClock()
        limiter = RateLimiter(1.0, clock=clock, sleep=clock.sleep)

        for _ in range(3):
            await limiter.wait()

        assert clock.sleeps == [1.0, 1.0]
        assert clock.now == 102.0

    async def test_only_remaining_interval_is_slept(self):
        clock = FakeClock()
        limiter = RateLimiter(1.0, clock=clock, sleep=clock.sleep)

        await limiter.wait()
        clock.now += 0.75
        await limiter.wait()

        assert clock.sleeps == [pytest.approx(0.25)]

    async def test_no_sleep_after_long_gap(self):
        clock = FakeClock()
        limiter = RateLimiter(1.0, clock=clock, sleep=clock.sleep)

        await limiter.wait()
        clock.now += 5
        await limiter.wait()

        assert clock.sleeps == []

    async def test_zero_interval_never_sleeps(self):
        clock = FakeClock()
        limiter = RateLimiter(0, clock=clock, sleep=clock.sleep)

        await limiter.wait()
        await limiter.wait()

        assert clock.sleeps == []


def test_negative_interval_rejected():
    with pytest.raises(ValueError):
        RateLimiter(-1)
