import asyncio
import time

import pytest

from concert_query.core.rate_limit import RateLimiter


@pytest.mark.asyncio
async def test_wait_spaces_consecutive_requests():
    limiter = RateLimiter(0.05)

    await limiter.wait()
    first = time.monotonic()
    await limiter.wait()
    second = time.monotonic()

    assert second - first >= 0.045


@pytest.mark.asyncio
async def test_concurrent_waits_are_serialized():
    limiter = RateLimiter(0.05)
    started = []

    async def request():
        await limiter.wait()
        started.append(time.monotonic())

    await asyncio.gather(*(request() for _ in range(3)))

    gaps = [b - a for a, b in zip(started, started[1:])]
    assert all(gap >= 0.045 for gap in gaps)


@pytest.mark.asyncio
async def test_waiting_does_not_block_the_event_loop():
    limiter = RateLimiter(0.2)
    await limiter.wait()

    ticks = 0

    async def ticker():
        nonlocal ticks
        while True:
            ticks += 1
            await asyncio.sleep(0.01)

    task = asyncio.create_task(ticker())
    await limiter.wait()
    task.cancel()

    assert ticks >= 5


@pytest.mark.asyncio
async def test_zero_interval_returns_immediately():
    limiter = RateLimiter(0)
    start = time.monotonic()

    for _ in range(20):
        await limiter.wait()

    assert time.monotonic() - start < 0.05
