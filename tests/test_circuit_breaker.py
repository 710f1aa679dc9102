import asyncio

import pytest

from speakers.resilience import CircuitBreaker, CircuitBreakerOpenError, CircuitState


async def succeed():
    return "ok"


async def fail():
    raise RuntimeError("boom")


def make_breaker(clock, **kwargs) -> CircuitBreaker:
    options = {
        "request_volume_threshold": 2,
        "failure_ratio": 0.5,
        "delay": 5.0,
        "success_threshold": 2,
    }
    options.update(kwargs)
    return CircuitBreaker("search", clock=clock, **options)


async def trip(breaker: CircuitBreaker) -> None:
    for _ in range(breaker.request_volume_threshold):
        with pytest.raises(RuntimeError):
            await breaker.call(fail)


class TestClosed:
    async def test_stays_closed_until_window_is_full(self, clock):
        breaker = make_breaker(clock)
        with pytest.raises(RuntimeError):
            await breaker.call(fail)
        assert breaker.state == CircuitState.CLOSED

    async def test_opens_when_failure_ratio_is_reached(self, clock):
        breaker = make_breaker(clock)
        assert await breaker.call(succeed) == "ok"
        with pytest.raises(RuntimeError):
            await breaker.call(fail)
        assert breaker.state == CircuitState.OPEN

    async def test_stays_closed_below_failure_ratio(self, clock):
        breaker = make_breaker(clock, request_volume_threshold=4)
        for func in (succeed, succeed, succeed):
            await breaker.call(func)
        with pytest.raises(RuntimeError):
            await breaker.call(fail)
        assert breaker.state == CircuitState.CLOSED

    async def test_window_rolls_over_old_outcomes(self, clock):
        breaker = make_breaker(clock, request_volume_threshold=3, failure_ratio=1.0)
        with pytest.raises(RuntimeError):
            await breaker.call(fail)
        await breaker.call(succeed)
        with pytest.raises(RuntimeError):
            await breaker.call(fail)
        with pytest.raises(RuntimeError):
            await breaker.call(fail)
        # window is now [success, fail, fail]
        assert breaker.state == CircuitState.CLOSED
        with pytest.raises(RuntimeError):
            await breaker.call(fail)
        assert breaker.state == CircuitState.OPEN


class TestOpen:
    async def test_rejects_without_calling(self, clock):
        breaker = make_breaker(clock)
        await trip(breaker)
        calls = []

        async def tracked():
            calls.append(1)

        with pytest.raises(CircuitBreakerOpenError):
            await breaker.call(tracked)
        assert calls == []

    async def test_moves_to_half_open_after_delay(self, clock):
        breaker = make_breaker(clock)
        await trip(breaker)
        clock.advance(4)
        assert breaker.state == CircuitState.OPEN
        clock.advance(1)
        assert breaker.state == CircuitState.HALF_OPEN


class TestHalfOpen:
    async def test_closes_after_success_threshold(self, clock):
        breaker = make_breaker(clock)
        await trip(breaker)
        clock.advance(5)
        await breaker.call(succeed)
        assert breaker.state == CircuitState.HALF_OPEN
        await breaker.call(succeed)
        assert breaker.state == CircuitState.CLOSED

    async def test_failure_reopens_and_restarts_delay(self, clock):
        breaker = make_breaker(clock)
        await trip(breaker)
        clock.advance(5)
        await breaker.call(succeed)
        with pytest.raises(RuntimeError):
            await breaker.call(fail)
        assert breaker.state == CircuitState.OPEN
        clock.advance(4)
        with pytest.raises(CircuitBreakerOpenError):
            await breaker.call(succeed)

    async def test_limits_concurrent_trial_calls(self, clock):
        breaker = make_breaker(clock, success_threshold=1)
        await trip(breaker)
        clock.advance(5)
        release = asyncio.Event()

        async def slow():
            await release.wait()
            return "slow"

        trial = asyncio.create_task(breaker.call(slow))
        await asyncio.sleep(0)
        with pytest.raises(CircuitBreakerOpenError):
            await breaker.call(succeed)
        release.set()
        assert await trial == "slow"
        assert breaker.state == CircuitState.CLOSED

    async def test_trial_from_earlier_half_open_period_is_ignored(self, clock):
        breaker = make_breaker(clock)
        await trip(breaker)
        clock.advance(5)
        release = asyncio.Event()

        async def slow():
            await release.wait()
            return "slow"

        stale = asyncio.create_task(breaker.call(slow))
        await asyncio.sleep(0)
        with pytest.raises(RuntimeError):
            await breaker.call(fail)
        assert breaker.state == CircuitState.OPEN

        clock.advance(5)
        await breaker.call(succeed)
        release.set()
        assert await stale == "slow"
        # One fresh success out of two; the earlier trial does not count.
        assert breaker.state == CircuitState.HALF_OPEN

        # Both trial slots are still free, and no more than that.
        held = asyncio.Event()

        async def hold():
            await held.wait()

        trials = [asyncio.create_task(breaker.call(hold)) for _ in range(2)]
        await asyncio.sleep(0)
        with pytest.raises(CircuitBreakerOpenError):
            await breaker.call(succeed)
        held.set()
        await asyncio.gather(*trials)
        assert breaker.state == CircuitState.CLOSED


def test_status_snapshot(clock):
    breaker = make_breaker(clock)
    status = breaker.status()
    assert status["name"] == "search"
    assert status["state"] == "closed"
    assert status["request_volume_threshold"] == 2
    assert status["delay_s"] == 5.0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"request_volume_threshold": 0},
        {"failure_ratio": 1.5},
        {"success_threshold": 0},
    ],
)
def test_rejects_invalid_configuration(kwargs):
    with pytest.raises(ValueError):
        CircuitBreaker("bad", **kwargs)
