"""
Tests for the fixed-window rate limiter.
"""

import pytest

from resume.rate_limit import FixedWindowRateLimiter, client_identity


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.mark.unit
def test_allows_up_to_max_then_rejects(clock):
    limiter = FixedWindowRateLimiter(window_ms=60_000, max_requests=5, clock=clock)

    results = [limiter.check("1.2.3.4") for _ in range(6)]
    assert results == [True] * 5 + [False]


@pytest.mark.unit
def test_rejections_do_not_extend_the_count(clock):
    limiter = FixedWindowRateLimiter(window_ms=1000, max_requests=2, clock=clock)
    limiter.check("c")
    limiter.check("c")
    for _ in range(10):
        assert limiter.check("c") is False

    clock.now = 1001
    assert limiter.check("c") is True


@pytest.mark.unit
def test_window_resets_after_expiry(clock):
    limiter = FixedWindowRateLimiter(window_ms=60_000, max_requests=1, clock=clock)
    assert limiter.check("c") is True
    assert limiter.check("c") is False

    # Still inside the window at exactly the reset time
    clock.now = 60_000
    assert limiter.check("c") is False

    clock.now = 60_001
    assert limiter.check("c") is True


@pytest.mark.unit
def test_clients_are_counted_separately(clock):
    limiter = FixedWindowRateLimiter(window_ms=1000, max_requests=1, clock=clock)
    assert limiter.check("a") is True
    assert limiter.check("b") is True
    assert limiter.check("a") is False


@pytest.mark.unit
def test_per_call_overrides(clock):
    limiter = FixedWindowRateLimiter(window_ms=1000, max_requests=1, clock=clock)
    assert limiter.check("c", max_requests=3) is True
    assert limiter.check("c", max_requests=3) is True
    assert limiter.check("c", max_requests=3) is True
    assert limiter.check("c", max_requests=3) is False


@pytest.mark.unit
def test_stale_windows_are_swept(clock):
    limiter = FixedWindowRateLimiter(window_ms=100, max_requests=5, clock=clock)
    limiter.check("a")
    limiter.check("b")
    assert len(limiter) == 2

    clock.now = 500
    limiter.check("c")
    assert len(limiter) == 1


@pytest.mark.unit
def test_retry_after_rounds_up_to_seconds(clock):
    limiter = FixedWindowRateLimiter(window_ms=60_000, max_requests=1, clock=clock)
    limiter.check("c")

    clock.now = 500
    assert limiter.retry_after("c") == 60
    clock.now = 59_100
    assert limiter.retry_after("c") == 1
    assert limiter.retry_after("unknown-client") == 0


@pytest.mark.unit
def test_reset_forgets_every_client(clock):
    limiter = FixedWindowRateLimiter(window_ms=1000, max_requests=1, clock=clock)
    limiter.check("c")
    limiter.reset()
    assert limiter.check("c") is True


@pytest.mark.unit
@pytest.mark.parametrize("headers,remote,expected", [
    ({"x-forwarded-for": "203.0.113.7, 10.0.0.1"}, "10.0.0.1", "203.0.113.7"),
    ({"x-forwarded-for": " 198.51.100.2 "}, None, "198.51.100.2"),
    ({}, "192.0.2.1", "192.0.2.1"),
    ({"x-forwarded-for": ""}, "192.0.2.1", "192.0.2.1"),
    ({}, None, "unknown"),
])
def test_client_identity(headers, remote, expected):
    assert client_identity(headers, remote) == expected
