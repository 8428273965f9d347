import fakeredis
import pytest

from jeeforces.config import Settings
from jeeforces.services.rate_limiter import FixedWindowRateLimiter, build_rate_limiters


class FakeClock:
    def __init__(self, now: float):
        self.now = now

    def __call__(self) -> float:
        return self.now


def _limiter(redis_client, clock, limit=5, window=300, prefix="general"):
    return FixedWindowRateLimiter(redis_client, limit=limit, window_seconds=window, prefix=prefix, clock=clock)


def test_sixth_action_in_window_is_rejected():
    clock = FakeClock(1000.0)
    limiter = _limiter(fakeredis.FakeRedis(), clock)

    results = [limiter.check("10.0.0.1") for _ in range(6)]

    assert [r.allowed for r in results] == [True] * 5 + [False]
    assert [r.remaining for r in results] == [4, 3, 2, 1, 0, 0]
    assert results[-1].reset_at == 1200.0


def test_next_window_starts_fresh():
    clock = FakeClock(1000.0)
    limiter = _limiter(fakeredis.FakeRedis(), clock)
    for _ in range(5):
        assert limiter.allow("user-1")
    assert not limiter.allow("user-1")

    clock.now = 1200.0
    assert limiter.allow("user-1")


def test_keys_are_counted_separately():
    clock = FakeClock(50.0)
    limiter = _limiter(fakeredis.FakeRedis(), clock, limit=1, window=60)
    assert limiter.allow("a")
    assert limiter.allow("b")
    assert not limiter.allow("a")


def test_counters_are_shared_between_instances():
    redis_client = fakeredis.FakeRedis()
    clock = FakeClock(10.0)
    first = _limiter(redis_client, clock, limit=1, window=60)
    second = _limiter(redis_client, clock, limit=1, window=60)

    assert first.allow("10.0.0.9")
    assert not second.allow("10.0.0.9")


def test_bucket_has_ttl():
    redis_client = fakeredis.FakeRedis()
    limiter = _limiter(redis_client, FakeClock(1000.0))
    limiter.check("k")
    ttl = redis_client.ttl("ratelimit:general:k:3")
    assert 0 < ttl <= 301


def test_configured_limiters():
    limiters = build_rate_limiters(fakeredis.FakeRedis(), Settings())
    assert (limiters.general.limit, limiters.general.window_seconds) == (5, 300)
    assert (limiters.agent.limit, limiters.agent.window_seconds) == (1, 60)


def test_rejects_non_positive_configuration():
    with pytest.raises(ValueError):
        _limiter(fakeredis.FakeRedis(), FakeClock(0.0), limit=0)
