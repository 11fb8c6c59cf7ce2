from dealsense.routes.deps import RateLimiter


def test_fixed_window_limits_and_resets() -> None:
    limiter = RateLimiter(max_requests=2, window_sec=60)

    assert limiter.hit("1.2.3.4", now=0) is None
    assert limiter.hit("1.2.3.4", now=1) is None
    assert limiter.hit("1.2.3.4", now=2) == 58
    assert limiter.hit("5.6.7.8", now=2) is None
    assert limiter.hit("1.2.3.4", now=61) is None


def test_expired_buckets_are_evicted_past_max_keys() -> None:
    limiter = RateLimiter(max_requests=5, window_sec=10, max_keys=3)
    for i in range(3):
        limiter.hit(f"10.0.0.{i}", now=0)
    assert len(limiter._buckets) == 3

    limiter.hit("10.0.0.99", now=20)

    assert list(limiter._buckets) == ["10.0.0.99"]


def test_live_buckets_survive_eviction() -> None:
    limiter = RateLimiter(max_requests=1, window_sec=10, max_keys=2)
    limiter.hit("old", now=0)
    limiter.hit("busy", now=5)

    limiter.hit("new", now=12)

    assert set(limiter._buckets) == {"busy", "new"}
    assert limiter.hit("busy", now=13) == 2
