from odonto.services.rate_limit import SimpleRateLimiter


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def test_blocks_after_max_attempts_until_window_passes():
    clock = FakeClock()
    limiter = SimpleRateLimiter(max_events=2, window_seconds=60, clock=clock)
    assert limiter.allow("a@example.com")
    clock.now += 10
    assert limiter.allow("a@example.com")
    assert not limiter.allow("a@example.com")
    assert limiter.retry_after("a@example.com") == 50

    clock.now += 50
    assert limiter.retry_after("a@example.com") == 0
    assert limiter.allow("a@example.com")


def test_keys_are_independent():
    limiter = SimpleRateLimiter(max_events=1, window_seconds=60, clock=FakeClock())
    assert limiter.allow("10.0.0.1")
    assert not limiter.allow("10.0.0.1")
    assert limiter.allow("10.0.0.2")
    assert limiter.retry_after("10.0.0.2") == 60


def test_reset_clears_history():
    limiter = SimpleRateLimiter(max_events=1, window_seconds=60, clock=FakeClock())
    assert limiter.allow("key")
    limiter.reset()
    assert limiter.allow("key")
