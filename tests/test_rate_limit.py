from giftdraw.services.rate_limit import SlidingWindowLimiter


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_limiter_blocks_after_max_calls():
    clock = FakeClock()
    limiter = SlidingWindowLimiter(max_calls=2, period_seconds=10, clock=clock)
    assert limiter.hit("client").allowed
    assert limiter.hit("client").allowed
    blocked = limiter.hit("client")
    assert not blocked.allowed
    assert blocked.retry_after == 10


def test_limiter_window_slides():
    clock = FakeClock()
    limiter = SlidingWindowLimiter(max_calls=1, period_seconds=10, clock=clock)
    assert limiter.hit("client").allowed
    clock.now += 4
    assert limiter.hit("client").retry_after == 6
    clock.now += 7
    assert limiter.hit("client").allowed


def test_limiter_keys_are_independent():
    limiter = SlidingWindowLimiter(max_calls=1, period_seconds=10, clock=FakeClock())
    assert limiter.hit("a").allowed
    assert limiter.hit("b").allowed
    assert not limiter.hit("a").allowed
