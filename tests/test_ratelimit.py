"""Tests for rate limiting."""

import threading
import time

from config import RunConfig
from models import ZeroInit
from ratelimit import RateLimiter


class TestRateLimiter:
    """Tests for RateLimiter class."""

    def test_allows_single_request(self):
        limiter = RateLimiter(max_concurrent=1, qps=100)

        with limiter.acquire():
            pass

    def test_unlimited_rate(self):
        limiter = RateLimiter(max_concurrent=1, qps=0)

        start = time.monotonic()
        for _ in range(20):
            with limiter.acquire():
                pass

        assert time.monotonic() - start < 0.5

    def test_enforces_concurrent_limit(self):
        limiter = RateLimiter(max_concurrent=2, qps=1000)
        active_count = 0
        max_active = 0
        lock = threading.Lock()

        def worker():
            nonlocal active_count, max_active
            with limiter.acquire():
                with lock:
                    active_count += 1
                    max_active = max(max_active, active_count)
                time.sleep(0.05)
                with lock:
                    active_count -= 1

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert max_active <= 2

    def test_enforces_rate_limit(self):
        # 10 requests per second = 100ms between requests
        limiter = RateLimiter(max_concurrent=1, qps=10)

        start = time.monotonic()
        for _ in range(3):
            with limiter.acquire():
                pass
        elapsed = time.monotonic() - start

        assert elapsed >= 0.18  # Allow small tolerance

    def test_repr(self):
        limiter = RateLimiter(max_concurrent=4, qps=5)

        assert repr(limiter) == "RateLimiter(max_concurrent=4, qps=5)"

    def test_from_config(self):
        config = RunConfig(intent=ZeroInit("fast"), workers=3, qps=20.0)

        limiter = RateLimiter.from_config(config)

        assert limiter.max_concurrent == 3
        assert limiter.qps == 20.0
        assert limiter.unlimited is False

    def test_zero_qps_is_unlimited(self):
        assert RateLimiter(qps=0).unlimited is True
