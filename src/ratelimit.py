"""Client-side throttling of ResourceQuota patch requests."""

import logging
import threading
import time
from contextlib import contextmanager
from typing import Generator

from config import RunConfig
from metrics import RATE_LIMIT_WAIT_SECONDS

logger = logging.getLogger(__name__)


class RateLimiter:
    """Caps in-flight patches and spaces them to a QPS budget.

    The semaphore bounds concurrent requests to the worker count; the
    interval keeps a cluster-wide run under the API server's fair share,
    the same role client-go's QPS setting plays.
    """

    def __init__(self, max_concurrent: int = 1, qps: float = 5.0) -> None:
        """Initialize rate limiter.

        Args:
            max_concurrent: Maximum number of in-flight patch requests
            qps: Patch requests per second, 0 for unlimited
        """
        self._semaphore = threading.Semaphore(max_concurrent)
        self._min_interval = 1.0 / qps if qps > 0 else 0.0
        self._next_slot = 0.0
        self._lock = threading.Lock()
        self.max_concurrent = max_concurrent
        self.qps = qps

        logger.debug("Rate limiter initialized: %r", self)

    @classmethod
    def from_config(cls, config: RunConfig) -> "RateLimiter":
        """One in-flight request per worker, spaced to the configured QPS."""
        return cls(max_concurrent=config.workers, qps=config.qps)

    @property
    def unlimited(self) -> bool:
        return self._min_interval == 0

    def _reserve_slot(self) -> float:
        """Reserve the next send time and return how long to wait for it."""
        with self._lock:
            now = time.monotonic()
            slot = max(now, self._next_slot)
            self._next_slot = slot + self._min_interval
            return slot - now

    @contextmanager
    def acquire(self) -> Generator[None, None, None]:
        """Block until a patch request may be sent.

        Usage:
            with rate_limiter.acquire():
                api.patch_namespaced_resource_quota(...)
        """
        wait_start = time.monotonic()
        self._semaphore.acquire()
        try:
            if not self.unlimited:
                delay = self._reserve_slot()
                if delay > 0:
                    time.sleep(delay)

            waited = time.monotonic() - wait_start
            if waited > 0.001:
                RATE_LIMIT_WAIT_SECONDS.observe(waited)

            yield
        finally:
            self._semaphore.release()

    def __repr__(self) -> str:
        return f"RateLimiter(max_concurrent={self.max_concurrent}, qps={self.qps})"
