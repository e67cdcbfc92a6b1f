"""In-memory sliding-window rate limiter for the HTTP boundary."""

from __future__ import annotations

import math
import time
from collections import deque
from typing import TYPE_CHECKING, ClassVar, NamedTuple

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable


__all__: list[str] = ["RateLimitDecision", "SlidingWindowRateLimiter"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class RateLimitDecision(NamedTuple):
    allowed: bool
    remaining: int
    retry_after_sec: float = 0.0

    @property
    def retry_after_header(self) -> str:
        """Whole seconds for the ``Retry-After`` header, at least 1."""
        return str(max(1, math.ceil(self.retry_after_sec)))


class SlidingWindowRateLimiter:
    """Allows at most ``max_requests`` per client key within any ``window_sec`` long window.

    Each key keeps the timestamps of its admitted requests. Keys whose newest request left the window are swept
    at most once per ``CLEANUP_INTERVAL_SEC``.
    """

    CLEANUP_INTERVAL_SEC: ClassVar[float] = 5 * 60.0

    def __init__(
        self, max_requests: int, window_sec: float, *, clock: Callable[[], float] = time.monotonic
    ) -> None:
        if max_requests <= 0:
            msg: str = f"max_requests must be positive: {max_requests}"
            raise ValueError(msg)
        if window_sec <= 0:
            msg = f"window_sec must be positive: {window_sec}"
            raise ValueError(msg)
        self.max_requests: int = max_requests
        self.window_sec: float = window_sec
        self._clock: Callable[[], float] = clock
        self._requests: dict[str, deque[float]] = {}
        self._last_cleanup: float = clock()

    def __len__(self) -> int:
        return len(self._requests)

    def check(self, key: str) -> RateLimitDecision:
        """Record a request for the key if it is within the limit.

        Args:
            key (str): Client key, usually the peer address.

        Returns:
            RateLimitDecision: Whether the request is admitted, and when to retry if it is not.
        """
        now: float = self._clock()
        self._maybe_cleanup(now)

        timestamps: deque[float] = self._requests.setdefault(key, deque())
        window_start: float = now - self.window_sec
        while timestamps and timestamps[0] <= window_start:
            timestamps.popleft()

        if len(timestamps) >= self.max_requests:
            retry_after: float = timestamps[0] + self.window_sec - now
            logger.info("Rate limit exceeded for '%s' (retry after %.1fs)", key, retry_after)
            return RateLimitDecision(allowed=False, remaining=0, retry_after_sec=retry_after)

        timestamps.append(now)
        return RateLimitDecision(allowed=True, remaining=self.max_requests - len(timestamps))

    def _maybe_cleanup(self, now: float) -> None:
        if now - self._last_cleanup < self.CLEANUP_INTERVAL_SEC:
            return
        self._last_cleanup = now
        window_start: float = now - self.window_sec
        stale: list[str] = [key for key, stamps in self._requests.items() if not stamps or stamps[-1] <= window_start]
        for key in stale:
            del self._requests[key]
        if stale:
            logger.debug("Rate limiter swept %d idle client(s)", len(stale))

    def reset(self) -> None:
        self._requests.clear()
