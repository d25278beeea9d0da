"""Politeness delay for outbound requests to statute publishers."""

import logging
import time
from collections import deque
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class PolitenessLimiter:
    """Keeps a minimum gap between outbound requests and backs off on HTTP 429.

    State publishers are small sites with no published limits, so the floor is
    fixed (``min_delay``) rather than adapted downwards. A rate-limit response
    raises the delay to the server's Retry-After, or doubles it, and sustained
    success walks it back towards the floor.
    """

    def __init__(
        self,
        min_delay: float = 2.0,
        max_delay: float = 300.0,
        success_reduction_factor: float = 0.9,
        failure_increase_factor: float = 2.0,
    ):
        """
        Initialize the limiter.

        Args:
            min_delay: Minimum gap between requests in seconds
            max_delay: Maximum gap between requests in seconds
            success_reduction_factor: Factor applied to an elevated delay after success (0-1)
            failure_increase_factor: Factor applied to the delay after a rate limit
        """
        self.rate_limit_events: deque[Dict[str, Any]] = deque(maxlen=100)
        self.current_delay = min_delay
        self.min_delay = min_delay
        self.max_delay = max_delay
        self.success_reduction_factor = success_reduction_factor
        self.failure_increase_factor = failure_increase_factor
        self._last_request: Optional[float] = None

    def wait(self) -> float:
        """Sleep until ``current_delay`` has passed since the previous request.

        Returns:
            The number of seconds slept
        """
        slept = 0.0
        if self._last_request is not None:
            remaining = self.current_delay - (time.monotonic() - self._last_request)
            if remaining > 0:
                logger.debug(f"Politeness delay: {remaining:.2f}s")
                time.sleep(remaining)
                slept = remaining
        self._last_request = time.monotonic()
        return slept

    def record_success(self) -> None:
        if self.current_delay > self.min_delay:
            self.current_delay = max(
                self.current_delay * self.success_reduction_factor, self.min_delay
            )

    def record_rate_limit(self, retry_after: Optional[int] = None) -> None:
        """Record a rate limit event and increase delay."""
        self.rate_limit_events.append({"time": time.time(), "retry_after": retry_after})

        if retry_after:
            self.current_delay = min(max(float(retry_after), self.min_delay), self.max_delay)
        else:
            self.current_delay = min(
                self.current_delay * self.failure_increase_factor, self.max_delay
            )

        logger.info(
            f"Rate limit recorded. New delay: {self.current_delay}s",
            extra={
                "rate_limiter_delay": self.current_delay,
                "retry_after": retry_after,
                "recent_rate_limits": len(self.rate_limit_events),
            },
        )

    def get_current_delay(self) -> float:
        return self.current_delay
