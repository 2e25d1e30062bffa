"""
Request rate limiter for the suggestion service.

This module implements a sliding window rate limiter that restricts calls to
the remote suggestion service to a maximum number of requests per window
(30 per minute by default).
"""

import json
import logging
import time
from collections import deque
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class RequestRateLimiter:
    """
    Rate limiter using sliding window approach.

    Keeps the timestamps of accepted requests within the last window and
    rejects new requests while the window is full.
    """

    def __init__(
        self,
        max_requests: int = 30,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize rate limiter.

        Args:
            max_requests: Maximum requests accepted per window (default: 30)
            window_seconds: Window size in seconds (default: 60)
            clock: Time source, injectable for tests
        """
        if max_requests < 1:
            raise ValueError(f"max_requests must be at least 1, got {max_requests}")

        if window_seconds <= 0:
            raise ValueError(f"window_seconds must be positive, got {window_seconds}")

        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._request_times = deque()
        self.accepted_count = 0
        self.rejected_count = 0

    def try_acquire(self) -> bool:
        """
        Record a request if the window has room.

        Returns:
            True if the request may proceed, False if rate limited
        """
        now = self.clock()

        # Drop timestamps that left the window
        while self._request_times and now - self._request_times[0] >= self.window_seconds:
            self._request_times.popleft()

        if len(self._request_times) >= self.max_requests:
            self.rejected_count += 1
            logger.warning(json.dumps({
                'event': 'suggestion_rate_limited',
                'max_requests': self.max_requests,
                'window_seconds': self.window_seconds,
                'retry_after_seconds': round(self.retry_after(now), 2)
            }))
            return False

        self._request_times.append(now)
        self.accepted_count += 1
        return True

    def retry_after(self, now: Optional[float] = None) -> float:
        """
        Seconds until the window has room again.

        Args:
            now: Current time on the limiter clock (defaults to clock())

        Returns:
            0.0 if a request would be accepted now
        """
        if len(self._request_times) < self.max_requests:
            return 0.0

        if now is None:
            now = self.clock()

        return max(0.0, self._request_times[0] + self.window_seconds - now)

    def get_statistics(self) -> dict:
        """
        Get rate limiter statistics.

        Returns:
            Dictionary with accepted_count, rejected_count and window usage
        """
        return {
            'accepted_count': self.accepted_count,
            'rejected_count': self.rejected_count,
            'current_window_size': len(self._request_times)
        }

    def reset_statistics(self) -> None:
        """Reset statistics counters."""
        self.accepted_count = 0
        self.rejected_count = 0
