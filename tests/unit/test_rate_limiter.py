"""
Unit tests for request rate limiter.
"""

import pytest
from suggestion_engine.clients import RequestRateLimiter


class TestRequestRateLimiter:
    """Test suite for RequestRateLimiter class."""

    def test_accepts_up_to_limit(self, clock):
        """Test that max_requests are accepted within a window."""
        limiter = RequestRateLimiter(max_requests=3, window_seconds=60.0, clock=clock)

        assert [limiter.try_acquire() for _ in range(4)] == [True, True, True, False]

        stats = limiter.get_statistics()
        assert stats['accepted_count'] == 3
        assert stats['rejected_count'] == 1

    def test_window_slides(self, clock):
        """Test that requests leave the window after window_seconds."""
        limiter = RequestRateLimiter(max_requests=2, window_seconds=60.0, clock=clock)

        limiter.try_acquire()
        clock.advance(30.0)
        limiter.try_acquire()

        assert limiter.try_acquire() is False

        clock.advance(30.0)
        # First request is now 60s old and has left the window
        assert limiter.try_acquire() is True
        assert limiter.try_acquire() is False

    def test_retry_after(self, clock):
        """Test time until the window has room."""
        limiter = RequestRateLimiter(max_requests=1, window_seconds=60.0, clock=clock)

        assert limiter.retry_after() == 0.0

        limiter.try_acquire()
        clock.advance(20.0)

        assert limiter.retry_after() == pytest.approx(40.0)

    def test_invalid_parameters(self):
        """Test that invalid limits are rejected."""
        with pytest.raises(ValueError):
            RequestRateLimiter(max_requests=0)

        with pytest.raises(ValueError):
            RequestRateLimiter(window_seconds=0)

    def test_reset_statistics(self, clock):
        """Test resetting counters."""
        limiter = RequestRateLimiter(max_requests=1, clock=clock)
        limiter.try_acquire()
        limiter.try_acquire()

        limiter.reset_statistics()

        stats = limiter.get_statistics()
        assert stats['accepted_count'] == 0
        assert stats['rejected_count'] == 0
