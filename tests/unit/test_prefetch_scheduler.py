"""
Unit tests for prefetch scheduler.

Tests debounce collapsing, the word-count gate and cache-aware skipping.
"""

import asyncio
import pytest
from unittest.mock import Mock
from suggestion_engine.services import (
    LatencyTracker,
    PendingCallRegistry,
    PrefetchScheduler,
    SuggestionCache,
    SuggestionFetcher
)

DEBOUNCE = 0.02


@pytest.fixture
def cache(clock):
    """Create cache on the fake clock."""
    return SuggestionCache(clock=clock)


@pytest.fixture
def fetcher(fake_generate, cache, clock):
    """Create fetcher around the recording generate function."""
    return SuggestionFetcher(
        generate=fake_generate,
        cache=cache,
        registry=PendingCallRegistry(),
        latency_tracker=LatencyTracker(),
        clock=clock
    )


class TestPrefetchScheduler:
    """Test suite for PrefetchScheduler class."""

    @pytest.mark.asyncio
    async def test_burst_collapses_into_one_prefetch(self, fetcher, cache, fake_generate):
        """Test that rapid updates produce one prefetch for the last text."""
        scheduler = PrefetchScheduler(cache, fetcher, debounce_seconds=DEBOUNCE)

        scheduler.on_transcript("I'm planning a")
        scheduler.on_transcript("I'm planning a trip")
        scheduler.on_transcript("I'm planning a trip to")

        await asyncio.sleep(DEBOUNCE * 5)

        assert fake_generate.calls == ["I'm planning a trip to"]
        assert scheduler.get_statistics()['fired_count'] == 1

    @pytest.mark.asyncio
    async def test_short_updates_ignored(self, fetcher, cache, fake_generate):
        """Test that updates below min_words never prefetch."""
        scheduler = PrefetchScheduler(cache, fetcher, debounce_seconds=DEBOUNCE, min_words=3)

        scheduler.on_transcript("I'm")
        scheduler.on_transcript("I'm planning")

        await asyncio.sleep(DEBOUNCE * 5)

        assert fake_generate.calls == []
        assert scheduler.get_statistics()['ignored_short_count'] == 2
        assert not scheduler.timer.is_armed

    @pytest.mark.asyncio
    async def test_short_update_does_not_cancel_pending_prefetch(self, fetcher, cache, fake_generate):
        """Test that a short update leaves an armed debounce in place."""
        scheduler = PrefetchScheduler(cache, fetcher, debounce_seconds=DEBOUNCE)

        scheduler.on_transcript("I'm planning a trip")
        scheduler.on_transcript("ok")

        await asyncio.sleep(DEBOUNCE * 5)

        assert fake_generate.calls == ["I'm planning a trip"]

    @pytest.mark.asyncio
    async def test_skips_when_cached(self, fetcher, cache, fake_generate, make_entry):
        """Test that a valid cache entry suppresses the prefetch."""
        cache.put("i'm planning a trip", make_entry("i'm planning a trip"))
        scheduler = PrefetchScheduler(cache, fetcher, debounce_seconds=DEBOUNCE)

        scheduler.on_transcript("I'm planning a trip")
        await asyncio.sleep(DEBOUNCE * 5)

        assert fake_generate.calls == []
        assert scheduler.get_statistics()['skipped_cached_count'] == 1

    @pytest.mark.asyncio
    async def test_started_prefetch_not_cancelled_by_new_updates(self, fetcher, cache, fake_generate):
        """Test that an in-flight prefetch completes and populates the cache."""
        fake_generate.gate = asyncio.Event()
        scheduler = PrefetchScheduler(cache, fetcher, debounce_seconds=DEBOUNCE)

        scheduler.on_transcript("I'm planning a trip")
        await asyncio.sleep(DEBOUNCE * 3)

        scheduler.on_transcript("I'm planning a trip to Rome")
        fake_generate.gate.set()
        await asyncio.sleep(DEBOUNCE * 5)

        assert "i'm planning a trip" in cache
        assert "i'm planning a trip to rome" in cache
        assert len(fake_generate.calls) == 2

    @pytest.mark.asyncio
    async def test_on_result_listener(self, fetcher, cache):
        """Test that completed prefetches are reported to the listener."""
        listener = Mock()
        scheduler = PrefetchScheduler(
            cache, fetcher, debounce_seconds=DEBOUNCE, on_result=listener
        )

        scheduler.on_transcript("I'm planning a trip")
        await asyncio.sleep(DEBOUNCE * 5)

        listener.assert_called_once()
        key, entry = listener.call_args[0]
        assert key == "i'm planning a trip"
        assert entry.key == key

    @pytest.mark.asyncio
    async def test_cancel(self, fetcher, cache, fake_generate):
        """Test that cancel() prevents the armed prefetch."""
        scheduler = PrefetchScheduler(cache, fetcher, debounce_seconds=DEBOUNCE)

        scheduler.on_transcript("I'm planning a trip")
        scheduler.cancel()
        await asyncio.sleep(DEBOUNCE * 5)

        assert fake_generate.calls == []

    @pytest.mark.asyncio
    async def test_emits_prefetch_metric(self, fetcher, cache):
        """Test that a prefetch request metric is emitted."""
        metrics = Mock()
        scheduler = PrefetchScheduler(
            cache, fetcher, debounce_seconds=DEBOUNCE,
            session_id='test-session-123', metrics=metrics
        )

        scheduler.on_transcript("I'm planning a trip")
        await asyncio.sleep(DEBOUNCE * 5)

        metrics.emit_prefetch_request.assert_called_once_with('test-session-123')
