"""
Unit tests for suggestion fetcher.

Tests call sharing, fallback substitution, latency recording and caching.
"""

import asyncio
import pytest
from unittest.mock import Mock
from botocore.exceptions import EndpointConnectionError
from suggestion_engine.exceptions import SuggestionTimeoutError, SuggestionServiceError
from suggestion_engine.models import SuggestionSource
from suggestion_engine.services import (
    FallbackSuggestionGenerator,
    LatencyTracker,
    PendingCallRegistry,
    SuggestionCache,
    SuggestionFetcher
)
from suggestion_engine.utils import ErrorCode
from suggestion_engine.utils.metrics import MetricsEmitter


@pytest.fixture
def cache(clock):
    """Create cache on the fake clock."""
    return SuggestionCache(clock=clock)


@pytest.fixture
def tracker():
    """Create latency tracker."""
    return LatencyTracker()


def make_fetcher(generate, cache, tracker, clock, metrics=None):
    return SuggestionFetcher(
        generate=generate,
        cache=cache,
        registry=PendingCallRegistry(),
        latency_tracker=tracker,
        fallback_generator=FallbackSuggestionGenerator([['and then', 'because', 'however']]),
        clock=clock,
        session_id='test-session-123',
        metrics=metrics
    )


class TestSuggestionFetcher:
    """Test suite for SuggestionFetcher class."""

    @pytest.mark.asyncio
    async def test_generated_entry_cached(self, fake_generate, cache, tracker, clock):
        """Test that a successful call is cached as GENERATED."""
        fetcher = make_fetcher(fake_generate, cache, tracker, clock)

        entry = await fetcher.fetch("I'm planning a trip")

        assert entry.source == SuggestionSource.GENERATED
        assert entry.key == "i'm planning a trip"
        assert entry.suggestions == ('what kind?', 'with who?', 'when exactly?')
        assert entry.created_at == clock()
        assert cache.get("i'm planning a trip") is entry
        assert fake_generate.calls == ["I'm planning a trip"]

    @pytest.mark.asyncio
    async def test_concurrent_fetches_share_one_call(self, fake_generate, cache, tracker, clock):
        """Test that concurrent fetches for equivalent text make one call."""
        fake_generate.gate = asyncio.Event()
        fetcher = make_fetcher(fake_generate, cache, tracker, clock)

        first = asyncio.ensure_future(fetcher.fetch("I'm planning a trip"))
        second = asyncio.ensure_future(fetcher.fetch("i'm planning a TRIP"))
        await asyncio.sleep(0)

        fake_generate.gate.set()
        results = await asyncio.gather(first, second)

        assert len(fake_generate.calls) == 1
        assert results[0] is results[1]

    @pytest.mark.asyncio
    async def test_cancelled_waiter_does_not_cancel_call(self, fake_generate, cache, tracker, clock):
        """Test that cancelling one awaiter leaves the shared call running."""
        fake_generate.gate = asyncio.Event()
        fetcher = make_fetcher(fake_generate, cache, tracker, clock)

        waiter = asyncio.ensure_future(fetcher.fetch("I'm planning a trip"))
        await asyncio.sleep(0)
        waiter.cancel()
        await asyncio.sleep(0)

        fake_generate.gate.set()
        entry = await fetcher.fetch("I'm planning a trip")

        assert len(fake_generate.calls) == 1
        assert entry.source == SuggestionSource.GENERATED

    @pytest.mark.asyncio
    async def test_failure_substitutes_fallback(self, generate_factory, cache, tracker, clock):
        """Test that a failed call resolves to a cached FALLBACK_LOCAL entry."""
        generate = generate_factory(error=SuggestionTimeoutError("slow"))
        fetcher = make_fetcher(generate, cache, tracker, clock)

        entry = await fetcher.fetch("I'm planning a trip")

        assert entry.source == SuggestionSource.FALLBACK_LOCAL
        assert entry.suggestions == ('and then', 'because', 'however')
        assert entry.error_code == ErrorCode.GENERATION_TIMEOUT
        assert cache.get("i'm planning a trip") is entry
        assert fetcher.get_statistics()['fallback_count'] == 1

    @pytest.mark.asyncio
    async def test_unexpected_exception_substitutes_fallback(self, generate_factory, cache, tracker, clock):
        """Test that arbitrary exceptions are classified as internal errors."""
        generate = generate_factory(error=KeyError("missing"))
        fetcher = make_fetcher(generate, cache, tracker, clock)

        entry = await fetcher.fetch("I'm planning a trip")

        assert entry.source == SuggestionSource.FALLBACK_LOCAL
        assert entry.error_code == ErrorCode.INTERNAL_ERROR

    @pytest.mark.asyncio
    async def test_empty_result_substitutes_fallback(self, generate_factory, cache, tracker, clock):
        """Test that an empty suggestion list counts as a failure."""
        generate = generate_factory(suggestions=[])
        fetcher = make_fetcher(generate, cache, tracker, clock)

        entry = await fetcher.fetch("I'm planning a trip")

        assert entry.source == SuggestionSource.FALLBACK_LOCAL
        assert entry.error_code == ErrorCode.GENERATION_INVALID_RESPONSE
        assert len(entry.suggestions) > 0

    @pytest.mark.asyncio
    async def test_truncates_to_five(self, generate_factory, cache, tracker, clock):
        """Test that results are capped at five suggestions."""
        generate = generate_factory(suggestions=[f"option {i}" for i in range(8)])
        fetcher = make_fetcher(generate, cache, tracker, clock)

        entry = await fetcher.fetch("I'm planning a trip")

        assert len(entry.suggestions) == 5
        assert entry.suggestions[0] == 'option 0'

    @pytest.mark.asyncio
    async def test_latency_recorded_for_success_and_failure(self, generate_factory, cache, tracker, clock):
        """Test that every remote round trip is recorded."""
        ok = make_fetcher(generate_factory(), cache, tracker, clock)
        failing = make_fetcher(
            generate_factory(error=SuggestionServiceError("down", status_code=503)),
            cache, tracker, clock
        )

        await ok.fetch("first text to fetch")
        await failing.fetch("second text to fetch")

        assert len(tracker) == 2

    @pytest.mark.asyncio
    async def test_emits_metrics(self, generate_factory, cache, tracker, clock):
        """Test that latency and fallback metrics are emitted."""
        metrics = Mock()
        generate = generate_factory(error=SuggestionTimeoutError("slow"))
        fetcher = make_fetcher(generate, cache, tracker, clock, metrics=metrics)

        await fetcher.fetch("I'm planning a trip")

        metrics.emit_fallback_used.assert_called_once_with(
            'test-session-123', 'GENERATION_TIMEOUT'
        )
        args = metrics.emit_suggestion_latency.call_args[0]
        assert args[0] == 'test-session-123'
        assert args[2] == 'fallback_local'

    @pytest.mark.asyncio
    async def test_unreachable_cloudwatch_does_not_block_caching(self, fake_generate, cache, tracker, clock):
        """Test that CloudWatch connection errors leave the entry cached."""
        cloudwatch = Mock()
        cloudwatch.put_metric_data.side_effect = EndpointConnectionError(
            endpoint_url='https://monitoring.us-east-1.amazonaws.com'
        )
        metrics = MetricsEmitter(cloudwatch_client=cloudwatch, buffer_size=1)
        fetcher = make_fetcher(fake_generate, cache, tracker, clock, metrics=metrics)

        entry = await fetcher.fetch("I'm planning a trip")
        await metrics.wait_for_flushes()

        assert entry.source == SuggestionSource.GENERATED
        assert cache.size() == 1
        assert metrics.dropped_count == 1
        assert metrics.buffered_count == 0

    @pytest.mark.asyncio
    async def test_metrics_errors_are_contained(self, fake_generate, cache, tracker, clock):
        """Test that a raising metrics backend never fails the fetch."""
        metrics = Mock()
        metrics.emit_suggestion_latency.side_effect = RuntimeError("metrics down")
        fetcher = make_fetcher(fake_generate, cache, tracker, clock, metrics=metrics)

        entry = await fetcher.fetch("I'm planning a trip")

        assert entry.suggestions == ('what kind?', 'with who?', 'when exactly?')
        assert "i'm planning a trip" in cache
        assert fetcher.registry.pending_count() == 0
