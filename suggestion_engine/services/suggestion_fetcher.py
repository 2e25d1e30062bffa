"""
Suggestion fetcher.

This module provides the SuggestionFetcher class that performs one
suggestion call per normalized key, substitutes local fallback suggestions
on failure and writes every result to the cache.
"""

import asyncio
import json
import logging
import time
from typing import Awaitable, Callable, List, Optional

from suggestion_engine.exceptions import ResponseParseError
from suggestion_engine.models import CacheEntry, SuggestionSource, MAX_SUGGESTIONS
from suggestion_engine.services.fallback_suggestions import FallbackSuggestionGenerator
from suggestion_engine.services.latency_tracker import LatencyTracker
from suggestion_engine.services.pending_call_registry import PendingCallRegistry
from suggestion_engine.services.suggestion_cache import SuggestionCache
from suggestion_engine.utils import classify_error, normalize_key

logger = logging.getLogger(__name__)

GenerateFn = Callable[[str], Awaitable[List[str]]]


class SuggestionFetcher:
    """
    Resolves suggestions for a transcript text through the call registry.

    Concurrent fetches for the same normalized key share one remote call.
    Failures never propagate: the shared call resolves to a FALLBACK_LOCAL
    entry instead, which is cached like a generated one.
    """

    def __init__(
        self,
        generate: GenerateFn,
        cache: SuggestionCache,
        registry: PendingCallRegistry,
        latency_tracker: LatencyTracker,
        fallback_generator: Optional[FallbackSuggestionGenerator] = None,
        clock: Callable[[], float] = time.time,
        max_suggestions: int = MAX_SUGGESTIONS,
        session_id: str = '',
        metrics=None
    ):
        """
        Initialize fetcher.

        Args:
            generate: Async function returning suggestions for a text
            cache: Cache that receives every resolved entry
            registry: Registry of in-flight calls
            latency_tracker: Tracker that records every remote round trip
            fallback_generator: Local generator used on failure
            clock: Time source for entry creation timestamps
            max_suggestions: Maximum suggestions kept per entry
            session_id: Session identifier for logs and metrics
            metrics: Optional MetricsEmitter
        """
        self.generate = generate
        self.cache = cache
        self.registry = registry
        self.latency_tracker = latency_tracker
        self.fallback_generator = fallback_generator or FallbackSuggestionGenerator()
        self.clock = clock
        self.max_suggestions = max_suggestions
        self.session_id = session_id
        self.metrics = metrics

        self.remote_calls = 0
        self.fallback_count = 0

    async def fetch(self, text: str) -> CacheEntry:
        """
        Return the entry for text, starting or joining the remote call.

        Cancelling the caller does not cancel the shared call.

        Args:
            text: Transcript text

        Returns:
            Resolved CacheEntry (GENERATED or FALLBACK_LOCAL)
        """
        key = normalize_key(text)
        task = self.registry.begin_or_join(key, lambda: self._call(key, text))
        return await asyncio.shield(task)

    async def _call(self, key: str, text: str) -> CacheEntry:
        self.remote_calls += 1
        start_time = time.perf_counter()

        try:
            suggestions = list(await self.generate(text))[:self.max_suggestions]
            if not suggestions:
                raise ResponseParseError("Suggestion service returned no suggestions")

            latency_ms = (time.perf_counter() - start_time) * 1000
            entry = CacheEntry(
                key=key,
                suggestions=tuple(suggestions),
                source=SuggestionSource.GENERATED,
                created_at=self.clock(),
                latency_ms=latency_ms
            )

        except Exception as e:
            latency_ms = (time.perf_counter() - start_time) * 1000
            error_code = classify_error(e)
            self.fallback_count += 1

            logger.warning(json.dumps({
                'event': 'suggestion_generation_failed',
                'session_id': self.session_id,
                'error_code': error_code.value,
                'error': str(e),
                'latency_ms': round(latency_ms, 1),
                'text_preview': key[:50]
            }))

            fallback = self.fallback_generator.generate(text)[:self.max_suggestions]
            entry = CacheEntry(
                key=key,
                suggestions=tuple(fallback),
                source=SuggestionSource.FALLBACK_LOCAL,
                created_at=self.clock(),
                latency_ms=latency_ms,
                error_code=error_code
            )

        self.latency_tracker.record(entry.latency_ms)
        self.cache.put(key, entry)

        if self.metrics:
            self._emit_metrics(entry)

        logger.debug(
            f"Resolved {entry.source.value} suggestions for: {key[:50]} "
            f"in {entry.latency_ms:.1f}ms"
        )

        return entry

    def _emit_metrics(self, entry: CacheEntry) -> None:
        # Metrics failures must not affect the resolved entry
        try:
            if entry.error_code is not None:
                self.metrics.emit_fallback_used(self.session_id, entry.error_code.value)

            self.metrics.emit_suggestion_latency(
                self.session_id,
                entry.latency_ms,
                entry.source.value
            )
        except Exception as e:
            logger.warning(f"Failed to emit suggestion metrics: {e}")

    def get_statistics(self) -> dict:
        """
        Get fetcher statistics.

        Returns:
            Dictionary with remote call and fallback counts
        """
        return {
            'remote_calls': self.remote_calls,
            'fallback_count': self.fallback_count
        }
