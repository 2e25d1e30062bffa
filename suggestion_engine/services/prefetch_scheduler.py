"""
Prefetch scheduler.

This module provides the PrefetchScheduler class that debounces transcript
updates and requests suggestions in the background while the user is still
speaking, so that they are cached by the time a pause is detected.
"""

import logging
from typing import Callable, Optional

from suggestion_engine.models import CacheEntry
from suggestion_engine.services.suggestion_cache import SuggestionCache
from suggestion_engine.services.suggestion_fetcher import SuggestionFetcher
from suggestion_engine.utils import ResettableTimer, count_words, normalize_key

logger = logging.getLogger(__name__)


class PrefetchScheduler:
    """
    Debounced background prefetch of suggestions.

    Updates shorter than min_words are ignored entirely. Every other update
    re-arms the debounce timer, so a burst of updates collapses into one
    prefetch for the last text. A prefetch that has already started is
    never cancelled by later updates.

    Attributes:
        on_result: Optional listener called with (key, entry) after each
            completed prefetch
    """

    def __init__(
        self,
        cache: SuggestionCache,
        fetcher: SuggestionFetcher,
        debounce_seconds: float = 0.2,
        min_words: int = 3,
        on_result: Optional[Callable[[str, CacheEntry], None]] = None,
        session_id: str = '',
        metrics=None
    ):
        """
        Initialize scheduler.

        Args:
            cache: Suggestion cache checked before each prefetch
            fetcher: Fetcher performing the remote call
            debounce_seconds: Quiet period before a prefetch fires
            min_words: Minimum word count for a prefetch
            on_result: Listener for completed prefetches
            session_id: Session identifier for metrics
            metrics: Optional MetricsEmitter
        """
        self.cache = cache
        self.fetcher = fetcher
        self.debounce_seconds = debounce_seconds
        self.min_words = min_words
        self.on_result = on_result
        self.session_id = session_id
        self.metrics = metrics

        self.timer = ResettableTimer('prefetch_debounce')
        self.pending_text: Optional[str] = None

        self.fired_count = 0
        self.skipped_cached_count = 0
        self.ignored_short_count = 0

    def on_transcript(self, text: str) -> None:
        """
        Handle a transcript update.

        Must be called from a running event loop.

        Args:
            text: Full current transcript text
        """
        if count_words(text) < self.min_words:
            self.ignored_short_count += 1
            return

        self.pending_text = text
        self.timer.arm(self.debounce_seconds, self._prefetch, text)

    async def _prefetch(self, text: str) -> None:
        self.pending_text = None
        key = normalize_key(text)

        if self.cache.get(key) is not None:
            self.skipped_cached_count += 1
            logger.debug(f"Prefetch skipped, cached: {key[:50]}")
            return

        self.fired_count += 1
        if self.metrics:
            try:
                self.metrics.emit_prefetch_request(self.session_id)
            except Exception as e:
                logger.warning(f"Failed to emit prefetch metric: {e}")

        logger.debug(f"Prefetching suggestions for: {key[:50]}")

        entry = await self.fetcher.fetch(text)

        if self.on_result:
            self.on_result(key, entry)

    def cancel(self) -> None:
        """Cancel the debounce timer. Started prefetches keep running."""
        self.timer.cancel()
        self.pending_text = None

    def get_statistics(self) -> dict:
        """
        Get scheduler statistics.

        Returns:
            Dictionary with fired, skipped and ignored counts
        """
        return {
            'fired_count': self.fired_count,
            'skipped_cached_count': self.skipped_cached_count,
            'ignored_short_count': self.ignored_short_count,
            'running_prefetches': self.timer.running_tasks
        }
