"""
Suggestion session for coordinating prefetch and display.

This module provides the SuggestionSession class that wires together all
sub-components of the suggestion engine for one dictation session. It
serves as the main entry point for transcript events and UI actions.
"""

import asyncio
import time
from typing import Awaitable, Callable, List, Optional

from suggestion_engine.clients import SuggestionClient
from suggestion_engine.config import Settings, get_settings
from suggestion_engine.models import SuggestionEngineConfig, TranscriptEvent
from suggestion_engine.services.fallback_suggestions import FallbackSuggestionGenerator
from suggestion_engine.services.latency_tracker import LatencyTracker
from suggestion_engine.services.pause_suggestion_controller import (
    PauseSuggestionController,
    SuggestionsChangedCallback,
    SuggestionsClearedCallback
)
from suggestion_engine.services.pending_call_registry import PendingCallRegistry
from suggestion_engine.services.prefetch_scheduler import PrefetchScheduler
from suggestion_engine.services.suggestion_cache import SuggestionCache
from suggestion_engine.services.suggestion_fetcher import SuggestionFetcher
from suggestion_engine.services.transcript_buffer import TranscriptBuffer
from suggestion_engine.utils import get_structured_logger
from suggestion_engine.utils.metrics import create_metrics_emitter


class SuggestionSession:
    """
    Main coordinator for one dictation session.

    This class initializes and coordinates all sub-components:
    - TranscriptBuffer: Assembles the full transcript from events
    - SuggestionCache: Stores prefetched suggestions
    - PendingCallRegistry: Shares in-flight calls per key
    - LatencyTracker: Rolling latency history
    - SuggestionFetcher: Performs calls with local fallback
    - PrefetchScheduler: Debounced background prefetch
    - PauseSuggestionController: Pause detection and display

    The cache and registry belong to the session; nothing is shared
    between sessions.

    Attributes:
        config: Engine configuration
        session_id: Session identifier for logs and metrics
        buffer: Transcript buffer
        cache: Suggestion cache
        registry: In-flight call registry
        latency_tracker: Latency history
        fetcher: Suggestion fetcher
        scheduler: Prefetch scheduler
        controller: Pause suggestion controller
    """

    def __init__(
        self,
        generate: Callable[[str], Awaitable[List[str]]],
        config: Optional[SuggestionEngineConfig] = None,
        on_suggestions_changed: Optional[SuggestionsChangedCallback] = None,
        on_suggestions_cleared: Optional[SuggestionsClearedCallback] = None,
        session_id: str = "",
        metrics=None,
        fallback_generator: Optional[FallbackSuggestionGenerator] = None,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize suggestion session with all sub-components.

        Configuration can be provided directly or loaded from environment
        variables.

        Args:
            generate: Async function returning suggestions for a text
            config: Engine configuration (optional)
            on_suggestions_changed: UI callback receiving (suggestions, meta)
            on_suggestions_cleared: UI callback when suggestions are hidden
            session_id: Session identifier for logs and metrics
            metrics: Optional MetricsEmitter
            fallback_generator: Local generator used when generation fails
            clock: Time source for cache validity

        Examples:
            >>> async def generate(text):
            ...     return ["what kind?", "with who?", "when exactly?"]
            >>> session = SuggestionSession(
            ...     generate,
            ...     config=SuggestionEngineConfig(pause_delay_seconds=1.5),
            ...     on_suggestions_changed=lambda suggestions, meta: print(suggestions),
            ...     session_id="golden-eagle-427"
            ... )
        """
        # Load configuration from environment or use provided config
        self.config = config or self._load_config_from_environment()
        self.config.validate()

        self.session_id = session_id
        self.metrics = metrics
        self.log = get_structured_logger('SuggestionSession', session_id)

        # Initialize sub-components in dependency order

        # 1. Transcript buffer (no dependencies)
        self.buffer = TranscriptBuffer()

        # 2. Suggestion cache (no dependencies)
        self.cache = SuggestionCache(
            ttl_seconds=self.config.cache_ttl_seconds,
            max_cache_size=self.config.max_cache_size,
            clock=clock
        )

        # 3. Pending call registry (no dependencies)
        self.registry = PendingCallRegistry()

        # 4. Latency tracker (no dependencies)
        self.latency_tracker = LatencyTracker(
            capacity=self.config.max_latency_history
        )

        # 5. Fetcher (depends on cache, registry, tracker and metrics)
        self.fetcher = SuggestionFetcher(
            generate=generate,
            cache=self.cache,
            registry=self.registry,
            latency_tracker=self.latency_tracker,
            fallback_generator=fallback_generator,
            clock=clock,
            max_suggestions=self.config.max_suggestions,
            session_id=session_id,
            metrics=metrics
        )

        # 6. Pause controller (depends on cache, fetcher and tracker)
        self.controller = PauseSuggestionController(
            cache=self.cache,
            fetcher=self.fetcher,
            latency_tracker=self.latency_tracker,
            pause_delay_seconds=self.config.pause_delay_seconds,
            auto_hide_seconds=self.config.auto_hide_seconds,
            min_words=self.config.min_words_for_suggestions,
            on_suggestions_changed=on_suggestions_changed,
            on_suggestions_cleared=on_suggestions_cleared,
            session_id=session_id,
            metrics=metrics
        )

        # 7. Prefetch scheduler (depends on cache, fetcher and controller)
        self.scheduler = PrefetchScheduler(
            cache=self.cache,
            fetcher=self.fetcher,
            debounce_seconds=self.config.prefetch_debounce_seconds,
            min_words=self.config.min_words_for_suggestions,
            on_result=self.controller.reconcile,
            session_id=session_id,
            metrics=metrics
        )

        self.event_count = 0
        self.applied_count = 0

        self.log.info(
            "SuggestionSession initialized",
            operation='init',
            pause_delay_seconds=self.config.pause_delay_seconds,
            cache_ttl_seconds=self.config.cache_ttl_seconds,
            min_words_for_suggestions=self.config.min_words_for_suggestions,
            metrics_enabled=metrics is not None
        )

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        **kwargs
    ) -> 'SuggestionSession':
        """
        Create a session backed by the configured suggestion service.

        Args:
            settings: Settings to use (defaults to environment settings)
            **kwargs: Further constructor arguments (callbacks, session_id, ...)

        Returns:
            SuggestionSession using SuggestionClient.generate
        """
        settings = settings or get_settings()
        client = SuggestionClient.from_settings(settings)

        kwargs.setdefault('config', settings.engine_config())
        kwargs.setdefault(
            'metrics',
            create_metrics_emitter(settings.metrics_enabled, settings.metrics_namespace)
        )

        return cls(client.generate, **kwargs)

    def _load_config_from_environment(self) -> SuggestionEngineConfig:
        """
        Load configuration from environment variables.

        Environment variables:
        - PAUSE_DELAY: Pause detection delay in seconds (default: 1.0)
        - PREFETCH_DEBOUNCE_DELAY: Prefetch debounce in seconds (default: 0.2)
        - AUTO_HIDE_DELAY: Auto-hide delay in seconds (default: 20.0)
        - CACHE_TTL: Cache entry TTL in seconds (default: 10.0)
        - MAX_CACHE_SIZE: Maximum cached entries (default: 20)
        - MIN_WORDS_FOR_SUGGESTIONS: Minimum words (default: 3)
        - MAX_LATENCY_HISTORY: Latency window size (default: 10)

        Returns:
            SuggestionEngineConfig with values from environment or defaults
        """
        return Settings().engine_config()

    def process_event(self, event: TranscriptEvent) -> str:
        """
        Process a speech recognition event.

        Must be called from a running event loop.

        Args:
            event: TranscriptEvent from the speech recognizer

        Returns:
            Full transcript text after the event
        """
        self.event_count += 1
        full_text = self.buffer.apply(event)
        self._dispatch(full_text)
        return full_text

    def process_text(self, full_text: str) -> None:
        """
        Process a cumulative transcript update.

        For producers that already supply the whole transcript text.

        Args:
            full_text: Full current transcript text
        """
        self.event_count += 1
        self.buffer.set_text(full_text)
        self._dispatch(full_text)

    def _dispatch(self, full_text: str) -> None:
        try:
            self.scheduler.on_transcript(full_text)
        except Exception as e:
            self.log.error(
                f"Prefetch scheduling failed: {e}",
                operation='dispatch',
                exc_info=True
            )

        self.controller.on_transcript(full_text)

    def apply_suggestion(self, suggestion: str) -> str:
        """
        Append a chosen suggestion to the transcript.

        Hides the suggestions and feeds the new text back as a transcript
        update, so pause detection restarts for it.

        Args:
            suggestion: Suggestion selected by the user

        Returns:
            Full transcript text after appending
        """
        self.applied_count += 1
        full_text = self.buffer.append_suggestion(suggestion)
        self.controller.hide()
        self._dispatch(full_text)

        self.log.info(
            "Suggestion applied",
            operation='apply_suggestion',
            suggestion=suggestion
        )

        return full_text

    def end_session(self) -> None:
        """
        Handle the end of speech recognition.

        Stops pause detection and prefetch scheduling, hides the suggestions
        and sweeps expired cache entries. In-flight calls run to completion
        and still populate the cache.
        """
        self.scheduler.cancel()
        self.controller.session_ended()
        removed = self.cache.cleanup_expired()

        if self.metrics:
            self.metrics.flush()

        self.log.info(
            "Session ended",
            operation='end_session',
            expired_removed=removed,
            cache_size=self.cache.size()
        )

    def clear_transcript(self) -> None:
        """Clear the transcript, cached suggestions, timers and display."""
        self.scheduler.cancel()
        self.controller.clear()
        self.buffer.clear()
        self.cache.clear()
        self.registry.clear()

        self.log.info("Transcript cleared", operation='clear_transcript')

    async def shutdown(self) -> None:
        """Cancel timers and every in-flight task."""
        self.scheduler.timer.cancel_tasks()
        self.controller.shutdown()
        self.registry.cancel_all()

        # Let cancelled tasks unwind
        await asyncio.sleep(0)

        if self.metrics:
            self.metrics.flush()
            await self.metrics.wait_for_flushes()

        self.log.info("Session shut down", operation='shutdown')

    def get_statistics(self) -> dict:
        """
        Get statistics from every component.

        Returns:
            Dictionary of component statistics
        """
        return {
            'session_id': self.session_id,
            'event_count': self.event_count,
            'applied_count': self.applied_count,
            'average_latency_ms': self.latency_tracker.average(),
            'cache': self.cache.get_statistics(),
            'registry': self.registry.get_statistics(),
            'fetcher': self.fetcher.get_statistics(),
            'scheduler': self.scheduler.get_statistics(),
            'controller': self.controller.get_statistics()
        }
