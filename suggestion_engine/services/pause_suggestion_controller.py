"""
Pause suggestion controller.

This module provides the PauseSuggestionController class that detects
pauses in speech, decides which suggestions are shown and owns the single
record of what the user currently sees.
"""

import json
import logging
from typing import Callable, List, Optional, Sequence

from suggestion_engine.models import (
    CacheEntry,
    DisplayMeta,
    DisplayState,
    SessionState,
    SuggestionSource
)
from suggestion_engine.services.latency_tracker import LatencyTracker
from suggestion_engine.services.suggestion_cache import SuggestionCache
from suggestion_engine.services.suggestion_fetcher import SuggestionFetcher
from suggestion_engine.utils import ResettableTimer, count_words, normalize_key

logger = logging.getLogger(__name__)

SuggestionsChangedCallback = Callable[[List[str], DisplayMeta], None]
SuggestionsClearedCallback = Callable[[], None]


class PauseSuggestionController:
    """
    State machine deciding what is displayed when the speaker pauses.

    The controller moves between three states:
    - IDLE: nothing displayed and no pause timer running
    - AWAITING_PAUSE: pause timer running for the last transcript update
    - DISPLAYING: suggestions are visible

    Every completion that would change the display first checks that the
    key it resolved for is still the current transcript key. Completions
    for older text are cached by the fetcher but never displayed.

    The last non-persisted display with at least one suggestion is kept as
    the last-good record. On a cache miss it is re-shown as persisted
    suggestions while fresh ones are fetched.

    Attributes:
        current_text: Last transcript text seen
        current_key: Normalized form of current_text
        last_good: Last-good DisplayState, if any
    """

    def __init__(
        self,
        cache: SuggestionCache,
        fetcher: SuggestionFetcher,
        latency_tracker: LatencyTracker,
        pause_delay_seconds: float = 1.0,
        auto_hide_seconds: float = 20.0,
        min_words: int = 3,
        on_suggestions_changed: Optional[SuggestionsChangedCallback] = None,
        on_suggestions_cleared: Optional[SuggestionsClearedCallback] = None,
        session_id: str = '',
        metrics=None
    ):
        """
        Initialize controller.

        Args:
            cache: Suggestion cache consulted on pause
            fetcher: Fetcher used on cache miss
            latency_tracker: Tracker providing the rolling average for display
            pause_delay_seconds: Silence before a pause is detected
            auto_hide_seconds: Time before shown suggestions are hidden
            min_words: Minimum word count for suggestions
            on_suggestions_changed: UI callback receiving (suggestions, meta)
            on_suggestions_cleared: UI callback when suggestions are hidden
            session_id: Session identifier for logs and metrics
            metrics: Optional MetricsEmitter
        """
        self.cache = cache
        self.fetcher = fetcher
        self.latency_tracker = latency_tracker
        self.pause_delay_seconds = pause_delay_seconds
        self.auto_hide_seconds = auto_hide_seconds
        self.min_words = min_words
        self.on_suggestions_changed = on_suggestions_changed
        self.on_suggestions_cleared = on_suggestions_cleared
        self.session_id = session_id
        self.metrics = metrics

        self.pause_timer = ResettableTimer('pause_detection')
        self.auto_hide_timer = ResettableTimer('auto_hide')

        self.current_text = ''
        self.current_key = ''
        self.last_good: Optional[DisplayState] = None
        self._display: Optional[DisplayState] = None

        # Bumped on clear and session end so that calls resolving afterwards
        # cannot display for a transcript that was reset.
        self._epoch = 0

        self.pauses_handled = 0
        self.cache_hits = 0
        self.cache_misses = 0
        self.persisted_shown = 0
        self.stale_discarded = 0

    @property
    def state(self) -> SessionState:
        """Current controller state."""
        if self.pause_timer.is_armed:
            return SessionState.AWAITING_PAUSE

        if self._display is not None:
            return SessionState.DISPLAYING

        return SessionState.IDLE

    @property
    def display(self) -> Optional[DisplayState]:
        """What the user currently sees, or None if nothing is displayed."""
        return self._display

    def on_transcript(self, text: str) -> None:
        """
        Handle a transcript update.

        Records the text as current and restarts pause detection. Empty
        text only cancels the pause timer.

        Args:
            text: Full current transcript text
        """
        self.current_text = text
        self.current_key = normalize_key(text)

        self.pause_timer.cancel()

        if text.strip():
            self.pause_timer.arm(self.pause_delay_seconds, self.handle_pause, text)

    async def handle_pause(self, text: str) -> None:
        """
        Show suggestions for text after a pause.

        Args:
            text: Transcript text at the time the pause was detected
        """
        if count_words(text) < self.min_words:
            logger.debug(f"Pause ignored, fewer than {self.min_words} words")
            return

        self.pauses_handled += 1
        key = normalize_key(text)
        epoch = self._epoch

        entry = self.cache.get(key)
        if self.metrics:
            try:
                self.metrics.emit_cache_lookup(self.session_id, entry is not None)
            except Exception as e:
                logger.warning(f"Failed to emit cache lookup metric: {e}")

        if entry is not None:
            self.cache_hits += 1
            self._show(
                key,
                entry.suggestions,
                DisplayMeta(
                    source=SuggestionSource.CACHED,
                    origin=entry.source,
                    latency_ms=0.0,
                    average_latency_ms=self.latency_tracker.average(),
                    error_code=entry.error_code
                )
            )
            return

        self.cache_misses += 1

        if self.last_good is not None:
            self.persisted_shown += 1
            self._show(
                self.last_good.shown_for_key,
                self.last_good.shown_suggestions,
                DisplayMeta(
                    source=SuggestionSource.PERSISTED,
                    origin=self.last_good.meta.origin,
                    latency_ms=0.0,
                    is_persisted=True,
                    average_latency_ms=self.latency_tracker.average()
                )
            )

        entry = await self.fetcher.fetch(text)

        if epoch != self._epoch or key != self.current_key:
            self.stale_discarded += 1
            logger.debug(json.dumps({
                'event': 'stale_completion_discarded',
                'session_id': self.session_id,
                'key_preview': key[:50],
                'source': entry.source.value
            }))
            return

        self._show_resolved(key, entry)

    def reconcile(self, key: str, entry: CacheEntry) -> bool:
        """
        Replace the visible suggestions with a freshly resolved entry.

        Only applies while suggestions are visible and key is still the
        current transcript key.

        Args:
            key: Normalized key the entry resolved for
            entry: Resolved cache entry

        Returns:
            True if the display was updated
        """
        if self._display is None or key != self.current_key:
            return False

        return self._show_resolved(key, entry)

    def hide(self) -> bool:
        """
        Blank the visible suggestions, keeping the last-good record.

        Returns:
            True if suggestions were visible
        """
        self.auto_hide_timer.cancel()

        if self._display is None:
            return False

        self._display = None
        self._notify_cleared()
        return True

    def clear(self) -> None:
        """Drop timers, display, last-good record and current text."""
        self._epoch += 1
        self.pause_timer.cancel()
        self.current_text = ''
        self.current_key = ''
        self.last_good = None
        self.hide()

        logger.info("Pause suggestion controller cleared")

    def session_ended(self) -> None:
        """
        Stop pause detection when recognition ends.

        Fresh suggestions are hidden. Persisted suggestions stay visible,
        and the last-good record is kept either way.
        """
        self._epoch += 1
        self.pause_timer.cancel()

        if self._display is not None and self._display.is_persisted:
            self.auto_hide_timer.cancel()
            return

        self.hide()

    def shutdown(self) -> None:
        """Cancel timers and the tasks they started."""
        self.pause_timer.cancel_tasks()
        self.auto_hide_timer.cancel_tasks()

    def _show_resolved(self, key: str, entry: CacheEntry) -> bool:
        current = self._display
        if (
            current is not None
            and not current.is_persisted
            and current.shown_for_key == key
            and current.shown_suggestions == entry.suggestions
        ):
            return False

        self._show(
            key,
            entry.suggestions,
            DisplayMeta(
                source=entry.source,
                origin=entry.source,
                latency_ms=entry.latency_ms,
                average_latency_ms=self.latency_tracker.average(),
                error_code=entry.error_code
            )
        )
        return True

    def _show(self, key: str, suggestions: Sequence[str], meta: DisplayMeta) -> None:
        display = DisplayState(
            shown_suggestions=tuple(suggestions),
            shown_for_key=key,
            is_persisted=meta.is_persisted,
            meta=meta
        )
        self._display = display

        if not display.is_persisted and display.shown_suggestions:
            self.last_good = display

        self.auto_hide_timer.arm(self.auto_hide_seconds, self._auto_hide)

        logger.debug(
            f"Showing {len(display.shown_suggestions)} {meta.source.value} "
            f"suggestions for: {key[:50]}"
        )

        if self.on_suggestions_changed:
            try:
                self.on_suggestions_changed(list(display.shown_suggestions), meta)
            except Exception as e:
                logger.error(f"Suggestions changed callback failed: {e}", exc_info=True)

    def _auto_hide(self) -> None:
        display = self._display
        if display is None or display.is_persisted:
            return

        if display.shown_for_key != self.current_key:
            return

        logger.debug("Auto-hiding suggestions")
        self.hide()

    def _notify_cleared(self) -> None:
        if self.on_suggestions_cleared:
            try:
                self.on_suggestions_cleared()
            except Exception as e:
                logger.error(f"Suggestions cleared callback failed: {e}", exc_info=True)

    def get_statistics(self) -> dict:
        """
        Get controller statistics.

        Returns:
            Dictionary with state and pause handling counts
        """
        return {
            'state': self.state.value,
            'pauses_handled': self.pauses_handled,
            'cache_hits': self.cache_hits,
            'cache_misses': self.cache_misses,
            'persisted_shown': self.persisted_shown,
            'stale_discarded': self.stale_discarded
        }
