"""
Services for the voice suggestion engine.

This module provides the cache, call registry, prefetch scheduler, pause
controller and the session that coordinates them.
"""

from .suggestion_cache import SuggestionCache
from .pending_call_registry import PendingCallRegistry
from .latency_tracker import LatencyTracker
from .fallback_suggestions import FallbackSuggestionGenerator, DEFAULT_FALLBACK_SETS
from .suggestion_fetcher import SuggestionFetcher
from .prefetch_scheduler import PrefetchScheduler
from .pause_suggestion_controller import PauseSuggestionController
from .transcript_buffer import TranscriptBuffer
from .suggestion_session import SuggestionSession

__all__ = [
    'SuggestionCache',
    'PendingCallRegistry',
    'LatencyTracker',
    'FallbackSuggestionGenerator',
    'DEFAULT_FALLBACK_SETS',
    'SuggestionFetcher',
    'PrefetchScheduler',
    'PauseSuggestionController',
    'TranscriptBuffer',
    'SuggestionSession'
]
