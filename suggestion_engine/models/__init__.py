"""
Data models for the voice suggestion engine.

This module provides dataclasses for cache entries, display state,
transcript events and configuration.
"""

from .cache import CacheEntry, SuggestionSource, MAX_SUGGESTIONS
from .display import DisplayMeta, DisplayState, SessionState
from .transcript import TranscriptEvent
from .configuration import SuggestionEngineConfig

__all__ = [
    'CacheEntry',
    'SuggestionSource',
    'MAX_SUGGESTIONS',
    'DisplayMeta',
    'DisplayState',
    'SessionState',
    'TranscriptEvent',
    'SuggestionEngineConfig'
]
