"""
Prefetch-and-display suggestion engine for voice dictation.

The engine consumes interim speech-to-text results, prefetches follow-up
suggestions for the partial transcript in the background, and shows them
instantly when the speaker pauses.
"""

from suggestion_engine.models import (
    CacheEntry,
    DisplayMeta,
    DisplayState,
    SessionState,
    SuggestionEngineConfig,
    SuggestionSource,
    TranscriptEvent
)
from suggestion_engine.services import SuggestionSession

__version__ = '1.0.0'

__all__ = [
    'CacheEntry',
    'DisplayMeta',
    'DisplayState',
    'SessionState',
    'SuggestionEngineConfig',
    'SuggestionSource',
    'TranscriptEvent',
    'SuggestionSession'
]
