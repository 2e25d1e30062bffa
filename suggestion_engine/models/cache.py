"""
Cache entry data model for prefetched suggestions.

This module defines the immutable dataclass stored by the suggestion cache
and the tagged variant describing where suggestions came from.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from suggestion_engine.utils.error_codes import ErrorCode

MAX_SUGGESTIONS = 5


class SuggestionSource(str, Enum):
    """
    Provenance of a set of suggestions.

    Cache entries only carry GENERATED or FALLBACK_LOCAL. CACHED and
    PERSISTED describe how suggestions reached the display.
    """

    GENERATED = 'generated'
    FALLBACK_LOCAL = 'fallback_local'
    CACHED = 'cached'
    PERSISTED = 'persisted'


ENTRY_SOURCES = (SuggestionSource.GENERATED, SuggestionSource.FALLBACK_LOCAL)


@dataclass(frozen=True)
class CacheEntry:
    """
    Entry in the suggestion cache.

    Entries are created when a suggestion call resolves (generated or
    fallback) and are never mutated; storing a new entry under the same
    key replaces the old one.

    Attributes:
        key: Normalized transcript text
        suggestions: Ordered suggestions (0 to 5 items)
        source: GENERATED or FALLBACK_LOCAL
        created_at: Creation time in seconds on the engine clock
        latency_ms: Round-trip latency of the call that produced the entry
        error_code: Failure classification for fallback entries
    """

    key: str
    suggestions: Tuple[str, ...]
    source: SuggestionSource
    created_at: float
    latency_ms: float = 0.0
    error_code: Optional[ErrorCode] = None

    def __post_init__(self):
        """Validate field constraints."""
        if not self.key:
            raise ValueError("key cannot be empty")

        if not isinstance(self.suggestions, tuple):
            object.__setattr__(self, 'suggestions', tuple(self.suggestions))

        if len(self.suggestions) > MAX_SUGGESTIONS:
            raise ValueError(
                f"suggestions must contain at most {MAX_SUGGESTIONS} items, "
                f"got {len(self.suggestions)}"
            )

        if self.source not in ENTRY_SOURCES:
            raise ValueError(f"source must be GENERATED or FALLBACK_LOCAL, got {self.source}")

        if self.created_at < 0:
            raise ValueError(f"created_at must be non-negative, got {self.created_at}")

        if self.latency_ms < 0:
            raise ValueError(f"latency_ms must be non-negative, got {self.latency_ms}")

    def is_valid(self, now: float, ttl_seconds: float) -> bool:
        """
        Check whether the entry is still within its validity window.

        Args:
            now: Current time on the engine clock
            ttl_seconds: Time-to-live in seconds

        Returns:
            True if now - created_at < ttl_seconds
        """
        return (now - self.created_at) < ttl_seconds
