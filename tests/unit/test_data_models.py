"""
Unit tests for data models.

Tests validation of cache entries, display state and transcript events.
"""

import pytest
from suggestion_engine.models import (
    CacheEntry,
    DisplayMeta,
    DisplayState,
    SuggestionSource,
    TranscriptEvent
)


class TestCacheEntry:
    """Test suite for CacheEntry."""

    def test_valid_entry(self):
        """Test creating a valid entry converts suggestions to a tuple."""
        entry = CacheEntry(
            key="i'm planning a trip",
            suggestions=['what kind?', 'with who?'],
            source=SuggestionSource.GENERATED,
            created_at=1000.0,
            latency_ms=320.0
        )

        assert entry.suggestions == ('what kind?', 'with who?')
        assert entry.error_code is None

    def test_is_valid_window(self):
        """Test validity is now - created_at < ttl."""
        entry = CacheEntry("some key here", (), SuggestionSource.GENERATED, 1000.0)

        assert entry.is_valid(1009.9, 10.0) is True
        assert entry.is_valid(1010.0, 10.0) is False

    def test_entry_is_immutable(self):
        """Test that entries cannot be mutated."""
        entry = CacheEntry("some key here", ('a',), SuggestionSource.GENERATED, 1000.0)

        with pytest.raises(AttributeError):
            entry.suggestions = ('b',)

    @pytest.mark.parametrize('kwargs, message', [
        ({'key': ''}, 'key'),
        ({'suggestions': ['1', '2', '3', '4', '5', '6']}, 'at most'),
        ({'source': SuggestionSource.CACHED}, 'source'),
        ({'created_at': -1.0}, 'created_at'),
        ({'latency_ms': -5.0}, 'latency_ms'),
    ])
    def test_invalid_entries(self, kwargs, message):
        """Test field validation."""
        fields = {
            'key': 'some key here',
            'suggestions': ('a',),
            'source': SuggestionSource.GENERATED,
            'created_at': 1000.0,
        }
        fields.update(kwargs)

        with pytest.raises(ValueError, match=message):
            CacheEntry(**fields)


class TestDisplayState:
    """Test suite for DisplayState."""

    def test_requires_key(self):
        """Test that displayed suggestions must name their key."""
        meta = DisplayMeta(source=SuggestionSource.CACHED, origin=SuggestionSource.GENERATED)

        with pytest.raises(ValueError):
            DisplayState(['a'], '', False, meta)

    def test_meta_defaults(self):
        """Test DisplayMeta defaults."""
        meta = DisplayMeta(source=SuggestionSource.CACHED, origin=SuggestionSource.GENERATED)

        assert meta.latency_ms == 0.0
        assert meta.is_persisted is False
        assert meta.average_latency_ms is None


class TestTranscriptEvent:
    """Test suite for TranscriptEvent."""

    def test_factories(self):
        """Test interim and final constructors."""
        assert TranscriptEvent.interim("hello").is_final is False
        assert TranscriptEvent.final("hello").is_final is True

    def test_rejects_none_text(self):
        """Test that text is required."""
        with pytest.raises(ValueError):
            TranscriptEvent(text=None)

    def test_rejects_invalid_timestamp(self):
        """Test that timestamps must be positive."""
        with pytest.raises(ValueError):
            TranscriptEvent(text="hello", timestamp=0)
