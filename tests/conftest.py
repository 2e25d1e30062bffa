"""
Shared pytest fixtures for suggestion engine tests.
"""

import asyncio
import pytest
from suggestion_engine.models import CacheEntry, SuggestionEngineConfig, SuggestionSource


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeGenerate:
    """Async generate function recording every call."""

    def __init__(self, suggestions=None, error=None, delay=0.0):
        self.calls = []
        self.suggestions = suggestions if suggestions is not None else [
            'what kind?', 'with who?', 'when exactly?'
        ]
        self.error = error
        self.delay = delay
        self.gate = None

    async def __call__(self, text):
        self.calls.append(text)

        if self.delay:
            await asyncio.sleep(self.delay)

        if self.gate is not None:
            await self.gate.wait()

        if self.error is not None:
            raise self.error

        if callable(self.suggestions):
            return self.suggestions(text)

        return list(self.suggestions)


class UIRecorder:
    """Records suggestion display callbacks."""

    def __init__(self):
        self.changes = []
        self.cleared = 0

    def on_changed(self, suggestions, meta):
        self.changes.append((suggestions, meta))

    def on_cleared(self):
        self.cleared += 1

    @property
    def last(self):
        return self.changes[-1] if self.changes else None


@pytest.fixture
def clock():
    """Fixture providing a fake clock."""
    return FakeClock()


@pytest.fixture
def fake_generate():
    """Fixture providing a recording generate function."""
    return FakeGenerate()


@pytest.fixture
def generate_factory():
    """Fixture providing the FakeGenerate class for custom behaviour."""
    return FakeGenerate


@pytest.fixture
def ui():
    """Fixture providing a UI callback recorder."""
    return UIRecorder()


@pytest.fixture
def fast_config():
    """Fixture providing configuration with short timers."""
    return SuggestionEngineConfig(
        pause_delay_seconds=0.5,
        prefetch_debounce_seconds=0.05,
        cache_ttl_seconds=10.0,
        max_cache_size=20,
        min_words_for_suggestions=3,
        max_latency_history=10,
        auto_hide_seconds=20.0
    )


@pytest.fixture
def make_entry(clock):
    """Fixture providing a CacheEntry factory using the fake clock."""
    def _make_entry(key, suggestions=('and then', 'because'), source=SuggestionSource.GENERATED,
                    created_at=None, latency_ms=120.0, error_code=None):
        return CacheEntry(
            key=key,
            suggestions=tuple(suggestions),
            source=source,
            created_at=clock() if created_at is None else created_at,
            latency_ms=latency_ms,
            error_code=error_code
        )
    return _make_entry
