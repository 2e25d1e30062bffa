"""
Display state data models.

This module defines what the user currently sees: the suggestions on
screen, the key they were generated for, and the metadata shown next to
them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from suggestion_engine.models.cache import SuggestionSource
from suggestion_engine.utils.error_codes import ErrorCode


class SessionState(str, Enum):
    """
    States of the pause suggestion controller.

    IDLE: no pause timer running and nothing displayed
    AWAITING_PAUSE: pause timer running for the last seen text
    DISPLAYING: suggestions are shown
    """

    IDLE = 'idle'
    AWAITING_PAUSE = 'awaiting_pause'
    DISPLAYING = 'displaying'


@dataclass(frozen=True)
class DisplayMeta:
    """
    Metadata passed to the UI layer with each suggestions change.

    Attributes:
        source: How the suggestions reached the display
        origin: Source of the underlying cache entry
        latency_ms: Latency shown to the user (0.0 for cache hits and persisted)
        is_persisted: Whether these are last-good suggestions kept past expiry
        average_latency_ms: Rolling average of recent calls, None if no samples
        error_code: Failure classification for fallback suggestions
    """

    source: SuggestionSource
    origin: SuggestionSource
    latency_ms: float = 0.0
    is_persisted: bool = False
    average_latency_ms: Optional[float] = None
    error_code: Optional[ErrorCode] = None


@dataclass(frozen=True)
class DisplayState:
    """
    The single record of what the user currently sees.

    Attributes:
        shown_suggestions: Suggestions on screen
        shown_for_key: Normalized key the suggestions were generated for
        is_persisted: Whether the suggestions are kept visible past their TTL
        meta: Metadata reported with the suggestions
    """

    shown_suggestions: Tuple[str, ...]
    shown_for_key: str
    is_persisted: bool
    meta: DisplayMeta

    def __post_init__(self):
        """Validate field constraints."""
        if not isinstance(self.shown_suggestions, tuple):
            object.__setattr__(self, 'shown_suggestions', tuple(self.shown_suggestions))

        if not self.shown_for_key:
            raise ValueError("shown_for_key cannot be empty")
