"""
Transcript event data model.

This module defines the dataclass for speech recognition events consumed
by the suggestion session.
"""

import time
from dataclasses import dataclass, field


@dataclass
class TranscriptEvent:
    """
    Represents one speech recognition result segment.

    Interim segments may still change as more audio is recognized; final
    segments are committed to the transcript.

    Attributes:
        text: Recognized text of the segment
        is_final: Whether the segment is final
        timestamp: Unix timestamp (seconds) when the event was produced
    """

    text: str
    is_final: bool = False
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self):
        """Validate field constraints."""
        if self.text is None:
            raise ValueError("text cannot be None")

        if self.timestamp <= 0:
            raise ValueError(f"timestamp must be positive, got {self.timestamp}")

    @classmethod
    def interim(cls, text: str) -> 'TranscriptEvent':
        """Create an interim event."""
        return cls(text=text, is_final=False)

    @classmethod
    def final(cls, text: str) -> 'TranscriptEvent':
        """Create a final event."""
        return cls(text=text, is_final=True)
