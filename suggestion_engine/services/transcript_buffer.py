"""
Transcript buffer for accumulating speech recognition results.

This module provides a buffer that assembles the full transcript text from
final and interim recognition segments.
"""

import logging
from suggestion_engine.models import TranscriptEvent

logger = logging.getLogger(__name__)


class TranscriptBuffer:
    """
    Accumulates recognized segments into the full transcript text.

    Final segments are committed, each followed by a single space. The
    latest interim segment is held separately and replaced by the next
    event, so full_text is always the committed text plus the current
    interim.

    Attributes:
        committed_text: Text of all final segments
        interim_text: Latest interim segment
    """

    def __init__(self):
        """Initialize an empty transcript buffer."""
        self.committed_text = ''
        self.interim_text = ''

    @property
    def full_text(self) -> str:
        """Committed text followed by the current interim segment."""
        return self.committed_text + self.interim_text

    def apply(self, event: TranscriptEvent) -> str:
        """
        Apply a recognition event.

        Args:
            event: TranscriptEvent to apply

        Returns:
            Full transcript text after the event

        Examples:
            >>> buffer = TranscriptBuffer()
            >>> buffer.apply(TranscriptEvent.final("I'm planning"))
            "I'm planning "
            >>> buffer.apply(TranscriptEvent.interim("a trip"))
            "I'm planning a trip"
        """
        if event.is_final:
            self.committed_text += event.text + ' '
            self.interim_text = ''
        else:
            self.interim_text = event.text

        return self.full_text

    def append_suggestion(self, suggestion: str) -> str:
        """
        Append a chosen suggestion to the transcript.

        The pending interim segment is folded into the committed text.

        Args:
            suggestion: Suggestion text to append

        Returns:
            Full transcript text after appending
        """
        self.committed_text = f"{self.full_text.strip()} {suggestion} "
        self.interim_text = ''

        logger.debug(f"Appended suggestion: {suggestion[:50]}")

        return self.full_text

    def set_text(self, text: str) -> None:
        """Replace the whole transcript, e.g. after the user edits it."""
        self.committed_text = text
        self.interim_text = ''

    def clear(self) -> None:
        """Empty the transcript."""
        self.committed_text = ''
        self.interim_text = ''
