"""
Unit tests for transcript buffer.
"""

from suggestion_engine.models import TranscriptEvent
from suggestion_engine.services import TranscriptBuffer


class TestTranscriptBuffer:
    """Test suite for TranscriptBuffer class."""

    def test_empty_buffer(self):
        """Test initial state."""
        assert TranscriptBuffer().full_text == ''

    def test_final_segments_committed_with_space(self):
        """Test that final segments are committed followed by a space."""
        buffer = TranscriptBuffer()
        buffer.apply(TranscriptEvent.final("I'm planning"))
        buffer.apply(TranscriptEvent.final("a trip"))

        assert buffer.full_text == "I'm planning a trip "

    def test_interim_replaces_previous_interim(self):
        """Test that only the latest interim segment is kept."""
        buffer = TranscriptBuffer()
        buffer.apply(TranscriptEvent.final("I'm planning"))
        buffer.apply(TranscriptEvent.interim("a"))
        text = buffer.apply(TranscriptEvent.interim("a trip"))

        assert text == "I'm planning a trip"

    def test_final_clears_interim(self):
        """Test that a final segment supersedes the pending interim."""
        buffer = TranscriptBuffer()
        buffer.apply(TranscriptEvent.interim("a tri"))
        buffer.apply(TranscriptEvent.final("a trip"))

        assert buffer.full_text == "a trip "
        assert buffer.interim_text == ''

    def test_append_suggestion(self):
        """Test that a suggestion is appended with single spacing."""
        buffer = TranscriptBuffer()
        buffer.apply(TranscriptEvent.final("I'm planning a trip"))

        text = buffer.append_suggestion("with who?")

        assert text == "I'm planning a trip with who? "

    def test_append_suggestion_folds_interim(self):
        """Test that the pending interim is kept when appending."""
        buffer = TranscriptBuffer()
        buffer.apply(TranscriptEvent.final("I'm planning"))
        buffer.apply(TranscriptEvent.interim("a trip  "))

        text = buffer.append_suggestion("because")

        assert text == "I'm planning a trip because "
        assert buffer.interim_text == ''

    def test_set_text_and_clear(self):
        """Test replacing and clearing the transcript."""
        buffer = TranscriptBuffer()
        buffer.apply(TranscriptEvent.interim("something"))

        buffer.set_text("edited text here")
        assert buffer.full_text == "edited text here"

        buffer.clear()
        assert buffer.full_text == ''
