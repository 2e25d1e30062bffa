"""
Unit tests for prompt building.
"""

import pytest
from suggestion_engine.clients import PromptBuilder


class TestPromptBuilder:
    """Test suite for PromptBuilder."""

    def test_questions_style_has_system_prompt(self):
        """Test the default questions style."""
        prompt = PromptBuilder().build("  I'm planning a trip ")

        assert 'thoughtful friend' in prompt.system
        assert '"I\'m planning a trip"' in prompt.user
        assert [m['role'] for m in prompt.to_messages()] == ['system', 'user']

    @pytest.mark.parametrize('style, phrase', [
        ('conversational', 'helpful friend'),
        ('professional', 'intelligent autocomplete'),
    ])
    def test_completion_styles(self, style, phrase):
        """Test single-message styles."""
        prompt = PromptBuilder(style).build("I'm planning a trip")

        assert prompt.system is None
        assert phrase in prompt.user
        assert prompt.user.endswith('Suggestions:')
        assert [m['role'] for m in prompt.to_messages()] == ['user']

    def test_invalid_style(self):
        """Test that unknown styles are rejected."""
        with pytest.raises(ValueError):
            PromptBuilder('poetic')
