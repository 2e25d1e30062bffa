"""
Local fallback suggestions.

This module provides the FallbackSuggestionGenerator class that produces
generic continuation suggestions when the suggestion service fails, so the
user never sees an empty suggestion list.
"""

from typing import List, Sequence, Tuple

from suggestion_engine.utils import hash_text


DEFAULT_FALLBACK_SETS: Tuple[Tuple[str, ...], ...] = (
    ('and then', 'because', 'however'),
    ('specifically', 'for example', 'in particular'),
    ('therefore', 'meanwhile', 'additionally'),
    ('such as', 'including', 'like'),
    ('in order to', 'so that', 'which means'),
)


class FallbackSuggestionGenerator:
    """
    Deterministic generator of generic continuation suggestions.

    The same normalized text always yields the same set, chosen from the
    SHA-256 hash of the text.

    Attributes:
        fallback_sets: Candidate suggestion sets
    """

    def __init__(self, fallback_sets: Sequence[Sequence[str]] = DEFAULT_FALLBACK_SETS):
        """
        Initialize generator.

        Args:
            fallback_sets: Candidate suggestion sets (each non-empty)

        Raises:
            ValueError: If no sets are given or any set is empty
        """
        if not fallback_sets:
            raise ValueError("fallback_sets cannot be empty")

        if any(not s for s in fallback_sets):
            raise ValueError("every fallback set must contain at least one suggestion")

        self.fallback_sets = tuple(tuple(s) for s in fallback_sets)

    def generate(self, text: str) -> List[str]:
        """
        Pick the fallback set for text.

        Args:
            text: Transcript text the suggestions are for

        Returns:
            Non-empty list of suggestions

        Examples:
            >>> generator = FallbackSuggestionGenerator()
            >>> generator.generate("I'm planning a trip") == generator.generate("i'm planning a TRIP ")
            True
        """
        index = int(hash_text(text), 16) % len(self.fallback_sets)
        return list(self.fallback_sets[index])
