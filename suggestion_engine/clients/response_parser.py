"""
Response parser for the suggestion service.

This module extracts a clean list of suggestions from chat completion
payloads (Azure OpenAI, OpenAI and Anthropic shapes).
"""

import logging
import re
from typing import Any, Dict, List

import Levenshtein

from suggestion_engine.exceptions import ResponseParseError
from suggestion_engine.models import MAX_SUGGESTIONS

logger = logging.getLogger(__name__)

MAX_SUGGESTION_LENGTH = 200
DUPLICATE_SIMILARITY_THRESHOLD = 0.9

_PREFIX_PATTERN = re.compile(r'^suggestions?:?\s*', re.IGNORECASE)
_NUMBERING_PATTERN = re.compile(r'^\d+[.)]\s*')
_BULLET_PATTERN = re.compile(r'^[-*•]\s*')


class SuggestionResponseParser:
    """
    Turns a completion payload into at most max_suggestions suggestions.

    Parsing steps:
    1. Extract content from choices[0].message.content or content[0].text
    2. Strip "Suggestions:" prefixes, numbering, dashes and bullets
    3. Split by lines if there are several, else by '?' (keeping the
       question marks), else by commas
    4. Drop empty items and items of 200 characters or more
    5. Drop near-duplicates (Levenshtein ratio >= 0.9, case-insensitive)
    6. Cap the result at max_suggestions
    """

    def __init__(self, max_suggestions: int = MAX_SUGGESTIONS):
        self.max_suggestions = max_suggestions

    def parse(self, payload: Dict[str, Any]) -> List[str]:
        """
        Parse a completion payload.

        Args:
            payload: Decoded JSON response body

        Returns:
            Non-empty list of suggestions

        Raises:
            ResponseParseError: If the payload has no usable suggestions
        """
        content = self.extract_content(payload)
        suggestions = self.parse_content(content)

        if not suggestions:
            raise ResponseParseError(
                f"No suggestions in response content: {content[:100]!r}"
            )

        return suggestions

    def extract_content(self, payload: Dict[str, Any]) -> str:
        """
        Extract the completion text from a response payload.

        Raises:
            ResponseParseError: If the payload shape is unknown or empty
        """
        try:
            if 'choices' in payload:
                content = payload['choices'][0]['message']['content']
            elif 'content' in payload:
                content = payload['content'][0]['text']
            else:
                raise ResponseParseError(
                    f"Unknown response shape with keys: {sorted(payload)}"
                )
        except (KeyError, IndexError, TypeError) as e:
            raise ResponseParseError(f"Malformed response payload: {e}") from e

        if not isinstance(content, str) or not content.strip():
            raise ResponseParseError("Response content is empty")

        return content

    def parse_content(self, content: str) -> List[str]:
        """
        Split completion text into cleaned, de-duplicated suggestions.

        Examples:
            >>> SuggestionResponseParser().parse_content("what kind? with who? when exactly?")
            ['what kind?', 'with who?', 'when exactly?']
        """
        lines = [line for line in content.splitlines() if line.strip()]

        if len(lines) > 1:
            items = lines
        else:
            single = self._clean(content)
            if '?' in single:
                items = [part.strip() + '?' for part in single.split('?') if part.strip()]
            else:
                items = single.split(',')

        suggestions: List[str] = []
        for item in items:
            cleaned = self._clean(item).strip(' ,')

            if not cleaned or len(cleaned) >= MAX_SUGGESTION_LENGTH:
                continue

            if self._is_near_duplicate(cleaned, suggestions):
                logger.debug(f"Dropped near-duplicate suggestion: {cleaned}")
                continue

            suggestions.append(cleaned)

            if len(suggestions) >= self.max_suggestions:
                break

        return suggestions

    def _clean(self, item: str) -> str:
        cleaned = item.strip()
        cleaned = _PREFIX_PATTERN.sub('', cleaned)
        cleaned = _NUMBERING_PATTERN.sub('', cleaned)
        cleaned = _BULLET_PATTERN.sub('', cleaned)
        return cleaned.strip().strip('"').strip()

    def _is_near_duplicate(self, candidate: str, existing: List[str]) -> bool:
        lowered = candidate.casefold()
        return any(
            Levenshtein.ratio(lowered, other.casefold()) >= DUPLICATE_SIMILARITY_THRESHOLD
            for other in existing
        )
