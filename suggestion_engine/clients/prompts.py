"""
Prompt templates for the suggestion service.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

PROMPT_STYLE_QUESTIONS = 'questions'
PROMPT_STYLE_CONVERSATIONAL = 'conversational'
PROMPT_STYLE_PROFESSIONAL = 'professional'

QUESTIONS_SYSTEM_PROMPT = (
    "You're like a thoughtful friend helping someone think through what "
    "they're saying. When they pause, suggest 3 casual, conversational "
    "questions that would naturally help them add more interesting details. "
    "Keep questions short (2-5 words), friendly, and focused on going deeper "
    "into what they mentioned. Use casual language like 'what kind?', "
    "'with who?', 'how come?', 'when exactly?'. Format as three separate "
    "questions, each ending with '?'. "
    "Example format: what kind?, with who?, when exactly?"
)

QUESTIONS_USER_TEMPLATE = (
    'The user just said: "{text}" and paused. What 3 casual, friendly '
    'questions would help them think of more details to add? Think like '
    'their inner voice encouraging them to elaborate naturally.'
)

CONVERSATIONAL_TEMPLATE = (
    'You are a helpful friend providing natural autocomplete suggestions. '
    'The user said: "{text}"\n\n'
    'Complete their thought naturally, like a friend would finish their '
    'sentence. Provide 3-5 short, helpful suggestions that flow naturally '
    'from what they said.\n\nSuggestions:'
)

PROFESSIONAL_TEMPLATE = (
    'Provide intelligent autocomplete suggestions for: "{text}"\n\n'
    'Generate 3-5 concise, relevant suggestions that complete or enhance '
    'the input. Focus on practical, actionable completions. Be precise and '
    'professional.\n\nSuggestions:'
)

PROMPT_STYLES = (
    PROMPT_STYLE_QUESTIONS,
    PROMPT_STYLE_CONVERSATIONAL,
    PROMPT_STYLE_PROFESSIONAL
)


@dataclass(frozen=True)
class Prompt:
    """
    Prompt sent to the suggestion service.

    Attributes:
        user: User message
        system: Optional system instruction
    """

    user: str
    system: Optional[str] = None

    def to_messages(self) -> List[Dict[str, str]]:
        """Chat messages with the system instruction first, if any."""
        messages = []
        if self.system:
            messages.append({'role': 'system', 'content': self.system})
        messages.append({'role': 'user', 'content': self.user})
        return messages


class PromptBuilder:
    """
    Builds suggestion prompts in one of three styles.

    - questions: short follow-up questions that help the speaker elaborate
    - conversational: natural completions of the speaker's thought
    - professional: concise, practical completions
    """

    def __init__(self, style: str = PROMPT_STYLE_QUESTIONS):
        if style not in PROMPT_STYLES:
            raise ValueError(
                f"Invalid prompt style: {style}. Must be one of {PROMPT_STYLES}"
            )

        self.style = style

    def build(self, text: str) -> Prompt:
        """
        Build the prompt for a transcript text.

        Args:
            text: Transcript text the speaker paused on

        Returns:
            Prompt for the configured style
        """
        text = text.strip()

        if self.style == PROMPT_STYLE_QUESTIONS:
            return Prompt(
                user=QUESTIONS_USER_TEMPLATE.format(text=text),
                system=QUESTIONS_SYSTEM_PROMPT
            )

        if self.style == PROMPT_STYLE_CONVERSATIONAL:
            return Prompt(user=CONVERSATIONAL_TEMPLATE.format(text=text))

        return Prompt(user=PROFESSIONAL_TEMPLATE.format(text=text))
