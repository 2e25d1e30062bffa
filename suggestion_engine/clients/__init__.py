"""
Client for the remote suggestion service.

Provides prompt building, response parsing, request rate limiting and the
HTTP client used as the engine's generate function.
"""

from .prompts import Prompt, PromptBuilder, PROMPT_STYLES
from .rate_limiter import RequestRateLimiter
from .response_parser import SuggestionResponseParser
from .suggestion_client import SuggestionClient

__all__ = [
    'Prompt',
    'PromptBuilder',
    'PROMPT_STYLES',
    'RequestRateLimiter',
    'SuggestionResponseParser',
    'SuggestionClient'
]
