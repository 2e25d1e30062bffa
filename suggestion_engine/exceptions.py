"""
Custom exceptions for suggestion generation and cache management.

This module defines specific exception types for the failure scenarios of
the suggestion service client and the in-flight call registry.
"""

from typing import Optional


class SuggestionEngineError(Exception):
    """Base exception for the suggestion engine."""
    pass


class SuggestionGenerationError(SuggestionEngineError):
    """
    Raised when the remote suggestion service cannot produce suggestions.

    The engine treats every subclass uniformly and substitutes local
    fallback suggestions; the subclasses only exist for user-facing
    messaging and metrics.
    """
    pass


class ServiceNotConfiguredError(SuggestionGenerationError):
    """Raised when the endpoint, API key or model settings are missing."""
    pass


class RateLimitExceededError(SuggestionGenerationError):
    """Raised when the local request rate limit is exhausted."""
    pass


class SuggestionTimeoutError(SuggestionGenerationError):
    """Raised when the service does not answer within the request timeout."""
    pass


class SuggestionNetworkError(SuggestionGenerationError):
    """Raised when the service cannot be reached."""
    pass


class SuggestionServiceError(SuggestionGenerationError):
    """
    Raised when the service answers with a non-success HTTP status.

    Attributes:
        status_code: HTTP status code returned by the service
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ResponseParseError(SuggestionGenerationError):
    """
    Raised when a service response contains no usable suggestions.

    This can occur due to:
    - Unknown response payload shape
    - Empty completion content
    - Content that yields no suggestion after cleanup
    """
    pass


class RegistryInvariantError(SuggestionEngineError):
    """
    Raised in strict mode when the pending call registry holds a settled task.

    Settled tasks remove themselves from the registry, so observing one means
    the at-most-one-call-per-key bookkeeping is broken.
    """
    pass
