"""
Standardized error codes for suggestion generation failures.

This module provides a centralized enumeration of the error codes attached
to fallback suggestions, so the UI layer can explain why generic fallback
suggestions are shown instead of generated ones.
"""

import asyncio
from enum import Enum

from suggestion_engine.exceptions import (
    RateLimitExceededError,
    ResponseParseError,
    ServiceNotConfiguredError,
    SuggestionNetworkError,
    SuggestionServiceError,
    SuggestionTimeoutError
)


class ErrorCode(str, Enum):
    """
    Enumeration of all error codes used in the system.

    Error codes are organized by category:
    - Suggestion generation (GENERATION_*)
    - Internal errors (INTERNAL_*)
    """

    # Suggestion Generation Errors
    GENERATION_NETWORK_ERROR = 'GENERATION_NETWORK_ERROR'
    GENERATION_TIMEOUT = 'GENERATION_TIMEOUT'
    GENERATION_API_ERROR = 'GENERATION_API_ERROR'
    GENERATION_RATE_LIMITED = 'GENERATION_RATE_LIMITED'
    GENERATION_NOT_CONFIGURED = 'GENERATION_NOT_CONFIGURED'
    GENERATION_INVALID_RESPONSE = 'GENERATION_INVALID_RESPONSE'

    # Internal Errors
    INTERNAL_ERROR = 'INTERNAL_ERROR'


# Error code to user-friendly message mapping
ERROR_CODE_TO_MESSAGE = {
    ErrorCode.GENERATION_NETWORK_ERROR: 'Network connection error. Please check your internet connection.',
    ErrorCode.GENERATION_TIMEOUT: 'Request timeout - please try again',
    ErrorCode.GENERATION_API_ERROR: 'Service temporarily unavailable. Please try again later.',
    ErrorCode.GENERATION_RATE_LIMITED: 'Too many requests. Please wait a moment before trying again.',
    ErrorCode.GENERATION_NOT_CONFIGURED: 'Invalid configuration. Please check your settings.',
    ErrorCode.GENERATION_INVALID_RESPONSE: 'Could not read suggestions from the service response.',
    ErrorCode.INTERNAL_ERROR: 'Internal error',
}


def get_error_message(error_code: ErrorCode) -> str:
    """
    Get user-friendly message for error code.

    Args:
        error_code: Error code enum value

    Returns:
        User-friendly error message (default: 'An error occurred')
    """
    return ERROR_CODE_TO_MESSAGE.get(error_code, 'An error occurred')


def classify_error(error: BaseException) -> ErrorCode:
    """
    Map an exception raised by the generation collaborator to an error code.

    Args:
        error: Exception raised while generating suggestions

    Returns:
        Matching error code (INTERNAL_ERROR for unknown exceptions)

    Examples:
        >>> classify_error(SuggestionTimeoutError("slow"))
        <ErrorCode.GENERATION_TIMEOUT: 'GENERATION_TIMEOUT'>
    """
    if isinstance(error, ServiceNotConfiguredError):
        return ErrorCode.GENERATION_NOT_CONFIGURED

    if isinstance(error, RateLimitExceededError):
        return ErrorCode.GENERATION_RATE_LIMITED

    if isinstance(error, (SuggestionTimeoutError, asyncio.TimeoutError)):
        return ErrorCode.GENERATION_TIMEOUT

    if isinstance(error, (SuggestionNetworkError, ConnectionError)):
        return ErrorCode.GENERATION_NETWORK_ERROR

    if isinstance(error, SuggestionServiceError):
        return ErrorCode.GENERATION_API_ERROR

    if isinstance(error, ResponseParseError):
        return ErrorCode.GENERATION_INVALID_RESPONSE

    return ErrorCode.INTERNAL_ERROR
