"""
Utility functions for the suggestion engine.

This module provides text normalization, timers, error codes,
structured logging and metrics emission.
"""

from .text_normalization import normalize_key, count_words, hash_text
from .timer import ResettableTimer
from .error_codes import ErrorCode, classify_error, get_error_message
from .structured_logger import StructuredLogger, get_structured_logger

__all__ = [
    'normalize_key',
    'count_words',
    'hash_text',
    'ResettableTimer',
    'ErrorCode',
    'classify_error',
    'get_error_message',
    'StructuredLogger',
    'get_structured_logger'
]
