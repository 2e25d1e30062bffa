"""
Text normalization utilities for cache keys.

This module provides functions to derive the normalized key used by the
suggestion cache and the pending call registry, count spoken words, and
generate stable hashes of transcript text.
"""

import hashlib


def normalize_key(text: str) -> str:
    """
    Normalize transcript text into a cache key.

    Normalization steps:
    1. Strip leading/trailing whitespace
    2. Case-fold

    Punctuation and inner whitespace are preserved, so only texts that
    differ by surrounding whitespace or letter case share a key.

    Args:
        text: Raw transcript text

    Returns:
        Normalized key string

    Examples:
        >>> normalize_key("  Hello World foo ")
        'hello world foo'

        >>> normalize_key("HELLO world FOO") == normalize_key("hello world foo")
        True
    """
    if not text:
        return ""

    return text.strip().casefold()


def count_words(text: str) -> int:
    """
    Count whitespace-separated words in text.

    Args:
        text: Transcript text

    Returns:
        Number of words (0 for empty or whitespace-only text)

    Examples:
        >>> count_words("I'm planning a trip")
        4

        >>> count_words("   ")
        0
    """
    if not text:
        return 0

    return len(text.split())


def hash_text(text: str) -> str:
    """
    Generate SHA-256 hash of normalized text.

    Args:
        text: Input text to hash

    Returns:
        Hexadecimal SHA-256 hash string (64 characters)
    """
    normalized = normalize_key(text)

    hash_obj = hashlib.sha256(normalized.encode('utf-8'))

    return hash_obj.hexdigest()
