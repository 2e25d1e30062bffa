"""
Configuration module for the suggestion engine.

Provides environment variable loading for engine timing, the suggestion
service connection and observability.
"""

from .settings import Settings, get_settings, reset_settings

__all__ = [
    'Settings',
    'get_settings',
    'reset_settings'
]
