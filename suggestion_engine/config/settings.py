"""
Configuration settings for the suggestion engine.

Loads configuration from environment variables with sensible defaults.
"""

import os
from typing import Optional

from suggestion_engine.models.configuration import SuggestionEngineConfig


VALID_PROVIDERS = {'azure', 'openai', 'anthropic'}
VALID_PROMPT_STYLES = {'questions', 'conversational', 'professional'}


class Settings:
    """
    Configuration settings for suggestion generation and display timing.

    All settings are loaded from environment variables with defaults.
    """

    def __init__(self):
        """Initialize settings from environment variables."""
        # Engine Timing (seconds)
        self.pause_delay: float = float(os.getenv('PAUSE_DELAY', '1.0'))
        self.prefetch_debounce_delay: float = float(os.getenv('PREFETCH_DEBOUNCE_DELAY', '0.2'))
        self.auto_hide_delay: float = float(os.getenv('AUTO_HIDE_DELAY', '20.0'))

        # Cache Configuration
        self.cache_ttl: float = float(os.getenv('CACHE_TTL', '10.0'))
        self.max_cache_size: int = int(os.getenv('MAX_CACHE_SIZE', '20'))

        # Suggestion Gating
        self.min_words_for_suggestions: int = int(os.getenv('MIN_WORDS_FOR_SUGGESTIONS', '3'))
        self.max_latency_history: int = int(os.getenv('MAX_LATENCY_HISTORY', '10'))

        # Suggestion Service Configuration
        self.provider: str = os.getenv('SUGGESTION_PROVIDER', 'azure').lower()
        self.endpoint: str = os.getenv('SUGGESTION_ENDPOINT', '')
        self.api_key: str = os.getenv('SUGGESTION_API_KEY', '')
        self.model: str = os.getenv('SUGGESTION_MODEL', 'gpt-4o-mini')
        self.deployment: str = os.getenv('SUGGESTION_DEPLOYMENT', '')
        self.api_version: str = os.getenv('SUGGESTION_API_VERSION', '2024-12-01-preview')
        self.max_tokens: int = int(os.getenv('SUGGESTION_MAX_TOKENS', '50'))
        self.temperature: float = float(os.getenv('SUGGESTION_TEMPERATURE', '0.7'))
        self.request_timeout: float = float(os.getenv('SUGGESTION_TIMEOUT', '10.0'))
        self.max_requests_per_minute: int = int(
            os.getenv('SUGGESTION_MAX_REQUESTS_PER_MINUTE', '30')
        )
        self.prompt_style: str = os.getenv('PROMPT_STYLE', 'questions').lower()

        # Observability
        self.metrics_enabled: bool = self._parse_bool(os.getenv('METRICS_ENABLED', 'false'))
        self.metrics_namespace: str = os.getenv('METRICS_NAMESPACE', 'VoiceSuggestions/Engine')
        self.log_level: str = os.getenv('LOG_LEVEL', 'INFO')

        # Validate configuration
        self._validate()

    def _parse_bool(self, value: str) -> bool:
        """
        Parse boolean value from string.

        Args:
            value: String value to parse

        Returns:
            Boolean value
        """
        return value.lower() in ('true', '1', 'yes', 'on')

    def _validate(self):
        """Validate configuration values."""
        if self.provider not in VALID_PROVIDERS:
            raise ValueError(
                f"Invalid SUGGESTION_PROVIDER: {self.provider}. "
                f"Must be one of {VALID_PROVIDERS}"
            )

        if self.prompt_style not in VALID_PROMPT_STYLES:
            raise ValueError(
                f"Invalid PROMPT_STYLE: {self.prompt_style}. "
                f"Must be one of {VALID_PROMPT_STYLES}"
            )

        if self.max_tokens < 1:
            raise ValueError(f"SUGGESTION_MAX_TOKENS must be positive, got {self.max_tokens}")

        if self.request_timeout <= 0:
            raise ValueError(
                f"SUGGESTION_TIMEOUT must be positive, got {self.request_timeout}"
            )

        if self.max_requests_per_minute < 1:
            raise ValueError(
                f"SUGGESTION_MAX_REQUESTS_PER_MINUTE must be positive, "
                f"got {self.max_requests_per_minute}"
            )

        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.log_level.upper() not in valid_log_levels:
            raise ValueError(
                f"Invalid LOG_LEVEL: {self.log_level}. "
                f"Must be one of {valid_log_levels}"
            )

        # Engine ranges are checked by SuggestionEngineConfig
        self.engine_config()

    def engine_config(self) -> SuggestionEngineConfig:
        """
        Build the engine configuration from these settings.

        Returns:
            Validated SuggestionEngineConfig

        Raises:
            ValueError: If an engine parameter is out of range
        """
        return SuggestionEngineConfig(
            pause_delay_seconds=self.pause_delay,
            prefetch_debounce_seconds=self.prefetch_debounce_delay,
            cache_ttl_seconds=self.cache_ttl,
            max_cache_size=self.max_cache_size,
            min_words_for_suggestions=self.min_words_for_suggestions,
            max_latency_history=self.max_latency_history,
            auto_hide_seconds=self.auto_hide_delay
        )

    @property
    def is_service_configured(self) -> bool:
        """Whether enough settings are present to call the suggestion service."""
        if not self.api_key:
            return False

        if self.provider == 'azure':
            return bool(self.endpoint and self.deployment)

        return True


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get global settings instance (singleton pattern).

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings instance so the environment is read again."""
    global _settings
    _settings = None
