"""
Configuration data model for the suggestion engine.

This module defines the configuration dataclass that controls all tunable
parameters for prefetching, pause detection, caching and latency tracking.
"""

from dataclasses import dataclass

from suggestion_engine.models.cache import MAX_SUGGESTIONS


@dataclass
class SuggestionEngineConfig:
    """
    Configuration for the suggestion engine.

    Attributes:
        pause_delay_seconds: Silence before suggestions are shown (0.5-3.0)
        prefetch_debounce_seconds: Quiet period before a prefetch fires (default: 0.2)
        cache_ttl_seconds: Validity window of cached suggestions (default: 10.0)
        max_cache_size: Maximum number of cached entries (default: 20)
        min_words_for_suggestions: Minimum words before suggestions are requested (default: 3)
        max_latency_history: Rolling window size for latency average (default: 10)
        auto_hide_seconds: Time before shown suggestions are hidden (default: 20.0)
        max_suggestions: Maximum suggestions kept per result (1-5)
    """

    pause_delay_seconds: float = 1.0
    prefetch_debounce_seconds: float = 0.2
    cache_ttl_seconds: float = 10.0
    max_cache_size: int = 20
    min_words_for_suggestions: int = 3
    max_latency_history: int = 10
    auto_hide_seconds: float = 20.0
    max_suggestions: int = MAX_SUGGESTIONS

    def validate(self) -> None:
        """
        Validate configuration parameters.

        Raises:
            ValueError: If any parameter is outside its valid range
        """
        if not 0.5 <= self.pause_delay_seconds <= 3.0:
            raise ValueError(
                f"pause_delay_seconds must be between 0.5 and 3.0, "
                f"got {self.pause_delay_seconds}"
            )

        if self.prefetch_debounce_seconds <= 0:
            raise ValueError(
                f"prefetch_debounce_seconds must be positive, "
                f"got {self.prefetch_debounce_seconds}"
            )

        if self.cache_ttl_seconds <= 0:
            raise ValueError(
                f"cache_ttl_seconds must be positive, "
                f"got {self.cache_ttl_seconds}"
            )

        if self.max_cache_size < 1:
            raise ValueError(
                f"max_cache_size must be at least 1, "
                f"got {self.max_cache_size}"
            )

        if self.min_words_for_suggestions < 1:
            raise ValueError(
                f"min_words_for_suggestions must be at least 1, "
                f"got {self.min_words_for_suggestions}"
            )

        if self.max_latency_history < 1:
            raise ValueError(
                f"max_latency_history must be at least 1, "
                f"got {self.max_latency_history}"
            )

        if self.auto_hide_seconds <= 0:
            raise ValueError(
                f"auto_hide_seconds must be positive, "
                f"got {self.auto_hide_seconds}"
            )

        if not 1 <= self.max_suggestions <= MAX_SUGGESTIONS:
            raise ValueError(
                f"max_suggestions must be between 1 and {MAX_SUGGESTIONS}, "
                f"got {self.max_suggestions}"
            )

    def __post_init__(self):
        """Validate configuration on initialization."""
        self.validate()
