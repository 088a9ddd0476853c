"""
Momentum application settings.

Extends the base settings with productivity scoring configuration.
"""

from common.config import BaseAppSettings

CACHE_BACKENDS = ("memory", "mongo")


class Settings(BaseAppSettings):
    """Momentum-specific settings."""

    # ==========================================================================
    # Productivity Scoring
    # ==========================================================================
    # Cache backend for computed scores: "memory" or "mongo"
    PRODUCTIVITY_CACHE_BACKEND: str = "memory"

    # Lifetime of in-memory cache entries; 0 keeps them until invalidated
    PRODUCTIVITY_CACHE_TTL_SECONDS: int = 0

    # Default number of months returned by the score history
    PRODUCTIVITY_HISTORY_MONTHS: int = 12

    def collect_config_errors(self) -> list:
        errors = super().collect_config_errors()

        if self.PRODUCTIVITY_CACHE_BACKEND.lower() not in CACHE_BACKENDS:
            errors.append(
                f"PRODUCTIVITY_CACHE_BACKEND must be one of {', '.join(CACHE_BACKENDS)}"
            )

        if self.PRODUCTIVITY_CACHE_TTL_SECONDS < 0:
            errors.append("PRODUCTIVITY_CACHE_TTL_SECONDS cannot be negative")

        if not 1 <= self.PRODUCTIVITY_HISTORY_MONTHS <= 36:
            errors.append("PRODUCTIVITY_HISTORY_MONTHS must be between 1 and 36")

        return errors


# Global settings instance
settings = Settings()
