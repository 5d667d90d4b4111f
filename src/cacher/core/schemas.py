"""
Pydantic models for store configuration.
Why: validate options once at the boundary instead of on every cache call.
"""

from pydantic import BaseModel, Field, field_validator

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class CacheSettings(BaseModel):
    default_minutes: int = Field(default=0, ge=0)
    sliding_expiration: bool = True
    purge_expired_on_miss: bool = False
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level
