"""Configuration settings for the cache store."""
import os
from typing import Any, Dict, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from cacher.core.errors import ConfigError
from cacher.core.schemas import CacheSettings

# Environment variable -> CacheSettings field
ENV_FIELDS = {
    "CACHER_DEFAULT_MINUTES": "default_minutes",
    "CACHER_SLIDING_EXPIRATION": "sliding_expiration",
    "CACHER_PURGE_EXPIRED_ON_MISS": "purge_expired_on_miss",
    "CACHER_LOG_LEVEL": "log_level",
}


def load_settings(env_file: Optional[str] = None) -> CacheSettings:
    """Build CacheSettings from the environment, reading a .env file first if present."""
    load_dotenv(dotenv_path=env_file or find_dotenv(usecwd=True), override=False)

    values: Dict[str, Any] = {}
    for env_name, field_name in ENV_FIELDS.items():
        raw = os.getenv(env_name)
        if raw is None or not raw.strip():
            continue
        values[field_name] = raw.strip()

    try:
        return CacheSettings(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid cache settings: {e}") from e
