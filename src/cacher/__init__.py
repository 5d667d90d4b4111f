"""In-process key/value cache with expiration, sliding renewal and compute-on-miss."""

from cacher.config.settings import load_settings
from cacher.core.cache import CacheEntry, CacheStore, get_store, reset_store
from cacher.core.errors import CacherError, ConfigError, InvalidKeyError
from cacher.core.logging import get_logger, setup_logging
from cacher.core.schemas import CacheSettings

__all__ = [
    "CacheEntry",
    "CacheSettings",
    "CacheStore",
    "CacherError",
    "ConfigError",
    "InvalidKeyError",
    "get_logger",
    "get_store",
    "load_settings",
    "reset_store",
    "setup_logging",
]
