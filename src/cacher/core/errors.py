"""Custom exceptions for cacher."""


class CacherError(Exception):
    """Base exception for cache-level errors."""


class InvalidKeyError(CacherError, TypeError):
    """Raised when a cache key is not a string."""


class ConfigError(CacherError):
    """Raised when cache settings cannot be loaded or validated."""
