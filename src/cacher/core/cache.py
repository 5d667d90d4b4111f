"""
In-memory key/value cache with optional expiration and sliding renewal.
Why: memoize expensive producers in-process; a missing or expired key is
filled on demand by a caller-supplied fallback.

Process-local only. Expired entries are reclaimed lazily: they are ignored
by ``get`` and overwritten by ``set``, never swept in the background.
"""

import threading
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from types import UnionType
from typing import Annotated, Any, Callable, Dict, Optional, Union, get_args, get_origin

from cacher.config.settings import load_settings
from cacher.core.errors import InvalidKeyError
from cacher.core.logging import get_logger
from cacher.core.metrics import CacheMetrics
from cacher.core.schemas import CacheSettings

_LOG = get_logger(__name__)

_MISSING: Any = object()

# Builtins whose no-argument constructor is the "nothing cached" value
_ZERO_TYPES = (int, float, complex, str, bytes, bool, list, dict, tuple, set, frozenset)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _check_key(key: Any) -> None:
    if not isinstance(key, str):
        raise InvalidKeyError(f"cache key must be a str, got {type(key).__name__}")


def _zero_value(as_type: Any) -> Any:
    origin = get_origin(as_type)
    if origin is Annotated:
        return _zero_value(get_args(as_type)[0])
    origin = origin or as_type
    if origin in _ZERO_TYPES:
        return origin()
    return None


def _matches(data: Any, as_type: Any) -> bool:
    if as_type is Any:
        return True
    origin = get_origin(as_type)
    if origin is Annotated:
        return _matches(data, get_args(as_type)[0])
    if origin is Union or origin is UnionType:
        return any(_matches(data, arg) for arg in get_args(as_type))
    origin = origin or as_type
    # bool is an int subclass, but a stored flag is not a number
    if origin is int and isinstance(data, bool):
        return False
    return isinstance(data, origin)


@dataclass
class CacheEntry:
    """A stored value plus its expiration bookkeeping."""

    data: Any
    minutes: int = 0
    sliding_expiration: bool = True
    expires_at: Optional[datetime] = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at < now

    def renew(self, now: datetime) -> None:
        """Push the deadline forward by the stored TTL on a sliding entry."""
        if self.sliding_expiration and self.minutes > 0:
            self.expires_at = now + timedelta(minutes=self.minutes)

    def update(self, data: Any, minutes: int, sliding_expiration: bool, now: datetime) -> None:
        self.minutes = minutes
        self.sliding_expiration = sliding_expiration
        self.data = data
        self.expires_at = now + timedelta(minutes=minutes) if minutes > 0 else None


class CacheStore:
    """Thread-safe mapping of string keys to expiring entries.

    ``time_func`` must return timezone-aware datetimes; tests pass a fake clock.
    """

    def __init__(
        self,
        settings: Optional[CacheSettings] = None,
        time_func: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.settings = settings if settings is not None else CacheSettings()
        self.metrics = CacheMetrics()
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()
        self._time_func = time_func

    def get(
        self,
        key: str,
        fallback: Optional[Callable[[], Any]] = None,
        minutes: Optional[int] = None,
        sliding_expiration: Optional[bool] = None,
        *,
        as_type: Any = None,
        default: Any = _MISSING,
    ) -> Any:
        """Return the live value for ``key``, filling it from ``fallback`` on a miss.

        ``minutes`` and ``sliding_expiration`` apply only when the fallback result
        is stored; renewal of an existing entry uses the entry's own settings.
        When nothing is cached, or the cached value is not an instance of
        ``as_type``, returns ``default`` (or the zero value of ``as_type``).
        Exceptions raised by ``fallback`` propagate; nothing is stored then.
        """
        _check_key(key)
        data = self._lookup(key)
        if data is None and fallback is not None:
            data = self._fill(key, fallback, minutes, sliding_expiration)
        if data is None:
            return self._default(as_type, default)
        if as_type is None:
            return data
        return self._coerce(key, data, as_type, default)

    def set(
        self,
        key: str,
        value: Any,
        minutes: Optional[int] = None,
        sliding_expiration: Optional[bool] = None,
    ) -> None:
        """Store ``value`` under ``key``; ``None`` is ignored.

        ``minutes <= 0`` means the entry never expires.
        """
        _check_key(key)
        if value is None:
            return
        if minutes is None:
            minutes = self.settings.default_minutes
        if sliding_expiration is None:
            sliding_expiration = self.settings.sliding_expiration

        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = CacheEntry(data=value)
            entry.update(value, minutes, sliding_expiration, self._time_func())
        self.metrics.record_store()
        _LOG.debug(
            f"cache store minutes={minutes} sliding={sliding_expiration}",
            extra={"cache_key": key},
        )

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        with self._lock:
            now = self._time_func()
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
        if expired:
            _LOG.debug(f"cache purge removed={len(expired)}")
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _lookup(self, key: str) -> Any:
        with self._lock:
            now = self._time_func()
            entry = self._entries.get(key)
            reason = "absent"
            if entry is not None and entry.is_expired(now):
                reason = "expired"
                if self.settings.purge_expired_on_miss:
                    del self._entries[key]
                entry = None
            if entry is None:
                self.metrics.record_miss()
                _LOG.debug(f"cache miss reason={reason}", extra={"cache_key": key})
                return None
            entry.renew(now)
            self.metrics.record_hit()
            return entry.data

    def _fill(
        self,
        key: str,
        fallback: Callable[[], Any],
        minutes: Optional[int],
        sliding_expiration: Optional[bool],
    ) -> Any:
        # Runs outside the store lock; concurrent misses each call their fallback
        start = time.perf_counter()
        try:
            value = fallback()
        except Exception:
            self.metrics.record_fallback_error()
            _LOG.exception("cache fallback failed", extra={"cache_key": key})
            raise
        finally:
            self.metrics.record_fallback(int((time.perf_counter() - start) * 1000))

        if value is None:
            self.metrics.record_empty_fallback()
            _LOG.debug("cache fallback returned None, nothing stored", extra={"cache_key": key})
            return None
        self.set(key, value, minutes, sliding_expiration)
        return value

    def _coerce(self, key: str, data: Any, as_type: Any, default: Any) -> Any:
        try:
            matched = _matches(data, as_type)
        except TypeError:
            matched = False
        if matched:
            return data
        self.metrics.record_type_mismatch()
        _LOG.warning(
            f"cache type mismatch stored={type(data).__name__} requested={as_type!r}",
            extra={"cache_key": key},
        )
        return self._default(as_type, default)

    @staticmethod
    def _default(as_type: Any, default: Any) -> Any:
        if default is not _MISSING:
            return default
        return _zero_value(as_type)


_store: Optional[CacheStore] = None
_store_lock = threading.Lock()


def get_store() -> CacheStore:
    """Return the process-wide store, building it from the environment on first use."""
    global _store
    with _store_lock:
        if _store is None:
            _store = CacheStore(load_settings())
        return _store


def reset_store() -> None:
    """Forget the process-wide store; the next get_store() builds a new one."""
    global _store
    with _store_lock:
        if _store is not None:
            _store.clear()
        _store = None
