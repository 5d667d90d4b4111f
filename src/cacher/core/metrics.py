"""
In-memory counters for a single cache store (hits, misses, rough fallback p50/p95).
Why: quick visibility into hit ratio and producer cost without an exporter.
"""

import threading
from collections import deque
from typing import Deque, Dict, List, Union


def _percentile(values: List[int], p: float) -> int:
    if not values:
        return 0
    idx = max(0, min(len(values) - 1, int(len(values) * p)))
    return sorted(values)[idx]


class CacheMetrics:
    def __init__(self, max_samples: int = 1000) -> None:
        self.hits = 0
        self.misses = 0
        self.stores = 0
        self.fallback_calls = 0
        self.fallback_errors = 0
        self.empty_fallbacks = 0
        self.type_mismatches = 0
        self.max_samples = max_samples
        self._fallback_latencies: Deque[int] = deque(maxlen=max_samples)
        self._lock = threading.Lock()

    def record_hit(self) -> None:
        with self._lock:
            self.hits += 1

    def record_miss(self) -> None:
        with self._lock:
            self.misses += 1

    def record_store(self) -> None:
        with self._lock:
            self.stores += 1

    def record_fallback(self, ms: int) -> None:
        with self._lock:
            self.fallback_calls += 1
            self._fallback_latencies.append(ms)

    def record_fallback_error(self) -> None:
        with self._lock:
            self.fallback_errors += 1

    def record_empty_fallback(self) -> None:
        with self._lock:
            self.empty_fallbacks += 1

    def record_type_mismatch(self) -> None:
        with self._lock:
            self.type_mismatches += 1

    def snapshot(self) -> Dict[str, Union[int, float]]:
        with self._lock:
            lat = list(self._fallback_latencies)
            lookups = self.hits + self.misses
            return {
                "hits": self.hits,
                "misses": self.misses,
                "hit_ratio": self.hits / lookups if lookups else 0.0,
                "stores": self.stores,
                "fallback_calls": self.fallback_calls,
                "fallback_errors": self.fallback_errors,
                "empty_fallbacks": self.empty_fallbacks,
                "type_mismatches": self.type_mismatches,
                "fallback_p50_ms": _percentile(lat, 0.50),
                "fallback_p95_ms": _percentile(lat, 0.95),
            }
