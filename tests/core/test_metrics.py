"""Tests for cache metrics."""

from cacher.core.metrics import CacheMetrics, _percentile


def test_percentile_without_samples_is_zero():
    """Test that no fallback samples report zero latency."""
    assert _percentile([], 0.95) == 0


def test_percentile_ignores_sample_order():
    """Test that samples are ranked, not read in arrival order."""
    assert _percentile([40, 10, 30, 20], 0.5) == 30
    assert _percentile([40, 10, 30, 20], 0.95) == 40


def test_percentile_clamps_to_largest_sample():
    """Test that p=1.0 does not index past the end."""
    assert _percentile([5, 7], 1.0) == 7


def test_metrics_counters():
    """Test counter increments."""
    m = CacheMetrics()
    m.record_hit()
    m.record_hit()
    m.record_miss()
    m.record_store()
    m.record_fallback_error()
    m.record_empty_fallback()
    m.record_type_mismatch()

    assert m.hits == 2
    assert m.misses == 1
    assert m.stores == 1
    assert m.fallback_errors == 1
    assert m.empty_fallbacks == 1
    assert m.type_mismatches == 1


def test_metrics_fallback_samples_are_capped():
    """Test that only the most recent fallback latencies are kept."""
    m = CacheMetrics(max_samples=3)
    for ms in (1, 2, 3, 4, 5):
        m.record_fallback(ms)
    assert m.fallback_calls == 5
    assert list(m._fallback_latencies) == [3, 4, 5]


def test_metrics_snapshot():
    """Test metrics snapshot format."""
    m = CacheMetrics()
    m.record_hit()
    m.record_hit()
    m.record_hit()
    m.record_miss()
    m.record_fallback(100)
    m.record_fallback(200)

    snapshot = m.snapshot()
    assert snapshot["hits"] == 3
    assert snapshot["misses"] == 1
    assert snapshot["hit_ratio"] == 0.75
    assert snapshot["fallback_calls"] == 2
    assert snapshot["fallback_p50_ms"] == 200
    assert snapshot["fallback_p95_ms"] == 200


def test_metrics_snapshot_empty():
    """Test that an unused store reports a zero hit ratio."""
    snapshot = CacheMetrics().snapshot()
    assert snapshot["hit_ratio"] == 0.0
    assert snapshot["fallback_p50_ms"] == 0


def test_snapshot_percentiles_use_recent_window():
    """Test that a slow fallback outside the window no longer skews p95."""
    m = CacheMetrics(max_samples=3)
    m.record_fallback(5000)
    for ms in (10, 20, 30):
        m.record_fallback(ms)

    snapshot = m.snapshot()
    assert snapshot["fallback_calls"] == 4
    assert snapshot["fallback_p50_ms"] == 20
    assert snapshot["fallback_p95_ms"] == 30
