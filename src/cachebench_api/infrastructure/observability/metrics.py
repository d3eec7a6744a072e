# Copyright (c) Cache-Bench.
# SPDX-License-Identifier: MIT
"""Prometheus metrics utilities (registry-aware, hot-reload safe).

Every accessor returns a collector bound to the **current**
``prometheus_client.REGISTRY``. Collectors are created once per registry and
reused afterwards, so tests that swap the default registry and app factories
that run more than once never hit duplicate-registration errors.

Metrics:
    * ``cachebench_cache_operation_duration_seconds`` / ``..._total``:
      cache port calls, labelled by operation and outcome.
    * ``cachebench_store_operation_duration_seconds`` / ``..._total``:
      store port calls, labelled by operation and outcome.
    * ``cachebench_write_behind_jobs_total``: write-behind job transitions
      (scheduled, succeeded, failed, lost).
    * ``readyz_db_latency_seconds`` / ``readyz_redis_latency_seconds``:
      readiness probe latency.

Example:
    get_cache_operations_total().labels(operation="get", outcome="hit").inc()
"""

from __future__ import annotations

import logging
import threading
from contextlib import suppress
from typing import Final

import prometheus_client as prom
from prometheus_client import Counter, Histogram

_log = logging.getLogger(__name__)

# Common histogram buckets (seconds)
_BUCKETS: Final[tuple[float, ...]] = (
    0.001,
    0.005,
    0.010,
    0.025,
    0.050,
    0.100,
    0.250,
    0.500,
    1.000,
    2.500,
    5.000,
)

# Cache keyed by metric name within the currently-active registry.
_registry_id: int | None = None
_hist_cache: dict[str, Histogram] = {}
_counter_cache: dict[str, Counter] = {}
_lock = threading.RLock()


def _ensure_registry() -> None:
    """Reset caches if the active registry changed."""
    global _registry_id
    with _lock:
        rid = id(prom.REGISTRY)
        if _registry_id != rid:
            _hist_cache.clear()
            _counter_cache.clear()
            _registry_id = rid


def _lookup_existing(name: str) -> object | None:
    """Return a collector already registered under ``name``, if any."""
    with _lock, suppress(Exception):
        mapping = getattr(prom.REGISTRY, "_names_to_collectors", None)
        if isinstance(mapping, dict):
            return mapping.get(name)
    return None


def _get_or_create_hist(
    name: str,
    help_text: str,
    *,
    labelnames: tuple[str, ...] = (),
) -> Histogram:
    """Get or create a registry-bound ``Histogram`` with stable identity.

    Args:
        name: Metric name (snake_case).
        help_text: Human-readable description.
        labelnames: Optional label names tuple.

    Returns:
        Histogram: Bound to ``prom.REGISTRY``.
    """
    _ensure_registry()
    with _lock:
        cached = _hist_cache.get(name)
        if cached is not None:
            return cached

        existing = _lookup_existing(name)
        if isinstance(existing, Histogram):
            _hist_cache[name] = existing
            return existing

        try:
            h = Histogram(name, help_text, labelnames, buckets=_BUCKETS, registry=prom.REGISTRY)
        except ValueError:
            _log.exception("Failed to register Prometheus histogram %s", name)
            raise
        _hist_cache[name] = h
        return h


def _get_or_create_counter(
    name: str,
    help_text: str,
    *,
    labelnames: tuple[str, ...] = (),
) -> Counter:
    """Get or create a registry-bound ``Counter`` with stable identity.

    Counters are looked up by their ``_total`` sample name as well, because
    ``prometheus_client`` registers both names.

    Args:
        name: Metric name without the ``_total`` suffix.
        help_text: Human-readable description.
        labelnames: Optional label names tuple.

    Returns:
        Counter: Bound to ``prom.REGISTRY``.
    """
    _ensure_registry()
    with _lock:
        cached = _counter_cache.get(name)
        if cached is not None:
            return cached

        existing = _lookup_existing(name) or _lookup_existing(f"{name}_total")
        if isinstance(existing, Counter):
            _counter_cache[name] = existing
            return existing

        try:
            c = Counter(name, help_text, labelnames, registry=prom.REGISTRY)
        except ValueError:
            _log.exception("Failed to register Prometheus counter %s", name)
            raise
        _counter_cache[name] = c
        return c


# ---------------------------------------------------------------------------
# Cache / store port metrics


def get_cache_operation_duration_seconds() -> Histogram:
    """Histogram of cache port call latency (labels: operation, outcome)."""
    return _get_or_create_hist(
        "cachebench_cache_operation_duration_seconds",
        "Latency of cache operations (seconds).",
        labelnames=("operation", "outcome"),
    )


def get_cache_operations_total() -> Counter:
    """Counter of cache port calls (labels: operation, outcome).

    Outcomes are ``hit``/``miss`` for reads, ``ok`` for writes and ``error``
    for any failure.
    """
    return _get_or_create_counter(
        "cachebench_cache_operations",
        "Cache operations by outcome.",
        labelnames=("operation", "outcome"),
    )


def get_store_operation_duration_seconds() -> Histogram:
    """Histogram of store port call latency (labels: operation, outcome)."""
    return _get_or_create_hist(
        "cachebench_store_operation_duration_seconds",
        "Latency of store operations (seconds).",
        labelnames=("operation", "outcome"),
    )


def get_store_operations_total() -> Counter:
    """Counter of store port calls (labels: operation, outcome)."""
    return _get_or_create_counter(
        "cachebench_store_operations",
        "Store operations by outcome.",
        labelnames=("operation", "outcome"),
    )


def get_write_behind_jobs_total() -> Counter:
    """Counter of write-behind job transitions (label: state)."""
    return _get_or_create_counter(
        "cachebench_write_behind_jobs",
        "Write-behind job transitions by state.",
        labelnames=("state",),
    )


def get_cache_population_failures_total() -> Counter:
    """Counter of best-effort cache population failures on the read path."""
    return _get_or_create_counter(
        "cachebench_cache_population_failures",
        "Cache-aside population writes that failed and were ignored.",
    )


# ---------------------------------------------------------------------------
# Health metrics


def get_readyz_db_latency_seconds() -> Histogram:
    """Return (and cache) the DB readiness latency histogram."""
    return _get_or_create_hist(
        "readyz_db_latency_seconds",
        "Latency of the database readiness probe (seconds).",
    )


def get_readyz_redis_latency_seconds() -> Histogram:
    """Return (and cache) the Redis readiness latency histogram."""
    return _get_or_create_hist(
        "readyz_redis_latency_seconds",
        "Latency of the Redis readiness probe (seconds).",
    )
