"""
In-memory caching for the API.

Holds the current load cycle so every request does not re-read and
re-normalize the source document. A load result is replaced wholesale when
it expires or when a reload is requested.
"""

import logging
import threading
import time
from typing import Any, Dict, Optional, Tuple

from heatmap.config import get_settings
from heatmap.loader import LoadResult, run_load_cycle

logger = logging.getLogger(__name__)

LOAD_RESULT_KEY = "load:current"

# Format: {key: (value, expiry_timestamp)}
_memory_cache: Dict[str, Tuple[Any, float]] = {}
_cache_lock = threading.Lock()

# Serializes load cycles so two requests do not rebuild concurrently
_load_lock = threading.Lock()


def cache_get(key: str) -> Optional[Any]:
    """Get value from cache, or None if missing or expired."""
    with _cache_lock:
        entry = _memory_cache.get(key)
        if entry is None:
            return None
        value, expiry = entry
        if time.time() < expiry:
            logger.debug(f"Memory cache hit: {key}")
            return value
        del _memory_cache[key]
        return None


def cache_set(key: str, value: Any, ttl: int = 300) -> None:
    """Set value in cache with TTL."""
    with _cache_lock:
        _memory_cache[key] = (value, time.time() + ttl)
    logger.debug(f"Memory cache set: {key} (TTL: {ttl}s)")


def cache_delete(key: str) -> bool:
    """Delete value from cache."""
    with _cache_lock:
        return _memory_cache.pop(key, None) is not None


def cache_clear() -> None:
    with _cache_lock:
        _memory_cache.clear()


def get_load_result(force: bool = False) -> LoadResult:
    """
    Current load cycle, running a new one when the cache is cold or expired.

    Args:
        force: Discard the cached result and reload

    Returns:
        LoadResult shared by all requests until it expires
    """
    if force:
        cache_delete(LOAD_RESULT_KEY)

    result = cache_get(LOAD_RESULT_KEY)
    if result is not None:
        return result

    with _load_lock:
        # Another request may have loaded while we waited
        result = cache_get(LOAD_RESULT_KEY)
        if result is not None:
            return result

        start = time.time()
        result = run_load_cycle()
        cache_set(LOAD_RESULT_KEY, result, ttl=get_settings().api.cache_ttl)
        logger.info(f"Load cycle cached: {len(result.records)} records in {(time.time() - start) * 1000:.0f}ms")
        return result
