"""
Test-friendly helpers for caching.

Content rating lookups happen many times per rendered page (every embedded
image asks for its unit's rating), so both compiled marker patterns and
per-unit ratings are cached for the life of the process. Tests need to be able
to throw all of that away between runs, since the database is rolled back
underneath the caches.
"""
from __future__ import annotations

import functools
import weakref
from typing import Any, Dict, Hashable

# Functions wrapped by our lru_cache decorator
_lru_cached_fns = []

# Live ProcessCache instances
_process_caches: weakref.WeakSet = weakref.WeakSet()

# Marker for "no entry" so that None can be cached as a negative result.
MISSING = object()


def lru_cache(*args, **kwargs):
    """
    Thin wrapper over functools.lru_cache that lets us clear all caches later.
    """
    def decorator(fn):
        wrapped_fn = functools.lru_cache(*args, **kwargs)(fn)
        _lru_cached_fns.append(wrapped_fn)
        return wrapped_fn
    return decorator


class ProcessCache:
    """
    Unbounded, process-local key/value cache.

    Unlike ``lru_cache`` this is owned by an object rather than a function, so
    entries can be replaced or dropped one at a time when the backing data is
    written.
    """

    def __init__(self, name: str = ""):
        self.name = name
        self._data: Dict[Hashable, Any] = {}
        _process_caches.add(self)

    def __repr__(self):
        return f"<{self.__class__.__name__}> {self.name} ({len(self._data)} entries)"

    def __len__(self):
        return len(self._data)

    def __contains__(self, key):
        return key in self._data

    def get(self, key, default=MISSING):
        """
        Return the cached value, or ``default`` (``MISSING``) if there is none.
        """
        return self._data.get(key, default)

    def set(self, key, value) -> None:
        self._data[key] = value

    def invalidate(self, key) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()


def clear_lru_caches():
    """
    Clear all LRU caches that use our lru_cache decorator, and every live
    ProcessCache.

    Useful for tests.
    """
    for fn in _lru_cached_fns:
        fn.cache_clear()
    for cache in list(_process_caches):
        cache.clear()
