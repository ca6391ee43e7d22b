"""In-memory TTL cache for upstream API responses.

Entries expire lazily: an expired entry is only dropped when it is read again
or when the cache is explicitly invalidated. Storage is a Django local-memory
cache backend, so the cache lives for the lifetime of the process.
"""

import logging

from django.core.cache import caches

logger = logging.getLogger(__name__)

DEFAULT_TTL_MS = 300_000  # 5 minutes
DISTRICT_LIST_TTL_MS = 3_600_000  # 1 hour

CACHE_ALIAS = 'mgnrega'


class _Missing:
    def __repr__(self):
        return 'MISSING'

    def __bool__(self):
        return False


MISSING = _Missing()


class TTLCache:
    """Key -> value store with a per-entry expiry given in milliseconds."""

    def __init__(self, alias=CACHE_ALIAS, default_ttl_ms=DEFAULT_TTL_MS):
        self.alias = alias
        self.default_ttl_ms = default_ttl_ms

    @property
    def backend(self):
        return caches[self.alias]

    def set(self, key, value, ttl_ms=None):
        if ttl_ms is None:
            ttl_ms = self.default_ttl_ms
        self.backend.set(key, value, timeout=ttl_ms / 1000)

    def get(self, key):
        """Return the stored value, or MISSING if absent or expired.

        The locmem backend deletes an expired entry as part of the read.
        """
        return self.backend.get(key, MISSING)

    def delete(self, key):
        self.backend.delete(key)

    def clear(self):
        logger.info(f"Clearing '{self.alias}' response cache")
        self.backend.clear()


performance_cache = TTLCache()
