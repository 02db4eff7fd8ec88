"""Protocol interfaces for pluggable backends."""

from couchcache.protocols.cache_session import CacheSession

__all__ = [
    "CacheSession",
]
