"""In-memory cache session."""

import asyncio
import time
from dataclasses import dataclass
from typing import Any

from couchcache.exceptions import SessionError, SessionErrorKind

DEFAULT_MAX_DOCUMENT_SIZE = 20 * 1024 * 1024


@dataclass
class CacheEntry:
    """A stored value with optional expiration."""

    value: bytes
    expires_at: float | None = None

    def is_expired(self) -> bool:
        """Check if this entry has expired."""
        if self.expires_at is None:
            return False
        return time.time() > self.expires_at


class MemoryCacheSession:
    """In-memory cache session.

    Suitable for development and testing. Data is lost on close.
    """

    def __init__(self, max_document_size: int = DEFAULT_MAX_DOCUMENT_SIZE) -> None:
        """Initialize memory session.

        Args:
            max_document_size: Largest value accepted before reporting
                VALUE_TOO_LARGE, mirroring a bucket's document size limit
        """
        self.max_document_size = max_document_size
        self._data: dict[str, CacheEntry] = {}
        self._lock = asyncio.Lock()

    @classmethod
    async def connect(
        cls,
        max_document_size: int | None = None,
        **kwargs: Any,
    ) -> "MemoryCacheSession":
        """Open a memory session.

        Args:
            max_document_size: Optional document size limit
            **kwargs: Ignored (for compatibility with other backends)
        """
        return cls(max_document_size or DEFAULT_MAX_DOCUMENT_SIZE)

    def _live_entry(self, key: str) -> CacheEntry:
        """Return the unexpired entry for key. Caller holds the lock."""
        entry = self._data.get(key)
        if entry is not None and entry.is_expired():
            del self._data[key]
            entry = None
        if entry is None:
            raise SessionError(SessionErrorKind.NOT_FOUND, f"Key not found: {key}")
        return entry

    def _check_size(self, size: int) -> None:
        if size > self.max_document_size:
            raise SessionError(
                SessionErrorKind.VALUE_TOO_LARGE,
                f"Document value of {size} bytes exceeds {self.max_document_size}",
            )

    async def get(self, key: str) -> bytes:
        """Get a value by key."""
        async with self._lock:
            return self._live_entry(key).value

    async def upsert(self, key: str, value: bytes, ttl: int = 0) -> None:
        """Insert or replace a value with optional TTL in seconds."""
        self._check_size(len(value))
        expires_at = time.time() + ttl if ttl else None
        async with self._lock:
            self._data[key] = CacheEntry(value=bytes(value), expires_at=expires_at)

    async def remove(self, key: str) -> None:
        """Remove a key."""
        async with self._lock:
            self._live_entry(key)
            del self._data[key]

    async def append(self, key: str, value: bytes) -> None:
        """Append bytes to an existing value, keeping its expiry."""
        async with self._lock:
            entry = self._live_entry(key)
            self._check_size(len(entry.value) + len(value))
            entry.value = entry.value + bytes(value)

    async def close(self) -> None:
        """Drop all data."""
        await self.clear()

    async def clear(self) -> None:
        """Clear all data. Useful for testing."""
        async with self._lock:
            self._data.clear()
