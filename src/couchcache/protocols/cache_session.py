"""CacheSession protocol for cache cluster backends."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class CacheSession(Protocol):
    """Protocol for an open session against one cache bucket.

    Implementations report backend failures as ``SessionError`` with the
    matching ``SessionErrorKind``.
    """

    async def get(self, key: str) -> bytes:
        """Get a value by key. Raises SessionError(NOT_FOUND) if missing."""
        ...

    async def upsert(self, key: str, value: bytes, ttl: int = 0) -> None:
        """Insert or replace a value. A TTL of 0 means no expiry."""
        ...

    async def remove(self, key: str) -> None:
        """Remove a key unconditionally."""
        ...

    async def append(self, key: str, value: bytes) -> None:
        """Append raw bytes to an existing value, keeping its expiry."""
        ...

    async def close(self) -> None:
        """Release the underlying connection."""
        ...
