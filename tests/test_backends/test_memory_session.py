"""Tests for in-memory cache session backend."""

import asyncio

import pytest

from couchcache.backends.session.memory import CacheEntry, MemoryCacheSession
from couchcache.exceptions import SessionError, SessionErrorKind
from couchcache.protocols import CacheSession


class TestMemoryCacheSession:
    """Tests for MemoryCacheSession."""

    def test_satisfies_protocol(self, memory_session):
        """Memory session implements CacheSession."""
        assert isinstance(memory_session, CacheSession)

    @pytest.mark.asyncio
    async def test_connect_ignores_connection_settings(self):
        """Connection settings meant for other backends are ignored."""
        session = await MemoryCacheSession.connect(
            host="localhost",
            bucket="couchcache",
            max_document_size=16,
        )
        assert session.max_document_size == 16

    @pytest.mark.asyncio
    async def test_upsert_and_get(self, memory_session):
        """Test setting and getting a value."""
        await memory_session.upsert("key", b"value")
        assert await memory_session.get("key") == b"value"

    @pytest.mark.asyncio
    async def test_get_nonexistent(self, memory_session):
        """Missing keys are reported as NOT_FOUND."""
        with pytest.raises(SessionError) as exc_info:
            await memory_session.get("nonexistent")
        assert exc_info.value.kind is SessionErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_remove(self, memory_session):
        """Test removing a key."""
        await memory_session.upsert("key", b"value")
        await memory_session.remove("key")
        with pytest.raises(SessionError):
            await memory_session.get("key")

    @pytest.mark.asyncio
    async def test_remove_nonexistent(self, memory_session):
        """Removing a missing key is NOT_FOUND."""
        with pytest.raises(SessionError) as exc_info:
            await memory_session.remove("nonexistent")
        assert exc_info.value.kind is SessionErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_append(self, memory_session):
        """Append concatenates bytes."""
        await memory_session.upsert("key", b"abc")
        await memory_session.append("key", b"def")
        assert await memory_session.get("key") == b"abcdef"

    @pytest.mark.asyncio
    async def test_append_nonexistent(self, memory_session):
        """Appending to a missing key is NOT_FOUND."""
        with pytest.raises(SessionError) as exc_info:
            await memory_session.append("nonexistent", b"x")
        assert exc_info.value.kind is SessionErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_append_keeps_expiry(self, memory_session):
        """Append does not change the entry's expiry."""
        await memory_session.upsert("key", b"a", ttl=60)
        expires_at = memory_session._data["key"].expires_at

        await memory_session.append("key", b"b")
        assert memory_session._data["key"].expires_at == expires_at

    @pytest.mark.asyncio
    async def test_zero_ttl_never_expires(self, memory_session):
        """TTL of 0 means no expiry."""
        await memory_session.upsert("key", b"value", ttl=0)
        assert memory_session._data["key"].expires_at is None

    @pytest.mark.asyncio
    async def test_ttl_expiration(self, memory_session):
        """Test that TTL causes expiration."""
        await memory_session.upsert("key", b"value", ttl=1)
        assert await memory_session.get("key") == b"value"

        await asyncio.sleep(1.1)

        with pytest.raises(SessionError) as exc_info:
            await memory_session.get("key")
        assert exc_info.value.kind is SessionErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_document_too_large(self):
        """Values over the document limit are VALUE_TOO_LARGE."""
        session = MemoryCacheSession(max_document_size=4)

        with pytest.raises(SessionError) as exc_info:
            await session.upsert("key", b"12345")
        assert exc_info.value.kind is SessionErrorKind.VALUE_TOO_LARGE

        await session.upsert("key", b"1234")
        with pytest.raises(SessionError) as exc_info:
            await session.append("key", b"5")
        assert exc_info.value.kind is SessionErrorKind.VALUE_TOO_LARGE
        assert await session.get("key") == b"1234"

    @pytest.mark.asyncio
    async def test_close_clears_data(self, memory_session):
        """Closing drops all data."""
        await memory_session.upsert("key1", b"value1")
        await memory_session.upsert("key2", b"value2")
        await memory_session.close()

        assert memory_session._data == {}


class TestCacheEntry:
    """Tests for CacheEntry."""

    def test_no_expiry(self):
        assert not CacheEntry(value=b"v").is_expired()

    def test_past_expiry(self):
        assert CacheEntry(value=b"v", expires_at=1.0).is_expired()
