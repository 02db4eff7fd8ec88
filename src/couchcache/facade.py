"""Bounded cache facade over a cache session."""

from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager
from typing import Any

from couchcache.config import Config
from couchcache.exceptions import (
    CouchcacheError,
    EmptyBodyError,
    InvalidKeyError,
    NotFoundError,
    OversizedBodyError,
    SessionError,
    SessionErrorKind,
)
from couchcache.observability import Timer, get_logger
from couchcache.plugins import create_session
from couchcache.protocols import CacheSession

MAX_TTL_IN_SEC = 60 * 60 * 24 * 30
MAX_SIZE_IN_BYTE = 20 * 1024 * 1024
MAX_KEY_LENGTH = 250

logger = get_logger(__name__)


def validate_key(key: str) -> None:
    """Check that the UTF-8 encoded key is 1 to MAX_KEY_LENGTH bytes long.

    Raises:
        InvalidKeyError: If the key is empty, too long or not encodable as UTF-8
    """
    try:
        size = len(key.encode("utf-8"))
    except UnicodeEncodeError as e:
        raise InvalidKeyError("Key is not valid UTF-8") from e
    if size < 1 or size > MAX_KEY_LENGTH:
        raise InvalidKeyError(f"Key length must be between 1 and {MAX_KEY_LENGTH} bytes")


def validate_value(value: bytes) -> None:
    """Check that the value is non-empty and at most MAX_SIZE_IN_BYTE.

    Raises:
        EmptyBodyError: If the value is empty
        OversizedBodyError: If the value is too large
    """
    if len(value) == 0:
        logger.warning("body is empty")
        raise EmptyBodyError("Body is empty")

    if len(value) > MAX_SIZE_IN_BYTE:
        logger.warning("body is too large", context={"size": len(value)})
        raise OversizedBodyError(f"Body exceeds {MAX_SIZE_IN_BYTE} bytes")


def normalize_ttl(ttl_seconds: int) -> int:
    """Clamp a TTL into [0, MAX_TTL_IN_SEC]."""
    if ttl_seconds > MAX_TTL_IN_SEC:
        return MAX_TTL_IN_SEC
    if ttl_seconds < 0:
        return 0
    return ttl_seconds


def translate_error(error: SessionError) -> CouchcacheError:
    """Map a session failure to the error raised to callers.

    Unrecognized failures are logged and returned unchanged.
    """
    if error.kind in (SessionErrorKind.NOT_FOUND, SessionErrorKind.NOT_STORED):
        return NotFoundError(str(error))
    if error.kind is SessionErrorKind.VALUE_TOO_LARGE:
        return OversizedBodyError(str(error))
    logger.error("Backend error", error=error)
    return error


@contextmanager
def translating_errors() -> Iterator[None]:
    """Re-raise session failures from the enclosed block as domain errors."""
    try:
        yield
    except SessionError as e:
        error = translate_error(e)
        if error is e:
            raise
        raise error from e
    except Exception as e:
        logger.error("Backend error", error=e)
        raise


class BoundedCacheFacade:
    """Validating facade over a single cache session.

    Writes are checked against key and value limits before reaching the
    backend, and backend failures surface as domain errors. Reads never
    raise: any failure is reported as a missing value.

    Example usage:
        async with open_cache(Config.from_file("couchcache.yaml")) as cache:
            await cache.set("user:42", b"payload", 3600)
            value = await cache.get("user:42")
    """

    def __init__(self, session: CacheSession) -> None:
        """Wrap an open session.

        Use `BoundedCacheFacade.connect()` to open one from configuration.
        """
        self.session = session

    @classmethod
    async def connect(cls, config: Config) -> "BoundedCacheFacade":
        """Connect to the configured backend and open the bucket.

        Raises:
            ConnectError: If the cluster or bucket cannot be opened
            BackendNotFoundError: If the configured backend is not registered
        """
        backend = config.backend
        context = {"backend": backend.backend, "address": backend.address, "bucket": backend.bucket}
        logger.info("Connecting to cache cluster", context=context)

        with Timer() as timer:
            session = await create_session(backend.backend, **backend.session_kwargs())

        logger.info("Connected to cache cluster", context=context, duration_ms=timer.duration_ms)
        return cls(session)

    async def close(self) -> None:
        """Release the session."""
        await self.session.close()

    async def __aenter__(self) -> "BoundedCacheFacade":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def get(self, key: str) -> bytes | None:
        """Get the value stored under key, or None."""
        try:
            return await self.session.get(key)
        except SessionError as e:
            if e.kind is not SessionErrorKind.NOT_FOUND:
                logger.error("Read failed", context={"key": key}, error=e)
            return None
        except Exception as e:
            logger.error("Read failed", context={"key": key}, error=e)
            return None

    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        """Store value under key, expiring after ttl_seconds (0 for never).

        Raises:
            InvalidKeyError: Key is empty or too long
            EmptyBodyError: Value is empty
            OversizedBodyError: Value is too large
            NotFoundError: The document could not be stored
            SessionError: Any other backend failure
        """
        validate_key(key)
        validate_value(value)
        with translating_errors():
            await self.session.upsert(key, value, normalize_ttl(ttl_seconds))

    async def delete(self, key: str) -> None:
        """Remove key regardless of its current version.

        Raises:
            InvalidKeyError: Key is empty or too long
            NotFoundError: Key does not exist
            SessionError: Any other backend failure
        """
        validate_key(key)
        with translating_errors():
            await self.session.remove(key)

    async def append(self, key: str, value: bytes) -> None:
        """Append raw bytes to the value stored under key.

        Raises:
            InvalidKeyError: Key is empty or too long
            EmptyBodyError: Value is empty
            OversizedBodyError: Value, or the resulting document, is too large
            NotFoundError: Key does not exist
            SessionError: Any other backend failure
        """
        validate_key(key)
        validate_value(value)
        with translating_errors():
            await self.session.append(key, value)


@asynccontextmanager
async def open_cache(config: Config) -> AsyncIterator[BoundedCacheFacade]:
    """Connect a facade for the duration of a block and close it after."""
    cache = await BoundedCacheFacade.connect(config)
    try:
        yield cache
    finally:
        await cache.close()
