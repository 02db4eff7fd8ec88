"""Redis cache session backend."""

from typing import Any

from redis.asyncio import Redis
from redis.exceptions import RedisError, ResponseError, WatchError

from couchcache.exceptions import ConnectError, SessionError, SessionErrorKind

DEFAULT_MAX_DOCUMENT_SIZE = 20 * 1024 * 1024

# Used only for server replies without a dedicated exception class
MESSAGE_CATEGORIES: list[tuple[str, SessionErrorKind]] = [
    ("not found", SessionErrorKind.NOT_FOUND),
    ("no such key", SessionErrorKind.NOT_FOUND),
    ("not stored", SessionErrorKind.NOT_STORED),
    ("could not be stored", SessionErrorKind.NOT_STORED),
    ("too large", SessionErrorKind.VALUE_TOO_LARGE),
    ("exceeds maximum allowed size", SessionErrorKind.VALUE_TOO_LARGE),
    ("invalid bulk length", SessionErrorKind.VALUE_TOO_LARGE),
]


def classify_message(message: str) -> SessionErrorKind:
    """Categorize a backend error message that carries no structured code."""
    lowered = message.lower()
    for fragment, kind in MESSAGE_CATEGORIES:
        if fragment in lowered:
            return kind
    return SessionErrorKind.OTHER


def to_session_error(exc: RedisError) -> SessionError:
    """Map a redis-py exception to a SessionError."""
    if isinstance(exc, WatchError):
        kind = SessionErrorKind.NOT_STORED
    elif isinstance(exc, ResponseError):
        kind = classify_message(str(exc))
    else:
        kind = SessionErrorKind.OTHER
    return SessionError(kind, str(exc) or type(exc).__name__)


class RedisCacheSession:
    """Cache session over one Redis database.

    The bucket name is used as a key namespace, so ``user:42`` in bucket
    ``couchcache`` is stored as ``couchcache:user:42``. Documents larger
    than ``max_document_size`` are rejected as VALUE_TOO_LARGE.
    """

    def __init__(
        self,
        redis: Redis,
        namespace: str = "",
        max_document_size: int = DEFAULT_MAX_DOCUMENT_SIZE,
    ) -> None:
        """Initialize with a redis-py asyncio client.

        Use `RedisCacheSession.connect()` to open a verified connection.
        """
        self._redis = redis
        self.namespace = namespace
        self.max_document_size = max_document_size

    @classmethod
    async def connect(
        cls,
        host: str = "localhost",
        port: int = 6379,
        bucket: str | None = None,
        database: int = 0,
        username: str | None = None,
        password: str | None = None,
        timeout_seconds: float | None = None,
        max_document_size: int | None = None,
        **kwargs: Any,
    ) -> "RedisCacheSession":
        """Connect to the server and authenticate.

        Args:
            host: Server host name
            port: Server port
            bucket: Key namespace for this session
            database: Redis logical database number
            username: ACL user name (None for the default user)
            password: Password sent with AUTH
            timeout_seconds: Connect and command timeout
            max_document_size: Optional document size limit
            **kwargs: Ignored

        Raises:
            ConnectError: If the server is unreachable or rejects the credentials
        """
        redis = Redis(
            host=host,
            port=port,
            db=database,
            username=username,
            password=password or None,
            socket_timeout=timeout_seconds,
            socket_connect_timeout=timeout_seconds,
        )
        try:
            await redis.ping()
        except RedisError as e:
            await redis.aclose()
            raise ConnectError(f"Failed to connect to {host}:{port}: {e}") from e

        return cls(redis, bucket or "", max_document_size or DEFAULT_MAX_DOCUMENT_SIZE)

    def _name(self, key: str) -> str:
        if not self.namespace:
            return key
        return f"{self.namespace}:{key}"

    def _check_size(self, size: int) -> None:
        if size > self.max_document_size:
            raise SessionError(
                SessionErrorKind.VALUE_TOO_LARGE,
                f"Document value of {size} bytes exceeds {self.max_document_size}",
            )

    async def get(self, key: str) -> bytes:
        """Get a value by key."""
        try:
            value = await self._redis.get(self._name(key))
        except RedisError as e:
            raise to_session_error(e) from e
        if value is None:
            raise SessionError(SessionErrorKind.NOT_FOUND, f"Key not found: {key}")
        return bytes(value)

    async def upsert(self, key: str, value: bytes, ttl: int = 0) -> None:
        """Insert or replace a value with optional TTL in seconds."""
        self._check_size(len(value))
        try:
            await self._redis.set(self._name(key), value, ex=ttl or None)
        except RedisError as e:
            raise to_session_error(e) from e

    async def remove(self, key: str) -> None:
        """Delete a key regardless of its current value."""
        try:
            removed = await self._redis.delete(self._name(key))
        except RedisError as e:
            raise to_session_error(e) from e
        if not removed:
            raise SessionError(SessionErrorKind.NOT_FOUND, f"Key not found: {key}")

    async def append(self, key: str, value: bytes) -> None:
        """Append bytes to an existing value.

        Runs as a WATCH/MULTI transaction so the key cannot be removed or
        grown past the size limit between the checks and the APPEND. A
        concurrent write aborts the transaction as NOT_STORED.
        """
        name = self._name(key)
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                await pipe.watch(name)
                if not await pipe.exists(name):
                    raise SessionError(SessionErrorKind.NOT_FOUND, f"Key not found: {key}")
                self._check_size(await pipe.strlen(name) + len(value))
                pipe.multi()
                pipe.append(name, value)
                await pipe.execute()
        except RedisError as e:
            raise to_session_error(e) from e

    async def close(self) -> None:
        """Close the connection pool."""
        await self._redis.aclose()
