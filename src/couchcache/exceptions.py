"""Couchcache exceptions."""

from enum import Enum


class CouchcacheError(Exception):
    """Base exception for couchcache."""

    pass


class ConfigError(CouchcacheError):
    """Configuration error."""

    pass


class BackendNotFoundError(ConfigError):
    """No session backend is registered under the requested name."""

    pass


class ConnectError(CouchcacheError):
    """Failed to connect to the cluster or open the bucket."""

    pass


class CacheError(CouchcacheError):
    """Base class for errors returned by cache operations."""

    pass


class InvalidKeyError(CacheError):
    """Key is empty or longer than the maximum key length."""

    pass


class EmptyBodyError(CacheError):
    """Value is empty."""

    pass


class OversizedBodyError(CacheError):
    """Value exceeds the maximum document size."""

    pass


class NotFoundError(CacheError):
    """Key not found, or the document could not be stored."""

    pass


class SessionErrorKind(str, Enum):
    """Backend failure categories a session adapter can report."""

    NOT_FOUND = "not_found"
    NOT_STORED = "not_stored"
    VALUE_TOO_LARGE = "value_too_large"
    OTHER = "other"


class SessionError(CouchcacheError):
    """A failure reported by a cache session backend."""

    def __init__(self, kind: SessionErrorKind, message: str = "") -> None:
        super().__init__(message or kind.value)
        self.kind = kind
