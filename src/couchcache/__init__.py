"""Couchcache - a bounded facade over a remote cache bucket."""

from couchcache.config import BackendConfig, Config, LoggingConfig
from couchcache.exceptions import (
    BackendNotFoundError,
    CacheError,
    ConfigError,
    ConnectError,
    CouchcacheError,
    EmptyBodyError,
    InvalidKeyError,
    NotFoundError,
    OversizedBodyError,
    SessionError,
    SessionErrorKind,
)
from couchcache.facade import (
    MAX_KEY_LENGTH,
    MAX_SIZE_IN_BYTE,
    MAX_TTL_IN_SEC,
    BoundedCacheFacade,
    normalize_ttl,
    open_cache,
    validate_key,
    validate_value,
)
from couchcache.observability import (
    LogLevel,
    RequestContext,
    StructuredLogger,
    Timer,
    configure_logging,
    get_logger,
)
from couchcache.protocols import CacheSession

__version__ = "0.1.0"
__all__ = [
    # Core
    "BoundedCacheFacade",
    "CacheSession",
    "open_cache",
    "normalize_ttl",
    "validate_key",
    "validate_value",
    "MAX_KEY_LENGTH",
    "MAX_SIZE_IN_BYTE",
    "MAX_TTL_IN_SEC",
    # Config
    "BackendConfig",
    "Config",
    "LoggingConfig",
    # Errors
    "BackendNotFoundError",
    "CacheError",
    "ConfigError",
    "ConnectError",
    "CouchcacheError",
    "EmptyBodyError",
    "InvalidKeyError",
    "NotFoundError",
    "OversizedBodyError",
    "SessionError",
    "SessionErrorKind",
    # Observability
    "LogLevel",
    "RequestContext",
    "StructuredLogger",
    "Timer",
    "configure_logging",
    "get_logger",
]
