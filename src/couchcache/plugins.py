"""Session backend discovery via Python entry points."""

from importlib.metadata import entry_points
from typing import Any

from couchcache.exceptions import BackendNotFoundError
from couchcache.protocols import CacheSession

SESSION_GROUP = "couchcache.backends.session"


def get_backend(name: str, group: str = SESSION_GROUP) -> Any:
    """Get a specific backend class by name.

    Args:
        name: The backend name (e.g., "redis", "memory")
        group: The entry point group name

    Returns:
        The backend class

    Raises:
        BackendNotFoundError: If the backend is not registered
    """
    backends = {ep.name: ep for ep in entry_points(group=group)}
    if name not in backends:
        available = ", ".join(sorted(backends)) or "(none)"
        raise BackendNotFoundError(
            f"Backend '{name}' not found in group '{group}'. Available: {available}"
        )
    return backends[name].load()


async def create_session(backend: str, **kwargs: Any) -> CacheSession:
    """Open a CacheSession.

    Args:
        backend: The backend name (e.g., "redis", "memory")
        **kwargs: Backend-specific connection settings

    Returns:
        A connected CacheSession implementation

    Raises:
        BackendNotFoundError: If the backend is not registered
        ConnectError: If the backend cannot connect
    """
    cls = get_backend(backend)
    return await cls.connect(**kwargs)
