"""Command line access to a cache bucket.

Provides ``couchcache get|set|delete|append`` against the bucket described
by a config file and/or connection flags. Flags override the config file.

Example::

    couchcache --host cache1 --bucket sessions set user:42 payload --ttl 3600
    couchcache --config couchcache.yaml get user:42
"""

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, TypeVar

import typer

from couchcache.config import Config
from couchcache.exceptions import (
    ConfigError,
    ConnectError,
    CouchcacheError,
    EmptyBodyError,
    InvalidKeyError,
    NotFoundError,
    OversizedBodyError,
)
from couchcache.facade import BoundedCacheFacade, open_cache
from couchcache.observability import RequestContext, configure_logging

EXIT_GENERIC_FAILURE = 1
EXIT_INVALID_INPUT = 2
EXIT_NOT_FOUND = 4
EXIT_CONNECTION_ERROR = 6

T = TypeVar("T")

app = typer.Typer(
    name="couchcache",
    help="Read and write a bounded cache bucket.",
    no_args_is_help=True,
    add_completion=False,
)


def exit_code_for(error: CouchcacheError) -> int:
    """Map an error to the process exit code."""
    if isinstance(error, (InvalidKeyError, EmptyBodyError, OversizedBodyError, ConfigError)):
        return EXIT_INVALID_INPUT
    if isinstance(error, NotFoundError):
        return EXIT_NOT_FOUND
    if isinstance(error, ConnectError):
        return EXIT_CONNECTION_ERROR
    return EXIT_GENERIC_FAILURE


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="YAML or JSON config file."
    ),
    host: str | None = typer.Option(None, "--host", help="Host name (defaults to localhost)."),
    port: int | None = typer.Option(None, "--port", help="Port number (defaults to 6379)."),
    bucket: str | None = typer.Option(None, "--bucket", help="Bucket name (defaults to couchcache)."),
    password: str | None = typer.Option(None, "--pass", help="Password (defaults to none)."),
    backend: str | None = typer.Option(None, "--backend", help="Session backend (redis, memory)."),
) -> None:
    """couchcache -- bounded access to a cache bucket."""
    try:
        config = Config.from_file(config_path) if config_path else Config()
        overrides: dict[str, Any] = {
            "host": host,
            "port": port,
            "bucket": bucket,
            "password": password,
            "backend": backend,
        }
        config = config.with_backend_overrides(
            **{k: v for k, v in overrides.items() if v is not None}
        )
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=EXIT_INVALID_INPUT)

    configure_logging(config.logging.level, config.logging.format)
    ctx.obj = config


def _run(
    ctx: typer.Context,
    operation: Callable[[BoundedCacheFacade], Awaitable[T]],
) -> T:
    """Run one operation against a freshly connected facade."""
    config: Config = ctx.obj

    async def runner() -> T:
        async with RequestContext(bucket=config.backend.bucket):
            async with open_cache(config) as cache:
                return await operation(cache)

    try:
        return asyncio.run(runner())
    except CouchcacheError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=exit_code_for(e))


@app.command("get")
def get_command(
    ctx: typer.Context,
    key: str = typer.Argument(help="Key to read."),
) -> None:
    """Write the value stored under KEY to stdout."""
    value = _run(ctx, lambda cache: cache.get(key))
    if value is None:
        typer.echo(f"Key not found: {key}", err=True)
        raise typer.Exit(code=EXIT_NOT_FOUND)
    typer.echo(value, nl=False)


@app.command("set")
def set_command(
    ctx: typer.Context,
    key: str = typer.Argument(help="Key to write."),
    value: str = typer.Argument(help="Value to store."),
    ttl: int = typer.Option(0, "--ttl", help="Expiry in seconds (0 for none)."),
) -> None:
    """Store VALUE under KEY."""
    _run(ctx, lambda cache: cache.set(key, value.encode("utf-8"), ttl))


@app.command("delete")
def delete_command(
    ctx: typer.Context,
    key: str = typer.Argument(help="Key to remove."),
) -> None:
    """Remove KEY."""
    _run(ctx, lambda cache: cache.delete(key))


@app.command("append")
def append_command(
    ctx: typer.Context,
    key: str = typer.Argument(help="Key to append to."),
    value: str = typer.Argument(help="Bytes to append."),
) -> None:
    """Append VALUE to the value stored under KEY."""
    _run(ctx, lambda cache: cache.append(key, value.encode("utf-8")))
