"""Entry point for ``python -m couchcache``."""

from couchcache.cli import app

app()
