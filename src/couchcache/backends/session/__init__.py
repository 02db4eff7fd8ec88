"""Cache session backends, registered under the couchcache.backends.session entry point group."""
