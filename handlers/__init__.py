"""Request handlers for the directory file server."""
