"""Configuration constants for the directory file server."""

HOST: str = "127.0.0.1"
PORT: int = 7878
BUFFER_SIZE: int = 1024
SOCKET_TIMEOUT_SECS: float = 5.0
ACCEPT_POLL_SECS: float = 0.2
LISTEN_BACKLOG: int = 128
WORKER_COUNT: int = 8
REQUEST_QUEUE_SIZE: int = 64
SERVER_ENGINE: str = "threadpool"
SERVER_ENGINES: tuple[str, ...] = ("threadpool", "sequential")
LOG_FORMAT: str = "plain"
CONTENT_SNIFF_BYTES: int = 8192
DEFAULT_CONTENT_TYPE: str = "application/octet-stream"
LISTING_CONTENT_TYPE: str = "text/html; charset=utf-8"
