"""Sanity checks for repository layout and default configuration."""

from pathlib import Path

from config import BUFFER_SIZE, HOST, PORT, SERVER_ENGINE, SERVER_ENGINES
from server import _parse_args

ROOT = Path(__file__).resolve().parent.parent


def test_core_files_exist() -> None:
    expected = [
        "server.py",
        "socket_handler.py",
        "request.py",
        "response.py",
        "path_resolver.py",
        "content_classifier.py",
        "directory_listing.py",
        "thread_pool.py",
        "metrics.py",
        "config.py",
        "handlers/file_handlers.py",
    ]
    for rel_path in expected:
        assert (ROOT / rel_path).exists()


def test_basic_config_values() -> None:
    assert HOST == "127.0.0.1"
    assert PORT == 7878
    assert BUFFER_SIZE == 1024
    assert SERVER_ENGINE in SERVER_ENGINES


def test_cli_defaults_match_config() -> None:
    args = _parse_args([])

    assert args.host == HOST
    assert args.port == PORT
    assert args.root is None
    assert args.engine == SERVER_ENGINE
    assert args.strict is False


def test_cli_overrides() -> None:
    args = _parse_args(
        ["--host", "0.0.0.0", "--port", "9000", "--root", "/srv", "--engine", "sequential", "--strict"]
    )

    assert (args.host, args.port, args.root, args.engine, args.strict) == (
        "0.0.0.0",
        9000,
        "/srv",
        "sequential",
        True,
    )
