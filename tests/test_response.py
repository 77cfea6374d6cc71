"""Unit tests for HTTP response framing as written to the socket."""

import socket
from pathlib import Path

import pytest

from response import HTTPResponse, internal_error, not_found, serialize_head
from socket_handler import write_http_response_message


def _written(response: HTTPResponse) -> bytes:
    server_side, client_side = socket.socketpair()
    with server_side, client_side:
        sent = write_http_response_message(server_side, response)
        server_side.shutdown(socket.SHUT_WR)
        buffer = bytearray()
        while True:
            chunk = client_side.recv(65536)
            if not chunk:
                break
            buffer.extend(chunk)
    assert sent == len(buffer)
    return bytes(buffer)


def test_response_framing_sets_exact_length() -> None:
    response = HTTPResponse(
        status_code=200,
        headers={"Content-Type": "application/octet-stream"},
        body="hello",
    )

    assert _written(response) == (
        b"HTTP/1.1 200 OK\r\n"
        b"Content-Type: application/octet-stream\r\n"
        b"Content-Length: 5\r\n"
        b"\r\n"
        b"hello"
    )


def test_length_counts_encoded_bytes_not_characters() -> None:
    raw = _written(HTTPResponse(status_code=200, body="café"))

    assert b"Content-Length: 5\r\n" in raw
    assert raw.endswith("café".encode("utf-8"))


def test_empty_body_still_gets_zero_length() -> None:
    raw = _written(HTTPResponse(status_code=200, body=b""))

    assert raw == b"HTTP/1.1 200 OK\r\nContent-Length: 0\r\n\r\n"


def test_not_found_has_no_headers_or_body() -> None:
    assert _written(not_found()) == b"HTTP/1.1 404 NOT FOUND\r\n\r\n"


def test_internal_error_has_no_headers_or_body() -> None:
    assert _written(internal_error()) == b"HTTP/1.1 500 Internal Server Error\r\n\r\n"


def test_no_ambient_headers_are_added() -> None:
    raw = _written(HTTPResponse(status_code=200, body="x"))

    for header in (b"Date:", b"Server:", b"Connection:", b"Content-Type:"):
        assert header not in raw


def test_file_response_length_matches_file(tmp_path: Path) -> None:
    file_path = tmp_path / "blob.bin"
    file_path.write_bytes(b"\x00\x01\x02")

    raw = _written(HTTPResponse(status_code=200, file_path=file_path))

    assert raw == b"HTTP/1.1 200 OK\r\nContent-Length: 3\r\n\r\n\x00\x01\x02"


def test_serialize_head_omits_length_without_body() -> None:
    assert serialize_head(HTTPResponse(status_code=503)) == (
        b"HTTP/1.1 503 Service Unavailable\r\n\r\n"
    )


def test_body_and_file_path_are_mutually_exclusive(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        HTTPResponse(status_code=200, body=b"x", file_path=tmp_path / "x")
