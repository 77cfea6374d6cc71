"""Low-level socket read/write utilities."""

from __future__ import annotations

import os
import socket
import time

from config import BUFFER_SIZE, SOCKET_TIMEOUT_SECS
from response import HTTPResponse, serialize_head

HEADER_TERMINATOR = b"\r\n\r\n"


class HTTPReadError(Exception):
    """Raised when a client request cannot be read from the socket."""


class SocketTimeoutError(HTTPReadError):
    """Raised when a client times out before completing its request line."""


class ResponseBodyUnavailableError(OSError):
    """Raised when a response file cannot be opened; nothing has been sent."""


class ResponseTruncatedError(OSError):
    """Raised when fewer body bytes were sent than Content-Length announced."""


def read_request_head(
    client_socket: socket.socket,
    buffer_size: int = BUFFER_SIZE,
    timeout_secs: float = SOCKET_TIMEOUT_SECS,
) -> bytes:
    """Read at most buffer_size bytes of the request head.

    Reading stops at the end of the header block, a full buffer, or EOF.
    All reads share a single deadline; if it passes before the request line
    is complete SocketTimeoutError is raised.
    """
    buffer = bytearray()
    deadline = time.monotonic() + timeout_secs

    while len(buffer) < buffer_size and HEADER_TERMINATOR not in buffer:
        remaining = deadline - time.monotonic()
        try:
            if remaining <= 0:
                raise socket.timeout("request deadline passed")
            client_socket.settimeout(remaining)
            chunk = client_socket.recv(buffer_size - len(buffer))
        except socket.timeout as exc:
            if b"\n" in buffer:
                break
            raise SocketTimeoutError("Timed out waiting for request line") from exc

        if not chunk:
            break
        buffer.extend(chunk)

    return bytes(buffer[:buffer_size])


def write_http_response_message(client_socket: socket.socket, response: HTTPResponse) -> int:
    """Write a complete response and return the number of bytes sent.

    File bodies are opened before anything is written, so an unreadable file
    surfaces as ResponseBodyUnavailableError while the response can still be
    replaced.
    """
    if response.file_path is not None:
        try:
            file_obj = response.file_path.open("rb")
        except OSError as exc:
            raise ResponseBodyUnavailableError(
                f"Cannot open response body {response.file_path}"
            ) from exc

        with file_obj:
            file_size = os.fstat(file_obj.fileno()).st_size
            head = serialize_head(response, content_length=file_size)
            client_socket.sendall(head)
            if file_size == 0:
                return len(head)
            sent = client_socket.sendfile(file_obj, count=file_size)
            if sent < file_size:
                # File shrank after fstat; the framing is already broken.
                raise ResponseTruncatedError(
                    f"Sent {sent} of {file_size} bytes of {response.file_path}"
                )
            return len(head) + sent

    if response.body is None:
        head = serialize_head(response)
        client_socket.sendall(head)
        return len(head)

    head = serialize_head(response, content_length=len(response.body))
    client_socket.sendall(head + response.body)
    return len(head) + len(response.body)


def close_gracefully(client_socket: socket.socket) -> None:
    """Half-close the socket and drain unread input so the peer is not reset."""
    try:
        client_socket.shutdown(socket.SHUT_WR)
        client_socket.setblocking(False)
        while client_socket.recv(BUFFER_SIZE):
            pass
    except OSError:
        return
