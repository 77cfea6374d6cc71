"""Directory file server entry point and connection lifecycle orchestration."""

from __future__ import annotations

import argparse
import json
import logging
import os
import socket
import time
from pathlib import Path

from config import (
    ACCEPT_POLL_SECS,
    BUFFER_SIZE,
    HOST,
    LISTEN_BACKLOG,
    LOG_FORMAT,
    PORT,
    REQUEST_QUEUE_SIZE,
    SERVER_ENGINE,
    SERVER_ENGINES,
    SOCKET_TIMEOUT_SECS,
    WORKER_COUNT,
)
from handlers.file_handlers import serve_path
from metrics import MetricsRegistry
from request import HTTPRequest, HTTPRequestParseError
from response import HTTPResponse, internal_error
from socket_handler import (
    ResponseBodyUnavailableError,
    SocketTimeoutError,
    close_gracefully,
    read_request_head,
    write_http_response_message,
)
from thread_pool import ThreadPool

logger = logging.getLogger(__name__)


class HTTPServer:
    def __init__(
        self,
        root_dir: str | os.PathLike[str] | None = None,
        host: str = HOST,
        port: int = PORT,
        worker_count: int = WORKER_COUNT,
        request_queue_size: int = REQUEST_QUEUE_SIZE,
        *,
        engine: str = SERVER_ENGINE,
        socket_timeout_secs: float = SOCKET_TIMEOUT_SECS,
        buffer_size: int = BUFFER_SIZE,
        log_format: str = LOG_FORMAT,
        strict_request_line: bool = False,
    ) -> None:
        if engine not in SERVER_ENGINES:
            raise ValueError(f"Unsupported engine: {engine}")

        self.root_dir = Path(root_dir if root_dir is not None else os.getcwd()).resolve(strict=True)
        if not self.root_dir.is_dir():
            raise NotADirectoryError(f"Root is not a directory: {self.root_dir}")

        self.host = host
        self.port = port
        self.worker_count = worker_count
        self.request_queue_size = request_queue_size
        self.engine = engine
        self.socket_timeout_secs = socket_timeout_secs
        self.buffer_size = buffer_size
        self.log_format = log_format
        self.strict_request_line = strict_request_line

        self._server_socket: socket.socket | None = None
        self._pool: ThreadPool | None = None
        self._running = False
        self.metrics = MetricsRegistry()

    def start(self) -> None:
        """Listen and serve connections until stop() is called."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as server_socket:
            self._server_socket = server_socket
            server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            server_socket.bind((self.host, self.port))
            server_socket.listen(LISTEN_BACKLOG)
            server_socket.settimeout(ACCEPT_POLL_SECS)
            self.port = server_socket.getsockname()[1]

            pool: ThreadPool | None = None
            if self.engine == "threadpool":
                pool = ThreadPool(
                    worker_count=self.worker_count,
                    queue_size=self.request_queue_size,
                    handler=self._handle_client,
                )
                pool.start()
                self._pool = pool

            print(f"Server is listening on http://{self.host}:{self.port}", flush=True)
            logger.info("serving root=%s engine=%s", self.root_dir, self.engine)

            self._running = True
            try:
                while self._running:
                    try:
                        client_socket, address = server_socket.accept()
                    except socket.timeout:
                        continue
                    except OSError as exc:
                        if not self._running:
                            break
                        self.metrics.record_accept_error(exc.__class__.__name__)
                        logger.warning("accept failed: %s", exc)
                        time.sleep(ACCEPT_POLL_SECS)
                        continue

                    if pool is None:
                        self._handle_client(client_socket, address)
                    elif not pool.submit(client_socket, address):
                        self._send_queue_full_response(client_socket, address)
            finally:
                if pool is not None:
                    pool.shutdown()
                self._pool = None
                logger.info(
                    "server stopped metrics=%s",
                    json.dumps(self.metrics.snapshot(), sort_keys=True),
                )

    def stop(self) -> None:
        self._running = False
        if self._server_socket is not None:
            self._server_socket.close()
            self._server_socket = None
        if self._pool is not None:
            self._pool.shutdown()
            self._pool = None

    def _send_queue_full_response(self, client_socket: socket.socket, address: tuple[str, int]) -> None:
        self.metrics.connection_rejected()
        with client_socket:
            started_at = time.perf_counter()
            response = HTTPResponse(status_code=503, body="Service Unavailable")
            try:
                client_socket.settimeout(self.socket_timeout_secs)
                bytes_sent = write_http_response_message(client_socket, response)
            except OSError as exc:
                self.metrics.record_write_error(exc.__class__.__name__)
                logger.warning("client=%s queue-full reply failed: %s", address[0], exc)
                return
            close_gracefully(client_socket)
            self._record_and_log(
                address=address,
                method="-",
                target="-",
                response=response,
                bytes_in=0,
                bytes_out=bytes_sent,
                started_at=started_at,
            )

    def _handle_client(self, client_socket: socket.socket, address: tuple[str, int]) -> None:
        with client_socket:
            self.metrics.connection_opened()
            started_at = time.perf_counter()
            try:
                try:
                    raw_request = read_request_head(
                        client_socket,
                        buffer_size=self.buffer_size,
                        timeout_secs=self.socket_timeout_secs,
                    )
                except SocketTimeoutError as exc:
                    self.metrics.record_read_error(exc.__class__.__name__)
                    logger.warning("client=%s closed: %s", address[0], exc)
                    return
                except OSError as exc:
                    self.metrics.record_read_error(exc.__class__.__name__)
                    logger.warning("client=%s read failed: %s", address[0], exc)
                    return

                method, target = "-", "-"
                try:
                    request = HTTPRequest.from_bytes(raw_request, strict=self.strict_request_line)
                except HTTPRequestParseError as exc:
                    logger.debug("client=%s rejected request line: %s", address[0], exc)
                    response = HTTPResponse(status_code=exc.status_code)
                else:
                    if request.defaulted_to_root:
                        logger.debug(
                            "client=%s sent no usable request line; serving root",
                            address[0],
                        )
                    method, target = request.method or "-", request.target
                    response = self._dispatch(request)

                client_socket.settimeout(self.socket_timeout_secs)
                try:
                    bytes_sent = write_http_response_message(client_socket, response)
                except ResponseBodyUnavailableError:
                    logger.exception("client=%s target=%s body unavailable", address[0], target)
                    response = internal_error()
                    bytes_sent = write_http_response_message(client_socket, response)
            except OSError as exc:
                self.metrics.record_write_error(exc.__class__.__name__)
                logger.warning("client=%s write failed: %s", address[0], exc)
                return
            finally:
                self.metrics.connection_closed()

            close_gracefully(client_socket)
            self._record_and_log(
                address=address,
                method=method,
                target=target,
                response=response,
                bytes_in=len(raw_request),
                bytes_out=bytes_sent,
                started_at=started_at,
            )

    def _dispatch(self, request: HTTPRequest) -> HTTPResponse:
        try:
            return serve_path(request, self.root_dir)
        except Exception:
            logger.exception("Unhandled error serving target=%s", request.target)
            return internal_error()

    def _record_and_log(
        self,
        *,
        address: tuple[str, int],
        method: str,
        target: str,
        response: HTTPResponse,
        bytes_in: int,
        bytes_out: int,
        started_at: float,
    ) -> None:
        duration_ms = (time.perf_counter() - started_at) * 1000
        self.metrics.record_request(
            status_code=response.status_code,
            duration_ms=duration_ms,
            bytes_sent=bytes_out,
        )
        event = {
            "client": address[0],
            "method": method,
            "target": target,
            "status": response.status_code,
            "engine": self.engine,
            "bytes_in": bytes_in,
            "bytes_out": bytes_out,
            "latency_ms": round(duration_ms, 3),
        }
        if self.log_format == "json":
            logger.info(json.dumps(event, sort_keys=True))
            return

        logger.info(
            (
                "client=%s method=%s target=%s status=%s engine=%s "
                "bytes_in=%s bytes_out=%s duration_ms=%.2f"
            ),
            event["client"],
            event["method"],
            event["target"],
            event["status"],
            event["engine"],
            event["bytes_in"],
            event["bytes_out"],
            duration_ms,
        )


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve files and directory listings over HTTP")
    parser.add_argument("--host", default=HOST)
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument("--root", default=None, help="directory to serve (default: cwd)")
    parser.add_argument("--engine", choices=list(SERVER_ENGINES), default=SERVER_ENGINE)
    parser.add_argument("--workers", type=int, default=WORKER_COUNT)
    parser.add_argument("--queue-size", type=int, default=REQUEST_QUEUE_SIZE)
    parser.add_argument("--timeout", type=float, default=SOCKET_TIMEOUT_SECS)
    parser.add_argument("--log-format", choices=["plain", "json"], default=LOG_FORMAT)
    parser.add_argument(
        "--strict",
        action="store_true",
        help="answer 400 to malformed request lines instead of serving the root",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    server = HTTPServer(
        root_dir=args.root,
        host=args.host,
        port=args.port,
        worker_count=args.workers,
        request_queue_size=args.queue_size,
        engine=args.engine,
        socket_timeout_secs=args.timeout,
        log_format=args.log_format,
        strict_request_line=args.strict,
    )
    try:
        server.start()
    except KeyboardInterrupt:
        server.stop()


if __name__ == "__main__":
    main()
