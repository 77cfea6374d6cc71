"""Bounded worker pool for accepted client sockets."""

from __future__ import annotations

import logging
import queue
import socket
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

ClientAddress = tuple[str, int]
ClientHandler = Callable[[socket.socket, ClientAddress], None]


@dataclass(slots=True, frozen=True)
class ConnectionJob:
    client_socket: socket.socket
    address: ClientAddress


class ThreadPool:
    """Fixed-size pool of connection workers fed from a bounded queue.

    A handler that raises is logged and the worker moves on to the next job,
    so one failing connection never shrinks the pool.
    """

    def __init__(self, worker_count: int, queue_size: int, handler: ClientHandler) -> None:
        if worker_count <= 0:
            raise ValueError("worker_count must be positive")
        if queue_size <= 0:
            raise ValueError("queue_size must be positive")

        self._handler = handler
        self._jobs: queue.Queue[ConnectionJob | None] = queue.Queue(maxsize=queue_size)
        self._stop_event = threading.Event()
        self._workers: list[threading.Thread] = []
        self._worker_count = worker_count
        self._unfinished_jobs = 0
        self._idle = threading.Condition()
        self._shutdown_lock = threading.Lock()
        self._shutdown_started = False

    @property
    def worker_count(self) -> int:
        return self._worker_count

    @property
    def threads(self) -> tuple[threading.Thread, ...]:
        return tuple(self._workers)

    def start(self) -> None:
        for index in range(self._worker_count):
            worker = threading.Thread(
                target=self._run_worker,
                name=f"dirserve-worker-{index}",
                daemon=True,
            )
            self._workers.append(worker)
            worker.start()

    def submit(self, client_socket: socket.socket, address: ClientAddress) -> bool:
        """Queue a connection; False when stopped or the queue is full."""
        if self._stop_event.is_set():
            return False
        with self._idle:
            try:
                self._jobs.put_nowait(ConnectionJob(client_socket, address))
            except queue.Full:
                return False
            self._unfinished_jobs += 1
        return True

    def wait_until_idle(self, timeout: float | None = None) -> bool:
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._idle:
            while self._unfinished_jobs > 0:
                if deadline is None:
                    self._idle.wait(timeout=0.1)
                    continue
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                self._idle.wait(timeout=min(remaining, 0.1))
        return True

    def shutdown(self, *, graceful: bool = False, timeout: float | None = None) -> None:
        with self._shutdown_lock:
            if self._shutdown_started:
                return
            self._shutdown_started = True

        if graceful:
            self.wait_until_idle(timeout=timeout)

        self._stop_event.set()
        for _ in self._workers:
            try:
                self._jobs.put_nowait(None)
            except queue.Full:
                break

        for worker in self._workers:
            worker.join(timeout=1.0)
        self._close_pending()

    def _close_pending(self) -> None:
        while True:
            try:
                job = self._jobs.get_nowait()
            except queue.Empty:
                return
            if job is not None:
                job.client_socket.close()
                with self._idle:
                    self._unfinished_jobs -= 1
            self._jobs.task_done()

    def _run_worker(self) -> None:
        while not self._stop_event.is_set():
            try:
                job = self._jobs.get(timeout=0.2)
            except queue.Empty:
                continue
            if job is None:
                self._jobs.task_done()
                return

            try:
                self._handler(job.client_socket, job.address)
            except Exception:
                logger.exception("Unhandled error for client %s", job.address[0])
            finally:
                with self._idle:
                    self._unfinished_jobs -= 1
                    self._idle.notify_all()
                self._jobs.task_done()
