"""Shared test fixtures."""

from __future__ import annotations

import shutil
import socketserver
import tempfile
import threading
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler
from pathlib import Path
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest

from scheduler_client import (
    ClientSettings,
    NetworkTransport,
    SchedulerClient,
    ServiceDescriptor,
)

from .fakes import SERVICE_URL


@dataclass(slots=True)
class RecordedRequest:
    method: str
    path: str
    query: dict[str, list[str]]
    body: str
    headers: dict[str, str]


@dataclass(slots=True)
class FakeScheduler:
    """In-process scheduler listening on a Unix socket."""

    socket_path: str
    requests: list[RecordedRequest] = field(default_factory=list)
    responses: dict[tuple[str, str], tuple[int, str]] = field(default_factory=dict)
    delay_seconds: float = 0.0
    lock: threading.Lock = field(default_factory=threading.Lock)

    def respond(self, method: str, path: str, status: int, body: str = "") -> None:
        self.responses[(method, path)] = (status, body)


class _SchedulerHandler(BaseHTTPRequestHandler):
    protocol_version = "HTTP/1.1"

    def _handle(self) -> None:
        scheduler: FakeScheduler = self.server.scheduler  # type: ignore[attr-defined]
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length).decode("utf-8") if length else ""
        parsed = urlsplit(self.path)
        with scheduler.lock:
            scheduler.requests.append(
                RecordedRequest(
                    method=self.command,
                    path=parsed.path,
                    query=parse_qs(parsed.query),
                    body=body,
                    headers={key.lower(): value for key, value in self.headers.items()},
                ),
            )
        if scheduler.delay_seconds:
            time.sleep(scheduler.delay_seconds)
        status, payload = scheduler.responses.get((self.command, parsed.path), (200, ""))
        data = payload.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    do_GET = _handle
    do_POST = _handle

    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        pass


class _QuietUnixServer(socketserver.ThreadingUnixStreamServer):
    daemon_threads = True

    def handle_error(self, request, client_address) -> None:  # type: ignore[no-untyped-def]
        # Slow handlers write to sockets the client already abandoned.
        pass


@pytest.fixture()
def unix_scheduler() -> Iterator[FakeScheduler]:
    """Serve a fake scheduler on a short Unix socket path."""

    # AF_UNIX paths are limited to ~108 bytes, pytest's tmp_path can exceed that.
    socket_dir = tempfile.mkdtemp(prefix="sched-")
    socket_path = str(Path(socket_dir) / "s.sock")
    scheduler = FakeScheduler(socket_path=socket_path)
    server = _QuietUnixServer(socket_path, _SchedulerHandler)
    server.scheduler = scheduler  # type: ignore[attr-defined]
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield scheduler
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)
        shutil.rmtree(socket_dir, ignore_errors=True)


@pytest.fixture()
def network_descriptor() -> ServiceDescriptor:
    return ServiceDescriptor(uptime="1h2m3s", service_addr=SERVICE_URL, unix_sock_mode=False)


@pytest.fixture()
def mock_client(
    network_descriptor: ServiceDescriptor,
) -> Callable[[Callable[[httpx.Request], httpx.Response]], SchedulerClient]:
    """Build a network-mode client whose requests go to ``handler``."""

    def _build(handler: Callable[[httpx.Request], httpx.Response]) -> SchedulerClient:
        return SchedulerClient(
            NetworkTransport(SERVICE_URL, http_transport=httpx.MockTransport(handler)),
            descriptor=network_descriptor,
            settings=ClientSettings(request_timeout_seconds=1.0),
        )

    return _build

