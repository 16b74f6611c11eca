from __future__ import annotations

import allure
import httpx
import pytest

from scheduler_client.errors import ServiceAddrInvalid
from scheduler_client.transport import NetworkTransport, SocketTransport, parse_service_addr

pytestmark = [
    allure.epic("Scheduler Client"),
    allure.feature("Transport Selection"),
]


@pytest.mark.parametrize(
    ("addr", "expected"),
    [
        ("http://scheduler.local:8080", "http://scheduler.local:8080"),
        ("https://scheduler.example.com/api", "https://scheduler.example.com/api"),
        ("127.0.0.1:9000", "http://127.0.0.1:9000"),
        ("localhost:8080", "http://localhost:8080"),
    ],
)
def test_parse_service_addr(addr: str, expected: str) -> None:
    url = parse_service_addr(addr)

    assert url == httpx.URL(expected)


@pytest.mark.parametrize(
    "addr",
    ["", "ftp://scheduler.local", "http://scheduler.local:notaport", "http://"],
)
def test_parse_service_addr_rejects_unusable_addresses(addr: str) -> None:
    with pytest.raises(ServiceAddrInvalid) as exc_info:
        parse_service_addr(addr)

    assert exc_info.value.service_addr == addr
    assert exc_info.value.code == "service_addr_invalid"


def test_network_transport_uses_injected_transport() -> None:
    seen: list[httpx.URL] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url)
        return httpx.Response(200)

    transport = NetworkTransport(
        "http://scheduler.local:8080",
        http_transport=httpx.MockTransport(handler),
    )
    with transport.build_http_client(httpx.Timeout(1.0)) as client:
        client.get(transport.base_url)

    assert [(url.host, url.port) for url in seen] == [("scheduler.local", 8080)]
    assert transport.describe() == "tcp http://scheduler.local:8080"


def test_socket_transport_base_url_is_placeholder() -> None:
    transport = SocketTransport("/run/scheduler.sock", placeholder_host="local-scheduler")

    assert transport.base_url == httpx.URL("http://local-scheduler")
    assert transport.socket_path == "/run/scheduler.sock"
    assert transport.describe() == "unix socket /run/scheduler.sock"


def test_socket_transport_client_applies_timeout() -> None:
    transport = SocketTransport("/run/scheduler.sock")

    with transport.build_http_client(httpx.Timeout(0.5)) as client:
        assert client.timeout == httpx.Timeout(0.5)
