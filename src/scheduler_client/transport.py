"""Transports the client can reach the scheduler through.

A transport is picked once, from the discovery descriptor, and owns the
construction of the ``httpx.Client`` used for every later call. Request paths
and queries are built the same way for both transports.
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from scheduler_client.config import DEFAULT_UNIX_SOCKET_HOST
from scheduler_client.errors import ServiceAddrInvalid

logger = logging.getLogger(__name__)

_SUPPORTED_SCHEMES = ("http", "https")


class ServiceTransport(Protocol):
    """Connection factory for the scheduler service."""

    @property
    def base_url(self) -> httpx.URL:
        """URL every request path is joined to."""
        raise NotImplementedError

    def describe(self) -> str:
        """Human-readable target for logs."""
        raise NotImplementedError

    def build_http_client(self, timeout: httpx.Timeout) -> httpx.Client:
        """Create the client used for every service call."""
        raise NotImplementedError


class NetworkTransport:
    """HTTP over TCP to the advertised service address."""

    def __init__(
        self,
        base_url: httpx.URL | str,
        *,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = httpx.URL(base_url)
        self._http_transport = http_transport

    @property
    def base_url(self) -> httpx.URL:
        return self._base_url

    def describe(self) -> str:
        return f"tcp {self._base_url}"

    def build_http_client(self, timeout: httpx.Timeout) -> httpx.Client:
        transport = self._http_transport or httpx.HTTPTransport(retries=0)
        return httpx.Client(timeout=timeout, transport=transport)


class SocketTransport:
    """HTTP over a Unix domain socket.

    The base URL host is a placeholder that only shows up in logs and error
    messages; every connection is dialed to ``socket_path``.
    """

    def __init__(self, socket_path: str, *, placeholder_host: str = DEFAULT_UNIX_SOCKET_HOST) -> None:
        self._socket_path = socket_path
        self._base_url = httpx.URL(f"http://{placeholder_host}")

    @property
    def base_url(self) -> httpx.URL:
        return self._base_url

    @property
    def socket_path(self) -> str:
        return self._socket_path

    def describe(self) -> str:
        return f"unix socket {self._socket_path}"

    def build_http_client(self, timeout: httpx.Timeout) -> httpx.Client:
        return httpx.Client(
            timeout=timeout,
            transport=httpx.HTTPTransport(uds=self._socket_path, retries=0),
        )


def parse_service_addr(addr: str) -> httpx.URL:
    """Parse a network-mode service address; bare ``host:port`` means plain HTTP."""

    candidate = addr.strip()
    if candidate and "://" not in candidate:
        candidate = f"http://{candidate}"
    try:
        url = httpx.URL(candidate)
    except httpx.InvalidURL as exc:
        raise ServiceAddrInvalid(
            message=f"cannot parse scheduler service addr {addr!r}: {exc}",
            url=addr,
            service_addr=addr,
        ) from exc

    if url.scheme not in _SUPPORTED_SCHEMES or not url.host:
        raise ServiceAddrInvalid(
            message=(
                f"cannot parse scheduler service addr {addr!r}: "
                "expected an http(s) URL or host:port"
            ),
            url=addr,
            service_addr=addr,
        )
    return url
