"""Service discovery and transport selection.

Discovery runs exactly once per client: one bounded GET to the discovery URL,
whose JSON descriptor says whether the scheduler listens on a network address
or on a local Unix socket. There is no retry and the descriptor is not cached
beyond the client built from it.
"""

from __future__ import annotations

import json
import logging

import httpx

from scheduler_client.client import SchedulerClient
from scheduler_client.config import ClientSettings
from scheduler_client.errors import DiscoveryBodyUnreadable, DiscoveryMalformed, DiscoveryUnreachable
from scheduler_client.models import ServiceDescriptor
from scheduler_client.transport import (
    NetworkTransport,
    ServiceTransport,
    SocketTransport,
    parse_service_addr,
)

logger = logging.getLogger(__name__)


class _BorrowedTransport(httpx.BaseTransport):
    """Delegates to a transport owned by the caller; closing it is a no-op."""

    def __init__(self, transport: httpx.BaseTransport) -> None:
        self._transport = transport

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        return self._transport.handle_request(request)

    def close(self) -> None:
        pass


def fetch_descriptor(
    discovery_url: str,
    *,
    settings: ClientSettings | None = None,
    http_transport: httpx.BaseTransport | None = None,
) -> ServiceDescriptor:
    """Fetch and decode the service descriptor advertised at ``discovery_url``."""

    settings = settings or ClientSettings.from_env()
    transport: httpx.BaseTransport
    if http_transport is not None:
        transport = _BorrowedTransport(http_transport)
    else:
        transport = httpx.HTTPTransport(retries=0)
    client = httpx.Client(timeout=settings.timeout(), transport=transport)
    try:
        with client.stream("GET", discovery_url) as response:
            try:
                response.read()
            except httpx.HTTPError as exc:
                raise DiscoveryBodyUnreadable(
                    message=(
                        f"cannot read body at discovery endpoint '{discovery_url}', "
                        f"status code {response.status_code}. Error: {exc}"
                    ),
                    url=discovery_url,
                    status_code=response.status_code,
                ) from exc
            status_code = response.status_code
            body = response.text
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        # Raised before any response arrived.
        raise DiscoveryUnreachable(
            message=f"cannot reach discovery endpoint '{discovery_url}': {exc}",
            url=discovery_url,
        ) from exc
    finally:
        client.close()

    logger.debug("Discovery %s answered %d", discovery_url, status_code)
    try:
        return ServiceDescriptor.from_payload(json.loads(body))
    except (ValueError, RecursionError) as exc:
        raise DiscoveryMalformed(
            message=(
                f"cannot unmarshal json at discovery endpoint '{discovery_url}': {exc}. "
                f"Body was:\n{body}"
            ),
            url=discovery_url,
            body=body,
        ) from exc


def select_transport(
    descriptor: ServiceDescriptor,
    *,
    settings: ClientSettings | None = None,
    http_transport: httpx.BaseTransport | None = None,
) -> ServiceTransport:
    """Pick the transport the descriptor advertises."""

    settings = settings or ClientSettings.from_env()
    if descriptor.unix_sock_mode:
        return SocketTransport(descriptor.service_addr, placeholder_host=settings.unix_socket_host)
    return NetworkTransport(parse_service_addr(descriptor.service_addr), http_transport=http_transport)


def resolve(
    discovery_url: str | None = None,
    *,
    settings: ClientSettings | None = None,
    http_transport: httpx.BaseTransport | None = None,
) -> SchedulerClient:
    """Discover the scheduler and return a client bound to its transport.

    ``http_transport`` replaces the network transport for discovery and for
    network-mode calls; socket mode always dials the advertised socket path.
    """

    settings = settings or ClientSettings.from_env()
    settings.validate()
    url = discovery_url or settings.discovery_url
    if not url:
        raise ValueError("A discovery URL is required (argument or SCHEDULER_CLIENT_DISCOVERY_URL)")

    descriptor = fetch_descriptor(url, settings=settings, http_transport=http_transport)
    transport = select_transport(descriptor, settings=settings, http_transport=http_transport)
    logger.info("Scheduler resolved via %s: %s", url, transport.describe())
    return SchedulerClient(transport, descriptor=descriptor, settings=settings)
