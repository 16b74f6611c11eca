"""Error hierarchy raised by the scheduler client.

Discovery errors abort client construction. Every other error is raised per
call and leaves the client usable for later calls.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class SchedulerClientError(Exception):
    """Base scheduler client error."""

    message: str
    url: str = ""
    code: str = "scheduler_client_error"

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class DiscoveryUnreachable(SchedulerClientError):
    """Discovery request could not be sent or the connection failed."""

    code: str = "discovery_unreachable"


@dataclass(slots=True)
class DiscoveryBodyUnreadable(SchedulerClientError):
    """Discovery answered, but its body could not be read to the end."""

    status_code: int | None = None
    code: str = "discovery_body_unreadable"


@dataclass(slots=True)
class DiscoveryMalformed(SchedulerClientError):
    """Discovery body is not a service descriptor."""

    body: str = ""
    code: str = "discovery_malformed"


@dataclass(slots=True)
class ServiceAddrInvalid(SchedulerClientError):
    """Advertised service address is not a usable URL."""

    service_addr: str = ""
    code: str = "service_addr_invalid"


@dataclass(slots=True)
class TransportFailure(SchedulerClientError):
    """Network-level failure, timeouts included."""

    code: str = "transport_failure"


@dataclass(slots=True)
class UnexpectedStatus(SchedulerClientError):
    """Service answered with anything other than 200."""

    status_code: int = 0
    body: str = ""
    code: str = "unexpected_status"


@dataclass(slots=True)
class ResponseMalformed(SchedulerClientError):
    """A 200 response whose body does not decode to the expected shape."""

    body: str = ""
    code: str = "response_malformed"
