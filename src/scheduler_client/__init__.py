"""Client for the scheduler service: discovery, transport selection and the task API."""

from scheduler_client.client import SchedulerClient
from scheduler_client.config import ClientSettings
from scheduler_client.discovery import fetch_descriptor, resolve, select_transport
from scheduler_client.errors import (
    DiscoveryBodyUnreadable,
    DiscoveryMalformed,
    DiscoveryUnreachable,
    ResponseMalformed,
    SchedulerClientError,
    ServiceAddrInvalid,
    TransportFailure,
    UnexpectedStatus,
)
from scheduler_client.models import ServiceDescriptor, SubmissionForm, Task
from scheduler_client.transport import NetworkTransport, ServiceTransport, SocketTransport

__version__ = "0.1.0"

connect = resolve

__all__ = [
    "ClientSettings",
    "DiscoveryBodyUnreadable",
    "DiscoveryMalformed",
    "DiscoveryUnreachable",
    "NetworkTransport",
    "ResponseMalformed",
    "SchedulerClient",
    "SchedulerClientError",
    "ServiceAddrInvalid",
    "ServiceDescriptor",
    "ServiceTransport",
    "SocketTransport",
    "SubmissionForm",
    "Task",
    "TransportFailure",
    "UnexpectedStatus",
    "__version__",
    "connect",
    "fetch_descriptor",
    "resolve",
    "select_transport",
]
