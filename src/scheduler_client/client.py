"""Synchronous client for the scheduler service HTTP API."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager

import httpx

from scheduler_client.config import ClientSettings
from scheduler_client.errors import ResponseMalformed, TransportFailure
from scheduler_client.models import ServiceDescriptor, SubmissionForm, Task, decode_tasks
from scheduler_client.transport import ServiceTransport, SocketTransport
from scheduler_client.validator import ensure_ok

logger = logging.getLogger(__name__)

TASKS_PATH = "tasks"
TEMPLATE_CONTENT_TYPE = "application/text"


class SchedulerClient:
    """Scheduler API over a transport chosen at construction time.

    Every call issues exactly one request and never retries. Failures are
    raised per call and do not affect later calls.
    """

    def __init__(
        self,
        transport: ServiceTransport,
        *,
        descriptor: ServiceDescriptor,
        settings: ClientSettings | None = None,
    ) -> None:
        self._settings = settings or ClientSettings.from_env()
        self._settings.validate()
        self._transport = transport
        self._descriptor = descriptor
        self._client = transport.build_http_client(self._settings.timeout())

    @classmethod
    def for_unix_socket(
        cls,
        socket_path: str,
        *,
        settings: ClientSettings | None = None,
    ) -> SchedulerClient:
        """Build a socket client without discovery, with a synthetic descriptor."""

        settings = settings or ClientSettings.from_env()
        return cls(
            SocketTransport(socket_path, placeholder_host=settings.unix_socket_host),
            descriptor=ServiceDescriptor(uptime="", service_addr=socket_path, unix_sock_mode=True),
            settings=settings,
        )

    @property
    def base_url(self) -> httpx.URL:
        return self._transport.base_url

    @property
    def transport(self) -> ServiceTransport:
        return self._transport

    @property
    def descriptor(self) -> ServiceDescriptor:
        return self._descriptor

    def ping(self) -> None:
        """Check that the service root answers 200."""

        with self._request("GET", self.base_url) as response:
            ensure_ok(response)
            response.read()

    def service_info(self) -> ServiceDescriptor:
        return self._descriptor

    def list_tasks(self) -> list[Task]:
        """Return scheduled tasks in the order the service lists them."""

        url = self._tasks_url()
        with self._request("GET", url) as response:
            ensure_ok(response)
            body = self._read_body(response)

        try:
            return decode_tasks(json.loads(body))
        except (ValueError, RecursionError) as exc:
            # json.JSONDecodeError is a ValueError too; deep nesting exhausts the decoder stack.
            raise ResponseMalformed(
                message=f"cannot decode task list from '{url}': {exc}. Body was:\n{body}",
                url=str(url),
                body=body,
            ) from exc

    def post_task(self, form: SubmissionForm) -> None:
        """Submit ``form.template`` for ``form.region`` with optional relative offsets."""

        url = self._tasks_url().copy_with(params=form.query_params())
        with self._request(
            "POST",
            url,
            content=form.template.encode("utf-8"),
            headers={"Content-Type": TEMPLATE_CONTENT_TYPE},
        ) as response:
            ensure_ok(response)
            response.read()
        logger.info("Submitted task for region %s", form.region)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> SchedulerClient:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def _tasks_url(self) -> httpx.URL:
        base = self.base_url
        return base.copy_with(path=f"{base.path.rstrip('/')}/{TASKS_PATH}", query=None)

    @contextmanager
    def _request(self, method: str, url: httpx.URL, **kwargs: object) -> Iterator[httpx.Response]:
        logger.debug("%s %s via %s", method, url, self._transport.describe())
        try:
            with self._client.stream(method, url, **kwargs) as response:  # type: ignore[arg-type]
                yield response
        except httpx.RequestError as exc:
            # TransportError plus DecodingError from a broken Content-Encoding.
            logger.warning("Transport failure on %s %s: %s", method, url, exc)
            raise TransportFailure(
                message=f"{method} '{url}' failed: {exc.__class__.__name__}: {exc}",
                url=str(url),
            ) from exc

    @staticmethod
    def _read_body(response: httpx.Response) -> str:
        response.read()
        return response.text
