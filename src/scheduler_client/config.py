"""Runtime configuration for the scheduler client."""

from __future__ import annotations

import os
from dataclasses import dataclass

import httpx

ENV_PREFIX = "SCHEDULER_CLIENT"

DEFAULT_REQUEST_TIMEOUT_SECONDS = 3.0
DEFAULT_UNIX_SOCKET_HOST = "unixsock"


@dataclass(slots=True)
class ClientSettings:
    """Settings shared by discovery and every service call."""

    discovery_url: str | None = None
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    unix_socket_host: str = DEFAULT_UNIX_SOCKET_HOST

    @classmethod
    def from_env(cls) -> ClientSettings:
        """Load settings from environment with defaults for local development."""

        discovery_url = os.getenv(f"{ENV_PREFIX}_DISCOVERY_URL", "").strip() or None
        return cls(
            discovery_url=discovery_url,
            request_timeout_seconds=float(
                os.getenv(
                    f"{ENV_PREFIX}_REQUEST_TIMEOUT_SECONDS",
                    str(DEFAULT_REQUEST_TIMEOUT_SECONDS),
                ),
            ),
            unix_socket_host=os.getenv(
                f"{ENV_PREFIX}_UNIX_SOCKET_HOST",
                DEFAULT_UNIX_SOCKET_HOST,
            ).strip(),
        )

    def validate(self) -> None:
        if self.request_timeout_seconds <= 0:
            raise ValueError(
                f"{ENV_PREFIX}_REQUEST_TIMEOUT_SECONDS must be positive, "
                f"got {self.request_timeout_seconds}",
            )
        if not self.unix_socket_host:
            raise ValueError(f"{ENV_PREFIX}_UNIX_SOCKET_HOST must not be empty")

    def timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self.request_timeout_seconds)
