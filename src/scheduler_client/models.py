"""Wire models exchanged with the discovery endpoint and the scheduler service."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def _lookup(payload: Mapping[str, Any], key: str) -> Any:
    """Return the value for ``key``, falling back to a case-insensitive match."""

    if key in payload:
        return payload[key]
    lowered = key.lower()
    for candidate, value in payload.items():
        if isinstance(candidate, str) and candidate.lower() == lowered:
            return value
    return None


def _string(payload: Mapping[str, Any], key: str) -> str:
    value = _lookup(payload, key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"Field {key!r} must be a string, got {type(value).__name__}")
    return value


def _boolean(payload: Mapping[str, Any], key: str) -> bool:
    value = _lookup(payload, key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"Field {key!r} must be a boolean, got {type(value).__name__}")
    return value


def parse_timestamp(raw: str) -> datetime:
    """Parse an RFC 3339 timestamp; sub-microsecond digits are truncated."""

    normalized = raw.strip()
    if normalized.endswith(("Z", "z")):
        normalized = normalized[:-1] + "+00:00"
    normalized = _FRACTION_RE.sub(r"\1", normalized)
    try:
        return datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise ValueError(f"Invalid timestamp: {raw!r}") from exc


def _timestamp(payload: Mapping[str, Any], key: str) -> datetime | None:
    value = _lookup(payload, key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"Field {key!r} must be a timestamp string, got {type(value).__name__}")
    return parse_timestamp(value)


def _require_object(payload: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValueError(f"{what} must be a JSON object, got {type(payload).__name__}")
    return payload


@dataclass(frozen=True, slots=True)
class ServiceDescriptor:
    """Service location metadata returned by the discovery endpoint."""

    uptime: str
    service_addr: str
    unix_sock_mode: bool

    @classmethod
    def from_payload(cls, payload: Any) -> ServiceDescriptor:
        data = _require_object(payload, "Service descriptor")
        return cls(
            uptime=_string(data, "uptime"),
            service_addr=_string(data, "serviceAddr"),
            unix_sock_mode=_boolean(data, "unixSockMode"),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "uptime": self.uptime,
            "serviceAddr": self.service_addr,
            "unixSockMode": self.unix_sock_mode,
        }


@dataclass(frozen=True, slots=True)
class Task:
    """Scheduled task as reported by the service."""

    content: str
    run_at: datetime | None
    revert_at: datetime | None
    region: str

    @classmethod
    def from_payload(cls, payload: Any) -> Task:
        data = _require_object(payload, "Task")
        return cls(
            content=_string(data, "content"),
            run_at=_timestamp(data, "runAt"),
            revert_at=_timestamp(data, "revertAt"),
            region=_string(data, "region"),
        )


@dataclass(frozen=True, slots=True)
class SubmissionForm:
    """Input for task creation.

    ``run_in`` and ``revert_in`` are duration strings such as ``"5m"``. They
    are interpreted by the service; an empty value means no offset was
    requested.
    """

    region: str
    template: str = ""
    run_in: str = ""
    revert_in: str = ""

    def __post_init__(self) -> None:
        if not self.region or not self.region.strip():
            raise ValueError("Submission region must not be empty")

    def query_params(self) -> list[tuple[str, str]]:
        params = [("region", self.region)]
        if self.run_in:
            params.append(("run", self.run_in))
        if self.revert_in:
            params.append(("revert", self.revert_in))
        return params


def decode_tasks(payload: Any) -> list[Task]:
    """Decode the ``GET /tasks`` array, keeping server order."""

    if payload is None:
        return []
    if not isinstance(payload, list):
        raise ValueError(f"Task list must be a JSON array, got {type(payload).__name__}")
    return [Task.from_payload(item) for item in payload]
