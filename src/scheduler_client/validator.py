"""Single success rule applied to every scheduler response."""

from __future__ import annotations

import json
import logging

import httpx

from scheduler_client.errors import UnexpectedStatus

logger = logging.getLogger(__name__)


def read_diagnostic_body(response: httpx.Response) -> str:
    """Read the body for an error message; a failed read yields ``""``."""

    try:
        response.read()
    except httpx.HTTPError as exc:
        logger.debug("Could not read error body from %s: %s", response.request.url, exc)
        return ""
    return response.text


def ensure_ok(response: httpx.Response) -> None:
    """Raise :class:`UnexpectedStatus` unless the response status is exactly 200."""

    status_code = response.status_code
    if status_code == httpx.codes.OK:
        return

    url = str(response.request.url)
    body = read_diagnostic_body(response)
    logger.warning("Scheduler returned %d for %s", status_code, url)
    raise UnexpectedStatus(
        message=(
            f"Got {status_code} status instead of 200 from '{url}': "
            f"{json.dumps(body, ensure_ascii=False)}"
        ),
        url=url,
        status_code=status_code,
        body=body,
    )
