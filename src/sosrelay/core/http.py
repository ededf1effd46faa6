"""
HTTP helpers.

Design goals:
- Small surface area (GET JSON).
- Deterministic defaults (timeout + User-Agent).
- Raise on non-2xx so callers can decide how to fail (the geocode resolver degrades to a default district).
"""

from __future__ import annotations

from typing import Any

import httpx


DEFAULT_USER_AGENT = "sosrelay/0.1.0 (+https://local)"


def get_json(
    url: str,
    *,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    timeout_seconds: float = 15,
    client: httpx.Client | None = None,
) -> Any:
    """GET `url` and return the decoded JSON response.

    When `client` is given it is used as-is (and left open); otherwise a short-lived
    client is created for the call.

    Raises:
        httpx.HTTPError: On transport errors, timeouts or non-2xx status codes.
        ValueError: If the response body is not valid JSON.
    """
    request_headers = {"User-Agent": DEFAULT_USER_AGENT}
    if headers:
        request_headers.update(headers)

    if client is not None:
        resp = client.get(url, params=params, headers=request_headers, timeout=timeout_seconds)
        resp.raise_for_status()
        return resp.json()

    with httpx.Client(timeout=timeout_seconds) as owned:
        resp = owned.get(url, params=params, headers=request_headers)
        resp.raise_for_status()
        return resp.json()
