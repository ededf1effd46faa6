"""
Timestamp helpers.

Alert payloads carry epoch milliseconds as strings (what mobile clients send) while
API responses carry ISO-8601 UTC timestamps with a trailing `Z`.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone


def epoch_millis(now: float | None = None) -> int:
    """Return `now` (seconds since the epoch, default: current time) as integer milliseconds."""
    return int((time.time() if now is None else now) * 1000)


def utc_now_iso(now: datetime | None = None) -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision, e.g. `2026-01-05T10:00:00.000Z`."""
    dt = now or datetime.now(timezone.utc)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
