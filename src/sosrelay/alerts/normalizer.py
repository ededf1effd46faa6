"""
Alert normalizer.

Turns a validated `AlertRequest` plus its resolved district into the push message
sent to `district-<district>`. Every data-block value is a string, as FCM requires.
"""

from __future__ import annotations

import json
from typing import Any

from sosrelay.core.slug import humanize
from sosrelay.core.time import epoch_millis
from sosrelay.domain.models import (
    AlertKind,
    AlertRequest,
    AndroidHints,
    ApnsHints,
    NotificationPayload,
)

DEFAULT_TOPIC_PREFIX = "district-"
DEFAULT_SENDER_NAME = "Someone"
DEFAULT_SENDER_ID = "unknown"

NEW_ALERT_TITLE = "🚨 Emergency Alert"
RESOLVED_ALERT_TITLE = "✅ Emergency Resolved"


def topic_for(district: str, prefix: str = DEFAULT_TOPIC_PREFIX) -> str:
    return f"{prefix}{district}"


def _compact_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def location_label(request: AlertRequest, district: str) -> str:
    """Sender's own location label, else the district rendered for humans."""
    if request.user_info and request.user_info.location:
        return request.user_info.location
    return humanize(district)


def build_notification(
    request: AlertRequest,
    district: str,
    *,
    topic_prefix: str = DEFAULT_TOPIC_PREFIX,
    now: float | None = None,
) -> NotificationPayload:
    """Compose the notification for `request` addressed to `district`'s topic."""
    name = (request.user_info.name if request.user_info else None) or DEFAULT_SENDER_NAME
    label = location_label(request, district)
    timestamp = request.timestamp or str(epoch_millis(now))
    sender_id = request.sender_id or DEFAULT_SENDER_ID

    if request.kind is AlertKind.RESOLVED:
        return NotificationPayload(
            topic=topic_for(district, topic_prefix),
            title=RESOLVED_ALERT_TITLE,
            body=f"All good now. {name} • {label}.",
            data={
                "type": "sos_resolved",
                "sos_id": request.sos_id,
                "district": district,
                "timestamp": timestamp,
                "sender_id": sender_id,
            },
            android=AndroidHints(color="#00FF00"),
            apns=ApnsHints(
                title=RESOLVED_ALERT_TITLE,
                body=f"Emergency situation in {district.upper()} has been resolved",
                badge=0,
            ),
        )

    user_info = request.user_info.model_dump(exclude_unset=True) if request.user_info else {}
    return NotificationPayload(
        topic=topic_for(district, topic_prefix),
        title=NEW_ALERT_TITLE,
        body=f"Help needed. {name} • {label}",
        data={
            "type": "sos_alert",
            "district": district,
            "location": _compact_json(request.raw_location or {}),
            "timestamp": timestamp,
            "userInfo": _compact_json(user_info),
            "alertId": request.sos_id,
            "sender_id": sender_id,
        },
        android=AndroidHints(color="#FF0000", default_sound=True),
        apns=ApnsHints(
            title=NEW_ALERT_TITLE,
            body=f"SOS alert in {district.upper()} area",
            badge=1,
        ),
    )
