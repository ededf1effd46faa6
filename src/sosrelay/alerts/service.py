"""
Alert service: validate -> resolve district -> normalize -> dispatch.

Each alert produces exactly one dispatch attempt. Validation and delivery failures
propagate to the caller; district resolution never fails (it degrades).
"""

from __future__ import annotations

import logging
import random
import string
from dataclasses import dataclass
from typing import Any

from sosrelay.alerts.dispatcher import NotificationDispatcher
from sosrelay.alerts.normalizer import DEFAULT_TOPIC_PREFIX, build_notification
from sosrelay.alerts.validation import parse_alert_request
from sosrelay.config.settings import ManualAlertSettings
from sosrelay.core.time import epoch_millis
from sosrelay.domain.models import AlertKind, AlertRequest, DistrictResolution
from sosrelay.resolver.base import DistrictQuery, DistrictResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AlertOutcome:
    """Result of one successfully dispatched alert."""

    request: AlertRequest
    resolution: DistrictResolution
    topic: str
    message_id: str

    @property
    def district(self) -> str:
        return self.resolution.district


class AlertService:
    def __init__(
        self,
        resolver: DistrictResolver,
        dispatcher: NotificationDispatcher,
        *,
        topic_prefix: str = DEFAULT_TOPIC_PREFIX,
    ):
        self._resolver = resolver
        self._dispatcher = dispatcher
        self._topic_prefix = topic_prefix

    def parse(self, body: Any) -> AlertRequest:
        """Validate a raw request body against what the active resolver needs."""
        return parse_alert_request(
            body,
            requires_location=self._resolver.requires_location,
            requires_asserted_district=self._resolver.requires_asserted_district,
        )

    def resolve(self, request: AlertRequest) -> DistrictResolution:
        return self._resolver.resolve(
            DistrictQuery(location=request.location, asserted_district=request.asserted_district)
        )

    def handle(self, request: AlertRequest) -> AlertOutcome:
        resolution = self.resolve(request)
        if request.kind is AlertKind.RESOLVED:
            logger.info("Stopping SOS alert %s in district %s", request.sos_id, resolution.district)
        else:
            logger.info(
                "Sending SOS alert %s to district %s (source=%s)",
                request.sos_id,
                resolution.district,
                resolution.provenance,
            )

        payload = build_notification(request, resolution.district, topic_prefix=self._topic_prefix)
        message_id = self._dispatcher.dispatch(payload)
        return AlertOutcome(request=request, resolution=resolution, topic=payload.topic, message_id=message_id)

    def handle_body(self, body: Any) -> AlertOutcome:
        return self.handle(self.parse(body))


def _random_suffix(rng: random.Random | None = None, length: int = 9) -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "".join((rng or random).choice(alphabet) for _ in range(length))


def build_test_alert(
    settings: ManualAlertSettings,
    *,
    now: float | None = None,
    rng: random.Random | None = None,
) -> dict[str, Any]:
    """Canned `/sos` body used to verify delivery by hand."""
    millis = epoch_millis(now)
    return {
        "sos_id": f"test_sos_{millis}_{_random_suffix(rng)}",
        "sos_type": AlertKind.NEW.value,
        "location": {"latitude": settings.latitude, "longitude": settings.longitude},
        "userInfo": {
            "deviceId": settings.device_id,
            "appVersion": settings.app_version,
            "district": settings.district,
        },
        "timestamp": str(millis),
    }
