"""
Domain models.

These types are the contract between layers:
- validated inbound alerts (`AlertRequest`, `UserInfo`)
- resolver output (`DistrictResolution`)
- the composed push message (`NotificationPayload`)

Nothing here is mutated after construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from sosrelay.core.geo import GeoPoint


Provenance = Literal[
    "simulator",
    "static",
    "regional",
    "fallback",
    "cache",
    "nominatim",
    "nominatim-fallback",
    "error",
    "client",
]

DEGRADED_PROVENANCE: frozenset[str] = frozenset({"fallback", "nominatim-fallback", "error"})


class AlertKind(str, Enum):
    """Alert kind; values are the wire `sos_type` strings."""

    NEW = "sos_alert"
    RESOLVED = "stop"


@dataclass(frozen=True)
class DistrictResolution:
    """A resolved district plus how it was obtained."""

    district: str
    provenance: Provenance

    @property
    def degraded(self) -> bool:
        """True when the district is a default rather than a confident answer."""
        return self.provenance in DEGRADED_PROVENANCE


class UserInfo(BaseModel):
    """Sender details as reported by the client; unknown keys are kept for the data block."""

    model_config = ConfigDict(extra="allow", frozen=True, coerce_numbers_to_str=True)

    name: str | None = None
    location: str | None = None
    district: str | None = None


class AlertRequest(BaseModel):
    """A validated SOS request."""

    model_config = ConfigDict(frozen=True)

    sos_id: str
    kind: AlertKind
    location: GeoPoint | None = None
    raw_location: dict[str, Any] | None = None
    user_info: UserInfo | None = None
    timestamp: str | None = None
    sender_id: str | None = None

    @property
    def asserted_district(self) -> str | None:
        return self.user_info.district if self.user_info else None


class AndroidHints(BaseModel):
    icon: str = "ic_notification"
    color: str
    sound: str = "default"
    priority: str = "high"
    default_sound: bool | None = None


class ApnsHints(BaseModel):
    title: str
    body: str
    sound: str = "default"
    badge: int = Field(..., ge=0)


class NotificationPayload(BaseModel):
    """A push message addressed to one district topic."""

    model_config = ConfigDict(frozen=True)

    topic: str
    title: str
    body: str
    data: dict[str, str]
    android: AndroidHints
    apns: ApnsHints
