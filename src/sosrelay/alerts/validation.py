"""
Request body validation.

Bodies are checked by hand rather than by a Pydantic request model so that every
failure maps to the exact 400 shape mobile clients already handle
(`{error, required}` or `{error, message}`).
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import ValidationError

from sosrelay.core.geo import GeoPoint
from sosrelay.core.slug import slugify
from sosrelay.domain.errors import (
    InvalidCoordinateError,
    InvalidSosTypeError,
    MissingDistrictError,
    MissingFieldsError,
    RequestValidationError,
)
from sosrelay.domain.models import AlertKind, AlertRequest, UserInfo

COORDINATE_FIELDS = ["latitude", "longitude"]


def _is_blank(value: Any) -> bool:
    # None, "", False and 0 all count as "not supplied".
    return value is None or (not isinstance(value, (dict, list)) and value in ("", False))


def _as_coordinate(value: Any) -> float | None:
    """Return `value` as a float, or None when it is not a finite JSON number.

    Integers too large for a float come back as infinity so the range check rejects them.
    """
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return None
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def require_object(body: Any) -> dict[str, Any]:
    if not isinstance(body, dict):
        raise RequestValidationError("Invalid request body", message="Request body must be a JSON object")
    return body


def parse_coordinate(body: Any) -> GeoPoint:
    """Validate a `{latitude, longitude}` mapping and return it as a `GeoPoint`."""
    body = require_object(body)
    if body.get("latitude") is None or body.get("longitude") is None:
        raise MissingFieldsError(COORDINATE_FIELDS)

    lat, lon = _as_coordinate(body["latitude"]), _as_coordinate(body["longitude"])
    if lat is None or lon is None:
        raise InvalidCoordinateError(
            "Invalid coordinate format",
            message="Latitude and longitude must be numbers",
        )
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        raise InvalidCoordinateError(
            "Invalid coordinate values",
            message="Latitude must be between -90 and 90, longitude between -180 and 180",
        )
    return GeoPoint(lat=lat, lon=lon)


def _parse_location(value: Any) -> GeoPoint:
    if not isinstance(value, dict) or value.get("latitude") is None or value.get("longitude") is None:
        raise InvalidCoordinateError(
            "Invalid location",
            message="location must be an object with numeric latitude and longitude",
        )
    return parse_coordinate(value)


def _parse_user_info(value: Any) -> UserInfo | None:
    if _is_blank(value):
        return None
    if not isinstance(value, dict):
        raise RequestValidationError("Invalid userInfo", message="userInfo must be an object")
    try:
        return UserInfo.model_validate(value)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise RequestValidationError("Invalid userInfo", message=f"userInfo.{field}: {first['msg']}") from e


def parse_alert_request(
    body: Any,
    *,
    requires_location: bool = True,
    requires_asserted_district: bool = False,
) -> AlertRequest:
    """Validate a raw `/sos` body.

    Checks run in a fixed order: required fields, `sos_type`, location shape,
    `userInfo` shape, then the asserted district when the active resolver needs one.
    """
    body = require_object(body)

    required = ["sos_id", "sos_type"] + (["location"] if requires_location else [])
    if any(_is_blank(body.get(field)) for field in required):
        raise MissingFieldsError(required)

    sos_type = body["sos_type"]
    if not isinstance(sos_type, str) or sos_type not in {k.value for k in AlertKind}:
        raise InvalidSosTypeError()

    raw_location = body.get("location")
    location = None if _is_blank(raw_location) else _parse_location(raw_location)

    user_info = _parse_user_info(body.get("userInfo"))
    if requires_asserted_district and not slugify(user_info.district if user_info else None):
        raise MissingDistrictError()

    timestamp = body.get("timestamp")
    sender_id = body.get("sender_id")
    return AlertRequest(
        sos_id=str(body["sos_id"]),
        kind=AlertKind(sos_type),
        location=location,
        raw_location=raw_location if location is not None else None,
        user_info=user_info,
        timestamp=None if _is_blank(timestamp) else str(timestamp),
        sender_id=None if _is_blank(sender_id) else str(sender_id),
    )
