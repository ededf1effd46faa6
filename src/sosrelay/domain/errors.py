"""
Error taxonomy.

- `RequestValidationError` and subclasses: malformed client input; surfaced as HTTP 400
  with field-level guidance, never retried.
- `DeliveryError`: the push publish call failed; surfaced as HTTP 500, not retried here.

District resolution has no error type on purpose: resolvers degrade to a fallback
district and report it through `DistrictResolution.provenance`.
"""

from __future__ import annotations

from typing import Any


class SosRelayError(Exception):
    """Base class for errors raised by this package."""


class RequestValidationError(SosRelayError):
    """A request body is missing fields or carries malformed values."""

    status_code = 400

    def __init__(self, error: str, *, message: str | None = None, required: list[str] | None = None):
        super().__init__(message or error)
        self.error = error
        self.message = message
        self.required = list(required) if required is not None else None

    def as_response(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.error}
        if self.required is not None:
            body["required"] = list(self.required)
        if self.message is not None:
            body["message"] = self.message
        return body


class MissingFieldsError(RequestValidationError):
    def __init__(self, required: list[str]):
        super().__init__("Missing required fields", required=required)


class InvalidSosTypeError(RequestValidationError):
    def __init__(self) -> None:
        super().__init__(
            "Invalid sos_type",
            message='sos_type must be either "sos_alert" or "stop"',
        )


class InvalidCoordinateError(RequestValidationError):
    pass


class MissingDistrictError(RequestValidationError):
    def __init__(self) -> None:
        super().__init__(
            "Missing district",
            message="userInfo.district is required: the client must supply its district",
        )


class DeliveryError(SosRelayError):
    """Publishing a notification failed; wraps the underlying transport error (see `__cause__`)."""

    status_code = 500

    def __init__(self, message: str, *, topic: str | None = None):
        super().__init__(message)
        self.message = message
        self.topic = topic
