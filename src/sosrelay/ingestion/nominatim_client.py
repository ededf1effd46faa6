"""
Reverse-geocoding client (OpenStreetMap Nominatim).

This module is responsible only for:
- calling the Nominatim `/reverse` endpoint for one coordinate,
- returning the structured `address` block of the response.

Picking a district out of the address (and caching it) is the resolver's job;
see `sosrelay.resolver.geocode`.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from sosrelay.config.settings import GeocodeResolverSettings
from sosrelay.core.geo import GeoPoint
from sosrelay.core.http import get_json

logger = logging.getLogger(__name__)


class NominatimError(ValueError):
    """The upstream answered, but not with a usable address payload."""


class NominatimClient:
    """Thin Nominatim reverse-geocoding client with a hard per-call timeout."""

    def __init__(self, settings: GeocodeResolverSettings, http_client: httpx.Client | None = None):
        self._settings = settings
        self._http_client = http_client

    @property
    def reverse_url(self) -> str:
        return f"{self._settings.base_url.rstrip('/')}/reverse"

    def reverse(self, point: GeoPoint) -> dict[str, Any]:
        """Return the `address` mapping for `point`.

        Raises:
            httpx.HTTPError: On transport errors, timeouts or non-2xx status codes.
            ValueError: If the body is not JSON or carries no `address` object.
        """
        params = {
            "format": self._settings.response_format,
            "lat": point.lat,
            "lon": point.lon,
            "zoom": self._settings.zoom,
            "addressdetails": 1,
        }
        headers = {
            # Nominatim usage policy rejects requests without an identifying UA.
            "User-Agent": self._settings.user_agent,
            "Accept-Language": self._settings.accept_language,
        }
        logger.debug("Reverse geocoding lat=%.4f lon=%.4f", point.lat, point.lon)
        payload = get_json(
            self.reverse_url,
            params=params,
            headers=headers,
            timeout_seconds=self._settings.timeout_seconds,
            client=self._http_client,
        )

        if not isinstance(payload, dict):
            raise NominatimError("Nominatim response is not a JSON object")
        if payload.get("error"):
            raise NominatimError(f"Nominatim error: {payload['error']}")
        address = payload.get("address")
        if not isinstance(address, dict):
            raise NominatimError("Nominatim response has no address block")
        return address
