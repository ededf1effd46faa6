"""
Reverse-geocode resolver.

Accurate to real administrative boundaries without a hand-maintained table, at the
cost of an upstream call. Lookups are cached per rounded coordinate (default 4
decimals, about 11 m) for a fixed TTL; upstream failures and unusable addresses
degrade to the configured default district, which is never cached.

Concurrent misses for the same coordinate may each hit the upstream; they converge
on the same cached value afterwards.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from sosrelay.config.settings import ResolverSettings
from sosrelay.core.cache import TtlCache
from sosrelay.core.geo import point_key
from sosrelay.core.slug import slugify
from sosrelay.domain.models import DistrictResolution
from sosrelay.ingestion.nominatim_client import NominatimClient
from sosrelay.resolver.base import DistrictQuery

logger = logging.getLogger(__name__)

# Address fields tried in order; the suffix is appended to the slug of a match.
DISTRICT_FIELDS: tuple[tuple[str, str], ...] = (
    ("city_district", ""),
    ("district", ""),
    ("state_district", ""),
    ("county", ""),
    ("city", ""),
    ("town", ""),
    ("village", ""),
    ("municipality", ""),
    ("state", "_general"),
    ("region", "_general"),
    ("country", "_general"),
)


def district_from_address(address: Mapping[str, Any]) -> str | None:
    """Pick the most specific usable district slug from a Nominatim `address` block."""
    for field, suffix in DISTRICT_FIELDS:
        value = address.get(field)
        if not isinstance(value, str):
            continue
        slug = slugify(value)
        if slug:
            return f"{slug}{suffix}"
    return None


class ReverseGeocodeResolver:
    """Strategy B: Nominatim lookup behind a TTL cache."""

    name = "geocode"
    requires_location = True
    requires_asserted_district = False

    def __init__(
        self,
        client: NominatimClient,
        cache: TtlCache,
        *,
        fallback_district: str,
        coordinate_precision: int = 4,
    ):
        self._client = client
        self._cache = cache
        self._fallback_district = fallback_district
        self._precision = coordinate_precision

    @classmethod
    def from_settings(
        cls, settings: ResolverSettings, *, http_client: httpx.Client | None = None
    ) -> "ReverseGeocodeResolver":
        geo = settings.geocode
        return cls(
            NominatimClient(geo, http_client=http_client),
            TtlCache(geo.cache_ttl_seconds, max_entries=geo.cache_max_entries),
            fallback_district=settings.fallback_district,
            coordinate_precision=geo.coordinate_precision,
        )

    @property
    def cache(self) -> TtlCache:
        return self._cache

    def resolve(self, query: DistrictQuery) -> DistrictResolution:
        point = query.location
        if point is None:
            logger.warning("No location supplied; using fallback district %s", self._fallback_district)
            return DistrictResolution(district=self._fallback_district, provenance="error")

        key = point_key(point, self._precision)
        cached = self._cache.get(key)
        if isinstance(cached, str):
            return DistrictResolution(district=cached, provenance="cache")

        try:
            address = self._client.reverse(point)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.warning("Reverse geocode failed for %s: %s; using %s", key, e, self._fallback_district)
            return DistrictResolution(district=self._fallback_district, provenance="error")

        district = district_from_address(address)
        if district is None:
            logger.warning("No usable district in address for %s; using %s", key, self._fallback_district)
            return DistrictResolution(district=self._fallback_district, provenance="nominatim-fallback")

        self._cache.set(key, district)
        logger.info("Resolved %s to district %s", key, district)
        return DistrictResolution(district=district, provenance="nominatim")
