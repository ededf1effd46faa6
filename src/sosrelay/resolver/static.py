"""
Static bounding-box resolver.

Zero network dependency and deterministic: the coordinate is checked against the
simulator escape hatch, then the district table, then the regional fallbacks, and
finally the ultimate fallback district.
"""

from __future__ import annotations

import logging
from typing import Sequence

from sosrelay.config.settings import ResolverSettings, get_district_bounds
from sosrelay.core.geo import BoundingBox
from sosrelay.domain.models import DistrictResolution
from sosrelay.resolver.base import DistrictQuery
from sosrelay.resolver.rules import DistrictRule, first_match, rules_from_table

logger = logging.getLogger(__name__)


class StaticBoundsResolver:
    """Strategy A: first-match scan over an ordered rectangle table."""

    name = "static"
    requires_location = True
    requires_asserted_district = False

    def __init__(self, rules: Sequence[DistrictRule], *, fallback_district: str):
        self._rules = tuple(rules)
        self._fallback_district = fallback_district

    @classmethod
    def from_settings(cls, settings: ResolverSettings) -> "StaticBoundsResolver":
        rules: list[DistrictRule] = []
        sim = settings.static.simulator
        if sim.enabled:
            rules.append(
                DistrictRule(
                    district=sim.district,
                    bounds=BoundingBox(north=sim.north, south=sim.south, east=sim.east, west=sim.west),
                    provenance="simulator",
                )
            )
        rules.extend(rules_from_table(get_district_bounds(settings.static.bounds_file)))
        return cls(rules, fallback_district=settings.fallback_district)

    def resolve(self, query: DistrictQuery) -> DistrictResolution:
        point = query.location
        if point is None:
            logger.warning("No location supplied; using fallback district %s", self._fallback_district)
            return DistrictResolution(district=self._fallback_district, provenance="fallback")

        rule = first_match(self._rules, point)
        if rule is None:
            logger.warning(
                "No district rectangle contains lat=%.4f lon=%.4f; using %s",
                point.lat,
                point.lon,
                self._fallback_district,
            )
            return DistrictResolution(district=self._fallback_district, provenance="fallback")

        if rule.provenance == "simulator":
            logger.info("Simulator location detected; using test district %s", rule.district)
        elif rule.provenance == "regional":
            logger.warning(
                "No exact district for lat=%.4f lon=%.4f; using regional %s",
                point.lat,
                point.lon,
                rule.district,
            )
        return DistrictResolution(district=rule.district, provenance=rule.provenance)
