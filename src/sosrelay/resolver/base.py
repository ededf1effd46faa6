"""
District resolver interface.

Every strategy answers `resolve(query) -> DistrictResolution`. Resolution problems
never raise: a strategy that cannot give a confident answer returns its fallback
district with a degraded provenance tag instead. The only exception is a client
validation failure (e.g. a missing asserted district), which is the caller's fault.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from sosrelay.core.geo import GeoPoint
from sosrelay.domain.models import DistrictResolution


@dataclass(frozen=True)
class DistrictQuery:
    """What a resolver may look at: a coordinate and/or a client-asserted district."""

    location: GeoPoint | None = None
    asserted_district: str | None = None


class DistrictResolver(Protocol):
    name: str
    requires_location: bool
    requires_asserted_district: bool

    def resolve(self, query: DistrictQuery) -> DistrictResolution: ...
