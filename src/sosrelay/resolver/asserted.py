"""
Client-asserted resolver.

The client (which may geocode on-device) sends its district in `userInfo.district`;
the server only checks that it is present and topic-safe. There is no allow-list,
so any well-formed claim is trusted.
"""

from __future__ import annotations

from sosrelay.core.slug import slugify
from sosrelay.domain.errors import MissingDistrictError
from sosrelay.domain.models import DistrictResolution
from sosrelay.resolver.base import DistrictQuery


class AssertedDistrictResolver:
    """Strategy C: trust the district supplied by the client."""

    name = "asserted"
    requires_location = False
    requires_asserted_district = True

    def resolve(self, query: DistrictQuery) -> DistrictResolution:
        district = slugify(query.asserted_district)
        if not district:
            raise MissingDistrictError()
        return DistrictResolution(district=district, provenance="client")
