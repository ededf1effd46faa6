"""Pick the configured district resolver."""

from __future__ import annotations

import httpx

from sosrelay.config.settings import Settings
from sosrelay.resolver.asserted import AssertedDistrictResolver
from sosrelay.resolver.base import DistrictResolver
from sosrelay.resolver.geocode import ReverseGeocodeResolver
from sosrelay.resolver.static import StaticBoundsResolver


def build_resolver(settings: Settings, *, http_client: httpx.Client | None = None) -> DistrictResolver:
    """Build the resolver named by `settings.resolver.strategy`."""
    strategy = settings.resolver.strategy
    if strategy == "static":
        return StaticBoundsResolver.from_settings(settings.resolver)
    if strategy == "geocode":
        return ReverseGeocodeResolver.from_settings(settings.resolver, http_client=http_client)
    if strategy == "asserted":
        return AssertedDistrictResolver()
    raise ValueError(f"Unknown resolver strategy: {strategy!r}")
