import pytest

from sosrelay.config.settings import get_settings
from sosrelay.domain.errors import MissingDistrictError
from sosrelay.resolver.asserted import AssertedDistrictResolver
from sosrelay.resolver.base import DistrictQuery
from sosrelay.resolver.factory import build_resolver
from sosrelay.resolver.geocode import ReverseGeocodeResolver
from sosrelay.resolver.static import StaticBoundsResolver


def test_asserted_district_is_trusted_and_made_topic_safe():
    resolution = AssertedDistrictResolver().resolve(DistrictQuery(asserted_district="Bengaluru Urban"))
    assert resolution.district == "bengaluru_urban"
    assert resolution.provenance == "client"


@pytest.mark.parametrize("district", [None, "", "  ", "???"])
def test_missing_asserted_district_is_a_client_error(district):
    with pytest.raises(MissingDistrictError) as exc_info:
        AssertedDistrictResolver().resolve(DistrictQuery(asserted_district=district))
    assert exc_info.value.as_response()["error"] == "Missing district"


@pytest.mark.parametrize(
    "strategy,expected",
    [
        ("static", StaticBoundsResolver),
        ("geocode", ReverseGeocodeResolver),
        ("asserted", AssertedDistrictResolver),
    ],
)
def test_build_resolver_follows_configured_strategy(strategy, expected):
    settings = get_settings()
    resolver_settings = settings.resolver.model_copy(update={"strategy": strategy})
    resolver = build_resolver(settings.model_copy(update={"resolver": resolver_settings}))
    assert isinstance(resolver, expected)
    assert resolver.name == strategy


def test_build_resolver_rejects_unknown_strategy():
    settings = get_settings()
    resolver_settings = settings.resolver.model_copy(update={"strategy": "psychic"})
    with pytest.raises(ValueError, match="psychic"):
        build_resolver(settings.model_copy(update={"resolver": resolver_settings}))
