from sosrelay.config.settings import _apply_env_overrides, get_district_bounds, get_settings


def test_default_settings_match_documented_knobs():
    settings = get_settings()
    geocode = settings.resolver.geocode
    assert geocode.timeout_seconds == 2.5
    assert geocode.cache_ttl_seconds == 12 * 60 * 60
    assert geocode.cache_max_entries == 1000
    assert geocode.coordinate_precision == 4
    assert geocode.zoom == 10
    assert settings.resolver.fallback_district == "india_general"
    assert settings.messaging.topic_prefix == "district-"


def test_env_overrides_are_whitelisted(monkeypatch):
    monkeypatch.setenv("SOSRELAY_RESOLVER_STRATEGY", "Geocode")
    monkeypatch.setenv("SOSRELAY_NOMINATIM_USER_AGENT", "sos-app/2.0 (ops@example.test)")
    monkeypatch.setenv("SOSRELAY_FIREBASE_DRY_RUN", "yes")
    monkeypatch.setenv("SOSRELAY_CORS_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("FIREBASE_PROJECT_ID", "sos-test")

    raw = _apply_env_overrides({"resolver": {"strategy": "static"}})

    assert raw["resolver"]["strategy"] == "geocode"
    assert raw["resolver"]["geocode"]["user_agent"] == "sos-app/2.0 (ops@example.test)"
    assert raw["messaging"]["dry_run"] is True
    assert raw["messaging"]["project_id"] == "sos-test"
    assert raw["app"]["cors_origins"] == ["https://a.example", "https://b.example"]


def test_packaged_district_table_is_ordered():
    table = get_district_bounds()
    districts = [row["district"] for row in table["districts"]]
    regions = [row["district"] for row in table["regions"]]
    assert districts[0] == "bengaluru_urban"
    assert districts.index("new_delhi") < districts.index("gurgaon")
    assert len(districts) == 21
    assert regions == ["karnataka_general", "maharashtra_general", "tamil_nadu_general", "delhi_ncr_general"]
