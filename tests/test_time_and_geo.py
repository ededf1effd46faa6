from datetime import datetime, timedelta, timezone

import pytest

from sosrelay.core.geo import BoundingBox, GeoPoint, point_key
from sosrelay.core.time import epoch_millis, utc_now_iso


def test_utc_now_iso_uses_z_suffix_and_milliseconds():
    dt = datetime(2026, 1, 5, 10, 0, 0, 123456, tzinfo=timezone.utc)
    assert utc_now_iso(dt) == "2026-01-05T10:00:00.123Z"

    offset = datetime(2026, 1, 5, 18, 0, tzinfo=timezone(timedelta(hours=8)))
    assert utc_now_iso(offset) == "2026-01-05T10:00:00.000Z"


def test_epoch_millis():
    assert epoch_millis(1.5) == 1500


def test_point_key_rounds_to_precision():
    assert point_key(GeoPoint(lat=12.971649, lon=77.594561)) == "12.9716,77.5946"
    assert point_key(GeoPoint(lat=18.52041, lon=73.85672), precision=2) == "18.52,73.86"


def test_geo_point_rejects_out_of_range():
    with pytest.raises(ValueError):
        GeoPoint(lat=91, lon=0)
    with pytest.raises(ValueError):
        GeoPoint(lat=0, lon=-181)


def test_bounding_box_contains_is_inclusive():
    box = BoundingBox(north=1, south=-1, east=1, west=-1)
    assert box.contains(GeoPoint(lat=1, lon=-1))
    assert not box.contains(GeoPoint(lat=1.0001, lon=0))
    with pytest.raises(ValueError):
        BoundingBox(north=-1, south=1, east=1, west=-1)
