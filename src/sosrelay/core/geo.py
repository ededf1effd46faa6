from __future__ import annotations
from dataclasses import dataclass

"""
Geospatial helpers.

A tiny geometry layer: points, inclusive lat/lon rectangles and coordinate rounding
for cache keys. District resolution never needs more than rectangle containment.
"""


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float

    def __post_init__(self) -> None:
        if not -90 <= self.lat <= 90:
            raise ValueError(f"latitude out of range: {self.lat}")
        if not -180 <= self.lon <= 180:
            raise ValueError(f"longitude out of range: {self.lon}")

    def as_dict(self) -> dict[str, float]:
        return {"latitude": self.lat, "longitude": self.lon}


@dataclass(frozen=True)
class BoundingBox:
    """A lat/lon rectangle; all four edges are inclusive."""

    north: float
    south: float
    east: float
    west: float

    def __post_init__(self) -> None:
        if self.south > self.north:
            raise ValueError(f"south ({self.south}) must not exceed north ({self.north})")
        if self.west > self.east:
            raise ValueError(f"west ({self.west}) must not exceed east ({self.east})")

    def contains(self, point: GeoPoint) -> bool:
        return self.south <= point.lat <= self.north and self.west <= point.lon <= self.east


def round_point(point: GeoPoint, precision: int = 4) -> GeoPoint:
    """Round both coordinates to `precision` decimals (4 places is roughly 11 m)."""
    return GeoPoint(lat=round(point.lat, precision), lon=round(point.lon, precision))


def point_key(point: GeoPoint, precision: int = 4) -> str:
    """Stable string key for a point rounded to `precision` decimals."""
    rounded = round_point(point, precision)
    return f"{rounded.lat:.{precision}f},{rounded.lon:.{precision}f}"
