"""
Ordered district rules.

A rule table is an explicit sequence of (rectangle, district) pairs evaluated in
declared order: the first rule whose rectangle contains the point wins. Smaller
regions therefore have to be declared before the broader regions they sit inside.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from sosrelay.core.geo import BoundingBox, GeoPoint
from sosrelay.domain.models import Provenance


@dataclass(frozen=True)
class DistrictRule:
    """One table row: points inside `bounds` resolve to `district`."""

    district: str
    bounds: BoundingBox
    provenance: Provenance = "static"

    def matches(self, point: GeoPoint) -> bool:
        return self.bounds.contains(point)


def first_match(rules: Iterable[DistrictRule], point: GeoPoint) -> DistrictRule | None:
    """Return the first rule containing `point` (declared order), or None."""
    for rule in rules:
        if rule.matches(point):
            return rule
    return None


def _parse_rule(row: Any, provenance: Provenance) -> DistrictRule:
    if not isinstance(row, dict):
        raise ValueError(f"Invalid district rule {row!r}; expected a mapping")
    try:
        district = str(row["district"]).strip()
        bounds = BoundingBox(
            north=float(row["north"]),
            south=float(row["south"]),
            east=float(row["east"]),
            west=float(row["west"]),
        )
    except KeyError as e:
        raise ValueError(f"District rule {row!r} is missing {e.args[0]!r}") from e
    if not district:
        raise ValueError(f"District rule {row!r} has an empty district")
    return DistrictRule(district=district, bounds=bounds, provenance=provenance)


def rules_from_table(table: dict[str, Any]) -> tuple[DistrictRule, ...]:
    """Build the rule sequence from a table mapping: `districts` rows first, then `regions`."""
    districts: Sequence[Any] = table.get("districts") or []
    regions: Sequence[Any] = table.get("regions") or []
    return tuple(
        [_parse_rule(row, "static") for row in districts]
        + [_parse_rule(row, "regional") for row in regions]
    )
