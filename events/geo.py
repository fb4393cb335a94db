"""
Great-circle distance helpers.

``haversine_km`` is the reference implementation; ``haversine_expression``
builds the same formula as an ORM expression so radius filtering runs in
the database.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from django.db.models import F, FloatField, Value
from django.db.models.functions import ASin, Cos, Least, Power, Radians, Sin, Sqrt

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, a)))


def _float(value: float) -> Value:
    return Value(float(value), output_field=FloatField())


def haversine_expression(latitude: float, longitude: float, lat_field: str = "latitude", lon_field: str = "longitude"):
    half = _float(2.0)
    d_phi = Radians(F(lat_field) - _float(latitude))
    d_lambda = Radians(F(lon_field) - _float(longitude))

    a = Power(Sin(d_phi / half), 2) + (
        Cos(Radians(_float(latitude))) * Cos(Radians(F(lat_field))) * Power(Sin(d_lambda / half), 2)
    )
    # Rounding can push ``a`` a hair above 1 for antipodal points.
    return _float(2 * EARTH_RADIUS_KM) * ASin(Sqrt(Least(a, _float(1.0), output_field=FloatField())))


def parse_coordinate(value) -> Optional[float]:
    """Lenient float parsing for query filters: anything unusable becomes ``None``."""
    if value is None or value == "":
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


@dataclass(frozen=True)
class GeoQuery:
    latitude: float
    longitude: float
    radius_km: float

    @classmethod
    def from_params(cls, params) -> Optional["GeoQuery"]:
        """
        Build a radius query from request parameters.

        Returns ``None`` (no distance filtering) unless latitude, longitude
        and radius are all present and numeric. Malformed values are not an
        error here; the filter is simply skipped.
        """
        latitude = parse_coordinate(params.get("latitude"))
        longitude = parse_coordinate(params.get("longitude"))
        radius = parse_coordinate(params.get("radius"))
        if latitude is None or longitude is None or radius is None:
            return None
        return cls(latitude=latitude, longitude=longitude, radius_km=radius)

    def contains(self, latitude: float, longitude: float) -> bool:
        if self.radius_km <= 0:
            return False
        return haversine_km(self.latitude, self.longitude, latitude, longitude) <= self.radius_km
