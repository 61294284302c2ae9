from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from ..core.constants import DEFAULT_GEOFENCE_RADIUS_METERS, EARTH_RADIUS_METERS
from ..core.exceptions import InvalidCoordinate, LocationNotAllowed


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        validate_coordinate(self.latitude, self.longitude)


@dataclass(frozen=True)
class GeofenceCheck:
    distance_meters: float
    radius_meters: float
    within_zone: bool


def validate_coordinate(latitude: float, longitude: float) -> None:
    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError):
        raise InvalidCoordinate(f"Coordinate ({latitude!r}, {longitude!r}) is not numeric")
    if math.isnan(lat) or math.isnan(lon):
        raise InvalidCoordinate("Coordinate must not be NaN")
    if not -90.0 <= lat <= 90.0:
        raise InvalidCoordinate(f"Latitude {lat} is outside [-90, 90]")
    if not -180.0 <= lon <= 180.0:
        raise InvalidCoordinate(f"Longitude {lon} is outside [-180, 180]")


def haversine_distance(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in meters."""
    if a == b:
        return 0.0

    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Rounding can push h a hair above 1 for near-antipodal points.
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_METERS * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def is_antipodal(a: GeoPoint, b: GeoPoint, *, tolerance: float = 1e-9) -> bool:
    if abs(a.latitude + b.latitude) > tolerance:
        return False
    if abs(abs(a.latitude) - 90.0) <= tolerance:
        return True
    return abs(abs(a.longitude - b.longitude) - 180.0) <= tolerance


class GeofenceValidator:
    """Decides whether a clock event was submitted inside the allowed circle."""

    def __init__(self, *, default_radius_meters: float = DEFAULT_GEOFENCE_RADIUS_METERS):
        self._default_radius = float(default_radius_meters)

    def check(
        self,
        *,
        center: GeoPoint,
        reported: GeoPoint,
        radius_meters: Optional[float] = None,
    ) -> GeofenceCheck:
        radius = self._default_radius if radius_meters is None else float(radius_meters)
        if radius < 0 or math.isnan(radius):
            radius = self._default_radius

        if is_antipodal(center, reported):
            raise InvalidCoordinate("Reported location is antipodal to the site")
        distance = haversine_distance(center, reported)
        return GeofenceCheck(distance_meters=distance, radius_meters=radius, within_zone=distance <= radius)

    def ensure_within(
        self,
        *,
        center: GeoPoint,
        reported: GeoPoint,
        radius_meters: Optional[float] = None,
    ) -> GeofenceCheck:
        result = self.check(center=center, reported=reported, radius_meters=radius_meters)
        if not result.within_zone:
            raise LocationNotAllowed(
                f"Outside the allowed zone: {result.distance_meters:.0f} m from the site, "
                f"allowed radius is {result.radius_meters:.0f} m"
            )
        return result
