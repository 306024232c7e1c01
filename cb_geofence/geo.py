"""Geospatial and planar geometry primitives (no external dependencies).

Latitude/longitude are treated as coordinates on a plane here, which is only
accurate enough for short-range geo-fencing.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from cb_geofence.models import LatLng

_EARTH_RADIUS_M = 6_371_000.0  # mean Earth radius in meters

# Values whose absolute value is within this tolerance are treated as 0.
EPS: Final[float] = 1e-7

# Polygon coordinates are scaled by this factor before the winding-number test.
# With EPS=1e-7 this keeps roughly 1 meter of precision.
SCALE: Final[float] = 1000.0


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute Haversine distance in meters between two lat/lon points.

    Args:
        lat1: Latitude 1 in degrees.
        lon1: Longitude 1 in degrees.
        lat2: Latitude 2 in degrees.
        lon2: Longitude 2 in degrees.

    Returns:
        Distance in meters.
    """

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return _EARTH_RADIUS_M * c


def sign(value: float, eps: float = EPS) -> int:
    """Sign of ``value`` with tolerance.

    Returns:
        1 if positive, -1 if negative, 0 if ``value`` is within ``eps`` of zero.
    """

    if value > eps:
        return 1
    if value < -eps:
        return -1
    return 0


@dataclass(frozen=True, slots=True)
class Point:
    """A point (or vector) in a polygon's scaled local frame."""

    x: float
    y: float

    def subtract(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)


def cross(a: Point, b: Point) -> float:
    """2D cross product ``a x b``."""

    return a.x * b.y - a.y * b.x


def project(origin: LatLng, p: LatLng, scale: float = SCALE) -> Point:
    """Move ``p`` into the frame centered on ``origin`` and scale it.

    x follows latitude and y follows longitude. When ``p`` sits in the other
    (eastern/western) hemisphere and the shorter way to it crosses the 180th
    meridian, the longitude offset is taken across the antimeridian instead.
    For example with origin at -178 and ``p`` at 175 the offset is -7, not 353.

    Args:
        origin: Frame origin, normally the polygon vertex with the smallest longitude.
        p: Point to convert.
        scale: Multiplier applied to both offsets.

    Returns:
        The scaled local point.
    """

    x = p.lat - origin.lat
    y = p.lng - origin.lng

    origin_sign = sign(origin.lng)
    if origin_sign != 0 and origin_sign != sign(p.lng):
        dist_cross_0th_meridian = abs(origin.lng) + abs(p.lng)
        if sign(dist_cross_0th_meridian * 2 - 360) > 0:
            y = origin_sign * (360 - dist_cross_0th_meridian)
    return Point(x * scale, y * scale)
