"""Data models and constants for geo-fence targeting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from cb_geofence.geo import EPS, SCALE, haversine_m

__all__ = [
    "EPS",
    "SCALE",
    "CIRCLE_SYMBOL",
    "POLYGON_SYMBOL",
    "GEO_FENCING_MAXIMUM_WAIT_TIME",
    "GEOMETRY_TYPE_POLYGON",
    "GEOMETRY_TYPE_CIRCLE",
    "DEFAULT_POINTS_CSV",
    "DEFAULT_RESULTS_CSV",
    "InvalidGeometry",
    "UnrecognizedGeometryKind",
    "LatLng",
    "TrackPoint",
]

# Identifiers of each geometry in the encoded string.
CIRCLE_SYMBOL: Final[str] = "circle"
POLYGON_SYMBOL: Final[str] = "polygon"

# TLV tags of the warning area coordinates (ATIS-0700041 5.2.3).
GEO_FENCING_MAXIMUM_WAIT_TIME: Final[int] = 0x01
GEOMETRY_TYPE_POLYGON: Final[int] = 0x02
GEOMETRY_TYPE_CIRCLE: Final[int] = 0x03

DEFAULT_POINTS_CSV: Final[str] = "points.csv"
DEFAULT_RESULTS_CSV: Final[str] = "results.csv"


class InvalidGeometry(ValueError):
    """Raised when an encoded geometry or coordinate cannot be built."""


class UnrecognizedGeometryKind(InvalidGeometry):
    """The geometry tag is neither ``circle`` nor ``polygon``."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"unrecognized geometry kind: {kind!r}")
        self.kind = kind


@dataclass(frozen=True, slots=True)
class LatLng:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lng: float

    def distance(self, other: LatLng) -> float:
        """Haversine distance in meters to ``other``."""

        return haversine_m(self.lat, self.lng, other.lat, other.lng)


@dataclass(frozen=True, slots=True)
class TrackPoint:
    """A single device location sample to be checked against the fences.

    Attributes:
        point_id: Identifier from the ``id`` column, or the 1-based row number.
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.
    """

    point_id: str
    latitude: float
    longitude: float

    @property
    def latlng(self) -> LatLng:
        return LatLng(self.latitude, self.longitude)
