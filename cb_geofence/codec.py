"""Parse and encode the textual geometry list of a broadcast message.

Format (whitespace around the separators is ignored):

    circle|12.34,56.78|500;polygon|0,0|0,1|1,1|1,0
"""

from __future__ import annotations

import logging
import math
import re
from typing import Iterable

from cb_geofence.models import (
    CIRCLE_SYMBOL,
    POLYGON_SYMBOL,
    InvalidGeometry,
    LatLng,
    UnrecognizedGeometryKind,
)
from cb_geofence.shapes import Circle, Geometry, Polygon

logger = logging.getLogger(__name__)

_GEOMETRY_SEP = re.compile(r"\s*;\s*")
_FIELD_SEP = re.compile(r"\s*\|\s*")
_LATLNG_SEP = re.compile(r"\s*,\s*")


def _parse_float(value: str) -> float:
    try:
        v = float(value.strip())
    except ValueError as exc:
        raise InvalidGeometry(f"not a number: {value!r}") from exc
    if not math.isfinite(v):
        raise InvalidGeometry(f"not a finite number: {value!r}")
    return v


def parse_latlng(text: str) -> LatLng:
    """Parse a ``LatLng`` from ``"lat,lng"``, e.g. ``"13.56,-55.447"``.

    Raises:
        InvalidGeometry: If there are not exactly two numeric fields.
    """

    parts = _LATLNG_SEP.split(text.strip())
    if len(parts) != 2:
        raise InvalidGeometry(f"expected 'lat,lng', got {text!r}")
    return LatLng(_parse_float(parts[0]), _parse_float(parts[1]))


def _parse_geometry(segment: str) -> Geometry:
    fields = _FIELD_SEP.split(segment)
    kind = fields[0]
    if kind == CIRCLE_SYMBOL:
        if len(fields) != 3:
            raise InvalidGeometry(f"circle needs a center and a radius: {segment!r}")
        return Circle(parse_latlng(fields[1]), _parse_float(fields[2]))
    if kind == POLYGON_SYMBOL:
        return Polygon(tuple(parse_latlng(f) for f in fields[1:]))
    raise UnrecognizedGeometryKind(kind)


def parse_geometries(text: str, strict: bool = False) -> list[Geometry]:
    """Parse the geometries from an encoded geometry list.

    Parsing is best-effort: a segment with an unrecognized tag is always
    logged and skipped. A malformed segment is logged and skipped too, unless
    ``strict`` is set.

    Args:
        text: Encoded geometries separated by ``;``.
        strict: Re-raise ``InvalidGeometry`` for malformed segments.

    Returns:
        The parsed geometries in input order.

    Raises:
        InvalidGeometry: Only when ``strict`` is True.
    """

    geometries: list[Geometry] = []
    for segment in _GEOMETRY_SEP.split(text.strip()):
        if not segment:
            continue
        try:
            geometries.append(_parse_geometry(segment))
        except UnrecognizedGeometryKind as exc:
            logger.warning("Invalid geometry format %r: %s", segment, exc)
        except InvalidGeometry as exc:
            if strict:
                raise
            logger.warning("Skipping malformed geometry %r: %s", segment, exc)
    return geometries


def encode_latlng(latlng: LatLng) -> str:
    return f"{float(latlng.lat)!r},{float(latlng.lng)!r}"


def encode_geometry(geometry: Geometry) -> str | None:
    """Encode one geometry, or return None for an unsupported object."""

    match geometry:
        case Circle(center=center, radius_m=radius_m):
            return f"{CIRCLE_SYMBOL}|{encode_latlng(center)}|{float(radius_m)!r}"
        case Polygon(vertices=vertices):
            return "|".join([POLYGON_SYMBOL, *(encode_latlng(v) for v in vertices)])
        case _:
            logger.error("Unsupported geometry object %r", geometry)
            return None


def encode_geometries(geometries: Iterable[Geometry]) -> str:
    """Encode geometries to a ``;``-separated string, preserving order."""

    encoded = (encode_geometry(g) for g in geometries)
    return ";".join(s for s in encoded if s)
