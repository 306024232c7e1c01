"""Geo-fence shapes used for broadcast targeting.

Both shapes are immutable and safe to share between threads once built.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Union

from cb_geofence.geo import Point, cross, project, sign
from cb_geofence.models import InvalidGeometry, LatLng


@dataclass(frozen=True, slots=True)
class Circle:
    """A circle geofence (center + radius in meters)."""

    center: LatLng
    radius_m: float

    def __post_init__(self) -> None:
        if math.isnan(self.radius_m) or self.radius_m < 0:
            raise InvalidGeometry(f"circle radius must be >= 0, got {self.radius_m}")

    def contains(self, p: LatLng) -> bool:
        """Check whether ``p`` is inside or on the boundary of the circle."""

        return self.center.distance(p) <= self.radius_m


@dataclass(frozen=True, slots=True)
class Polygon:
    """A simple polygon with at least 3 vertices.

    Adjacent vertices form the edges, and the last vertex connects back to the
    first. The longitude difference between any two vertices should be less
    than 180 degrees.

    Attributes:
        vertices: Polygon vertices in order.
        origin: Vertex with the smallest longitude (first one wins on ties).
        scaled_vertices: Vertices projected around ``origin`` and scaled.
    """

    vertices: tuple[LatLng, ...]
    origin: LatLng = field(init=False, repr=False, compare=False)
    scaled_vertices: tuple[Point, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        vertices = tuple(self.vertices)
        if len(vertices) < 3:
            raise InvalidGeometry(f"polygon needs at least 3 vertices, got {len(vertices)}")

        idx = 0
        for i in range(1, len(vertices)):
            if vertices[i].lng < vertices[idx].lng:
                idx = i
        origin = vertices[idx]

        # frozen dataclass: derived fields are set once here
        object.__setattr__(self, "vertices", vertices)
        object.__setattr__(self, "origin", origin)
        object.__setattr__(self, "scaled_vertices", tuple(project(origin, v) for v in vertices))

    def contains(self, p: LatLng) -> bool:
        """Check whether ``p`` is inside the polygon using the winding number.

        The point is outside only when the polygon winds around it zero times.
        Points on an edge or vertex are considered inside.
        """

        sp = project(self.origin, p)
        n = len(self.scaled_vertices)
        winding_number = 0
        for i in range(n):
            a = self.scaled_vertices[i]
            b = self.scaled_vertices[(i + 1) % n]

            # ccw > 0: sp is left of ab; ccw == 0: on the line; ccw < 0: right of ab
            ccw = sign(cross(b.subtract(a), sp.subtract(a)))

            if ccw == 0:
                if (
                    min(a.x, b.x) <= sp.x <= max(a.x, b.x)
                    and min(a.y, b.y) <= sp.y <= max(a.y, b.y)
                ):
                    return True
            elif sign(a.y - sp.y) <= 0:
                # upward crossing
                if ccw > 0 and sign(b.y - sp.y) > 0:
                    winding_number += 1
            else:
                # downward crossing
                if ccw < 0 and sign(b.y - sp.y) <= 0:
                    winding_number -= 1
        return winding_number != 0


Geometry = Union[Circle, Polygon]


def contains_any(geometries: Iterable[Geometry], p: LatLng) -> bool:
    """True if any geometry contains ``p`` (a broadcast targets their union)."""

    return any(g.contains(p) for g in geometries)
