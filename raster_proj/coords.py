#!/usr/bin/env python3
# raster_proj/coords.py
"""
Value types for geographic and projected coordinates, and the affine
transform from the projected plane onto screen space.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

_TWO_PI = 2.0 * math.pi


@dataclass(frozen=True)
class GeoCoord:
    """Longitude/latitude in radians."""
    lam: float
    phi: float


@dataclass(frozen=True)
class Point:
    """Projected-plane coordinate."""
    x: float
    y: float


@dataclass(frozen=True)
class Range:
    lo: float
    hi: float

    @property
    def width(self) -> float:
        return self.hi - self.lo

    def contains(self, v: float) -> bool:
        return self.lo <= v <= self.hi

    def shifted(self, d: float) -> "Range":
        return Range(self.lo + d, self.hi + d)


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned rectangle in projected (or screen) space."""
    x1: float
    y1: float
    x2: float
    y2: float

    def normalized(self) -> "Rectangle":
        return Rectangle(
            min(self.x1, self.x2), min(self.y1, self.y2),
            max(self.x1, self.x2), max(self.y1, self.y2),
        )

    def x_range(self) -> Range:
        return Range(min(self.x1, self.x2), max(self.x1, self.x2))

    def y_range(self) -> Range:
        return Range(min(self.y1, self.y2), max(self.y1, self.y2))

    @property
    def width(self) -> float:
        return abs(self.x2 - self.x1)

    @property
    def height(self) -> float:
        return abs(self.y2 - self.y1)

    def contains(self, x: float, y: float) -> bool:
        return self.x_range().contains(x) and self.y_range().contains(y)

    def translated(self, dx: float, dy: float) -> "Rectangle":
        return Rectangle(self.x1 + dx, self.y1 + dy, self.x2 + dx, self.y2 + dy)


@dataclass(frozen=True)
class GeoRect:
    """
    Geographic bounding rectangle in radians.

    Longitudes are periodic: once normalized, lam1 lies in [-pi, pi) and
    lam2 - lam1 <= 2*pi, so lam2 may exceed pi when the box wraps.
    """
    lam1: float
    phi1: float
    lam2: float
    phi2: float

    @classmethod
    def full_sphere(cls) -> "GeoRect":
        return cls(-math.pi, -math.pi / 2.0, math.pi, math.pi / 2.0)

    @classmethod
    def point(cls, geo: GeoCoord) -> "GeoRect":
        return cls(geo.lam, geo.phi, geo.lam, geo.phi)

    @property
    def lambda_range(self) -> Range:
        return Range(self.lam1, self.lam2)

    @property
    def phi_range(self) -> Range:
        return Range(self.phi1, self.phi2)

    @property
    def is_full_circle(self) -> bool:
        return self.lam2 - self.lam1 >= _TWO_PI

    def normalized(self) -> "GeoRect":
        if self.lam2 - self.lam1 > _TWO_PI:
            return GeoRect(-math.pi, self.phi1, math.pi, self.phi2)
        if -math.pi <= self.lam1 < math.pi:
            return self
        d = _TWO_PI * math.floor((self.lam1 + math.pi) / _TWO_PI)
        lam1, lam2 = self.lam1 - d, self.lam2 - d
        if lam1 >= math.pi:
            lam1, lam2 = lam1 - _TWO_PI, lam2 - _TWO_PI
        return GeoRect(lam1, self.phi1, lam2, self.phi2)

    def contains(self, geo: GeoCoord, tol: float = 0.0) -> bool:
        """Membership test, periodic in longitude."""
        if not (self.phi1 - tol <= geo.phi <= self.phi2 + tol):
            return False
        if self.lam2 - self.lam1 + 2.0 * tol >= _TWO_PI:
            return True
        offset = (geo.lam - self.lam1 + tol) % _TWO_PI
        return offset <= self.lam2 - self.lam1 + 2.0 * tol

    def to_degrees(self) -> Tuple[float, float, float, float]:
        return (
            math.degrees(self.lam1), math.degrees(self.phi1),
            math.degrees(self.lam2), math.degrees(self.phi2),
        )


# Screen space used by the graticule clipper
UNIT_SCREEN = Rectangle(-1.0, -1.0, 1.0, 1.0)


class CoordTransform:
    """Axis-wise affine map taking src onto dst."""

    def __init__(self, src: Rectangle, dst: Rectangle = UNIT_SCREEN):
        self.src = src
        self.dst = dst
        self.scale_x = (dst.x2 - dst.x1) / (src.x2 - src.x1)
        self.scale_y = (dst.y2 - dst.y1) / (src.y2 - src.y1)

    def forward_point(self, x: float, y: float) -> Tuple[float, float]:
        return (
            self.dst.x1 + (x - self.src.x1) * self.scale_x,
            self.dst.y1 + (y - self.src.y1) * self.scale_y,
        )

    def forward_points(self, xy: np.ndarray) -> np.ndarray:
        """Vectorised forward_point over an (n, 2) array."""
        out = np.empty_like(xy, dtype=np.float64)
        out[:, 0] = self.dst.x1 + (xy[:, 0] - self.src.x1) * self.scale_x
        out[:, 1] = self.dst.y1 + (xy[:, 1] - self.src.y1) * self.scale_y
        return out

