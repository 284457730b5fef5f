#!/usr/bin/env python3
# raster_proj/projection/tmerc.py
"""
Spherical transverse Mercator.

x grows without bound towards the two points 90 degrees off the central
meridian on the equator; y is periodic with period 2*pi and is reported in
[-pi, pi). The inverse is defined everywhere.
"""

from __future__ import annotations

import math
from typing import Optional

from raster_proj.coords import GeoCoord, Point, Range, Rectangle
from raster_proj.geodesy import EPSILON, HALF_PI, TWO_PI, clamp, normalize_lambda
from raster_proj.projection.base import ProjectionKernel
from raster_proj.projection.discrete_math import DiscreteMath

# cosh overflows a float a little past 710
_MAX_HYPERBOLIC = 700.0


def _sech(x: float) -> float:
    if abs(x) > _MAX_HYPERBOLIC:
        return 0.0
    return 1.0 / math.cosh(x)


class TmercProjection(ProjectionKernel):
    name = "tmerc"
    RANGE = Rectangle(-math.pi, -math.pi, math.pi, math.pi)
    Y_PERIOD = TWO_PI

    def _make_discrete(self, div_n: int) -> DiscreteMath:
        return DiscreteMath(div_n, math.pi)

    def forward(self, lam: float, phi: float) -> Optional[Point]:
        dlam = lam - self._lam0
        cos_phi = math.cos(phi)
        b = cos_phi * math.sin(dlam)
        if 1.0 - abs(b) < EPSILON:
            return None
        x = math.atanh(b)
        y = math.atan2(math.sin(phi), cos_phi * math.cos(dlam)) - self._phi0
        return Point(x, normalize_lambda(y))

    def _phi_at(self, x: float, y: float) -> float:
        return math.asin(clamp(math.sin(y + self._phi0) * _sech(x), -1.0, 1.0))

    def _lam_at(self, x: float, y: float) -> float:
        # atan2(sinh x, cos d) scaled by sech x; keeps the sign of a zero x
        return math.atan2(math.tanh(x), math.cos(y + self._phi0) * _sech(x)) + self._lam0

    def inverse(self, x: float, y: float) -> Optional[GeoCoord]:
        return GeoCoord(normalize_lambda(self._lam_at(x, y)), self._phi_at(x, y))

    def check_xy_domain(self, x: float, y: float, rate: float = 1.0) -> bool:
        return abs(x) < math.pi * rate

    # --- poles
    def contains_pole(self, north: bool, y_range: Range) -> bool:
        base = (HALF_PI if north else -HALF_PI) - self._phi0
        k = math.ceil((y_range.lo - base) / TWO_PI)
        return base + TWO_PI * k <= y_range.hi

    def crosses_pole_ray(self, y_range: Range) -> bool:
        # Only meaningful once no pole lies in y_range: the whole range then
        # sits between two consecutive pole images and cos(y + phi0) keeps
        # one sign. Negative means the x = 0 segment is the antimeridian.
        mid = 0.5 * (y_range.lo + y_range.hi)
        return math.cos(mid + self._phi0) < 0.0

    # --- per-bin bounds (exact: ends of the bin plus interior extrema)
    def _x_bin(self, idx: int):
        lo, hi = self._discrete.x_lower(idx), self._discrete.x_upper(idx)
        if idx < 0 and hi == 0.0:
            hi = -0.0
        return lo, hi

    def _extrema(self, idx: int, offset: float, step: float = math.pi):
        """y values inside bin idx where y + phi0 = offset + k*step."""
        lo, hi = self._discrete.x_lower(idx), self._discrete.x_upper(idx)
        k = math.ceil((lo + self._phi0 - offset) / step)
        y = offset + k * step - self._phi0
        out = []
        while y <= hi:
            out.append(y)
            y += step
        return out

    def phi_bounds_at_y(self, x_idx: int, y: float) -> Range:
        a, b = self._x_bin(x_idx)
        vals = [self._phi_at(a, y), self._phi_at(b, y)]
        return Range(min(vals), max(vals))

    def phi_bounds_at_x(self, y_idx: int, x: float) -> Range:
        ys = [self._discrete.x_lower(y_idx), self._discrete.x_upper(y_idx)]
        ys += self._extrema(y_idx, HALF_PI)
        vals = [self._phi_at(x, y) for y in ys]
        return Range(min(vals), max(vals))

    def lambda_bounds_at_y(self, x_idx: int, y: float) -> Range:
        a, b = self._x_bin(x_idx)
        vals = [self._lam_at(a, y), self._lam_at(b, y)]
        return Range(min(vals), max(vals))

    def lambda_bounds_at_x(self, y_idx: int, x: float) -> Range:
        ys = [self._discrete.x_lower(y_idx), self._discrete.x_upper(y_idx)]
        ys += self._extrema(y_idx, 0.0)
        vals = [self._lam_at(x, y) for y in ys]
        return Range(min(vals), max(vals))
