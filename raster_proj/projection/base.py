#!/usr/bin/env python3
# raster_proj/projection/base.py
"""
Projection kernel interface.

A kernel owns a projection centre (lam0, phi0) with its cached trig values
and exposes pure point functions plus the per-bin bound hooks consumed by
InverseBoundingBoxResolver. Kernels are immutable; recentered() returns a
new instance.
"""

from __future__ import annotations

import math
from typing import Optional

from raster_proj.coords import GeoCoord, Point, Range, Rectangle
from raster_proj.geodesy import (
    EPSILON,
    HALF_PI,
    atan2_range,
    clamp,
    normalize_lambda,
)
from raster_proj.projection.discrete_math import DiscreteMath, RadialDiscreteMath


class ProjectionKernel:
    name = "base"
    RANGE = Rectangle(-math.pi, -math.pi, math.pi, math.pi)
    # projected y repeats with this period; None for a bounded plane
    Y_PERIOD: Optional[float] = None

    def __init__(self, lam0: float = 0.0, phi0: float = 0.0, div_n: int = 180):
        self._lam0 = normalize_lambda(lam0)
        self._phi0 = clamp(phi0, -HALF_PI, HALF_PI)
        self._sin_phi0 = math.sin(self._phi0)
        self._cos_phi0 = math.cos(self._phi0)
        self._div_n = div_n
        self._discrete = self._make_discrete(div_n)

    def _make_discrete(self, div_n: int) -> DiscreteMath:
        raise NotImplementedError

    # --- centre
    @property
    def lam0(self) -> float:
        return self._lam0

    @property
    def phi0(self) -> float:
        return self._phi0

    @property
    def sin_phi0(self) -> float:
        return self._sin_phi0

    @property
    def cos_phi0(self) -> float:
        return self._cos_phi0

    @property
    def center(self) -> GeoCoord:
        return GeoCoord(self._lam0, self._phi0)

    @property
    def div_n(self) -> int:
        return self._div_n

    @property
    def discrete(self) -> DiscreteMath:
        return self._discrete

    def is_polar_center(self) -> bool:
        return abs(self._phi0) > HALF_PI - EPSILON

    def recentered(self, lam0: float, phi0: float) -> "ProjectionKernel":
        return type(self)(lam0, phi0, self._div_n)

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(lam0={self._lam0!r}, "
                f"phi0={self._phi0!r}, div_n={self._div_n})")

    # --- point functions
    def forward(self, lam: float, phi: float) -> Optional[Point]:
        raise NotImplementedError

    def inverse(self, x: float, y: float) -> Optional[GeoCoord]:
        raise NotImplementedError

    def get_range(self) -> Rectangle:
        return self.RANGE

    def check_xy_domain(self, x: float, y: float, rate: float = 1.0) -> bool:
        raise NotImplementedError

    # --- bound hooks
    def contains_pole(self, north: bool, y_range: Range) -> bool:
        """Pole image lies on x = 0 within y_range (caller checks x)."""
        raise NotImplementedError

    def crosses_pole_ray(self, y_range: Range) -> bool:
        """y_range meets the x = 0 cut where longitude jumps by 2*pi."""
        raise NotImplementedError

    def phi_bounds_at_y(self, x_idx: int, y: float) -> Range:
        raise NotImplementedError

    def phi_bounds_at_x(self, y_idx: int, x: float) -> Range:
        raise NotImplementedError

    def lambda_bounds_at_y(self, x_idx: int, y: float) -> Range:
        raise NotImplementedError

    def lambda_bounds_at_x(self, y_idx: int, x: float) -> Range:
        raise NotImplementedError


def _ordered(a: float, b: float) -> Range:
    return Range(a, b) if a <= b else Range(b, a)


class AzimuthalKernel(ProjectionKernel):
    """
    Shared math of the azimuthal families. A subclass supplies the scale
    factor k(cos c) of the forward map, the angular distance c(rho) of the
    inverse and the y of each pole image on the x = 0 axis.
    """

    @property
    def radius(self) -> float:
        return self._discrete.radius

    def _scale(self, cos_c: float) -> Optional[float]:
        raise NotImplementedError

    def _angular_distance(self, rho: float) -> float:
        raise NotImplementedError

    def _pole_y(self, north: bool) -> float:
        raise NotImplementedError

    def forward(self, lam: float, phi: float) -> Optional[Point]:
        dlam = lam - self._lam0
        sin_phi, cos_phi = math.sin(phi), math.cos(phi)
        cos_dlam = math.cos(dlam)
        cos_c = self._sin_phi0 * sin_phi + self._cos_phi0 * cos_phi * cos_dlam
        k = self._scale(cos_c)
        if k is None:
            return None
        x = k * cos_phi * math.sin(dlam)
        y = k * (self._cos_phi0 * sin_phi - self._sin_phi0 * cos_phi * cos_dlam)
        return Point(x, y)

    def inverse(self, x: float, y: float) -> Optional[GeoCoord]:
        rho2 = x * x + y * y
        if rho2 > self.radius * self.radius:
            return None
        rho = math.sqrt(rho2)
        if rho < EPSILON:
            return self.center
        c = self._angular_distance(rho)
        sin_c, cos_c = math.sin(c), math.cos(c)
        phi = math.asin(clamp(
            cos_c * self._sin_phi0 + y * sin_c * self._cos_phi0 / rho, -1.0, 1.0))
        if self._phi0 > HALF_PI - EPSILON:
            lam = math.atan2(x, -y)
        elif self._phi0 < -(HALF_PI - EPSILON):
            lam = math.atan2(x, y)
        else:
            lam = math.atan2(
                x * sin_c,
                rho * cos_c * self._cos_phi0 - y * self._sin_phi0 * sin_c)
        return GeoCoord(normalize_lambda(lam + self._lam0), phi)

    def check_xy_domain(self, x: float, y: float, rate: float = 1.0) -> bool:
        lim = self.radius * rate
        if abs(x) >= lim or abs(y) >= lim:
            return False
        return x * x + y * y < lim * lim

    # --- poles
    def contains_pole(self, north: bool, y_range: Range) -> bool:
        # The antipodal pole is smeared over the whole boundary circle
        if north and self._phi0 <= -(HALF_PI - EPSILON):
            return False
        if not north and self._phi0 >= HALF_PI - EPSILON:
            return False
        return y_range.contains(self._pole_y(north))

    def crosses_pole_ray(self, y_range: Range) -> bool:
        y_n = math.inf if self._phi0 <= -(HALF_PI - EPSILON) else self._pole_y(True)
        y_s = -math.inf if self._phi0 >= HALF_PI - EPSILON else self._pole_y(False)
        return y_range.hi < y_s or y_n < y_range.lo

    # --- per-bin bounds
    def _polar_sign(self) -> float:
        return -1.0 if self._phi0 > 0 else 1.0

    def lambda_bounds_at_x(self, y_idx: int, x: float) -> Range:
        dm: RadialDiscreteMath = self._discrete
        if self.is_polar_center():
            s = self._polar_sign()
            t = _ordered(s * dm.x_lower(y_idx), s * dm.x_upper(y_idx))
            return atan2_range(Range(x, x), t).shifted(self._lam0)
        t1 = _ordered(self._cos_phi0 * dm.r_cot_r_lower(y_idx, x),
                      self._cos_phi0 * dm.r_cot_r_upper(y_idx, x))
        t2 = _ordered(-self._sin_phi0 * dm.x_lower(y_idx),
                      -self._sin_phi0 * dm.x_upper(y_idx))
        t = Range(t1.lo + t2.lo, t1.hi + t2.hi)
        return atan2_range(Range(x, x), t).shifted(self._lam0)

    def lambda_bounds_at_y(self, x_idx: int, y: float) -> Range:
        dm: RadialDiscreteMath = self._discrete
        s = Range(dm.x_lower(x_idx), dm.x_upper(x_idx))
        if self.is_polar_center():
            t = self._polar_sign() * y
            return atan2_range(s, Range(t, t)).shifted(self._lam0)
        t = _ordered(
            self._cos_phi0 * dm.r_cot_r_lower(x_idx, y) - self._sin_phi0 * y,
            self._cos_phi0 * dm.r_cot_r_upper(x_idx, y) - self._sin_phi0 * y)
        return atan2_range(s, t).shifted(self._lam0)

    def phi_bounds_at_y(self, x_idx: int, y: float) -> Range:
        dm: RadialDiscreteMath = self._discrete
        t1 = _ordered(dm.cos_r_lower(x_idx, y) * self._sin_phi0,
                      dm.cos_r_upper(x_idx, y) * self._sin_phi0)
        t2 = _ordered(y * dm.sin_r_div_r_lower(x_idx, y) * self._cos_phi0,
                      y * dm.sin_r_div_r_upper(x_idx, y) * self._cos_phi0)
        return self._asin_range(t1.lo + t2.lo, t1.hi + t2.hi)

    def phi_bounds_at_x(self, y_idx: int, x: float) -> Range:
        dm: RadialDiscreteMath = self._discrete
        t1 = _ordered(dm.cos_r_lower(y_idx, x) * self._sin_phi0,
                      dm.cos_r_upper(y_idx, x) * self._sin_phi0)
        # y runs over the bin; its sign is fixed by the bin index
        y_a, y_b = abs(dm.x_lower(y_idx)), abs(dm.x_upper(y_idx))
        y_abs_min, y_abs_max = min(y_a, y_b), max(y_a, y_b)
        t2_abs_max = y_abs_max * dm.sin_r_div_r_upper(y_idx, x) * abs(self._cos_phi0)
        t2_abs_min = y_abs_min * dm.sin_r_div_r_lower(y_idx, x) * abs(self._cos_phi0)
        if y_idx * self._cos_phi0 >= 0:
            t2 = Range(t2_abs_min, t2_abs_max)
        else:
            t2 = Range(-t2_abs_max, -t2_abs_min)
        return self._asin_range(t1.lo + t2.lo, t1.hi + t2.hi)

    @staticmethod
    def _asin_range(lo: float, hi: float) -> Range:
        return Range(math.asin(clamp(lo, -1.0, 1.0)), math.asin(clamp(hi, -1.0, 1.0)))
