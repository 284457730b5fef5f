#!/usr/bin/env python3
# raster_proj/projection/discrete_math.py
"""
Discretised interval bounds for the radial terms of the azimuthal inverses.

One projected coordinate t is cut into bins of width `unit`; the other
coordinate p stays continuous. For bin idx and a fixed p, each *_lower /
*_upper pair brackets the term over every t inside the bin. The terms are
functions of the planar radius r = hypot(t, p) through the family's angular
distance c(r):

    cos_r       cos(c)
    sin_r       sin(c)
    r_cot_r     r * cot(c)      (-> 1 as r -> 0)
    sin_r_div_r sin(c) / r      (-> 1 as r -> 0)

Past the domain radius the terms saturate at their limit values so callers
always get a finite, sound interval (r_cot_r saturates at -inf).
"""

from __future__ import annotations

import math
from typing import Tuple

from raster_proj.geodesy import EPSILON, SQRT_2


class DiscreteMath:
    """Bin partition of one projected axis. TMERC uses this directly."""

    def __init__(self, div_n: int, span: float):
        if div_n < 1:
            raise ValueError(f"div_n must be >= 1, got {div_n}")
        self.div_n = div_n
        # div_n bins per `span` of the axis
        self.unit = span / div_n

    def to_discrete(self, t: float) -> int:
        return int(math.floor(t / self.unit))

    def x_lower(self, idx: int) -> float:
        return idx * self.unit

    def x_upper(self, idx: int) -> float:
        return (idx + 1) * self.unit

    def bins(self, lo: float, hi: float) -> range:
        """Bin indices covering [lo, hi]."""
        return range(self.to_discrete(lo), self.to_discrete(hi) + 1)


class RadialDiscreteMath(DiscreteMath):
    """
    Bounds for an azimuthal family. Subclasses provide the angular distance
    c(r), the domain radius (c = pi) and the radius where c = pi/2.
    """

    radius: float = math.pi
    peak: float = math.pi / 2.0

    def angle(self, r: float) -> float:
        raise NotImplementedError

    # |t| closest to and farthest from zero inside bin idx
    def _abs_near(self, idx: int) -> float:
        return idx * self.unit if idx >= 0 else (-idx - 1) * self.unit

    def _abs_far(self, idx: int) -> float:
        return (idx + 1) * self.unit if idx >= 0 else -idx * self.unit

    def _r_near(self, idx: int, p: float) -> float:
        return math.hypot(self._abs_near(idx), p)

    def _r_far(self, idx: int, p: float) -> float:
        return math.hypot(self._abs_far(idx), p)

    # cos(c) is decreasing in r
    def cos_r_lower(self, idx: int, p: float) -> float:
        r = self._r_far(idx, p)
        return math.cos(self.angle(r)) if r <= self.radius else -1.0

    def cos_r_upper(self, idx: int, p: float) -> float:
        r = self._r_near(idx, p)
        return math.cos(self.angle(r)) if r <= self.radius else -1.0

    # sin(c) rises up to `peak` then falls back to zero at `radius`
    def _sin_r_ends(self, idx: int, p: float) -> Tuple[float, float]:
        r1 = math.hypot(self.x_lower(idx), p)
        r2 = math.hypot(self.x_upper(idx), p)
        return min(r1, r2), max(r1, r2)

    def sin_r_lower(self, idx: int, p: float) -> float:
        r_min, r_max = self._sin_r_ends(idx, p)
        if r_max >= self.radius:
            return 0.0
        if r_max <= self.peak:
            return math.sin(self.angle(r_min))
        if r_min >= self.peak:
            return math.sin(self.angle(r_max))
        return min(math.sin(self.angle(r_min)), math.sin(self.angle(r_max)))

    def sin_r_upper(self, idx: int, p: float) -> float:
        r_min, r_max = self._sin_r_ends(idx, p)
        if r_min >= self.radius:
            return 0.0
        if r_max <= self.peak:
            return math.sin(self.angle(r_max))
        if r_min >= self.peak:
            return math.sin(self.angle(r_min))
        return 1.0

    # r*cot(c) is decreasing in r, from 1 at the centre to -inf at the radius
    def _r_cot_r(self, r: float) -> float:
        if r < EPSILON:
            return 1.0
        if r < self.radius:
            return r / math.tan(self.angle(r))
        return -math.inf

    def r_cot_r_lower(self, idx: int, p: float) -> float:
        return self._r_cot_r(self._r_far(idx, p))

    def r_cot_r_upper(self, idx: int, p: float) -> float:
        return self._r_cot_r(self._r_near(idx, p))

    # sin(c)/r is decreasing in r, from 1 at the centre to 0 at the radius
    def _sin_r_div_r(self, r: float) -> float:
        if r < EPSILON:
            return 1.0
        if r < self.radius:
            return math.sin(self.angle(r)) / r
        return 0.0

    def sin_r_div_r_lower(self, idx: int, p: float) -> float:
        return self._sin_r_div_r(self._r_far(idx, p))

    def sin_r_div_r_upper(self, idx: int, p: float) -> float:
        return self._sin_r_div_r(self._r_near(idx, p))


class AeqdDiscreteMath(RadialDiscreteMath):
    """Azimuthal equidistant: the planar radius is the angular distance."""

    radius = math.pi
    peak = math.pi / 2.0

    def __init__(self, div_n: int = 180):
        super().__init__(div_n, math.pi)

    def angle(self, r: float) -> float:
        return r


class LaeaDiscreteMath(RadialDiscreteMath):
    """Lambert azimuthal equal-area: r = 2*sin(c/2)."""

    radius = 2.0
    peak = SQRT_2

    def __init__(self, div_n: int = 180):
        super().__init__(div_n, 2.0)

    def angle(self, r: float) -> float:
        return 2.0 * math.asin(min(r / 2.0, 1.0))
