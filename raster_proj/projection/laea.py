#!/usr/bin/env python3
# raster_proj/projection/laea.py
"""Spherical Lambert azimuthal equal-area projection (unit sphere, disc radius 2)."""

from __future__ import annotations

import math
from typing import Optional

from raster_proj.coords import Rectangle
from raster_proj.geodesy import EPSILON, clamp
from raster_proj.projection.base import AzimuthalKernel
from raster_proj.projection.discrete_math import LaeaDiscreteMath


class LaeaProjection(AzimuthalKernel):
    name = "laea"
    RANGE = Rectangle(-2.0, -2.0, 2.0, 2.0)

    def _make_discrete(self, div_n: int) -> LaeaDiscreteMath:
        return LaeaDiscreteMath(div_n)

    def _scale(self, cos_c: float) -> Optional[float]:
        c = 1.0 + clamp(cos_c, -1.0, 1.0)
        if abs(c) < EPSILON:
            return None
        return math.sqrt(2.0 / c)

    def _angular_distance(self, rho: float) -> float:
        return 2.0 * math.asin(clamp(rho / 2.0, -1.0, 1.0))

    def _pole_y(self, north: bool) -> float:
        # sqrt(2)*cos(phi0)/sqrt(1 +- sin(phi0)) without the 0/0 at the poles
        if north:
            return math.sqrt(2.0 * (1.0 - self._sin_phi0))
        return -math.sqrt(2.0 * (1.0 + self._sin_phi0))
