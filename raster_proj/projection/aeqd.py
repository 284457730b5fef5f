#!/usr/bin/env python3
# raster_proj/projection/aeqd.py
"""Spherical azimuthal equidistant projection."""

from __future__ import annotations

import math
from typing import Optional

from raster_proj.coords import Rectangle
from raster_proj.geodesy import EPSILON, HALF_PI, clamp
from raster_proj.projection.base import AzimuthalKernel
from raster_proj.projection.discrete_math import AeqdDiscreteMath


class AeqdProjection(AzimuthalKernel):
    name = "aeqd"
    RANGE = Rectangle(-math.pi, -math.pi, math.pi, math.pi)

    def _make_discrete(self, div_n: int) -> AeqdDiscreteMath:
        return AeqdDiscreteMath(div_n)

    def _scale(self, cos_c: float) -> Optional[float]:
        c = math.acos(clamp(cos_c, -1.0, 1.0))
        if abs(c) < EPSILON:
            return 0.0
        sin_c = math.sin(c)
        if abs(sin_c) < EPSILON:
            # antipode of the centre
            return None
        return c / sin_c

    def _angular_distance(self, rho: float) -> float:
        return rho

    def _pole_y(self, north: bool) -> float:
        return (HALF_PI if north else -HALF_PI) - self._phi0
