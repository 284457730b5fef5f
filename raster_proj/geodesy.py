#!/usr/bin/env python3
# raster_proj/geodesy.py
"""
Angle utilities shared by the projection kernels and the bounding resolver.
All angles are radians unless a name says otherwise.
"""

from __future__ import annotations

import math
from typing import Optional, Tuple

from raster_proj.coords import GeoCoord, Range

__all__ = [
    "EPSILON",
    "HALF_PI",
    "TWO_PI",
    "SQRT_2",
    "clamp",
    "normalize_lambda",
    "atan2_range",
    "merge_ranges",
    "to_radians",
    "to_degrees",
]

EPSILON = 1.0e-7
HALF_PI = math.pi / 2.0
TWO_PI = math.pi * 2.0
SQRT_2 = math.sqrt(2.0)


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp x into [lo, hi]."""
    return max(min(x, hi), lo)


def normalize_lambda(lam: float) -> float:
    """Wrap a longitude into [-pi, pi)."""
    if -math.pi <= lam < math.pi:
        return lam
    lam -= TWO_PI * math.floor((lam + math.pi) / TWO_PI)
    # floor() can leave lam a hair at or above pi for inputs like 3*pi - tiny
    if lam >= math.pi:
        lam -= TWO_PI
    return lam


def atan2_range(y: Range, x: Range) -> Range:
    """
    Range of atan2(y, x) over the box y x x.

    When the box touches the negative x axis the result is returned as one
    contiguous interval, which then reaches past pi (or below -pi). A box
    containing the origin gives the full circle. A negative zero y picks
    the side of the cut the way math.atan2 does.
    """
    if y.lo == 0.0 and math.copysign(1.0, y.lo) < 0.0:
        if y.hi == 0.0 and math.copysign(1.0, y.hi) < 0.0:
            # atan2(-0.0, x) == -atan2(0.0, x)
            r = atan2_range(Range(0.0, 0.0), x)
            return Range(-r.hi, -r.lo)
        y = Range(0.0, y.hi)

    if 0.0 <= y.lo:
        if 0.0 < x.lo:
            return Range(math.atan2(y.lo, x.hi), math.atan2(y.hi, x.lo))
        if x.hi < 0.0:
            return Range(math.atan2(y.hi, x.hi), math.atan2(y.lo, x.lo))
        return Range(math.atan2(y.lo, x.hi), math.atan2(y.lo, x.lo))

    if y.hi < 0.0:
        if 0.0 < x.lo:
            return Range(math.atan2(y.lo, x.lo), math.atan2(y.hi, x.hi))
        if x.hi < 0.0:
            return Range(math.atan2(y.hi, x.lo), math.atan2(y.lo, x.hi))
        return Range(math.atan2(y.hi, x.lo), math.atan2(y.hi, x.hi))

    # y straddles the x axis
    if 0.0 < x.lo:
        return Range(math.atan2(y.lo, x.lo), math.atan2(y.hi, x.lo))
    if x.hi < 0.0:
        t1 = math.atan2(y.hi, x.hi)
        t2 = math.atan2(y.lo, x.hi)
        if math.pi <= t1:
            return Range(t1 - TWO_PI, t2)
        return Range(t1, t2 + TWO_PI)
    return Range(-math.pi, math.pi)


def merge_ranges(*ranges: Optional[Range]) -> Optional[Range]:
    """Hull of the given ranges; None entries are skipped."""
    out: Optional[Range] = None
    for r in ranges:
        if r is None:
            continue
        out = r if out is None else Range(min(out.lo, r.lo), max(out.hi, r.hi))
    return out


def to_radians(lon_deg: float, lat_deg: float) -> GeoCoord:
    return GeoCoord(math.radians(lon_deg), math.radians(lat_deg))


def to_degrees(geo: GeoCoord) -> Tuple[float, float]:
    """Return (lon_deg, lat_deg)."""
    return math.degrees(geo.lam), math.degrees(geo.phi)
