#!/usr/bin/env python3
# raster_proj/bbox.py
"""
Inverse bounding box: the geographic rectangle that soundly covers every
point whose projection falls inside a projected-space window.

The resolver is family-agnostic. It walks the four window edges bin by bin
and asks the kernel for a sound interval of phi / lambda per bin, then
handles the cases the edge walk cannot see: a pole inside the window, and
the x = 0 cut where longitude jumps by 2*pi.
"""

from __future__ import annotations

import logging
import math
from typing import Iterator, Tuple

from raster_proj.coords import GeoRect, Range, Rectangle
from raster_proj.geodesy import EPSILON, HALF_PI, TWO_PI, merge_ranges
from raster_proj.projection.base import ProjectionKernel

log = logging.getLogger(__name__)


class InverseBoundingBoxResolver:
    def __init__(self, kernel: ProjectionKernel, axis_epsilon: float = EPSILON):
        self.kernel = kernel
        # half-width of the strip around x = 0 left out of the split walk
        self.axis_epsilon = axis_epsilon

    def pole_containment(self, rect: Rectangle) -> Tuple[bool, bool]:
        """(contains_north, contains_south) for the window."""
        xr, yr = rect.x_range(), rect.y_range()
        if not xr.lo <= 0.0 <= xr.hi:
            return False, False
        return self.kernel.contains_pole(True, yr), self.kernel.contains_pole(False, yr)

    def inverse_bounding_box(self, rect: Rectangle) -> GeoRect:
        xr, yr = rect.x_range(), rect.y_range()

        if xr.width == 0.0 and yr.width == 0.0:
            geo = self.kernel.inverse(xr.lo, yr.lo)
            if geo is not None:
                return GeoRect.point(geo)

        if xr.lo <= 0.0 <= xr.hi:
            north, south = self.pole_containment(rect)
            if north and south:
                log.debug("window %s holds both poles", rect)
                return GeoRect.full_sphere()
            if north:
                phi = self.phi_range(xr, yr)
                return GeoRect(-math.pi, phi.lo, math.pi, HALF_PI)
            if south:
                phi = self.phi_range(xr, yr)
                return GeoRect(-math.pi, -HALF_PI, math.pi, phi.hi)
            if self.kernel.crosses_pole_ray(yr):
                return self._finish(self.split_lambda_range(xr, yr), self.phi_range(xr, yr))

        return self._finish(self.lambda_range(xr, yr), self.phi_range(xr, yr))

    def phi_range(self, xr: Range, yr: Range) -> Range:
        k = self.kernel
        return merge_ranges(
            *(k.phi_bounds_at_y(i, y) for y, i in self._edge_bins(xr, yr.lo, yr.hi)),
            *(k.phi_bounds_at_x(i, x) for x, i in self._edge_bins(yr, xr.lo, xr.hi)),
        )

    def lambda_range(self, xr: Range, yr: Range) -> Range:
        k = self.kernel
        return merge_ranges(
            *(k.lambda_bounds_at_y(i, y) for y, i in self._edge_bins(xr, yr.lo, yr.hi)),
            *(k.lambda_bounds_at_x(i, x) for x, i in self._edge_bins(yr, xr.lo, xr.hi)),
        )

    def split_lambda_range(self, xr: Range, yr: Range) -> Range:
        """
        Longitude range of a window that crosses the cut on x = 0.

        Each side of the cut is bounded on its own; the negative side sits
        just above -pi and is moved up by 2*pi to join the positive side
        sitting just below pi.
        """
        k = self.kernel
        eps = self.axis_epsilon
        # -0.0 keeps atan2 on the negative side of the cut
        x_minus = xr.lo if xr.lo < 0.0 else -0.0
        minus = merge_ranges(*(k.lambda_bounds_at_x(i, x_minus)
                               for _, i in self._edge_bins(yr, x_minus)))
        if xr.lo < -eps:
            half = Range(xr.lo, -eps)
            minus = merge_ranges(minus, *(k.lambda_bounds_at_y(i, y)
                                          for y, i in self._edge_bins(half, yr.lo, yr.hi)))
        plus = merge_ranges(*(k.lambda_bounds_at_x(i, xr.hi)
                              for _, i in self._edge_bins(yr, xr.hi)))
        if xr.hi > eps:
            half = Range(eps, xr.hi)
            plus = merge_ranges(plus, *(k.lambda_bounds_at_y(i, y)
                                        for y, i in self._edge_bins(half, yr.lo, yr.hi)))
        return Range(plus.lo, minus.hi + TWO_PI)

    def _edge_bins(self, span: Range, *fixed: float) -> Iterator[Tuple[float, int]]:
        """(fixed coordinate, bin index) pairs walking `span` once per fixed value."""
        bins = self.kernel.discrete.bins(span.lo, span.hi)
        for v in fixed:
            for idx in bins:
                yield v, idx

    @staticmethod
    def _finish(lam: Range, phi: Range) -> GeoRect:
        out = GeoRect(lam.lo, phi.lo, lam.hi, phi.hi).normalized()
        if out.is_full_circle:
            log.debug("longitude range wider than a full turn, clamped")
        return out
