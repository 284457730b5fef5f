#!/usr/bin/env python3
# raster_proj/graticule/generator.py
"""
Graticule for a projected view window.

Resolves the window's geographic bounds, lists the meridians and parallels
on a `span_deg` grid inside them, and runs each through the sampler, the
screen clipper and the chunker.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple

from raster_proj.bbox import InverseBoundingBoxResolver
from raster_proj.coords import UNIT_SCREEN, CoordTransform, GeoRect, Rectangle
from raster_proj.geodesy import EPSILON, normalize_lambda
from raster_proj.graticule.polyline import Polyline, chunk_polyline, clip_to_screen
from raster_proj.graticule.sampler import GraticuleCurveSampler, GraticuleLine
from raster_proj.projection.base import ProjectionKernel

log = logging.getLogger(__name__)

Segment = Tuple[float, float, float]   # (fixed coordinate, from, to), radians


def _split_range(lo: float, hi: float, cuts: List[float]) -> List[Tuple[float, float]]:
    """Cut [lo, hi] at every cut value strictly inside it."""
    points = [lo] + sorted({c for c in cuts if lo + EPSILON < c < hi - EPSILON}) + [hi]
    return list(zip(points[:-1], points[1:]))


class GraticuleGenerator:
    def __init__(
        self,
        kernel: ProjectionKernel,
        sampler: Optional[GraticuleCurveSampler] = None,
        resolver: Optional[InverseBoundingBoxResolver] = None,
        far_away_factor: float = math.pi / 4.0,
        max_vertices: int = 64,
        lat_limit_deg: float = 80.0,
    ):
        self.kernel = kernel
        self.sampler = sampler or GraticuleCurveSampler(kernel)
        self.resolver = resolver or InverseBoundingBoxResolver(kernel)
        self.far_away_factor = far_away_factor
        self.max_vertices = max_vertices
        self.lat_limit = math.radians(lat_limit_deg)

    def meridian_segments(self, geo: GeoRect, span_deg: float) -> List[Segment]:
        """Meridian pieces inside geo, split at the equator and at -phi0."""
        span = math.radians(span_deg)
        phi_lo = max(geo.phi1, -self.lat_limit)
        phi_hi = min(geo.phi2, self.lat_limit)
        if phi_hi <= phi_lo:
            return []
        pieces = _split_range(phi_lo, phi_hi, [0.0, -self.kernel.phi0])

        k0 = math.ceil(geo.lam1 / span - EPSILON)
        k1 = math.floor(geo.lam2 / span + EPSILON)
        per_turn = int(round(2.0 * math.pi / span))
        k1 = min(k1, k0 + per_turn - 1)

        out: List[Segment] = []
        for k in range(k0, k1 + 1):
            lam = k * span
            out.extend((lam, a, b) for a, b in pieces)
        return out

    def parallel_segments(self, geo: GeoRect, span_deg: float) -> List[Segment]:
        """Parallel pieces inside geo, split at the meridian opposite lam0."""
        span = math.radians(span_deg)
        antipode = normalize_lambda(self.kernel.lam0 - math.pi)
        cuts = [antipode + 2.0 * math.pi * n for n in (-1, 0, 1)]
        pieces = _split_range(geo.lam1, geo.lam2, cuts)

        k0 = math.ceil(max(geo.phi1, -self.lat_limit) / span - EPSILON)
        k1 = math.floor(min(geo.phi2, self.lat_limit) / span + EPSILON)
        out: List[Segment] = []
        for k in range(k0, k1 + 1):
            phi = k * span
            out.extend((phi, a, b) for a, b in pieces)
        return out

    def lines(self, view_rect: Rectangle, span_deg: float) -> List[GraticuleLine]:
        """Sampled (unclipped) curves for the view."""
        geo = self.resolver.inverse_bounding_box(view_rect)
        out: List[GraticuleLine] = []
        for lam, a, b in self.meridian_segments(geo, span_deg):
            line = self.sampler.create_meridian(lam, a, b)
            if line is not None:
                out.append(line)
        for phi, a, b in self.parallel_segments(geo, span_deg):
            line = self.sampler.create_parallel(phi, a, b)
            if line is not None:
                out.append(line)
        return out

    def y_shifts(self, view: Rectangle) -> List[float]:
        """
        Offsets that carry the kernel's y period onto the view.

        Forward y is wrapped into [-period/2, period/2); a periodic kernel
        gets one copy of each curve per period the view touches.
        """
        period = self.kernel.Y_PERIOD
        if period is None:
            return [0.0]
        half = 0.5 * period
        k0 = math.floor((view.y1 - half) / period) + 1
        k1 = math.floor((view.y2 + half) / period)
        return [k * period for k in range(k0, k1 + 1)]

    def generate(self, view_rect: Rectangle, span_deg: float) -> List[Polyline]:
        """Screen-space vertex buffers for every graticule run in the view."""
        view = view_rect.normalized()
        if view.width == 0.0 or view.height == 0.0:
            log.debug("graticule: zero-area view %s", view)
            return []
        shifts = self.y_shifts(view)
        # moving the window down by s is moving every curve up by s
        transforms = [CoordTransform(view.translated(0.0, -s), UNIT_SCREEN) for s in shifts]
        out: List[Polyline] = []
        lines = self.lines(view, span_deg)
        for line in lines:
            for transform in transforms:
                for run in clip_to_screen(line, transform, self.far_away_factor):
                    out.extend(chunk_polyline(run, self.max_vertices))
        log.debug("graticule: %d curves x %d periods -> %d buffers",
                  len(lines), len(shifts), len(out))
        return out
