#!/usr/bin/env python3
# raster_proj/graticule/polyline.py
"""
Screen clipping, run segmentation and chunking of sampled graticule lines.

Output polylines are float32 (n, 2) vertex buffers in screen space, with
the curve parameter of each vertex alongside.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from raster_proj.coords import UNIT_SCREEN, CoordTransform, Rectangle
from raster_proj.graticule.sampler import GraticuleLine

ScreenPoint = Tuple[float, float]


@dataclass
class Polyline:
    points: np.ndarray   # (n, 2) float32
    params: np.ndarray   # (n,) float64

    def __len__(self) -> int:
        return int(self.points.shape[0])


class PolylineBuilder:
    """Collects runs; a run is kept only if it has at least two vertices."""

    def __init__(self):
        self.polylines: List[Polyline] = []
        self._pts: List[ScreenPoint] = []
        self._params: List[float] = []

    @property
    def is_open(self) -> bool:
        return bool(self._pts)

    def add(self, pt: ScreenPoint, t: float) -> None:
        self._pts.append(pt)
        self._params.append(t)

    def end(self, pt: Optional[ScreenPoint] = None, t: float = 0.0) -> None:
        """Close the current run, optionally appending a last vertex."""
        if not self._pts:
            return
        if pt is not None:
            self.add(pt, t)
        if len(self._pts) > 1:
            self.polylines.append(Polyline(
                np.asarray(self._pts, dtype=np.float32),
                np.asarray(self._params, dtype=np.float64),
            ))
        self._pts = []
        self._params = []


def _boundary_point(inside: ScreenPoint, t_in: float, outside: ScreenPoint, t_out: float,
                    screen: Rectangle) -> Tuple[ScreenPoint, float]:
    """Where the segment from `inside` to `outside` leaves `screen`."""
    alpha = 1.0
    for axis, (lo, hi) in enumerate(((screen.x1, screen.x2), (screen.y1, screen.y2))):
        d = outside[axis] - inside[axis]
        if d > 0.0:
            alpha = min(alpha, (hi - inside[axis]) / d)
        elif d < 0.0:
            alpha = min(alpha, (lo - inside[axis]) / d)
    alpha = max(0.0, alpha)
    pt = (inside[0] + alpha * (outside[0] - inside[0]),
          inside[1] + alpha * (outside[1] - inside[1]))
    return pt, t_in + alpha * (t_out - t_in)


def clip_to_screen(
    line: GraticuleLine,
    transform: CoordTransform,
    far_away_factor: float = math.pi / 4.0,
    screen: Rectangle = UNIT_SCREEN,
) -> List[Polyline]:
    """
    Split a sampled line into on-screen runs.

    Vertices off screen are dropped. A step whose L1 length exceeds
    far_away_factor screen scales (that is, far_away_factor in projected
    units) breaks the run outright; a shorter step that crosses the screen
    edge ends or starts the run at the crossing.
    """
    sx_inv = 1.0 / abs(transform.scale_x)
    sy_inv = 1.0 / abs(transform.scale_y)
    screen = screen.normalized()
    builder = PolylineBuilder()

    xy = transform.forward_points(line.xy())
    params = line.params()

    prev: Optional[Tuple[ScreenPoint, float]] = None
    prev_out: Optional[Tuple[ScreenPoint, float]] = None
    for (sx, sy), t in zip(xy, params):
        pt = (float(sx), float(sy))
        t = float(t)
        far = prev is not None and (
            abs(pt[0] - prev[0][0]) * sx_inv + abs(pt[1] - prev[0][1]) * sy_inv
            > far_away_factor)
        if screen.contains(*pt):
            if far:
                builder.end()
            elif prev_out is not None:
                entry, t_entry = _boundary_point(pt, t, prev_out[0], prev_out[1], screen)
                builder.add(entry, t_entry)
            builder.add(pt, t)
            prev_out = None
        else:
            if builder.is_open and not far:
                exit_pt, t_exit = _boundary_point(prev[0], prev[1], pt, t, screen)
                builder.end(exit_pt, t_exit)
            else:
                builder.end()
            prev_out = (pt, t)
        prev = (pt, t)
    builder.end()
    return builder.polylines


def chunk_polyline(polyline: Polyline, max_vertices: int) -> List[Polyline]:
    """
    Split into pieces of at most max_vertices vertices. Neighbouring pieces
    share their boundary vertex.
    """
    if max_vertices < 2:
        raise ValueError(f"max_vertices must be >= 2, got {max_vertices}")
    n = len(polyline)
    if n <= max_vertices:
        return [polyline]
    chunks: List[Polyline] = []
    start = 0
    while start < n - 1:
        stop = min(start + max_vertices, n)
        chunks.append(Polyline(polyline.points[start:stop].copy(),
                               polyline.params[start:stop].copy()))
        start = stop - 1
    return chunks
