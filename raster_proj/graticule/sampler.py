#!/usr/bin/env python3
# raster_proj/graticule/sampler.py
"""
Adaptive sampling of parallels and meridians in the projected plane.

A curve is a fixed latitude (parallel, parameter = longitude) or a fixed
longitude (meridian, parameter = latitude). The sampler finds the first and
last projectable parameter, takes init_div_num + 1 even samples between
them, and splits any gap longer than `threshold` until the chord is short
enough or max_recursion is reached.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

import numpy as np

from raster_proj.coords import Point
from raster_proj.projection.base import ProjectionKernel

log = logging.getLogger(__name__)

# (fixed coordinate, curve parameter) -> projected point or None
Processor = Callable[[float, float], Optional[Point]]


@dataclass(frozen=True)
class SamplePoint:
    x: float
    y: float
    t: float      # curve parameter (radians)
    dr: float     # projected distance from the previous sample


@dataclass
class GraticuleLine:
    c0: float
    points: List[SamplePoint] = field(default_factory=list)

    @property
    def length(self) -> float:
        return sum(p.dr for p in self.points)

    def params(self) -> np.ndarray:
        return np.array([p.t for p in self.points], dtype=np.float64)

    def xy(self) -> np.ndarray:
        return np.array([(p.x, p.y) for p in self.points], dtype=np.float64).reshape(-1, 2)

    def __len__(self) -> int:
        return len(self.points)


class GraticuleCurveSampler:
    def __init__(
        self,
        kernel: ProjectionKernel,
        init_div_num: int = 8,
        threshold: float = math.pi / 8.0,
        max_recursion: int = 8,
        domain_rate: float = 0.9,
    ):
        if init_div_num < 1:
            raise ValueError(f"init_div_num must be >= 1, got {init_div_num}")
        self.kernel = kernel
        self.init_div_num = init_div_num
        self.threshold = threshold
        self.threshold_sq = threshold * threshold
        self.max_recursion = max_recursion
        self.domain_rate = domain_rate

    # --- processors
    def _accept(self, p: Optional[Point]) -> Optional[Point]:
        if p is None or not self.kernel.check_xy_domain(p.x, p.y, self.domain_rate):
            return None
        return p

    def _along_parallel(self, phi: float, lam: float) -> Optional[Point]:
        return self._accept(self.kernel.forward(lam, phi))

    def _along_meridian(self, lam: float, phi: float) -> Optional[Point]:
        return self._accept(self.kernel.forward(lam, phi))

    # --- public
    def create_parallel(self, phi: float, lam1: float, lam2: float) -> Optional[GraticuleLine]:
        """Parallel at latitude phi from longitude lam1 to lam2."""
        return self._create_line(phi, lam1, lam2, self._along_parallel)

    def create_meridian(self, lam: float, phi1: float, phi2: float) -> Optional[GraticuleLine]:
        """Meridian at longitude lam from latitude phi1 to phi2."""
        return self._create_line(lam, phi1, phi2, self._along_meridian)

    # --- internals
    def _interpolate(self, v1: float, v2: float, k: int) -> float:
        n = self.init_div_num
        return (v1 * (n - k) + v2 * k) / n

    def search_endpoint(self, c0: float, v_start: float, v_end: float,
                        proc: Processor) -> Optional[float]:
        """
        First projectable parameter scanning from v_start towards v_end.
        When the hit is not v_start itself, bisect back towards the last
        failing sample to land closer to the domain edge.
        """
        prev_bad: Optional[float] = None
        for k in range(self.init_div_num):
            v = self._interpolate(v_start, v_end, k)
            if proc(c0, v) is None:
                prev_bad = v
                continue
            if prev_bad is None:
                return v
            bad, good = prev_bad, v
            for _ in range(self.init_div_num):
                mid = 0.5 * (bad + good)
                if proc(c0, mid) is None:
                    bad = mid
                else:
                    good = mid
            return good
        return None

    def _create_line(self, c0: float, v1: float, v2: float,
                     proc: Processor) -> Optional[GraticuleLine]:
        v_ini = self.search_endpoint(c0, v1, v2, proc)
        if v_ini is None:
            log.debug("no projectable point on curve c0=%.6f [%.6f, %.6f]", c0, v1, v2)
            return None
        v_fin = self.search_endpoint(c0, v2, v1, proc)
        if v_fin is None:
            return None

        line = GraticuleLine(c0)
        prev: Optional[Tuple[float, Point]] = None
        for k in range(self.init_div_num + 1):
            v = self._interpolate(v_ini, v_fin, k)
            p = proc(c0, v)
            if p is None:
                continue
            if prev is None:
                line.points.append(SamplePoint(p.x, p.y, v, 0.0))
            else:
                dr_sq = _dist_sq(prev[1], p)
                if dr_sq > self.threshold_sq:
                    self._subdivide(c0, prev, (v, p), proc, line.points)
                else:
                    line.points.append(SamplePoint(p.x, p.y, v, math.sqrt(dr_sq)))
            prev = (v, p)
        return line if line.points else None

    def _find_midpoint(self, c0: float, v1: float, v2: float,
                       proc: Processor) -> Optional[Tuple[float, Point]]:
        for v in (0.5 * (v1 + v2), (2.0 * v1 + v2) / 3.0, (v1 + 2.0 * v2) / 3.0):
            p = proc(c0, v)
            if p is not None:
                return v, p
        return None

    def _subdivide(self, c0: float, start: Tuple[float, Point], end: Tuple[float, Point],
                   proc: Processor, out: List[SamplePoint]) -> None:
        """
        Emit the points strictly after `start` up to and including `end`.

        The stack holds pending work in reverse emission order: either a
        segment (start, end, depth) still to be split, or a finished sample.
        """
        stack: list = [("seg", start, end, 0)]
        while stack:
            item = stack.pop()
            if item[0] == "pt":
                out.append(item[1])
                continue
            _, (va, pa), (vb, pb), depth = item
            mid = self._find_midpoint(c0, va, vb, proc)
            if mid is None:
                log.debug("no projectable midpoint in (%.6f, %.6f), drawing a chord", va, vb)
                out.append(SamplePoint(pb.x, pb.y, vb, math.sqrt(_dist_sq(pa, pb))))
                continue
            vm, pm = mid
            d1_sq = _dist_sq(pa, pm)
            d2_sq = _dist_sq(pm, pb)
            if depth >= self.max_recursion:
                log.debug("recursion limit reached at depth %d", depth)
                out.append(SamplePoint(pm.x, pm.y, vm, math.sqrt(d1_sq)))
                out.append(SamplePoint(pb.x, pb.y, vb, math.sqrt(d2_sq)))
                continue
            # second half first so the first half pops first
            if d2_sq <= self.threshold_sq:
                stack.append(("pt", SamplePoint(pb.x, pb.y, vb, math.sqrt(d2_sq))))
            else:
                stack.append(("seg", (vm, pm), (vb, pb), depth + 1))
            if d1_sq <= self.threshold_sq:
                stack.append(("pt", SamplePoint(pm.x, pm.y, vm, math.sqrt(d1_sq))))
            else:
                stack.append(("seg", (va, pa), (vm, pm), depth + 1))


def _dist_sq(a: Point, b: Point) -> float:
    dx = b.x - a.x
    dy = b.y - a.y
    return dx * dx + dy * dy
