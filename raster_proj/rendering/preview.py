#!/usr/bin/env python3
# raster_proj/rendering/preview.py
"""
Terminal preview of graticule polylines.

Polylines arrive in unit-screen coordinates ([-1, 1] on both axes, y up)
and are stroked onto a white Pillow canvas sized for the braille grid.
"""

from __future__ import annotations

from typing import Iterable, List

import numpy as np
from PIL import Image, ImageDraw

from raster_proj.graticule.polyline import Polyline
from raster_proj.rendering.braille_mode import BrailleRenderer


def screen_to_pixels(points: np.ndarray, width_px: int, height_px: int) -> np.ndarray:
    """Map unit-screen (n, 2) points to pixel coordinates, flipping y."""
    px = np.empty_like(points, dtype=np.float64)
    px[:, 0] = (points[:, 0] + 1.0) * 0.5 * (width_px - 1)
    px[:, 1] = (1.0 - points[:, 1]) * 0.5 * (height_px - 1)
    return px


def rasterize_polylines(polylines: Iterable[Polyline], width_px: int, height_px: int,
                        line_width: int = 1) -> Image.Image:
    img = Image.new("L", (width_px, height_px), 255)
    draw = ImageDraw.Draw(img)
    for pl in polylines:
        if len(pl) < 2:
            continue
        px = screen_to_pixels(pl.points, width_px, height_px)
        draw.line([tuple(p) for p in px.tolist()], fill=0, width=line_width)
    return img


def render_preview(polylines: Iterable[Polyline], term_w: int, term_h: int,
                   invert: bool = False) -> List[str]:
    """Braille text rows, one per terminal line."""
    img = rasterize_polylines(polylines, term_w * 2, term_h * 4)
    return BrailleRenderer(invert=invert).render(img, term_w, term_h)
