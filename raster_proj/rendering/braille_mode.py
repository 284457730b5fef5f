#!/usr/bin/env python3
# raster_proj/rendering/braille_mode.py
"""
Braille (2x4) renderer.
Encodes eight subpixels per terminal cell using Unicode Braille patterns,
which keeps thin graticule strokes visible at terminal resolution.
"""

from __future__ import annotations
from typing import List
import numpy as np
from PIL import Image

# Braille bit positions:
#  dots: 1 4
#        2 5
#        3 6
#        7 8
# Unicode = 0x2800 | bits
DOT_BITS = np.array([
    [0x01, 0x08],
    [0x02, 0x10],
    [0x04, 0x20],
    [0x40, 0x80],
], dtype=np.uint16)


class BrailleRenderer:
    name = "braille"

    def __init__(self, threshold: float = 0.5, invert: bool = False):
        self.threshold = threshold
        self.invert = invert

    def cells(self, img: Image.Image, term_w: int, term_h: int) -> np.ndarray:
        """(term_h, term_w) array of braille code points for the image."""
        w, h = term_w * 2, term_h * 4
        gray = np.asarray(img.convert("L").resize((w, h), Image.BILINEAR), dtype=np.float32) / 255.0
        if self.invert:
            gray = 1.0 - gray
        # darker than threshold sets the dot
        on = gray < self.threshold
        blocks = on.reshape(term_h, 4, term_w, 2).transpose(0, 2, 1, 3)
        bits = (blocks * DOT_BITS).sum(axis=(2, 3))
        return 0x2800 | bits

    def render(self, img: Image.Image, term_w: int, term_h: int) -> List[str]:
        if term_w <= 0 or term_h <= 0:
            return [""]
        codes = self.cells(img, term_w, term_h)
        return ["".join(chr(int(c)) for c in row) for row in codes]
