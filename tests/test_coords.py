# tests/test_coords.py
import math

import numpy as np
import pytest

from raster_proj.coords import (
    UNIT_SCREEN,
    CoordTransform,
    GeoCoord,
    GeoRect,
    Rectangle,
)


def test_rectangle_normalized_orders_corners():
    r = Rectangle(2.0, 3.0, -1.0, -4.0).normalized()
    assert (r.x1, r.y1, r.x2, r.y2) == (-1.0, -4.0, 2.0, 3.0)
    assert r.width == 3.0
    assert r.height == 7.0
    assert r.contains(0.0, 0.0)
    assert not r.contains(2.5, 0.0)


class TestGeoRectNormalization:
    def test_shifts_into_principal_interval(self):
        r = GeoRect(4.0, -0.1, 5.0, 0.1).normalized()
        assert r.lam1 == pytest.approx(4.0 - 2.0 * math.pi)
        assert r.lam2 == pytest.approx(5.0 - 2.0 * math.pi)
        assert (r.phi1, r.phi2) == (-0.1, 0.1)

    def test_wider_than_a_turn_becomes_full_circle(self):
        r = GeoRect(-1.0, 0.0, 6.0, 0.5).normalized()
        assert (r.lam1, r.lam2) == (-math.pi, math.pi)
        assert r.is_full_circle

    def test_is_idempotent(self, rng):
        for lam1, width in zip(rng.uniform(-20.0, 20.0, 300).tolist(),
                               rng.uniform(0.0, 2.0 * math.pi, 300).tolist()):
            once = GeoRect(lam1, -0.2, lam1 + width, 0.3).normalized()
            assert -math.pi <= once.lam1 < math.pi
            assert once.lam2 - once.lam1 == pytest.approx(width, abs=1e-9)
            assert once.normalized() == once


def test_georect_contains_is_periodic():
    r = GeoRect(3.0, -0.5, 3.5, 0.5)
    assert r.contains(GeoCoord(-3.0, 0.0))      # -3.0 + 2*pi = 3.28
    assert r.contains(GeoCoord(3.2, 0.5))
    assert not r.contains(GeoCoord(0.0, 0.0))
    assert not r.contains(GeoCoord(3.2, 0.6))
    assert GeoRect.full_sphere().contains(GeoCoord(1.0, -math.pi / 2))


def test_coord_transform_maps_view_onto_unit_screen():
    t = CoordTransform(Rectangle(-2.0, 0.0, 2.0, 1.0), UNIT_SCREEN)
    assert t.forward_point(-2.0, 0.0) == pytest.approx((-1.0, -1.0))
    assert t.forward_point(2.0, 1.0) == pytest.approx((1.0, 1.0))
    assert t.forward_point(0.0, 0.5) == pytest.approx((0.0, 0.0))
    assert (t.scale_x, t.scale_y) == (0.5, 2.0)

    pts = np.array([[-2.0, 0.0], [1.0, 0.25], [2.0, 1.0]])
    out = t.forward_points(pts)
    for (x, y), row in zip(pts.tolist(), out.tolist()):
        assert row == pytest.approx(list(t.forward_point(x, y)))


def test_rectangle_translated():
    r = Rectangle(-1.0, 0.25, 1.0, 0.75).translated(0.5, -1.0)
    assert (r.x1, r.y1, r.x2, r.y2) == pytest.approx((-0.5, -0.75, 1.5, -0.25))
