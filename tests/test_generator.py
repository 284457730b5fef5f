# tests/test_generator.py
import math

import numpy as np
import pytest

from raster_proj.coords import GeoRect, Rectangle
from raster_proj.graticule.generator import GraticuleGenerator
from raster_proj.projection.aeqd import AeqdProjection
from raster_proj.projection.tmerc import TmercProjection


@pytest.fixture
def generator():
    return GraticuleGenerator(AeqdProjection(0.0, 0.0))


def test_meridians_over_the_whole_sphere(generator):
    segs = generator.meridian_segments(GeoRect.full_sphere(), 30.0)
    lams = sorted({round(lam, 9) for lam, _, _ in segs})
    assert len(lams) == 12
    assert len(segs) == 24
    # split at the equator, clipped to the latitude limit
    assert {(round(a, 9), round(b, 9)) for _, a, b in segs} == {
        (round(-math.radians(80.0), 9), 0.0), (0.0, round(math.radians(80.0), 9))}


def test_meridians_are_split_at_the_centre_mirror():
    g = GraticuleGenerator(AeqdProjection(0.0, 0.4))
    segs = g.meridian_segments(GeoRect(0.1, -1.0, 0.6, 1.0), 10.0)
    assert sorted({lam for lam, _, _ in segs}) == pytest.approx(
        [math.radians(10.0 * k) for k in range(1, 4)])
    assert len(segs) == 3 * 3


def test_parallels_over_the_whole_sphere(generator):
    segs = generator.parallel_segments(GeoRect.full_sphere(), 30.0)
    assert len(segs) == 5
    assert all((a, b) == (-math.pi, math.pi) for _, a, b in segs)


def test_parallels_are_split_opposite_the_centre():
    g = GraticuleGenerator(AeqdProjection(0.0, 0.0))
    segs = g.parallel_segments(GeoRect(2.5, 0.1, 4.0, 0.4), 10.0)
    assert {(a, b) for _, a, b in segs} == {(2.5, math.pi), (math.pi, 4.0)}


@pytest.mark.parametrize("max_vertices", [64, 4])
def test_generate_fills_the_screen(max_vertices):
    g = GraticuleGenerator(AeqdProjection(0.0, 0.0), max_vertices=max_vertices)
    polylines = g.generate(Rectangle(-1.0, -1.0, 1.0, 1.0), 30.0)
    assert polylines
    for pl in polylines:
        assert 2 <= len(pl) <= max_vertices
        assert np.all(np.abs(pl.points) <= 1.0 + 1e-6)
        assert np.all(np.diff(pl.params) >= 0.0)


def test_generate_for_a_window_across_the_cut():
    k = TmercProjection(0.4, 0.3)
    polylines = GraticuleGenerator(k).generate(Rectangle(-0.5, 1.5, 0.5, 3.0), 10.0)
    assert polylines
    for pl in polylines:
        assert np.all(np.abs(pl.points) <= 1.0 + 1e-6)


def test_parallels_stop_at_the_latitude_limit_in_both_hemispheres(generator):
    south = generator.parallel_segments(GeoRect(-math.pi, -math.pi / 2.0, math.pi, -1.2), 10.0)
    assert sorted({phi for phi, _, _ in south}) == pytest.approx(
        [math.radians(-80.0), math.radians(-70.0)])
    north = generator.parallel_segments(GeoRect(-math.pi, 1.2, math.pi, math.pi / 2.0), 10.0)
    assert sorted({phi for phi, _, _ in north}) == pytest.approx(
        [math.radians(70.0), math.radians(80.0)])


def test_y_shifts_follow_the_transverse_mercator_period():
    g = GraticuleGenerator(TmercProjection(0.4, 0.3))
    two_pi = 2.0 * math.pi
    assert g.y_shifts(Rectangle(-1.0, -2.0, 1.0, -0.5)) == [0.0]
    assert g.y_shifts(Rectangle(-1.0, -2.0 + two_pi, 1.0, -0.5 + two_pi)) == [two_pi]
    assert g.y_shifts(Rectangle(-1.0, 2.0, 1.0, 4.0)) == [0.0, two_pi]
    assert g.y_shifts(Rectangle(-1.0, -4.0, 1.0, 4.0)) == [-two_pi, 0.0, two_pi]
    assert GraticuleGenerator(AeqdProjection(0.0, 0.0)).y_shifts(
        Rectangle(-1.0, 2.0, 1.0, 4.0)) == [0.0]


def test_generate_repeats_one_period_up():
    g = GraticuleGenerator(TmercProjection(0.4, 0.3))
    base = g.generate(Rectangle(-1.0, -2.0, 1.0, -0.5), 10.0)
    two_pi = 2.0 * math.pi
    shifted = g.generate(Rectangle(-1.0, -2.0 + two_pi, 1.0, -0.5 + two_pi), 10.0)
    assert base
    assert len(shifted) == len(base)
    for a, b in zip(base, shifted):
        np.testing.assert_allclose(b.points, a.points, atol=1e-5)


def test_generate_for_a_window_straddling_the_period_seam():
    g = GraticuleGenerator(TmercProjection(0.4, 0.3))
    polylines = g.generate(Rectangle(-1.0, 2.0, 1.0, 4.0), 10.0)
    assert polylines
    # y = pi lands at screen y = pi - 3; curves must continue above it
    assert max(float(pl.points[:, 1].max()) for pl in polylines) > 0.2
    for pl in polylines:
        assert np.all(np.abs(pl.points) <= 1.0 + 1e-6)


@pytest.mark.parametrize("view", [
    Rectangle(0.2, -1.0, 0.2, 1.0),
    Rectangle(-1.0, 0.5, 1.0, 0.5),
    Rectangle(0.3, 0.3, 0.3, 0.3),
])
def test_generate_for_a_zero_area_view_is_empty(generator, view):
    assert generator.generate(view, 30.0) == []
