# tests/test_sampler.py
import math

import numpy as np
import pytest

from raster_proj.coords import CoordTransform, Rectangle
from raster_proj.graticule.polyline import clip_to_screen
from raster_proj.graticule.sampler import GraticuleCurveSampler
from raster_proj.projection.aeqd import AeqdProjection


@pytest.fixture
def aeqd():
    return AeqdProjection(0.0, 0.0)


def test_parallel_runs_from_end_to_end(kernel):
    line = GraticuleCurveSampler(kernel).create_parallel(0.3, 0.0, 0.8)
    t = line.params()
    assert t[0] == pytest.approx(0.0)
    assert t[-1] == pytest.approx(0.8)
    assert np.all(np.diff(t) > 0.0)
    assert line.c0 == 0.3


def test_every_step_is_under_the_threshold(aeqd):
    line = GraticuleCurveSampler(aeqd, threshold=0.02).create_parallel(0.3, -1.0, 1.0)
    assert line.points[0].dr == 0.0
    assert max(p.dr for p in line.points) <= 0.02


def test_dr_is_the_step_from_the_previous_sample(kernel):
    line = GraticuleCurveSampler(kernel, threshold=0.05).create_meridian(0.2, -0.6, 0.9)
    xy = line.xy()
    steps = np.hypot(*np.diff(xy, axis=0).T)
    assert [p.dr for p in line.points[1:]] == pytest.approx(steps.tolist(), abs=1e-12)
    assert line.length == pytest.approx(float(steps.sum()))


@pytest.mark.parametrize("max_recursion, expected", [(0, 17), (1, 33)])
def test_recursion_limit_caps_the_point_count(aeqd, max_recursion, expected):
    sampler = GraticuleCurveSampler(aeqd, threshold=1e-6, max_recursion=max_recursion)
    line = sampler.create_parallel(0.3, -1.0, 1.0)
    assert len(line) == expected
    assert np.all(np.diff(line.params()) > 0.0)


def test_gap_with_no_projectable_midpoint_becomes_a_chord(aeqd):
    # the meridian opposite the centre leaves the domain around the equator
    line = GraticuleCurveSampler(aeqd).create_meridian(math.pi, -1.2, 1.2)
    assert [p.t for p in line.points] == pytest.approx([-1.2, -0.9, -0.6, 0.6, 0.9, 1.2])
    assert max(p.dr for p in line.points) > 5.0

    transform = CoordTransform(Rectangle(-math.pi, -math.pi, math.pi, math.pi))
    runs = clip_to_screen(line, transform)
    assert [len(r) for r in runs] == [3, 3]


def test_curve_outside_the_domain(aeqd):
    assert GraticuleCurveSampler(aeqd).create_parallel(0.0, 3.0, 3.2) is None


def test_endpoint_is_refined_towards_the_domain_edge(aeqd):
    line = GraticuleCurveSampler(aeqd).create_parallel(0.0, 2.0, 3.1)
    edge = 0.9 * math.pi
    assert line.points[0].t == 2.0
    assert edge - 1e-3 < line.points[-1].t < edge


def test_search_endpoint_without_a_hit(aeqd):
    sampler = GraticuleCurveSampler(aeqd)
    assert sampler.search_endpoint(0.0, 3.0, 3.2, lambda c0, v: None) is None


def test_rejects_empty_initial_division(aeqd):
    with pytest.raises(ValueError):
        GraticuleCurveSampler(aeqd, init_div_num=0)
