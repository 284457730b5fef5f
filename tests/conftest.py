# tests/conftest.py
import math

import numpy as np
import pytest

from raster_proj.bbox import InverseBoundingBoxResolver
from raster_proj.coords import GeoRect, Rectangle
from raster_proj.projection.aeqd import AeqdProjection
from raster_proj.projection.laea import LaeaProjection
from raster_proj.projection.tmerc import TmercProjection


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    """Keep every test away from the real per-user config file."""
    monkeypatch.setenv("RASTER_PROJ_CONFIG", str(tmp_path / "raster_proj.json"))


@pytest.fixture
def rng():
    return np.random.default_rng(20240611)


@pytest.fixture(params=["aeqd", "laea", "tmerc"])
def kernel(request):
    """Each family at an off-axis centre."""
    cls = {"aeqd": AeqdProjection, "laea": LaeaProjection, "tmerc": TmercProjection}[request.param]
    return cls(0.4, 0.3)


def sample_window(rect: Rectangle, rng, n: int = 400):
    """Corners, edge midpoints and n uniform points of the window."""
    r = rect.normalized()
    pts = [
        (r.x1, r.y1), (r.x1, r.y2), (r.x2, r.y1), (r.x2, r.y2),
        (0.5 * (r.x1 + r.x2), r.y1), (0.5 * (r.x1 + r.x2), r.y2),
        (r.x1, 0.5 * (r.y1 + r.y2)), (r.x2, 0.5 * (r.y1 + r.y2)),
    ]
    xs = rng.uniform(r.x1, r.x2, n)
    ys = rng.uniform(r.y1, r.y2, n)
    pts.extend(zip(xs.tolist(), ys.tolist()))
    return pts


@pytest.fixture
def assert_sound(rng):
    """Check that every projectable point of the window lands in its bound."""
    def check(kernel, rect: Rectangle, resolver=None, n: int = 400) -> GeoRect:
        resolver = resolver or InverseBoundingBoxResolver(kernel)
        box = resolver.inverse_bounding_box(rect)
        assert -math.pi <= box.lam1 < math.pi
        assert box.lam2 - box.lam1 <= 2.0 * math.pi + 1e-12
        assert box.phi1 <= box.phi2
        hits = 0
        for x, y in sample_window(rect, rng, n):
            geo = kernel.inverse(x, y)
            if geo is None:
                continue
            hits += 1
            assert box.contains(geo, tol=1e-9), (x, y, geo, box)
        assert hits > 0
        return box
    return check
