#!/usr/bin/env python3
# raster_proj/projection/factory.py
"""
Build a projection kernel from a family name.

Callers pass the resulting kernel into the resolver and the sampler
themselves; nothing here is swapped or mutated at runtime.
"""

from __future__ import annotations

from typing import Dict, Type

from raster_proj.config import Config
from raster_proj.geodesy import to_radians
from raster_proj.projection.aeqd import AeqdProjection
from raster_proj.projection.base import ProjectionKernel
from raster_proj.projection.laea import LaeaProjection
from raster_proj.projection.tmerc import TmercProjection

FAMILIES: Dict[str, Type[ProjectionKernel]] = {
    "aeqd": AeqdProjection,
    "laea": LaeaProjection,
    "tmerc": TmercProjection,
}


def create_projection(family: str, lam0: float = 0.0, phi0: float = 0.0,
                      div_n: int = 180) -> ProjectionKernel:
    """Construct the kernel for `family` centred at (lam0, phi0) radians."""
    try:
        cls = FAMILIES[family.lower()]
    except KeyError:
        raise ValueError(
            f"unknown projection family {family!r}; expected one of {sorted(FAMILIES)}"
        ) from None
    return cls(lam0, phi0, div_n)


def projection_from_config(cfg: Config) -> ProjectionKernel:
    p = cfg["projection"]
    center = to_radians(p["center_lon_deg"], p["center_lat_deg"])
    return create_projection(p["family"], center.lam, center.phi, p["div_n"])
