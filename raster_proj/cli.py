#!/usr/bin/env python3
# raster_proj/cli.py
"""
Command line entry point.

    raster-proj bbox X1 Y1 X2 Y2 [--family laea --center 10 45]
    raster-proj graticule X1 Y1 X2 Y2 [--span 15 --preview]

Window coordinates are in projected units of the chosen family. Other
settings come from the JSON config (see raster_proj.config).
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from raster_proj.bbox import InverseBoundingBoxResolver
from raster_proj.config import FAMILIES, Config
from raster_proj.coords import Rectangle
from raster_proj.geodesy import to_degrees
from raster_proj.graticule.generator import GraticuleGenerator
from raster_proj.graticule.sampler import GraticuleCurveSampler
from raster_proj.logging_conf import setup_logging
from raster_proj.projection.base import ProjectionKernel
from raster_proj.projection.factory import projection_from_config
from raster_proj.rendering.preview import render_preview
from raster_proj.version import version_info

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="raster-proj",
        description="Inverse bounding boxes and graticules for spherical map projections",
    )
    parser.add_argument("--version", action="version", version=version_info())
    parser.add_argument("--config", help="path to a JSON config file")
    parser.add_argument("--log-level", help="override the configured log level")
    parser.add_argument("--family", choices=FAMILIES, help="projection family")
    parser.add_argument("--center", nargs=2, type=float, metavar=("LON", "LAT"),
                        help="projection centre in degrees")
    parser.add_argument("--div-n", type=int, help="bins per axis for the bound tables")

    sub = parser.add_subparsers(dest="command", required=True)

    p_bbox = sub.add_parser("bbox", help="geographic bounds of a projected window")
    p_bbox.add_argument("window", nargs=4, type=float, metavar=("X1", "Y1", "X2", "Y2"))

    p_grat = sub.add_parser("graticule", help="graticule polylines for a projected window")
    p_grat.add_argument("window", nargs=4, type=float, metavar=("X1", "Y1", "X2", "Y2"))
    p_grat.add_argument("--span", type=float, help="grid spacing in degrees")
    p_grat.add_argument("--preview", action="store_true", help="draw a braille preview")
    return parser


def _apply_overrides(cfg: Config, args: argparse.Namespace) -> None:
    partial: dict = {"projection": {}}
    if args.family:
        partial["projection"]["family"] = args.family
    if args.center:
        partial["projection"]["center_lon_deg"] = args.center[0]
        partial["projection"]["center_lat_deg"] = args.center[1]
    if args.div_n:
        partial["projection"]["div_n"] = args.div_n
    if getattr(args, "span", None):
        partial["graticule"] = {"span_deg": args.span}
    cfg.update(partial)


def _log_kernel(kernel: ProjectionKernel) -> None:
    lon, lat = to_degrees(kernel.center)
    log.debug("%s centred at lon %.6f lat %.6f", kernel.name, lon, lat)


def cmd_bbox(cfg: Config, rect: Rectangle) -> int:
    kernel = projection_from_config(cfg)
    _log_kernel(kernel)
    resolver = InverseBoundingBoxResolver(kernel, cfg["bbox"]["axis_epsilon"])
    lam1, phi1, lam2, phi2 = resolver.inverse_bounding_box(rect).to_degrees()
    print(f"lon {lam1:.6f} .. {lam2:.6f}  lat {phi1:.6f} .. {phi2:.6f}")
    return 0


def cmd_graticule(cfg: Config, rect: Rectangle, preview: bool) -> int:
    g = cfg["graticule"]
    kernel = projection_from_config(cfg)
    _log_kernel(kernel)
    generator = GraticuleGenerator(
        kernel,
        sampler=GraticuleCurveSampler(
            kernel, g["init_div_num"], g["threshold"], g["max_recursion"], g["domain_rate"]),
        resolver=InverseBoundingBoxResolver(kernel, cfg["bbox"]["axis_epsilon"]),
        far_away_factor=g["far_away_factor"],
        max_vertices=g["max_vertices"],
        lat_limit_deg=g["lat_limit_deg"],
    )
    polylines = generator.generate(rect, g["span_deg"])
    vertices = sum(len(p) for p in polylines)
    print(f"{len(polylines)} buffers, {vertices} vertices")
    if preview:
        pv = cfg["preview"]
        for row in render_preview(polylines, pv["width_chars"], pv["height_chars"], pv["invert"]):
            print(row)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = Config.load(args.config)
    setup_logging(cfg, args.log_level)
    _apply_overrides(cfg, args)
    log.debug("settings changed from defaults: %s", cfg.changed())

    rect = Rectangle(*args.window)
    if args.command == "graticule" and (rect.width == 0.0 or rect.height == 0.0):
        print("window must have a non-zero area", file=sys.stderr)
        return 2
    if args.command == "bbox":
        return cmd_bbox(cfg, rect)
    return cmd_graticule(cfg, rect, args.preview)


if __name__ == "__main__":
    raise SystemExit(main())
