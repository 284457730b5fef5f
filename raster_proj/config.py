#!/usr/bin/env python3
# raster_proj/config.py
"""
Config loader/saver and defaults for raster_proj.

One JSON file per user, merged over DEFAULT_CONFIG and validated on every
load or update. Out-of-range values are clamped and unusable ones fall back
to the default; a corrupt file is backed up and ignored.

Usage:
    from raster_proj.config import Config
    cfg = Config.load()                 # ~/.config/raster_proj/raster_proj.json or OS-specific
    family = cfg["projection"]["family"]
    cfg["graticule"]["span_deg"] = 15.0
    cfg.save()
"""

from __future__ import annotations

import copy
import json
import logging
import math
import os
import platform
import shutil
import tempfile
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

log = logging.getLogger(__name__)

# ----------------------------
# Defaults
# ----------------------------

DEFAULT_CONFIG: Dict[str, Any] = {
    "projection": {
        "family": "aeqd",                 # aeqd | laea | tmerc
        "center_lon_deg": 0.0,
        "center_lat_deg": 0.0,
        "div_n": 180,                     # bins per axis; larger = tighter bounds
    },
    "bbox": {
        "axis_epsilon": 1.0e-7,           # strip around x = 0 skipped by the split walk
    },
    "graticule": {
        "span_deg": 20.0,
        "init_div_num": 8,
        "threshold": math.pi / 8.0,       # max chord in projected units
        "max_recursion": 8,
        "domain_rate": 0.9,               # fraction of the domain radius accepted
        "far_away_factor": math.pi / 4.0,     # L1 step, projected units, that breaks a run
        "max_vertices": 64,
        "lat_limit_deg": 80.0,
    },
    "preview": {
        "width_chars": 80,
        "height_chars": 24,
        "invert": False,
    },
    "logging": {
        "level": "INFO",
        "file": None,                     # path or None
        "rotate_bytes": 5 * 1024 * 1024,
        "rotate_keep": 3,
    },
}

FAMILIES = ("aeqd", "laea", "tmerc")

# ----------------------------
# Helpers
# ----------------------------

def _os_config_home() -> str:
    """Directory holding raster_proj.json on this OS."""
    if platform.system() == "Windows":
        base = os.environ.get("APPDATA") or os.path.expanduser("~\\AppData\\Roaming")
        return os.path.join(base, "RasterProj")
    if platform.system() == "Darwin":
        return os.path.join(os.path.expanduser("~/Library/Application Support"), "RasterProj")
    return os.path.join(os.path.expanduser("~/.config"), "raster_proj")

def _default_config_path() -> str:
    """RASTER_PROJ_CONFIG if set, else raster_proj.json in the OS config dir."""
    env = os.environ.get("RASTER_PROJ_CONFIG")
    if env:
        return os.path.expanduser(env)
    return os.path.join(_os_config_home(), "raster_proj.json")

def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of a with b merged in recursively; b wins on conflicts."""
    out = dict(a)
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out

def _atomic_write_json(path: str, data: Dict[str, Any]) -> None:
    folder = os.path.dirname(path) or "."
    os.makedirs(folder, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=".tmp_cfg_", dir=folder)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)
            f.write("\n")
        if platform.system() == "Windows" and os.path.exists(path):
            os.remove(path)
        os.replace(tmp, path)
    except Exception:
        # Clean temp on error
        try:
            os.remove(tmp)
        except OSError:
            pass
        raise

def _coerce_num(v: Any, default: float, minmax: Optional[Tuple[float, float]] = None) -> float:
    try:
        x = float(v)
    except (TypeError, ValueError):
        return float(default)
    if math.isnan(x):
        return float(default)
    if minmax:
        lo, hi = minmax
        x = min(max(x, lo), hi)
    return x

def _coerce_int(v: Any, default: int, minmax: Optional[Tuple[int, int]] = None) -> int:
    try:
        x = int(v)
    except (TypeError, ValueError):
        return int(default)
    if minmax:
        lo, hi = minmax
        x = min(max(x, lo), hi)
    return x

def _coerce_bool(v: Any, default: bool) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("1", "true", "yes", "on"): return True
        if s in ("0", "false", "no", "off"): return False
    return default

# ----------------------------
# Validation
# ----------------------------

def _validate(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Merge cfg over the defaults and coerce every known key."""
    c = _deep_merge(copy.deepcopy(DEFAULT_CONFIG), copy.deepcopy(cfg or {}))
    d = DEFAULT_CONFIG

    # projection
    p = c["projection"]
    fam = str(p.get("family") or "").lower()
    p["family"] = fam if fam in FAMILIES else d["projection"]["family"]
    p["center_lon_deg"] = _coerce_num(p.get("center_lon_deg"), 0.0, (-180.0, 180.0))
    p["center_lat_deg"] = _coerce_num(p.get("center_lat_deg"), 0.0, (-90.0, 90.0))
    p["div_n"] = _coerce_int(p.get("div_n"), d["projection"]["div_n"], (1, 100000))

    # bbox
    b = c["bbox"]
    b["axis_epsilon"] = _coerce_num(b.get("axis_epsilon"), d["bbox"]["axis_epsilon"], (0.0, 0.1))

    # graticule
    g = c["graticule"]
    dg = d["graticule"]
    g["span_deg"]        = _coerce_num(g.get("span_deg"), dg["span_deg"], (0.1, 90.0))
    g["init_div_num"]    = _coerce_int(g.get("init_div_num"), dg["init_div_num"], (1, 1024))
    g["threshold"]       = _coerce_num(g.get("threshold"), dg["threshold"], (1e-6, 10.0))
    g["max_recursion"]   = _coerce_int(g.get("max_recursion"), dg["max_recursion"], (0, 32))
    g["domain_rate"]     = _coerce_num(g.get("domain_rate"), dg["domain_rate"], (0.01, 1.0))
    g["far_away_factor"] = _coerce_num(g.get("far_away_factor"), dg["far_away_factor"], (1e-3, 100.0))
    g["max_vertices"]    = _coerce_int(g.get("max_vertices"), dg["max_vertices"], (2, 1 << 20))
    g["lat_limit_deg"]   = _coerce_num(g.get("lat_limit_deg"), dg["lat_limit_deg"], (0.0, 90.0))

    # preview
    pv = c["preview"]
    pv["width_chars"]  = _coerce_int(pv.get("width_chars"), 80, (10, 1000))
    pv["height_chars"] = _coerce_int(pv.get("height_chars"), 24, (5, 500))
    pv["invert"] = _coerce_bool(pv.get("invert"), d["preview"]["invert"])

    # logging
    lg = c["logging"]
    level = str(lg.get("level") or "").upper()
    lg["level"] = level if level in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET") \
        else d["logging"]["level"]
    lf = lg.get("file")
    lg["file"] = str(lf) if lf else None
    lg["rotate_bytes"] = _coerce_int(lg.get("rotate_bytes"), d["logging"]["rotate_bytes"], (256 * 1024, 50 * 1024 * 1024))
    lg["rotate_keep"]  = _coerce_int(lg.get("rotate_keep"), d["logging"]["rotate_keep"], (0, 50))

    return c

# ----------------------------
# Public API
# ----------------------------

@dataclass
class Config:
    """Validated settings plus the file they were loaded from."""
    data: Dict[str, Any] = field(default_factory=lambda: _validate({}))
    path: str = field(default_factory=_default_config_path)

    # --- Mapping-style access
    def __getitem__(self, k: str) -> Any:
        return self.data[k]

    def __setitem__(self, k: str, v: Any) -> None:
        self.data[k] = v

    def get(self, k: str, default: Any = None) -> Any:
        return self.data.get(k, default)

    # --- Ops
    @classmethod
    def load(cls, path: Optional[str] = None, create_if_missing: bool = False) -> "Config":
        cfg_path = os.path.expanduser(path) if path else _default_config_path()
        if not os.path.exists(cfg_path):
            cfg = _validate(DEFAULT_CONFIG)
            if create_if_missing:
                _atomic_write_json(cfg_path, cfg)
            return cls(cfg, cfg_path)

        return cls(_validate(_read_user_config(cfg_path)), cfg_path)

    def save(self) -> None:
        """Validate, then write the file atomically."""
        full = _validate(self.data)
        log.info("saving config %s; changed from defaults: %s",
                 self.path, sorted(_changed_entries(DEFAULT_CONFIG, full)))
        _atomic_write_json(self.path, full)
        self.data = full

    def update(self, partial: Dict[str, Any]) -> None:
        """Merge a partial nested dict, e.g. CLI overrides."""
        self.data = _validate(_deep_merge(self.data, partial))

    def changed(self) -> Dict[str, Any]:
        """Keys that differ from the defaults."""
        return _changed_entries(DEFAULT_CONFIG, self.data)


def _read_user_config(path: str) -> Dict[str, Any]:
    """Parsed file contents, or {} after backing up an unreadable file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict):
            return data
        reason = "top level is not an object"
    except (OSError, ValueError) as e:
        reason = str(e)
    backup = path + ".corrupt.bak"
    log.warning("ignoring config %s (%s); copy kept at %s", path, reason, backup)
    try:
        shutil.copyfile(path, backup)
    except OSError as e:
        log.warning("could not back up %s: %s", path, e)
    return {}


def _changed_entries(base: Dict[str, Any], cur: Dict[str, Any]) -> Dict[str, Any]:
    """Nested dict of the entries in cur that base lacks or holds differently."""
    out: Dict[str, Any] = {}
    for k in cur.keys() | base.keys():
        if k not in base:
            out[k] = cur[k]
            continue
        if k not in cur:
            continue
        vb = base[k]
        vc = cur[k]
        if isinstance(vb, dict) and isinstance(vc, dict):
            d = _changed_entries(vb, vc)
            if d:
                out[k] = d
        elif vb != vc:
            out[k] = vc
    return out

__all__ = [
    "Config",
    "DEFAULT_CONFIG",
    "FAMILIES",
    "_default_config_path",
]
