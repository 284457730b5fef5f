#!/usr/bin/env python3
# raster_proj/version.py
"""
Version metadata for raster_proj.
"""

__version__ = "1.0.0"
__build__ = "2026-10-17"
__license__ = "MIT"

def version_info() -> str:
    """Return human-readable version string."""
    return f"raster_proj v{__version__} (build {__build__})"
