"""Heightmap triangulation and model transforms."""

from reliefstl.mesh.builder import (
    HeightmapBuilder,
    build_model,
    build_model_from_file,
    build_model_from_int8,
    build_model_from_uint8,
)
from reliefstl.mesh.config import BuildConfig, FloorMode, facet_count
from reliefstl.mesh.grid import HeightGrid, Origin
from reliefstl.mesh.transform import Axis, rotate, rotate_points, scale
from reliefstl.mesh.triangulate import triangulate

__all__ = [
    "HeightmapBuilder",
    "build_model",
    "build_model_from_file",
    "build_model_from_int8",
    "build_model_from_uint8",
    "BuildConfig",
    "FloorMode",
    "facet_count",
    "HeightGrid",
    "Origin",
    "Axis",
    "rotate",
    "rotate_points",
    "scale",
    "triangulate",
]
