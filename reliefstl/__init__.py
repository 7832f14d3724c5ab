"""reliefstl - heightmaps to closed binary STL solids.

Triangulates a rectangular grid of elevation samples into a watertight
solid (top surface, floor cap and four side walls) and reads/writes it as
binary STL, with in-place rotation and scaling.

Example:
    >>> import numpy as np
    >>> from reliefstl import HeightmapBuilder, rotate
    >>> model = (
    ...     HeightmapBuilder()
    ...     .set_samples(np.random.rand(64, 64) * 255, origin="top_left")
    ...     .set_vertical_scale(25)
    ...     .set_base_height(5.0)
    ...     .build()
    ... )
    >>> rotate("z", 90, model)
    >>> from reliefstl.io import save_model
    >>> save_model(model, "terrain.stl")
"""

import logging

from reliefstl.exceptions import (
    ConflictError,
    InvalidArgumentError,
    MeshGenerationError,
    ModelIOError,
    ModelMemoryError,
    ReliefError,
    TruncatedInputError,
    UnsupportedFormatError,
)
from reliefstl.geometry import Facet, Model, Triplet
from reliefstl.mesh import (
    Axis,
    BuildConfig,
    FloorMode,
    HeightGrid,
    HeightmapBuilder,
    Origin,
    build_model,
    build_model_from_file,
    build_model_from_int8,
    build_model_from_uint8,
    facet_count,
    rotate,
    scale,
)

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Main API
    "HeightmapBuilder",
    "BuildConfig",
    "FloorMode",
    "HeightGrid",
    "Origin",
    "build_model",
    "build_model_from_file",
    "build_model_from_int8",
    "build_model_from_uint8",
    "facet_count",
    # Data model
    "Model",
    "Facet",
    "Triplet",
    # Transforms
    "Axis",
    "rotate",
    "scale",
    # Exceptions
    "ReliefError",
    "InvalidArgumentError",
    "ModelIOError",
    "ModelMemoryError",
    "UnsupportedFormatError",
    "TruncatedInputError",
    "ConflictError",
    "MeshGenerationError",
]
