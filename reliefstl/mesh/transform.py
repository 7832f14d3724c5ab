"""In-place geometric transforms of STL models."""

from __future__ import annotations

import math
from enum import Enum

import numpy as np

from reliefstl.exceptions import InvalidArgumentError
from reliefstl.geometry.model import Model


class Axis(Enum):
    """Principal rotation axis."""

    X = "x"
    Y = "y"
    Z = "z"


# (first, second) components rotated for each axis, and the sign applied to
# sin for the first component. Y uses the right-handed convention
# x' = x cos + z sin, z' = -x sin + z cos.
_PLANES = {
    Axis.X: (1, 2, -1.0),
    Axis.Y: (0, 2, 1.0),
    Axis.Z: (0, 1, -1.0),
}


def _as_axis(axis: Axis | str) -> Axis:
    if isinstance(axis, Axis):
        return axis
    try:
        return Axis(str(axis).lower())
    except ValueError as e:
        raise InvalidArgumentError(
            f"Unknown axis: {axis!r}. Supported: 'x', 'y', 'z'"
        ) from e


def rotate_points(
    points: np.ndarray,
    axis: Axis | str,
    degrees: float,
) -> np.ndarray:
    """Rotate points about a principal axis through the origin.

    Args:
        points: Array of shape (..., 3).
        axis: Rotation axis.
        degrees: Rotation angle in degrees.

    Returns:
        Rotated points in double precision, same shape as points.
    """
    a, b, sign = _PLANES[_as_axis(axis)]
    radians = math.radians(degrees)
    cs = math.cos(radians)
    sn = math.sin(radians)

    p = np.array(points, dtype=np.float64)
    pa = p[..., a].copy()
    pb = p[..., b].copy()
    p[..., a] = pa * cs + sign * pb * sn
    p[..., b] = -sign * pa * sn + pb * cs
    return p


def rotate(axis: Axis | str, degrees: float, model: Model) -> Model:
    """Rotate every vertex and normal of a model in place.

    Only rotation about X, Y or Z through the origin is supported.

    Args:
        axis: Rotation axis (Axis or 'x'/'y'/'z').
        degrees: Rotation angle in degrees.
        model: Model to modify.

    Returns:
        The same model, for chaining.

    Raises:
        InvalidArgumentError: If model is None or axis is unknown.

    Example:
        >>> rotate(Axis.Z, 90, model)
        >>> rotate("x", -45, model)
    """
    if model is None:
        raise InvalidArgumentError("model must not be None")
    axis = _as_axis(axis)

    facets = model.facets
    facets["normal"] = rotate_points(facets["normal"], axis, degrees)
    facets["vertices"] = rotate_points(facets["vertices"], axis, degrees)
    return model


def scale(pct_x: float, pct_y: float, pct_z: float, model: Model) -> Model:
    """Scale every vertex of a model in place by per-axis percentages.

    Normals are left untouched. After a non-uniform scale they no longer
    match the geometry; callers that need consistent normals must recompute
    them (see reliefstl.geometry.compute_normals).

    Args:
        pct_x: X scale in percent (100 = unchanged).
        pct_y: Y scale in percent.
        pct_z: Z scale in percent.
        model: Model to modify.

    Returns:
        The same model, for chaining.

    Raises:
        InvalidArgumentError: If model is None.
    """
    if model is None:
        raise InvalidArgumentError("model must not be None")

    factors = np.array([pct_x, pct_y, pct_z], dtype=np.float64) / 100.0
    vertices = model.facets["vertices"]
    vertices[...] = vertices.astype(np.float64) * factors
    return model
