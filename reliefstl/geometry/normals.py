"""Facet normal derivation."""

from __future__ import annotations

import numpy as np


def compute_normals(vertices: np.ndarray) -> np.ndarray:
    """Compute unit normals for triangles given in winding order.

    For a triangle (a, b, c) the normal is normalize((b - a) x (c - a)).
    Degenerate triangles (zero-length cross product) get the zero vector;
    they are not corrected.

    Args:
        vertices: Triangle vertices, shape (n, 3, 3).

    Returns:
        Normals in double precision, shape (n, 3).
    """
    v = np.asarray(vertices, dtype=np.float64)
    if v.ndim != 3 or v.shape[1:] != (3, 3):
        raise ValueError("vertices must have shape (n, 3, 3)")

    cross = np.cross(v[:, 1] - v[:, 0], v[:, 2] - v[:, 0])
    length = np.linalg.norm(cross, axis=1, keepdims=True)

    normals = np.zeros_like(cross)
    np.divide(cross, length, out=normals, where=length != 0)
    return normals


def facet_normal(a, b, c) -> np.ndarray:
    """Normal of a single triangle (a, b, c)."""
    return compute_normals(np.array([[a, b, c]], dtype=np.float64))[0]
