"""Heightmap triangulation: top surface, floor cap and side walls.

Every function returning triangles yields an array of shape (n, 3, 3) in
double precision, vertices in winding order. Coordinates follow the grid:
x = col * units_per_pixel, y = row * units_per_pixel, with row 0 at
minimum Y.

Triangle order is fixed so output is reproducible:

1. top surface, row by row, two triangles per cell
2. floor cap
3. side walls at row 0, row rows-1, col 0, col cols-1
"""

from __future__ import annotations

import logging

import numpy as np

from reliefstl.exceptions import MeshGenerationError
from reliefstl.geometry.model import Model
from reliefstl.geometry.normals import compute_normals
from reliefstl.mesh.config import BuildConfig, FloorMode
from reliefstl.mesh.grid import HeightGrid

logger = logging.getLogger(__name__)


def _points(n: int, x, y, z) -> np.ndarray:
    """Stack coordinate components (scalars or length-n arrays) to (n, 3)."""
    out = np.empty((n, 3), dtype=np.float64)
    out[:, 0] = x
    out[:, 1] = y
    out[:, 2] = z
    return out


def _pairs(first: np.ndarray, second: np.ndarray) -> np.ndarray:
    """Interleave two (n, 3, 3) triangle arrays as first[0], second[0], ..."""
    return np.stack([first, second], axis=1).reshape(-1, 3, 3)


def top_surface_triangles(top_z: np.ndarray, units_per_pixel: float) -> np.ndarray:
    """Triangulate the top surface.

    Each cell (r, c) becomes two triangles split along the diagonal from
    (r, c+1) to (r+1, c).

    Args:
        top_z: Top-surface heights, shape (rows, cols), row 0 at minimum Y.
        units_per_pixel: Planar grid spacing.
    """
    rows, cols = top_z.shape
    x = np.arange(cols, dtype=np.float64) * units_per_pixel
    y = np.arange(rows, dtype=np.float64) * units_per_pixel
    xx, yy = np.meshgrid(x, y)
    grid = np.stack([xx, yy, top_z], axis=-1)

    p00 = grid[:-1, :-1]
    p01 = grid[:-1, 1:]
    p10 = grid[1:, :-1]
    p11 = grid[1:, 1:]

    first = np.stack([p00, p01, p10], axis=-2)
    second = np.stack([p01, p11, p10], axis=-2)
    return np.stack([first, second], axis=2).reshape(-1, 3, 3)


def fan_floor_triangles(
    cols: int,
    rows: int,
    units_per_pixel: float,
    floor_z: float,
) -> np.ndarray:
    """Close the underside with a fan around the grid centre.

    The centre uses integer division on (cols-1) and (rows-1), so for even
    spans it sits on a grid node and for odd spans just below the middle.
    Left and right border triangles come first (interleaved per row), then
    row-0 and row-last border triangles (interleaved per column).
    """
    u = units_per_pixel
    cx = ((cols - 1) // 2) * u
    cy = ((rows - 1) // 2) * u
    x_max = (cols - 1) * u
    y_max = (rows - 1) * u

    n = rows - 1
    y0 = np.arange(n, dtype=np.float64) * u
    y1 = np.arange(1, rows, dtype=np.float64) * u
    centre = _points(n, cx, cy, floor_z)
    left = np.stack(
        [_points(n, 0.0, y0, floor_z), _points(n, 0.0, y1, floor_z), centre],
        axis=1,
    )
    right = np.stack(
        [_points(n, x_max, y1, floor_z), _points(n, x_max, y0, floor_z), centre],
        axis=1,
    )

    n = cols - 1
    x0 = np.arange(n, dtype=np.float64) * u
    x1 = np.arange(1, cols, dtype=np.float64) * u
    centre = _points(n, cx, cy, floor_z)
    near = np.stack(
        [_points(n, x1, 0.0, floor_z), _points(n, x0, 0.0, floor_z), centre],
        axis=1,
    )
    far = np.stack(
        [_points(n, x0, y_max, floor_z), _points(n, x1, y_max, floor_z), centre],
        axis=1,
    )

    return np.concatenate([_pairs(left, right), _pairs(near, far)])


def grid_floor_triangles(
    cols: int,
    rows: int,
    units_per_pixel: float,
    floor_z: float,
) -> np.ndarray:
    """Legacy floor: the full grid duplicated at floor_z, column by column."""
    x = np.arange(cols, dtype=np.float64) * units_per_pixel
    y = np.arange(rows, dtype=np.float64) * units_per_pixel
    xx, yy = np.meshgrid(x, y, indexing="ij")
    grid = np.stack([xx, yy, np.full_like(xx, floor_z)], axis=-1)

    # grid[c, r]
    p00 = grid[:-1, :-1]
    p01 = grid[:-1, 1:]
    p10 = grid[1:, :-1]
    p11 = grid[1:, 1:]

    first = np.stack([p00, p01, p10], axis=-2)
    second = np.stack([p10, p01, p11], axis=-2)
    return np.stack([first, second], axis=2).reshape(-1, 3, 3)


def wall_triangles(
    top_z: np.ndarray,
    units_per_pixel: float,
    floor_z: float,
) -> np.ndarray:
    """Side walls joining the top-surface border to the floor.

    Walls are emitted for row 0, row rows-1, col 0 and col cols-1, two
    triangles per border segment, wound so the normals face outward.
    """
    rows, cols = top_z.shape
    u = units_per_pixel
    x = np.arange(cols, dtype=np.float64) * u
    y = np.arange(rows, dtype=np.float64) * u
    x_max = (cols - 1) * u
    y_max = (rows - 1) * u

    walls = []

    n = cols - 1
    for y_edge, heights, floor_middle in (
        (0.0, top_z[0], True),
        (y_max, top_z[rows - 1], False),
    ):
        top_a = _points(n, x[:-1], y_edge, heights[:-1])
        top_b = _points(n, x[1:], y_edge, heights[1:])
        low_a = _points(n, x[:-1], y_edge, floor_z)
        low_b = _points(n, x[1:], y_edge, floor_z)
        if floor_middle:
            first = np.stack([top_a, low_a, top_b], axis=1)
            second = np.stack([top_b, low_a, low_b], axis=1)
        else:
            first = np.stack([top_a, top_b, low_a], axis=1)
            second = np.stack([top_b, low_b, low_a], axis=1)
        walls.append(_pairs(first, second))

    n = rows - 1
    for x_edge, heights, floor_middle in (
        (0.0, top_z[:, 0], False),
        (x_max, top_z[:, cols - 1], True),
    ):
        top_a = _points(n, x_edge, y[:-1], heights[:-1])
        top_b = _points(n, x_edge, y[1:], heights[1:])
        low_a = _points(n, x_edge, y[:-1], floor_z)
        low_b = _points(n, x_edge, y[1:], floor_z)
        if floor_middle:
            first = np.stack([top_a, low_a, top_b], axis=1)
            second = np.stack([top_b, low_a, low_b], axis=1)
        else:
            first = np.stack([top_a, top_b, low_a], axis=1)
            second = np.stack([top_b, low_b, low_a], axis=1)
        walls.append(_pairs(first, second))

    return np.concatenate(walls)


class _FacetWriter:
    """Sequential writer into a preallocated model."""

    def __init__(self, model: Model):
        self._facets = model.facets
        self.written = 0

    def emit(self, triangles: np.ndarray) -> None:
        start = self.written
        stop = start + len(triangles)
        if stop > len(self._facets):
            raise MeshGenerationError(
                f"Triangle overflow: writing {stop} facets into a model "
                f"preallocated for {len(self._facets)}"
            )
        vertices = self._facets["vertices"]
        vertices[start:stop] = triangles
        # normals come from the stored single-precision vertices
        self._facets["normal"][start:stop] = compute_normals(vertices[start:stop])
        self.written = stop


def triangulate(
    grid: HeightGrid,
    config: BuildConfig,
    log: logging.Logger | None = None,
) -> Model:
    """Triangulate a height grid into a closed solid.

    Args:
        grid: Heightmap samples.
        config: Scale, offset, spacing and floor configuration. The grid's
            own origin decides the row flip; config.origin is not consulted.
        log: Logger for this call. Defaults to the module logger.

    Returns:
        Model preallocated to exactly config.facet_count(cols, rows) facets.

    Raises:
        MeshGenerationError: If the number of triangles written does not
            match the preallocated count.
    """
    log = log or logger
    rows, cols = grid.rows, grid.cols
    u = config.units_per_pixel

    expected = config.facet_count(cols, rows)
    model = Model.empty(expected)
    writer = _FacetWriter(model)

    top_z = config.top_z(grid.oriented())
    floor_z = config.floor_z(grid.min_value)
    log.debug(
        "Triangulating %dx%d grid: floor_z=%s, %d facets",
        cols, rows, floor_z, expected,
    )

    writer.emit(top_surface_triangles(top_z, u))
    if config.floor_mode is FloorMode.FAN:
        writer.emit(fan_floor_triangles(cols, rows, u, floor_z))
    else:
        writer.emit(grid_floor_triangles(cols, rows, u, floor_z))
    writer.emit(wall_triangles(top_z, u, floor_z))

    if writer.written != expected:
        raise MeshGenerationError(
            f"Wrote {writer.written} facets, expected {expected}"
        )
    return model
