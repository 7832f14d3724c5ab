"""Build configuration for heightmap triangulation."""

from __future__ import annotations

import warnings
from enum import Enum

from reliefstl.exceptions import InvalidArgumentError
from reliefstl.mesh.grid import Origin, _as_origin


class FloorMode(Enum):
    """How the underside of the solid is closed.

    FAN connects every border segment to one centre point, giving
    2(cols-1) + 2(rows-1) triangles. FULL_GRID is the legacy full-resolution
    floor with 2(cols-1)(rows-1) triangles and is deprecated.
    """

    FAN = "fan"
    FULL_GRID = "full_grid"


def _as_floor_mode(mode: FloorMode | str) -> FloorMode:
    if isinstance(mode, FloorMode):
        return mode
    try:
        return FloorMode(str(mode).lower())
    except ValueError as e:
        raise InvalidArgumentError(
            f"Unknown floor mode: {mode!r}. "
            f"Supported: {', '.join(m.value for m in FloorMode)}"
        ) from e


def facet_count(
    cols: int,
    rows: int,
    floor_mode: FloorMode | str = FloorMode.FAN,
) -> int:
    """Number of facets the builder emits for a cols x rows grid.

    Top surface 2(cols-1)(rows-1), floor (see FloorMode), and the four side
    walls 4(cols-1) + 4(rows-1).
    """
    if cols < 2 or rows < 2:
        raise InvalidArgumentError(
            f"cols and rows must be >= 2, got cols={cols}, rows={rows}"
        )
    floor_mode = _as_floor_mode(floor_mode)

    top = 2 * (cols - 1) * (rows - 1)
    if floor_mode is FloorMode.FAN:
        floor = 2 * (cols - 1) + 2 * (rows - 1)
    else:
        floor = 2 * (cols - 1) * (rows - 1)
    walls = 4 * (cols - 1) + 4 * (rows - 1)
    return top + floor + walls


class BuildConfig:
    """Parameters controlling how samples map to 3D positions.

    A sample s at grid cell (r, c) maps to
    ``(c * units_per_pixel, r * units_per_pixel, s * scale_pct/100 + base_height)``.
    The floor sits at ``min_sample * scale_pct/100 - base_height``. The
    base height is added on the top surface and subtracted on the floor.

    Args:
        scale_pct: Vertical exaggeration in percent. Must be > 0.
        base_height: Z offset, any sign.
        units_per_pixel: Planar distance between neighbouring samples. Must be > 0.
        origin: Corner that row 0 of the samples belongs to.
        floor_mode: Floor triangulation. Default: FloorMode.FAN.

    Example:
        >>> config = BuildConfig(scale_pct=50, base_height=2.0)
        >>> config.top_z(10)
        7.0
        >>> config.floor_z(0)
        -2.0
    """

    def __init__(
        self,
        scale_pct: float = 100.0,
        base_height: float = 0.0,
        units_per_pixel: float = 1.0,
        origin: Origin | str = Origin.BOTTOM_LEFT,
        floor_mode: FloorMode | str = FloorMode.FAN,
    ):
        # "not > 0" also rejects NaN
        if scale_pct is None or not scale_pct > 0:
            raise InvalidArgumentError(
                f"scale_pct must be positive, got {scale_pct}"
            )
        if units_per_pixel is None or not units_per_pixel > 0:
            raise InvalidArgumentError(
                f"units_per_pixel must be positive, got {units_per_pixel}"
            )
        if base_height is None:
            raise InvalidArgumentError("base_height must be a number")

        self._scale_pct = float(scale_pct)
        self._base_height = float(base_height)
        self._units_per_pixel = float(units_per_pixel)
        self._origin = _as_origin(origin)
        self._floor_mode = _as_floor_mode(floor_mode)

        if self._floor_mode is FloorMode.FULL_GRID:
            warnings.warn(
                "FloorMode.FULL_GRID is deprecated; use FloorMode.FAN",
                DeprecationWarning,
                stacklevel=2,
            )

    @property
    def scale_pct(self) -> float:
        """Vertical exaggeration percentage."""
        return self._scale_pct

    @property
    def base_height(self) -> float:
        """Z offset of the top surface (subtracted for the floor)."""
        return self._base_height

    @property
    def units_per_pixel(self) -> float:
        """Planar grid spacing."""
        return self._units_per_pixel

    @property
    def origin(self) -> Origin:
        """Corner that row 0 of the samples belongs to."""
        return self._origin

    @property
    def floor_mode(self) -> FloorMode:
        """Floor triangulation mode."""
        return self._floor_mode

    @property
    def z_scale(self) -> float:
        """Multiplier applied to raw samples (scale_pct / 100)."""
        return self._scale_pct / 100.0

    def top_z(self, value):
        """Top-surface Z for a raw sample (scalar or array)."""
        return value * self.z_scale + self._base_height

    def floor_z(self, min_value: float) -> float:
        """Floor Z for the lowest raw sample of a grid."""
        return min_value * self.z_scale - self._base_height

    def facet_count(self, cols: int, rows: int) -> int:
        """Number of facets a cols x rows grid produces under this config."""
        return facet_count(cols, rows, self._floor_mode)

    def to_dict(self) -> dict:
        """Return the configuration as plain values."""
        return {
            "scale_pct": self._scale_pct,
            "base_height": self._base_height,
            "units_per_pixel": self._units_per_pixel,
            "origin": self._origin.value,
            "floor_mode": self._floor_mode.value,
        }

    def __repr__(self) -> str:
        return (
            f"BuildConfig(scale_pct={self._scale_pct}, "
            f"base_height={self._base_height}, "
            f"units_per_pixel={self._units_per_pixel}, "
            f"origin={self._origin.name}, floor_mode={self._floor_mode.name})"
        )
