"""Heightmap sample grid with row/column addressing."""

from __future__ import annotations

from enum import Enum

import numpy as np

from reliefstl.exceptions import InvalidArgumentError, ModelMemoryError


class Origin(Enum):
    """Which corner of the heightmap row 0 belongs to.

    STL output always places row 0 at minimum Y, so ``TOP_LEFT`` grids are
    flipped vertically before triangulation.
    """

    BOTTOM_LEFT = "bottom_left"
    TOP_LEFT = "top_left"


def _as_origin(origin: Origin | str) -> Origin:
    if isinstance(origin, Origin):
        return origin
    try:
        return Origin(str(origin).lower())
    except ValueError as e:
        raise InvalidArgumentError(
            f"Unknown origin: {origin!r}. "
            f"Supported: {', '.join(o.value for o in Origin)}"
        ) from e


class HeightGrid:
    """Dense rows x cols grid of elevation samples.

    Samples are widened to float64 with no normalisation, so 8-bit signed
    and unsigned inputs keep their raw values. The grid is read-only.

    Args:
        samples: Array of shape (rows, cols).
        origin: Corner that row 0 belongs to. Default: Origin.BOTTOM_LEFT.

    Raises:
        InvalidArgumentError: If samples is None, not 2D, or smaller than 2x2.

    Example:
        >>> grid = HeightGrid(np.zeros((3, 4)))
        >>> grid.rows, grid.cols
        (3, 4)
    """

    def __init__(
        self,
        samples: np.ndarray,
        origin: Origin | str = Origin.BOTTOM_LEFT,
    ):
        if samples is None:
            raise InvalidArgumentError("samples must not be None")

        try:
            values = np.array(samples, dtype=np.float64)
        except MemoryError as e:
            raise ModelMemoryError("Cannot allocate heightmap samples") from e
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"samples are not numeric: {e}") from e

        if values.ndim != 2:
            raise InvalidArgumentError(
                f"samples must be 2D array of shape (rows, cols), "
                f"got {values.ndim}D"
            )
        rows, cols = values.shape
        if rows < 2 or cols < 2:
            raise InvalidArgumentError(
                f"Grid must be at least 2x2, got rows={rows}, cols={cols}"
            )

        values.setflags(write=False)
        self._values = values
        self._origin = _as_origin(origin)

    @classmethod
    def from_flat(
        cls,
        samples,
        cols: int,
        rows: int,
        origin: Origin | str = Origin.BOTTOM_LEFT,
    ) -> HeightGrid:
        """Create a grid from a row-major flat buffer of cols * rows samples.

        Accepts numpy arrays, sequences and ``bytes`` (read as unsigned 8-bit).
        """
        if samples is None:
            raise InvalidArgumentError("samples must not be None")
        if cols < 2 or rows < 2:
            raise InvalidArgumentError(
                f"cols and rows must be >= 2, got cols={cols}, rows={rows}"
            )

        if isinstance(samples, (bytes, bytearray, memoryview)):
            flat = np.frombuffer(samples, dtype=np.uint8)
        else:
            flat = np.asarray(samples)

        if flat.size != cols * rows:
            raise InvalidArgumentError(
                f"Expected {cols * rows} samples for {cols}x{rows} grid, "
                f"got {flat.size}"
            )
        return cls(flat.reshape(rows, cols), origin=origin)

    @property
    def rows(self) -> int:
        """Number of rows."""
        return self._values.shape[0]

    @property
    def cols(self) -> int:
        """Number of columns."""
        return self._values.shape[1]

    @property
    def origin(self) -> Origin:
        """Corner that row 0 of the source samples belongs to."""
        return self._origin

    @property
    def values(self) -> np.ndarray:
        """Samples in source row order (read-only)."""
        return self._values

    @property
    def min_value(self) -> float:
        """Lowest raw sample in the grid, ignoring NaN samples.

        NaN only when every sample is NaN.
        """
        finite = self._values[~np.isnan(self._values)]
        if not finite.size:
            return float("nan")
        return float(finite.min())

    def with_origin(self, origin: Origin | str) -> HeightGrid:
        """Return a grid over the same samples with a different origin."""
        return HeightGrid(self._values, origin=origin)

    def oriented(self) -> np.ndarray:
        """Return samples with row 0 at minimum Y.

        For TOP_LEFT grids this is a row-reversed view, not a copy.
        """
        if self._origin is Origin.TOP_LEFT:
            return self._values[::-1]
        return self._values

    def __getitem__(self, index: tuple[int, int]) -> float:
        r, c = index
        if not (0 <= r < self.rows and 0 <= c < self.cols):
            raise IndexError(
                f"({r}, {c}) outside grid of {self.rows} rows x {self.cols} cols"
            )
        return float(self._values[r, c])

    def __repr__(self) -> str:
        return (
            f"HeightGrid(rows={self.rows}, cols={self.cols}, "
            f"origin={self._origin.name})"
        )
