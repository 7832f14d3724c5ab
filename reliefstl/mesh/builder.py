"""High-level API for turning heightmaps into closed STL models."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from reliefstl.exceptions import InvalidArgumentError, ReliefError
from reliefstl.geometry.model import Model
from reliefstl.io.readers import read_raw_heightmap
from reliefstl.mesh.config import BuildConfig, FloorMode
from reliefstl.mesh.grid import HeightGrid, Origin
from reliefstl.mesh.triangulate import triangulate

logger = logging.getLogger(__name__)


class HeightmapBuilder:
    """High-level API for building a closed solid from a heightmap.

    Orchestrates the full workflow:
    1. Set or load heightmap samples
    2. Configure vertical scale, base height and planar spacing
    3. Triangulate top surface, floor cap and side walls

    Args:
        config: Optional initial BuildConfig. Individual setters replace
            single parameters of it.
        log: Logger used for this builder. Defaults to the module logger.

    Example:
        >>> from reliefstl import HeightmapBuilder
        >>> model = (
        ...     HeightmapBuilder()
        ...     .load_heightmap("terrain.raw", cols=375, rows=462, origin="top_left")
        ...     .set_vertical_scale(50)
        ...     .set_base_height(2.0)
        ...     .set_units_per_pixel(0.5)
        ...     .build()
        ... )
    """

    def __init__(
        self,
        config: BuildConfig | None = None,
        log: logging.Logger | None = None,
    ):
        self._config = config or BuildConfig()
        self._log = log or logger

        # Data (set via builder methods)
        self._grid: HeightGrid | None = None

        # Generated model (created during build)
        self._model: Model | None = None

    @property
    def config(self) -> BuildConfig:
        """Return the current build configuration."""
        return self._config

    @property
    def grid(self) -> HeightGrid | None:
        """Return the heightmap grid, or None if not yet set."""
        return self._grid

    @property
    def is_configured(self) -> bool:
        """Return True if samples have been provided."""
        return self._grid is not None

    def _replace(self, **changes) -> HeightmapBuilder:
        params = {
            "scale_pct": self._config.scale_pct,
            "base_height": self._config.base_height,
            "units_per_pixel": self._config.units_per_pixel,
            "origin": self._config.origin,
            "floor_mode": self._config.floor_mode,
        }
        params.update(changes)
        return self.set_config(BuildConfig(**params))

    def set_config(self, config: BuildConfig) -> HeightmapBuilder:
        """Set the build configuration directly.

        Samples already set are re-wrapped with the new config's origin.

        Args:
            config: BuildConfig object.

        Returns:
            Self for method chaining.
        """
        self._config = config
        if self._grid is not None and self._grid.origin is not config.origin:
            self._grid = self._grid.with_origin(config.origin)
        return self

    def set_vertical_scale(self, scale_pct: float) -> HeightmapBuilder:
        """Set vertical exaggeration in percent (must be > 0)."""
        return self._replace(scale_pct=scale_pct)

    def set_base_height(self, base_height: float) -> HeightmapBuilder:
        """Set the Z offset added to the top surface and subtracted at the floor."""
        return self._replace(base_height=base_height)

    def set_units_per_pixel(self, units_per_pixel: float) -> HeightmapBuilder:
        """Set planar spacing between neighbouring samples (must be > 0)."""
        return self._replace(units_per_pixel=units_per_pixel)

    def set_floor_mode(self, floor_mode: FloorMode | str) -> HeightmapBuilder:
        """Select the floor triangulation. FULL_GRID is deprecated."""
        return self._replace(floor_mode=floor_mode)

    def set_samples(
        self,
        samples,
        cols: int | None = None,
        rows: int | None = None,
        origin: Origin | str | None = None,
    ) -> HeightmapBuilder:
        """Set heightmap samples directly.

        Args:
            samples: Either a 2D array of shape (rows, cols), or a flat
                row-major buffer together with cols and rows.
            cols: Number of columns for flat input.
            rows: Number of rows for flat input.
            origin: Corner that row 0 belongs to. Defaults to config.origin.

        Returns:
            Self for method chaining.
        """
        if origin is not None:
            self._replace(origin=origin)
        origin = self._config.origin

        if cols is None and rows is None:
            self._grid = HeightGrid(samples, origin=origin)
        elif cols is None or rows is None:
            raise InvalidArgumentError("cols and rows must be given together")
        else:
            self._grid = HeightGrid.from_flat(samples, cols, rows, origin=origin)
        return self

    def load_heightmap(
        self,
        path: str | Path,
        cols: int,
        rows: int,
        origin: Origin | str | None = None,
    ) -> HeightmapBuilder:
        """Load a raw heightmap of cols * rows unsigned bytes, row-major.

        Returns:
            Self for method chaining.
        """
        samples = read_raw_heightmap(path, cols, rows, log=self._log)
        return self.set_samples(samples, origin=origin)

    def build(self) -> Model:
        """Triangulate the heightmap into a closed solid.

        Returns:
            Model with top surface, floor cap and four side walls.

        Raises:
            InvalidArgumentError: If no samples were provided.
            MeshGenerationError: If the facet accounting is inconsistent.
        """
        if self._grid is None:
            raise InvalidArgumentError(
                "Heightmap samples not set. Call set_samples() or "
                "load_heightmap() first."
            )

        try:
            model = triangulate(self._grid, self._config, log=self._log)
        except ReliefError as e:
            self._log.error("Heightmap build failed: %s", e)
            raise

        self._log.info(
            "Built %d facets from %dx%d heightmap",
            len(model), self._grid.cols, self._grid.rows,
        )
        self._model = model
        return model

    def get_build_info(self) -> dict:
        """Return information about the configuration and built model."""
        info = self._config.to_dict()

        if self._grid is not None:
            info["cols"] = self._grid.cols
            info["rows"] = self._grid.rows
            info["expected_facets"] = self._config.facet_count(
                self._grid.cols, self._grid.rows
            )

        if self._model is not None:
            info["n_facets"] = len(self._model)

        return info


def build_model(
    samples,
    origin: Origin | str,
    cols: int,
    rows: int,
    scale_pct: float,
    base_height: float,
    units_per_pixel: float,
    *,
    floor_mode: FloorMode | str = FloorMode.FAN,
    log: logging.Logger | None = None,
) -> Model:
    """Build a closed solid from a flat row-major buffer of real samples.

    Args:
        samples: cols * rows samples, row-major.
        origin: Corner that row 0 belongs to.
        cols: Number of columns (>= 2).
        rows: Number of rows (>= 2).
        scale_pct: Vertical exaggeration percentage (> 0).
        base_height: Z offset, added on top and subtracted at the floor.
        units_per_pixel: Planar spacing (> 0).
        floor_mode: Floor triangulation. Default: FloorMode.FAN.
        log: Logger for this call.

    Returns:
        The generated Model.

    Raises:
        InvalidArgumentError: On missing samples or out-of-range parameters.
    """
    log = log or logger
    try:
        if samples is None:
            raise InvalidArgumentError("samples must not be None")
        config = BuildConfig(
            scale_pct=scale_pct,
            base_height=base_height,
            units_per_pixel=units_per_pixel,
            origin=origin,
            floor_mode=floor_mode,
        )
        builder = HeightmapBuilder(config, log=log).set_samples(samples, cols, rows)
    except ReliefError as e:
        log.error("Heightmap build failed: %s", e)
        raise

    return builder.build()


def _widened(samples, dtype) -> np.ndarray:
    if samples is None:
        raise InvalidArgumentError("samples must not be None")
    if isinstance(samples, (bytes, bytearray, memoryview)):
        values = np.frombuffer(samples, dtype=dtype)
    else:
        values = np.asarray(samples)
        if values.dtype != dtype:
            values = values.astype(dtype)
    return values.astype(np.float64)


def build_model_from_uint8(
    samples,
    origin: Origin | str,
    cols: int,
    rows: int,
    scale_pct: float,
    base_height: float,
    units_per_pixel: float,
    *,
    floor_mode: FloorMode | str = FloorMode.FAN,
    log: logging.Logger | None = None,
) -> Model:
    """Same as build_model for unsigned 8-bit samples (values 0..255)."""
    return build_model(
        _widened(samples, np.uint8),
        origin, cols, rows, scale_pct, base_height, units_per_pixel,
        floor_mode=floor_mode,
        log=log,
    )


def build_model_from_int8(
    samples,
    origin: Origin | str,
    cols: int,
    rows: int,
    scale_pct: float,
    base_height: float,
    units_per_pixel: float,
    *,
    floor_mode: FloorMode | str = FloorMode.FAN,
    log: logging.Logger | None = None,
) -> Model:
    """Same as build_model for signed 8-bit samples (values -128..127)."""
    return build_model(
        _widened(samples, np.int8),
        origin, cols, rows, scale_pct, base_height, units_per_pixel,
        floor_mode=floor_mode,
        log=log,
    )


def build_model_from_file(
    path: str | Path,
    origin: Origin | str,
    cols: int,
    rows: int,
    scale_pct: float,
    base_height: float,
    units_per_pixel: float,
    *,
    floor_mode: FloorMode | str = FloorMode.FAN,
    log: logging.Logger | None = None,
) -> Model:
    """Build a solid from a raw file of cols * rows unsigned bytes.

    Raises:
        InvalidArgumentError: If path is None or parameters are out of range.
        ModelIOError: If the file cannot be opened or is too short.
        ModelMemoryError: If the sample buffer cannot be allocated.
    """
    samples = read_raw_heightmap(path, cols, rows, log=log)
    return build_model_from_uint8(
        samples,
        origin, cols, rows, scale_pct, base_height, units_per_pixel,
        floor_mode=floor_mode,
        log=log,
    )
