"""Readers for binary STL models and raw heightmap files."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from reliefstl.exceptions import (
    InvalidArgumentError,
    ModelIOError,
    ModelMemoryError,
    ReliefError,
    TruncatedInputError,
    UnsupportedFormatError,
)
from reliefstl.geometry.model import FACET_DTYPE, HEADER_SIZE, Model
from reliefstl.io.stl_format import (
    COUNT_FORMAT,
    COUNT_SIZE,
    FACET_SIZE,
    PREAMBLE_SIZE,
    is_ascii_header,
)

logger = logging.getLogger(__name__)


def _decode(data: bytes | bytearray | memoryview) -> Model:
    view = memoryview(data).cast("B")

    if len(view) < HEADER_SIZE:
        raise TruncatedInputError(
            f"Header needs {HEADER_SIZE} bytes, got {len(view)}"
        )
    header = bytes(view[:HEADER_SIZE])

    if is_ascii_header(header):
        raise UnsupportedFormatError("ASCII STL is not supported")

    if len(view) < PREAMBLE_SIZE:
        raise TruncatedInputError(
            f"Facet count needs {COUNT_SIZE} bytes, "
            f"got {len(view) - HEADER_SIZE}"
        )
    (count,) = COUNT_FORMAT.unpack_from(view, HEADER_SIZE)

    available = len(view) - PREAMBLE_SIZE
    if available < count * FACET_SIZE:
        raise TruncatedInputError(
            f"{count} facets need {count * FACET_SIZE} bytes, "
            f"got {available} (input ends inside facet "
            f"{available // FACET_SIZE + 1})"
        )

    model = Model.empty(count, header=header)
    model.facets[:] = np.frombuffer(
        view, dtype=FACET_DTYPE, count=count, offset=PREAMBLE_SIZE
    )
    return model


def decode_model(
    data: bytes | bytearray | memoryview,
    log: logging.Logger | None = None,
) -> Model:
    """Decode a binary STL byte buffer into a Model.

    The returned model owns copies of the decoded values and holds no
    reference into ``data``. Bytes after the last facet are ignored.

    Args:
        data: Complete binary STL contents.
        log: Logger for this call. Defaults to the module logger.

    Returns:
        Decoded Model.

    Raises:
        InvalidArgumentError: If data is None.
        UnsupportedFormatError: If the header starts with ``solid``.
        TruncatedInputError: If a field extends past the end of data.
        ModelMemoryError: If the facet array cannot be allocated.
    """
    log = log or logger
    try:
        if data is None:
            raise InvalidArgumentError("data must not be None")
        model = _decode(data)
    except ReliefError as e:
        log.error("STL decode failed: %s", e)
        raise

    log.debug("Decoded %d facets", len(model))
    return model


def load_model(path: str | Path, log: logging.Logger | None = None) -> Model:
    """Load a binary STL file.

    Args:
        path: Path to the STL file.
        log: Logger for this call. Defaults to the module logger.

    Returns:
        Decoded Model.

    Raises:
        ModelIOError: If the file cannot be opened or read.
        UnsupportedFormatError: If the file is ASCII STL.
        TruncatedInputError: If the file is shorter than its facet count implies.

    Example:
        >>> from reliefstl.io import load_model
        >>> model = load_model("terrain.stl")
    """
    log = log or logger
    if path is None:
        raise InvalidArgumentError("path must not be None")
    path = Path(path)

    try:
        with open(path, "rb") as f:
            data = f.read()
    except MemoryError as e:
        log.error("Cannot buffer %s: %s", path, e)
        raise ModelMemoryError(f"Cannot buffer STL file {path}") from e
    except OSError as e:
        log.error("Cannot read %s: %s", path, e)
        raise ModelIOError(f"Failed to read STL file {path}: {e}") from e

    model = decode_model(data, log=log)
    log.info("Loaded %d facets from %s", len(model), path)
    return model


def read_raw_heightmap(
    path: str | Path,
    cols: int,
    rows: int,
    log: logging.Logger | None = None,
) -> np.ndarray:
    """Read a headerless heightmap of cols * rows unsigned bytes, row-major.

    Extra bytes after cols * rows are ignored.

    Args:
        path: Path to the raw file.
        cols: Number of columns.
        rows: Number of rows.
        log: Logger for this call. Defaults to the module logger.

    Returns:
        uint8 array of shape (rows, cols).

    Raises:
        InvalidArgumentError: If path is None or cols/rows are not positive.
        ModelIOError: If the file cannot be opened or holds too few bytes.
        ModelMemoryError: If the sample buffer cannot be allocated.
    """
    log = log or logger
    try:
        if path is None:
            raise InvalidArgumentError("path must not be None")
        if cols <= 0 or rows <= 0:
            raise InvalidArgumentError(
                f"cols and rows must be positive, got cols={cols}, rows={rows}"
            )
        path = Path(path)
        size = cols * rows

        try:
            with open(path, "rb") as f:
                data = f.read(size)
        except MemoryError as e:
            raise ModelMemoryError(
                f"Cannot allocate {size} heightmap samples"
            ) from e
        except OSError as e:
            raise ModelIOError(f"Failed to read heightmap {path}: {e}") from e

        if len(data) != size:
            raise ModelIOError(
                f"Heightmap {path} holds {len(data)} bytes, "
                f"expected {size} for {cols}x{rows}"
            )
    except ReliefError as e:
        log.error("Heightmap read failed: %s", e)
        raise

    log.debug("Read %dx%d heightmap from %s", cols, rows, path)
    return np.frombuffer(data, dtype=np.uint8).reshape(rows, cols).copy()
