"""Binary STL export utilities."""

from __future__ import annotations

import logging
from pathlib import Path

from reliefstl.exceptions import (
    ConflictError,
    InvalidArgumentError,
    ModelIOError,
    ReliefError,
)
from reliefstl.geometry.model import FACET_DTYPE, Model
from reliefstl.io.stl_format import COUNT_FORMAT

logger = logging.getLogger(__name__)


def _records(model: Model) -> bytes:
    # FACET_DTYPE is already little-endian and packed, 50 bytes per record
    return model.facets.astype(FACET_DTYPE, copy=False).tobytes()


def encode_model(model: Model) -> bytes:
    """Encode a Model as binary STL bytes.

    Args:
        model: Model to encode.

    Returns:
        Header, little-endian facet count, then one 50-byte record per facet.

    Raises:
        InvalidArgumentError: If model is None.
    """
    if model is None:
        raise InvalidArgumentError("model must not be None")
    return b"".join(
        [model.header, COUNT_FORMAT.pack(len(model)), _records(model)]
    )


def _write_all(f, chunk: bytes, what: str, path: Path) -> None:
    written = f.write(chunk)
    if written != len(chunk):
        raise ModelIOError(
            f"Short write of {what} to {path}: {written} of {len(chunk)} bytes"
        )


def save_model(
    model: Model,
    path: str | Path,
    log: logging.Logger | None = None,
) -> None:
    """Save a Model to a new binary STL file.

    Existing files are never overwritten. The write is not atomic: if it
    fails partway, the partially written file is left at ``path``.

    Args:
        model: Model to save.
        path: Destination path. Must not exist yet.
        log: Logger for this call. Defaults to the module logger.

    Raises:
        InvalidArgumentError: If model or path is None.
        ConflictError: If a file already exists at path.
        ModelIOError: If the file cannot be created or a write is short.

    Example:
        >>> from reliefstl.io import save_model, load_model
        >>> save_model(model, "output/terrain.stl")
        >>> # Later:
        >>> model = load_model("output/terrain.stl")
    """
    log = log or logger
    try:
        if model is None:
            raise InvalidArgumentError("model must not be None")
        if path is None:
            raise InvalidArgumentError("path must not be None")
        path = Path(path)

        # Existence is probed by opening for reading
        try:
            with open(path, "rb"):
                pass
        except FileNotFoundError:
            pass
        except OSError:
            # exists but unreadable (e.g. permissions); still a conflict
            if path.exists():
                raise ConflictError(f"Output file {path} already exists")
        else:
            raise ConflictError(f"Output file {path} already exists")

        try:
            with open(path, "xb") as f:
                _write_all(f, model.header, "header", path)
                _write_all(f, COUNT_FORMAT.pack(len(model)), "facet count", path)
                _write_all(f, _records(model), "facets", path)
        except FileExistsError as e:
            raise ConflictError(f"Output file {path} already exists") from e
        except ModelIOError:
            raise
        except OSError as e:
            raise ModelIOError(f"Failed to write STL file {path}: {e}") from e
    except ReliefError as e:
        log.error("STL save failed: %s", e)
        raise

    log.info("Saved %d facets to %s", len(model), path)
