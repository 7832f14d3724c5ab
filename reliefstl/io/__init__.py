"""I/O utilities for binary STL models and raw heightmaps."""

from reliefstl.io.dump import format_model, print_model
from reliefstl.io.readers import decode_model, load_model, read_raw_heightmap
from reliefstl.io.stl_format import (
    ASCII_PREFIX,
    COUNT_SIZE,
    FACET_SIZE,
    expected_file_size,
)
from reliefstl.io.writers import encode_model, save_model

__all__ = [
    "ASCII_PREFIX",
    "COUNT_SIZE",
    "FACET_SIZE",
    "decode_model",
    "encode_model",
    "expected_file_size",
    "format_model",
    "load_model",
    "print_model",
    "read_raw_heightmap",
    "save_model",
]
