"""Binary STL layout.

| field         | size      | encoding                          |
|---------------|-----------|-----------------------------------|
| header        | 80 bytes  | opaque                            |
| facet count   | 4 bytes   | little-endian uint32              |
| per facet     | 48 bytes  | 12 little-endian float32          |
|               | 2 bytes   | little-endian uint16 attribute    |

A header starting with ``solid`` marks the ASCII variant, which is not
supported.
"""

from __future__ import annotations

import struct

from reliefstl.geometry.model import FACET_DTYPE, HEADER_SIZE

COUNT_FORMAT = struct.Struct("<I")
COUNT_SIZE = COUNT_FORMAT.size
FACET_SIZE = FACET_DTYPE.itemsize
PREAMBLE_SIZE = HEADER_SIZE + COUNT_SIZE
ASCII_PREFIX = b"solid"


def expected_file_size(facet_count: int) -> int:
    """Total size in bytes of a binary STL holding facet_count facets."""
    return PREAMBLE_SIZE + FACET_SIZE * facet_count


def is_ascii_header(header: bytes) -> bool:
    """Return True if the header marks the (unsupported) ASCII variant."""
    return header[: len(ASCII_PREFIX)] == ASCII_PREFIX
