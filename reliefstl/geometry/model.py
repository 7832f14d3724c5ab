"""Triangulated solid data model: triplets, facets and the model container."""

from __future__ import annotations

from typing import Iterable, Iterator, NamedTuple

import numpy as np

from reliefstl.exceptions import InvalidArgumentError, ModelMemoryError

HEADER_SIZE = 80

# One record is one on-disk facet: 12 little-endian float32 + uint16 = 50 bytes.
FACET_DTYPE = np.dtype(
    [
        ("normal", "<f4", (3,)),
        ("vertices", "<f4", (3, 3)),
        ("attr", "<u2"),
    ]
)


class Triplet(NamedTuple):
    """Three single-precision components, used for positions and normals."""

    x: float
    y: float
    z: float


class Facet(NamedTuple):
    """One triangle of a solid.

    Vertex order defines the winding. ``attr`` is the STL attribute byte
    count field and is carried through unmodified.
    """

    normal: Triplet
    v0: Triplet
    v1: Triplet
    v2: Triplet
    attr: int = 0

    @classmethod
    def from_record(cls, record: np.void) -> Facet:
        """Build a Facet from one row of a FACET_DTYPE array."""
        v = record["vertices"]
        return cls(
            Triplet(*(float(n) for n in record["normal"])),
            Triplet(*(float(n) for n in v[0])),
            Triplet(*(float(n) for n in v[1])),
            Triplet(*(float(n) for n in v[2])),
            int(record["attr"]),
        )


def _normalize_header(header: bytes | bytearray | None) -> bytes:
    if header is None:
        return bytes(HEADER_SIZE)
    header = bytes(header)
    if len(header) > HEADER_SIZE:
        raise InvalidArgumentError(
            f"Header must be at most {HEADER_SIZE} bytes, got {len(header)}"
        )
    return header.ljust(HEADER_SIZE, b"\x00")


def allocate_facets(count: int) -> np.ndarray:
    """Return a zero-filled FACET_DTYPE array of exactly ``count`` records.

    Raises:
        InvalidArgumentError: If count is negative.
        ModelMemoryError: If the array cannot be allocated.
    """
    if count < 0:
        raise InvalidArgumentError(f"Facet count must be >= 0, got {count}")
    try:
        return np.zeros(count, dtype=FACET_DTYPE)
    except (MemoryError, ValueError) as e:
        raise ModelMemoryError(
            f"Cannot allocate storage for {count} facets"
        ) from e


class Model:
    """Ordered sequence of facets plus an 80-byte opaque header.

    The facets live in a numpy structured array (``FACET_DTYPE``) owned
    exclusively by the model; arrays passed to the constructor are copied.

    Args:
        header: Up to 80 bytes, zero padded. Defaults to 80 zero bytes.
        facets: Optional FACET_DTYPE array. Defaults to no facets.

    Example:
        >>> model = Model.empty(2)
        >>> model.vertices[0] = [[0, 0, 0], [1, 0, 0], [0, 1, 0]]
        >>> len(model)
        2
    """

    def __init__(
        self,
        header: bytes | bytearray | None = None,
        facets: np.ndarray | None = None,
    ):
        self._header = _normalize_header(header)

        if facets is None:
            self._facets = allocate_facets(0)
        else:
            facets = np.asarray(facets)
            if facets.dtype != FACET_DTYPE or facets.ndim != 1:
                raise InvalidArgumentError(
                    "facets must be a 1D array with FACET_DTYPE records"
                )
            self._facets = facets.copy()

    @classmethod
    def empty(cls, count: int, header: bytes | None = None) -> Model:
        """Create a model with ``count`` zero-filled facets."""
        model = cls(header=header)
        model._facets = allocate_facets(count)
        return model

    @classmethod
    def from_facets(
        cls,
        facets: Iterable[Facet],
        header: bytes | None = None,
    ) -> Model:
        """Create a model from Facet values."""
        facets = list(facets)
        model = cls.empty(len(facets), header=header)
        for i, facet in enumerate(facets):
            model._facets["normal"][i] = facet.normal
            model._facets["vertices"][i] = (facet.v0, facet.v1, facet.v2)
            model._facets["attr"][i] = facet.attr
        return model

    @property
    def header(self) -> bytes:
        """Return the 80-byte header."""
        return self._header

    @header.setter
    def header(self, value: bytes | bytearray) -> None:
        self._header = _normalize_header(value)

    @property
    def facets(self) -> np.ndarray:
        """Facet records as a FACET_DTYPE array (mutable, not a copy)."""
        return self._facets

    @property
    def facet_count(self) -> int:
        """Number of facets."""
        return len(self._facets)

    @property
    def normals(self) -> np.ndarray:
        """Normals view, shape (n, 3)."""
        return self._facets["normal"]

    @property
    def vertices(self) -> np.ndarray:
        """Vertices view, shape (n, 3, 3)."""
        return self._facets["vertices"]

    @property
    def attributes(self) -> np.ndarray:
        """Attribute field view, shape (n,)."""
        return self._facets["attr"]

    def bounds(self) -> tuple[Triplet, Triplet]:
        """Return (min corner, max corner) over all vertices.

        Raises:
            InvalidArgumentError: If the model has no facets.
        """
        if not len(self._facets):
            raise InvalidArgumentError("Model has no facets")
        points = self.vertices.reshape(-1, 3)
        lo = points.min(axis=0)
        hi = points.max(axis=0)
        return Triplet(*map(float, lo)), Triplet(*map(float, hi))

    def copy(self) -> Model:
        """Return an independent copy of the model."""
        return Model(header=self._header, facets=self._facets)

    def __len__(self) -> int:
        return len(self._facets)

    def __getitem__(self, index: int) -> Facet:
        return Facet.from_record(self._facets[index])

    def __iter__(self) -> Iterator[Facet]:
        for record in self._facets:
            yield Facet.from_record(record)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Model):
            return NotImplemented
        return (
            self._header == other._header
            and len(self._facets) == len(other._facets)
            and self._facets.tobytes() == other._facets.tobytes()
        )

    def __repr__(self) -> str:
        return f"Model(facet_count={self.facet_count})"
