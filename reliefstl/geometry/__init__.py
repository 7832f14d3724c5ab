"""Triangulated solid data model."""

from reliefstl.geometry.model import (
    FACET_DTYPE,
    HEADER_SIZE,
    Facet,
    Model,
    Triplet,
    allocate_facets,
)
from reliefstl.geometry.normals import compute_normals, facet_normal

__all__ = [
    "FACET_DTYPE",
    "HEADER_SIZE",
    "Facet",
    "Model",
    "Triplet",
    "allocate_facets",
    "compute_normals",
    "facet_normal",
]
