"""Shared fixtures for reliefstl tests."""

import numpy as np
import pytest

from reliefstl.geometry import FACET_DTYPE, Model


def signed_volume(model: Model) -> float:
    """Volume enclosed by a closed, outward-wound model."""
    v = model.vertices.astype(np.float64)
    return float(np.einsum("ij,ij->i", v[:, 0], np.cross(v[:, 1], v[:, 2])).sum() / 6.0)


def directed_edges(model: Model) -> dict:
    """Count directed edges keyed by rounded vertex positions."""
    counts = {}
    for tri in model.vertices.astype(np.float64):
        keys = [tuple(np.round(p, 5)) for p in tri]
        for a, b in ((0, 1), (1, 2), (2, 0)):
            edge = (keys[a], keys[b])
            counts[edge] = counts.get(edge, 0) + 1
    return counts


# ============== Fixtures ==============

@pytest.fixture
def hill_samples():
    """5 x 4 grid of integer heights, minimum 3 at (row 3, col 0)."""
    return np.array(
        [
            [10, 12, 15, 12, 10],
            [11, 20, 30, 21, 9],
            [8, 18, 25, 17, 6],
            [3, 7, 9, 8, 5],
        ],
        dtype=np.float64,
    )


@pytest.fixture
def random_model():
    """Model with random geometry and attribute fields."""
    rng = np.random.default_rng(42)
    facets = np.zeros(7, dtype=FACET_DTYPE)
    facets["normal"] = rng.normal(size=(7, 3))
    facets["vertices"] = rng.uniform(-100, 100, size=(7, 3, 3))
    facets["attr"] = rng.integers(0, 2**16, size=7)
    header = b"reliefstl test header".ljust(80, b"-")
    return Model(header=header, facets=facets)


@pytest.fixture
def unit_facet_model():
    """One facet with vertices on the axes and normal (1, 0, 0)."""
    facets = np.zeros(1, dtype=FACET_DTYPE)
    facets["normal"] = [1.0, 0.0, 0.0]
    facets["vertices"] = [[[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]]]
    return Model(facets=facets)
