"""Human-readable model dump (write-only, never parsed back)."""

from __future__ import annotations

import sys
from typing import TextIO

from reliefstl.geometry.model import Model


def _fmt(values) -> str:
    return " ".join(f"{float(v):f}" for v in values)


def format_model(model: Model | None) -> str:
    """Format facet count, normals and vertices as text."""
    if model is None:
        return "NULL model\n"

    lines = [f"facet count: {len(model)}"]
    normals = model.normals
    vertices = model.vertices
    for i in range(len(model)):
        lines.append(f"Facet {i + 1}:")
        lines.append(f"   Norm: {_fmt(normals[i])}")
        for j in range(3):
            lines.append(f"      V{j + 1}  : {_fmt(vertices[i, j])}")
    return "\n".join(lines) + "\n"


def print_model(model: Model | None, file: TextIO | None = None) -> None:
    """Write format_model(model) to file (default: stdout)."""
    (file or sys.stdout).write(format_model(model))
