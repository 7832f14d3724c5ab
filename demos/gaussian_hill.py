"""
Gaussian Hill STL Demo

This script demonstrates using reliefstl to turn a synthetic heightmap
into a printable binary STL block.

Usage:
    python gaussian_hill.py

The script will:
1. Generate a 120 x 80 heightmap with a Gaussian hill (0..255, top-left origin)
2. Triangulate it into a closed solid with a 3 mm base
3. Rotate it 90 degrees about Z and shrink it to half size in X/Y
4. Save the model as binary STL and load it back
"""

import logging
from pathlib import Path

import numpy as np

from reliefstl import HeightmapBuilder, rotate, scale
from reliefstl.io import expected_file_size, load_model, save_model


def make_hill(cols: int, rows: int) -> np.ndarray:
    x = np.linspace(-1.0, 1.0, cols)
    y = np.linspace(-1.0, 1.0, rows)
    xx, yy = np.meshgrid(x, y)
    return np.rint(255 * np.exp(-(xx**2 + yy**2) / 0.2)).astype(np.uint8)


def main():
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    cols, rows = 120, 80
    samples = make_hill(cols, rows)

    print("Building Gaussian hill model...")
    print(f"  Grid: {cols} x {rows}")

    builder = (
        HeightmapBuilder()
        .set_samples(samples, origin="top_left")
        .set_vertical_scale(10)
        .set_base_height(3.0)
        .set_units_per_pixel(0.5)
    )
    model = builder.build()

    rotate("z", 90, model)
    scale(50, 50, 100, model)

    lo, hi = model.bounds()
    print("\nModel generated successfully:")
    print(f"  Number of facets: {len(model)}")
    print(f"  X range: [{lo.x:.1f}, {hi.x:.1f}]")
    print(f"  Y range: [{lo.y:.1f}, {hi.y:.1f}]")
    print(f"  Z range: [{lo.z:.1f}, {hi.z:.1f}]")

    output_path = Path(__file__).parent / "gaussian_hill.stl"
    if output_path.exists():
        output_path.unlink()
    save_model(model, output_path)
    print(f"\nModel saved to: {output_path}")
    print(f"  File size: {output_path.stat().st_size} bytes "
          f"(expected {expected_file_size(len(model))})")

    assert load_model(output_path) == model

    return model


if __name__ == "__main__":
    main()
