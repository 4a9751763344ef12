"""
Honeycomb Demo: Lattice Geometry Toolkit

This example walks through the main objects:
- HoneycombGeometry (unit cell)
- Lattice (finite periodic lattice)
- Neighbor tables, translational sets and the k-point mesh
"""

import sys
from pathlib import Path

import numpy as np

# Add latgeo to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from latgeo.core import (
    HoneycombGeometry,
    Lattice,
    calc_neighbor_table,
    fourier_transform,
    sort_neighbor_table,
    symmetrize_pair_measurement,
    translationally_equivalent_sets,
)


def example_geometry():
    """Example 1: Unit cell of the honeycomb lattice."""
    print("="*60)
    print("Example 1: Honeycomb geometry")
    print("="*60)

    geom = HoneycombGeometry(lattice_constant=1.0)
    print(f"\n{geom}")

    print("\nHigh-symmetry points:")
    for name, k in geom.high_symmetry_points().items():
        print(f"  {name}: {k}")


def example_neighbors():
    """Example 2: Nearest-neighbor bonds on a 3x3 lattice."""
    print("\n" + "="*60)
    print("Example 2: Nearest-neighbor tables")
    print("="*60)

    lattice = Lattice(HoneycombGeometry(), L1=3, L2=3)
    print(f"\n{lattice!r}")

    # A (orbit 0) to B (orbit 1) in the same, left and lower cells
    tables = [calc_neighbor_table(lattice, 0, 1, d)
              for d in ([0, 0, 0], [-1, 0, 0], [0, -1, 0])]
    bonds = np.concatenate(tables, axis=1)
    print(f"\nNearest-neighbor bonds: {bonds.shape[1]}")

    permutation = sort_neighbor_table(bonds)
    print(f"First sorted bonds:\n{bonds[:, :6]}")
    print(f"Came from columns: {permutation[:6]}")

    vec = lattice.site_to_site_vec(int(bonds[1, 0]), int(bonds[0, 0]))
    print(f"\nBond length: {np.linalg.norm(vec):.4f} (a/sqrt(3) = {1/np.sqrt(3):.4f})")


def example_correlations():
    """Example 3: Averaging a pair measurement and transforming it."""
    print("\n" + "="*60)
    print("Example 3: Translational sets and Fourier transform")
    print("="*60)

    lattice = Lattice(HoneycombGeometry(), L1=4, L2=4)
    sets = translationally_equivalent_sets(lattice)
    print(f"\nTranslational sets: {len(sets)} (norbits^2 * ncells = "
          f"{lattice.norbits**2 * lattice.ncells})")

    # Toy correlation: decays with distance between the two sites
    values = np.zeros((lattice.nsites, lattice.nsites))
    for i in range(lattice.nsites):
        for j in range(lattice.nsites):
            values[i, j] = np.exp(-np.linalg.norm(lattice.site_to_site_vec(i, j)))

    averaged = symmetrize_pair_measurement(lattice, values)
    structure_factor = fourier_transform(lattice, averaged)
    print(f"Structure factor shape: {structure_factor.shape}")
    print(f"S_AA(Γ) = {structure_factor[0, 0, 0].real:.4f}")


if __name__ == '__main__':
    example_geometry()
    example_neighbors()
    example_correlations()
