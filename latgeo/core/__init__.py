"""
Core domain models for the latgeo package.

This module contains the fundamental abstractions:
- Geometry: infinite crystal (lattice vectors, reciprocal vectors, basis)
- Lattice: finite periodic realization with the canonical site/cell index space

Neighbor tables, translational sets and Fourier coefficients are built on
demand from a Lattice and consumed by Hamiltonian and measurement code.
"""

from .errors import LatgeoError, InvalidArgumentError, LatticeInvariantError

from .geometry import (
    Geometry,
    calc_cell_pos,
    calc_site_pos,
    cell_locations,
    monkhorst_pack_mesh,
    ChainGeometry,
    SquareGeometry,
    TriangularGeometry,
    HoneycombGeometry,
    KagomeGeometry,
    CubicGeometry,
    GEOMETRY_REGISTRY,
    create_geometry,
)

from .lattice import (
    Lattice,
    calc_neighbor_table,
    sort_neighbor_table,
    translationally_equivalent_sets,
    translation_class_map,
    symmetrize_pair_measurement,
    fourier_transform_coefficients,
    fourier_transform,
)

__all__ = [
    # Errors
    'LatgeoError',
    'InvalidArgumentError',
    'LatticeInvariantError',

    # Geometry
    'Geometry',
    'calc_cell_pos',
    'calc_site_pos',
    'cell_locations',
    'monkhorst_pack_mesh',
    'ChainGeometry',
    'SquareGeometry',
    'TriangularGeometry',
    'HoneycombGeometry',
    'KagomeGeometry',
    'CubicGeometry',
    'GEOMETRY_REGISTRY',
    'create_geometry',

    # Lattice
    'Lattice',
    'calc_neighbor_table',
    'sort_neighbor_table',
    'translationally_equivalent_sets',
    'translation_class_map',
    'symmetrize_pair_measurement',
    'fourier_transform_coefficients',
    'fourier_transform',
]
