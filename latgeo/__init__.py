"""
latgeo: Finite-Lattice Geometry Engine

A Python package describing crystal geometries and their finite periodic
realizations, and deriving the index-level structures that lattice
simulations need to build Hamiltonians, measure correlators and average over
translational symmetry.

Main Components
---------------
core : Geometry, Lattice, neighbor tables, translational sets, Fourier helpers
io : Configuration loading and saving
visualization : Plotting of lattices and bonds

Quick Start
-----------
>>> from latgeo import SquareGeometry, Lattice, calc_neighbor_table
>>>
>>> # 4 x 4 square lattice
>>> lattice = Lattice(SquareGeometry(lattice_constant=1.0), L1=4, L2=4)
>>>
>>> # Bonds along +x
>>> table = calc_neighbor_table(lattice, 0, 0, [1, 0, 0])
>>> table.shape
(2, 16)

Indices are 0-based: cells 0..ncells-1, orbitals 0..norbits-1,
sites 0..nsites-1.
"""

import logging

__version__ = "0.1.0"

# High-level API exports
from .core import (
    # Errors
    LatgeoError,
    InvalidArgumentError,
    LatticeInvariantError,

    # Geometry
    Geometry,
    calc_cell_pos,
    calc_site_pos,
    monkhorst_pack_mesh,
    ChainGeometry,
    SquareGeometry,
    TriangularGeometry,
    HoneycombGeometry,
    KagomeGeometry,
    CubicGeometry,
    create_geometry,

    # Lattice
    Lattice,
    calc_neighbor_table,
    sort_neighbor_table,
    translationally_equivalent_sets,
    translation_class_map,
    symmetrize_pair_measurement,
    fourier_transform_coefficients,
    fourier_transform,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    '__version__',
    'LatgeoError',
    'InvalidArgumentError',
    'LatticeInvariantError',
    'Geometry',
    'calc_cell_pos',
    'calc_site_pos',
    'monkhorst_pack_mesh',
    'ChainGeometry',
    'SquareGeometry',
    'TriangularGeometry',
    'HoneycombGeometry',
    'KagomeGeometry',
    'CubicGeometry',
    'create_geometry',
    'Lattice',
    'calc_neighbor_table',
    'sort_neighbor_table',
    'translationally_equivalent_sets',
    'translation_class_map',
    'symmetrize_pair_measurement',
    'fourier_transform_coefficients',
    'fourier_transform',
]
