"""
Lattice module.

A Lattice realizes a Geometry at finite periodic extent. This module also
provides the index-level structures built from it:
- Neighbor tables and their canonical sorting
- Translationally equivalent site-pair sets
- Fourier coefficients between cell displacements and k-points
"""

from .base import Lattice
from .neighbors import calc_neighbor_table, sort_neighbor_table
from .symmetry import (
    translationally_equivalent_sets,
    translation_class_map,
    symmetrize_pair_measurement,
)
from .fourier import fourier_transform_coefficients, fourier_transform

__all__ = [
    'Lattice',
    'calc_neighbor_table',
    'sort_neighbor_table',
    'translationally_equivalent_sets',
    'translation_class_map',
    'symmetrize_pair_measurement',
    'fourier_transform_coefficients',
    'fourier_transform',
]
