"""
Geometry module.

Describes an infinite crystal: lattice vectors, reciprocal vectors and
orbital positions, plus presets for common lattices.
"""

from .base import (
    Geometry,
    calc_cell_pos,
    calc_site_pos,
    cell_locations,
    monkhorst_pack_mesh,
)
from .presets import (
    ChainGeometry,
    SquareGeometry,
    TriangularGeometry,
    HoneycombGeometry,
    KagomeGeometry,
    CubicGeometry,
    GEOMETRY_REGISTRY,
    create_geometry,
)

__all__ = [
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
]
