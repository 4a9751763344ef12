"""
Preset geometries for common lattices.

This module provides ready-made Geometry subclasses for:
- Chain (1D, one orbital)
- Square (2D, one orbital)
- Triangular (2D, one orbital)
- Honeycomb (2D, two orbitals)
- Kagome (2D, three orbitals)
- Cubic (3D, one orbital)
"""

from typing import Dict

import numpy as np

from ..errors import InvalidArgumentError
from .base import Geometry


def _check_lattice_constant(lattice_constant: float) -> float:
    if lattice_constant <= 0:
        raise InvalidArgumentError("Lattice constant must be positive")
    return float(lattice_constant)


class ChainGeometry(Geometry):
    """
    One-dimensional chain with a single orbital per cell.

    Parameters
    ----------
    lattice_constant : float, optional
        Lattice constant 'a' (default: 1.0)
    """

    def __init__(self, lattice_constant: float = 1.0):
        a = _check_lattice_constant(lattice_constant)
        self.lattice_constant = a
        super().__init__(ndim=1, norbits=1,
                         lattice_vectors=[[a]],
                         basis_vectors=[[0.0]])

    def high_symmetry_points(self) -> Dict[str, np.ndarray]:
        a = self.lattice_constant
        return {
            'Γ': np.zeros(3),
            'X': np.array([np.pi / a, 0.0, 0.0]),
        }


class SquareGeometry(Geometry):
    """
    Square Bravais lattice.

    Geometry
    --------
    Primitive vectors (for lattice constant a):
        a1 = a * [1, 0]
        a2 = a * [0, 1]

    High-symmetry points in Brillouin zone:
        Γ = [0, 0]
        X = (π/a) * [1, 0]
        M = (π/a) * [1, 1]
    """

    def __init__(self, lattice_constant: float = 1.0):
        a = _check_lattice_constant(lattice_constant)
        self.lattice_constant = a
        super().__init__(ndim=2, norbits=1,
                         lattice_vectors=[[a, 0.0], [0.0, a]],
                         basis_vectors=[[0.0, 0.0]])

    def high_symmetry_points(self) -> Dict[str, np.ndarray]:
        k = np.pi / self.lattice_constant
        return {
            'Γ': np.zeros(3),
            'X': np.array([k, 0.0, 0.0]),
            'M': np.array([k, k, 0.0]),
        }


class TriangularGeometry(Geometry):
    """
    Triangular (hexagonal) Bravais lattice.

    Geometry
    --------
    Primitive vectors (for lattice constant a):
        a1 = a * [1, 0]
        a2 = a * [1/2, √3/2]

    High-symmetry points in Brillouin zone:
        Γ = [0, 0]
        K = (4π/3a) * [1, 0]  (corner of hexagonal BZ)
        M = (π/a) * [1, 1/√3]  (edge midpoint)

    Notes
    -----
    Each site has 6 nearest neighbors, reached by the cell displacements
    ±(1, 0, 0), ±(0, 1, 0) and ±(1, -1, 0).
    """

    def __init__(self, lattice_constant: float = 1.0):
        a = _check_lattice_constant(lattice_constant)
        self.lattice_constant = a
        super().__init__(ndim=2, norbits=1,
                         lattice_vectors=_hexagonal_vectors(a),
                         basis_vectors=[[0.0, 0.0]])

    def high_symmetry_points(self) -> Dict[str, np.ndarray]:
        return _hexagonal_points(self.lattice_constant)


class HoneycombGeometry(Geometry):
    """
    Honeycomb lattice: triangular Bravais lattice with a two-site basis.

    Orbital 0 (A sublattice) sits at the cell origin, orbital 1 (B) at
    (a1 + a2)/3, so the nearest-neighbor distance is a/√3.

    Nearest-neighbor bonds (orbit 0 → orbit 1) have cell displacements
    (0, 0, 0), (-1, 0, 0) and (0, -1, 0).
    """

    def __init__(self, lattice_constant: float = 1.0):
        a = _check_lattice_constant(lattice_constant)
        self.lattice_constant = a
        a1, a2 = (np.array(v) for v in _hexagonal_vectors(a))
        super().__init__(ndim=2, norbits=2,
                         lattice_vectors=[a1, a2],
                         basis_vectors=[np.zeros(2), (a1 + a2) / 3.0])

    def high_symmetry_points(self) -> Dict[str, np.ndarray]:
        return _hexagonal_points(self.lattice_constant)


class KagomeGeometry(Geometry):
    """
    Kagome lattice: triangular Bravais lattice with a three-site basis at
    0, a1/2 and a2/2.
    """

    def __init__(self, lattice_constant: float = 1.0):
        a = _check_lattice_constant(lattice_constant)
        self.lattice_constant = a
        a1, a2 = (np.array(v) for v in _hexagonal_vectors(a))
        super().__init__(ndim=2, norbits=3,
                         lattice_vectors=[a1, a2],
                         basis_vectors=[np.zeros(2), a1 / 2.0, a2 / 2.0])

    def high_symmetry_points(self) -> Dict[str, np.ndarray]:
        return _hexagonal_points(self.lattice_constant)


class CubicGeometry(Geometry):
    """Simple cubic lattice with a single orbital per cell."""

    def __init__(self, lattice_constant: float = 1.0):
        a = _check_lattice_constant(lattice_constant)
        self.lattice_constant = a
        super().__init__(ndim=3, norbits=1,
                         lattice_vectors=np.eye(3) * a,
                         basis_vectors=[[0.0, 0.0, 0.0]])

    def high_symmetry_points(self) -> Dict[str, np.ndarray]:
        k = np.pi / self.lattice_constant
        return {
            'Γ': np.zeros(3),
            'X': np.array([k, 0.0, 0.0]),
            'M': np.array([k, k, 0.0]),
            'R': np.array([k, k, k]),
        }


def _hexagonal_vectors(a: float):
    return [[a, 0.0], [a / 2.0, a * np.sqrt(3) / 2.0]]


def _hexagonal_points(a: float) -> Dict[str, np.ndarray]:
    return {
        'Γ': np.zeros(3),
        'K': np.array([4 * np.pi / (3 * a), 0.0, 0.0]),
        'M': np.array([np.pi / a, np.pi / (np.sqrt(3) * a), 0.0]),
    }


# Geometry registry for config-based construction
GEOMETRY_REGISTRY = {
    'chain': ChainGeometry,
    'square': SquareGeometry,
    'triangular': TriangularGeometry,
    'honeycomb': HoneycombGeometry,
    'kagome': KagomeGeometry,
    'cubic': CubicGeometry,
}


def create_geometry(geometry_type: str, **kwargs) -> Geometry:
    """
    Factory function to create geometries from string names.

    Parameters
    ----------
    geometry_type : str
        Registered geometry name ('chain', 'square', 'triangular',
        'honeycomb', 'kagome', 'cubic')
    **kwargs
        Additional arguments passed to the geometry constructor
        (e.g., lattice_constant=1.5)

    Returns
    -------
    geometry : Geometry
        Instantiated geometry

    Examples
    --------
    >>> geom = create_geometry('honeycomb', lattice_constant=2.46)
    >>> geom.norbits
    2

    Raises
    ------
    InvalidArgumentError
        If geometry_type is not recognized
    """
    if geometry_type not in GEOMETRY_REGISTRY:
        available = ', '.join(GEOMETRY_REGISTRY.keys())
        raise InvalidArgumentError(f"Unknown geometry type '{geometry_type}'. "
                                   f"Available types: {available}")

    geometry_class = GEOMETRY_REGISTRY[geometry_type]
    return geometry_class(**kwargs)
