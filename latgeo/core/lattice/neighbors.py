"""
Neighbor tables.

A neighbor table is a (2, N) integer array whose columns are site pairs
(initial, final) realizing one displacement/orbital relation across the
whole lattice. Tables are the building blocks for hopping and interaction
matrices and for displacement-resolved correlators.
"""

import logging

import numpy as np

from ..errors import InvalidArgumentError
from .base import IntVector, Lattice, _as_int_vector

logger = logging.getLogger(__name__)


def calc_neighbor_table(lattice: Lattice,
                        orbit1: int,
                        orbit2: int,
                        displacement: IntVector) -> np.ndarray:
    """
    Neighbor table for one displacement between two orbital types.

    Parameters
    ----------
    lattice : Lattice
        Finite lattice.
    orbit1 : int
        Orbital of the initial sites.
    orbit2 : int
        Orbital of the final sites.
    displacement : array-like of int, shape (3,)
        Displacement in unit cells from the initial to the final site.

    Returns
    -------
    table : np.ndarray, shape (2, ncells), dtype int64
        Column j holds (initial, final) for the j-th site of ``orbit1`` in
        ascending site order; ``final = site_to_site(initial, displacement,
        orbit2)``.

    Raises
    ------
    InvalidArgumentError
        If an orbital is out of range or ``displacement`` is not three
        integers.

    Examples
    --------
    >>> from latgeo.core.geometry import ChainGeometry
    >>> lattice = Lattice(ChainGeometry(), L1=4)
    >>> calc_neighbor_table(lattice, 0, 0, [1, 0, 0])
    array([[0, 1, 2, 3],
           [1, 2, 3, 0]])
    """
    displacement = _as_int_vector(displacement, "displacement")
    orbit1 = lattice._check_orbit(orbit1, "orbit1")
    orbit2 = lattice._check_orbit(orbit2, "orbit2")

    initial = lattice.sites_of_orbit(orbit1)
    locs = lattice.cell_loc[:, lattice.site_to_cell[initial]] + displacement[:, np.newaxis]
    final = lattice.norbits * lattice._wrap_cells(locs) + orbit2

    logger.debug("Neighbor table: orbit %d -> %d, displacement %s, %d pairs",
                 orbit1, orbit2, displacement.tolist(), initial.size)
    return np.stack([initial, final]).astype(np.int64)


def sort_neighbor_table(table: np.ndarray) -> np.ndarray:
    """
    Canonicalize and sort a neighbor table in place.

    1. Each column is ordered so that its first entry is the smaller one.
    2. Columns are stably sorted by (first, second) ascending.

    Parameters
    ----------
    table : np.ndarray, shape (2, N)
        Writable integer neighbor table. Modified in place.

    Returns
    -------
    permutation : np.ndarray, shape (N,)
        Original column of each sorted column:
        ``table_after[:, i]`` is the canonicalized ``table_before[:, permutation[i]]``.
        Use it to reorder data collected in the original column order.

    Raises
    ------
    InvalidArgumentError
        If the table is not a writable (2, N) integer array.

    Examples
    --------
    >>> table = np.array([[0, 1, 2, 3], [1, 2, 3, 0]])
    >>> sort_neighbor_table(table)
    array([0, 3, 1, 2])
    >>> table
    array([[0, 0, 1, 2],
           [1, 3, 2, 3]])
    """
    if not isinstance(table, np.ndarray) or table.ndim != 2 or table.shape[0] != 2:
        shape = getattr(table, 'shape', None)
        raise InvalidArgumentError(f"neighbor table must have shape (2, N), got {shape}")
    if table.dtype == bool or not np.issubdtype(table.dtype, np.integer):
        raise InvalidArgumentError(f"neighbor table must contain integers, got {table.dtype}")
    if not table.flags.writeable:
        raise InvalidArgumentError("neighbor table is read-only and cannot be sorted in place")

    canonical = np.sort(table, axis=0)
    # lexsort is stable; the last key is the primary one
    permutation = np.lexsort((canonical[1], canonical[0]))
    table[:] = canonical[:, permutation]
    return permutation
