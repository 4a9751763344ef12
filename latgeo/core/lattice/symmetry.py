"""
Translational symmetry of site pairs.

Two directed site pairs are translationally equivalent when one is mapped
onto the other by a lattice translation. For fixed orbitals (orbit1, orbit2)
and a cell displacement (l1, l2, l3) the equivalence class holds exactly
``ncells`` pairs, and the classes over all orbital pairs and displacements
partition the ``nsites**2`` directed pairs of the lattice.

Downstream code averages real-space correlation measurements over each
class before Fourier transforming them to momentum space.
"""

import logging
from itertools import product
from typing import Dict, Tuple

import numpy as np
from tqdm import tqdm

from ..errors import InvalidArgumentError
from .base import Lattice
from .neighbors import calc_neighbor_table

logger = logging.getLogger(__name__)

SetKey = Tuple[int, int, Tuple[int, int, int]]


def _set_keys(lattice: Lattice):
    """Keys in canonical order: orbit1, orbit2, then l3, l2, l1 ascending."""
    for orbit1, orbit2, l3, l2, l1 in product(range(lattice.norbits),
                                              range(lattice.norbits),
                                              range(lattice.L3),
                                              range(lattice.L2),
                                              range(lattice.L1)):
        yield orbit1, orbit2, (l1, l2, l3)


def translationally_equivalent_sets(lattice: Lattice,
                                    progress: bool = False) -> Dict[SetKey, np.ndarray]:
    """
    Enumerate every class of translationally equivalent site pairs.

    Parameters
    ----------
    lattice : Lattice
        Finite lattice.
    progress : bool, optional
        Show a progress bar while enumerating (default: False).

    Returns
    -------
    sets : Dict[Tuple[int, int, Tuple[int, int, int]], np.ndarray]
        Maps ``(orbit1, orbit2, (l1, l2, l3))`` to a (2, ncells) array of
        (site1, site2) pairs. Each value equals
        ``calc_neighbor_table(lattice, orbit1, orbit2, (l1, l2, l3))``.
        Keys are ordered by orbit1, orbit2, then l3, l2, l1.

    Notes
    -----
    There are ``norbits**2 * ncells`` classes; the position of a key in the
    dictionary is its class index (see ``translation_class_map``).
    """
    nsets = lattice.norbits ** 2 * lattice.ncells
    logger.debug("Enumerating %d translationally equivalent sets", nsets)

    sets = {}
    for orbit1, orbit2, displacement in tqdm(_set_keys(lattice),
                                             total=nsets,
                                             desc="Translational sets",
                                             disable=not progress):
        sets[(orbit1, orbit2, displacement)] = calc_neighbor_table(
            lattice, orbit1, orbit2, displacement
        )
    return sets


def translation_class_map(lattice: Lattice) -> np.ndarray:
    """
    Class index of every directed site pair.

    Returns
    -------
    class_map : np.ndarray, shape (nsites, nsites), dtype int64
        ``class_map[site1, site2]`` is the index of the translational set
        holding (site1, site2), in ``translationally_equivalent_sets`` key
        order. The index equals
        ``(orbit1*norbits + orbit2)*ncells + loc_to_cell(displacement)``.
    """
    class_map = np.full((lattice.nsites, lattice.nsites), -1, dtype=np.int64)
    for index, table in enumerate(translationally_equivalent_sets(lattice).values()):
        class_map[table[0], table[1]] = index
    return class_map


def symmetrize_pair_measurement(lattice: Lattice, values: np.ndarray) -> np.ndarray:
    """
    Average a site-pair measurement over translationally equivalent pairs.

    Parameters
    ----------
    lattice : Lattice
        Finite lattice.
    values : np.ndarray, shape (nsites, nsites)
        Measurement ``values[site1, site2]``, real or complex.

    Returns
    -------
    averaged : np.ndarray, shape (norbits, norbits, ncells)
        ``averaged[orbit1, orbit2, cell]`` is the mean over the class with
        displacement ``cell_loc[:, cell]`` from orbit1 to orbit2.

    Raises
    ------
    InvalidArgumentError
        If ``values`` is not (nsites, nsites).
    """
    values = np.asarray(values)
    if values.shape != (lattice.nsites, lattice.nsites):
        raise InvalidArgumentError(
            f"values must have shape ({lattice.nsites}, {lattice.nsites}), got {values.shape}"
        )

    averaged = np.zeros((lattice.norbits, lattice.norbits, lattice.ncells),
                        dtype=np.result_type(values.dtype, float))
    for (orbit1, orbit2, displacement), table in translationally_equivalent_sets(lattice).items():
        cell = lattice.loc_to_cell(displacement)
        averaged[orbit1, orbit2, cell] = values[table[0], table[1]].mean()
    return averaged
