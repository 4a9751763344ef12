"""
Discrete Fourier transform between cell displacements and the k-point mesh.
"""

import numpy as np

from ..errors import InvalidArgumentError
from .base import Lattice


def fourier_transform_coefficients(lattice: Lattice) -> np.ndarray:
    """
    Coefficients ``F[n, m] = exp(-i k_n · R_m)``.

    Parameters
    ----------
    lattice : Lattice
        Finite lattice; k_n are its kpoints, R_m its cell origins.

    Returns
    -------
    coefficients : np.ndarray, shape (ncells, ncells), complex
        Satisfies ``F @ F.conj().T == ncells * I``.
    """
    phases = lattice.kpoints.T @ lattice.cell_positions()
    return np.exp(-1j * phases)


def fourier_transform(lattice: Lattice, values: np.ndarray) -> np.ndarray:
    """
    Transform data indexed by cell displacement to momentum space.

    Parameters
    ----------
    lattice : Lattice
        Finite lattice.
    values : np.ndarray, shape (..., ncells)
        Real-space data, last axis indexed by displacement cell (e.g. the
        output of ``symmetrize_pair_measurement``).

    Returns
    -------
    transformed : np.ndarray, shape (..., ncells), complex
        ``transformed[..., n] = Σ_m exp(-i k_n · R_m) values[..., m]``
    """
    values = np.asarray(values)
    if values.ndim == 0 or values.shape[-1] != lattice.ncells:
        raise InvalidArgumentError(
            f"last axis of values must have length {lattice.ncells}, got shape {values.shape}"
        )
    return values @ fourier_transform_coefficients(lattice).T
