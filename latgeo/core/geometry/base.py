"""
Geometry of an infinite crystal.

This module defines the Geometry value type together with the position and
reciprocal-space helpers that only need a Geometry to work:

- ``calc_cell_pos`` / ``calc_site_pos``: real-space positions
- ``cell_locations``: canonical enumeration of unit cells
- ``monkhorst_pack_mesh``: k-point mesh over the full Brillouin zone

Geometries are purely geometric objects: they know nothing about the finite
extent of a simulation lattice (see ``latgeo.core.lattice``).
"""

import logging
from typing import Any, Dict, Optional, Sequence, Union

import numpy as np

from ..errors import InvalidArgumentError

logger = logging.getLogger(__name__)

VectorsLike = Union[np.ndarray, Sequence[Sequence[float]]]

# Largest condition number accepted for the padded lattice-vector matrix
_MAX_CONDITION = 1e12


def _frozen(array: np.ndarray) -> np.ndarray:
    """Return ``array`` flagged read-only."""
    array.setflags(write=False)
    return array


def _as_columns(vectors: VectorsLike, name: str) -> np.ndarray:
    """
    Normalize user supplied vectors to a 2D float matrix of column vectors.

    A 2D numpy array is taken as-is (columns are vectors). Any other
    sequence is read as an ordered collection of vectors and stacked
    column-wise.
    """
    if isinstance(vectors, np.ndarray):
        matrix = np.array(vectors, dtype=float)
        if matrix.ndim == 1:
            matrix = matrix[:, np.newaxis]
    else:
        try:
            columns = [np.asarray(v, dtype=float).ravel() for v in vectors]
        except (TypeError, ValueError) as err:
            raise InvalidArgumentError(f"{name} must contain numeric vectors") from err
        if not columns:
            raise InvalidArgumentError(f"{name} must contain at least one vector")
        if len({len(c) for c in columns}) != 1:
            raise InvalidArgumentError(f"{name} vectors must all have the same length")
        matrix = np.column_stack(columns)

    if matrix.ndim != 2:
        raise InvalidArgumentError(f"{name} must be a 2D matrix, got shape {matrix.shape}")
    if matrix.shape[0] > 3:
        raise InvalidArgumentError(
            f"{name} vectors have {matrix.shape[0]} components, at most 3 are allowed"
        )
    if not np.all(np.isfinite(matrix)):
        raise InvalidArgumentError(f"{name} contains non-finite entries")
    return matrix


class Geometry:
    """
    Lattice geometry of an infinite crystal.

    A Geometry stores the ``ndim`` physically meaningful lattice vectors and
    the position of each of the ``norbits`` basis sites (orbitals) within the
    unit cell. Everything else is derived once at construction.

    Parameters
    ----------
    ndim : int
        Number of lattice directions (1, 2 or 3).
    norbits : int
        Number of orbitals (basis sites) per unit cell.
    lattice_vectors : np.ndarray or sequence of vectors
        Lattice vectors. A 2D array is read column-wise (column i is a_i);
        a list of vectors is stacked column-wise. Vectors may carry up to
        three components; components beyond ``ndim`` are kept as given, so
        a chain may run along (1, 1, 0).
    basis_vectors : np.ndarray or sequence of vectors
        Position of every orbital within the unit cell, in the same layout.
        Components beyond ``ndim`` are kept, e.g. the layer offset of a
        bilayer.

    Attributes
    ----------
    lattice_vectors : np.ndarray, shape (3, nvecs)
        Supplied lattice vectors as 3-component columns; ``nvecs`` is the
        larger of ndim and the number of vectors given.
    basis_vectors : np.ndarray, shape (3, norbits)
        Basis vectors as 3-component columns.
    lvecs : np.ndarray, shape (3, 3)
        Lattice vectors padded into the 3x3 identity.
    rlvecs : np.ndarray, shape (3, 3)
        ``2π · inv(lvecs)``. Row i is the reciprocal vector b_i.
    bvecs : np.ndarray, shape (3, norbits)
        Basis vectors padded with zero rows.

    Raises
    ------
    InvalidArgumentError
        If ndim or norbits are out of range, the number of basis vectors does
        not match norbits, or the lattice vectors are linearly dependent.

    Examples
    --------
    >>> geom = Geometry(ndim=2, norbits=1,
    ...                 lattice_vectors=[[1.0, 0.0], [0.0, 1.0]],
    ...                 basis_vectors=[[0.0, 0.0]])
    >>> geom.lvecs
    array([[1., 0., 0.],
           [0., 1., 0.],
           [0., 0., 1.]])

    Notes
    -----
    The padded 3D arrays exist so that 1D, 2D and 3D geometries share one
    interface. ``ndim`` names the periodic directions; it does not restrict
    the components of the supplied vectors.
    """

    def __init__(self,
                 ndim: int,
                 norbits: int,
                 lattice_vectors: VectorsLike,
                 basis_vectors: VectorsLike):
        # Validation
        if isinstance(ndim, bool) or not isinstance(ndim, (int, np.integer)) or not 1 <= ndim <= 3:
            raise InvalidArgumentError(f"ndim must be 1, 2 or 3, got {ndim!r}")
        if isinstance(norbits, bool) or not isinstance(norbits, (int, np.integer)) or norbits < 1:
            raise InvalidArgumentError(f"norbits must be a positive integer, got {norbits!r}")

        self._ndim = int(ndim)
        self._norbits = int(norbits)

        lvecs_in = _as_columns(lattice_vectors, "lattice_vectors")
        bvecs_in = _as_columns(basis_vectors, "basis_vectors")

        if lvecs_in.shape[1] > 3:
            raise InvalidArgumentError(
                f"at most 3 lattice vectors are allowed, got {lvecs_in.shape[1]}"
            )
        if bvecs_in.shape[1] != self._norbits:
            raise InvalidArgumentError(
                f"expected {self._norbits} basis vectors (norbits), got {bvecs_in.shape[1]}"
            )

        # Pad lattice vectors into the identity, basis vectors into zeros
        lvecs = np.eye(3)
        lvecs[:lvecs_in.shape[0], :lvecs_in.shape[1]] = lvecs_in
        bvecs = np.zeros((3, self._norbits))
        bvecs[:bvecs_in.shape[0], :] = bvecs_in

        try:
            if np.linalg.cond(lvecs) > _MAX_CONDITION:
                raise np.linalg.LinAlgError("lattice vector matrix is singular")
            rlvecs = 2.0 * np.pi * np.linalg.inv(lvecs)
        except np.linalg.LinAlgError as err:
            raise InvalidArgumentError(
                "lattice_vectors are linearly dependent (matrix is not invertible)"
            ) from err

        # Store parameters
        self._lvecs = _frozen(lvecs)
        self._rlvecs = _frozen(rlvecs)
        self._bvecs = _frozen(bvecs)
        nvecs = max(self._ndim, lvecs_in.shape[1])
        self._lattice_vectors = _frozen(lvecs[:, :nvecs].copy())
        self._basis_vectors = _frozen(bvecs.copy())

        logger.debug("Built geometry: ndim=%d, norbits=%d", self._ndim, self._norbits)

    @property
    def ndim(self) -> int:
        """Number of lattice directions."""
        return self._ndim

    @property
    def norbits(self) -> int:
        """Number of orbitals per unit cell."""
        return self._norbits

    @property
    def lattice_vectors(self) -> np.ndarray:
        return self._lattice_vectors

    @property
    def basis_vectors(self) -> np.ndarray:
        return self._basis_vectors

    @property
    def lvecs(self) -> np.ndarray:
        return self._lvecs

    @property
    def rlvecs(self) -> np.ndarray:
        return self._rlvecs

    @property
    def bvecs(self) -> np.ndarray:
        return self._bvecs

    @property
    def reciprocal_vectors(self) -> np.ndarray:
        """
        Reciprocal lattice vectors as columns, shape (3, 3).

        Satisfies ``lvecs[:, i] · reciprocal_vectors[:, j] = 2π δ_ij``.
        """
        return self._rlvecs.T

    def cell_volume(self) -> float:
        """
        Volume of the unit cell (length in 1D, area in 2D).

        Returns
        -------
        volume : float
            ``sqrt(det(A^T A))`` for the ndim lattice vectors A, which is
            ``|det(A)|`` when the vectors lie in the first ndim axes.
        """
        vectors = self._lvecs[:, :self._ndim]
        return float(np.sqrt(abs(np.linalg.det(vectors.T @ vectors))))

    def real_to_fractional(self, position: np.ndarray) -> np.ndarray:
        """
        Convert a real-space 3-vector to fractional coordinates.

        Parameters
        ----------
        position : np.ndarray, shape (3,)
            Position in real space.

        Returns
        -------
        fractional : np.ndarray, shape (3,)
            Coefficients ``n`` such that ``position = lvecs @ n``.
        """
        return self._rlvecs @ np.asarray(position, dtype=float) / (2.0 * np.pi)

    def fractional_to_real(self, fractional: np.ndarray) -> np.ndarray:
        """Convert fractional coordinates back to a real-space 3-vector."""
        return self._lvecs @ np.asarray(fractional, dtype=float)

    def high_symmetry_points(self) -> Dict[str, np.ndarray]:
        """
        High-symmetry points of the Brillouin zone as 3-vectors.

        Default implementation returns only Γ. Presets override this.
        """
        return {'Γ': np.zeros(3)}

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to a dictionary of plain Python types.

        Vectors are stored as lists of three components, one list per
        vector, so out-of-plane components survive ``from_dict``.
        """
        return {
            'ndim': self._ndim,
            'norbits': self._norbits,
            'lattice_vectors': self._lattice_vectors.T.tolist(),
            'basis_vectors': self._basis_vectors.T.tolist(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Geometry':
        """Rebuild a Geometry from ``to_dict`` output."""
        missing = {'ndim', 'norbits', 'lattice_vectors', 'basis_vectors'} - set(data)
        if missing:
            raise InvalidArgumentError(f"geometry data is missing keys: {sorted(missing)}")
        return Geometry(
            ndim=data['ndim'],
            norbits=data['norbits'],
            lattice_vectors=list(data['lattice_vectors']),
            basis_vectors=list(data['basis_vectors']),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Geometry):
            return NotImplemented
        return (self._ndim == other._ndim
                and self._norbits == other._norbits
                and np.array_equal(self._lvecs, other._lvecs)
                and np.array_equal(self._bvecs, other._bvecs))

    __hash__ = None

    def __repr__(self) -> str:
        """String representation of the geometry."""
        name = self.__class__.__name__
        return f"{name}(ndim={self._ndim}, norbits={self._norbits})"

    def __str__(self) -> str:
        """Detailed string representation."""
        with np.printoptions(precision=6, suppress=True):
            lines = [
                "=" * 50,
                self.__class__.__name__,
                "=" * 50,
                f"ndim (# dimensions): {self._ndim}",
                f"norbits (# orbits per unit cell): {self._norbits}",
                "",
                "lvecs [Lattice Vectors] =",
                str(self._lvecs),
                "",
                "rlvecs [Recip. Latt. Vectors] =",
                str(self._rlvecs),
                "",
                "bvecs [Basis Vectors] =",
                str(self._bvecs),
                "=" * 50,
            ]
        return "\n".join(lines)


def _check_extent(name: str, value: int) -> int:
    """Validate a lattice extent and return it as a plain int."""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 1:
        raise InvalidArgumentError(f"{name} must be a positive integer, got {value!r}")
    return int(value)


def calc_cell_pos(geometry: Geometry,
                  l1: int,
                  l2: int = 0,
                  l3: int = 0,
                  out: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Real-space position of unit cell (l1, l2, l3).

    Parameters
    ----------
    geometry : Geometry
        Crystal geometry.
    l1, l2, l3 : int
        Cell location in units of the lattice vectors.
    out : np.ndarray, shape (3,), optional
        Buffer to write the result into. It is overwritten, not accumulated.

    Returns
    -------
    position : np.ndarray, shape (3,)
        ``l1*a1 + l2*a2 + l3*a3`` (``out`` when given).
    """
    if out is None:
        out = np.zeros(3)
    lvecs = geometry.lvecs
    out[:] = l1 * lvecs[:, 0] + l2 * lvecs[:, 1] + l3 * lvecs[:, 2]
    return out


def calc_site_pos(geometry: Geometry,
                  orbit: int,
                  l1: int,
                  l2: int = 0,
                  l3: int = 0,
                  out: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Real-space position of orbital ``orbit`` in unit cell (l1, l2, l3).

    Parameters
    ----------
    geometry : Geometry
        Crystal geometry.
    orbit : int
        Orbital index, ``0 <= orbit < norbits``.
    l1, l2, l3 : int
        Cell location.
    out : np.ndarray, shape (3,), optional
        Buffer to write the result into.

    Returns
    -------
    position : np.ndarray, shape (3,)
        Cell position plus the orbital's basis vector.

    Raises
    ------
    InvalidArgumentError
        If orbit is out of range.
    """
    if not 0 <= orbit < geometry.norbits:
        raise InvalidArgumentError(
            f"orbit must be in [0, {geometry.norbits}), got {orbit}"
        )
    out = calc_cell_pos(geometry, l1, l2, l3, out=out)
    out += geometry.bvecs[:, orbit]
    return out


def cell_locations(L1: int, L2: int = 1, L3: int = 1) -> np.ndarray:
    """
    Enumerate every unit cell of an L1 x L2 x L3 lattice.

    Returns
    -------
    locations : np.ndarray, shape (3, L1*L2*L3), dtype int
        Column i holds (l1, l2, l3) of cell i. Cells are ordered with l3
        outermost and l1 innermost, so ``i = l1 + l2*L1 + l3*L1*L2``.
    """
    L1 = _check_extent("L1", L1)
    L2 = _check_extent("L2", L2)
    L3 = _check_extent("L3", L3)
    # np.indices iterates its last axis fastest
    l3, l2, l1 = np.indices((L3, L2, L1)).reshape(3, -1)
    return np.stack([l1, l2, l3]).astype(np.int64)


def monkhorst_pack_mesh(geometry: Geometry,
                        L1: int,
                        L2: int = 1,
                        L3: int = 1) -> np.ndarray:
    """
    Monkhorst-Pack mesh over the full Brillouin zone.

    Parameters
    ----------
    geometry : Geometry
        Crystal geometry providing the reciprocal vectors.
    L1, L2, L3 : int
        Mesh density along each reciprocal vector (the lattice extents).

    Returns
    -------
    kpoints : np.ndarray, shape (3, L1*L2*L3)
        Column i is ``(l1/L1) b1 + (l2/L2) b2 + (l3/L3) b3`` for the i-th
        cell in ``cell_locations`` order.

    Notes
    -----
    Because the mesh shares the cell enumeration, ``kpoints[:, n]`` and the
    cell origins ``R_m`` satisfy ``exp(i k_n·R_m) = exp(2πi Σ n_j m_j / L_j)``,
    i.e. they form an order-matched discrete Fourier pair.

    The b_i used here are the rows of ``rlvecs``. On oblique lattices this
    intentionally differs from taking the columns of ``rlvecs``, which are
    not dual to the lattice vectors.
    """
    locations = cell_locations(L1, L2, L3)
    dims = np.array([L1, L2, L3], dtype=float)
    fractions = locations / dims[:, np.newaxis]
    return geometry.reciprocal_vectors @ fractions
