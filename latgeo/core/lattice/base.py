"""
Finite periodic lattice built from a Geometry.

A Lattice realizes a Geometry on L1 x L2 x L3 unit cells with periodic
boundary conditions and fixes the canonical index space used by every
downstream algorithm:

    cell = l1 + l2*L1 + l3*L1*L2
    site = norbits*cell + orbit

Cells are enumerated with l3 outermost and l1 innermost; within a cell,
sites follow the orbital order. All indices are 0-based.
"""

import logging
from typing import Any, Dict, Optional, Sequence, Union

import numpy as np
import pandas as pd

from ..errors import InvalidArgumentError, LatticeInvariantError
from ..geometry.base import (
    Geometry,
    _check_extent,
    _frozen,
    cell_locations,
    monkhorst_pack_mesh,
)

logger = logging.getLogger(__name__)

IntVector = Union[np.ndarray, Sequence[int]]


def _as_int_vector(vector: IntVector, name: str) -> np.ndarray:
    """Validate a 3-component integer vector and return a fresh int64 array."""
    array = np.asarray(vector)
    if array.shape != (3,):
        raise InvalidArgumentError(
            f"{name} must have exactly 3 components, got shape {array.shape}"
        )
    if array.dtype == bool or not np.issubdtype(array.dtype, np.integer):
        raise InvalidArgumentError(f"{name} must contain integers, got dtype {array.dtype}")
    return array.astype(np.int64)


class Lattice:
    """
    Finite lattice of L1 x L2 x L3 unit cells with periodic boundaries.

    Parameters
    ----------
    geometry : Geometry
        Crystal geometry to realize.
    L1, L2, L3 : int
        Number of unit cells along each lattice vector. Keyword-only, so
        every extent is named at the call site. L2 and L3 default to 1.

    Attributes
    ----------
    dims : np.ndarray, shape (3,)
        [L1, L2, L3]
    ncells : int
        L1*L2*L3
    nsites : int
        ncells*norbits
    cell_loc : np.ndarray, shape (3, ncells)
        (l1, l2, l3) location of each cell.
    positions : np.ndarray, shape (3, nsites)
        Real-space position of every site.
    kpoints : np.ndarray, shape (3, ncells)
        Monkhorst-Pack mesh; ``kpoints[:, i]`` belongs to cell i.
    site_to_orbit : np.ndarray, shape (nsites,)
        Orbital index of each site.
    site_to_cell : np.ndarray, shape (nsites,)
        Owning cell of each site.

    Raises
    ------
    InvalidArgumentError
        If any extent is not a positive integer.

    Examples
    --------
    >>> from latgeo.core.geometry import ChainGeometry
    >>> lattice = Lattice(ChainGeometry(), L1=4)
    >>> lattice.nsites
    4
    >>> lattice.site_to_site(3, [1, 0, 0], 0)
    0

    Notes
    -----
    All arrays are read-only. Derived structures (neighbor tables,
    translational sets) are built on demand and never cached here.
    """

    def __init__(self,
                 geometry: Geometry,
                 *,
                 L1: int,
                 L2: int = 1,
                 L3: int = 1):
        if not isinstance(geometry, Geometry):
            raise InvalidArgumentError("geometry must be a Geometry instance")

        self._geometry = geometry
        self._L1 = _check_extent("L1", L1)
        self._L2 = _check_extent("L2", L2)
        self._L3 = _check_extent("L3", L3)
        self._dims = _frozen(np.array([self._L1, self._L2, self._L3], dtype=np.int64))
        self._ncells = self._L1 * self._L2 * self._L3
        self._nsites = self._ncells * geometry.norbits

        # Cell enumeration: l3 outer, l2 middle, l1 inner
        cell_loc = cell_locations(self.L1, self.L2, self.L3)

        # Sites: round-robin over orbitals within each cell
        site_to_cell = np.repeat(np.arange(self.ncells, dtype=np.int64), self.norbits)
        site_to_orbit = np.tile(np.arange(self.norbits, dtype=np.int64), self.ncells)

        # positions[:, norbits*cell + orbit] = R_cell + b_orbit
        cell_pos = geometry.lvecs @ cell_loc
        positions = cell_pos[:, :, np.newaxis] + geometry.bvecs[:, np.newaxis, :]

        self._cell_loc = _frozen(cell_loc)
        self._site_to_cell = _frozen(site_to_cell)
        self._site_to_orbit = _frozen(site_to_orbit)
        self._positions = _frozen(positions.reshape(3, self.nsites))
        self._kpoints = _frozen(monkhorst_pack_mesh(geometry, self.L1, self.L2, self.L3))

        self._check_round_robin()

        logger.debug("Built lattice: dims=%s, norbits=%d, nsites=%d",
                     self.dims.tolist(), self.norbits, self.nsites)

    @classmethod
    def isotropic(cls, geometry: Geometry, L: int) -> 'Lattice':
        """
        Lattice with L unit cells along each of the geometry's ndim directions.

        Directions beyond ``geometry.ndim`` get a single cell, so a 2D
        geometry with L=4 yields a 4 x 4 x 1 lattice.
        """
        extents = [L if direction < geometry.ndim else 1 for direction in range(3)]
        return cls(geometry, L1=extents[0], L2=extents[1], L3=extents[2])

    @property
    def geometry(self) -> Geometry:
        return self._geometry

    @property
    def L1(self) -> int:
        return self._L1

    @property
    def L2(self) -> int:
        return self._L2

    @property
    def L3(self) -> int:
        return self._L3

    @property
    def dims(self) -> np.ndarray:
        return self._dims

    @property
    def ndim(self) -> int:
        return self._geometry.ndim

    @property
    def norbits(self) -> int:
        return self._geometry.norbits

    @property
    def ncells(self) -> int:
        """Number of unit cells, L1*L2*L3."""
        return self._ncells

    @property
    def nsites(self) -> int:
        """Number of sites, ncells*norbits."""
        return self._nsites

    @property
    def cell_loc(self) -> np.ndarray:
        return self._cell_loc

    @property
    def site_to_cell(self) -> np.ndarray:
        return self._site_to_cell

    @property
    def site_to_orbit(self) -> np.ndarray:
        return self._site_to_orbit

    @property
    def positions(self) -> np.ndarray:
        return self._positions

    @property
    def kpoints(self) -> np.ndarray:
        return self._kpoints

    def _check_round_robin(self) -> None:
        expected = np.arange(self.nsites) % self.norbits
        if not np.array_equal(self.site_to_orbit, expected):
            raise LatticeInvariantError(
                "sites are not laid out round-robin over orbitals within each cell"
            )

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------

    def _check_orbit(self, orbit: int, name: str = "orbit") -> int:
        if isinstance(orbit, bool) or not isinstance(orbit, (int, np.integer)):
            raise InvalidArgumentError(f"{name} must be an integer, got {orbit!r}")
        if not 0 <= orbit < self.norbits:
            raise InvalidArgumentError(
                f"{name} must be in [0, {self.norbits}), got {orbit}"
            )
        return int(orbit)

    def _check_site(self, site: int, name: str = "site") -> int:
        if isinstance(site, bool) or not isinstance(site, (int, np.integer)):
            raise InvalidArgumentError(f"{name} must be an integer, got {site!r}")
        if not 0 <= site < self.nsites:
            raise InvalidArgumentError(
                f"{name} must be in [0, {self.nsites}), got {site}"
            )
        return int(site)

    # ------------------------------------------------------------------
    # Indexing
    # ------------------------------------------------------------------

    def _wrap_cells(self, locs: np.ndarray) -> np.ndarray:
        """Map a (3, N) array of cell locations to cell indices under PBC."""
        wrapped = np.mod(locs, self.dims[:, np.newaxis])
        return wrapped[0] + wrapped[1] * self.L1 + wrapped[2] * self.L1 * self.L2

    def loc_to_cell(self, loc: IntVector) -> int:
        """
        Cell index of the cell at location ``loc``, with periodic wrap.

        Parameters
        ----------
        loc : array-like of int, shape (3,)
            Cell location (l1, l2, l3); any integers, including negative
            values and values beyond the extent.

        Returns
        -------
        cell : int
            ``l1 + l2*L1 + l3*L1*L2`` after reducing each coordinate into
            ``[0, L)``. The input is not modified.
        """
        loc = _as_int_vector(loc, "loc")
        return int(self._wrap_cells(loc[:, np.newaxis])[0])

    def loc_to_site(self, loc: IntVector, orbit: int) -> int:
        """Site of orbital ``orbit`` in the cell at ``loc`` (wrapped)."""
        orbit = self._check_orbit(orbit)
        return self.norbits * self.loc_to_cell(loc) + orbit

    def site_to_site(self, site: int, displacement: IntVector, orbit: int) -> int:
        """
        Site reached by displacing the cell of ``site`` by whole unit cells.

        Parameters
        ----------
        site : int
            Initial site.
        displacement : array-like of int, shape (3,)
            Displacement in unit cells.
        orbit : int
            Orbital of the returned site. It need not match the orbital of
            ``site``.

        Returns
        -------
        site : int
            Site of ``orbit`` in cell ``cell_loc[:, cell(site)] + displacement``.
        """
        site = self._check_site(site)
        displacement = _as_int_vector(displacement, "displacement")
        orbit = self._check_orbit(orbit)
        loc = self.cell_loc[:, self.site_to_cell[site]] + displacement
        return self.norbits * int(self._wrap_cells(loc[:, np.newaxis])[0]) + orbit

    def sites_of_orbit(self, orbit: int) -> np.ndarray:
        """
        All sites of one orbital type in ascending order.

        Returns
        -------
        sites : np.ndarray, shape (ncells,)
            ``orbit, orbit + norbits, orbit + 2*norbits, ...``
        """
        orbit = self._check_orbit(orbit)
        sites = np.arange(orbit, self.nsites, self.norbits, dtype=np.int64)
        if sites.size != self.ncells or np.any(self.site_to_orbit[sites] != orbit):
            raise LatticeInvariantError(
                f"orbital {orbit} does not own exactly {self.ncells} round-robin sites"
            )
        return sites

    # ------------------------------------------------------------------
    # Positions and displacement vectors
    # ------------------------------------------------------------------

    def cell_positions(self) -> np.ndarray:
        """Real-space origin of every cell, shape (3, ncells)."""
        return self.geometry.lvecs @ self.cell_loc

    def cell_displacement(self, site1: int, site2: int, direction: int) -> int:
        """
        Minimum-image cell displacement from site2 to site1 along one direction.

        Parameters
        ----------
        site1, site2 : int
            Sites whose cells are compared.
        direction : int
            Lattice-vector direction, 0, 1 or 2.

        Returns
        -------
        delta : int
            ``l(site1) - l(site2)`` along ``direction``, mapped into
            ``(-L/2, L/2]``.
        """
        site1 = self._check_site(site1, "site1")
        site2 = self._check_site(site2, "site2")
        if direction not in (0, 1, 2):
            raise InvalidArgumentError(f"direction must be 0, 1 or 2, got {direction!r}")

        L = int(self.dims[direction])
        cell1 = self.site_to_cell[site1]
        cell2 = self.site_to_cell[site2]
        delta = int(self.cell_loc[direction, cell1] - self.cell_loc[direction, cell2]) % L
        if 2 * delta > L:
            delta -= L
        return delta

    def site_to_site_vec(self,
                         site1: int,
                         site2: int,
                         out: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Shortest real-space vector from site2 to site1 under PBC.

        Parameters
        ----------
        site1, site2 : int
            End and start site.
        out : np.ndarray, shape (3,), optional
            Buffer to write the result into. It is overwritten.

        Returns
        -------
        vector : np.ndarray, shape (3,)
            ``Σ_d delta_d a_d + b(orbit1) - b(orbit2)`` where ``delta_d`` is
            the minimum-image cell displacement along direction d.
        """
        site1 = self._check_site(site1, "site1")
        site2 = self._check_site(site2, "site2")
        if out is None:
            out = np.zeros(3)
        else:
            out[:] = 0.0

        lvecs = self.geometry.lvecs
        for direction in range(3):
            delta = self.cell_displacement(site1, site2, direction)
            out += delta * lvecs[:, direction]

        bvecs = self.geometry.bvecs
        out += bvecs[:, self.site_to_orbit[site1]] - bvecs[:, self.site_to_orbit[site2]]
        return out

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def to_dataframe(self) -> pd.DataFrame:
        """
        Site table for labelling output data.

        Returns
        -------
        table : pd.DataFrame
            One row per site with columns site, cell, orbit, l1, l2, l3,
            x, y, z.
        """
        locs = self.cell_loc[:, self.site_to_cell]
        return pd.DataFrame({
            'site': np.arange(self.nsites),
            'cell': self.site_to_cell,
            'orbit': self.site_to_orbit,
            'l1': locs[0],
            'l2': locs[1],
            'l3': locs[2],
            'x': self.positions[0],
            'y': self.positions[1],
            'z': self.positions[2],
        })

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the geometry and extents to plain Python types."""
        return {
            'geometry': self.geometry.to_dict(),
            'L1': self.L1,
            'L2': self.L2,
            'L3': self.L3,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Lattice':
        """Rebuild a Lattice from ``to_dict`` output."""
        if 'geometry' not in data or 'L1' not in data:
            raise InvalidArgumentError("lattice data needs 'geometry' and 'L1'")
        geometry = Geometry.from_dict(data['geometry'])
        return cls(geometry,
                   L1=data['L1'],
                   L2=data.get('L2', 1),
                   L3=data.get('L3', 1))

    def __repr__(self) -> str:
        """String representation of the lattice."""
        return (f"Lattice(geometry={self.geometry!r}, "
                f"dims={self.dims.tolist()}, nsites={self.nsites})")

    def __str__(self) -> str:
        """Detailed string representation."""
        with np.printoptions(precision=4, suppress=True, threshold=60):
            lines = [
                "=" * 50,
                "Lattice",
                "=" * 50,
                f"ndim: {self.ndim}",
                f"norbits: {self.norbits}",
                f"ncells: {self.ncells}",
                f"nsites: {self.nsites}",
                f"dims = [L1, L2, L3] = {self.dims.tolist()}",
                "",
                "cell_loc =",
                str(self.cell_loc),
                "",
                "positions =",
                str(self.positions),
                "",
                "kpoints =",
                str(self.kpoints),
                "=" * 50,
            ]
        return "\n".join(lines)
