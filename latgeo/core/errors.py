"""
Exception types raised by the geometry engine.

Every public operation validates its arguments before producing any
output, so a raised error never leaves a partially built structure behind.
"""


class LatgeoError(Exception):
    """Base class for all latgeo errors."""


class InvalidArgumentError(LatgeoError, ValueError):
    """
    A precondition on an argument was violated.

    Raised for non-positive lattice extents, out-of-range orbital or site
    indices, displacement vectors without exactly three integer components,
    neighbor tables that are not shaped (2, N), and singular lattice-vector
    matrices.
    """


class LatticeInvariantError(LatgeoError, RuntimeError):
    """
    An internal indexing invariant of a Lattice does not hold.

    Sites are created round-robin within each unit cell, so every orbital
    owns exactly ``ncells`` sites at indices ``orbit, orbit + norbits, ...``.
    Neighbor tables and translational sets rely on this layout.
    """
