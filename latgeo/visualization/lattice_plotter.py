"""
Plotting of finite lattices: sites coloured by orbital and neighbor bonds.
"""

from typing import Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.collections import LineCollection

from ..core.errors import InvalidArgumentError
from ..core.lattice import Lattice

orbit_colors = {
    0: '#2E86AB', 1: '#A23B72', 2: '#3CAB70', 3: '#F5B700', 4: '#0F8B8D',
    5: '#8963BA', 6: '#EC9A29', 7: '#2C5784', 8: '#9B4F0F', 9: '#1B998B'
}


def bond_segments(lattice: Lattice, table: np.ndarray) -> np.ndarray:
    """
    Line segments for the bonds of a neighbor table.

    Each bond starts at its initial site and follows the minimum-image
    vector, so bonds crossing the periodic boundary stick out of the
    lattice instead of spanning it.

    Returns
    -------
    segments : np.ndarray, shape (N, 2, 2)
        (x, y) start and end point of every bond.
    """
    table = np.asarray(table)
    if table.ndim != 2 or table.shape[0] != 2:
        raise InvalidArgumentError(f"neighbor table must have shape (2, N), got {table.shape}")

    segments = np.zeros((table.shape[1], 2, 2))
    vector = np.zeros(3)
    for j, (site1, site2) in enumerate(table.T):
        lattice.site_to_site_vec(int(site2), int(site1), out=vector)
        start = lattice.positions[:2, site1]
        segments[j, 0] = start
        segments[j, 1] = start + vector[:2]
    return segments


def plot_lattice(lattice: Lattice,
                 neighbor_tables: Optional[Sequence[np.ndarray]] = None,
                 ax=None,
                 show_labels: bool = False,
                 title: str = "Lattice"):
    """
    Draw the (x, y) projection of a lattice.

    Parameters
    ----------
    lattice : Lattice
        Lattice to draw.
    neighbor_tables : sequence of np.ndarray, optional
        Neighbor tables whose bonds are drawn, one colour per table.
    ax : matplotlib Axes, optional
        Axes to draw into. A new figure is created when omitted.
    show_labels : bool, optional
        Annotate every site with its index.
    title : str, optional
        Axes title.

    Returns
    -------
    ax : matplotlib Axes
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(6, 6))

    for k, table in enumerate(neighbor_tables or []):
        segments = bond_segments(lattice, table)
        color = orbit_colors[(len(orbit_colors) - 1 - k) % len(orbit_colors)]
        ax.add_collection(LineCollection(segments, colors=color, linewidths=1.0,
                                         alpha=0.7, zorder=1))

    x, y = lattice.positions[0], lattice.positions[1]
    for orbit in range(lattice.norbits):
        sites = lattice.sites_of_orbit(orbit)
        ax.scatter(x[sites], y[sites], s=40, zorder=2,
                   color=orbit_colors[orbit % len(orbit_colors)],
                   label=f"orbit {orbit}")

    if show_labels:
        for site in range(lattice.nsites):
            ax.annotate(str(site), (x[site], y[site]), textcoords="offset points",
                        xytext=(3, 3), fontsize=7)

    ax.set_aspect('equal')
    ax.autoscale_view()
    ax.set_xlabel('x')
    ax.set_ylabel('y')
    ax.set_title(title)
    if lattice.norbits > 1:
        ax.legend(loc='upper right', fontsize=8)
    return ax
