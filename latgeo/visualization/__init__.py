"""
Visualization tools for lattices.
"""

from .lattice_plotter import bond_segments, plot_lattice

__all__ = [
    'bond_segments',
    'plot_lattice',
]
