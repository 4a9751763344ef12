"""
Configuration loading and saving.
"""

from .config import (
    LatticeConfig,
    geometry_from_config,
    lattice_from_config,
    load_config,
    save_config,
)

__all__ = [
    'LatticeConfig',
    'geometry_from_config',
    'lattice_from_config',
    'load_config',
    'save_config',
]
