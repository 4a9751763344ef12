"""
Configuration loading for lattices.

A lattice configuration is a plain dictionary, stored on disk as JSON:

    {
        "geometry": {"type": "honeycomb", "lattice_constant": 1.0},
        "L1": 6,
        "L2": 6,
        "L3": 1
    }

The geometry entry either names a preset (``type`` plus constructor keyword
arguments) or spells the geometry out explicitly in ``Geometry.to_dict``
form (``ndim``, ``norbits``, ``lattice_vectors``, ``basis_vectors``).
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Union

from ..core.errors import InvalidArgumentError
from ..core.geometry import Geometry, create_geometry
from ..core.lattice import Lattice

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def geometry_from_config(data: Dict[str, Any]) -> Geometry:
    """
    Build a Geometry from its configuration entry.

    Parameters
    ----------
    data : Dict
        Either ``{'type': <preset>, **kwargs}`` or explicit ``Geometry.to_dict``
        data.

    Raises
    ------
    InvalidArgumentError
        If the entry is neither form or names an unknown preset.
    """
    if not isinstance(data, dict):
        raise InvalidArgumentError("geometry configuration must be a dictionary")

    if 'type' in data:
        kwargs = {key: value for key, value in data.items() if key != 'type'}
        try:
            return create_geometry(data['type'], **kwargs)
        except TypeError as err:
            raise InvalidArgumentError(
                f"invalid parameters for geometry '{data['type']}': {sorted(kwargs)}"
            ) from err

    return Geometry.from_dict(data)


@dataclass
class LatticeConfig:
    """
    Named configuration of a finite lattice.

    Attributes
    ----------
    geometry : Dict
        Geometry entry (preset or explicit form).
    L1, L2, L3 : int
        Unit-cell extents along each lattice vector.
    """

    geometry: Dict[str, Any] = field(default_factory=dict)
    L1: int = 1
    L2: int = 1
    L3: int = 1

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LatticeConfig':
        if not isinstance(data, dict):
            raise InvalidArgumentError("lattice configuration must be a dictionary")
        if 'geometry' not in data:
            raise InvalidArgumentError("lattice configuration is missing 'geometry'")
        unknown = set(data) - {'geometry', 'L1', 'L2', 'L3'}
        if unknown:
            raise InvalidArgumentError(f"unknown lattice configuration keys: {sorted(unknown)}")
        return cls(geometry=dict(data['geometry']),
                   L1=data.get('L1', 1),
                   L2=data.get('L2', 1),
                   L3=data.get('L3', 1))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'geometry': dict(self.geometry),
            'L1': self.L1,
            'L2': self.L2,
            'L3': self.L3,
        }

    def build(self) -> Lattice:
        """Construct the configured Lattice."""
        geometry = geometry_from_config(self.geometry)
        return Lattice(geometry, L1=self.L1, L2=self.L2, L3=self.L3)


def lattice_from_config(data: Dict[str, Any]) -> Lattice:
    """Build a Lattice from a configuration dictionary."""
    return LatticeConfig.from_dict(data).build()


def load_config(path: PathLike) -> LatticeConfig:
    """
    Read a lattice configuration from a JSON file.

    Raises
    ------
    InvalidArgumentError
        If the file is not valid JSON or the content is malformed.
    """
    path = Path(path)
    logger.debug("Loading lattice configuration from %s", path)
    with open(path, 'r') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as err:
            raise InvalidArgumentError(f"{path} is not valid JSON: {err}") from err
    return LatticeConfig.from_dict(data)


def save_config(config: LatticeConfig, path: PathLike) -> Path:
    """Write a lattice configuration to a JSON file and return its path."""
    path = Path(path)
    with open(path, 'w') as f:
        json.dump(config.to_dict(), f, indent=4)
    return path
