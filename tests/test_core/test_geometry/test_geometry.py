"""
Unit tests for Geometry.

Tests geometric properties:
- Input normalization and padding
- Reciprocal vectors
- Cell/site positions
- Monkhorst-Pack mesh
- Validation and serialization
"""

import numpy as np
import pytest
from latgeo.core.errors import InvalidArgumentError
from latgeo.core.geometry import (
    Geometry,
    calc_cell_pos,
    calc_site_pos,
    cell_locations,
    monkhorst_pack_mesh,
)
from latgeo.core.lattice import Lattice


@pytest.fixture
def chain():
    return Geometry(ndim=1, norbits=1,
                    lattice_vectors=[[1.0, 0.0, 0.0]],
                    basis_vectors=[[0.0, 0.0, 0.0]])


@pytest.fixture
def rectangle_two_orbit():
    return Geometry(ndim=2, norbits=2,
                    lattice_vectors=np.array([[2.0, 0.0], [0.0, 3.0]]),
                    basis_vectors=[[0.0, 0.0], [1.0, 0.5]])


class TestGeometryConstruction:
    """Test normalization of the supplied vectors."""

    def test_list_and_matrix_inputs_agree(self):
        """A list of vectors equals the matrix with those vectors as columns."""
        a1, a2 = [1.0, 0.0], [0.5, np.sqrt(3) / 2]
        from_list = Geometry(2, 1, [a1, a2], [[0.0, 0.0]])
        from_matrix = Geometry(2, 1, np.column_stack([a1, a2]), np.zeros((2, 1)))

        assert from_list == from_matrix
        assert np.allclose(from_list.lattice_vectors[:, 1], [*a2, 0.0])

    def test_padding_into_identity(self, rectangle_two_orbit):
        """Unused directions are filled from the 3x3 identity."""
        lvecs = rectangle_two_orbit.lvecs

        expected = np.array([
            [2.0, 0.0, 0.0],
            [0.0, 3.0, 0.0],
            [0.0, 0.0, 1.0],
        ])
        assert np.allclose(lvecs, expected)

    def test_basis_padded_with_zeros(self, rectangle_two_orbit):
        """Basis vectors gain zero rows up to three components."""
        bvecs = rectangle_two_orbit.bvecs

        assert bvecs.shape == (3, 2)
        assert np.allclose(bvecs[:, 1], [1.0, 0.5, 0.0])
        assert np.allclose(bvecs[2], 0.0)

    def test_stored_vectors_are_three_component_columns(self, chain):
        """One lattice vector and one basis vector, each with 3 components."""
        assert chain.lattice_vectors.shape == (3, 1)
        assert chain.basis_vectors.shape == (3, 1)
        assert chain.lvecs.shape == (3, 3)

    def test_reciprocal_invariant(self, rectangle_two_orbit):
        """rlvecs = 2π inv(lvecs)."""
        geom = rectangle_two_orbit

        assert np.allclose(geom.rlvecs, 2 * np.pi * np.linalg.inv(geom.lvecs))
        assert np.allclose(geom.rlvecs @ geom.lvecs, 2 * np.pi * np.eye(3))

    def test_reciprocal_vectors_oblique(self):
        """a_i · b_j = 2π δ_ij for a non-orthogonal lattice."""
        geom = Geometry(2, 1, [[1.0, 0.0], [0.5, np.sqrt(3) / 2]], [[0.0, 0.0]])
        products = geom.lvecs.T @ geom.reciprocal_vectors

        assert np.allclose(products, 2 * np.pi * np.eye(3))

    def test_arrays_are_read_only(self, chain):
        """Geometry arrays cannot be modified."""
        with pytest.raises(ValueError):
            chain.lvecs[0, 0] = 5.0


class TestOutOfPlaneComponents:
    """Test vectors with components beyond ndim."""

    @pytest.fixture
    def bilayer(self):
        """Square bilayer: two orbitals stacked at z=0 and z=1."""
        return Geometry(2, 2, [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]],
                        [[0.0, 0.0, 0.0], [0.0, 0.0, 1.0]])

    @pytest.fixture
    def tilted_chain(self):
        """Chain running along (1, 1, 0)."""
        return Geometry(1, 1, [[1.0, 1.0, 0.0]], [[0.0, 0.0, 0.0]])

    def test_bilayer_positions(self, bilayer):
        lattice = Lattice(bilayer, L1=2, L2=2)

        assert np.allclose(bilayer.bvecs[:, 1], [0.0, 0.0, 1.0])
        assert np.allclose(lattice.positions[2, 0::2], 0.0)
        assert np.allclose(lattice.positions[2, 1::2], 1.0)

    def test_tilted_chain_lvecs(self, tilted_chain):
        expected = np.array([
            [1.0, 0.0, 0.0],
            [1.0, 1.0, 0.0],
            [0.0, 0.0, 1.0],
        ])
        assert np.allclose(tilted_chain.lvecs, expected)
        assert np.isclose(tilted_chain.cell_volume(), np.sqrt(2))

    def test_tilted_chain_positions(self, tilted_chain):
        lattice = Lattice(tilted_chain, L1=3)

        assert np.allclose(lattice.positions[:, 2], [2.0, 2.0, 0.0])
        assert np.allclose(lattice.positions[2], 0.0)

    def test_tilted_chain_reciprocal_vector(self, tilted_chain):
        """a1 · b1 = 2π even though a1 leaves the x axis."""
        a1 = tilted_chain.lvecs[:, 0]
        b1 = tilted_chain.reciprocal_vectors[:, 0]

        assert np.isclose(a1 @ b1, 2 * np.pi)

    @pytest.mark.parametrize("name", ['bilayer', 'tilted_chain'])
    def test_dict_roundtrip_keeps_components(self, request, name):
        geom = request.getfixturevalue(name)
        rebuilt = Geometry.from_dict(geom.to_dict())

        assert rebuilt == geom
        assert np.allclose(rebuilt.bvecs, geom.bvecs)
        assert np.allclose(rebuilt.lvecs, geom.lvecs)

    def test_lattice_roundtrip_keeps_layer_offset(self, bilayer):
        lattice = Lattice(bilayer, L1=2, L2=3)
        rebuilt = Lattice.from_dict(lattice.to_dict())

        assert rebuilt.geometry == bilayer
        assert np.allclose(rebuilt.positions, lattice.positions)


class TestGeometryValidation:
    """Test input validation."""

    def test_singular_lattice_vectors_raise(self):
        """Linearly dependent lattice vectors raise InvalidArgumentError."""
        with pytest.raises(InvalidArgumentError, match="not invertible"):
            Geometry(2, 1, [[1.0, 0.0], [2.0, 0.0]], [[0.0, 0.0]])

    def test_zero_lattice_vector_raises(self):
        with pytest.raises(InvalidArgumentError):
            Geometry(1, 1, [[0.0]], [[0.0]])

    @pytest.mark.parametrize("ndim", [0, 4, -1])
    def test_bad_ndim_raises(self, ndim):
        with pytest.raises(InvalidArgumentError, match="ndim"):
            Geometry(ndim, 1, [[1.0]], [[0.0]])

    def test_bad_norbits_raises(self):
        with pytest.raises(InvalidArgumentError, match="norbits"):
            Geometry(1, 0, [[1.0]], [[0.0]])

    def test_basis_count_mismatch_raises(self):
        """Number of basis vectors must equal norbits."""
        with pytest.raises(InvalidArgumentError, match="basis vectors"):
            Geometry(1, 2, [[1.0]], [[0.0]])

    def test_non_finite_raises(self):
        with pytest.raises(InvalidArgumentError, match="non-finite"):
            Geometry(1, 1, [[np.nan]], [[0.0]])

    def test_invalid_argument_is_value_error(self):
        """InvalidArgumentError can be caught as ValueError."""
        with pytest.raises(ValueError):
            Geometry(2, 1, [[1.0, 0.0], [1.0, 0.0]], [[0.0, 0.0]])


class TestPositions:
    """Test cell and site position helpers."""

    def test_cell_position(self, rectangle_two_orbit):
        pos = calc_cell_pos(rectangle_two_orbit, 2, 1)

        assert np.allclose(pos, [4.0, 3.0, 0.0])

    def test_site_position_adds_basis(self, rectangle_two_orbit):
        pos = calc_site_pos(rectangle_two_orbit, 1, 2, 1)

        assert np.allclose(pos, [5.0, 3.5, 0.0])

    def test_out_buffer_is_overwritten(self, rectangle_two_orbit):
        """The buffer variant writes into, and returns, the given array."""
        buffer = np.full(3, 99.0)
        result = calc_site_pos(rectangle_two_orbit, 0, 1, 0, out=buffer)

        assert result is buffer
        assert np.allclose(buffer, [2.0, 0.0, 0.0])

    def test_site_position_bad_orbit_raises(self, rectangle_two_orbit):
        with pytest.raises(InvalidArgumentError, match="orbit"):
            calc_site_pos(rectangle_two_orbit, 2, 0)

    def test_fractional_roundtrip(self):
        geom = Geometry(2, 1, [[1.0, 0.0], [0.5, np.sqrt(3) / 2]], [[0.0, 0.0]])
        fractional = np.array([2.0, -1.0, 0.0])

        real = geom.fractional_to_real(fractional)

        assert np.allclose(real, [1.5, -np.sqrt(3) / 2, 0.0])
        assert np.allclose(geom.real_to_fractional(real), fractional)

    def test_cell_volume(self, rectangle_two_orbit):
        assert np.isclose(rectangle_two_orbit.cell_volume(), 6.0)


class TestCellEnumeration:
    """Test canonical cell ordering."""

    def test_order_l1_fastest(self):
        locs = cell_locations(2, 3, 2)

        assert locs.shape == (3, 12)
        for index in range(12):
            l1, l2, l3 = locs[:, index]
            assert index == l1 + l2 * 2 + l3 * 2 * 3

    def test_bad_extent_raises(self):
        with pytest.raises(InvalidArgumentError, match="L2"):
            cell_locations(2, 0, 1)


class TestMonkhorstPackMesh:
    """Test k-point mesh generation."""

    def test_square_2x2(self):
        """2x2 square mesh is {(0,0), (π,0), (0,π), (π,π)} in cell order."""
        geom = Geometry(2, 1, [[1.0, 0.0], [0.0, 1.0]], [[0.0, 0.0]])
        kpoints = monkhorst_pack_mesh(geom, 2, 2)

        expected = np.array([
            [0.0, 0.0, 0.0],
            [np.pi, 0.0, 0.0],
            [0.0, np.pi, 0.0],
            [np.pi, np.pi, 0.0],
        ]).T
        assert np.allclose(kpoints, expected)

    def test_point_count(self):
        geom = Geometry(3, 1, np.eye(3), [[0.0, 0.0, 0.0]])

        assert monkhorst_pack_mesh(geom, 3, 2, 4).shape == (3, 24)

    def test_index_matches_cell_enumeration(self):
        """kpoints[:, i] is built from the location of cell i."""
        geom = Geometry(2, 1, [[1.0, 0.0], [0.5, np.sqrt(3) / 2]], [[0.0, 0.0]])
        kpoints = monkhorst_pack_mesh(geom, 3, 2)
        locs = cell_locations(3, 2)

        for i in range(6):
            l1, l2, _ = locs[:, i]
            expected = (l1 / 3) * geom.reciprocal_vectors[:, 0] + (l2 / 2) * geom.reciprocal_vectors[:, 1]
            assert np.allclose(kpoints[:, i], expected)

    def test_oblique_mesh_uses_rows_of_rlvecs(self):
        """k · a_j = 2π l_j / L_j on a triangular lattice; rlvecs columns would break this."""
        geom = Geometry(2, 1, [[1.0, 0.0], [0.5, np.sqrt(3) / 2]], [[0.0, 0.0]])
        kpoints = monkhorst_pack_mesh(geom, 3, 2)
        locs = cell_locations(3, 2)

        phases = geom.lvecs.T @ kpoints
        assert np.allclose(phases[0], 2 * np.pi * locs[0] / 3)
        assert np.allclose(phases[1], 2 * np.pi * locs[1] / 2)
        assert not np.allclose(kpoints[:, 1], geom.rlvecs[:, 0] / 3)


class TestGeometrySerialization:
    """Test serialization to/from dict and string output."""

    def test_roundtrip(self, rectangle_two_orbit):
        data = rectangle_two_orbit.to_dict()
        rebuilt = Geometry.from_dict(data)

        assert rebuilt == rectangle_two_orbit
        assert rebuilt.to_dict() == data

    def test_to_dict_content(self, rectangle_two_orbit):
        data = rectangle_two_orbit.to_dict()

        assert data['ndim'] == 2
        assert data['norbits'] == 2
        assert data['lattice_vectors'] == [[2.0, 0.0, 0.0], [0.0, 3.0, 0.0]]
        assert data['basis_vectors'] == [[0.0, 0.0, 0.0], [1.0, 0.5, 0.0]]

    def test_from_dict_missing_keys_raises(self):
        with pytest.raises(InvalidArgumentError, match="missing"):
            Geometry.from_dict({'ndim': 1})

    def test_repr(self, chain):
        assert repr(chain) == "Geometry(ndim=1, norbits=1)"

    def test_str_lists_vectors(self, chain):
        text = str(chain)

        assert "Lattice Vectors" in text
        assert "Basis Vectors" in text


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
