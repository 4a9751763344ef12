"""
Unit tests for neighbor tables.

Tests:
- calc_neighbor_table contents and validation
- sort_neighbor_table canonical form, ordering and permutation
"""

import numpy as np
import pytest
from latgeo.core.errors import InvalidArgumentError
from latgeo.core.geometry import ChainGeometry, HoneycombGeometry, SquareGeometry
from latgeo.core.lattice import Lattice, calc_neighbor_table, sort_neighbor_table


@pytest.fixture
def chain4():
    return Lattice(ChainGeometry(), L1=4)


class TestCalcNeighborTable:
    """Test neighbor table construction."""

    def test_chain_scenario(self, chain4):
        """+1 bonds on a 4-site ring: (0,1), (1,2), (2,3), (3,0)."""
        table = calc_neighbor_table(chain4, 0, 0, [1, 0, 0])

        assert table.tolist() == [[0, 1, 2, 3], [1, 2, 3, 0]]

    def test_shape_and_order(self):
        lattice = Lattice(HoneycombGeometry(), L1=3, L2=3)
        table = calc_neighbor_table(lattice, 1, 0, [1, 0, 0])

        assert table.shape == (2, lattice.nsites // lattice.norbits)
        # Initial sites are the orbit-1 sites in ascending order
        assert table[0].tolist() == list(range(1, lattice.nsites, 2))
        assert np.all(lattice.site_to_orbit[table[1]] == 0)

    def test_matches_site_to_site(self):
        lattice = Lattice(HoneycombGeometry(), L1=4, L2=3)
        displacement = [-1, 2, 0]
        table = calc_neighbor_table(lattice, 0, 1, displacement)

        for initial, final in table.T:
            assert final == lattice.site_to_site(int(initial), displacement, 1)

    def test_honeycomb_bonds_are_nearest_neighbors(self):
        """The three A→B bonds all have length a/√3."""
        lattice = Lattice(HoneycombGeometry(lattice_constant=1.0), L1=4, L2=4)

        for displacement in ([0, 0, 0], [-1, 0, 0], [0, -1, 0]):
            table = calc_neighbor_table(lattice, 0, 1, displacement)
            for initial, final in table.T:
                vec = lattice.site_to_site_vec(int(final), int(initial))
                assert np.isclose(np.linalg.norm(vec), 1 / np.sqrt(3))

    def test_accepts_numpy_displacement(self, chain4):
        table = calc_neighbor_table(chain4, 0, 0, np.array([2, 0, 0]))

        assert table[1].tolist() == [2, 3, 0, 1]

    @pytest.mark.parametrize("displacement", [[1, 0], [1, 0, 0, 0], [[1, 0, 0]]])
    def test_bad_displacement_length_raises(self, chain4, displacement):
        with pytest.raises(InvalidArgumentError, match="displacement"):
            calc_neighbor_table(chain4, 0, 0, displacement)

    def test_non_integer_displacement_raises(self, chain4):
        with pytest.raises(InvalidArgumentError, match="integers"):
            calc_neighbor_table(chain4, 0, 0, [0.5, 0, 0])

    @pytest.mark.parametrize("orbit1, orbit2", [(2, 0), (0, 2), (-1, 0)])
    def test_bad_orbit_raises(self, orbit1, orbit2):
        lattice = Lattice(HoneycombGeometry(), L1=2, L2=2)

        with pytest.raises(InvalidArgumentError, match="orbit"):
            calc_neighbor_table(lattice, orbit1, orbit2, [0, 0, 0])


class TestSortNeighborTable:
    """Test canonical sorting with permutation tracking."""

    def test_chain_scenario(self, chain4):
        """Sorted ring bonds: (0,1), (0,3), (1,2), (2,3); column 1 came from column 3."""
        table = calc_neighbor_table(chain4, 0, 0, [1, 0, 0])
        permutation = sort_neighbor_table(table)

        assert table.tolist() == [[0, 0, 1, 2], [1, 3, 2, 3]]
        assert permutation.tolist() == [0, 3, 1, 2]
        assert permutation[1] == 3

    def test_sorted_properties(self):
        lattice = Lattice(SquareGeometry(), L1=5, L2=4)
        table = np.concatenate([
            calc_neighbor_table(lattice, 0, 0, [1, 0, 0]),
            calc_neighbor_table(lattice, 0, 0, [0, 1, 0]),
            calc_neighbor_table(lattice, 0, 0, [-1, -1, 0]),
        ], axis=1)
        original = table.copy()

        permutation = sort_neighbor_table(table)

        # first <= second in every column
        assert np.all(table[0] <= table[1])
        # columns lexicographically non-decreasing
        keys = list(zip(table[0], table[1]))
        assert keys == sorted(keys)
        # permutation maps back to the canonicalized original columns
        canonical = np.sort(original, axis=0)
        assert np.array_equal(table, canonical[:, permutation])
        assert sorted(permutation.tolist()) == list(range(original.shape[1]))

    def test_sort_is_stable(self):
        """Equal columns keep their original relative order."""
        table = np.array([[3, 1, 1, 2], [1, 3, 3, 0]])
        permutation = sort_neighbor_table(table)

        assert table.tolist() == [[0, 1, 1, 1], [2, 3, 3, 3]]
        assert permutation.tolist() == [3, 0, 1, 2]

    def test_reorders_measurements(self, chain4):
        """Data collected in the original order can be permuted to the sorted order."""
        table = calc_neighbor_table(chain4, 0, 0, [1, 0, 0])
        data = np.array([10.0, 11.0, 12.0, 13.0])

        permutation = sort_neighbor_table(table)

        assert data[permutation].tolist() == [10.0, 13.0, 11.0, 12.0]

    @pytest.mark.parametrize("table", [
        np.zeros((3, 4), dtype=int),
        np.zeros(4, dtype=int),
        np.zeros((2, 2, 2), dtype=int),
    ])
    def test_bad_shape_raises(self, table):
        with pytest.raises(InvalidArgumentError, match=r"shape \(2, N\)"):
            sort_neighbor_table(table)

    def test_list_input_raises(self):
        with pytest.raises(InvalidArgumentError):
            sort_neighbor_table([[0, 1], [1, 0]])

    def test_float_table_raises(self):
        with pytest.raises(InvalidArgumentError, match="integers"):
            sort_neighbor_table(np.zeros((2, 3)))

    def test_read_only_table_raises(self):
        table = np.array([[1, 0], [0, 1]])
        table.setflags(write=False)

        with pytest.raises(InvalidArgumentError, match="read-only"):
            sort_neighbor_table(table)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
