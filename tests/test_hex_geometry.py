"""
Tests for hex grid geometry and the orb grid.
"""

import itertools

import pytest

from gauntlet.orb_core.config_loader import LevelLayout, load_config
from gauntlet.orb_core.hex_geometry import HexGeometry, distance
from gauntlet.orb_core.orb_grid import OrbGrid


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def geometry(config):
    return HexGeometry(config)


@pytest.fixture
def grid(geometry):
    return OrbGrid(geometry)


class TestCellProjection:
    """Test cell to pixel mapping."""

    def test_origin_cell(self, geometry):
        """Cell (0, 0) sits one radius below the ceiling at origin_x."""
        assert geometry.cell_to_position(0, 0) == (60.0, 20.0)

    def test_odd_rows_shift_right(self, geometry):
        """Odd rows are offset by one radius."""
        assert geometry.cell_to_position(1, 0) == (80.0, 54.0)
        assert geometry.cell_to_position(2, 3) == (180.0, 88.0)

    def test_columns_one_diameter_apart(self, geometry):
        """Adjacent columns are one orb diameter apart."""
        x0, _ = geometry.cell_to_position(4, 2)
        x1, _ = geometry.cell_to_position(4, 3)
        assert x1 - x0 == pytest.approx(geometry.orb_diameter)


class TestNeighbors:
    """Test parity-dependent adjacency."""

    def test_even_row_neighbors(self, geometry):
        """Even rows reach diagonally to the left."""
        assert geometry.neighbors_of(2, 3) == {
            (2, 2), (2, 4), (1, 3), (3, 3), (1, 2), (3, 2)
        }

    def test_odd_row_neighbors(self, geometry):
        """Odd rows reach diagonally to the right."""
        assert geometry.neighbors_of(1, 3) == {
            (1, 2), (1, 4), (0, 3), (2, 3), (0, 4), (2, 4)
        }

    def test_left_edge_drops_negative_columns(self, geometry):
        """Columns below zero are never neighbors."""
        assert geometry.neighbors_of(0, 0) == {(0, 1), (-1, 0), (1, 0)}

    def test_usable_column_limit(self, geometry):
        """Neighbor lookups stop at usable_cols even though the grid is wider."""
        assert geometry.usable_cols == 9
        assert geometry.cols == 12
        assert (0, 9) not in geometry.neighbors_of(0, 8)

    def test_adjacency_is_symmetric(self, geometry):
        """b in neighbors(a) implies a in neighbors(b) inside the usable area."""
        for row in range(1, 12):
            for col in range(geometry.usable_cols):
                for n_row, n_col in geometry.neighbors_of(row, col):
                    if n_row < 0:
                        continue
                    assert (row, col) in geometry.neighbors_of(n_row, n_col)

    def test_neighbors_touch(self, geometry):
        """Every neighbor center lies within one diameter (plus row skew)."""
        center = geometry.cell_to_position(3, 4)
        for cell in geometry.neighbors_of(3, 4):
            assert distance(center, geometry.cell_to_position(*cell)) <= 41.0


class TestNearestEmptyCell:
    """Test snapping positions to cells."""

    def test_exact_center(self, geometry):
        """A position on a cell center picks that cell."""
        assert geometry.nearest_empty_cell((180.0, 88.0), set()) == (2, 3)

    def test_skips_occupied(self, geometry):
        """Occupied cells are never returned."""
        assert geometry.nearest_empty_cell((60.0, 20.0), {(0, 0)}) == (1, 0)

    def test_tie_goes_to_first_scanned(self, geometry):
        """Equidistant cells resolve in row-major order."""
        assert geometry.nearest_empty_cell((80.0, 20.0), set()) == (0, 0)

    def test_accepts_any_iterable(self, geometry):
        """Occupied cells may be passed as a list."""
        assert geometry.nearest_empty_cell((60.0, 20.0), [(0, 0)]) == (1, 0)


class TestOrbGrid:
    """Test the cell -> orb mapping."""

    def test_place_and_get(self, grid):
        """Placed orbs are found by cell and project to pixels."""
        orb = grid.place(1, 3, 2, 3)
        assert grid.get((2, 3)) is orb
        assert (2, 3) in grid
        assert orb.position == (180.0, 88.0)

    def test_get_missing_returns_none(self, grid):
        """Empty and out-of-range cells return None."""
        assert grid.get((0, 0)) is None
        assert grid.get((-5, 99)) is None

    def test_place_on_occupied_raises(self, grid):
        """A cell holds at most one orb."""
        grid.place(1, 0, 0, 0)
        with pytest.raises(ValueError):
            grid.place(2, 1, 0, 0)

    def test_remove(self, grid):
        """Removing returns the orb and frees the cell."""
        orb = grid.place(1, 0, 0, 0)
        assert grid.remove((0, 0)) is orb
        assert len(grid) == 0
        assert grid.remove((0, 0)) is None

    def test_max_row(self, grid):
        """max_row is -1 for an empty grid, else the deepest row."""
        assert grid.max_row == -1
        grid.place(1, 0, 0, 0)
        grid.place(2, 0, 4, 2)
        assert grid.max_row == 4

    def test_shift_down_rekeys_and_reprojects(self, grid):
        """Shifting moves every orb one row and updates its position."""
        orb = grid.place(1, 2, 0, 3)
        assert grid.shift_down() == 1
        assert grid.get((0, 3)) is None
        assert grid.get((1, 3)) is orb
        assert orb.position == (200.0, 54.0)

    def test_from_layout(self, config, geometry):
        """Layouts load with fresh unique IDs."""
        layout = LevelLayout.from_cells({(0, 0): 1, (0, 1): 2, (2, 5): 6}, config.grid.cols)
        grid = OrbGrid.from_layout(layout, geometry, itertools.count(1))
        assert len(grid) == 3
        assert grid.get((2, 5)).color == 6
        assert len({orb.uid for orb in grid}) == 3
        assert grid.colors_present() == {1, 2, 6}

    def test_jiggle_decays_to_zero(self, grid):
        """Jiggle counts down by one per tick and stops at zero."""
        orb = grid.place(1, 0, 0, 0)
        orb.jiggle = 2
        for _ in range(5):
            grid.decay_jiggle()
        assert orb.jiggle == 0
