"""
Tests for the grid model and gravity collapse.
"""

import random

import pytest

from sumstack.core.grid import (
    Block,
    block_ids,
    column_heights,
    create_empty,
    find_block,
    format_grid,
    from_rows,
    grid_violations,
    is_row_occupied,
    with_cells,
)
from sumstack.core.gravity import apply_gravity, clear_and_collapse, remove_blocks


def grid_from_values(values):
    """Build a grid from nested lists of ints / None; ids count up from 1."""
    next_id = 1
    rows = []
    for r, row in enumerate(values):
        cells = []
        for c, value in enumerate(row):
            if value is None:
                cells.append(None)
            else:
                cells.append(Block(id=next_id, value=value, row=r, col=c))
                next_id += 1
        rows.append(cells)
    return from_rows(rows)


def column_ids(grid, col):
    """Ids in a column, top to bottom."""
    return [row[col].id for row in grid if row[col] is not None]


@pytest.fixture
def scattered():
    return grid_from_values([
        [4, None, None],
        [None, 2, None],
        [7, None, None],
        [None, 5, 1],
    ])


class TestGridQueries:
    """Test grid construction and lookup."""

    def test_create_empty(self):
        grid = create_empty(10, 6)
        assert len(grid) == 10
        assert all(len(row) == 6 for row in grid)
        assert all(cell is None for row in grid for cell in row)

    def test_find_block(self, scattered):
        block = find_block(scattered, 3)
        assert block is not None
        assert (block.row, block.col, block.value) == (2, 0, 7)

    def test_find_missing_block(self, scattered):
        assert find_block(scattered, 999) is None

    def test_is_row_occupied(self, scattered):
        empty = create_empty(3, 3)
        assert not is_row_occupied(empty, 0)
        assert is_row_occupied(scattered, 0)
        assert is_row_occupied(scattered, 3)

    def test_with_cells_copies(self, scattered):
        """with_cells leaves the source grid untouched."""
        updated = with_cells(scattered, {(0, 0): None})
        assert updated[0][0] is None
        assert scattered[0][0] is not None

    def test_violations_detect_stale_coordinates(self):
        grid = from_rows([[Block(id=1, value=3, row=1, col=0)], [None]])
        problems = grid_violations(grid)
        assert len(problems) == 1
        assert "claims" in problems[0]

    def test_violations_detect_duplicate_ids(self):
        grid = from_rows([
            [Block(id=1, value=3, row=0, col=0), Block(id=1, value=4, row=0, col=1)]
        ])
        assert any("duplicate" in p for p in grid_violations(grid))

    def test_format_grid_marks_selection(self, scattered):
        text = format_grid(scattered, selected=[1])
        assert text.splitlines()[0].startswith("[4]")


class TestGravity:
    """Test per-column compaction."""

    def test_blocks_fall_to_bottom(self, scattered):
        settled = apply_gravity(scattered)
        assert column_heights(settled) == [2, 2, 1]
        assert settled[3][0].value == 7
        assert settled[2][0].value == 4
        assert settled[3][1].value == 5
        assert settled[2][1].value == 2
        assert grid_violations(settled, check_gravity=True) == []

    def test_moved_blocks_carry_new_row(self, scattered):
        settled = apply_gravity(scattered)
        for r, row in enumerate(settled):
            for c, block in enumerate(row):
                if block is not None:
                    assert (block.row, block.col) == (r, c)

    def test_order_preserved(self, scattered):
        """Relative top-to-bottom order per column survives compaction."""
        settled = apply_gravity(scattered)
        for col in range(3):
            assert column_ids(settled, col) == column_ids(scattered, col)

    def test_idempotent(self, scattered):
        once = apply_gravity(scattered)
        assert apply_gravity(once) == once

    def test_random_grids(self):
        """Order preservation and idempotence on random sparse grids."""
        rng = random.Random(7)
        for _ in range(50):
            values = [
                [rng.randint(1, 9) if rng.random() < 0.4 else None for _ in range(6)]
                for _ in range(10)
            ]
            grid = grid_from_values(values)
            settled = apply_gravity(grid)
            assert grid_violations(settled, check_gravity=True) == []
            assert block_ids(settled) == block_ids(grid)
            for col in range(6):
                assert column_ids(settled, col) == column_ids(grid, col)
            assert apply_gravity(settled) == settled

    def test_columns_independent(self):
        grid = grid_from_values([
            [1, None],
            [None, 2],
            [None, None],
        ])
        settled = apply_gravity(grid)
        assert settled[2][0].value == 1
        assert settled[2][1].value == 2

    def test_moved_blocks_lose_new_flag(self):
        grid = from_rows([
            [Block(id=1, value=4, row=0, col=0, is_new=True)],
            [None],
        ])
        settled = apply_gravity(grid)
        assert settled[1][0].is_new is False

    def test_remove_then_collapse(self):
        grid = grid_from_values([
            [3],
            [8],
            [5],
        ])
        assert remove_blocks(grid, {2})[1][0] is None
        collapsed = clear_and_collapse(grid, {2})
        assert [row[0].value if row[0] else None for row in collapsed] == [None, 3, 5]
        assert collapsed[1][0].row == 1
