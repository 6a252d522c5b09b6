"""
Tests for block generation and row spawning.
"""

import pytest

from sumstack.core.config_loader import load_config
from sumstack.core.grid import block_ids, create_empty, from_rows, grid_violations, is_row_occupied, Block
from sumstack.core.rng import BlockGenerator, SequenceGenerator
from sumstack.core.spawner import seed_grid, spawn_row


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def generator(config):
    return BlockGenerator(config, seed=42)


class TestBlockGenerator:
    """Test value, target and id generation."""

    def test_values_in_range(self, config, generator):
        values = {generator.block_value() for _ in range(500)}
        assert values == set(range(config.blocks.min_value, config.blocks.max_value + 1))

    def test_targets_in_range(self, config, generator):
        targets = {generator.target() for _ in range(500)}
        assert min(targets) >= config.target.min_value
        assert max(targets) <= config.target.max_value

    def test_ids_are_unique(self, generator):
        ids = [generator.next_id() for _ in range(1000)]
        assert len(set(ids)) == 1000
        assert generator.ids_issued == 1000

    def test_deterministic_with_seed(self, config):
        """Same seed should produce same sequence."""
        g1 = BlockGenerator(config, seed=7)
        g2 = BlockGenerator(config, seed=7)
        assert [g1.block_value() for _ in range(30)] == [g2.block_value() for _ in range(30)]

    def test_reset_restores_sequence(self, config):
        generator = BlockGenerator(config, seed=3)
        first = [generator.target() for _ in range(10)]
        generator.reset(seed=3)
        assert [generator.target() for _ in range(10)] == first
        assert generator.next_id() == 1

    def test_sequence_generator_cycles(self, config):
        generator = SequenceGenerator([1, 2], [10], config)
        assert [generator.block_value() for _ in range(5)] == [1, 2, 1, 2, 1]
        assert generator.target() == 10
        generator.reset()
        assert generator.block_value() == 1

    def test_sequence_generator_needs_values(self, config):
        with pytest.raises(ValueError):
            SequenceGenerator([], [10], config)

    def test_sequence_generator_rejects_out_of_range(self, config):
        with pytest.raises(ValueError, match="Block values"):
            SequenceGenerator([5, 0], [10], config)
        with pytest.raises(ValueError, match="Targets"):
            SequenceGenerator([5], [10, 21], config)


class TestSeedGrid:
    """Test the starting grid."""

    def test_bottom_rows_filled(self, config, generator):
        grid = seed_grid(10, 6, 4, generator)
        for r in range(10):
            assert is_row_occupied(grid, r) == (r >= 6)
        assert len(block_ids(grid)) == 24
        assert grid_violations(grid, check_gravity=True) == []

    def test_seeded_blocks_not_new(self, generator):
        grid = seed_grid(10, 6, 4, generator)
        assert not any(cell.is_new for row in grid for cell in row if cell is not None)


class TestSpawnRow:
    """Test shifting, the new bottom row and game over detection."""

    def test_shift_up_by_one(self, generator):
        grid = seed_grid(10, 6, 4, generator)
        result = spawn_row(grid, generator)

        assert not result.game_over
        new = result.grid
        for r in range(9):
            for c in range(6):
                before = grid[r + 1][c]
                after = new[r][c]
                if before is None:
                    assert after is None
                else:
                    assert after.id == before.id
                    assert after.value == before.value
                    assert (after.row, after.col) == (r, c)
        assert grid_violations(new, check_gravity=True) == []

    def test_bottom_row_fully_populated_and_new(self, config, generator):
        grid = seed_grid(10, 6, 4, generator)
        new = spawn_row(grid, generator).grid
        bottom = new[9]
        assert all(cell is not None and cell.is_new for cell in bottom)
        assert all(config.blocks.contains(cell.value) for cell in bottom)
        assert not any(cell.is_new for row in new[:9] for cell in row if cell is not None)
        assert block_ids(grid) < block_ids(new)

    def test_top_row_occupied_is_game_over(self, generator):
        grid = seed_grid(10, 6, 4, generator)
        for _ in range(6):
            grid = spawn_row(grid, generator).grid
        assert is_row_occupied(grid, 0)

        result = spawn_row(grid, generator)
        assert result.game_over
        assert result.grid == grid

    def test_single_block_in_top_row_blocks(self, generator):
        grid = from_rows(
            [[None, Block(id=99, value=5, row=0, col=1)]]
            + [[None, Block(id=100 + r, value=5, row=r, col=1)] for r in range(1, 3)]
        )
        result = spawn_row(grid, generator)
        assert result.game_over
        assert result.grid is grid

    def test_empty_grid_spawns(self, generator):
        result = spawn_row(create_empty(3, 2), generator)
        assert not result.game_over
        assert result.grid[0] == (None, None)
        assert result.grid[1] == (None, None)
        assert all(cell is not None for cell in result.grid[2])
