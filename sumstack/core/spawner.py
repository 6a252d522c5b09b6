"""
Row Spawner
===========

Grows the stack by one row and detects game over.
"""

from __future__ import annotations

from dataclasses import dataclass

from sumstack.core.grid import Block, Grid, create_empty, from_rows, grid_shape, is_row_occupied
from sumstack.core.rng import BlockGenerator


@dataclass
class SpawnResult:
    """Result of a row spawn attempt."""
    grid: Grid
    game_over: bool

    @staticmethod
    def spawned(grid: Grid) -> "SpawnResult":
        return SpawnResult(grid, False)

    @staticmethod
    def blocked(grid: Grid) -> "SpawnResult":
        return SpawnResult(grid, True)


def _fresh_row(row: int, cols: int, generator: BlockGenerator, is_new: bool):
    return tuple(
        Block(
            id=generator.next_id(),
            value=generator.block_value(),
            row=row,
            col=c,
            is_new=is_new
        )
        for c in range(cols)
    )


def seed_grid(rows: int, cols: int, filled_rows: int, generator: BlockGenerator) -> Grid:
    """
    Build the starting grid with the bottom rows filled.

    Rows are generated bottom-up, left to right.
    """
    cells = list(create_empty(rows, cols))
    for r in range(rows - 1, rows - 1 - filled_rows, -1):
        cells[r] = _fresh_row(r, cols, generator, is_new=False)
    return tuple(cells)


def spawn_row(grid: Grid, generator: BlockGenerator) -> SpawnResult:
    """
    Shift every row up by one and fill the bottom row with new blocks.

    The top row is checked before shifting: if it already holds a block
    the game is over and the grid is returned untouched.

    Args:
        grid: Current grid (left untouched).
        generator: Source of ids and values for the new row.

    Returns:
        SpawnResult with the new grid, or the old grid and game_over=True.
    """
    if is_row_occupied(grid, 0):
        return SpawnResult.blocked(grid)

    rows, cols = grid_shape(grid)
    shifted = [
        tuple(cell.moved_to(r) if cell is not None else None for cell in grid[r + 1])
        for r in range(rows - 1)
    ]
    shifted.append(_fresh_row(rows - 1, cols, generator, is_new=True))
    return SpawnResult.spawned(from_rows(shifted))
