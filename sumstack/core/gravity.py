"""
Gravity Engine
==============

Removes cleared blocks and compacts each column toward the bottom row.
"""

from __future__ import annotations

from typing import Collection

from sumstack.core.grid import Grid, from_rows, grid_shape, to_lists


def remove_blocks(grid: Grid, block_ids: Collection[int]) -> Grid:
    """Copy of the grid with every block whose id is in block_ids emptied."""
    doomed = set(block_ids)
    return tuple(
        tuple(None if cell is not None and cell.id in doomed else cell for cell in row)
        for row in grid
    )


def apply_gravity(grid: Grid) -> Grid:
    """
    Compact every column so blocks rest on the bottom row with no gaps.

    Columns are processed independently, bottom-up, with a write pointer
    that starts at the last row. Relative vertical order is preserved and
    an already-compacted grid comes back unchanged.

    Args:
        grid: Source grid (left untouched).

    Returns:
        Compacted grid. Moved blocks carry their new row index.
    """
    rows, cols = grid_shape(grid)
    cells = to_lists(grid)

    for c in range(cols):
        write_row = rows - 1
        for r in range(rows - 1, -1, -1):
            block = cells[r][c]
            if block is None:
                continue
            if r != write_row:
                cells[write_row][c] = block.moved_to(write_row)
                cells[r][c] = None
            write_row -= 1

    return from_rows(cells)


def clear_and_collapse(grid: Grid, block_ids: Collection[int]) -> Grid:
    """Remove the given blocks, then apply gravity."""
    return apply_gravity(remove_blocks(grid, block_ids))
