"""
Grid Model
==========

Immutable block matrix. Row 0 is the top row; gravity pulls toward the
last row. Every helper returns a new grid instead of mutating one, so a
snapshot handed to a renderer stays consistent while the game moves on.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple


@dataclass(frozen=True)
class Block:
    """A numbered, clickable block occupying one grid cell."""
    id: int
    value: int
    row: int
    col: int
    is_new: bool = False  # Set only on blocks from the most recent row spawn

    def moved_to(self, row: int) -> "Block":
        """Copy of this block relocated to another row of the same column."""
        return replace(self, row=row, is_new=False)


Row = Tuple[Optional[Block], ...]
Grid = Tuple[Row, ...]


def create_empty(rows: int, cols: int) -> Grid:
    """Grid of all-empty cells."""
    return tuple(tuple(None for _ in range(cols)) for _ in range(rows))


def grid_shape(grid: Grid) -> Tuple[int, int]:
    """(rows, cols) of a grid."""
    rows = len(grid)
    return rows, (len(grid[0]) if rows else 0)


def from_rows(rows: Iterable[Iterable[Optional[Block]]]) -> Grid:
    """Freeze nested lists into a grid."""
    return tuple(tuple(row) for row in rows)


def to_lists(grid: Grid) -> List[List[Optional[Block]]]:
    """Mutable working copy of a grid."""
    return [list(row) for row in grid]


def iter_blocks(grid: Grid) -> Iterator[Block]:
    """Yield occupied cells, top-to-bottom then left-to-right."""
    for row in grid:
        for cell in row:
            if cell is not None:
                yield cell


def block_ids(grid: Grid) -> Set[int]:
    """Ids of every block on the grid."""
    return {block.id for block in iter_blocks(grid)}


def find_block(grid: Grid, block_id: int) -> Optional[Block]:
    """
    Find a block by id.

    Linear scan; the grid is small and fixed-size.

    Returns:
        The block, or None if no cell holds that id.
    """
    for block in iter_blocks(grid):
        if block.id == block_id:
            return block
    return None


def is_row_occupied(grid: Grid, row: int) -> bool:
    """True if any cell in the given row holds a block."""
    return any(cell is not None for cell in grid[row])


def column_heights(grid: Grid) -> List[int]:
    """Number of occupied cells per column."""
    rows, cols = grid_shape(grid)
    return [
        sum(1 for r in range(rows) if grid[r][c] is not None)
        for c in range(cols)
    ]


def with_cells(grid: Grid, updates: Dict[Tuple[int, int], Optional[Block]]) -> Grid:
    """
    Copy of a grid with some cells replaced.

    Args:
        grid: Source grid (left untouched).
        updates: Mapping of (row, col) to the new cell content.
    """
    cells = to_lists(grid)
    for (r, c), block in updates.items():
        cells[r][c] = block
    return from_rows(cells)


def grid_violations(grid: Grid, check_gravity: bool = False) -> List[str]:
    """
    Collect structural invariant violations.

    Args:
        grid: Grid to inspect.
        check_gravity: Also report blocks with an empty cell beneath them.

    Returns:
        Human-readable descriptions; empty when the grid is consistent.
    """
    problems: List[str] = []
    seen: Set[int] = set()
    rows, cols = grid_shape(grid)

    for r in range(rows):
        if len(grid[r]) != cols:
            problems.append(f"row {r} has {len(grid[r])} cells, expected {cols}")
            continue
        for c in range(cols):
            block = grid[r][c]
            if block is None:
                continue
            if (block.row, block.col) != (r, c):
                problems.append(
                    f"block {block.id} stored at ({r}, {c}) claims ({block.row}, {block.col})"
                )
            if block.id in seen:
                problems.append(f"duplicate block id {block.id}")
            seen.add(block.id)
            if check_gravity and r + 1 < rows and grid[r + 1][c] is None:
                problems.append(f"block {block.id} floats above empty cell ({r + 1}, {c})")

    return problems


def format_grid(grid: Grid, selected: Iterable[int] = ()) -> str:
    """Text rendering, selected blocks in brackets."""
    chosen = set(selected)
    lines = []
    for row in grid:
        cells = []
        for block in row:
            if block is None:
                cells.append(" . ")
            elif block.id in chosen:
                cells.append(f"[{block.value}]")
            else:
                cells.append(f" {block.value} ")
        lines.append("".join(cells))
    return "\n".join(lines)
