"""
State Snapshot
==============

Packs game state into fixed-size numpy arrays for renderers and
Gymnasium observations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple
import numpy as np

from sumstack.core.config_loader import GameConfig, get_config
from sumstack.core.grid import iter_blocks
from sumstack.core.selection import selection_sum
from sumstack.core.state import GameMode, GameState

# Observation code per mode
MODE_CODES = {GameMode.CLASSIC: 0, GameMode.TIME: 1}


@dataclass
class GameSnapshot:
    """
    Read-only view of one game state.

    Grid arrays have shape (rows, cols); empty cells hold 0 in ``values``
    and -1 in ``block_ids``.
    """
    # Core state
    target: int
    score: int
    level: int
    game_over: bool
    mode: GameMode
    time_left: float
    max_time: float
    selected_ids: Tuple[int, ...]
    selected_sum: int
    blocks_count: int

    # Grid arrays
    values: np.ndarray       # (rows, cols) int8
    block_ids: np.ndarray    # (rows, cols) int64
    selected: np.ndarray     # (rows, cols) bool
    is_new: np.ndarray       # (rows, cols) bool

    @property
    def shape(self) -> Tuple[int, int]:
        return self.values.shape

    @property
    def time_fraction(self) -> float:
        """Remaining countdown as a fraction of max_time."""
        return self.time_left / self.max_time if self.max_time > 0 else 0.0

    def block_id_at(self, row: int, col: int) -> Optional[int]:
        """Id of the block in a cell, or None when empty."""
        block_id = int(self.block_ids[row, col])
        return block_id if block_id >= 0 else None

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        return {
            "values": self.values,
            "selected": self.selected,
            "is_new": self.is_new,
            "target": np.array(self.target, dtype=np.int32),
            "score": np.array(self.score, dtype=np.int64),
            "selected_sum": np.array(self.selected_sum, dtype=np.int32),
            "time_left": np.array(self.time_left, dtype=np.float32),
            "mode": np.array(MODE_CODES[self.mode], dtype=np.int32),
        }


class SnapshotBuilder:
    """Builds snapshots sized for the configured grid."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._shape = (config.grid.rows, config.grid.cols)

    def build(self, state: GameState) -> GameSnapshot:
        """Build a snapshot from a game state."""
        values = np.zeros(self._shape, dtype=np.int8)
        block_ids = np.full(self._shape, -1, dtype=np.int64)
        selected = np.zeros(self._shape, dtype=bool)
        is_new = np.zeros(self._shape, dtype=bool)

        chosen = set(state.selected_ids)
        count = 0
        for block in iter_blocks(state.grid):
            values[block.row, block.col] = block.value
            block_ids[block.row, block.col] = block.id
            selected[block.row, block.col] = block.id in chosen
            is_new[block.row, block.col] = block.is_new
            count += 1

        return GameSnapshot(
            target=state.target,
            score=state.score,
            level=state.level,
            game_over=state.game_over,
            mode=state.mode,
            time_left=state.time_left,
            max_time=state.max_time,
            selected_ids=state.selected_ids,
            selected_sum=selection_sum(state.grid, state.selected_ids),
            blocks_count=count,
            values=values,
            block_ids=block_ids,
            selected=selected,
            is_new=is_new
        )
