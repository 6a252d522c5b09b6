"""
Scoring System
==============

Awards points for cleared blocks based on game configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sumstack.core.config_loader import GameConfig, get_config


@dataclass
class ScoreEvent:
    """Record of a scoring event."""
    points: int
    blocks_cleared: int
    target: int

    def __repr__(self) -> str:
        return f"ScoreEvent(cleared={self.blocks_cleared}, target={self.target}, points={self.points})"


class ScoreRules:
    """Flat points per cleared block."""

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize score rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._points_per_block = config.scoring.points_per_block

    @property
    def points_per_block(self) -> int:
        return self._points_per_block

    def score_clear(self, blocks_cleared: int, target: int) -> ScoreEvent:
        """
        Score a successful match.

        Args:
            blocks_cleared: Number of blocks in the matched selection.
            target: The target that was matched.
        """
        return ScoreEvent(
            points=blocks_cleared * self._points_per_block,
            blocks_cleared=blocks_cleared,
            target=target
        )
