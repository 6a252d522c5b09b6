"""
RNG - Block and Target Generation
=================================

The only source of non-determinism in the engine. Everything else is a
pure function of game state plus the values drawn here, so seeding a
generator (or injecting a scripted one) makes a whole session replayable.
"""

from __future__ import annotations

import random
from typing import Optional, Sequence

from sumstack.core.config_loader import GameConfig, get_config


class BlockGenerator:
    """
    Draws block values, targets and block ids.

    Ids come from a monotonic counter, so two blocks of one session can
    never share an id.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize generator.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = random.Random(seed)
        self._next_id: int = 1

    def block_value(self) -> int:
        """Uniform integer in the configured block range."""
        blocks = self._config.blocks
        return self._rng.randint(blocks.min_value, blocks.max_value)

    def target(self) -> int:
        """Uniform integer in the configured target range."""
        target = self._config.target
        return self._rng.randint(target.min_value, target.max_value)

    def next_id(self) -> int:
        """Fresh block id, unique for the lifetime of this generator."""
        block_id = self._next_id
        self._next_id += 1
        return block_id

    @property
    def ids_issued(self) -> int:
        """Number of ids handed out since the last reset."""
        return self._next_id - 1

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Restart the id counter and optionally reseed.

        Args:
            seed: New random seed. Keeps current RNG state if None.
        """
        if seed is not None:
            self._rng = random.Random(seed)
        self._next_id = 1


class SequenceGenerator(BlockGenerator):
    """
    Generator that replays fixed sequences of values and targets.

    Sequences repeat when exhausted. Useful for scripted scenarios and
    replaying recorded games.
    """

    def __init__(
        self,
        values: Sequence[int],
        targets: Sequence[int],
        config: Optional[GameConfig] = None
    ):
        if not values or not targets:
            raise ValueError("SequenceGenerator needs at least one value and one target")
        super().__init__(config, seed=0)
        bad_values = [v for v in values if not self._config.blocks.contains(v)]
        if bad_values:
            raise ValueError(f"Block values out of range: {bad_values}")
        bad_targets = [t for t in targets if not self._config.target.contains(t)]
        if bad_targets:
            raise ValueError(f"Targets out of range: {bad_targets}")
        self._values = tuple(values)
        self._targets = tuple(targets)
        self._value_index = 0
        self._target_index = 0

    def block_value(self) -> int:
        value = self._values[self._value_index % len(self._values)]
        self._value_index += 1
        return value

    def target(self) -> int:
        target = self._targets[self._target_index % len(self._targets)]
        self._target_index += 1
        return target

    def reset(self, seed: Optional[int] = None) -> None:
        """Restart ids and both sequences. The seed is ignored."""
        super().reset()
        self._value_index = 0
        self._target_index = 0
