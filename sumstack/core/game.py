"""
Game Session
============

Main game orchestrator: holds the current state, feeds player clicks and
timer ticks through the transition function, and owns every timer the
game schedules.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple, Union

from sumstack.core.config_loader import GameConfig, get_config
from sumstack.core.countdown import CountdownController
from sumstack.core.grid import format_grid
from sumstack.core.rng import BlockGenerator
from sumstack.core.scheduler import ManualScheduler, TimerGroup
from sumstack.core.selection import selection_sum
from sumstack.core.state import (
    Action,
    ClickBlock,
    GameMode,
    GameState,
    SpawnRow,
    Tick,
    TransitionResult,
    idle_state,
    new_game,
    transition,
)
from sumstack.core.state_snapshot import GameSnapshot, SnapshotBuilder

logger = logging.getLogger(__name__)


class GameSession:
    """
    One player's game.

    Orchestrates:
    - Selection and clears (via the transition function)
    - Deferred row spawn after classic-mode clears
    - Time-mode countdown
    - Snapshots for the presentation layer

    Every timer lives in one TimerGroup; starting a new game, reaching
    game over or closing the session cancels whatever is pending.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        scheduler=None,
        generator: Optional[BlockGenerator] = None
    ):
        """
        Initialize session.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility.
            scheduler: ManualScheduler or AsyncioScheduler. A fresh
                ManualScheduler if None.
            generator: Block generator. Seeded BlockGenerator if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed
        self._generator = generator if generator is not None else BlockGenerator(config, seed)
        self._scheduler = scheduler if scheduler is not None else ManualScheduler()
        self._timers = TimerGroup(self._scheduler)
        self._countdown = CountdownController(
            self._timers,
            config.timing.tick_period,
            self._on_tick
        )
        self._snapshot_builder = SnapshotBuilder(config)

        self._state: GameState = idle_state(config)
        self._games_started: int = 0
        self._spawns: int = 0
        self._closed: bool = False

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def scheduler(self):
        """Scheduler driving deferred spawns and the countdown."""
        return self._scheduler

    @property
    def generator(self) -> BlockGenerator:
        return self._generator

    @property
    def state(self) -> GameState:
        """Current immutable state."""
        return self._state

    @property
    def score(self) -> int:
        return self._state.score

    @property
    def target(self) -> int:
        return self._state.target

    @property
    def mode(self) -> GameMode:
        return self._state.mode

    @property
    def is_over(self) -> bool:
        """True if game has ended."""
        return self._state.game_over

    @property
    def selected_ids(self) -> Tuple[int, ...]:
        return self._state.selected_ids

    @property
    def selected_sum(self) -> int:
        """Sum of the currently selected block values."""
        return selection_sum(self._state.grid, self._state.selected_ids)

    @property
    def countdown_running(self) -> bool:
        return self._countdown.running

    @property
    def pending_timers(self) -> int:
        """Timers (countdown and deferred spawns) still able to fire."""
        return self._timers.active_count

    @property
    def spawns(self) -> int:
        """Rows spawned during the current game."""
        return self._spawns

    def init_game(self, mode: Union[str, GameMode] = GameMode.CLASSIC, seed: Optional[int] = None) -> GameState:
        """
        Start a fresh game, discarding the current one.

        Args:
            mode: "classic" or "time".
            seed: New random seed. Keeps the current RNG stream if None.

        Returns:
            The initial state.

        Raises:
            ValueError: If mode is unknown.
        """
        mode = GameMode.parse(mode)
        if self._closed:
            raise RuntimeError("GameSession is closed")

        cancelled = self._timers.cancel_all()
        self._countdown.stop()
        if cancelled:
            logger.debug("Cancelled %d pending timers from previous game", cancelled)

        if seed is not None:
            self._seed = seed
        self._generator.reset(seed)

        self._state = new_game(mode, self._generator, self._config)
        self._games_started += 1
        self._spawns = 0
        logger.info("Game %d started: mode=%s target=%d", self._games_started, mode.value, self._state.target)

        self._sync_countdown()
        return self._state

    def handle_block_click(self, block_id: int) -> TransitionResult:
        """
        Toggle a block in the selection and resolve the result.

        Ignored once the game is over or when the id is no longer on the grid.
        """
        return self._dispatch(ClickBlock(block_id))

    def click_cell(self, row: int, col: int) -> TransitionResult:
        """Click whatever block occupies a cell; empty or off-grid cells are ignored."""
        grid = self._config.grid
        if not (0 <= row < grid.rows and 0 <= col < grid.cols):
            return TransitionResult(self._state)
        block = self._state.grid[row][col]
        if block is None:
            return TransitionResult(self._state)
        return self.handle_block_click(block.id)

    def spawn_row(self) -> TransitionResult:
        """Grow the stack immediately (or end the game if the top row is full)."""
        return self._dispatch(SpawnRow())

    def _on_tick(self) -> None:
        self._dispatch(Tick())

    def _on_deferred_spawn(self) -> None:
        self._dispatch(SpawnRow())

    def _dispatch(self, action: Action) -> TransitionResult:
        was_over = self._state.game_over
        result = transition(self._state, action, self._generator, self._config)
        self._state = result.state

        if result.score_event is not None:
            logger.debug(
                "Cleared %d blocks for %d points (score=%d, next target=%d)",
                result.score_event.blocks_cleared,
                result.score_event.points,
                self._state.score,
                self._state.target
            )
        elif result.outcome is not None:
            logger.debug("Selection sum %d -> %s", result.selection_sum, result.outcome.value)

        if result.spawned:
            self._spawns += 1
            logger.debug("Row spawned (%d this game)", self._spawns)

        if result.schedule_spawn:
            self._timers.call_later(self._config.timing.spawn_delay, self._on_deferred_spawn)

        if self._state.game_over and not was_over:
            logger.info("Game over: score=%d\n%s", self._state.score, format_grid(self._state.grid))
            self._timers.cancel_all()

        self._sync_countdown()
        return result

    def _sync_countdown(self) -> None:
        self._countdown.sync(
            not self._closed
            and self._state.mode is GameMode.TIME
            and not self._state.game_over
        )

    def snapshot(self) -> GameSnapshot:
        """Build a read-only snapshot of the current state."""
        return self._snapshot_builder.build(self._state)

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        return {
            "score": self._state.score,
            "target": self._state.target,
            "level": self._state.level,
            "mode": self._state.mode.value,
            "game_over": self._state.game_over,
            "selected_sum": self.selected_sum,
            "time_left": self._state.time_left,
            "spawns": self._spawns,
        }

    def close(self) -> None:
        """Cancel every timer. The session cannot start new games afterwards."""
        if self._closed:
            return
        self._closed = True
        self._countdown.stop()
        self._timers.cancel_all()

    def __enter__(self) -> "GameSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
