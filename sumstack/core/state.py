"""
Game State & Transitions
========================

GameState is an immutable value; every change goes through
``transition(state, action, generator, config)``, which returns a new
state plus a description of what happened. The same function serves the
interactive session, the Gymnasium wrapper and tests.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Tuple, Union

from sumstack.core.config_loader import GameConfig
from sumstack.core.grid import Grid, block_ids, create_empty, find_block, grid_violations, iter_blocks
from sumstack.core.gravity import clear_and_collapse
from sumstack.core.rng import BlockGenerator
from sumstack.core.scoring import ScoreEvent, ScoreRules
from sumstack.core.selection import SelectionOutcome, evaluate_selection, toggle_selection
from sumstack.core.spawner import seed_grid, spawn_row


class GameMode(str, Enum):
    """Classic: a row spawns after every clear. Time: a row spawns on countdown expiry."""
    CLASSIC = "classic"
    TIME = "time"

    @classmethod
    def parse(cls, mode: Union[str, "GameMode"]) -> "GameMode":
        """Accept a GameMode or its string value."""
        if isinstance(mode, cls):
            return mode
        try:
            return cls(str(mode).lower())
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown game mode {mode!r}, expected one of: {valid}") from None


@dataclass(frozen=True)
class GameState:
    """Complete game state. Terminal once game_over is True."""
    grid: Grid
    target: int
    score: int
    level: int
    game_over: bool
    selected_ids: Tuple[int, ...]  # Click order
    mode: GameMode
    time_left: float
    max_time: float


@dataclass(frozen=True)
class ClickBlock:
    """Player clicked a block."""
    block_id: int


@dataclass(frozen=True)
class Tick:
    """One countdown period elapsed."""


@dataclass(frozen=True)
class SpawnRow:
    """Grow the stack by one row."""


Action = Union[ClickBlock, Tick, SpawnRow]


@dataclass
class TransitionResult:
    """Outcome of applying one action."""
    state: GameState
    outcome: Optional[SelectionOutcome] = None
    selection_sum: int = 0
    score_event: Optional[ScoreEvent] = None
    spawned: bool = False
    schedule_spawn: bool = False  # Caller should run SpawnRow after the spawn delay

    @property
    def delta_score(self) -> int:
        return self.score_event.points if self.score_event is not None else 0


def idle_state(config: GameConfig) -> GameState:
    """State before the first game starts: empty grid, nothing running."""
    return GameState(
        grid=create_empty(config.grid.rows, config.grid.cols),
        target=config.target.min_value,
        score=0,
        level=config.scoring.start_level,
        game_over=False,
        selected_ids=(),
        mode=GameMode.CLASSIC,
        time_left=config.timing.max_time,
        max_time=config.timing.max_time
    )


def new_game(
    mode: Union[str, GameMode],
    generator: BlockGenerator,
    config: GameConfig
) -> GameState:
    """
    Fresh state: bottom rows seeded, random target, zero score.

    Raises:
        ValueError: If mode is not a known game mode.
    """
    mode = GameMode.parse(mode)
    grid_cfg = config.grid
    grid = seed_grid(grid_cfg.rows, grid_cfg.cols, grid_cfg.initial_rows, generator)
    return GameState(
        grid=grid,
        target=generator.target(),
        score=0,
        level=config.scoring.start_level,
        game_over=False,
        selected_ids=(),
        mode=mode,
        time_left=config.timing.max_time,
        max_time=config.timing.max_time
    )


def _click(
    state: GameState,
    block_id: int,
    generator: BlockGenerator,
    config: GameConfig
) -> TransitionResult:
    if state.game_over:
        return TransitionResult(state)

    # Stale ids (block already cleared) are ignored
    if find_block(state.grid, block_id) is None:
        return TransitionResult(state)

    selected = toggle_selection(state.selected_ids, block_id)
    total, outcome = evaluate_selection(state.grid, selected, state.target)

    if outcome is SelectionOutcome.MATCH:
        event = ScoreRules(config).score_clear(len(selected), state.target)
        new_state = replace(
            state,
            grid=clear_and_collapse(state.grid, selected),
            selected_ids=(),
            score=state.score + event.points,
            target=generator.target(),
            time_left=state.max_time
        )
        return TransitionResult(
            new_state,
            outcome=outcome,
            selection_sum=total,
            score_event=event,
            schedule_spawn=state.mode is GameMode.CLASSIC
        )

    if outcome is SelectionOutcome.OVERSHOOT:
        return TransitionResult(
            replace(state, selected_ids=()),
            outcome=outcome,
            selection_sum=total
        )

    return TransitionResult(
        replace(state, selected_ids=selected),
        outcome=outcome,
        selection_sum=total
    )


def _spawn(state: GameState, generator: BlockGenerator) -> TransitionResult:
    if state.game_over:
        return TransitionResult(state)

    result = spawn_row(state.grid, generator)
    if result.game_over:
        return TransitionResult(replace(state, game_over=True))
    return TransitionResult(replace(state, grid=result.grid), spawned=True)


def _tick(state: GameState, generator: BlockGenerator, config: GameConfig) -> TransitionResult:
    if state.game_over or state.mode is not GameMode.TIME:
        return TransitionResult(state)

    # Rounded so 100 steps of 0.1 land exactly on zero
    remaining = round(state.time_left - config.timing.tick_step, 9)
    if remaining > 0:
        return TransitionResult(replace(state, time_left=remaining))

    result = _spawn(state, generator)
    result.state = replace(result.state, time_left=state.max_time)
    return result


def transition(
    state: GameState,
    action: Action,
    generator: BlockGenerator,
    config: GameConfig
) -> TransitionResult:
    """
    Apply one action to a state.

    Args:
        state: Current state (never modified).
        action: ClickBlock, Tick or SpawnRow.
        generator: Source of new targets and blocks.
        config: Game configuration.

    Returns:
        TransitionResult holding the new state.
    """
    if isinstance(action, ClickBlock):
        return _click(state, action.block_id, generator, config)
    if isinstance(action, Tick):
        return _tick(state, generator, config)
    if isinstance(action, SpawnRow):
        return _spawn(state, generator)
    raise TypeError(f"Unsupported action: {action!r}")


def state_violations(state: GameState, config: GameConfig) -> List[str]:
    """
    Check the invariants every reachable state must satisfy.

    Returns:
        Descriptions of violated invariants; empty when the state is valid.
    """
    problems = grid_violations(state.grid)

    present = block_ids(state.grid)
    for block_id in state.selected_ids:
        if block_id not in present:
            problems.append(f"selected id {block_id} is not on the grid")

    for block in iter_blocks(state.grid):
        if not config.blocks.contains(block.value):
            problems.append(f"block {block.id} value {block.value} out of range")

    if not config.target.contains(state.target):
        problems.append(f"target {state.target} out of range")
    if state.score < 0:
        problems.append(f"negative score {state.score}")
    if state.time_left < 0:
        problems.append(f"negative time_left {state.time_left}")

    return problems
