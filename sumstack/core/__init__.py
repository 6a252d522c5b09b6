"""
SumStack Core - The game engine.

This module provides the grid model, transition function, session
orchestrator and supporting systems (generators, gravity, row spawning,
scheduling, countdown), plus a Gymnasium wrapper.

Main exports:
- GameSession: Orchestrator exposing init_game / handle_block_click
- transition: Pure (GameState, Action) -> TransitionResult function
- SumStackEnv: Gymnasium environment (one step = one cell click)
- GameConfig: Configuration loaded from game_config.yaml
"""

from sumstack.core.config_loader import GameConfig, load_config
from sumstack.core.grid import Block, create_empty, find_block, is_row_occupied
from sumstack.core.rng import BlockGenerator, SequenceGenerator
from sumstack.core.selection import SelectionOutcome
from sumstack.core.state import (
    ClickBlock,
    GameMode,
    GameState,
    SpawnRow,
    Tick,
    TransitionResult,
    new_game,
    transition,
)
from sumstack.core.scheduler import AsyncioScheduler, ManualScheduler, TimerGroup
from sumstack.core.game import GameSession
from sumstack.core.state_snapshot import GameSnapshot
from sumstack.core.env_gym import SumStackEnv

__all__ = [
    "GameConfig",
    "load_config",
    "Block",
    "create_empty",
    "find_block",
    "is_row_occupied",
    "BlockGenerator",
    "SequenceGenerator",
    "SelectionOutcome",
    "ClickBlock",
    "GameMode",
    "GameState",
    "SpawnRow",
    "Tick",
    "TransitionResult",
    "new_game",
    "transition",
    "AsyncioScheduler",
    "ManualScheduler",
    "TimerGroup",
    "GameSession",
    "GameSnapshot",
    "SumStackEnv",
]
