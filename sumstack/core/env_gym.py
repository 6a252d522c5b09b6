"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to SumStack.
Reward is always 0.0 - agents compute their own from info.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from sumstack.core.config_loader import GameConfig, load_config
from sumstack.core.game import GameSession
from sumstack.core.grid import format_grid
from sumstack.core.scheduler import ManualScheduler
from sumstack.core.state import GameMode


class SumStackEnv(gym.Env):
    """
    SumStack as a Gymnasium environment.

    Action Space:
        Discrete(rows * cols). Action ``a`` clicks cell
        ``(a // cols, a % cols)``; clicking an empty cell does nothing.

    Observation Space:
        Dict with the value grid, selection and new-row masks, target,
        score, selected sum, countdown and mode.

    Reward:
        Always 0.0. Agents compute their own reward from the info dict.

    Time:
        The session runs on a virtual clock. After every step the clock
        advances by ``env.step_seconds`` from the config, which resolves
        classic-mode deferred spawns and drives the time-mode countdown.
    """

    metadata = {
        "render_modes": ["ansi"],
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        mode: Union[str, GameMode] = GameMode.CLASSIC,
        render_mode: Optional[str] = None,
        debug: bool = False,
    ):
        """
        Initialize SumStack environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            mode: "classic" or "time".
            render_mode: "ansi" for a text board, None for headless.
            debug: If True, prints a line per step.
        """
        super().__init__()

        self._config = load_config(config_path)
        self._mode = GameMode.parse(mode)
        self.render_mode = render_mode
        self._debug = debug

        self._scheduler = ManualScheduler()
        self._session = GameSession(config=self._config, scheduler=self._scheduler)
        self._steps = 0

        grid = self._config.grid
        self.action_space = spaces.Discrete(grid.rows * grid.cols)
        self.observation_space = self._build_observation_space()

        if self._debug:
            print(f"[DEBUG] SumStackEnv initialized")
            print(f"[DEBUG]   Grid: {grid.rows}x{grid.cols}, mode={self._mode.value}")
            print(f"[DEBUG]   Step seconds: {self._config.env.step_seconds}")

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        grid = self._config.grid
        shape = (grid.rows, grid.cols)
        blocks = self._config.blocks
        target = self._config.target
        max_sum = blocks.max_value * grid.rows * grid.cols

        return spaces.Dict({
            "values": spaces.Box(low=0, high=blocks.max_value, shape=shape, dtype=np.int8),
            "selected": spaces.MultiBinary(shape),
            "is_new": spaces.MultiBinary(shape),
            "target": spaces.Box(low=target.min_value, high=target.max_value, shape=(), dtype=np.int32),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "selected_sum": spaces.Box(low=0, high=max_sum, shape=(), dtype=np.int32),
            "time_left": spaces.Box(low=0, high=self._config.timing.max_time, shape=(), dtype=np.float32),
            "mode": spaces.Discrete(len(GameMode)),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for reproducibility.
            options: Optional {"mode": "classic" | "time"} override.

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        if options and "mode" in options:
            self._mode = GameMode.parse(options["mode"])

        self._session.init_game(self._mode, seed=seed)
        self._steps = 0

        obs = self._session.snapshot().to_obs_dict()
        info = self._session.get_info()
        info["delta_score"] = 0
        info["outcome"] = None

        return obs, info

    def step(
        self,
        action: Union[int, np.integer, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Click one cell, then let virtual time pass.

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.

        Raises:
            ValueError: If action is outside the action space.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item())
        action = int(action)
        if not self.action_space.contains(action):
            raise ValueError(f"Action {action} outside action space {self.action_space}")

        cols = self._config.grid.cols
        row, col = divmod(action, cols)

        score_before = self._session.score
        result = self._session.click_cell(row, col)
        self._scheduler.advance(self._config.env.step_seconds)
        self._steps += 1

        obs = self._session.snapshot().to_obs_dict()
        terminated = self._session.is_over
        truncated = not terminated and self._steps >= self._config.env.max_steps

        info = self._session.get_info()
        info["delta_score"] = self._session.score - score_before
        info["outcome"] = result.outcome.value if result.outcome is not None else None

        if self._debug:
            print(f"[DEBUG] Step: cell=({row}, {col}), outcome={info['outcome']}, "
                  f"sum={info['selected_sum']}/{info['target']}, score={info['score']}")
            if terminated:
                print(f"[DEBUG] TERMINATED: score={info['score']}")

        return obs, 0.0, terminated, truncated, info

    def valid_actions(self) -> np.ndarray:
        """Boolean mask of actions that click an occupied cell."""
        return (self._session.snapshot().block_ids >= 0).reshape(-1)

    def render(self) -> Optional[str]:
        """
        Render the current game state.

        Returns:
            Text board if render_mode is "ansi", None otherwise.
        """
        if self.render_mode != "ansi":
            return None

        state = self._session.state
        header = (f"target={state.target} sum={self._session.selected_sum} "
                  f"score={state.score} time={state.time_left:.1f}")
        return header + "\n" + format_grid(state.grid, state.selected_ids)

    def close(self) -> None:
        """Clean up resources."""
        self._session.close()

    @property
    def session(self) -> GameSession:
        """Access to underlying session (for debugging/tools)."""
        return self._session

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
