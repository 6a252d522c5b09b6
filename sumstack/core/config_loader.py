"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml


@dataclass(frozen=True)
class GridConfig:
    """Grid geometry."""
    rows: int            # Row 0 is the top row
    cols: int
    initial_rows: int    # Rows filled from the bottom on a new game


@dataclass(frozen=True)
class RangeConfig:
    """Inclusive integer range."""
    min_value: int
    max_value: int

    def contains(self, value: int) -> bool:
        return self.min_value <= value <= self.max_value


@dataclass(frozen=True)
class TimingConfig:
    """Countdown and deferred spawn timing (seconds / time units)."""
    tick_period: float
    tick_step: float
    max_time: float
    spawn_delay: float


@dataclass(frozen=True)
class ScoringConfig:
    """Scoring parameters."""
    points_per_block: int
    start_level: int


@dataclass(frozen=True)
class EnvConfig:
    """Gymnasium wrapper parameters."""
    step_seconds: float
    max_steps: int


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    grid: GridConfig
    blocks: RangeConfig
    target: RangeConfig
    timing: TimingConfig
    scoring: ScoringConfig
    env: EnvConfig

    @property
    def num_cells(self) -> int:
        """Total number of grid cells."""
        return self.grid.rows * self.grid.cols


def _parse_range(data: dict, section: str) -> RangeConfig:
    """Parse a min/max section."""
    if "min_value" not in data or "max_value" not in data:
        raise ValueError(f"{section} must define min_value and max_value, got {data}")
    return RangeConfig(
        min_value=int(data["min_value"]),
        max_value=int(data["max_value"])
    )


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    grid = config.grid
    if grid.rows <= 0 or grid.cols <= 0:
        raise ValueError(f"grid dimensions must be positive, got {grid.rows}x{grid.cols}")

    if not 0 <= grid.initial_rows < grid.rows:
        raise ValueError(
            f"grid.initial_rows ({grid.initial_rows}) must be in [0, {grid.rows})"
        )

    for name, value_range in (("blocks", config.blocks), ("target", config.target)):
        if value_range.min_value > value_range.max_value:
            raise ValueError(
                f"{name}.min_value ({value_range.min_value}) exceeds "
                f"{name}.max_value ({value_range.max_value})"
            )

    # Blocks are always positive
    if config.blocks.min_value < 1:
        raise ValueError(f"blocks.min_value must be >= 1, got {config.blocks.min_value}")

    timing = config.timing
    for key in ("tick_period", "tick_step", "max_time"):
        if getattr(timing, key) <= 0:
            raise ValueError(f"timing.{key} must be positive, got {getattr(timing, key)}")
    if timing.spawn_delay < 0:
        raise ValueError(f"timing.spawn_delay must be >= 0, got {timing.spawn_delay}")

    if config.scoring.points_per_block <= 0:
        raise ValueError(
            f"scoring.points_per_block must be positive, got {config.scoring.points_per_block}"
        )
    if config.scoring.start_level < 1:
        raise ValueError(f"scoring.start_level must be >= 1, got {config.scoring.start_level}")

    if config.env.step_seconds < 0 or config.env.max_steps <= 0:
        raise ValueError(
            f"env.step_seconds must be >= 0 and env.max_steps positive, got {config.env}"
        )


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    grid_data = raw["grid"]
    grid = GridConfig(
        rows=int(grid_data["rows"]),
        cols=int(grid_data["cols"]),
        initial_rows=int(grid_data.get("initial_rows", 4))
    )

    blocks = _parse_range(raw["blocks"], "blocks")
    target = _parse_range(raw["target"], "target")

    timing_data = raw["timing"]
    timing = TimingConfig(
        tick_period=float(timing_data.get("tick_period", 0.1)),
        tick_step=float(timing_data.get("tick_step", 0.1)),
        max_time=float(timing_data["max_time"]),
        spawn_delay=float(timing_data.get("spawn_delay", 0.3))
    )

    scoring_data = raw["scoring"]
    scoring = ScoringConfig(
        points_per_block=int(scoring_data["points_per_block"]),
        start_level=int(scoring_data.get("start_level", 1))
    )

    # Env section is optional
    env_data = raw.get("env", {})
    env = EnvConfig(
        step_seconds=float(env_data.get("step_seconds", 0.5)),
        max_steps=int(env_data.get("max_steps", 2000))
    )

    config = GameConfig(
        grid=grid,
        blocks=blocks,
        target=target,
        timing=timing,
        scoring=scoring,
        env=env
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
