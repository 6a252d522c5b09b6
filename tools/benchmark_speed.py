"""
Performance Benchmark
=====================

Measures engine throughput with random-clicking players.

Usage:
    python -m tools.benchmark_speed [--steps S] [--mode classic|time]
"""

from __future__ import annotations

import argparse
import sys
import time
import numpy as np

from sumstack.core.config_loader import load_config
from sumstack.core.env_gym import SumStackEnv
from sumstack.core.game import GameSession
from sumstack.core.scheduler import ManualScheduler


def benchmark_env(
    num_steps: int = 1000,
    mode: str = "classic",
    seed: int = 42
) -> dict:
    """
    Benchmark the Gymnasium wrapper with random valid clicks.

    Args:
        num_steps: Number of steps to run.
        mode: Game mode.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    env = SumStackEnv(mode=mode)
    rng = np.random.default_rng(seed)
    episodes = 0
    scores = []

    obs, _ = env.reset(seed=seed)
    start = time.perf_counter()

    for _ in range(num_steps):
        valid = np.flatnonzero(env.valid_actions())
        action = int(rng.choice(valid)) if len(valid) else 0
        obs, _, terminated, truncated, info = env.step(action)
        if terminated or truncated:
            scores.append(info["score"])
            episodes += 1
            obs, _ = env.reset()

    elapsed = time.perf_counter() - start
    env.close()

    return {
        "steps": num_steps,
        "elapsed": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": elapsed / num_steps * 1000,
        "episodes": episodes,
        "mean_score": float(np.mean(scores)) if scores else 0.0,
    }


def benchmark_session(
    num_steps: int = 1000,
    mode: str = "classic",
    seed: int = 42
) -> dict:
    """
    Benchmark GameSession directly, without observation building.

    Returns:
        Dict with timing results.
    """
    config = load_config()
    scheduler = ManualScheduler()
    session = GameSession(config=config, seed=seed, scheduler=scheduler)
    session.init_game(mode)
    rng = np.random.default_rng(seed)
    rows, cols = config.grid.rows, config.grid.cols

    start = time.perf_counter()
    for _ in range(num_steps):
        row, col = divmod(int(rng.integers(rows * cols)), cols)
        session.click_cell(row, col)
        scheduler.advance(config.env.step_seconds)
        if session.is_over:
            session.init_game(mode)
    elapsed = time.perf_counter() - start
    session.close()

    return {
        "steps": num_steps,
        "elapsed": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": elapsed / num_steps * 1000,
    }


def run_all_benchmarks(num_steps: int, mode: str) -> None:
    """Run benchmarks and print results."""
    print("=" * 60)
    print("SUMSTACK ENGINE PERFORMANCE BENCHMARK")
    print("=" * 60)
    print()

    print(f"Benchmarking GameSession (raw, {mode})...")
    result = benchmark_session(num_steps, mode)
    print(f"  Steps/sec: {result['steps_per_second']:.1f}")
    print(f"  ms/step:   {result['ms_per_step']:.3f}")
    print()

    print(f"Benchmarking SumStackEnv ({mode})...")
    result = benchmark_env(num_steps, mode)
    print(f"  Steps/sec:  {result['steps_per_second']:.1f}")
    print(f"  ms/step:    {result['ms_per_step']:.3f}")
    print(f"  Episodes:   {result['episodes']}")
    print(f"  Mean score: {result['mean_score']:.1f}")
    print()


def main():
    parser = argparse.ArgumentParser(description="Benchmark SumStack engine performance")
    parser.add_argument("--steps", type=int, default=2000, help="Steps per benchmark")
    parser.add_argument("--mode", choices=["classic", "time"], default="classic")
    parser.add_argument("--quick", action="store_true", help="Quick benchmark (fewer steps)")
    args = parser.parse_args()

    steps = 200 if args.quick else args.steps
    run_all_benchmarks(steps, args.mode)
    return 0


if __name__ == "__main__":
    sys.exit(main())
