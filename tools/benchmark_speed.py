"""
Performance Benchmark
=====================

Measures frame throughput of the soil simulation for performance tuning.

Random actions quickly drive the excavator off the road, so the benchmark
keeps the base still and only exercises the arm and scoop.

Usage:
    python -m tools.benchmark_speed [--steps S] [--levels 1 2 3]
"""

from __future__ import annotations

import argparse
import sys
import time
from typing import List
import numpy as np

from excavator_arcade.soil_core.config_loader import load_config
from excavator_arcade.soil_core.effector import CONTROL_NAMES, ExcavatorControls
from excavator_arcade.soil_core.game import CoreGame
from excavator_arcade.soil_core.env_gym import ExcavatorEnv


# Controls that never move the base
ARM_CONTROLS = ("cab_left", "cab_right", "boom_up", "boom_down", "stick_in", "stick_out", "scoop")


def random_action(rng: np.random.Generator) -> np.ndarray:
    """Random binary control vector with the drive keys released."""
    action = np.zeros(len(CONTROL_NAMES), dtype=np.int8)
    for name in ARM_CONTROLS:
        action[CONTROL_NAMES.index(name)] = rng.integers(0, 2)
    return action


def benchmark_env(
    num_steps: int = 1000,
    level: int = 1,
    seed: int = 42
) -> dict:
    """
    Benchmark the Gymnasium environment.

    Args:
        num_steps: Number of steps to run.
        level: Level to play.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    env = ExcavatorEnv(level=level)
    rng = np.random.default_rng(seed)

    # Warmup
    env.reset(seed=seed)
    for _ in range(10):
        _, _, terminated, truncated, _ = env.step(random_action(rng))
        if terminated or truncated:
            env.reset()

    # Benchmark
    env.reset(seed=seed)
    start = time.perf_counter()

    for _ in range(num_steps):
        _, _, terminated, truncated, _ = env.step(random_action(rng))
        if terminated or truncated:
            env.reset()

    elapsed = time.perf_counter() - start
    env.close()

    return {
        "mode": "env",
        "level": level,
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def benchmark_core_game(
    num_steps: int = 1000,
    level: int = 1,
    seed: int = 42
) -> dict:
    """
    Benchmark raw CoreGame without Gym overhead.

    Args:
        num_steps: Number of steps.
        level: Level to play.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    config = load_config()
    game = CoreGame(config=config, seed=seed, level=level)
    rng = np.random.default_rng(seed)

    game.reset(seed=seed)
    start = time.perf_counter()

    for _ in range(num_steps):
        result = game.step(ExcavatorControls.from_array(random_action(rng)))
        if result.is_over:
            game.reset()

    elapsed = time.perf_counter() - start

    return {
        "mode": "core_game",
        "level": level,
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def run_all_benchmarks(levels: List[int], steps: int = 500) -> list:
    """Run every benchmark mode on every level."""
    results = []

    print("=" * 60)
    print("EXCAVATOR SOIL SIMULATION BENCHMARK")
    print("=" * 60)
    print()

    for level in levels:
        print(f"Benchmarking CoreGame (level {level})...")
        result = benchmark_core_game(num_steps=steps, level=level)
        results.append(result)
        print(f"  Steps/sec: {result['steps_per_second']:.1f}")
        print(f"  ms/step:   {result['ms_per_step']:.3f}")
        print()

        print(f"Benchmarking ExcavatorEnv (level {level})...")
        result = benchmark_env(num_steps=steps, level=level)
        results.append(result)
        print(f"  Steps/sec: {result['steps_per_second']:.1f}")
        print(f"  ms/step:   {result['ms_per_step']:.3f}")
        print()

    print("=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print()
    print(f"{'Mode':<20} {'Level':>6} {'Steps/s':>12} {'ms/step':>10}")
    print("-" * 50)

    for r in results:
        print(f"{r['mode']:<20} {r['level']:>6} {r['steps_per_second']:>12.1f} {r['ms_per_step']:>10.3f}")

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark excavator simulation performance")
    parser.add_argument("--steps", type=int, default=500, help="Steps per benchmark")
    parser.add_argument("--levels", type=int, nargs="+", default=[1, 2, 3],
                        help="Levels to benchmark")
    parser.add_argument("--quick", action="store_true", help="Quick benchmark (fewer steps)")

    args = parser.parse_args()

    steps = 100 if args.quick else args.steps

    run_all_benchmarks(levels=args.levels, steps=steps)

    return 0


if __name__ == "__main__":
    sys.exit(main())
