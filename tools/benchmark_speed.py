"""
Performance Benchmark
=====================

Measures simulation tick throughput for performance tuning.

Usage:
    python -m tools.benchmark_speed [--steps S] [--tap-prob P]
"""

from __future__ import annotations

import argparse
import sys
import time
import numpy as np

from tapjump.core.config_loader import load_config
from tapjump.core.game import CoreGame
from tapjump.core.env_gym import TapJumpEnv


def benchmark_env(
    num_steps: int = 10000,
    tap_prob: float = 0.05,
    seed: int = 42
) -> dict:
    """
    Benchmark the Gymnasium environment with a random tapping policy.

    Args:
        num_steps: Number of steps to run.
        tap_prob: Probability of tapping on each step.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    env = TapJumpEnv()
    rng = np.random.default_rng(seed)
    episodes = 0

    obs, _ = env.reset(seed=seed)
    start = time.perf_counter()

    for _ in range(num_steps):
        action = int(rng.random() < tap_prob)
        obs, _, terminated, truncated, _ = env.step(action)
        if terminated or truncated:
            episodes += 1
            obs, _ = env.reset()

    elapsed = time.perf_counter() - start
    env.close()

    return {
        "mode": "env",
        "num_steps": num_steps,
        "episodes": episodes,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def benchmark_core_game(
    num_steps: int = 10000,
    tap_prob: float = 0.05,
    seed: int = 42
) -> dict:
    """
    Benchmark raw CoreGame ticks without Gym overhead.

    Args:
        num_steps: Number of ticks.
        tap_prob: Probability of tapping on each tick.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    config = load_config()
    game = CoreGame(config=config, seed=seed)
    rng = np.random.default_rng(seed)
    episodes = 0
    best = 0

    game.reset(seed=seed)
    game.start()
    start = time.perf_counter()

    for _ in range(num_steps):
        if rng.random() < tap_prob:
            game.jump()
        result = game.tick()
        if result.collided:
            episodes += 1
            best = max(best, game.score)
            game.tap()

    elapsed = time.perf_counter() - start

    return {
        "mode": "core_game",
        "num_steps": num_steps,
        "episodes": episodes,
        "high_score": max(best, game.high_score),
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def run_all_benchmarks(steps: int = 10000, tap_prob: float = 0.05) -> list:
    """Run both benchmarks and print a summary."""
    results = []

    print("=" * 60)
    print("TAP JUMP SIMULATION BENCHMARK")
    print("=" * 60)
    print()

    print("Benchmarking CoreGame (raw)...")
    result = benchmark_core_game(num_steps=steps, tap_prob=tap_prob)
    results.append(result)
    print(f"  Ticks/sec: {result['steps_per_second']:.1f}")
    print(f"  Episodes:  {result['episodes']} (high score {result['high_score']})")
    print()

    print("Benchmarking TapJumpEnv...")
    result = benchmark_env(num_steps=steps, tap_prob=tap_prob)
    results.append(result)
    print(f"  Steps/sec: {result['steps_per_second']:.1f}")
    print(f"  Episodes:  {result['episodes']}")
    print()

    print("=" * 60)
    print(f"{'Mode':<20} {'Steps/s':>12} {'ms/step':>10}")
    print("-" * 44)
    for r in results:
        print(f"{r['mode']:<20} {r['steps_per_second']:>12.1f} {r['ms_per_step']:>10.4f}")

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark Tap Jump simulation performance")
    parser.add_argument("--steps", type=int, default=10000, help="Ticks per benchmark")
    parser.add_argument("--tap-prob", type=float, default=0.05, help="Per-tick tap probability")
    parser.add_argument("--quick", action="store_true", help="Quick benchmark (fewer steps)")

    args = parser.parse_args()

    steps = 1000 if args.quick else args.steps
    run_all_benchmarks(steps=steps, tap_prob=args.tap_prob)
    return 0


if __name__ == "__main__":
    sys.exit(main())
