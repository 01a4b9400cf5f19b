"""
Performance Benchmark
=====================

Measures raw tick throughput and environment shot throughput.

Usage:
    python -m tools.benchmark_speed [--ticks T] [--steps S] [--quick]
"""

from __future__ import annotations

import argparse
import sys
import time

import numpy as np

from gauntlet.orb_core.config_loader import load_config
from gauntlet.orb_core.env_gym import GauntletEnv
from gauntlet.orb_core.game import GauntletGame


def benchmark_core_game(
    num_ticks: int = 20000,
    seed: int = 42
) -> dict:
    """
    Benchmark raw GauntletGame ticks without Gym overhead.

    A random aim is fired whenever the launcher is loaded.

    Args:
        num_ticks: Number of ticks.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    config = load_config()
    game = GauntletGame(config=config, seed=seed)
    rng = np.random.default_rng(seed)
    max_angle = config.projectile.max_aim_angle

    game.start(seed=seed)
    shots = 0
    runs = 1
    start = time.perf_counter()

    for _ in range(num_ticks):
        if game.aiming_orb is not None:
            game.set_aim(rng.uniform(-max_angle, max_angle))
            if game.fire():
                shots += 1
        game.tick()
        if game.is_over:
            game.start()
            runs += 1

    elapsed = time.perf_counter() - start

    return {
        "mode": "core_game",
        "num_steps": num_ticks,
        "shots": shots,
        "runs": runs,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_ticks / elapsed,
        "ms_per_step": (elapsed * 1000) / num_ticks
    }


def benchmark_single_env(
    num_steps: int = 500,
    seed: int = 42
) -> dict:
    """
    Benchmark environment performance (one step = one shot).

    Args:
        num_steps: Number of steps to run.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    env = GauntletEnv()
    rng = np.random.default_rng(seed)
    low, high = float(env.action_space.low), float(env.action_space.high)

    # Warmup
    env.reset(seed=seed)
    for _ in range(10):
        _, _, terminated, truncated, _ = env.step(rng.uniform(low, high))
        if terminated or truncated:
            env.reset()

    env.reset(seed=seed)
    total_ticks = 0
    start = time.perf_counter()

    for _ in range(num_steps):
        _, _, terminated, truncated, info = env.step(rng.uniform(low, high))
        total_ticks += info["ticks"]
        if terminated or truncated:
            env.reset()

    elapsed = time.perf_counter() - start
    env.close()

    return {
        "mode": "env",
        "num_steps": num_steps,
        "ticks": total_ticks,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def run_all_benchmarks(ticks: int = 20000, steps: int = 500) -> list:
    """Run comprehensive benchmarks."""
    results = []

    print("=" * 60)
    print("ORB GAUNTLET PERFORMANCE BENCHMARK")
    print("=" * 60)
    print()

    print("Benchmarking GauntletGame (raw ticks)...")
    result = benchmark_core_game(num_ticks=ticks)
    results.append(result)
    print(f"  Ticks/sec: {result['steps_per_second']:.1f}")
    print(f"  ms/tick:   {result['ms_per_step']:.4f}")
    print(f"  Shots: {result['shots']}  Runs: {result['runs']}")
    print()

    print("Benchmarking GauntletEnv (shots)...")
    result = benchmark_single_env(num_steps=steps)
    results.append(result)
    print(f"  Steps/sec: {result['steps_per_second']:.1f}")
    print(f"  ms/step:   {result['ms_per_step']:.3f}")
    print(f"  Avg ticks/step: {result['ticks'] / max(1, result['num_steps']):.1f}")
    print()

    print("=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print()
    print(f"{'Mode':<20} {'Steps':>8} {'Steps/s':>12} {'ms/step':>10}")
    print("-" * 52)
    for r in results:
        print(f"{r['mode']:<20} {r['num_steps']:>8} "
              f"{r['steps_per_second']:>12.1f} {r['ms_per_step']:>10.3f}")

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark orb gauntlet performance")
    parser.add_argument("--ticks", type=int, default=20000, help="Ticks for the raw game benchmark")
    parser.add_argument("--steps", type=int, default=500, help="Env steps (shots)")
    parser.add_argument("--quick", action="store_true", help="Quick benchmark (fewer steps)")

    args = parser.parse_args()

    if args.quick:
        run_all_benchmarks(ticks=2000, steps=50)
    else:
        run_all_benchmarks(ticks=args.ticks, steps=args.steps)

    return 0


if __name__ == "__main__":
    sys.exit(main())
