#!/usr/bin/env python3
"""
Benchmark factorize + divisor expansion.

Draws inputs from a fixed pool with a seeded RNG, factorizes each against
the shared sieve and sums its divisors. The checksum is the divisor sum
modulo 2^64, so runs with the same seed and pool are comparable.

Usage:
    python benchmark_factor.py
    python benchmark_factor.py --iterations 5000 --sorted
"""

import argparse
import sys
import time
from pathlib import Path
from typing import List, Tuple

import numpy as np
import yaml

from sievefactor.config import load_config
from sievefactor.shared import expand_divisors, factorize, rebuild_sieve


def benchmark(options: List[int], bound: int, iterations: int, seed: int,
              sort: bool = False) -> Tuple[int, float]:
    """
    Time repeated factorize + expand_divisors calls.

    The sieve build is not timed. Leaves the shared sieve at bound 0.

    Returns
    -------
    (int, float)
        Divisor-sum checksum (mod 2^64) and elapsed seconds.
    """
    rng = np.random.default_rng(seed)
    picks = rng.integers(len(options), size=iterations)

    rebuild_sieve(bound)

    t0 = time.time()
    total = 0
    for i in picks:
        divisors = expand_divisors(factorize(options[i]), sort=sort)
        total = (total + int(divisors.view(np.uint64).sum(dtype=np.uint64))) % 2**64
    elapsed = time.time() - t0

    rebuild_sieve(0)
    return total, elapsed


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Benchmark sieve factorization')
    parser.add_argument('--config', type=str, default=None,
                        help='Path to config file (default: config/default.yaml if present)')
    parser.add_argument('--iterations', type=int, default=None, help='Number of queries')
    parser.add_argument('--bound', type=int, default=None, help='Sieve bound')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed')
    parser.add_argument('--sorted', action='store_true', help='Expand divisors in ascending order')
    args = parser.parse_args(argv)

    try:
        bench = load_config(Path(args.config) if args.config else None)['benchmark']
    except (OSError, yaml.YAMLError, ValueError) as e:
        parser.error(f"cannot load config: {e}")

    iterations = bench['iterations'] if args.iterations is None else args.iterations
    bound = bench['bound'] if args.bound is None else args.bound
    seed = bench['seed'] if args.seed is None else args.seed
    options = bench['options']

    if iterations < 0:
        parser.error("--iterations must be >= 0")
    largest = max(options)
    if max(bound, 1) ** 2 < largest:
        parser.error(f"--bound {bound} too small for input {largest}")

    print("=" * 60)
    print(f"Factorization benchmark: {iterations:,} queries, bound = {bound:,}")
    print("=" * 60)

    total, elapsed = benchmark(options, bound, iterations, seed, sort=args.sorted)

    print(f"sum = {total}")
    print(f"{elapsed:.3f}s")
    return 0


if __name__ == '__main__':
    sys.exit(main())
