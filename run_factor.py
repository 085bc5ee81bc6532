#!/usr/bin/env python3
"""
Factorize a stream of integers.

Reads whitespace-separated integers, sieves once up to isqrt(max) + 1 and
prints each input followed by one "prime exponent" line per factor.

Usage:
    python run_factor.py < numbers.txt
    python run_factor.py --input numbers.txt --divisors
    python run_factor.py --self-test < numbers.txt
"""

import argparse
import sys
import time
from math import isqrt
from pathlib import Path
from typing import List, TextIO

import numpy as np
import yaml

from sievefactor.config import load_config
from sievefactor.divisors import MalformedFactorizationError
from sievefactor.factorization import divisor_count
from sievefactor.primes import INT64_MAX, SieveDomainError
from sievefactor.shared import expand_divisors, factorize, is_prime, rebuild_sieve


class InputError(ValueError):
    """Input text that is not a stream of integers in [1, 2**63 - 1]."""


def read_inputs(stream: TextIO) -> List[int]:
    """Parse every whitespace-separated token of stream as an integer."""
    values = []
    for line_no, line in enumerate(stream, 1):
        for token in line.split():
            try:
                value = int(token)
            except ValueError:
                raise InputError(f"line {line_no}: not an integer: {token!r}") from None
            if not 1 <= value <= INT64_MAX:
                raise InputError(f"line {line_no}: {value} outside [1, {INT64_MAX}]")
            values.append(value)
    return values


def sieve_bound_for(values: List[int], min_bound: int = 0) -> int:
    """Smallest convenient bound whose square covers every value."""
    return max([isqrt(x) + 1 for x in values] + [min_bound])


def format_factorization(n: int, factors) -> str:
    lines = [str(n)]
    lines.extend(f"{p} {e}" for p, e in factors)
    return "\n".join(lines) + "\n"


def _check(label: str, got, expected) -> None:
    if list(got) != list(expected):
        raise AssertionError(f"{label}: expected {list(expected)}, got {list(got)}")


def self_test() -> None:
    """
    Check the known factorizations against the shared sieve.

    Leaves the shared sieve at bound 0.

    Raises
    ------
    AssertionError
        On the first mismatch.
    """
    rebuild_sieve(100)
    for n in range(1, 10001):
        factors = factorize(n)
        single = len(factors) == 1 and factors[0][1] == 1
        if is_prime(n) != single:
            raise AssertionError(f"is_prime({n}) disagrees with factorization {factors}")

    rebuild_sieve(10**5)
    cases = [
        (1, [1], [1]),
        (2, [1, 2], [1, 2]),
        (4, [1, 2, 4], [1, 2, 4]),
        (60, [1, 2, 4, 3, 6, 12, 5, 10, 20, 15, 30, 60],
             [1, 2, 3, 4, 5, 6, 10, 12, 15, 20, 30, 60]),
        (36, [1, 2, 4, 3, 6, 12, 9, 18, 36], [1, 2, 3, 4, 6, 9, 12, 18, 36]),
        (5000000029, [1, 5000000029], [1, 5000000029]),
        (4802300273, [1, 60013, 80021, 4802300273], [1, 60013, 80021, 4802300273]),
    ]
    for n, unsorted, ascending in cases:
        _check(f"divisors of {n}", expand_divisors(factorize(n)), unsorted)
        _check(f"sorted divisors of {n}", expand_divisors(factorize(n), sort=True), ascending)

    # 2^10 * 3^5 * 5^2 * 1009
    n = 6276787200
    factors = factorize(n)
    _check(f"factorization of {n}", factors, [(2, 10), (3, 5), (5, 2), (1009, 1)])
    unsorted = expand_divisors(factors)
    ascending = expand_divisors(factors, sort=True)
    if len(ascending) != divisor_count(factors) or len(ascending) != 396:
        raise AssertionError(f"divisor count of {n}: got {len(ascending)}")
    _check(f"sorted divisors of {n}", ascending, np.sort(unsorted))
    if np.any(n % ascending != 0):
        raise AssertionError(f"non-divisor produced for {n}")

    rebuild_sieve(0)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Prime-factorize integers read from text input')
    parser.add_argument('--input', type=str, default=None,
                        help='File of whitespace-separated integers (default: stdin)')
    parser.add_argument('--config', type=str, default=None,
                        help='Path to config file (default: config/default.yaml if present)')
    parser.add_argument('--divisors', action='store_true',
                        help='Also print every divisor of each input on one line')
    parser.add_argument('--self-test', action='store_true',
                        help='Check known factorizations before reading input')
    parser.add_argument('-q', '--quiet', action='store_true',
                        help='Suppress progress output on stderr')
    args = parser.parse_args(argv)

    try:
        config = load_config(Path(args.config) if args.config else None)
    except (OSError, yaml.YAMLError, ValueError) as e:
        parser.error(f"cannot load config: {e}")

    def progress(message: str) -> None:
        if not args.quiet:
            print(message, file=sys.stderr)

    if args.self_test:
        t0 = time.time()
        try:
            self_test()
        except AssertionError as e:
            print(f"Self-test failed: {e}", file=sys.stderr)
            return 1
        progress(f"Tests passed! ({time.time() - t0:.2f}s)")

    try:
        if args.input:
            with open(args.input) as f:
                values = read_inputs(f)
        else:
            values = read_inputs(sys.stdin)
    except OSError as e:
        parser.error(f"cannot read input: {e}")
    except InputError as e:
        parser.error(str(e))

    bound = sieve_bound_for(values, config['min_bound'])
    progress(f"Sieving up to {bound:,} for {len(values):,} inputs...")
    t0 = time.time()
    rebuild_sieve(bound)
    progress(f"  Done in {time.time() - t0:.2f}s")

    out = sys.stdout
    try:
        for n in values:
            factors = factorize(n)
            out.write(format_factorization(n, factors))
            if args.divisors:
                divisors = expand_divisors(factors, sort=config['sorted_divisors'])
                out.write(" ".join(str(d) for d in divisors.tolist()) + "\n")
    except (SieveDomainError, MalformedFactorizationError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
