"""
Factorization utilities.

Responsibility: prime-power factorization against a sieve table, plus the
counting helpers that read a factorization. Divisor enumeration lives in
divisors.py.
"""

import numpy as np
from numba import njit
from typing import List, Tuple

from .primes import SieveTable


Factorization = List[Tuple[int, int]]

# An int64 has at most 15 distinct prime factors and 63 with multiplicity.
_MAX_FACTORS = 64


@njit
def _spf_factorize_kernel(n, spf, out_primes, out_exponents):
    """Walk the smallest-factor table from n down to 1."""
    count = 0
    while n != 1:
        p = spf[n]
        exponent = 0
        while n % p == 0:
            n //= p
            exponent += 1
        out_primes[count] = p
        out_exponents[count] = exponent
        count += 1
    return count


@njit
def _trial_factorize_kernel(n, primes, out_primes, out_exponents):
    """Trial-divide by sieved primes up to sqrt(remaining n)."""
    count = 0
    for p in primes:
        if p > n // p:
            break
        if n % p == 0:
            exponent = 0
            while n % p == 0:
                n //= p
                exponent += 1
            out_primes[count] = p
            out_exponents[count] = exponent
            count += 1

    # What is left has no factor <= its square root.
    if n > 1:
        out_primes[count] = n
        out_exponents[count] = 1
        count += 1
    return count


def factorize(n: int, table: SieveTable) -> Factorization:
    """
    Prime-factorize n.

    Uses the smallest-factor table when n <= table.bound (O(log n)),
    otherwise trial division by the sieved primes (O(sqrt(n) / log n)).
    At most one prime factor can exceed the bound; it is reported last
    with exponent 1.

    Parameters
    ----------
    n : int
        Integer in [1, table.max_query].
    table : SieveTable
        Sieve covering at least sqrt(n).

    Returns
    -------
    list of (int, int)
        (prime, exponent) pairs with strictly increasing primes.
        Empty for n = 1.
    """
    n = table.check_query(n)

    out_primes = np.zeros(_MAX_FACTORS, dtype=np.int64)
    out_exponents = np.zeros(_MAX_FACTORS, dtype=np.int64)

    if n <= table.bound:
        count = _spf_factorize_kernel(n, table.spf, out_primes, out_exponents)
    else:
        count = _trial_factorize_kernel(n, table.primes, out_primes, out_exponents)

    return [(int(p), int(e)) for p, e in zip(out_primes[:count], out_exponents[:count])]


def omega(factors: Factorization) -> int:
    """Count distinct prime factors (little omega)."""
    return len(factors)


def big_omega(factors: Factorization) -> int:
    """Count prime factors with multiplicity (big Omega)."""
    return sum(exponent for _, exponent in factors)


def divisor_count(factors: Factorization) -> int:
    """
    Number of positive divisors, the product of (exponent + 1).

    Computed as an exact Python integer, so it never overflows.
    """
    count = 1
    for _, exponent in factors:
        count *= exponent + 1
    return count
