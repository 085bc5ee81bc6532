"""
Sieve table and primality oracle.

Responsibility: the precomputed smallest-prime-factor, primality and prime
list tables, and primality queries against them. No factorization here.
"""

import operator

import numpy as np
from numba import njit


INT64_MAX = int(np.iinfo(np.int64).max)


class SieveDomainError(ValueError):
    """A query fell outside [1, max_query] for the table it was sent to."""

    def __init__(self, n: int, max_query: int):
        super().__init__(f"query {n} outside sieve domain [1, {max_query}]")
        self.n = n
        self.max_query = max_query


@njit
def _spf_sieve_kernel(spf, flags, primes):
    """Fill spf/flags in place and write primes ascending; return prime count."""
    limit = len(spf) - 1
    count = 0
    for p in range(2, limit + 1):
        if flags[p]:
            spf[p] = p
            primes[count] = p
            count += 1
            for i in range(p * p, limit + 1, p):
                if flags[i]:
                    flags[i] = False
                    spf[i] = p
    return count


@njit
def _trial_division_witness(n, primes):
    """Return the smallest prime p <= sqrt(n) dividing n, or 0 if none."""
    for p in primes:
        if p > n // p:
            break
        if n % p == 0:
            return p
    return 0


class SieveTable:
    """
    Smallest-prime-factor sieve up to a fixed bound.

    Holds three arrays for every integer i in [0, bound]:
    spf[i] (smallest prime factor, 0 for i < 2, p for prime p),
    flags[i] (True iff i is prime) and the ascending list of primes.
    Queries are admissible for 1 <= n <= bound**2, capped at the int64 range.

    Parameters
    ----------
    bound : int
        Initial sieve bound. Values below 1 are clamped to 1.

    Note
    ----
    A table is shared mutable state with no locking. Callers must not
    rebuild it while queries are in flight on another thread, and must
    not run two rebuilds at once.
    """

    def __init__(self, bound: int = 0):
        self.rebuild(bound)

    def rebuild(self, bound: int) -> None:
        """
        Discard the current tables and sieve up to max(bound, 1).

        Runs in O(bound log log bound).
        """
        bound = max(operator.index(bound), 1)

        spf = np.zeros(bound + 1, dtype=np.int64)
        flags = np.ones(bound + 1, dtype=bool)
        flags[0] = flags[1] = False
        primes = np.empty(bound + 1, dtype=np.int64)

        count = _spf_sieve_kernel(spf, flags, primes)

        self._spf = spf
        self._flags = flags
        self._primes = primes[:count].copy()

    @property
    def bound(self) -> int:
        return len(self._spf) - 1

    @property
    def spf(self) -> np.ndarray:
        return self._spf

    @property
    def flags(self) -> np.ndarray:
        return self._flags

    @property
    def primes(self) -> np.ndarray:
        return self._primes

    @property
    def max_query(self) -> int:
        """Largest n accepted by is_prime/factorize on this table."""
        return min(self.bound * self.bound, INT64_MAX)

    def check_query(self, n) -> int:
        """
        Validate a query against this table and return it as a Python int.

        Raises
        ------
        TypeError
            If n is not an integer (bools are rejected).
        SieveDomainError
            If n is outside [1, max_query].
        """
        if isinstance(n, (bool, np.bool_)) or not isinstance(n, (int, np.integer)):
            raise TypeError(f"query must be an integer, got {type(n).__name__}")
        n = int(n)
        if not 1 <= n <= self.max_query:
            raise SieveDomainError(n, self.max_query)
        return n

    def __repr__(self) -> str:
        return f"SieveTable(bound={self.bound}, primes={len(self._primes)})"


def is_prime(n: int, table: SieveTable) -> bool:
    """
    Decide whether n is prime using a sieve table.

    O(1) for n <= table.bound; otherwise trial division by the sieved
    primes up to sqrt(n), worst case O(sqrt(n) / log n).

    Parameters
    ----------
    n : int
        Integer in [1, table.max_query].
    table : SieveTable
        Sieve covering at least sqrt(n).

    Returns
    -------
    bool
        True iff n is prime.
    """
    n = table.check_query(n)
    if n <= table.bound:
        return bool(table.flags[n])
    return _trial_division_witness(n, table.primes) == 0


def prime_flags_upto(N: int) -> np.ndarray:
    """
    Return boolean array where flags[i] is True iff i is prime.

    Parameters
    ----------
    N : int
        Upper bound (inclusive, clamped to at least 1).

    Returns
    -------
    np.ndarray
        Boolean array of length max(N, 1) + 1.
    """
    return SieveTable(N).flags


def primes_upto(N: int) -> np.ndarray:
    """Return array of all primes <= N."""
    return SieveTable(N).primes
