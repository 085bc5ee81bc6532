"""
Process-wide sieve handle.

The four operations callers use when one sieve per process is enough:
rebuild it once, then query. Everything here delegates to a single
SieveTable and a single MergeBuffer owned by this module, so the same
threading rules apply: no rebuild during queries, no two sorted
expansions at once.
"""

import numpy as np

from .primes import SieveTable, is_prime as _is_prime
from .factorization import Factorization, factorize as _factorize
from .divisors import MergeBuffer, expand_divisors as _expand_divisors


_table = SieveTable(0)
_buffer = MergeBuffer()


def current_table() -> SieveTable:
    """Return the table the module-level queries run against."""
    return _table


def rebuild_sieve(bound: int) -> None:
    """Replace the shared sieve with one up to max(bound, 1)."""
    _table.rebuild(bound)


def is_prime(n: int) -> bool:
    """is_prime against the shared sieve; requires 1 <= n <= bound**2."""
    return _is_prime(n, _table)


def factorize(n: int) -> Factorization:
    """factorize against the shared sieve; requires 1 <= n <= bound**2."""
    return _factorize(n, _table)


def expand_divisors(factorization, sort: bool = False) -> np.ndarray:
    """expand_divisors reusing the shared merge buffer."""
    return _expand_divisors(factorization, sort=sort, buffer=_buffer)
