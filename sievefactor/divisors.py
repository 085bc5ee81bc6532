"""
Divisor expansion.

Responsibility: turn a prime-power factorization into the list of all its
divisors, either in construction order or ascending.

Construction order is fixed by the factorization: for each (p, e) in turn
the list built so far is multiplied by p, p**2, ..., p**e and the copies
are appended. For 60 = 2^2 * 3 * 5 that gives

    [1, 2, 4, 3, 6, 12, 5, 10, 20, 15, 30, 60]

Sorted output keeps the same construction and restores order after each
prime with a bottom-up merge over the runs that prime produced. Each run
is the (sorted) previous list times a power of p, so the runs are already
sorted and only need combining. When p is larger than every divisor built
so far the new runs land in order and the merge is skipped.
"""

import numpy as np
from numba import njit

from .primes import INT64_MAX


class MalformedFactorizationError(ValueError):
    """A factorization that is not a well-formed list of (prime, exponent) pairs."""


class MergeBuffer:
    """
    Reusable scratch space for sorted divisor expansion.

    Grows to the largest expansion it has served and never shrinks.
    Contents between calls are unspecified. Pass the same buffer to
    successive expand_divisors calls to avoid reallocating; a buffer must
    not be used by two expansions at once.
    """

    def __init__(self, capacity: int = 0):
        self._data = np.empty(capacity, dtype=np.int64)

    @property
    def capacity(self) -> int:
        return len(self._data)

    def reserve(self, size: int) -> np.ndarray:
        """Return the scratch array, grown to hold at least size values."""
        if size > len(self._data):
            self._data = np.empty(size, dtype=np.int64)
        return self._data


_NO_SCRATCH = np.empty(0, dtype=np.int64)


@njit
def _merge_runs(factors, buffer, size, section):
    """Bottom-up merge of sorted runs of length section in factors[:size]."""
    while section < size:
        i = 0
        while i + section < size:
            length = min(2 * section, size - i)
            left = i
            left_end = i + section
            right = left_end
            right_end = i + length
            k = 0
            while left < left_end and right < right_end:
                if factors[right] < factors[left]:
                    buffer[k] = factors[right]
                    right += 1
                else:
                    buffer[k] = factors[left]
                    left += 1
                k += 1
            while left < left_end:
                buffer[k] = factors[left]
                left += 1
                k += 1
            while right < right_end:
                buffer[k] = factors[right]
                right += 1
                k += 1
            factors[i:i + length] = buffer[:length]
            i += 2 * section
        section *= 2


@njit
def _expand_kernel(primes, exponents, factors, buffer, sort):
    size = 1
    factors[0] = 1
    for j in range(len(primes)):
        p = primes[j]
        before_size = size
        for _ in range(exponents[j] * before_size):
            factors[size] = factors[size - before_size] * p
            size += 1
        if sort and factors[before_size - 1] > p:
            _merge_runs(factors, buffer, size, before_size)
    return size


def _is_integer(value) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, (bool, np.bool_))


def _unpack(factorization):
    """Validate a factorization and return (primes, exponents, divisor count)."""
    primes = []
    exponents = []
    count = 1
    product = 1
    previous = 1

    for pair in factorization:
        try:
            p, exponent = pair
        except (TypeError, ValueError):
            raise MalformedFactorizationError(
                f"expected a (prime, exponent) pair, got {pair!r}") from None
        if not (_is_integer(p) and _is_integer(exponent)):
            raise MalformedFactorizationError(f"non-integer pair {pair!r}")
        p, exponent = int(p), int(exponent)

        if p <= previous:
            raise MalformedFactorizationError(
                f"primes must be >= 2 and strictly increasing: {p} after {previous}")
        if exponent < 1:
            raise MalformedFactorizationError(f"exponent of {p} must be >= 1, got {exponent}")
        # 2**63 already overflows, so a larger exponent can never fit.
        if exponent > 63:
            raise MalformedFactorizationError(f"{p}^{exponent} exceeds the int64 range")
        product *= p ** exponent
        if product > INT64_MAX:
            raise MalformedFactorizationError(
                f"product of factorization exceeds the int64 range at {p}^{exponent}")

        primes.append(p)
        exponents.append(exponent)
        count *= exponent + 1
        previous = p

    return (np.array(primes, dtype=np.int64),
            np.array(exponents, dtype=np.int64),
            count)


def expand_divisors(factorization, sort: bool = False, buffer: MergeBuffer = None) -> np.ndarray:
    """
    Enumerate every positive divisor of a factorized integer.

    Parameters
    ----------
    factorization : sequence of (int, int)
        (prime, exponent) pairs, primes strictly increasing, exponents >= 1,
        as returned by factorize.
    sort : bool
        Return the divisors ascending instead of in construction order.
    buffer : MergeBuffer, optional
        Scratch space for the sorted merge. A fresh one is used per call
        when omitted.

    Returns
    -------
    np.ndarray
        int64 array of length prod(exponent + 1).

    Raises
    ------
    MalformedFactorizationError
        If the pairs are not well formed or their product leaves int64.
    """
    primes, exponents, count = _unpack(factorization)

    factors = np.empty(count, dtype=np.int64)
    if sort:
        if buffer is None:
            buffer = MergeBuffer()
        scratch = buffer.reserve(count)
    else:
        scratch = _NO_SCRATCH

    size = _expand_kernel(primes, exponents, factors, scratch, bool(sort))
    assert size == count
    return factors
