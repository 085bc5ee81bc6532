"""
Tests for divisor expansion.

Construction order is part of the contract, so the unsorted lists are
checked element by element; the sorted lists are checked against known
answers and against brute-force enumeration.
"""

import numpy as np
import pytest

from sievefactor.divisors import MalformedFactorizationError, MergeBuffer, expand_divisors
from sievefactor.factorization import divisor_count, factorize
from sievefactor.primes import SieveTable


def brute_force_divisors(n: int) -> list:
    return [d for d in range(1, n + 1) if n % d == 0]


class TestKnownExpansions:
    """Expansions with known answers in both orders."""

    def test_sixty(self):
        factors = factorize(60, SieveTable(100))
        assert expand_divisors(factors).tolist() == [1, 2, 4, 3, 6, 12, 5, 10, 20, 15, 30, 60]
        assert expand_divisors(factors, sort=True).tolist() == \
            [1, 2, 3, 4, 5, 6, 10, 12, 15, 20, 30, 60]

    def test_thirty_six(self):
        factors = factorize(36, SieveTable(100))
        assert expand_divisors(factors).tolist() == [1, 2, 4, 3, 6, 12, 9, 18, 36]
        assert expand_divisors(factors, sort=True).tolist() == [1, 2, 3, 4, 6, 9, 12, 18, 36]

    def test_one(self):
        factors = factorize(1, SieveTable(1))
        assert expand_divisors(factors).tolist() == [1]
        assert expand_divisors(factors, sort=True).tolist() == [1]

    def test_prime_power(self):
        assert expand_divisors([(2, 2)], sort=True).tolist() == [1, 2, 4]
        assert expand_divisors([(2, 2)]).tolist() == [1, 2, 4]

    def test_beyond_bound(self):
        table = SieveTable(10**5)
        assert expand_divisors(factorize(5000000029, table), sort=True).tolist() == \
            [1, 5000000029]
        assert expand_divisors(factorize(4802300273, table), sort=True).tolist() == \
            [1, 60013, 80021, 4802300273]

    def test_highly_composite(self):
        """6276787200 = 2^10 * 3^5 * 5^2 * 1009 has 396 divisors."""
        factors = factorize(6276787200, SieveTable(10**5))
        unsorted = expand_divisors(factors)
        ascending = expand_divisors(factors, sort=True)

        assert len(unsorted) == 396
        assert unsorted[:12].tolist() == [1, 2, 4, 8, 16, 32, 64, 128, 256, 512, 1024, 3]
        assert unsorted[-1] == 6276787200
        assert ascending[:12].tolist() == [1, 2, 3, 4, 5, 6, 8, 9, 10, 12, 15, 16]
        assert ascending[-3:].tolist() == [2092262400, 3138393600, 6276787200]
        np.testing.assert_array_equal(ascending, np.sort(unsorted))

    def test_returns_int64_array(self):
        divisors = expand_divisors([(2, 1), (3, 1)])
        assert isinstance(divisors, np.ndarray)
        assert divisors.dtype == np.int64


class TestExpansionProperties:
    """Properties over a range of n."""

    def test_matches_brute_force(self):
        table = SieveTable(50)
        for n in range(1, 2001):
            factors = factorize(n, table)
            unsorted = expand_divisors(factors)
            ascending = expand_divisors(factors, sort=True)
            expected = brute_force_divisors(n)

            assert ascending.tolist() == expected, f"sorted divisors of {n}"
            assert sorted(unsorted.tolist()) == expected, f"unsorted divisors of {n}"
            assert len(unsorted) == divisor_count(factors)

    def test_sorted_is_ascending(self):
        table = SieveTable(10**6)
        for n in (720720, 3603600, 963761198400, 2 ** 20 * 3 ** 5):
            ascending = expand_divisors(factorize(n, table), sort=True)
            assert np.all(np.diff(ascending) > 0), f"sorted divisors of {n} not ascending"

    def test_no_merge_needed_when_primes_outgrow_list(self):
        """2 * 3 * 7: each new prime exceeds every divisor so far."""
        assert expand_divisors([(2, 1), (3, 1), (7, 1)], sort=True).tolist() == \
            [1, 2, 3, 6, 7, 14, 21, 42]
        assert expand_divisors([(2, 1), (3, 1), (7, 1)]).tolist() == \
            [1, 2, 3, 6, 7, 14, 21, 42]

    def test_deterministic(self):
        factors = factorize(360360, SieveTable(1000))
        for sort in (False, True):
            first = expand_divisors(factors, sort=sort)
            second = expand_divisors(factors, sort=sort)
            np.testing.assert_array_equal(first, second)

    def test_accepts_numpy_pairs(self):
        factors = [(np.int64(2), np.int64(2)), (np.int64(3), np.int64(1))]
        assert expand_divisors(factors, sort=True).tolist() == [1, 2, 3, 4, 6, 12]


class TestMergeBuffer:
    """The scratch buffer grows on demand and can be shared across calls."""

    def test_grows_to_largest_request(self):
        buffer = MergeBuffer()
        assert buffer.capacity == 0

        expand_divisors([(2, 2), (3, 1)], sort=True, buffer=buffer)
        assert buffer.capacity == 6

        expand_divisors([(2, 5), (3, 2), (5, 1)], sort=True, buffer=buffer)
        assert buffer.capacity == 36

        expand_divisors([(2, 1)], sort=True, buffer=buffer)
        assert buffer.capacity == 36

    def test_unsorted_does_not_touch_buffer(self):
        buffer = MergeBuffer()
        expand_divisors([(2, 5), (3, 2)], buffer=buffer)
        assert buffer.capacity == 0

    def test_shared_buffer_gives_same_results(self):
        table = SieveTable(1000)
        buffer = MergeBuffer(4)
        for n in (60, 720720, 36, 999983, 5040):
            factors = factorize(n, table)
            np.testing.assert_array_equal(
                expand_divisors(factors, sort=True, buffer=buffer),
                expand_divisors(factors, sort=True),
            )

    def test_reserve_returns_large_enough_array(self):
        buffer = MergeBuffer(10)
        assert len(buffer.reserve(5)) == 10
        assert len(buffer.reserve(20)) == 20


class TestMalformedFactorization:
    """Malformed input is rejected before any work is done."""

    @pytest.mark.parametrize("factors", [
        [(3, 1), (2, 1)],     # decreasing
        [(2, 1), (2, 1)],     # repeated
        [(1, 1)],             # not >= 2
        [(0, 3)],
        [(2, 0)],             # zero exponent
        [(2, -1)],
        [(2, 1.5)],
        [(2.0, 1)],
        [(2, True)],
        [(2,)],
        [(2, 1, 1)],
        [5],
    ])
    def test_rejected(self, factors):
        with pytest.raises(MalformedFactorizationError):
            expand_divisors(factors)
        with pytest.raises(MalformedFactorizationError):
            expand_divisors(factors, sort=True)

    def test_product_beyond_int64(self):
        with pytest.raises(MalformedFactorizationError):
            expand_divisors([(2, 64)])
        with pytest.raises(MalformedFactorizationError):
            expand_divisors([(3037000493, 1), (3037000499, 1), (3037000507, 1)])

    def test_int64_edge_is_accepted(self):
        divisors = expand_divisors([(2, 62)], sort=True)
        assert len(divisors) == 63
        assert divisors[-1] == 2 ** 62

    def test_is_value_error(self):
        assert issubclass(MalformedFactorizationError, ValueError)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
