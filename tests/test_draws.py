"""
Tests for the query draw count estimator.
"""

import math

import pytest
from mpmath import mp, mpf

from circom_prover.draws import number_of_draws


def reference_draws(num_queries: int, lde_domain_size: int, security: int) -> int:
    """Draw count recomputed with a fresh memo table for every draw count."""
    with mp.workprec(security + 2):
        threshold = mpf(2) ** -security

        def step(x, n, memo):
            if (x, n) in memo:
                return memo[(x, n)]
            if x == num_queries:
                value = mpf(1)
            elif n == 0:
                value = mpf(0)
            else:
                d = mpf(lde_domain_size)
                value = (mpf(lde_domain_size - x) / d * step(x + 1, n - 1, memo)
                         + mpf(x) / d * step(x, n - 1, memo))
            memo[(x, n)] = value
            return value

        n = 0
        while True:
            p = step(0, n, {})
            n += 1
            if not 1 - p > threshold:
                return n


class TestKnownValues:
    """Small cases worked out by hand."""

    def test_single_query_two_positions(self):
        """One draw always collects the single query; the loop reports 2."""
        assert number_of_draws(1, 2, 2) == 2

    def test_two_queries_four_positions(self):
        """P(0, 2) = 3/4 reaches 1 - 2^-1, so the loop reports 3."""
        assert number_of_draws(2, 4, 1) == 3

    def test_no_queries(self):
        """With nothing to collect the first evaluation already succeeds."""
        assert number_of_draws(0, 16, 128) == 1

    def test_zero_security(self):
        """A 2^0 threshold is met immediately."""
        assert number_of_draws(3, 8, 0) == 1

    @pytest.mark.parametrize("security", range(1, 21))
    def test_two_queries_closed_form(self, security):
        """For q=2, d=4 the miss probability after n draws is 4^-(n-1)."""
        assert number_of_draws(2, 4, security) == math.ceil(security / 2) + 2


class TestProperties:
    """Properties that hold for all valid inputs."""

    def test_deterministic(self):
        """Repeated calls return the same value."""
        assert number_of_draws(5, 64, 40) == number_of_draws(5, 64, 40)

    @pytest.mark.parametrize("q,d", [(1, 2), (2, 2), (2, 4)])
    def test_non_decreasing_in_security(self, q, d):
        """More security bits never need fewer draws."""
        counts = [number_of_draws(q, d, s) for s in range(0, 40)]
        assert counts == sorted(counts)

    def test_two_queries_two_positions(self):
        """For q=d=2 each extra draw halves the miss probability."""
        for s in range(1, 30):
            assert number_of_draws(2, 2, s) == s + 2

    def test_at_least_one_draw_per_query(self):
        """Collecting q positions needs at least q draws, plus the final step."""
        for q in range(1, 6):
            assert number_of_draws(q, 32, 20) >= q + 1

    def test_full_domain(self):
        """Collecting every position of the domain terminates."""
        assert number_of_draws(4, 4, 10) > 4

    @pytest.mark.parametrize("q,d,s", [
        (1, 2, 5),
        (2, 4, 7),
        (3, 8, 16),
        (4, 16, 12),
        (5, 32, 30),
    ])
    def test_matches_recursive_evaluation(self, q, d, s):
        """The row-by-row table gives the same counts as memoised recursion."""
        assert number_of_draws(q, d, s) == reference_draws(q, d, s)

    def test_realistic_parameters(self):
        """Typical STARK parameters at 128 bits need a few draws beyond q."""
        draws = number_of_draws(42, 2 ** 13, 128)
        assert 42 < draws < 84

    def test_many_queries(self):
        """q beyond the interpreter recursion limit is still computed.

        1100 distinct positions out of 4096 take about 1281 draws on average.
        A 2^-64 tail lies above the mean, and by McDiarmid's inequality below
        roughly 1550 draws.
        """
        draws = number_of_draws(1100, 4096, 64)
        assert 1281 < draws < 2000


class TestValidation:
    """Arguments that would never terminate or make no sense."""

    def test_more_queries_than_positions(self):
        """q > d cannot be satisfied by any number of draws."""
        with pytest.raises(ValueError):
            number_of_draws(5, 4, 10)

    def test_negative_arguments(self):
        """Negative arguments are rejected."""
        with pytest.raises(ValueError):
            number_of_draws(-1, 4, 10)
        with pytest.raises(ValueError):
            number_of_draws(1, 4, -1)
