"""
Number of query draws needed by the Circom verifier.

The STARK verifier draws query positions uniformly from the LDE domain and
discards repeats, so reaching ``num_queries`` distinct positions may take more
than ``num_queries`` draws. The circuit has a fixed number of draw slots, which
must be large enough that running out of draws before collecting every query
happens with probability at most 2^-security.

Let P(x, n) be the probability of eventually holding ``num_queries`` distinct
positions when ``x`` are already held and ``n`` draws remain:

    P(q, n) = 1
    P(x, 0) = 0                                          for x < q
    P(x, n) = (d - x)/d * P(x + 1, n - 1) + x/d * P(x, n - 1)

All probabilities are mpmath floats at ``security + 2`` bits of precision;
1 - P gets extremely close to zero and must never be rounded to a double.

P is tabulated one draw count at a time: the row for n - 1, indexed by x,
gives the row for n. Memory is linear in q and there is no recursion, so any
q <= d is accepted.
"""

from typing import List

from mpmath import mp, mpf


def number_of_draws(num_queries: int, lde_domain_size: int, security: int = 128) -> int:
    """
    Smallest draw count the circuit needs for ``security`` bits of soundness.

    The loop evaluates P(0, n) for n = 0, 1, 2, ... and stops once
    1 - P(0, n) <= 2^-security. The value returned is the draw counter after
    that last evaluation, i.e. one past the first sufficient ``n``.

    Args:
        num_queries: Number of distinct query positions to collect (q).
        lde_domain_size: Size of the domain positions are drawn from (d).
        security: Target soundness in bits (s).

    Raises:
        ValueError: on negative arguments, or if q > d (no draw count suffices).
    """
    if num_queries < 0 or lde_domain_size < 0 or security < 0:
        raise ValueError(
            f"Arguments must be non-negative, got num_queries={num_queries}, "
            f"lde_domain_size={lde_domain_size}, security={security}"
        )
    if num_queries > lde_domain_size:
        raise ValueError(
            f"Cannot draw {num_queries} distinct positions from a domain of size {lde_domain_size}"
        )

    with mp.workprec(security + 2):
        threshold = mpf(2) ** -security
        domain = mpf(lde_domain_size)
        # new[x] = fresh[x] * row[x + 1] + repeat[x] * row[x]
        fresh = [mpf(lde_domain_size - x) / domain for x in range(num_queries)]
        repeat = [mpf(x) / domain for x in range(num_queries)]

        # P(x, 0)
        row: List[mpf] = [mpf(0)] * num_queries + [mpf(1)]

        num_draws = 0
        while True:
            probability = row[0]
            num_draws += 1
            if not 1 - probability > threshold:
                return num_draws
            row = [fresh[x] * row[x + 1] + repeat[x] * row[x] for x in range(num_queries)] + [mpf(1)]
