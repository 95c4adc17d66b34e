'''Various utility functions for other modules of Ballotcount.

There should normally be no need to use these functions directly.
'''

import math
import sys
from fractions import Fraction


def harmonic(n: int) -> Fraction:
    '''Return the n-th harmonic number ``1 + 1/2 + ... + 1/n``.

    :raises ValueError: If n is not positive.
    '''
    if n < 1:
        raise ValueError(f'harmonic number needs a positive n, got {n}')
    return sum((Fraction(1, k) for k in range(1, n + 1)), Fraction(0))


def n_combinations(n: int, k: int) -> int:
    '''Return the binomial coefficient C(n, k), clamped to ``sys.maxsize``.

    The clamped value is only good for sizing decisions (such as whether to
    report progress); it must never be used to cut an enumeration short.
    '''
    if k < 0 or k > n:
        return 0
    return min(math.comb(n, k), sys.maxsize)
