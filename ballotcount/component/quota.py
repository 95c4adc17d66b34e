'''Quota functions for transferable vote elections.

A quota function takes the total number of (non-blank) ballots and the number
of seats to fill and returns the number of votes that secures a seat.
The unrounded quota functions return fractions to retain exact values.

All supported quota functions are assembled in the `QUOTAS` dictionary keyed
by their name. `get()` retrieves from this dictionary by string key;
`construct()` also accepts callables and passes them through.
'''

import math
from fractions import Fraction
from typing import Callable, Dict, Union
from numbers import Number

QuotaFunction = Callable[[int, int], Number]

QUOTAS: Dict[str, QuotaFunction] = {}


def quota_mark(quota_function: QuotaFunction) -> QuotaFunction:
    QUOTAS[quota_function.__name__] = quota_function
    return quota_function


def get(name: str) -> QuotaFunction:
    '''Return a quota function by its name.

    :raises KeyError: If no quota of that name is known.
    '''
    try:
        return QUOTAS[name]
    except KeyError:
        raise KeyError(
            f'unknown quota: {name!r}, available: ' + ', '.join(QUOTAS)
        ) from None


def construct(quota_def: Union[str, QuotaFunction]) -> QuotaFunction:
    '''Get a quota function by its name, or pass a custom callable through.'''
    return quota_def if callable(quota_def) else get(quota_def)


@quota_mark
def hagenbach_bischoff(votes: int, seats: int) -> Fraction:
    '''Hagenbach-Bischoff quota, ``votes / (seats + 1)``.

    The unrounded variant, giving the exact fraction. A candidate must
    exceed it (not merely reach it) to be elected; at most ``seats``
    candidates can then do so.
    '''
    return Fraction(votes, seats + 1)


@quota_mark
def droop(votes: int, seats: int) -> int:
    '''Droop quota, ``floor(votes / (seats + 1)) + 1``.

    The smallest integer quota guaranteeing the number of candidates reaching
    it will not be higher than the number of seats.
    '''
    return math.floor(Fraction(votes, seats + 1)) + 1


@quota_mark
def hare(votes: int, seats: int) -> Fraction:
    '''Hare quota, ``votes / seats``, the most basic one.'''
    return Fraction(votes, seats)
