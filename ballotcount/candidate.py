'''Candidate identities, the election registry and the candidate ordering.

Candidates are immutable, hashable objects identified by their ballot number
(the index under which ballot files refer to them) and their name. They are
created and looked up through an :class:`ElectionContext`, which is passed
explicitly to the loaders and the command line tool so that several elections
can be processed in one interpreter without interfering with each other.

All result listings are sorted by the *candidate ordering*:

1.  by an associated count descending, if a counts mapping is given and both
    compared candidates have an entry in it,
2.  by name, case-insensitively,
3.  by ballot number.

This is a strict total order for any candidates with distinct numbers.
The ordering is not embedded in the candidate objects; use
:func:`ordering_key` (or :meth:`ElectionContext.ordering_key`) as a sort key.
'''

from __future__ import annotations

import functools
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, \
    Tuple
from numbers import Number


class CandidateError(Exception):
    '''A candidate is invalid or unknown in the given context.

    :param candidate: Candidate (or candidate number) that was found to be
        invalid.
    :param expected: Definition of a candidate that was expected.
    '''
    def __init__(self, candidate: Any, expected: Any = None):
        self.candidate = candidate
        self.expected = expected
        message = f'invalid candidate: {candidate}'
        if expected:
            message += f', must be {expected}'
        super().__init__(message)


class Candidate:
    '''A person standing for the election.

    Candidate objects are immutable; equality and hashing use both the number
    and the name.

    :param number: Ballot number of the candidate, usually 1-based (BLT files)
        but 0-based numbering is accepted too.
    :param name: Name of the candidate, in any customary text format.
    '''
    __slots__ = ('_number', '_name')

    def __init__(self, number: int, name: str):
        object.__setattr__(self, '_number', number)
        object.__setattr__(self, '_name', name)

    def __setattr__(self, attr, value):
        raise AttributeError(f'{type(self).__name__} is immutable')

    @property
    def number(self) -> int:
        return self._number

    @property
    def name(self) -> str:
        return self._name

    @property
    def last_name(self) -> str:
        '''The last whitespace-delimited token of the name.'''
        return self._name.split()[-1] if self._name.strip() else self._name

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Candidate):
            return NotImplemented
        return self._number == other._number and self._name == other._name

    def __hash__(self) -> int:
        return hash((self._number, self._name))

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f'<Candidate({self._name},{self._number})>'


def compare_candidates(cand1: Candidate,
                       cand2: Candidate,
                       counts: Optional[Dict[Candidate, Number]] = None,
                       ) -> int:
    '''Compare two candidates by the candidate ordering.

    :param cand1: First candidate.
    :param cand2: Second candidate.
    :param counts: Counts (usually approval votes) to order by first.
        Only used when both candidates have an entry.
    :returns: A negative number if cand1 goes first, a positive number if
        cand2 goes first, zero only for equal candidates.
    '''
    if counts is not None and cand1 in counts and cand2 in counts:
        count1, count2 = counts[cand1], counts[cand2]
        if count1 != count2:
            return -1 if count1 > count2 else 1
    name1, name2 = cand1.name.lower(), cand2.name.lower()
    if name1 != name2:
        return -1 if name1 < name2 else 1
    return cand1.number - cand2.number


def ordering_key(counts: Optional[Dict[Candidate, Number]] = None
                 ) -> Callable[[Candidate], Any]:
    '''Return a sort key function implementing the candidate ordering.

    :param counts: Counts to order by first, see :func:`compare_candidates`.
    '''
    return functools.cmp_to_key(
        functools.partial(compare_candidates, counts=counts)
    )


def ranked_scores(scores: Dict[Candidate, Number],
                  ordering: Optional[Callable[[Candidate], Any]] = None,
                  ) -> List[Tuple[Candidate, Number]]:
    '''Return score items in descending order of score.

    :param scores: Candidates mapped to their scores.
    :param ordering: Sort key to break ties between equal scores. The default
        is the candidate ordering without counts.
    '''
    if ordering is None:
        ordering = ordering_key()
    by_candidate = sorted(scores, key=ordering)
    return [
        (cand, scores[cand])
        for cand in sorted(by_candidate, key=scores.get, reverse=True)
    ]


class ElectionContext:
    '''A registry of the candidates of a single election.

    Replaces any global candidate table: the loaders register the candidates
    here and everything downstream looks them up here.

    Registering a number that is already registered replaces the previous
    candidate both in the lookup and in :meth:`all`.
    '''
    def __init__(self):
        self._lookup: Dict[int, Candidate] = {}
        self._counts: Optional[Dict[Candidate, Number]] = None
        self._max_name_length = 0

    def register(self, number: int, name: str) -> Candidate:
        '''Create a candidate and store it under its number.'''
        cand = Candidate(number, name)
        self._lookup[number] = cand
        self._max_name_length = max(self._max_name_length, len(name))
        return cand

    def lookup(self, number: int) -> Optional[Candidate]:
        return self._lookup.get(number)

    def from_numbers(self, numbers: Iterable[int]) -> FrozenSet[Candidate]:
        '''Return the set of candidates registered under the given numbers.

        :raises CandidateError: If any of the numbers is not registered.
        '''
        cands = set()
        for number in numbers:
            cand = self._lookup.get(number)
            if cand is None:
                raise CandidateError(number, 'a registered candidate number')
            cands.add(cand)
        return frozenset(cands)

    def all(self) -> List[Candidate]:
        '''Return all registered candidates ordered by their number.'''
        return [self._lookup[number] for number in sorted(self._lookup)]

    def count(self) -> int:
        return len(self._lookup)

    def __len__(self) -> int:
        return len(self._lookup)

    def __iter__(self):
        return iter(self.all())

    @property
    def max_name_length(self) -> int:
        '''Length of the longest name registered so far.'''
        return self._max_name_length

    @property
    def counts(self) -> Optional[Dict[Candidate, Number]]:
        return self._counts

    def set_counts(self, counts: Optional[Dict[Candidate, Number]]) -> None:
        '''Replace the counts used as the first criterion of the ordering.

        The counts only affect ordering of output and tie breaking, never
        the tallies themselves.
        '''
        self._counts = dict(counts) if counts is not None else None

    def ordering_key(self) -> Callable[[Candidate], Any]:
        '''Sort key for the candidate ordering under the current counts.'''
        return ordering_key(self._counts)

    def sorted(self, candidates: Iterable[Candidate]) -> List[Candidate]:
        return sorted(candidates, key=self.ordering_key())

    def ranked_scores(self,
                      scores: Dict[Candidate, Number],
                      ) -> List[Tuple[Candidate, Number]]:
        '''Order score items by descending score, ties by the ordering.'''
        return ranked_scores(scores, self.ordering_key())
