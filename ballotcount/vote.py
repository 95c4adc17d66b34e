'''Vote type specifications, ballot aggregation and vote validators.

Two vote types are recognized:

-   **Approval** votes - a voter selects a number of candidates and votes for
    them equally. Represented by a frozen set of candidate objects.
-   **Ranked** votes - a voter ranks a number of candidates in descending
    order of preference. Represented by a tuple of distinct candidate objects.

An empty vote of either type is a blank ballot; it is kept in the vote
collection but contributes nothing to any tally.

The evaluators accept votes aggregated into a dictionary mapping each distinct
vote to its weight (the number of voters who cast it). The functions in this
module build such dictionaries from individual or weighted ballots.
'''

import abc
import collections
from typing import Any, Dict, FrozenSet, Iterable, Tuple, Collection
from numbers import Number

from ballotcount.candidate import Candidate, CandidateError


class VoteError(Exception, metaclass=abc.ABCMeta):
    '''A vote is invalid given the election rules.'''
    pass


class VoteTypeError(VoteError):
    '''A vote is of an invalid type.

    E.g. ranked votes in place of approval votes.

    :param vtype: Vote type detected as invalid.
    :param expected: Vote type that was expected.
    '''
    def __init__(self, vtype: type, expected: type = None):
        self.vtype = vtype
        self.expected = expected
        message = f'invalid vote type: {vtype}'
        if expected:
            message += f', must be {expected}'
        super().__init__(message)


class VoteWeightError(VoteError):
    '''A vote weight is not a positive number.'''
    def __init__(self, weight: Any):
        self.weight = weight
        super().__init__(f'invalid vote weight: {weight}, must be >0')


ApprovalVoteType = FrozenSet[Candidate]
RankedVoteType = Tuple[Candidate, ...]


def aggregate(ballots: Iterable[Any]) -> Dict[Any, int]:
    '''Aggregate individual ballots into a dictionary of vote weights.

    :param ballots: Individual votes, one per voter. Approval votes must be
        frozen sets, ranked votes tuples.
    '''
    return dict(collections.Counter(ballots))


def aggregate_weighted(ballots: Iterable[Tuple[Any, Number]]
                       ) -> Dict[Any, Number]:
    '''Aggregate weighted ballots into a dictionary of vote weights.

    Identical votes given on separate lines are merged by adding their
    weights.

    :param ballots: Pairs of a vote and its weight.
    :raises VoteWeightError: If any weight is not positive.
    '''
    votes = {}
    for vote, weight in ballots:
        if weight <= 0:
            raise VoteWeightError(weight)
        votes[vote] = votes.get(vote, 0) + weight
    return votes


def remove_withdrawn(votes: Dict[RankedVoteType, Number],
                     withdrawn: Collection[Candidate],
                     ) -> Dict[RankedVoteType, Number]:
    '''Remove withdrawn candidates from ranked votes.

    Votes that become identical after the removal are merged. Votes that only
    ranked withdrawn candidates become blank.
    '''
    if not withdrawn:
        return dict(votes)
    cleaned = {}
    for ranking, n_votes in votes.items():
        ranking = tuple(cand for cand in ranking if cand not in withdrawn)
        cleaned[ranking] = cleaned.get(ranking, 0) + n_votes
    return cleaned


def n_nonblank(votes: Dict[Any, Number]) -> Number:
    '''Return the total weight of non-blank votes.'''
    return sum(n_votes for vote, n_votes in votes.items() if vote)


def all_voted_candidates(votes: Dict[Any, Number]) -> FrozenSet[Candidate]:
    '''Return all candidates appearing on any vote, approval or ranked.'''
    return frozenset(cand for vote in votes for cand in vote)


class RankedVoteValidator:
    '''Validate a ranked vote (ranking of a number of candidates).

    The vote must be a tuple of candidates with no candidate ranked twice.

    :param candidates: If given, only these candidates may appear in the vote.
    '''
    def __init__(self, candidates: Collection[Candidate] = None):
        self.candidates = candidates

    def validate(self, vote: RankedVoteType) -> None:
        '''Check if the ranked vote is valid.

        :param vote: Ranked vote to be checked.
        :raises VoteTypeError: If the vote is not a tuple.
        :raises VoteError: If any candidate is ranked more than once.
        :raises CandidateError: If any of the contained candidates
            is not a valid candidate.
        '''
        if not isinstance(vote, tuple):
            raise VoteTypeError(type(vote), tuple)
        if len(set(vote)) < len(vote):
            raise VoteError(f'duplicated candidates: {vote}')
        for item in vote:
            _check_candidate(item, self.candidates)


def _check_candidate(item: Any, candidates: Collection[Candidate]) -> None:
    if not isinstance(item, Candidate):
        raise CandidateError(item, Candidate)
    if candidates is not None and item not in candidates:
        raise CandidateError(item, 'a candidate of this election')
