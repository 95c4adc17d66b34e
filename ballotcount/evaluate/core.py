'''General voting system evaluator machinery.'''

import abc
from typing import Any, Dict, List
from numbers import Number

from ballotcount.candidate import Candidate


class VotingSystemError(Exception):
    '''A voting system with a valid setup ended up in an unresolvable state.'''
    pass


class Evaluator(metaclass=abc.ABCMeta):
    '''Evaluate votes for candidates.

    A root abstract base class for all evaluators.
    '''
    @abc.abstractmethod
    def evaluate(self, votes, *args, **kwargs) -> Any:
        '''Evaluate votes for candidates.'''
        raise NotImplementedError


class Scorer(Evaluator):
    '''Assign a score to every candidate that received any support.

    The result is meant to be read in descending order of score; use
    :meth:`ballotcount.candidate.ElectionContext.ranked_scores` to order it.
    '''
    @abc.abstractmethod
    def evaluate(self, votes, *args, **kwargs) -> Dict[Candidate, Number]:
        '''Return candidates mapped to their scores.

        :param votes: Votes mapped to their weights.
        '''
        raise NotImplementedError


class Selector(Evaluator):
    '''Elect a given number of candidates.'''
    @abc.abstractmethod
    def evaluate(self, votes, n_seats, *args, **kwargs) -> List[Candidate]:
        '''Elect n_seats candidates as a list.

        :param votes: Votes mapped to their weights.
        :param n_seats: Number of candidates to elect.
        :returns: A list of candidates elected, in the order of their
            election.
        '''
        raise NotImplementedError


def check_n_seats(n_seats: int, n_candidates: int) -> None:
    '''Check that the number of seats can be filled by the candidates.

    :raises ValueError: If there are no seats or more seats than candidates.
    '''
    if n_seats <= 0:
        raise ValueError(f'invalid number of seats: {n_seats}, must be >0')
    if n_seats > n_candidates:
        raise ValueError(f'cannot fill {n_seats} seats'
                         f' with {n_candidates} candidates')
