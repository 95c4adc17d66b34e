'''Single transferable vote evaluation of ranked votes.

This hosts the transferable vote selector
(:class:`TransferableVoteSelector`) with the Hagenbach-Bischoff quota and
Wright system redistribution, together with the records of the individual
counts it produces.
'''

import dataclasses
import logging
from typing import Any, Callable, Collection, Dict, List, Optional, Set, \
    Union
from numbers import Number

import ballotcount.vote
import ballotcount.component.quota
import ballotcount.component.transfer
import ballotcount.evaluate.core
from ballotcount.candidate import Candidate, ordering_key
from ballotcount.vote import RankedVoteType

RankedVotes = Dict[RankedVoteType, Number]

SEATING = 'seat'
ELIMINATING = 'eliminate'
DONE = 'done'

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class CountStep:
    '''A single seating or elimination within a transferable vote count.'''
    action: str
    candidate: Candidate
    total: Number
    transferred: Dict[Candidate, Number] = dataclasses.field(
        default_factory=dict
    )

    @property
    def transferred_total(self) -> Number:
        return sum(self.transferred.values())


@dataclasses.dataclass
class STVResult:
    '''The outcome of a transferable vote count.'''
    elected: List[Candidate]
    quota: Number
    first_preferences: Dict[Candidate, Number]
    steps: List[CountStep] = dataclasses.field(default_factory=list)


def first_preferences(votes: RankedVotes,
                      candidates: Collection[Candidate],
                      ) -> Dict[Candidate, Number]:
    '''Allocate votes by first preference.

    :param votes: Ranked votes.
    :param candidates: All candidates in the count. Every one of them is
        present in the output, with zero if nobody ranked them first.
    '''
    totals = {cand: 0 for cand in candidates}
    for vote, n_votes in votes.items():
        if vote:
            totals[vote[0]] = totals.get(vote[0], 0) + n_votes
    return totals


class TransferableVoteSelector(ballotcount.evaluate.core.Selector):
    '''Select candidates by quota election, elimination and vote transfer.

    This is the single transferable vote (STV) evaluator.

    First, every candidate gets the votes that rank them first. Then, in each
    count, the candidates are ranked by their current vote totals (ties are
    broken by the candidate ordering):

    -   If any candidates exceed the quota, they are all elected (as long as
        there are seats left), and the surplus over the quota of each of them
        is transferred to the next usable choices on their ballots, unless all
        seats are already filled.
    -   Otherwise, the lowest ranked candidate is eliminated and their whole
        total is transferred to the next usable choices.

    Transfers follow the Wright system as implemented in
    :func:`ballotcount.component.transfer.redistribute`. Votes with no usable
    next choice are exhausted and leave the count with their candidate.

    If nobody exceeds the quota and there are no more candidates left than
    seats to fill, all the remaining candidates are elected.

    :param quota_function: A callable producing the quota threshold from the
        total number of non-blank votes and number of seats. The quota
        functions of the :mod:`ballotcount.component.quota` module can be
        referenced by their name.
    :param accept_quota_equal: Whether to elect candidates whose total only
        equals the quota.
    :param mandatory_quota: If True, the candidates must exceed the quota
        to be elected, i.e. they cannot be merely the last ones remaining;
        a :class:`VotingSystemError` is raised when the seats cannot be
        filled by quota.
    '''
    def __init__(self,
                 quota_function: Union[
                     str, Callable[[int, int], Number]
                 ] = 'hagenbach_bischoff',
                 accept_quota_equal: bool = False,
                 mandatory_quota: bool = False,
                 ):
        self.quota_function = ballotcount.component.quota.construct(
            quota_function
        )
        self.accept_quota_equal = accept_quota_equal
        self.mandatory_quota = mandatory_quota

    def evaluate(self,
                 votes: RankedVotes,
                 n_seats: int = 1,
                 candidates: Optional[Collection[Candidate]] = None,
                 ordering: Optional[Callable[[Candidate], Any]] = None,
                 ) -> List[Candidate]:
        '''Select candidates by single transferable vote.

        :param votes: Ranked votes mapped to their weights. Blank votes are
            ignored and do not affect the quota.
        :param n_seats: Number of candidates to elect.
        :param candidates: All candidates standing in the election. If not
            given, the candidates ranked on any ballot are used.
        :param ordering: Candidate sort key to break ties. Defaults to the
            candidate ordering without counts.
        :returns: Elected candidates in the order in which they were seated.
        '''
        return self.count(votes, n_seats, candidates, ordering).elected

    def count(self,
              votes: RankedVotes,
              n_seats: int = 1,
              candidates: Optional[Collection[Candidate]] = None,
              ordering: Optional[Callable[[Candidate], Any]] = None,
              ) -> STVResult:
        '''Run the whole count, recording every step.

        Accepts the same arguments as :meth:`evaluate`.

        :raises ValueError: If the number of seats is not positive or exceeds
            the number of candidates.
        '''
        if ordering is None:
            ordering = ordering_key()
        votes = {vote: n_votes for vote, n_votes in votes.items() if vote}
        if candidates is None:
            candidates = ballotcount.vote.all_voted_candidates(votes)
        ballotcount.evaluate.core.check_n_seats(n_seats, len(candidates))
        quota = self.quota_function(
            ballotcount.vote.n_nonblank(votes), n_seats
        )
        logger.info('quota computed at %.2f', quota)
        totals = first_preferences(votes, candidates)
        logger.info('first preferences: %s', '; '.join(
            f'{cand.last_name}: {total}'
            for cand, total in self._rank(totals, ordering)
        ))
        result = STVResult([], quota, dict(totals))
        excluded = set()
        state = None
        while state != DONE:
            state = self.next_count(
                totals, votes, n_seats, quota,
                result.elected, excluded, ordering, result.steps
            )
        return result

    def next_count(self,
                   totals: Dict[Candidate, Number],
                   votes: RankedVotes,
                   n_seats: int,
                   quota: Number,
                   elected: List[Candidate],
                   excluded: Set[Candidate],
                   ordering: Callable[[Candidate], Any],
                   steps: List[CountStep],
                   ) -> str:
        '''Advance the transferable voting process by one iteration (count).

        :param totals: Current vote totals of continuing candidates, modified
            in place.
        :param votes: Non-blank ranked votes.
        :param n_seats: Total number of seats to award.
        :param quota: The election quota.
        :param elected: Candidates elected so far, extended in place.
        :param excluded: Candidates eliminated so far, extended in place.
        :param ordering: Candidate sort key to break ties.
        :param steps: Record of count steps, extended in place.
        :returns: :data:`SEATING` or :data:`ELIMINATING` according to the
            action performed, or :data:`DONE` if all seats are filled.
        '''
        n_free = n_seats - len(elected)
        if n_free <= 0:
            return DONE
        ranking = self._rank(totals, ordering)
        logger.debug('current vote totals: %s', ranking)
        if not ranking:
            raise ballotcount.evaluate.core.VotingSystemError(
                f'no candidates left to fill {n_free} seats'
            )
        provisional = [
            cand for cand, total in ranking if self._reaches_quota(total, quota)
        ]
        if provisional:
            self._seat(provisional[:n_free], totals, votes, n_seats, quota,
                       elected, excluded, steps)
            state = SEATING
        elif len(ranking) <= n_free:
            if self.mandatory_quota:
                raise ballotcount.evaluate.core.VotingSystemError(
                    f'{len(ranking)} candidates remaining for {n_free} seats'
                    ' and none of them reaches the quota'
                )
            logger.info('electing all remaining: %s', ranking)
            for cand, total in ranking:
                elected.append(cand)
                steps.append(CountStep(SEATING, cand, total))
                del totals[cand]
            state = SEATING
        else:
            self._eliminate(ranking[-1][0], totals, votes, elected, excluded,
                            steps)
            state = ELIMINATING
        return DONE if len(elected) >= n_seats else state

    def _seat(self,
              provisional: List[Candidate],
              totals: Dict[Candidate, Number],
              votes: RankedVotes,
              n_seats: int,
              quota: Number,
              elected: List[Candidate],
              excluded: Set[Candidate],
              steps: List[CountStep],
              ) -> None:
        # All are seated before any surplus moves, so that no surplus
        # is transferred to another candidate elected in the same count.
        elected.extend(provisional)
        for cand in provisional:
            total = totals[cand]
            transferred = {}
            if len(elected) < n_seats:
                transferred = ballotcount.component.transfer.redistribute(
                    cand, total - quota, totals, votes, elected, excluded
                )
            logger.info('seat %s with %s, transferring %s',
                        cand.last_name, total, transferred)
            steps.append(CountStep(SEATING, cand, total, transferred))
            del totals[cand]

    def _eliminate(self,
                   cand: Candidate,
                   totals: Dict[Candidate, Number],
                   votes: RankedVotes,
                   elected: List[Candidate],
                   excluded: Set[Candidate],
                   steps: List[CountStep],
                   ) -> None:
        total = totals[cand]
        excluded.add(cand)
        transferred = ballotcount.component.transfer.redistribute(
            cand, total, totals, votes, elected, excluded
        )
        logger.info('eliminate %s with %s, transferring %s',
                    cand.last_name, total, transferred)
        steps.append(CountStep(ELIMINATING, cand, total, transferred))
        del totals[cand]

    def _reaches_quota(self, total: Number, quota: Number) -> bool:
        return total > quota or (self.accept_quota_equal and total == quota)

    @staticmethod
    def _rank(totals: Dict[Candidate, Number],
              ordering: Callable[[Candidate], Any],
              ) -> List:
        by_candidate = sorted(totals, key=ordering)
        return [
            (cand, totals[cand])
            for cand in sorted(by_candidate, key=totals.get, reverse=True)
        ]
