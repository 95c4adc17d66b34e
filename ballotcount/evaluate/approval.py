'''Approval voting evaluators.

All evaluators here take approval votes: a dictionary mapping frozen sets of
approved candidates to the number of voters casting them. Empty sets are blank
ballots and contribute nothing.

The simple scorers (:class:`ApprovalVoting`, :class:`NetApproval`,
:class:`SatisfactionApproval`) aggregate the ballots in a single pass.
The sequential scorers (:class:`SequentialProportionalApproval` and
:class:`SilveiraSequentialProportionalApproval`) select candidates round by
round, lowering the weight of ballots already represented.
:class:`ProportionalApproval` scores whole slates of candidates.
'''

import abc
import itertools
import collections
import logging
from fractions import Fraction
from typing import Any, Callable, Collection, Dict, FrozenSet, List, \
    Optional, Tuple
from numbers import Number

import ballotcount.util
import ballotcount.vote
import ballotcount.evaluate.core
from ballotcount.candidate import Candidate, ordering_key

ApprovalVotes = Dict[FrozenSet[Candidate], Number]

logger = logging.getLogger(__name__)


class ApprovalVoting(ballotcount.evaluate.core.Scorer):
    '''Approval voting (AV) scorer. [#wav]_

    Each ballot gives one point to every candidate it approves.

    .. [#wav] "Approval voting", Wikipedia.
        https://en.wikipedia.org/wiki/Approval_voting
    '''
    def evaluate(self, votes: ApprovalVotes) -> Dict[Candidate, Number]:
        '''Count approvals of each candidate.

        :param votes: Approval votes.
        :returns: Candidates with at least one approval mapped to the number
            of approvals.
        '''
        results = collections.defaultdict(int)
        for ballot, n_votes in votes.items():
            for cand in ballot:
                results[cand] += n_votes
        return dict(results)


class NetApproval(ballotcount.evaluate.core.Scorer):
    '''Net approval voting scorer.

    Each non-blank ballot gives one point to every candidate it approves and
    takes one point from every other candidate, so that every candidate is
    scored on every non-blank ballot.
    '''
    def evaluate(self,
                 votes: ApprovalVotes,
                 candidates: Collection[Candidate],
                 ) -> Dict[Candidate, Number]:
        '''Count net approvals of each candidate.

        :param votes: Approval votes.
        :param candidates: All candidates of the election, usually
            :meth:`ballotcount.candidate.ElectionContext.all`. Every one of
            them is scored, including those approved by nobody.
        '''
        results = {cand: 0 for cand in candidates}
        for ballot, n_votes in votes.items():
            if not ballot:
                continue
            for cand in candidates:
                results[cand] += n_votes if cand in ballot else -n_votes
        return results


class SatisfactionApproval(ballotcount.evaluate.core.Scorer):
    '''Satisfaction approval voting (SAV) scorer. [#wsav]_

    Each ballot has a total weight of one, split evenly among the candidates
    it approves.

    .. [#wsav] "Satisfaction approval voting", Wikipedia.
        https://en.wikipedia.org/wiki/Satisfaction_approval_voting
    '''
    def evaluate(self, votes: ApprovalVotes) -> Dict[Candidate, Fraction]:
        results = collections.defaultdict(Fraction)
        for ballot, n_votes in votes.items():
            if not ballot:
                continue
            share = Fraction(n_votes, len(ballot))
            for cand in ballot:
                results[cand] += share
        return dict(results)


class SequentialApproval(ballotcount.evaluate.core.Scorer):
    '''Base class for sequentially evaluated approval votes.

    The evaluation proceeds in rounds. In each round, every candidate not yet
    selected collects the current weight of all ballots approving them; the
    weight of a ballot depends on how many of the candidates it approves have
    already been selected. The candidate with the highest round score is
    selected - or all of them if several tie - and keeps the round score as
    their final score.

    The rounds end when there is nobody left to select. Candidates approved
    on no ballot are never selected and do not appear in the result.
    '''
    def evaluate(self,
                 votes: ApprovalVotes,
                 n_seats: int = 1,
                 candidates: Optional[Collection[Candidate]] = None,
                 ) -> Dict[Candidate, Number]:
        '''Select candidates sequentially.

        :param votes: Approval votes.
        :param n_seats: Number of seats in the election. Only used by
            variants whose ballot weights depend on it.
        :param candidates: All candidates of the election; the number of
            rounds is limited to their count. If not given, the candidates
            appearing on any ballot are used.
        :returns: Selected candidates mapped to the score of the round in
            which they were selected, in the order of selection.
        :raises ValueError: If the number of seats is not positive.
        '''
        if n_seats <= 0:
            raise ValueError(f'invalid number of seats: {n_seats}, must be >0')
        if candidates is None:
            candidates = ballotcount.vote.all_voted_candidates(votes)
        selected = {}
        for round_i in range(1, len(candidates) + 1):
            round_scores = self._round_scores(votes, selected, n_seats)
            if not round_scores:
                break
            logger.debug('round %d scores: %s', round_i, round_scores)
            top_score = max(round_scores.values())
            winners = [
                cand for cand, score in round_scores.items()
                if score == top_score
            ]
            logger.info('round %d: selected %s with %s',
                        round_i, winners, top_score)
            for cand in winners:
                selected[cand] = top_score
        return selected

    def _round_scores(self,
                      votes: ApprovalVotes,
                      selected: Dict[Candidate, Number],
                      n_seats: int,
                      ) -> Dict[Candidate, Number]:
        round_scores = collections.defaultdict(int)
        for ballot, n_votes in votes.items():
            if not ballot:
                continue
            n_selected = len(ballot.intersection(selected))
            weight = self.ballot_weight(n_selected, n_seats)
            for cand in ballot:
                if cand not in selected:
                    round_scores[cand] += n_votes * weight
        return dict(round_scores)

    @abc.abstractmethod
    def ballot_weight(self, n_selected: int, n_seats: int) -> Number:
        '''Return the weight of a ballot with n_selected approved selected.'''
        raise NotImplementedError


class SequentialProportionalApproval(SequentialApproval):
    '''Sequential Proportional Approval Voting (SPAV) scorer. [#wspav]_

    The weight of a ballot falls to ``1/(1+m)`` when ``m`` of the candidates
    it approves have already been selected (to a half after the first one,
    to a third after the second one, and so on).

    .. [#wspav] "Sequential proportional approval voting", Wikipedia.
        https://en.wikipedia.org/wiki/Sequential_proportional_approval_voting
    '''
    def ballot_weight(self, n_selected: int, n_seats: int) -> Fraction:
        return Fraction(1, 1 + n_selected)


class SilveiraSequentialProportionalApproval(SequentialApproval):
    '''Silveira variant of sequential proportional approval voting.

    The weight of a ballot decreases linearly with the number of its approved
    candidates already selected, ``max(1 - m/n_seats, 0)``, so that a ballot
    that has already seen as many of its candidates selected as there are
    seats no longer counts.
    '''
    def ballot_weight(self, n_selected: int, n_seats: int) -> Fraction:
        return max(1 - Fraction(n_selected, n_seats), Fraction(0))


class ProportionalApproval(ballotcount.evaluate.core.Evaluator):
    '''Proportional Approval Voting (PAV) slate scorer. [#wpav]_

    Evaluates the satisfaction of voters with each of the combinations
    (slates) of candidates of the size of the number of seats.
    The satisfaction of a voter is the harmonic number ``H(k)``, the sum
    of reciprocals from 1 to k, where k is the number of slate members the
    voter approved of.

    WARNING: Due to the enumeration of all slates, this method is highly
    computationally expensive (``C(n, seats)`` slates are scored against every
    ballot) and infeasible for more than a few dozen candidates.
    Progress is logged for large elections.

    .. [#wpav] "Proportional approval voting", Wikipedia.
        https://en.wikipedia.org/wiki/Proportional_approval_voting
    '''
    PROGRESS_THRESHOLD = 3000
    WARNING_THRESHOLD = 10 ** 7

    def __init__(self):
        self._coefs = [Fraction(0)]

    def evaluate(self,
                 votes: ApprovalVotes,
                 n_seats: int,
                 candidates: Optional[Collection[Candidate]] = None,
                 ) -> Dict[FrozenSet[Candidate], Fraction]:
        '''Score all slates of n_seats candidates.

        :param votes: Approval votes.
        :param n_seats: Number of candidates on a slate.
        :param candidates: All candidates of the election. If not given,
            the candidates appearing on any ballot are used.
        :returns: Slates (frozen sets) mapped to their total satisfaction.
            Slates not approved on any ballot do not appear.
        :raises ValueError: If the number of seats is not positive or larger
            than the number of candidates.
        '''
        candidates = self._candidate_list(votes, candidates)
        ballotcount.evaluate.core.check_n_seats(n_seats, len(candidates))
        self._extend_coefs(n_seats)
        n_slates = self.slate_count(len(candidates), n_seats)
        logger.info('scoring %d slates of %d candidates',
                    n_slates, n_seats)
        if n_slates > self.WARNING_THRESHOLD:
            logger.warning('%d slates to score, this may take very long',
                           n_slates)
        show_progress = n_slates > self.PROGRESS_THRESHOLD
        ballots = [(ballot, n) for ballot, n in votes.items() if ballot]
        progress_step = max(len(ballots) // 10, 1)
        results = collections.defaultdict(Fraction)
        for ballot_i, (ballot, n_votes) in enumerate(ballots):
            for slate in itertools.combinations(candidates, n_seats):
                n_approved = len(ballot.intersection(slate))
                if n_approved:
                    results[frozenset(slate)] += (
                        self._coefs[n_approved] * n_votes
                    )
            if show_progress and (ballot_i + 1) % progress_step == 0:
                logger.info('tallied %d of %d ballots',
                            ballot_i + 1, len(ballots))
        return dict(results)

    def best_slates(self,
                    votes: ApprovalVotes,
                    n_seats: int,
                    max_slates: int = 10,
                    candidates: Optional[Collection[Candidate]] = None,
                    ordering: Optional[Callable[[Candidate], Any]] = None,
                    ) -> List[Tuple[FrozenSet[Candidate], Fraction]]:
        '''Return the highest scoring slates in descending order of score.

        :param max_slates: Maximum number of slates to return.
        :param ordering: Candidate sort key used to break ties between slates
            of equal score (by their members in sorted order).
        '''
        if ordering is None:
            ordering = ordering_key()
        scores = self.evaluate(votes, n_seats, candidates=candidates)

        def members_key(slate):
            return tuple(sorted((ordering(cand) for cand in slate)))

        by_members = sorted(scores, key=members_key)
        ranked = sorted(by_members, key=scores.get, reverse=True)
        return [(slate, scores[slate]) for slate in ranked[:max_slates]]

    @staticmethod
    def slate_count(n_candidates: int, n_seats: int) -> int:
        '''Number of slates to score, clamped to the largest container size.'''
        return ballotcount.util.n_combinations(n_candidates, n_seats)

    def _extend_coefs(self, n_seats: int) -> None:
        # self._coefs[k] is the harmonic number H(k)
        for k in range(len(self._coefs), n_seats + 1):
            self._coefs.append(ballotcount.util.harmonic(k))

    @staticmethod
    def _candidate_list(votes: ApprovalVotes,
                        candidates: Optional[Collection[Candidate]],
                        ) -> List[Candidate]:
        if candidates is None:
            candidates = ballotcount.vote.all_voted_candidates(votes)
        return sorted(set(candidates), key=ordering_key())
