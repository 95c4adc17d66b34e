'''Converters between vote formats.

These objects have a `convert()` method that simulates one ballot form from
the other, so that an election cast with approval ballots can also be counted
by single transferable vote, and an election cast with ranked ballots by the
approval methods.
'''

import collections
from typing import Any, Callable, Dict, FrozenSet, Optional
from numbers import Number

from ballotcount.candidate import Candidate, ordering_key
from ballotcount.vote import RankedVoteType


class Converter:
    def convert(self, *args, **kwargs):
        raise NotImplementedError


class RankedToApprovalVotes(Converter):
    '''Convert ranked votes to approval votes.

    Each voter is taken to approve of their top preferences, regardless of
    their rank among them.

    :param n_approved: How many top preferences to approve of. If None, all
        ranked candidates are approved. The command line tool uses the number
        of seats here.
    '''
    def __init__(self, n_approved: Optional[int] = None):
        self.n_approved = n_approved

    def convert(self,
                votes: Dict[RankedVoteType, Number],
                ) -> Dict[FrozenSet[Candidate], Number]:
        approval = collections.defaultdict(int)
        for ranking, n_votes in votes.items():
            if self.n_approved is not None:
                ranking = ranking[:self.n_approved]
            approval[frozenset(ranking)] += n_votes
        return dict(approval)


class ApprovalToRankedVotes(Converter):
    '''Convert approval votes to ranked votes.

    Each voter is taken to rank the candidates they approved in the order
    given by the candidate ordering. With the approval counts as the ordering
    hint, this ranks the more widely approved candidates first.

    :param ordering: Candidate sort key. Defaults to the candidate ordering
        without counts (i.e. alphabetical).
    '''
    def __init__(self, ordering: Optional[Callable[[Candidate], Any]] = None):
        self.ordering = ordering

    def convert(self,
                votes: Dict[FrozenSet[Candidate], Number],
                ) -> Dict[RankedVoteType, Number]:
        ordering = self.ordering if self.ordering is not None \
            else ordering_key()
        ranked = collections.defaultdict(int)
        for approved, n_votes in votes.items():
            ranked[tuple(sorted(approved, key=ordering))] += n_votes
        return dict(ranked)
