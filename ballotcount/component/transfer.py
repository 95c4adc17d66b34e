'''Redistribution of votes between candidates for transferable vote systems.

Transfers of votes from eliminated and elected candidates to candidates
staying in the contest are an essential part of any transferable vote system,
such as the one of
:class:`ballotcount.evaluate.sequential.TransferableVoteSelector`.

The variant implemented here follows the Wright system: the next usable choice
of each ballot is looked up afresh on the original ranking at every transfer,
and the transferred amount is split proportionally to the number of ballots
naming each next choice. [#wwright]_

.. [#wwright] "Wright system", Wikipedia.
    https://en.wikipedia.org/wiki/Wright_system
'''

import collections
from fractions import Fraction
from typing import Collection, Dict, Optional
from numbers import Number

from ballotcount.candidate import Candidate
from ballotcount.vote import RankedVoteType


def next_usable_choice(vote: RankedVoteType,
                       source: Candidate,
                       elected: Collection[Candidate],
                       excluded: Collection[Candidate],
                       ) -> Optional[Candidate]:
    '''Select the candidate to which the vote passes from the source.

    Candidates already elected or excluded are skipped. A vote passes from the
    source only if the source is the first candidate on it still accounted
    for: when a continuing candidate is ranked above the source, the vote
    belongs to that candidate and does not transfer.

    :param vote: The ranked vote to examine.
    :param source: The candidate whose votes are being transferred.
    :param elected: Candidates already elected.
    :param excluded: Candidates already eliminated.
    :returns: The next usable choice, or None if the vote does not pass from
        the source or is exhausted after it.
    '''
    source_found = False
    for cand in vote:
        usable = cand not in elected and cand not in excluded
        if source_found and usable:
            return cand
        elif cand == source:
            source_found = True
        elif usable:
            # continuing candidate ranked above the source
            return None
    return None


def next_choices(votes: Dict[RankedVoteType, Number],
                 source: Candidate,
                 elected: Collection[Candidate],
                 excluded: Collection[Candidate],
                 ) -> Dict[Candidate, Number]:
    '''Count the ballots passing from the source to each next usable choice.

    :param votes: Ranked votes mapped to their weights.
    :returns: Next usable choices mapped to the weight of ballots naming them.
        Candidates with no ballots do not appear.
    '''
    counts = collections.defaultdict(int)
    for vote, n_votes in votes.items():
        target = next_usable_choice(vote, source, elected, excluded)
        if target is not None:
            counts[target] += n_votes
    return dict(counts)


def redistribute(source: Candidate,
                 amount: Number,
                 totals: Dict[Candidate, Number],
                 votes: Dict[RankedVoteType, Number],
                 elected: Collection[Candidate],
                 excluded: Collection[Candidate],
                 ) -> Dict[Candidate, Number]:
    '''Move votes from the source candidate to the next usable choices.

    Each next choice receives ``amount * ballots_for_it / all_ballots`` where
    the ballots are those that pass from the source. The source total is
    lowered by exactly the amount given away; if no ballot has a usable next
    choice, nothing moves and the amount stays with the source (to be
    discarded as exhausted when the source leaves the count).

    :param source: Candidate whose votes are moved.
    :param amount: Number of votes to move (surplus or whole total).
    :param totals: Current vote totals, modified in place.
    :param votes: Ranked votes mapped to their weights (blank votes allowed).
    :param elected: Candidates already elected.
    :param excluded: Candidates already eliminated.
    :returns: Candidates mapped to the amounts they received.
    '''
    if amount <= 0:
        return {}
    choices = next_choices(votes, source, elected, excluded)
    n_passing = sum(choices.values())
    if not n_passing:
        return {}
    received = {}
    for target, n_ballots in choices.items():
        share = Fraction(amount) * n_ballots / n_passing
        totals[target] = totals.get(target, 0) + share
        totals[source] -= share
        received[target] = share
    return received
