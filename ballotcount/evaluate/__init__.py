'''Evaluate the results of the elections.

There are two kinds of evaluators:

*Scorers* return a dictionary mapping candidates (or, for proportional
approval voting, slates of candidates) to their scores. The scores are not
sorted; order them by
:meth:`ballotcount.candidate.ElectionContext.ranked_scores` to get the
candidate ordering applied to ties.

*Selectors* return a list of elected candidates in the order of their election.

The :mod:`approval` module contains the approval vote scorers, the
:mod:`sequential` module the single transferable vote selector.

None of the evaluators validate vote correctness; use the validators in the
:mod:`ballotcount.vote` module for that.
'''

from ballotcount.evaluate.core import *    # noqa
