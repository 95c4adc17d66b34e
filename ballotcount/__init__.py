"""Ballotcount - multi-winner election tallying.

Ballotcount counts a single set of ballots under several voting methods so
that their outcomes can be compared side by side:

-   approval voting, net approval voting and satisfaction approval voting,
-   sequential proportional approval voting (SPAV) and its Silveira variant,
-   proportional approval voting (PAV), scoring whole slates of candidates,
-   single transferable vote (STV) with the Hagenbach-Bischoff quota and
    Wright system redistribution.

Candidates of an election are kept in an explicit
:class:`candidate.ElectionContext`. Votes are dictionaries mapping approval
votes (frozen sets) or ranked votes (tuples) to their weights, as produced by
the loaders in the :mod:`io` subpackage. The evaluators live in the
:mod:`evaluate` subpackage; the :mod:`convert` module simulates one ballot
form from the other so that every method can run on any input file.
"""
