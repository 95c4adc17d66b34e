
import sys
import os
from fractions import Fraction

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))
import ballotcount.evaluate.approval
from ballotcount.candidate import Candidate

A = Candidate(1, 'A')
B = Candidate(2, 'B')
C = Candidate(3, 'C')
D = Candidate(4, 'D')
E = Candidate(5, 'E')

SAMPLE_VOTES = {
    frozenset([A, B]): 6,
    frozenset([A, C]): 4,
    frozenset([C]): 3,
    frozenset([D]): 2,
    frozenset(): 1,
}


def test_av():
    av = ballotcount.evaluate.approval.ApprovalVoting()
    assert av.evaluate(SAMPLE_VOTES) == {A: 10, B: 6, C: 7, D: 2}


def test_av_idempotent():
    votes = dict(SAMPLE_VOTES)
    av = ballotcount.evaluate.approval.ApprovalVoting()
    first = av.evaluate(votes)
    assert av.evaluate(votes) == first
    assert votes == SAMPLE_VOTES


def test_net_av():
    votes = {
        frozenset([A, B]): 3,
        frozenset([C]): 1,
        frozenset(): 2,
    }
    nav = ballotcount.evaluate.approval.NetApproval()
    assert nav.evaluate(votes, [A, B, C, D]) == {A: 2, B: 2, C: -2, D: -4}
    # candidates nobody approved are still scored
    assert nav.evaluate({frozenset(): 2}, [A, B]) == {A: 0, B: 0}


def test_net_av_needs_candidates():
    nav = ballotcount.evaluate.approval.NetApproval()
    with pytest.raises(TypeError):
        nav.evaluate({frozenset([A]): 1})


def test_sav():
    # https://en.wikipedia.org/wiki/Satisfaction_approval_voting
    votes = {
        frozenset([A, B]): 4,
        frozenset([C]): 3,
        frozenset([D]): 3,
    }
    sav = ballotcount.evaluate.approval.SatisfactionApproval()
    assert sav.evaluate(votes) == {A: 2, B: 2, C: 3, D: 3}


@pytest.mark.parametrize('ballot', [
    frozenset([A]),
    frozenset([A, B, C]),
    frozenset([A, B, C, D, E]),
])
def test_sav_normalized(ballot):
    sav = ballotcount.evaluate.approval.SatisfactionApproval()
    result = sav.evaluate({ballot: 1})
    assert set(result.values()) == {Fraction(1, len(ballot))}
    assert sum(result.values()) == 1


def test_spav():
    spav = ballotcount.evaluate.approval.SequentialProportionalApproval()
    result = spav.evaluate(SAMPLE_VOTES, 2)
    assert result == {A: 10, C: 5, B: 3, D: 2}
    assert list(result) == [A, C, B, D]


def test_spav_tie():
    votes = {frozenset([A]): 2, frozenset([B]): 2, frozenset([A, C]): 1}
    spav = ballotcount.evaluate.approval.SequentialProportionalApproval()
    assert spav.evaluate(votes) == {A: 3, B: 2, C: Fraction(1, 2)}
    votes = {frozenset([A]): 2, frozenset([B]): 2}
    assert spav.evaluate(votes) == {A: 2, B: 2}


def test_spav_never_approved():
    spav = ballotcount.evaluate.approval.SequentialProportionalApproval()
    result = spav.evaluate(SAMPLE_VOTES, 2, candidates=[A, B, C, D, E])
    assert E not in result
    assert list(result) == [A, C, B, D]


def test_sspav():
    sspav = ballotcount.evaluate.approval. \
        SilveiraSequentialProportionalApproval()
    assert sspav.evaluate(SAMPLE_VOTES, 2) == {A: 10, C: 5, B: 3, D: 2}
    # a single seat: one selected candidate exhausts a ballot
    assert sspav.evaluate(SAMPLE_VOTES, 1) == {A: 10, C: 3, D: 2, B: 0}


@pytest.mark.parametrize(('n_selected', 'n_seats', 'weight'), [
    (0, 3, 1),
    (1, 3, Fraction(2, 3)),
    (3, 3, 0),
    (4, 3, 0),
])
def test_sspav_weight(n_selected, n_seats, weight):
    sspav = ballotcount.evaluate.approval. \
        SilveiraSequentialProportionalApproval()
    assert sspav.ballot_weight(n_selected, n_seats) == weight


def test_pav_harmonic():
    pav = ballotcount.evaluate.approval.ProportionalApproval()
    assert pav.evaluate({frozenset([A]): 1}, 2, [A, B, C]) == {
        frozenset([A, B]): 1,
        frozenset([A, C]): 1,
    }
    assert pav.evaluate({frozenset([A, B]): 1}, 2, [A, B, C]) == {
        frozenset([A, B]): Fraction(3, 2),
        frozenset([A, C]): 1,
        frozenset([B, C]): 1,
    }


def test_pav():
    # https://en.wikipedia.org/wiki/Proportional_approval_voting
    votes = {
        frozenset([A, B]): 5,
        frozenset([A, C]): 17,
        frozenset([D]): 8,
    }
    pav = ballotcount.evaluate.approval.ProportionalApproval()
    scores = pav.evaluate(votes, 2)
    assert scores[frozenset([A, C])] == 30 + Fraction(1, 2)
    assert scores[frozenset([A, D])] == 30
    assert len(scores) == 6
    assert pav.best_slates(votes, 2, max_slates=2) == [
        (frozenset([A, C]), 30 + Fraction(1, 2)),
        (frozenset([A, D]), 30),
    ]
    assert len(pav.best_slates(votes, 2)) == 6


def test_pav_slate_ties():
    votes = {frozenset([A]): 1, frozenset([B]): 1, frozenset([C]): 1}
    pav = ballotcount.evaluate.approval.ProportionalApproval()
    assert [slate for slate, score in pav.best_slates(votes, 2)] == [
        frozenset([A, B]), frozenset([A, C]), frozenset([B, C]),
    ]


def test_pav_blank_only():
    pav = ballotcount.evaluate.approval.ProportionalApproval()
    assert pav.evaluate({frozenset(): 5}, 1, [A, B]) == {}


@pytest.mark.parametrize('n_seats', [0, -1, 5])
def test_pav_invalid_seats(n_seats):
    pav = ballotcount.evaluate.approval.ProportionalApproval()
    with pytest.raises(ValueError):
        pav.evaluate(SAMPLE_VOTES, n_seats)


def test_pav_slate_count():
    pav = ballotcount.evaluate.approval.ProportionalApproval
    assert pav.slate_count(5, 2) == 10
    assert pav.slate_count(1000, 500) == sys.maxsize


@pytest.mark.parametrize('evaluator_class', [
    ballotcount.evaluate.approval.SequentialProportionalApproval,
    ballotcount.evaluate.approval.SilveiraSequentialProportionalApproval,
])
@pytest.mark.parametrize('n_seats', [0, -1])
def test_sequential_invalid_seats(evaluator_class, n_seats):
    with pytest.raises(ValueError):
        evaluator_class().evaluate({frozenset([A, B]): 1}, n_seats)
