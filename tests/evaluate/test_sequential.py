
import sys
import os
from fractions import Fraction

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))
import ballotcount.evaluate.core
import ballotcount.evaluate.sequential
from ballotcount.candidate import Candidate, ordering_key
from ballotcount.evaluate.sequential import CountStep, SEATING, ELIMINATING

A = Candidate(1, 'Adam A')
B = Candidate(2, 'Bea B')
C = Candidate(3, 'Cid C')
D = Candidate(4, 'Dee D')
E = Candidate(5, 'Eve E')

STV_EVAL = ballotcount.evaluate.sequential.TransferableVoteSelector()

SAMPLE_VOTES = {
    (A, B, C): 10,
    (B, A): 6,
    (C, D): 5,
    (D, C, E): 4,
    (E,): 2,
    (B, C, E): 3,
    (): 2,
}


def test_scenario():
    votes = {(A, B): 1, (B, A): 1, (A,): 1}
    result = STV_EVAL.count(votes, 1, [A, B, C])
    assert result.quota == Fraction(3, 2)
    assert result.first_preferences == {A: 2, B: 1, C: 0}
    assert result.elected == [A]
    # last seat filled, the surplus does not move
    assert result.steps == [CountStep(SEATING, A, 2)]
    assert STV_EVAL.evaluate(votes, 1, [A, B, C]) == [A]


@pytest.mark.parametrize('n_seats', [1, 2, 3, 4, 5])
def test_seat_count(n_seats):
    elected = STV_EVAL.evaluate(SAMPLE_VOTES, n_seats, [A, B, C, D, E])
    assert len(elected) == n_seats
    assert len(set(elected)) == n_seats
    assert set(elected) <= {A, B, C, D, E}


@pytest.mark.parametrize('quota_function', ['hagenbach_bischoff', 'droop'])
@pytest.mark.parametrize('n_seats', [1, 2, 3])
def test_seat_count_quotas(quota_function, n_seats):
    stv = ballotcount.evaluate.sequential.TransferableVoteSelector(
        quota_function=quota_function
    )
    elected = stv.evaluate(SAMPLE_VOTES, n_seats)
    assert len(elected) == len(set(elected)) == n_seats


def test_blank_exclusion():
    votes = {(A,): 1, (B,): 2, (): 5}
    result = STV_EVAL.count(votes, 1, [A, B])
    assert result.quota == Fraction(3, 2)
    assert result.first_preferences == {A: 1, B: 2}
    assert result.elected == [B]


@pytest.mark.parametrize('votes', [{}, {(): 3}])
def test_no_ballots(votes):
    result = STV_EVAL.count(votes, 1, [A, B])
    assert result.quota == 0
    assert result.elected == [A]
    assert [step.action for step in result.steps] == [ELIMINATING, SEATING]


def test_surplus_transfer():
    votes = {(A, B): 4, (B,): 1, (C,): 2}
    result = STV_EVAL.count(votes, 2, [A, B, C])
    assert result.quota == Fraction(7, 3)
    assert result.elected == [A, B]
    assert result.steps == [
        CountStep(SEATING, A, 4, {B: Fraction(5, 3)}),
        CountStep(SEATING, B, Fraction(8, 3)),
    ]
    assert result.steps[0].transferred_total == Fraction(5, 3)


def test_elimination_transfer():
    votes = {(A,): 3, (B,): 2, (C, A): 1}
    result = STV_EVAL.count(votes, 1, [A, B, C])
    assert result.quota == 3
    assert result.elected == [A]
    assert result.steps == [
        CountStep(ELIMINATING, C, 1, {A: 1}),
        CountStep(SEATING, A, 4),
    ]


def test_provisional_truncation():
    votes = {(A,): 3, (B,): 3, (C,): 3}
    stv = ballotcount.evaluate.sequential.TransferableVoteSelector(
        accept_quota_equal=True
    )
    assert stv.evaluate(votes, 2, [A, B, C]) == [A, B]
    # without equality nobody reaches the quota of 3
    assert STV_EVAL.evaluate(votes, 2, [A, B, C]) == [A, B]


def test_seat_order():
    votes = {(C,): 5, (A,): 1, (B, A): 1}
    assert STV_EVAL.evaluate(votes, 2, [A, B, C]) == [C, A]


@pytest.mark.parametrize('n_seats', [0, -1, 4])
def test_invalid_seats(n_seats):
    with pytest.raises(ValueError):
        STV_EVAL.evaluate({(A, B): 1}, n_seats, [A, B, C])


def test_mandatory_quota():
    votes = {(A,): 1, (B,): 1, (C,): 1}
    stv = ballotcount.evaluate.sequential.TransferableVoteSelector(
        mandatory_quota=True
    )
    with pytest.raises(ballotcount.evaluate.core.VotingSystemError):
        stv.evaluate(votes, 1, [A, B, C])
    assert STV_EVAL.evaluate(votes, 1, [A, B, C]) == [A]


def test_tie_break_ordering():
    votes = {(A,): 1, (B,): 1, (C,): 1}
    assert STV_EVAL.evaluate(votes, 1, [A, B, C]) == [A]
    counts = {A: 1, B: 1, C: 5}
    assert STV_EVAL.evaluate(
        votes, 1, [A, B, C], ordering=ordering_key(counts)
    ) == [C]


def test_deterministic():
    results = [
        STV_EVAL.evaluate(SAMPLE_VOTES, 3, [A, B, C, D, E])
        for i in range(5)
    ]
    assert all(result == results[0] for result in results)


def test_custom_quota():
    stv = ballotcount.evaluate.sequential.TransferableVoteSelector(
        quota_function=lambda votes, seats: Fraction(votes, seats)
    )
    result = stv.count({(A,): 3, (B,): 1}, 1, [A, B])
    assert result.quota == 4
    assert result.elected == [A]


def test_first_preferences():
    assert ballotcount.evaluate.sequential.first_preferences(
        SAMPLE_VOTES, [A, B, C, D, E]
    ) == {A: 10, B: 9, C: 5, D: 4, E: 2}
