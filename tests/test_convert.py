
import sys
import os

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import ballotcount.convert
from ballotcount.candidate import Candidate, ordering_key

A = Candidate(1, 'Adam')
B = Candidate(2, 'Bea')
C = Candidate(3, 'Cid')


def test_ranked_to_approval_top():
    votes = {(A, B, C): 2, (B, A): 3, (C, B, A): 1, (): 1}
    conv = ballotcount.convert.RankedToApprovalVotes(n_approved=2)
    assert conv.convert(votes) == {
        frozenset([A, B]): 5,
        frozenset([B, C]): 1,
        frozenset(): 1,
    }


def test_ranked_to_approval_all():
    votes = {(A, B, C): 2, (C,): 1}
    conv = ballotcount.convert.RankedToApprovalVotes()
    assert conv.convert(votes) == {
        frozenset([A, B, C]): 2,
        frozenset([C]): 1,
    }


def test_approval_to_ranked_alphabetical():
    votes = {frozenset([C, A]): 2, frozenset([B]): 1, frozenset(): 3}
    conv = ballotcount.convert.ApprovalToRankedVotes()
    assert conv.convert(votes) == {(A, C): 2, (B,): 1, (): 3}


def test_approval_to_ranked_by_counts():
    votes = {frozenset([A, B, C]): 1, frozenset([C]): 2}
    counts = {A: 1, B: 1, C: 3}
    conv = ballotcount.convert.ApprovalToRankedVotes(ordering_key(counts))
    assert conv.convert(votes) == {(C, A, B): 1, (C,): 2}
