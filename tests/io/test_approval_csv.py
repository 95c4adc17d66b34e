
import sys
import os

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))
import ballotcount.io.approval
import ballotcount.evaluate.approval

DATA_DIR = os.path.join(os.path.dirname(__file__), 'data')


def test_survey_csv():
    with open(os.path.join(DATA_DIR, 'survey.csv'), encoding='utf8') as infile:
        data = ballotcount.io.approval.load(infile)
    assert data.ranked_votes is None
    assert data.n_seats is None
    assert [cand.name for cand in data.context.all()] == [
        'Hillary Clinton', 'Donald Trump', 'Gary Johnson', 'Jill Stein',
        'Mike Maturen',
    ]
    assert [cand.number for cand in data.context.all()] == [1, 2, 3, 4, 5]
    clinton, trump, johnson, stein, maturen = data.context.all()
    assert data.approval_votes == {
        frozenset([trump, maturen]): 1,
        frozenset([clinton]): 1,
        frozenset([johnson, stein, maturen]): 1,
        frozenset([clinton, johnson]): 1,
        frozenset(): 1,
    }
    counts = ballotcount.evaluate.approval.ApprovalVoting().evaluate(
        data.approval_votes
    )
    assert counts == {clinton: 2, trump: 1, johnson: 2, stein: 1, maturen: 2}


def test_merge_and_skip_empty_lines():
    data = ballotcount.io.approval.loads('A,B\nx,\n\nx,\n,y\n')
    a, b = data.context.all()
    assert data.approval_votes == {frozenset([a]): 2, frozenset([b]): 1}


def test_quoted_names_and_bom():
    data = ballotcount.io.approval.loads('\ufeff"Smith, Adam",Bea\n1,1\n')
    assert [cand.name for cand in data.context.all()] == ['Smith, Adam', 'Bea']
    assert data.context.max_name_length == len('Smith, Adam')


def test_short_rows_and_trailing_cells():
    data = ballotcount.io.approval.loads('A,B,C\n1\n,,1,,\n')
    a, b, c = data.context.all()
    assert data.approval_votes == {frozenset([a]): 1, frozenset([c]): 1}


def test_survey_csv_ranked():
    with open(os.path.join(DATA_DIR, 'survey.csv'), encoding='utf8') as infile:
        data = ballotcount.io.approval.load(infile, ranked=True)
    clinton, trump, johnson, stein, maturen = data.context.all()
    assert data.ranked_votes == {
        (trump, maturen): 1,
        (clinton,): 1,
        (johnson, stein, maturen): 1,
        (clinton, johnson): 1,
        (): 1,
    }
    assert len(data.approval_votes) == 5


def test_ranked_by_value():
    data = ballotcount.io.approval.loads(
        'A,B,C,D\n3,1,2,\n2.5,,1/2,10\n1,1,,\n', ranked=True
    )
    a, b, c, d = data.context.all()
    # equal values keep the column order
    assert data.ranked_votes == {(b, c, a): 1, (c, a, d): 1, (a, b): 1}
    assert data.approval_votes == {
        frozenset([a, b, c]): 1,
        frozenset([a, c, d]): 1,
        frozenset([a, b]): 1,
    }


@pytest.mark.parametrize('csv_text', [
    'A,B\nx,1',
    'A,B\n1/0,',
])
def test_invalid_ranked(csv_text):
    with pytest.raises(ballotcount.io.approval.ApprovalParseError):
        ballotcount.io.approval.loads(csv_text, ranked=True)
    ballotcount.io.approval.loads(csv_text)


@pytest.mark.parametrize('csv_text', [
    '',
    ',,\n1,,',
    'A,B\n1,1,1',
])
def test_invalid(csv_text):
    with pytest.raises(ballotcount.io.approval.ApprovalParseError):
        ballotcount.io.approval.loads(csv_text)
