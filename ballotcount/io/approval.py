"""Loading of approval ballots from a comma-separated matrix.

The first line lists the candidate names. Every following line is one ballot;
a non-empty cell in the column of a candidate approves that candidate::

    Hillary Clinton,Donald Trump,Gary Johnson,Jill Stein,Mike Maturen
    ,2,,,5
    1,,,,
    ,,3,4,5

contains five candidates and three ballots: the first approves Trump and
Maturen, the second Clinton, and the third Johnson, Stein and Maturen.
This is the format exported by survey tools such as SurveyMonkey.

Candidates are numbered from 1 in the order of the columns. A line with only
empty cells is a blank ballot; entirely empty lines are skipped.

When loaded with ``ranked=True``, the cell values are also read as rank
numbers and each ballot ranks its filled cells from the lowest value to the
highest, so the first ballot above becomes Trump > Maturen. Cells with equal
values are ranked in column order.
"""

import csv
from fractions import Fraction
from typing import Iterable, List, Tuple

import ballotcount.vote
import ballotcount.io.core
from ballotcount.candidate import ElectionContext
from ballotcount.io.core import ElectionData


class ApprovalParseError(ballotcount.io.core.ParseError):
    pass


def load_lines(csv_lines: Iterable[str],
               ranked: bool = False,
               ) -> ElectionData:
    reader = csv.reader(
        ballotcount.io.core.strip_bom(line) if i == 0 else line
        for i, line in enumerate(csv_lines)
    )
    try:
        header = next(reader)
    except StopIteration as e:
        raise ApprovalParseError('empty approval ballot file') from e
    names = [name.strip() for name in header]
    if not any(names):
        raise ApprovalParseError('no candidate names in header line')
    context = ElectionContext()
    for i, name in enumerate(names):
        context.register(i + 1, name)
    approvals = []
    rankings = []
    for line_i, row in enumerate(reader, start=2):
        if not row:
            continue
        if len(row) > len(names):
            extra = row[len(names):]
            if any(cell.strip() for cell in extra):
                raise ApprovalParseError(
                    f'line {line_i}: {len(row)} cells'
                    f' for {len(names)} candidates'
                )
        filled = [
            (i + 1, cell.strip()) for i, cell in enumerate(row[:len(names)])
            if cell.strip()
        ]
        approvals.append(context.from_numbers(num for num, cell in filled))
        if ranked:
            rankings.append(tuple(
                context.lookup(num) for num in _rank_cells(filled, line_i)
            ))
    return ElectionData(
        context=context,
        approval_votes=ballotcount.vote.aggregate(approvals),
        ranked_votes=ballotcount.vote.aggregate(rankings) if ranked else None,
    )


load, loads = ballotcount.io.core.loaders(load_lines)


def _rank_cells(filled: List[Tuple[int, str]], line_i: int) -> List[int]:
    values = []
    for num, cell in filled:
        try:
            values.append((Fraction(cell), num))
        except (ValueError, ZeroDivisionError) as e:
            raise ApprovalParseError(
                f'line {line_i}: invalid rank value {cell!r}'
            ) from e
    return [num for value, num in sorted(values)]
