"""A commandline tool to tally a multi-winner election by many methods at once.

Reads either a BLT file of ranked ballots (recognized by the .blt extension)
or a comma-separated matrix of approval ballots. The missing ballot form is
simulated from the one given, so that all of approval voting, net approval
voting, satisfaction approval voting, proportional approval voting,
sequential proportional approval voting and single transferable vote results
can be shown side by side.
"""

import argparse
import logging
import os
import sys
from numbers import Real
from typing import List, Optional, Tuple

import ballotcount.io.blt
import ballotcount.io.approval
import ballotcount.io.core
import ballotcount.evaluate.core
from ballotcount.candidate import ElectionContext
from ballotcount.convert import ApprovalToRankedVotes, RankedToApprovalVotes
from ballotcount.evaluate.approval import ApprovalVoting, NetApproval, \
    SatisfactionApproval, ProportionalApproval, SequentialProportionalApproval
from ballotcount.evaluate.sequential import TransferableVoteSelector, \
    CountStep

MIN_NAME_FIELD_LENGTH = 31
SECTION_RULE = '=' * 39

argparser = argparse.ArgumentParser(
    prog='ballotcount',
    description=__doc__,
    formatter_class=argparse.ArgumentDefaultsHelpFormatter,
)
argparser.add_argument(
    'input_file',
    help='file to load ballots from (.blt for ranked ballots, CSV otherwise)',
)
argparser.add_argument(
    '-n', '--n-seats',
    type=int,
    help=(
        'number of seats to fill; default (None) takes the number given in'
        ' a BLT file header and fills in 1 for approval ballot files'
    ),
)
argparser.add_argument(
    '-m', '--max-slates',
    type=int,
    default=10,
    help='show at most this many proportional approval voting slates',
)
argparser.add_argument(
    '-r', '--ranked',
    action='store_true',
    help=(
        'read the cell values of an approval ballot file as rank numbers'
        ' (lowest first) instead of simulating rankings'
    ),
)
argparser.add_argument(
    '-b', '--write-blt',
    metavar='PATH',
    help='also write the ranked ballots as a BLT file to PATH',
)
argparser.add_argument(
    '-v', '--verbose',
    action='store_true',
    help='show all evaluator log messages including count details',
)
argparser.add_argument(
    '-q', '--quiet',
    action='store_true',
    help='do not show any evaluator log messages or other info',
)


def main(input_file: str,
         n_seats: Optional[int] = None,
         max_slates: int = 10,
         ranked: bool = False,
         write_blt: Optional[str] = None,
         verbose: bool = False,
         quiet: bool = False,
         ) -> None:
    logging.basicConfig(
        level=(
            logging.DEBUG if verbose
            else (logging.WARNING if quiet else logging.INFO)
        ),
        format='%(levelname)-10s %(message)s'
    )
    data = load_ballots(input_file, ranked=ranked)
    if n_seats is None:
        n_seats = data.n_seats if data.n_seats else 1
    if write_blt:
        with open(write_blt, 'w', encoding='utf8') as outfile:
            ballotcount.io.blt.dump(
                outfile, data.ranked_votes, n_seats, data.context.all(),
                title=data.title,
            )
    context = data.context
    if data.title:
        print(data.title)
    name_length = max(context.max_name_length, MIN_NAME_FIELD_LENGTH)
    approval_counts = ApprovalVoting().evaluate(data.approval_votes)
    show_scores('APPROVAL VOTING', context, approval_counts, name_length)
    show_scores(
        'NET APPROVAL VOTING', context,
        NetApproval().evaluate(data.approval_votes, context.all()),
        name_length,
    )
    show_scores(
        'SATISFACTION APPROVAL VOTING', context,
        SatisfactionApproval().evaluate(data.approval_votes),
        name_length, decimals=3,
    )
    show_slates(
        context,
        ProportionalApproval().best_slates(
            data.approval_votes, n_seats,
            max_slates=max_slates,
            candidates=context.all(),
            ordering=context.ordering_key(),
        ),
        n_seats,
    )
    show_scores(
        'SEQUENTIAL PROPORTIONAL APPROVAL VOTING', context,
        SequentialProportionalApproval().evaluate(
            data.approval_votes, n_seats, context.all()
        ),
        name_length, decimals=3,
    )
    result = TransferableVoteSelector().count(
        data.ranked_votes, n_seats, context.all(), context.ordering_key()
    )
    show_header('SINGLE TRANSFERABLE VOTE')
    print(f'Quota: {float(result.quota):.2f}')
    print('First preferences: ' + ''.join(
        f'{cand.last_name}: {float(total):.0f}; '
        for cand, total in context.ranked_scores(result.first_preferences)
    ))
    for step in result.steps:
        print(format_step(step))
    print('Final Results')
    print('-------------')
    for cand in result.elected:
        print(cand.name.ljust(name_length))


def load_ballots(input_file: str,
                 ranked: bool = False,
                 ) -> ballotcount.io.core.ElectionData:
    """Load ballots and simulate the ballot form the file does not give.

    Sets the approval counts as the candidate ordering hint, so that all
    listings and the simulated rankings put the widely approved first.
    With ranked, the cell values of an approval ballot file give the rankings
    and nothing is simulated for them.
    """
    is_blt = os.path.splitext(input_file)[1].lower() == '.blt'
    with open(input_file, encoding='utf8') as infile:
        if is_blt:
            data = ballotcount.io.blt.load(infile)
        else:
            data = ballotcount.io.approval.load(infile, ranked=ranked)
    if is_blt:
        data.approval_votes = RankedToApprovalVotes(data.n_seats).convert(
            data.ranked_votes
        )
    data.context.set_counts(ApprovalVoting().evaluate(data.approval_votes))
    if data.ranked_votes is None:
        data.ranked_votes = ApprovalToRankedVotes(
            data.context.ordering_key()
        ).convert(data.approval_votes)
    return data


def show_header(title: str) -> None:
    print()
    print(title)
    print(SECTION_RULE)


def show_scores(title: str,
                context: ElectionContext,
                scores: dict,
                name_length: int,
                decimals: Optional[int] = None,
                ) -> None:
    show_header(title)
    for cand, score in context.ranked_scores(scores):
        print(cand.name.ljust(name_length) + format_score(score, decimals))


def show_slates(context: ElectionContext,
                slates: List[Tuple[frozenset, Real]],
                n_seats: int,
                ) -> None:
    show_header('PROPORTIONAL APPROVAL VOTING')
    width = context.max_name_length * n_seats
    for slate, score in slates:
        members = ', '.join(cand.name for cand in context.sorted(slate))
        print(f'[{members}]'.ljust(width) + format_score(score, 3))


def format_score(score: Real, decimals: Optional[int] = None) -> str:
    if decimals is None:
        return f'{int(score):8d}'
    else:
        return f'{float(score):8.{decimals}f}'


def format_step(step: CountStep) -> str:
    line = f'{step.action.capitalize()}, {step.candidate.last_name},' \
        f' {float(step.total):.1f}; '
    if step.transferred:
        line += f'Redistribute {float(step.transferred_total):.1f} votes; '
        line += ''.join(
            f'{cand.last_name}: +{float(amount):.1f}; '
            for cand, amount in step.transferred.items()
        )
    return line


def run() -> None:
    args = argparser.parse_args()
    try:
        main(**vars(args))
    except (OSError, ballotcount.io.core.ParseError) as err:
        print(err, file=sys.stderr)
        sys.exit(2)
    except (ValueError, ballotcount.evaluate.core.VotingSystemError) as err:
        argparser.error(str(err))


if __name__ == '__main__':
    run()
