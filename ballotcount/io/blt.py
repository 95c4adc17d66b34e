"""Reading and writing of ranked ballots in BLT files.

The BLT format was first described by Hill, Wichmann & Woodall in
"Algorithm 123 - Single Transferable Vote by Meek's method" (1987) and
popularized by OpenSTV. A file looks like this::

    4 2          # four candidates, two seats
    -2           # candidate 2 withdrew
    3 1 3 4 0    # three voters ranked 1 > 3 > 4
    1 4 1 0      /* a comment
                    spanning lines */
    0            # end of ballots
    "Adam Smith"
    "Bea Jones"
    "Cid Brown"
    "Dee White"
    "Club Board Election"

Both ``#`` line comments and ``/* ... */`` block comments are ignored outside
of quoted strings.

Withdrawn candidates are not registered in the election context and are
removed from all ballots.
"""

from numbers import Number
from typing import Collection, Dict, Iterable, List, Optional, Set, Tuple

import ballotcount.vote
import ballotcount.io.core
from ballotcount.candidate import Candidate, ElectionContext
from ballotcount.io.core import ElectionData
from ballotcount.vote import RankedVoteType


class BLTParseError(ballotcount.io.core.ParseError):
    pass


def load_lines(blt_lines: Iterable[str]) -> ElectionData:
    blt_lines = _strip_block_comments(blt_lines)
    try:
        header = ballotcount.io.core.strip_bom(next(blt_lines))
    except StopIteration as e:
        raise BLTParseError('empty BLT file') from e
    n_cands, n_seats = _parse_header(header)
    ballots, withdrawn = _parse_body(blt_lines)
    names, title = _parse_strings(blt_lines, n_cands)
    if names is None:
        names = [str(i + 1) for i in range(n_cands)]
    for number in withdrawn:
        if not 1 <= number <= n_cands:
            raise BLTParseError(f'withdrawn candidate number {number} out of'
                                f' range 1-{n_cands}')
    candidates = [Candidate(i + 1, name) for i, name in enumerate(names)]
    context = ElectionContext()
    for cand in candidates:
        if cand.number not in withdrawn:
            context.register(cand.number, cand.name)
    votes = ballotcount.vote.remove_withdrawn(
        _deindex_ballots(ballots, candidates),
        [cand for cand in candidates if cand.number in withdrawn],
    )
    return ElectionData(
        context=context,
        ranked_votes=votes,
        n_seats=n_seats,
        title=title,
    )


load, loads = ballotcount.io.core.loaders(load_lines)


def dump_lines(votes: Dict[RankedVoteType, Number],
               n_seats: int,
               candidates: Collection[Candidate],
               title: Optional[str] = None,
               ) -> Iterable[str]:
    '''Produce the lines of a BLT file.

    :param votes: Ranked votes mapped to their weights, which must be
        positive integers.
    :param n_seats: Number of seats to fill.
    :param candidates: All candidates of the election, usually
        :meth:`ballotcount.candidate.ElectionContext.all`. They are numbered
        in the file by their position here, from 1.
    :param title: Election title to write after the candidate names.
    :raises ballotcount.vote.VoteError: If a vote ranks a candidate twice
        or has an invalid weight.
    :raises ballotcount.candidate.CandidateError: If a vote ranks a candidate
        not listed in candidates.
    '''
    candidates = list(candidates)
    validator = ballotcount.vote.RankedVoteValidator(candidates)
    yield _dump_numline([len(candidates), n_seats])
    for vote, n_votes in votes.items():
        validator.validate(vote)
        if not isinstance(n_votes, int) or n_votes <= 0:
            raise ballotcount.vote.VoteWeightError(n_votes)
        yield _dump_numline(_dump_vote(vote, candidates, n_votes))
    yield _dump_numline([0])
    for cand in candidates:
        yield _dump_strline(cand.name)
    if title is not None:
        yield _dump_strline(title)


dump, dumps = ballotcount.io.core.dumpers(dump_lines)


def _dump_vote(vote: RankedVoteType,
               candidates: List[Candidate],
               n_votes: int,
               ) -> List[int]:
    return [n_votes] + [candidates.index(cand) + 1 for cand in vote] + [0]


def _dump_numline(nums: List[int]) -> str:
    return ' '.join(str(num) for num in nums)


def _dump_strline(string: str) -> str:
    if '"' in string:
        raise ValueError(f'double quotes cannot be written to BLT: {string!r}')
    return f'"{string}"'


def _strip_block_comments(blt_lines: Iterable[str]) -> Iterable[str]:
    in_comment = False
    for line in blt_lines:
        kept = []
        in_quote = False
        i = 0
        while i < len(line):
            if in_comment:
                end = line.find('*/', i)
                if end == -1:
                    break
                in_comment = False
                i = end + 2
            elif line[i] == '"':
                in_quote = not in_quote
                kept.append(line[i])
                i += 1
            elif in_quote:
                kept.append(line[i])
                i += 1
            elif line[i] == '#':
                # line comment, left for _clean_line
                kept.append(line[i:])
                break
            elif line.startswith('/*', i):
                in_comment = True
                kept.append(' ')
                i += 2
            else:
                kept.append(line[i])
                i += 1
        yield ''.join(kept)


def _deindex_ballots(ballots: Dict[Tuple[int, ...], int],
                     candidates: List[Candidate],
                     ) -> Dict[RankedVoteType, int]:
    pairs = []
    for ballot, n_votes in ballots.items():
        for number in ballot:
            if not 1 <= number <= len(candidates):
                raise BLTParseError(f'candidate number {number} out of range'
                                    f' 1-{len(candidates)} in ballot'
                                    f' {ballot!r}')
        if len(set(ballot)) < len(ballot):
            raise BLTParseError(f'candidate ranked twice: {ballot!r}')
        pairs.append((tuple(candidates[number - 1] for number in ballot),
                      n_votes))
    return ballotcount.vote.aggregate_weighted(pairs)


def _parse_header(blt_line: str) -> Tuple[int, int]:
    blt_result = _parse_numline(blt_line)
    if len(blt_result) == 2 and blt_result[0] > 0 and blt_result[1] > 0:
        return tuple(blt_result)
    else:
        raise BLTParseError(f'need two positive integers (candidate and seat'
                            f' count) in BLT file header line,'
                            f' got {blt_line!r}')


def _parse_body(blt_lines: Iterable[str],
                ) -> Tuple[Dict[Tuple[int, ...], int], Set[int]]:
    ballots = {}
    withdrawn = set()
    ballots_encountered = False
    for line in blt_lines:
        result = _parse_numline(line)
        if not result:
            continue    # ignore empty lines
        elif result == [0]:
            # End-of-ballots line, return.
            return ballots, withdrawn
        elif result[0] < 0:
            if ballots_encountered:
                raise BLTParseError('withdrawn candidate line after ballot'
                                    f' line: {line!r}')
            # Withdrawn candidates. Allow more than one per line.
            if any(n >= 0 for n in result):
                raise BLTParseError(f'invalid withdrawn line: {line!r}')
            withdrawn.update(-n for n in result)
        else:
            weight, ballot = _parse_ballot(result)
            ballots[ballot] = ballots.get(ballot, 0) + weight
            ballots_encountered = True
    raise BLTParseError('incomplete BLT file:'
                        ' EOF before ballot list terminator')


def _parse_strings(blt_lines: Iterable[str],
                   n_cands: int,
                   ) -> Tuple[Optional[List[str]], Optional[str]]:
    parsed_lines = []
    for blt_line in blt_lines:
        blt_line = _clean_line(blt_line)
        if not blt_line:
            continue
        elif blt_line.startswith('"') and blt_line.endswith('"') \
                and len(blt_line) > 1:
            parsed_lines.append(blt_line[1:-1])
        else:
            raise BLTParseError(f'invalid BLT string line: {blt_line!r}')
    if not parsed_lines:
        return None, None
    elif len(parsed_lines) < n_cands:
        raise BLTParseError(f'not enough candidate names: {len(parsed_lines)}'
                            f' given, {n_cands} set in header')
    elif len(parsed_lines) == n_cands:
        return parsed_lines, None
    elif len(parsed_lines) == n_cands + 1:
        return parsed_lines[:-1], parsed_lines[-1]
    else:
        raise BLTParseError(f'too many strings: {len(parsed_lines)} found'
                            f' but expecting {n_cands} candidate names'
                            ' + title')


def _clean_line(blt_line: str) -> str:
    blt_line = blt_line.strip()
    # Ignore everything after the first hash sign after the last double quote.
    hash_search_start = blt_line.rfind('"') if '"' in blt_line else 0
    leftmost_hash = blt_line[hash_search_start:].find('#')
    if leftmost_hash == -1:
        return blt_line
    else:
        return blt_line[:(hash_search_start + leftmost_hash)].rstrip()


def _parse_ballot(nums: List[int]) -> Tuple[int, Tuple[int, ...]]:
    # The first element is the weight, the rest are candidate numbers
    # terminated by a zero.
    if nums[-1] != 0 or len(nums) < 2:
        raise BLTParseError('ballot line must be zero-terminated,'
                            f' got {nums!r}')
    if nums[0] <= 0:
        raise BLTParseError(f'ballot weight must be positive, got {nums!r}')
    if 0 in nums[1:-1]:
        raise BLTParseError(f'zero inside ballot line: {nums!r}')
    return nums[0], tuple(nums[1:-1])


def _parse_numline(blt_line: str) -> List[int]:
    blt_line = _clean_line(blt_line)
    nums = []
    for i, numstr in enumerate(blt_line.split()):
        try:
            nums.append(int(numstr))
        except ValueError:
            raise BLTParseError(f'invalid BLT number line item {i}:'
                                f' {numstr!r}') from None
    return nums
