"""Shared functionality for ballot file input and output. Internal."""

from __future__ import annotations

import dataclasses
from numbers import Number
from typing import Callable, Dict, FrozenSet, Iterable, Optional, \
    TextIO, Tuple

from ballotcount.candidate import Candidate, ElectionContext
from ballotcount.vote import RankedVoteType


class ParseError(Exception):
    """An input that is invalid according to the given format was detected."""
    pass


@dataclasses.dataclass
class ElectionData:
    """A container for data loaded from a ballot file."""
    context: ElectionContext
    approval_votes: Optional[Dict[FrozenSet[Candidate], Number]] = None
    ranked_votes: Optional[Dict[RankedVoteType, Number]] = None
    n_seats: Optional[int] = None
    title: Optional[str] = None


def loaders(line_loader: Callable[..., ElectionData]
            ) -> Tuple[Callable[..., ElectionData],
                       Callable[..., ElectionData]]:
    """Create load() and loads() functions from an iterating function."""

    def load(file: TextIO, **kwargs) -> ElectionData:
        return line_loader(iter(file), **kwargs)

    def loads(text: str, **kwargs) -> ElectionData:
        return line_loader(iter(text.split('\n')), **kwargs)

    return load, loads


def dumpers(line_dumper: Callable[..., Iterable[str]]
            ) -> Tuple[Callable[..., None], Callable[..., str]]:
    """Create dump() and dumps() functions from a line generator function."""

    def dump(file: TextIO, *args, **kwargs) -> None:
        for line in line_dumper(*args, **kwargs):
            file.write(line + '\n')

    def dumps(*args, **kwargs) -> str:
        return ''.join(
            line + '\n' for line in line_dumper(*args, **kwargs)
        )

    return dump, dumps


def strip_bom(line: str) -> str:
    return line[1:] if line.startswith('\ufeff') else line
