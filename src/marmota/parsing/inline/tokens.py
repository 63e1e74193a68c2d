"""Transient inline parsing structures.

While one leaf block's text is scanned, output accumulates in a flat list
of pieces: plain strings, finished inline nodes, and DelimiterRun records
for runs of ``*``, ``_`` and ``~~`` that may still become emphasis. The
delimiter runs are also threaded on a doubly linked "delimiter stack" and
``[``/``![`` openers on a linked "bracket stack", so emphasis resolution and
link closing never have to search the output list.

Emphasis matches are recorded on the runs themselves (``opened`` and
``closed``); the node tree is built from the flat list afterwards.

Thread Safety:
All structures are per-leaf state, created and discarded by a single parse.

"""

from __future__ import annotations

import bisect
import re
from dataclasses import dataclass, field
from typing import Literal, TypeAlias

from marmota.location import SourceLocation
from marmota.nodes import Inline

DelimiterChar: TypeAlias = Literal["*", "_", "~"]

_BACKTICK_RUN_RE = re.compile(r"`+")


@dataclass(slots=True, eq=False)
class DelimiterRun:
    """A run of delimiter characters on the delimiter stack.

    Attributes:
        char: Delimiter character
        count: Characters not yet used by a match
        original: Length of the run as written
        can_open: Run is left-flanking (with the ``_`` restrictions)
        can_close: Run is right-flanking (with the ``_`` restrictions)
        opened: Characters used per match where this run opened, in match order
        closed: Characters used per match where this run closed, in match order

    """

    char: DelimiterChar
    count: int
    original: int
    can_open: bool
    can_close: bool
    previous: DelimiterRun | None = None
    next: DelimiterRun | None = None
    opened: list[int] = field(default_factory=list)
    closed: list[int] = field(default_factory=list)


@dataclass(slots=True, eq=False)
class Bracket:
    """An unmatched ``[`` or ``![`` that may still open a link or image.

    Attributes:
        index: Position of the opener's placeholder in the output list
        source_index: Offset of the ``[`` in the subject
        image: Opener was ``![``
        active: False once a link closes around it (no links in links)
        previous_delimiter: Top of the delimiter stack when the opener was seen
        bracket_after: Another ``[`` followed this one

    """

    index: int
    source_index: int
    image: bool
    previous: Bracket | None
    previous_delimiter: DelimiterRun | None
    active: bool = True
    bracket_after: bool = False


Piece: TypeAlias = str | DelimiterRun | Inline


class InlineState:
    """Scanning state for one leaf block's inline content."""

    __slots__ = (
        "subject",
        "pos",
        "pieces",
        "delimiters",
        "delimiter_count",
        "brackets",
        "location",
        "_backtick_runs",
    )

    def __init__(self, subject: str, location: SourceLocation) -> None:
        self.subject = subject
        self.pos = 0
        self.pieces: list[Piece] = []
        self.delimiters: DelimiterRun | None = None
        self.delimiter_count = 0
        self.brackets: Bracket | None = None
        self.location = location
        self._backtick_runs: dict[int, list[int]] | None = None

    def peek(self, offset: int = 0) -> str:
        pos = self.pos + offset
        if pos < len(self.subject):
            return self.subject[pos]
        return ""

    def push_delimiter(self, run: DelimiterRun) -> None:
        self.delimiter_count += 1
        run.previous = self.delimiters
        if self.delimiters is not None:
            self.delimiters.next = run
        self.delimiters = run

    def remove_delimiter(self, run: DelimiterRun) -> None:
        if run.previous is not None:
            run.previous.next = run.next
        if run.next is None:
            self.delimiters = run.previous
        else:
            run.next.previous = run.previous

    def push_bracket(self, index: int, source_index: int, image: bool) -> None:
        if self.brackets is not None:
            self.brackets.bracket_after = True
        self.brackets = Bracket(
            index=index,
            source_index=source_index,
            image=image,
            previous=self.brackets,
            previous_delimiter=self.delimiters,
        )

    def pop_bracket(self) -> None:
        if self.brackets is not None:
            self.brackets = self.brackets.previous

    def find_backtick_run(self, length: int, after: int) -> int:
        """Start of the first run of exactly length backticks at or after after.

        Returns -1 when there is none. Runs are indexed once per subject, so
        an unclosed opener never triggers a rescan.
        """
        if self._backtick_runs is None:
            runs: dict[int, list[int]] = {}
            for match in _BACKTICK_RUN_RE.finditer(self.subject):
                runs.setdefault(match.end() - match.start(), []).append(match.start())
            self._backtick_runs = runs
        starts = self._backtick_runs.get(length)
        if not starts:
            return -1
        i = bisect.bisect_left(starts, after)
        return starts[i] if i < len(starts) else -1
