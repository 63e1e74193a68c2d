"""Line normalization and the per-line cursor used by the block parser.

The source is split into lines once. Each line is then walked by a
LineCursor that tracks both a character offset and a visual column, with
tab stops every 4 columns. A tab that a block marker only partly consumes
is remembered as "partially consumed" so the remaining columns can be
re-materialised as spaces when the rest of the line becomes content.

Thread Safety:
LineCursor instances are per-parse state and never shared.

"""

from __future__ import annotations

import re

from marmota.parsing.charsets import SPACE_OR_TAB

TAB_STOP = 4
CODE_INDENT = 4

_LINE_ENDING_RE = re.compile(r"\r\n|\r|\n")


def normalize_source(source: str) -> list[str]:
    """Split source into lines with line endings removed.

    ``\\r\\n`` and lone ``\\r`` count as line endings, U+0000 becomes
    U+FFFD, and a trailing line ending does not create an extra empty line.

    Example:
        >>> normalize_source("a\\r\\nb\\rc\\n")
        ['a', 'b', 'c']
        >>> normalize_source("")
        []

    """
    if "\0" in source:
        source = source.replace("\0", "\ufffd")
    lines = _LINE_ENDING_RE.split(source)
    if source.endswith(("\n", "\r")) or not source:
        lines.pop()
    return lines


class LineCursor:
    """Cursor over one input line.

    Attributes:
        line: Line text without its line ending
        offset: Character offset of the cursor
        column: Visual column of the cursor (tabs expanded)
        partially_consumed_tab: True when the cursor sits inside a tab
        next_nonspace: Offset of the next non-space character
        next_nonspace_column: Column of the next non-space character
        indent: Columns between the cursor and next_nonspace
        indented: indent is at least 4 columns (code indentation)
        blank: Only spaces and tabs remain

    """

    __slots__ = (
        "line",
        "offset",
        "column",
        "partially_consumed_tab",
        "next_nonspace",
        "next_nonspace_column",
        "indent",
        "indented",
        "blank",
    )

    def __init__(self, line: str) -> None:
        self.line = line
        self.offset = 0
        self.column = 0
        self.partially_consumed_tab = False
        self.next_nonspace = 0
        self.next_nonspace_column = 0
        self.indent = 0
        self.indented = False
        self.blank = False

    def find_next_nonspace(self) -> None:
        """Locate the next non-space character without moving the cursor."""
        line = self.line
        i = self.offset
        cols = self.column
        length = len(line)
        while i < length:
            c = line[i]
            if c == " ":
                i += 1
                cols += 1
            elif c == "\t":
                i += 1
                cols += TAB_STOP - (cols % TAB_STOP)
            else:
                break
        self.blank = i >= length
        self.next_nonspace = i
        self.next_nonspace_column = cols
        self.indent = cols - self.column
        self.indented = self.indent >= CODE_INDENT

    def advance_next_nonspace(self) -> None:
        """Move the cursor to the next non-space character."""
        self.offset = self.next_nonspace
        self.column = self.next_nonspace_column
        self.partially_consumed_tab = False

    def advance_offset(self, count: int, columns: bool = False) -> None:
        """Advance the cursor by count characters, or count columns.

        When columns is True a tab may be consumed partially, leaving the
        cursor on the tab with partially_consumed_tab set.
        """
        line = self.line
        length = len(line)
        while count > 0 and self.offset < length:
            if line[self.offset] == "\t":
                chars_to_tab = TAB_STOP - (self.column % TAB_STOP)
                if columns:
                    self.partially_consumed_tab = chars_to_tab > count
                    advance = min(chars_to_tab, count)
                    self.column += advance
                    if not self.partially_consumed_tab:
                        self.offset += 1
                    count -= advance
                else:
                    self.partially_consumed_tab = False
                    self.column += chars_to_tab
                    self.offset += 1
                    count -= 1
            else:
                self.partially_consumed_tab = False
                self.offset += 1
                self.column += 1
                count -= 1

    def advance_to_end(self) -> None:
        """Consume the rest of the line."""
        self.advance_offset(len(self.line) - self.offset)

    def peek(self, offset: int | None = None) -> str:
        """Character at offset (default: the cursor), or "" past the end."""
        pos = self.offset if offset is None else offset
        if 0 <= pos < len(self.line):
            return self.line[pos]
        return ""

    def is_space_or_tab(self, offset: int | None = None) -> bool:
        c = self.peek(offset)
        return c != "" and c in SPACE_OR_TAB

    @property
    def rest(self) -> str:
        """Text from the cursor to the end of the line."""
        return self.line[self.offset :]

    @property
    def rest_from_nonspace(self) -> str:
        return self.line[self.next_nonspace :]

    def content(self) -> str:
        """Remaining text as block content.

        Columns left over from a partially consumed tab come back as spaces.
        Consumes the tab itself.
        """
        prefix = ""
        if self.partially_consumed_tab:
            self.offset += 1
            prefix = " " * (TAB_STOP - (self.column % TAB_STOP))
            self.partially_consumed_tab = False
        return prefix + self.line[self.offset :]

    def save(self) -> tuple[int, int, bool]:
        return self.offset, self.column, self.partially_consumed_tab

    def restore(self, state: tuple[int, int, bool]) -> None:
        self.offset, self.column, self.partially_consumed_tab = state
