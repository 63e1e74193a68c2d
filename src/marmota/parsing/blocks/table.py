"""GFM table parsing.

A table starts when the line after a paragraph line is a delimiter row
with as many cells as that line. The paragraph's last line becomes the
header row; earlier lines stay a paragraph. Every following non-blank
line that does not start another block is a body row.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from marmota.nodes import Alignment
from marmota.parsing.blocks.state import BlockKind

if TYPE_CHECKING:
    from marmota.parsing.blocks.state import OpenBlock
    from marmota.parsing.lines import LineCursor


_DELIMITER_CELL_RE = re.compile(r":?-+:?")
_UNESCAPED_PIPE_RE = re.compile(r"(?:^|[^\\])(?:\\\\)*\|")


def split_table_row(text: str) -> list[str]:
    """Split a table row into stripped cell texts.

    Leading and trailing pipes are optional. ``\\|`` is a literal pipe
    inside a cell (also inside code spans); other escapes are kept for
    inline parsing.

    Example:
        >>> split_table_row("| a | b \\\\| c |")
        ['a', 'b | c']

    """
    text = text.strip()
    if text.startswith("|"):
        text = text[1:]

    cells: list[str] = []
    buffer: list[str] = []
    trailing_pipe = False
    i = 0
    length = len(text)
    while i < length:
        c = text[i]
        trailing_pipe = False
        if c == "\\" and i + 1 < length:
            buffer.append("|" if text[i + 1] == "|" else text[i : i + 2])
            i += 2
            continue
        if c == "|":
            cells.append("".join(buffer).strip())
            buffer = []
            trailing_pipe = True
        else:
            buffer.append(c)
        i += 1
    if not trailing_pipe:
        cells.append("".join(buffer).strip())
    return cells


def parse_delimiter_row(text: str) -> list[Alignment] | None:
    """Column alignments of a delimiter row, or None if text is not one."""
    cells = split_table_row(text)
    if not cells:
        return None
    alignments: list[Alignment] = []
    for cell in cells:
        if not _DELIMITER_CELL_RE.fullmatch(cell):
            return None
        left = cell.startswith(":")
        right = cell.endswith(":")
        if left and right:
            alignments.append("center")
        elif left:
            alignments.append("left")
        elif right:
            alignments.append("right")
        else:
            alignments.append(None)
    return alignments


def has_unescaped_pipe(text: str) -> bool:
    return _UNESCAPED_PIPE_RE.search(text) is not None


class TableParsingMixin:
    """Mixin for GFM table parsing.

    Required Host Attributes:
        - _tables_enabled: bool
        - _cursor: LineCursor
        - _stack: list[OpenBlock]

    Required Host Methods:
        - _extract_references(block) -> bool
        - _close_unmatched() -> None
        - _finalize(end_line) -> None
        - _add_child(kind, offset) -> OpenBlock

    """

    _tables_enabled: bool
    _cursor: LineCursor
    _stack: list[OpenBlock]

    def _try_start_table(self, container: OpenBlock) -> int:
        """Turn the last line of a paragraph into a table header."""
        cursor = self._cursor
        if (
            not self._tables_enabled
            or cursor.indented
            or container.kind is not BlockKind.PARAGRAPH
        ):
            return 0

        delimiter_row = cursor.rest_from_nonspace
        alignments = parse_delimiter_row(delimiter_row)
        if alignments is None:
            return 0

        self._extract_references(container)  # type: ignore[attr-defined]
        if not container.lines:
            return 0
        header_line = container.lines[-1]
        header = split_table_row(header_line)
        if len(header) != len(alignments):
            return 0
        if not (has_unescaped_pipe(header_line) or has_unescaped_pipe(delimiter_row)):
            return 0

        self._close_unmatched()  # type: ignore[attr-defined]
        stack = self._stack
        container.lines.pop()
        if container.lines:
            self._finalize(self._line_number - 1)  # type: ignore[attr-defined]
        else:
            stack.pop()
            stack[-1].children.remove(container)

        table = self._add_child(BlockKind.TABLE, cursor.next_nonspace)  # type: ignore[attr-defined]
        table.start_line -= 1
        table.alignments = alignments
        table.rows.append(header)
        cursor.advance_to_end()
        return 2

    def _add_table_row(self, table: OpenBlock, text: str) -> None:
        """Append a body row, padded or truncated to the header width."""
        cells = split_table_row(text)
        width = len(table.alignments)
        if len(cells) < width:
            cells.extend([""] * (width - len(cells)))
        table.rows.append(cells[:width])
