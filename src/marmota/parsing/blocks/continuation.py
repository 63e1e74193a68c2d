"""Continuation of open blocks.

For every open block below the document, in order, the block decides
whether the current line continues it: 0 (matched, the cursor may have
advanced past the block's own prefix), 1 (not matched, this block and
everything inside it may be closed) or 2 (the line was consumed entirely,
as with a closing code fence).
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from marmota.parsing.blocks.html import ends_at_blank_line
from marmota.parsing.blocks.state import BlockKind
from marmota.parsing.lines import CODE_INDENT

if TYPE_CHECKING:
    from marmota.parsing.blocks.state import OpenBlock
    from marmota.parsing.lines import LineCursor


_CLOSING_CODE_FENCE_RE = re.compile(r"(?:`{3,}|~{3,})(?= *$)")


class BlockContinuationMixin:
    """Per-kind continuation rules.

    Required Host Attributes:
        - _cursor: LineCursor
        - _line_number: int

    Required Host Methods:
        - _finalize(end_line) -> None

    """

    _cursor: LineCursor
    _line_number: int

    def _continue_block(self, block: OpenBlock) -> int:
        cursor = self._cursor
        match block.kind:
            case BlockKind.BLOCK_QUOTE:
                if cursor.indented or cursor.peek(cursor.next_nonspace) != ">":
                    return 1
                cursor.advance_next_nonspace()
                cursor.advance_offset(1)
                if cursor.is_space_or_tab():
                    cursor.advance_offset(1, columns=True)
                return 0
            case BlockKind.LIST:
                return 0
            case BlockKind.ITEM:
                return self._continue_item(block)
            case BlockKind.CODE_BLOCK:
                if block.fenced:
                    return self._continue_fenced_code(block)
                if cursor.indent >= CODE_INDENT:
                    cursor.advance_offset(CODE_INDENT, columns=True)
                elif cursor.blank:
                    cursor.advance_next_nonspace()
                else:
                    return 1
                return 0
            case BlockKind.HTML_BLOCK:
                if cursor.blank and ends_at_blank_line(block.html_block_type):
                    return 1
                return 0
            case BlockKind.PARAGRAPH | BlockKind.TABLE:
                return 1 if cursor.blank else 0
            case _:
                # Headings and thematic breaks hold a single line
                return 1

    def _continue_item(self, item: OpenBlock) -> int:
        cursor = self._cursor
        marker = item.list_marker
        assert marker is not None
        if cursor.blank:
            if not item.children:
                # An item can begin with at most one blank line
                return 1
            cursor.advance_next_nonspace()
        elif cursor.indent >= marker.marker_offset + marker.padding:
            cursor.advance_offset(marker.marker_offset + marker.padding, columns=True)
        else:
            return 1
        return 0

    def _continue_fenced_code(self, block: OpenBlock) -> int:
        cursor = self._cursor
        if cursor.indent <= 3 and cursor.peek(cursor.next_nonspace) == block.fence_char:
            match = _CLOSING_CODE_FENCE_RE.match(cursor.line, cursor.next_nonspace)
            if match is not None and match.end() - match.start() >= block.fence_length:
                self._finalize(self._line_number)  # type: ignore[attr-defined]
                return 2
        # Strip up to the opening fence's indentation
        remaining = block.fence_offset
        while remaining > 0 and cursor.is_space_or_tab():
            cursor.advance_offset(1, columns=True)
            remaining -= 1
        return 0
