"""Block starts.

Each start inspects the line at the cursor's next non-space character and
returns 0 (no match), 1 (a container block was opened, keep looking for
more starts) or 2 (a leaf block was opened, the rest of the line is its
content). Starts are tried in a fixed order, which decides precedence:
block quote, ATX heading, fenced code, HTML block, setext underline,
thematic break, list item, indented code, table.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from marmota.parsing.blocks.html import html_block_start
from marmota.parsing.blocks.list import parse_list_marker
from marmota.parsing.blocks.state import MAX_OPEN_BLOCKS, BlockKind, OpenBlock
from marmota.parsing.lines import CODE_INDENT

if TYPE_CHECKING:
    from marmota.parsing.lines import LineCursor


_ATX_HEADING_RE = re.compile(r"#{1,6}(?:[ \t]+|$)")
_ATX_CLOSING_ONLY_RE = re.compile(r"^[ \t]*#+[ \t]*$")
_ATX_CLOSING_RE = re.compile(r"[ \t]+#+[ \t]*$")
_CODE_FENCE_RE = re.compile(r"`{3,}(?!.*`)|~{3,}")
_SETEXT_UNDERLINE_RE = re.compile(r"(?:=+|-+)[ \t]*$")
_THEMATIC_BREAK_RE = re.compile(r"(?:(?:\*[ \t]*){3,}|(?:_[ \t]*){3,}|(?:-[ \t]*){3,})[ \t]*$")


class BlockStartsMixin:
    """Recognition of block starts.

    Required Host Attributes:
        - _cursor: LineCursor
        - _stack: list[OpenBlock]
        - _all_closed: bool
        - _last_matched: int

    Required Host Methods:
        - _close_unmatched() -> None
        - _add_child(kind, offset) -> OpenBlock
        - _extract_references(block) -> bool
        - _try_start_table(container) -> int

    """

    _cursor: LineCursor
    _stack: list[OpenBlock]
    _all_closed: bool
    _last_matched: int

    def _try_block_starts(self, container: OpenBlock) -> int:
        for start in (
            self._start_block_quote,
            self._start_atx_heading,
            self._start_fenced_code,
            self._start_html_block,
            self._start_setext_heading,
            self._start_thematic_break,
            self._start_list_item,
            self._start_indented_code,
            self._try_start_table,  # type: ignore[attr-defined]
        ):
            result = start(container)
            if result:
                return result
        return 0

    def _at_depth_limit(self) -> bool:
        depth = len(self._stack) if self._all_closed else self._last_matched + 1
        return depth >= MAX_OPEN_BLOCKS

    def _start_block_quote(self, container: OpenBlock) -> int:
        cursor = self._cursor
        if cursor.indented or cursor.peek(cursor.next_nonspace) != ">" or self._at_depth_limit():
            return 0
        cursor.advance_next_nonspace()
        cursor.advance_offset(1)
        if cursor.is_space_or_tab():
            cursor.advance_offset(1, columns=True)
        self._close_unmatched()  # type: ignore[attr-defined]
        self._add_child(BlockKind.BLOCK_QUOTE, cursor.next_nonspace)  # type: ignore[attr-defined]
        return 1

    def _start_atx_heading(self, container: OpenBlock) -> int:
        cursor = self._cursor
        if cursor.indented:
            return 0
        match = _ATX_HEADING_RE.match(cursor.line, cursor.next_nonspace)
        if match is None:
            return 0
        cursor.advance_next_nonspace()
        cursor.advance_offset(match.end() - match.start())
        self._close_unmatched()  # type: ignore[attr-defined]
        heading: OpenBlock = self._add_child(BlockKind.HEADING, cursor.next_nonspace)  # type: ignore[attr-defined]
        heading.level = len(match.group(0).strip())
        text = _ATX_CLOSING_ONLY_RE.sub("", cursor.rest, count=1)
        heading.lines.append(_ATX_CLOSING_RE.sub("", text, count=1))
        cursor.advance_to_end()
        return 2

    def _start_fenced_code(self, container: OpenBlock) -> int:
        cursor = self._cursor
        if cursor.indented:
            return 0
        match = _CODE_FENCE_RE.match(cursor.line, cursor.next_nonspace)
        if match is None:
            return 0
        fence = match.group(0)
        self._close_unmatched()  # type: ignore[attr-defined]
        block: OpenBlock = self._add_child(BlockKind.CODE_BLOCK, cursor.next_nonspace)  # type: ignore[attr-defined]
        block.fenced = True
        block.fence_char = fence[0]
        block.fence_length = len(fence)
        block.fence_offset = cursor.indent
        cursor.advance_next_nonspace()
        cursor.advance_offset(len(fence))
        return 2

    def _start_html_block(self, container: OpenBlock) -> int:
        cursor = self._cursor
        if cursor.indented or cursor.peek(cursor.next_nonspace) != "<":
            return 0
        interrupts_paragraph = container.kind is BlockKind.PARAGRAPH or (
            not self._all_closed and not cursor.blank and self._stack[-1].kind is BlockKind.PARAGRAPH
        )
        kind = html_block_start(cursor.rest_from_nonspace, interrupts_paragraph)
        if not kind:
            return 0
        self._close_unmatched()  # type: ignore[attr-defined]
        # Leading spaces belong to the HTML
        block: OpenBlock = self._add_child(BlockKind.HTML_BLOCK, cursor.offset)  # type: ignore[attr-defined]
        block.html_block_type = kind
        return 2

    def _start_setext_heading(self, container: OpenBlock) -> int:
        cursor = self._cursor
        if cursor.indented or container.kind is not BlockKind.PARAGRAPH:
            return 0
        match = _SETEXT_UNDERLINE_RE.match(cursor.line, cursor.next_nonspace)
        if match is None:
            return 0
        self._close_unmatched()  # type: ignore[attr-defined]
        self._extract_references(container)  # type: ignore[attr-defined]
        if not container.lines:
            return 0

        heading = OpenBlock(
            kind=BlockKind.HEADING,
            start_line=container.start_line,
            start_column=container.start_column,
            lines=container.lines,
            level=1 if match.group(0)[0] == "=" else 2,
            setext=True,
        )
        parent = self._stack[-2]
        parent.children[-1] = heading
        self._stack[-1] = heading
        cursor.advance_to_end()
        return 2

    def _start_thematic_break(self, container: OpenBlock) -> int:
        cursor = self._cursor
        if cursor.indented or not _THEMATIC_BREAK_RE.match(cursor.line, cursor.next_nonspace):
            return 0
        self._close_unmatched()  # type: ignore[attr-defined]
        self._add_child(BlockKind.THEMATIC_BREAK, cursor.next_nonspace)  # type: ignore[attr-defined]
        cursor.advance_to_end()
        return 2

    def _start_list_item(self, container: OpenBlock) -> int:
        cursor = self._cursor
        if cursor.indented and container.kind is not BlockKind.LIST:
            return 0
        if self._at_depth_limit():
            return 0
        marker = parse_list_marker(cursor, container.kind is BlockKind.PARAGRAPH)
        if marker is None:
            return 0
        self._close_unmatched()  # type: ignore[attr-defined]

        tip = self._stack[-1]
        if (
            tip.kind is not BlockKind.LIST
            or tip.list_marker is None
            or not tip.list_marker.continues(marker)
        ):
            new_list: OpenBlock = self._add_child(BlockKind.LIST, cursor.next_nonspace)  # type: ignore[attr-defined]
            new_list.list_marker = marker
        item: OpenBlock = self._add_child(BlockKind.ITEM, cursor.next_nonspace)  # type: ignore[attr-defined]
        item.list_marker = marker
        return 1

    def _start_indented_code(self, container: OpenBlock) -> int:
        cursor = self._cursor
        if not cursor.indented or cursor.blank or self._stack[-1].kind is BlockKind.PARAGRAPH:
            return 0
        cursor.advance_offset(CODE_INDENT, columns=True)
        self._close_unmatched()  # type: ignore[attr-defined]
        self._add_child(BlockKind.CODE_BLOCK, cursor.offset)  # type: ignore[attr-defined]
        return 2
