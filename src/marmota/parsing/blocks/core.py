"""Core block parsing.

Lines are consumed one at a time. For each line the open blocks are
matched from the outside in, new block starts are looked for, and the
remaining text is added to the innermost block that accepts lines (or to
a new paragraph). Blocks that stop matching are finalized; finalizing a
paragraph extracts its link reference definitions, so every definition is
known before any inline content is parsed.

Thread Safety:
All parse state lives on the parser instance, which is used by one
thread for one document.

"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from marmota.parsing.blocks.html import html_block_ends
from marmota.parsing.blocks.list import is_tight
from marmota.parsing.blocks.state import ACCEPTS_LINES, BlockKind, OpenBlock, can_contain
from marmota.parsing.charsets import BLOCK_START_CHARS
from marmota.parsing.entities import unescape_string
from marmota.parsing.lines import LineCursor
from marmota.utils.logger import get_logger

if TYPE_CHECKING:
    from marmota.nodes import LinkReference

logger = get_logger(__name__)

_TRAILING_BLANK_LINES_RE = re.compile(r"(?:\n *)+\Z")
_NON_SPACE_RE = re.compile(r"[^ \t\f\v\r\n]")


class BlockParsingCoreMixin:
    """Line-by-line construction of the open block tree.

    Required Host Attributes:
        - _link_refs: dict[str, LinkReference]

    Required Host Methods:
        - _continue_block(block) -> int
        - _try_block_starts(container) -> int
        - _extract_references(block) -> bool
        - _add_table_row(table, text) -> None

    """

    _stack: list[OpenBlock]
    _cursor: LineCursor
    _line_number: int
    _all_closed: bool
    _last_matched: int
    _link_refs: dict[str, LinkReference]

    def _parse_blocks(self, lines: list[str]) -> OpenBlock:
        """Build the block tree for the given normalized lines."""
        document = OpenBlock(kind=BlockKind.DOCUMENT, start_line=1, start_column=1)
        self._stack = [document]
        self._cursor = LineCursor("")
        self._line_number = 0
        self._all_closed = True
        self._last_matched = 0

        for line in lines:
            self._incorporate_line(line)
        while self._stack:
            self._finalize(len(lines))

        logger.debug(
            "Parsed %d lines into %d top-level blocks (%d link references)",
            len(lines),
            len(document.children),
            len(self._link_refs),
        )
        return document

    def _incorporate_line(self, line: str) -> None:
        cursor = LineCursor(line)
        self._cursor = cursor
        self._line_number += 1
        stack = self._stack

        # Match the line against each open block in turn
        depth = 0
        while depth + 1 < len(stack):
            cursor.find_next_nonspace()
            result = self._continue_block(stack[depth + 1])  # type: ignore[attr-defined]
            if result == 0:
                depth += 1
            elif result == 1:
                break
            else:
                return
        container = stack[depth]
        self._all_closed = depth == len(stack) - 1
        self._last_matched = depth

        # Look for new block starts
        matched_leaf = container.kind in ACCEPTS_LINES and container.kind not in (
            BlockKind.PARAGRAPH,
            BlockKind.TABLE,
        )
        while not matched_leaf:
            cursor.find_next_nonspace()
            first = cursor.peek(cursor.next_nonspace)
            if not cursor.indented and (not first or first not in BLOCK_START_CHARS):
                cursor.advance_next_nonspace()
                break
            result = self._try_block_starts(container)  # type: ignore[attr-defined]
            if result == 0:
                cursor.advance_next_nonspace()
                break
            container = stack[-1]
            matched_leaf = result == 2

        # Lazy paragraph continuation
        if not self._all_closed and not cursor.blank and stack[-1].kind is BlockKind.PARAGRAPH:
            self._add_line()
            return

        self._close_unmatched()
        container = stack[-1]
        if cursor.blank and container.children:
            container.children[-1].last_line_blank = True

        kind = container.kind
        last_line_blank = cursor.blank and not (
            kind is BlockKind.BLOCK_QUOTE
            or (kind is BlockKind.CODE_BLOCK and container.fenced)
            or (
                kind is BlockKind.ITEM
                and not container.children
                and container.start_line == self._line_number
            )
        )
        for block in stack:
            block.last_line_blank = last_line_blank

        if kind is BlockKind.TABLE and container.start_line + 1 == self._line_number:
            # The delimiter row was consumed when the table opened
            return
        if kind in ACCEPTS_LINES:
            self._add_line()
            if kind is BlockKind.HTML_BLOCK and html_block_ends(container.html_block_type, cursor.rest):
                self._finalize(self._line_number)
        elif cursor.offset < len(line) and not cursor.blank:
            self._add_child(BlockKind.PARAGRAPH, cursor.offset)
            cursor.advance_next_nonspace()
            self._add_line()

    def _add_line(self) -> None:
        tip = self._stack[-1]
        text = self._cursor.content()
        if tip.kind is BlockKind.TABLE:
            self._add_table_row(tip, text)  # type: ignore[attr-defined]
        else:
            tip.lines.append(text)

    def _add_child(self, kind: BlockKind, offset: int) -> OpenBlock:
        """Open a block of the given kind, closing blocks that cannot hold it."""
        while not can_contain(self._stack[-1].kind, kind):
            self._finalize(self._line_number - 1)
        block = OpenBlock(kind=kind, start_line=self._line_number, start_column=offset + 1)
        self._stack[-1].children.append(block)
        self._stack.append(block)
        return block

    def _close_unmatched(self) -> None:
        """Finalize the blocks the current line did not continue."""
        if self._all_closed:
            return
        while len(self._stack) - 1 > self._last_matched:
            self._finalize(self._line_number - 1)
        self._all_closed = True

    def _finalize(self, end_line: int) -> None:
        """Close the innermost open block."""
        block = self._stack.pop()
        block.end_line = max(end_line, block.start_line)
        match block.kind:
            case BlockKind.PARAGRAPH:
                self._extract_references(block)  # type: ignore[attr-defined]
                if not _NON_SPACE_RE.search(block.content):
                    self._stack[-1].children.remove(block)
            case BlockKind.CODE_BLOCK if block.fenced:
                info, _, rest = block.content.partition("\n")
                block.info = unescape_string(info.strip())
                block.literal = rest
            case BlockKind.CODE_BLOCK:
                block.literal = _TRAILING_BLANK_LINES_RE.sub("\n", block.content)
            case BlockKind.HTML_BLOCK:
                block.literal = _TRAILING_BLANK_LINES_RE.sub("", block.content)
            case BlockKind.LIST:
                block.tight = is_tight(block)
