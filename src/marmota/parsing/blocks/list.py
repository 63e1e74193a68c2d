"""List item markers and list tightness."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from marmota.parsing.blocks.state import ListMarker

if TYPE_CHECKING:
    from marmota.parsing.blocks.state import OpenBlock
    from marmota.parsing.lines import LineCursor


_BULLET_MARKER_RE = re.compile(r"[*+-]")
_ORDERED_MARKER_RE = re.compile(r"(\d{1,9})([.)])")
_NON_SPACE_RE = re.compile(r"[^ \t\f\v\r\n]")

# Content starting this many columns after the marker is indented code
_MAX_MARKER_SPACING = 5


def parse_list_marker(cursor: LineCursor, interrupts_paragraph: bool) -> ListMarker | None:
    """Parse a list item marker at the cursor's next non-space character.

    On success the cursor is left at the start of the item content and
    the marker's padding is known. Within a paragraph, only a non-empty
    bullet item or an ordered item numbered 1 may start.
    """
    if cursor.indent >= 4:
        return None

    line = cursor.line
    rest = cursor.rest_from_nonspace
    marker: ListMarker
    if (match := _BULLET_MARKER_RE.match(rest)) is not None:
        marker = ListMarker(ordered=False, bullet=match.group(0), marker_offset=cursor.indent)  # type: ignore[arg-type]
    elif (match := _ORDERED_MARKER_RE.match(rest)) is not None and (
        not interrupts_paragraph or match.group(1) == "1"
    ):
        marker = ListMarker(
            ordered=True,
            delimiter=match.group(2),  # type: ignore[arg-type]
            start=int(match.group(1)),
            marker_offset=cursor.indent,
        )
    else:
        return None

    marker_length = match.end()
    after = cursor.next_nonspace + marker_length
    if after < len(line) and line[after] not in " \t":
        return None
    if interrupts_paragraph and not _NON_SPACE_RE.search(line, after):
        return None

    cursor.advance_next_nonspace()
    cursor.advance_offset(marker_length, columns=True)
    spaces_start = cursor.save()
    spaces_start_column = cursor.column
    while True:
        cursor.advance_offset(1, columns=True)
        if cursor.column - spaces_start_column >= _MAX_MARKER_SPACING or not cursor.is_space_or_tab():
            break
    blank_item = cursor.peek() == ""
    spaces_after_marker = cursor.column - spaces_start_column
    if spaces_after_marker >= _MAX_MARKER_SPACING or spaces_after_marker < 1 or blank_item:
        marker.padding = marker_length + 1
        cursor.restore(spaces_start)
        if cursor.is_space_or_tab():
            cursor.advance_offset(1, columns=True)
    else:
        marker.padding = marker_length + spaces_after_marker
    return marker


def is_tight(block: OpenBlock) -> bool:
    """A list is loose if any item, or any block in an item, is followed by a blank line."""
    items = block.children
    for index, item in enumerate(items):
        has_next_item = index + 1 < len(items)
        if item.ends_with_blank_line() and has_next_item:
            return False
        children = item.children
        for child_index, child in enumerate(children):
            if child.ends_with_blank_line() and (has_next_item or child_index + 1 < len(children)):
                return False
    return True
