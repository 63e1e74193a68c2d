"""Link reference definitions.

Definitions are only recognised at the start of paragraph content: when
a paragraph is closed, when it turns into a setext heading, and before
its last line becomes a table header. The first definition of a label
wins.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from marmota.nodes import LinkReference
from marmota.parsing.inline.links import (
    normalize_label,
    parse_link_destination,
    parse_link_title,
    scan_link_label,
    skip_spnl,
)

if TYPE_CHECKING:
    from marmota.parsing.blocks.state import OpenBlock


_SPACE_AT_END_OF_LINE_RE = re.compile(r" *(?:\n|$)")


def parse_reference(text: str, start: int, references: dict[str, LinkReference]) -> int | None:
    """Parse one definition at text[start:] and record it.

    Returns the offset just past the definition (including its line
    ending), or None if there is no definition at start. A title that is
    followed by anything but spaces on its line is dropped and the
    definition ends after the destination, if that is possible.
    """
    label_length = scan_link_label(text, start)
    if label_length == 0:
        return None
    raw_label = text[start + 1 : start + label_length - 1]
    pos = start + label_length
    if pos >= len(text) or text[pos] != ":":
        return None

    pos = skip_spnl(text, pos + 1)
    destination = parse_link_destination(text, pos)
    if destination is None:
        return None
    url, pos = destination

    before_title = pos
    pos = skip_spnl(text, pos)
    title: str | None = None
    if pos != before_title:
        parsed = parse_link_title(text, pos)
        if parsed is not None:
            title, pos = parsed
    if title is None:
        pos = before_title

    line_end = _SPACE_AT_END_OF_LINE_RE.match(text, pos)
    if line_end is None:
        if title is None:
            return None
        title = None
        line_end = _SPACE_AT_END_OF_LINE_RE.match(text, before_title)
        if line_end is None:
            return None

    label = normalize_label(raw_label)
    if not label:
        return None
    if label not in references:
        references[label] = LinkReference(label=label, url=url, title=title)
    return line_end.end()


class LinkReferenceMixin:
    """Extraction of definitions from paragraph content.

    Required Host Attributes:
        - _link_refs: dict[str, LinkReference]

    """

    _link_refs: dict[str, LinkReference]

    def _extract_references(self, block: OpenBlock) -> bool:
        """Remove leading definitions from a paragraph's lines.

        Returns True if any definition was found.
        """
        content = block.content
        pos = 0
        while pos < len(content) and content[pos] == "[":
            end = parse_reference(content, pos, self._link_refs)
            if end is None:
                break
            pos = end
        if pos == 0:
            return False
        block.set_content(content[pos:])
        return True
