"""Link and image parsing.

Module-level scanners for the link syntax pieces (labels, destinations,
titles) are shared with link reference definitions in the block parser.
LinkParsingMixin closes ``[``/``![`` openers into Link and Image nodes.

Destinations are returned with escapes and entities resolved but not
percent-encoded; the renderer normalizes URLs.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import TYPE_CHECKING

from marmota.nodes import (
    Autolink,
    CodeSpan,
    Emphasis,
    Entity,
    HtmlInline,
    Image,
    Inline,
    LineBreak,
    Link,
    LinkReference,
    SoftBreak,
    Strikethrough,
    Strong,
    Text,
)
from marmota.parsing.entities import ESCAPABLE, unescape_string

if TYPE_CHECKING:
    from marmota.parsing.inline.tokens import InlineState


_LINK_LABEL_RE = re.compile(r"\[(?:[^\\\[\]]|\\.){0,1000}\]")
_ANGLE_DESTINATION_RE = re.compile(r"<(?:[^<>\n\\\x00]|\\.)*>")
_LINK_TITLE_RE = re.compile(
    rf"\"(?:\\{ESCAPABLE}|[^\"\x00])*\""
    rf"|'(?:\\{ESCAPABLE}|[^'\x00])*'"
    rf"|\((?:\\{ESCAPABLE}|[^()\x00])*\)"
)
_SPNL_RE = re.compile(r" *(?:\n *)?")
_WHITESPACE_RE = re.compile(r"[ \t\r\n]+")
_ESCAPABLE_CHAR_RE = re.compile(ESCAPABLE)

LINK_WHITESPACE = frozenset(" \t\n\x0b\x0c\r")

MAX_LABEL_LENGTH = 999

# Deepest parenthesis nesting accepted in a bare link destination
MAX_DESTINATION_PARENS = 32


def normalize_label(label: str) -> str:
    """Normalize a link label (without brackets) for matching.

    Labels match case-insensitively under Unicode case folding, with
    surrounding whitespace removed and inner whitespace runs collapsed.

    Example:
        >>> normalize_label("  Foo\\n  BAR ")
        'foo bar'
        >>> normalize_label("ẞ") == normalize_label("SS")
        True

    """
    return _WHITESPACE_RE.sub(" ", label.strip(" \t\r\n")).casefold()


def scan_link_label(text: str, pos: int) -> int:
    """Length of the link label starting at pos (brackets included), or 0."""
    match = _LINK_LABEL_RE.match(text, pos)
    if match is None or match.end() - pos > MAX_LABEL_LENGTH + 2:
        return 0
    return match.end() - pos


def skip_spnl(text: str, pos: int) -> int:
    """Skip spaces, at most one line ending, and more spaces."""
    match = _SPNL_RE.match(text, pos)
    return match.end() if match else pos


def parse_link_destination(text: str, pos: int) -> tuple[str, int] | None:
    """Parse a link destination at pos.

    Returns (destination, end) or None. ``<...>`` destinations may contain
    spaces; bare destinations stop at whitespace and need balanced
    parentheses.
    """
    match = _ANGLE_DESTINATION_RE.match(text, pos)
    if match is not None:
        return unescape_string(match.group(0)[1:-1]), match.end()
    if pos < len(text) and text[pos] == "<":
        return None

    start = pos
    open_parens = 0
    length = len(text)
    c = ""
    while pos < length:
        c = text[pos]
        if c == "\\" and pos + 1 < length and _ESCAPABLE_CHAR_RE.match(text[pos + 1]):
            pos += 2
        elif c == "(":
            pos += 1
            open_parens += 1
            if open_parens > MAX_DESTINATION_PARENS:
                return None
        elif c == ")":
            if open_parens < 1:
                break
            pos += 1
            open_parens -= 1
        elif c in LINK_WHITESPACE:
            break
        else:
            pos += 1
    if pos == start and c != ")":
        return None
    if open_parens != 0:
        return None
    return unescape_string(text[start:pos]), pos


def parse_link_title(text: str, pos: int) -> tuple[str, int] | None:
    """Parse a quoted or parenthesized link title at pos."""
    match = _LINK_TITLE_RE.match(text, pos)
    if match is None:
        return None
    return unescape_string(match.group(0)[1:-1]), match.end()


def plain_text(children: tuple[Inline, ...]) -> str:
    """Flatten inline nodes to the plain text used for image alt text."""
    parts: list[str] = []
    pending: list[Inline] = list(reversed(children))
    while pending:
        child = pending.pop()
        match child:
            case Text(content=content) | Entity(content=content):
                parts.append(content)
            case CodeSpan(code=code):
                parts.append(code)
            case Emphasis() | Strong() | Strikethrough() | Link():
                pending.extend(reversed(child.children))
            case Image(alt=alt):
                parts.append(alt)
            case Autolink(text=text):
                parts.append(text)
            case HtmlInline(html=html):
                parts.append(html)
            case SoftBreak() | LineBreak():
                parts.append("\n")
    return "".join(parts)


class LinkParsingMixin:
    """Closing brackets into links and images.

    Required Host Attributes:
        - _link_refs: Mapping[str, LinkReference]

    Required Host Methods:
        - _process_emphasis(state, stack_bottom) -> None
        - _build_inlines(pieces, location) -> tuple[Inline, ...]

    """

    _link_refs: Mapping[str, LinkReference]

    def _parse_open_bracket(self, state: InlineState) -> None:
        state.pieces.append("[")
        state.push_bracket(len(state.pieces) - 1, state.pos, image=False)
        state.pos += 1

    def _parse_bang(self, state: InlineState) -> None:
        if state.peek(1) == "[":
            state.pieces.append("![")
            state.push_bracket(len(state.pieces) - 1, state.pos + 1, image=True)
            state.pos += 2
        else:
            state.pieces.append("!")
            state.pos += 1

    def _parse_close_bracket(self, state: InlineState) -> None:
        """Handle ``]``: close the innermost opener into a link or image."""
        subject = state.subject
        state.pos += 1
        after_bracket = state.pos

        opener = state.brackets
        if opener is None:
            state.pieces.append("]")
            return
        if not opener.active:
            state.pieces.append("]")
            state.pop_bracket()
            return

        destination: str | None = None
        title: str | None = None
        matched = False

        # Inline link: [text](destination "title")
        if state.peek() == "(":
            pos = skip_spnl(subject, state.pos + 1)
            parsed = parse_link_destination(subject, pos)
            if parsed is not None:
                destination, pos = parsed
                before_title = pos
                pos = skip_spnl(subject, pos)
                if pos > before_title and subject[pos - 1] in LINK_WHITESPACE:
                    parsed_title = parse_link_title(subject, pos)
                    if parsed_title is not None:
                        title, pos = parsed_title
                pos = skip_spnl(subject, pos)
                if pos < len(subject) and subject[pos] == ")":
                    state.pos = pos + 1
                    matched = True
            if not matched:
                destination = None
                title = None

        # Reference link: [text][label], [text][] or [text]
        if not matched:
            before_label = state.pos
            label_length = scan_link_label(subject, before_label)
            reference_label: str | None = None
            if label_length > 2:
                reference_label = subject[before_label + 1 : before_label + label_length - 1]
            elif not opener.bracket_after:
                reference_label = subject[opener.source_index + 1 : after_bracket - 1]
            if label_length == 0:
                state.pos = after_bracket
            else:
                state.pos = before_label + label_length
            if reference_label is not None:
                reference = self._link_refs.get(normalize_label(reference_label))
                if reference is not None:
                    destination = reference.url
                    title = reference.title
                    matched = True

        if not matched:
            state.pop_bracket()
            state.pos = after_bracket
            state.pieces.append("]")
            return

        assert destination is not None
        self._process_emphasis(state, opener.previous_delimiter)
        children = self._build_inlines(
            state.pieces[opener.index + 1 :], state.location, link_text=True
        )
        del state.pieces[opener.index :]
        state.pop_bracket()

        node: Inline
        if opener.image:
            node = Image(
                location=state.location,
                url=destination,
                alt=plain_text(children),
                title=title or None,
            )
        else:
            node = Link(
                location=state.location,
                url=destination,
                title=title or None,
                children=children,
            )
            # No links inside links: earlier link openers can never match now
            earlier = state.brackets
            while earlier is not None:
                if not earlier.image:
                    earlier.active = False
                earlier = earlier.previous
        state.pieces.append(node)

