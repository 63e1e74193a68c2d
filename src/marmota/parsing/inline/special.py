"""Code spans, angle-bracket autolinks, raw HTML and character references.

Raw HTML recognition follows the CommonMark tag grammar: open and closing
tags, comments, processing instructions, declarations and CDATA sections.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from marmota.nodes import Autolink, CodeSpan, Entity, HtmlInline
from marmota.parsing.entities import ENTITY_RE, decode_entity

if TYPE_CHECKING:
    from marmota.parsing.inline.tokens import InlineState


TAG_NAME = r"[A-Za-z][A-Za-z0-9-]*"
ATTRIBUTE_NAME = r"[a-zA-Z_:][a-zA-Z0-9_.:-]*"
UNQUOTED_VALUE = r"[^\"'=<>`\x00-\x20]+"
SINGLE_QUOTED_VALUE = r"'[^']*'"
DOUBLE_QUOTED_VALUE = r'"[^"]*"'
ATTRIBUTE_VALUE = rf"(?:{UNQUOTED_VALUE}|{SINGLE_QUOTED_VALUE}|{DOUBLE_QUOTED_VALUE})"
ATTRIBUTE_VALUE_SPEC = rf"(?:\s*=\s*{ATTRIBUTE_VALUE})"
ATTRIBUTE = rf"(?:\s+{ATTRIBUTE_NAME}{ATTRIBUTE_VALUE_SPEC}?)"
OPEN_TAG = rf"<{TAG_NAME}{ATTRIBUTE}*\s*/?>"
CLOSE_TAG = rf"</{TAG_NAME}\s*[>]"
HTML_COMMENT = r"<!---->|<!--(?:-?[^>-])(?:-?[^-])*-->"
PROCESSING_INSTRUCTION = r"[<][?][\s\S]*?[?][>]"
DECLARATION = r"<![A-Z]+\s+[^>]*>"
CDATA = r"<!\[CDATA\[[\s\S]*?\]\]>"
HTML_TAG = (
    rf"(?:{OPEN_TAG}|{CLOSE_TAG}|{HTML_COMMENT}|{PROCESSING_INSTRUCTION}|{DECLARATION}|{CDATA})"
)

_HTML_TAG_RE = re.compile(HTML_TAG, re.IGNORECASE)
_URI_AUTOLINK_RE = re.compile(r"<[A-Za-z][A-Za-z0-9.+-]{1,31}:[^<>\x00-\x20]*>")
_EMAIL_AUTOLINK_RE = re.compile(
    r"<([a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9]"
    r"(?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*)>"
)
_TICKS_RE = re.compile(r"`+")


class SpecialInlineMixin:
    """Inline constructs recognised from a single trigger character."""

    def _parse_backticks(self, state: InlineState) -> None:
        """Code span, or the literal backticks when no closer exists.

        Line endings inside the span become spaces; one leading and one
        trailing space are stripped when both are present and the content
        is not only spaces.
        """
        subject = state.subject
        ticks = _TICKS_RE.match(subject, state.pos)
        assert ticks is not None
        length = ticks.end() - ticks.start()
        after_open = ticks.end()
        close = state.find_backtick_run(length, after_open)
        if close < 0:
            state.pieces.append(ticks.group(0))
            state.pos = after_open
            return
        contents = subject[after_open:close].replace("\n", " ")
        if contents.strip(" ") and contents[0] == " " and contents[-1] == " ":
            contents = contents[1:-1]
        state.pieces.append(CodeSpan(location=state.location, code=contents))
        state.pos = close + length

    def _parse_less_than(self, state: InlineState) -> None:
        """Autolink, raw HTML, or a literal ``<``."""
        subject = state.subject
        pos = state.pos

        match = _EMAIL_AUTOLINK_RE.match(subject, pos)
        if match is not None:
            address = match.group(0)[1:-1]
            state.pieces.append(
                Autolink(location=state.location, url="mailto:" + address, text=address, kind="email")
            )
            state.pos = match.end()
            return

        match = _URI_AUTOLINK_RE.match(subject, pos)
        if match is not None:
            uri = match.group(0)[1:-1]
            state.pieces.append(Autolink(location=state.location, url=uri, text=uri, kind="uri"))
            state.pos = match.end()
            return

        match = _HTML_TAG_RE.match(subject, pos)
        if match is not None:
            state.pieces.append(HtmlInline(location=state.location, html=match.group(0)))
            state.pos = match.end()
            return

        state.pieces.append("<")
        state.pos += 1

    def _parse_entity(self, state: InlineState) -> None:
        match = ENTITY_RE.match(state.subject, state.pos)
        if match is not None:
            decoded = decode_entity(match.group(0))
            if decoded is not None:
                state.pieces.append(
                    Entity(location=state.location, source=match.group(0), content=decoded)
                )
                state.pos = match.end()
                return
        state.pieces.append("&")
        state.pos += 1
