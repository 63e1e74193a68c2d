"""Core inline parsing.

Scans one leaf block's text left to right into a flat list of pieces,
resolves emphasis over the whole delimiter stack, then builds the inline
node tree.

Thread Safety:
All per-parse state lives in an InlineState created for each leaf.
Compiled patterns are module-level and immutable.

"""

from __future__ import annotations

import re
from functools import cache
from typing import TYPE_CHECKING

from marmota.nodes import Emphasis, Inline, LineBreak, SoftBreak, Strikethrough, Strong, Text
from marmota.parsing.charsets import ASCII_PUNCTUATION, GFM_INLINE_SPECIAL, INLINE_SPECIAL
from marmota.parsing.inline.tokens import DelimiterRun, InlineState
from marmota.utils.logger import get_logger

if TYPE_CHECKING:
    from marmota.location import SourceLocation
    from marmota.parsing.inline.tokens import Piece

logger = get_logger(__name__)

# Delimiter runs in one leaf block above which resolution is logged
_MANY_DELIMITERS = 10_000


@cache
def _text_run_pattern(specials: frozenset[str]) -> re.Pattern[str]:
    """Pattern for a run of characters with no inline meaning."""
    return re.compile("[^" + re.escape("".join(sorted(specials))) + "]+")


class InlineParsingCoreMixin:
    """Core inline parsing methods.

    Required Host Attributes:
        - _strikethrough_enabled: bool
        - _autolinks_enabled: bool

    Required Host Methods (from other mixins):
        - _scan_delimiters(state, char) -> None
        - _process_emphasis(state, stack_bottom) -> None
        - _parse_backticks(state) -> None
        - _parse_less_than(state) -> None
        - _parse_entity(state) -> None
        - _parse_open_bracket(state) -> None
        - _parse_bang(state) -> None
        - _parse_close_bracket(state) -> None
        - _parse_www_autolink(state) -> bool
        - _parse_scheme_autolink(state) -> bool
        - _split_emails(text, location) -> list[Inline]

    """

    # Required host attributes (documented, not declared, to avoid override conflicts)
    # _strikethrough_enabled: bool
    # _autolinks_enabled: bool

    def _parse_inline(self, text: str, location: SourceLocation) -> tuple[Inline, ...]:
        """Parse the inline content of one leaf block.

        Delimiter runs never outlive the call: emphasis opened in one block
        cannot be closed in another.
        """
        if not text:
            return ()

        state = InlineState(text, location)
        self._scan_inline(state)
        if state.delimiter_count > _MANY_DELIMITERS:
            logger.debug(
                "Resolving %d delimiter runs in block at %s", state.delimiter_count, location
            )
        self._process_emphasis(state, None)
        return self._build_inlines(state.pieces, location)

    def _scan_inline(self, state: InlineState) -> None:
        specials = INLINE_SPECIAL
        if self._strikethrough_enabled or self._autolinks_enabled:
            specials = GFM_INLINE_SPECIAL
        text_run = _text_run_pattern(specials)

        subject = state.subject
        length = len(subject)
        strikethrough = self._strikethrough_enabled
        autolinks = self._autolinks_enabled

        while state.pos < length:
            char = subject[state.pos]
            if char == "\n":
                self._parse_newline(state)
            elif char == "\\":
                self._parse_backslash(state)
            elif char == "`":
                self._parse_backticks(state)
            elif char == "*" or char == "_":
                self._scan_delimiters(state, char)
            elif char == "~" and strikethrough:
                self._scan_delimiters(state, "~")
            elif char == "[":
                self._parse_open_bracket(state)
            elif char == "!":
                self._parse_bang(state)
            elif char == "]":
                self._parse_close_bracket(state)
            elif char == "<":
                self._parse_less_than(state)
            elif char == "&":
                self._parse_entity(state)
            elif char == "w" and autolinks and self._parse_www_autolink(state):
                pass
            elif char == ":" and autolinks and self._parse_scheme_autolink(state):
                pass
            else:
                match = text_run.match(subject, state.pos)
                if match is None:
                    # A trigger character that did not start anything
                    state.pieces.append(char)
                    state.pos += 1
                else:
                    state.pieces.append(match.group(0))
                    state.pos = match.end()

    def _parse_newline(self, state: InlineState) -> None:
        """Soft break, or a hard break after two or more trailing spaces.

        Trailing spaces of the line and leading spaces of the next line are
        dropped either way.
        """
        state.pos += 1
        pieces = state.pieces
        hard = False
        if pieces and isinstance(pieces[-1], str) and pieces[-1].endswith(" "):
            previous = pieces[-1]
            hard = len(previous) >= 2 and previous[-2] == " "
            pieces[-1] = previous.rstrip(" ")
        if hard:
            pieces.append(LineBreak(location=state.location))
        else:
            pieces.append(SoftBreak(location=state.location))

        subject = state.subject
        while state.pos < len(subject) and subject[state.pos] == " ":
            state.pos += 1

    def _parse_backslash(self, state: InlineState) -> None:
        state.pos += 1
        char = state.peek()
        if char == "\n":
            state.pieces.append(LineBreak(location=state.location))
            state.pos += 1
        elif char and char in ASCII_PUNCTUATION:
            state.pieces.append(char)
            state.pos += 1
        else:
            state.pieces.append("\\")

    def _build_inlines(
        self, pieces: list[Piece], location: SourceLocation, *, link_text: bool = False
    ) -> tuple[Inline, ...]:
        """Build nodes from scanned pieces and the recorded emphasis matches.

        At each delimiter run, the spans it closes end first (innermost
        first), then its unused characters are emitted as text, then the
        spans it opens begin (outermost first). E-mail autolinks are only
        recognised outside link text.
        """
        emails = self._autolinks_enabled and not link_text
        # (delimiter char, characters used, collected pieces)
        stack: list[tuple[str, int, list[str | Inline]]] = [("", 0, [])]

        for piece in pieces:
            if isinstance(piece, str):
                if piece:
                    stack[-1][2].append(piece)
            elif isinstance(piece, DelimiterRun):
                for _ in piece.closed:
                    if len(stack) > 1:
                        self._close_span(stack, location, emails)
                if piece.count:
                    stack[-1][2].append(piece.char * piece.count)
                for used in reversed(piece.opened):
                    stack.append((piece.char, used, []))
            else:
                stack[-1][2].append(piece)

        while len(stack) > 1:
            self._close_span(stack, location, emails)
        return self._merge_text(stack[0][2], location, emails)

    def _close_span(
        self,
        stack: list[tuple[str, int, list[str | Inline]]],
        location: SourceLocation,
        emails: bool,
    ) -> None:
        char, used, items = stack.pop()
        children = self._merge_text(items, location, emails)
        node: Inline
        if char == "~":
            node = Strikethrough(location=location, children=children)
        elif used == 2:
            node = Strong(location=location, children=children)
        else:
            node = Emphasis(location=location, children=children)
        stack[-1][2].append(node)

    def _merge_text(
        self, items: list[str | Inline], location: SourceLocation, emails: bool
    ) -> tuple[Inline, ...]:
        """Join adjacent strings into single Text nodes."""
        result: list[Inline] = []
        buffer: list[str] = []
        for item in items:
            if isinstance(item, str):
                buffer.append(item)
                continue
            if buffer:
                self._flush_text(result, "".join(buffer), location, emails)
                buffer = []
            result.append(item)
        if buffer:
            self._flush_text(result, "".join(buffer), location, emails)
        return tuple(result)

    def _flush_text(
        self, result: list[Inline], text: str, location: SourceLocation, emails: bool
    ) -> None:
        if emails and "@" in text:
            result.extend(self._split_emails(text, location))  # type: ignore[attr-defined]
        else:
            result.append(Text(location=location, content=text))
