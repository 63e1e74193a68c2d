"""Emphasis, strong emphasis and strikethrough resolution.

Implements the CommonMark delimiter-run algorithm: runs of ``*`` and ``_``
are classified as left- and/or right-flanking when scanned, then matched
closer-first against the nearest compatible opener. GFM ``~~`` runs use
the same machinery but only pair with other ``~~`` runs.

Thread Safety:
All state lives in the per-leaf InlineState.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from marmota.parsing.charsets import is_unicode_punctuation, is_unicode_whitespace
from marmota.parsing.inline.tokens import DelimiterRun

if TYPE_CHECKING:
    from marmota.parsing.inline.tokens import DelimiterChar, InlineState


class EmphasisMixin:
    """Mixin for emphasis delimiter scanning and processing.

    Required Host Attributes: None

    Required Host Methods: None

    """

    def _is_left_flanking(self, before: str, after: str) -> bool:
        """Check if delimiter run is left-flanking.

        Left-flanking: not followed by whitespace, and either not followed
        by punctuation or preceded by whitespace or punctuation.
        """
        if is_unicode_whitespace(after):
            return False
        if not is_unicode_punctuation(after):
            return True
        return is_unicode_whitespace(before) or is_unicode_punctuation(before)

    def _is_right_flanking(self, before: str, after: str) -> bool:
        """Check if delimiter run is right-flanking.

        Right-flanking: not preceded by whitespace, and either not preceded
        by punctuation or followed by whitespace or punctuation.
        """
        if is_unicode_whitespace(before):
            return False
        if not is_unicode_punctuation(before):
            return True
        return is_unicode_whitespace(after) or is_unicode_punctuation(after)

    def _scan_delimiters(self, state: InlineState, char: DelimiterChar) -> None:
        """Consume a delimiter run and push it onto the delimiter stack."""
        subject = state.subject
        start = state.pos
        end = start
        length = len(subject)
        while end < length and subject[end] == char:
            end += 1
        count = end - start
        state.pos = end

        if char == "~" and count != 2:
            state.pieces.append(subject[start:end])
            return

        before = subject[start - 1] if start > 0 else ""
        after = subject[end] if end < length else ""
        left = self._is_left_flanking(before, after)
        right = self._is_right_flanking(before, after)

        if char == "_":
            can_open = left and (not right or is_unicode_punctuation(before))
            can_close = right and (not left or is_unicode_punctuation(after))
        else:
            can_open = left
            can_close = right

        if not (can_open or can_close):
            state.pieces.append(subject[start:end])
            return

        run = DelimiterRun(
            char=char,
            count=count,
            original=count,
            can_open=can_open,
            can_close=can_close,
        )
        state.pieces.append(run)
        state.push_delimiter(run)

    def _process_emphasis(self, state: InlineState, stack_bottom: DelimiterRun | None) -> None:
        """Match closers against openers above stack_bottom.

        Matches are recorded on the runs; every delimiter above stack_bottom
        is removed from the stack afterwards. openers_bottom remembers, per
        (char, closer can open, length mod 3), how far down a failed search
        already looked, which keeps the search linear.
        """
        openers_bottom: dict[tuple[str, bool, int], DelimiterRun | None] = {}

        closer = state.delimiters
        while closer is not None and closer.previous is not stack_bottom:
            closer = closer.previous

        while closer is not None:
            if not closer.can_close:
                closer = closer.next
                continue

            key = (closer.char, closer.can_open, closer.original % 3)
            bottom = openers_bottom.get(key, stack_bottom)
            opener = closer.previous
            found = False
            while opener is not None and opener is not stack_bottom and opener is not bottom:
                if (
                    opener.char == closer.char
                    and opener.can_open
                    and not self._is_odd_match(opener, closer)
                ):
                    found = True
                    break
                opener = opener.previous

            old_closer = closer
            if found and opener is not None:
                use = 2 if closer.count >= 2 and opener.count >= 2 else 1
                opener.count -= use
                closer.count -= use
                opener.opened.append(use)
                closer.closed.append(use)

                # Delimiters between the pair can no longer match
                opener.next = closer
                closer.previous = opener

                if opener.count == 0:
                    state.remove_delimiter(opener)
                if closer.count == 0:
                    following = closer.next
                    state.remove_delimiter(closer)
                    closer = following
            else:
                closer = closer.next
                openers_bottom[key] = old_closer.previous
                if not old_closer.can_open:
                    state.remove_delimiter(old_closer)

        while state.delimiters is not None and state.delimiters is not stack_bottom:
            state.remove_delimiter(state.delimiters)

    def _is_odd_match(self, opener: DelimiterRun, closer: DelimiterRun) -> bool:
        """Rule of three.

        When either run can both open and close, the pair cannot match if
        the sum of their original lengths is a multiple of 3, unless both
        lengths are.
        """
        if opener.char == "~":
            return False
        if not (closer.can_open or opener.can_close):
            return False
        if (opener.original + closer.original) % 3 != 0:
            return False
        return not (opener.original % 3 == 0 and closer.original % 3 == 0)
