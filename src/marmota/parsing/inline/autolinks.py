"""GFM extended autolinks.

Bare ``www.`` links and ``http://``, ``https://`` and ``ftp://`` URLs are
recognised while scanning (from the ``w`` and ``:`` trigger characters);
e-mail addresses are found in the merged text when the node tree is built,
outside link text.

Trailing punctuation ``?!.,:*_~``, an unbalanced closing parenthesis and
an entity-like ``&name;`` suffix are never part of the link, and anything
from a ``<`` on is cut off.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from marmota.nodes import Autolink, Inline, Text
from marmota.parsing.charsets import ASCII_ALNUM, is_unicode_punctuation, is_unicode_whitespace

if TYPE_CHECKING:
    from marmota.location import SourceLocation
    from marmota.parsing.inline.tokens import InlineState


_ASCII_SPACE = frozenset(" \t\n\x0b\x0c\r")
_TRAILING_PUNCTUATION = frozenset("?!.,:*_~")
_WWW_BOUNDARY = frozenset("*_~(")
_SCHEMES = frozenset({"http", "https", "ftp"})
_EMAIL_LOCAL_EXTRA = frozenset(".+-_")
_ASCII_LETTERS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")


def _is_host_char(c: str) -> bool:
    return not is_unicode_whitespace(c) and not is_unicode_punctuation(c)


def check_domain(text: str, start: int, allow_short: bool) -> int:
    """Length of a valid domain at text[start:], or 0.

    Segments of alphanumerics, hyphens and underscores separated by
    periods; no underscore in the last two segments. Unless allow_short,
    at least one period is required.
    """
    periods = 0
    underscores_previous = 0
    underscores_last = 0
    length = len(text) - start
    i = 1
    while i < length:
        c = text[start + i]
        if c == "\\" and i < length - 1:
            i += 1
            c = text[start + i]
        if c == "_":
            underscores_last += 1
        elif c == ".":
            underscores_previous = underscores_last
            underscores_last = 0
            periods += 1
        elif c != "-" and not _is_host_char(c):
            break
        i += 1
    if underscores_previous or underscores_last:
        return 0
    if allow_short or periods:
        return i
    return 0


def trim_link_end(text: str, start: int, link_end: int) -> int:
    """Drop trailing characters that GFM never includes in an autolink."""
    cut = text.find("<", start, start + link_end)
    if cut >= 0:
        link_end = cut - start

    while link_end > 0:
        c = text[start + link_end - 1]
        if c in _TRAILING_PUNCTUATION:
            link_end -= 1
        elif c == ";":
            new_end = link_end - 2
            while new_end > 0 and text[start + new_end] in ASCII_ALNUM:
                new_end -= 1
            if new_end < link_end - 2 and text[start + new_end] == "&":
                link_end = new_end
            else:
                link_end -= 1
        elif c == ")":
            opening = text.count("(", start, start + link_end)
            closing = text.count(")", start, start + link_end)
            if closing <= opening:
                break
            link_end -= 1
        else:
            break
    return link_end


def _extend_to_space(text: str, start: int, link_end: int) -> int:
    length = len(text) - start
    while link_end < length and text[start + link_end] not in _ASCII_SPACE:
        link_end += 1
    return link_end


def find_email(text: str, offset: int = 0) -> tuple[int, int] | None:
    """Locate the first GFM e-mail autolink in text at or after offset.

    Returns (start, end) offsets or None.

    Example:
        >>> find_email("mail a.b-c_d@a.b. now")
        (5, 16)

    """
    length = len(text)
    while True:
        at = text.find("@", offset)
        if at < 0:
            return None

        rewind = 0
        in_path = False
        while rewind < at - offset:
            c = text[at - rewind - 1]
            if c in ASCII_ALNUM or c in _EMAIL_LOCAL_EXTRA:
                rewind += 1
                continue
            in_path = c == "/"
            break
        if rewind == 0 or in_path:
            offset = at + 1
            continue

        ats = 0
        periods = 0
        link_end = 0
        size = length - at
        while link_end < size:
            c = text[at + link_end]
            if c in ASCII_ALNUM:
                pass
            elif c == "@":
                ats += 1
            elif c == "." and link_end < size - 1 and text[at + link_end + 1] in ASCII_ALNUM:
                periods += 1
            elif c not in "-_":
                break
            link_end += 1

        last = text[at + link_end - 1] if link_end else ""
        if link_end < 2 or ats != 1 or periods == 0 or (last not in _ASCII_LETTERS and last != "."):
            offset = at + 1
            continue

        link_end = trim_link_end(text, at, link_end)
        if link_end == 0:
            offset = at + 1
            continue
        return at - rewind, at + link_end


class GfmAutolinkMixin:
    """Extended autolink recognition.

    Required Host Attributes:
        - _autolinks_enabled: bool

    """

    def _parse_www_autolink(self, state: InlineState) -> bool:
        """Try a ``www.`` autolink at the cursor."""
        subject = state.subject
        pos = state.pos
        if state.brackets is not None or not subject.startswith("www.", pos):
            return False
        if pos > 0 and subject[pos - 1] not in _ASCII_SPACE and subject[pos - 1] not in _WWW_BOUNDARY:
            return False

        link_end = check_domain(subject, pos, allow_short=False)
        if link_end == 0:
            return False
        link_end = _extend_to_space(subject, pos, link_end)
        link_end = trim_link_end(subject, pos, link_end)
        if link_end == 0:
            return False

        text = subject[pos : pos + link_end]
        state.pieces.append(
            Autolink(location=state.location, url="http://" + text, text=text, kind="www")
        )
        state.pos = pos + link_end
        return True

    def _parse_scheme_autolink(self, state: InlineState) -> bool:
        """Try an ``http://``, ``https://`` or ``ftp://`` autolink ending at the cursor's ``:``."""
        subject = state.subject
        pos = state.pos
        if state.brackets is not None or not subject.startswith("://", pos):
            return False
        if not state.pieces or not isinstance(state.pieces[-1], str):
            return False

        previous = state.pieces[-1]
        rewind = 0
        while rewind < len(previous) and previous[-1 - rewind] in _ASCII_LETTERS:
            rewind += 1
        if rewind == 0 or previous[-rewind:].lower() not in _SCHEMES:
            return False
        scheme_start = pos - rewind
        if scheme_start > 0 and subject[scheme_start - 1] in _ASCII_LETTERS:
            return False
        if pos + 3 >= len(subject) or subject[pos + 3] not in ASCII_ALNUM:
            return False

        domain = check_domain(subject, pos + 3, allow_short=True)
        if domain == 0:
            return False
        link_end = _extend_to_space(subject, pos, 3 + domain)
        link_end = trim_link_end(subject, pos, link_end)
        if link_end == 0:
            return False

        url = subject[scheme_start : pos + link_end]
        state.pieces[-1] = previous[:-rewind]
        state.pieces.append(Autolink(location=state.location, url=url, text=url, kind="uri"))
        state.pos = pos + link_end
        return True

    def _split_emails(self, content: str, location: SourceLocation) -> list[Inline]:
        """Split text into Text and e-mail Autolink nodes."""
        parts: list[Inline] = []
        start = 0
        offset = 0
        while (found := find_email(content, offset)) is not None:
            email_start, email_end = found
            if email_start > start:
                parts.append(Text(location=location, content=content[start:email_start]))
            address = content[email_start:email_end]
            parts.append(
                Autolink(location=location, url="mailto:" + address, text=address, kind="email")
            )
            start = offset = email_end
        if not parts:
            return [Text(location=location, content=content)]
        if start < len(content):
            parts.append(Text(location=location, content=content[start:]))
        return parts
