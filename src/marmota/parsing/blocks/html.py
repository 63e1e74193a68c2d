"""HTML block start and end conditions.

Seven kinds of HTML block are recognised by their first line. Kinds 1-5
end at the first line containing their end marker; kinds 6 and 7 end at a
blank line. Kind 7 (any complete tag alone on its line) cannot interrupt
a paragraph.
"""

from __future__ import annotations

import re

from marmota.parsing.inline.special import CLOSE_TAG, OPEN_TAG

BLOCK_TAG_NAMES = (
    "address|article|aside|base|basefont|blockquote|body|caption|center|col|colgroup|"
    "dd|details|dialog|dir|div|dl|dt|fieldset|figcaption|figure|footer|form|frame|"
    "frameset|h[123456]|head|header|hr|html|iframe|legend|li|link|main|menu|menuitem|"
    "meta|nav|noframes|ol|optgroup|option|p|param|section|source|title|summary|table|"
    "tbody|td|tfoot|th|thead|title|tr|track|ul"
)

_HTML_BLOCK_OPEN: tuple[re.Pattern[str], ...] = (
    re.compile(r"<(?:script|pre|style)(?:\s|>|$)", re.IGNORECASE),
    re.compile(r"<!--"),
    re.compile(r"<[?]"),
    re.compile(r"<![A-Z]", re.IGNORECASE),
    re.compile(r"<!\[CDATA\["),
    re.compile(rf"</?(?:{BLOCK_TAG_NAMES})(?:\s|/?>|$)", re.IGNORECASE),
    re.compile(rf"(?:{OPEN_TAG}|{CLOSE_TAG})\s*$", re.IGNORECASE),
)

_HTML_BLOCK_CLOSE: dict[int, re.Pattern[str]] = {
    1: re.compile(r"</(?:script|pre|style)>", re.IGNORECASE),
    2: re.compile(r"-->"),
    3: re.compile(r"\?>"),
    4: re.compile(r">"),
    5: re.compile(r"\]\]>"),
}


def html_block_start(text: str, interrupts_paragraph: bool) -> int:
    """Kind (1-7) of HTML block that text opens, or 0.

    Args:
        text: The line from its first non-space character
        interrupts_paragraph: A paragraph is open and would be interrupted

    """
    if not text.startswith("<"):
        return 0
    for kind, pattern in enumerate(_HTML_BLOCK_OPEN, start=1):
        if kind == 7 and interrupts_paragraph:
            break
        if pattern.match(text):
            return kind
    return 0


def html_block_ends(kind: int, text: str) -> bool:
    """Whether a line of an HTML block of the given kind closes it."""
    pattern = _HTML_BLOCK_CLOSE.get(kind)
    return pattern is not None and pattern.search(text) is not None


def ends_at_blank_line(kind: int) -> bool:
    return kind in (6, 7)
