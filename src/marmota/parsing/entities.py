"""Entity and numeric character reference resolution.

The HTML5 named character reference table comes from the standard
library's ``html.entities.html5`` and is treated as a process-wide,
read-only constant.

Usage:
    >>> decode_entity("&copy;")
    '©'
    >>> decode_entity("&#x1F600;")
    '😀'
    >>> unescape_string(r"\\*not emphasis\\* &amp; more")
    '*not emphasis* & more'
"""

import re
from html.entities import html5

# Named references all end with ";" in the table we consult
_NAMED: dict[str, str] = {name: value for name, value in html5.items() if name.endswith(";")}

REPLACEMENT_CHARACTER = "\ufffd"

ENTITY_PATTERN = r"&(?:#[xX][0-9a-fA-F]{1,6}|#[0-9]{1,7}|[a-zA-Z][a-zA-Z0-9]{1,31});"

ENTITY_RE: re.Pattern[str] = re.compile(ENTITY_PATTERN)

ESCAPABLE = r"[!\"#$%&'()*+,./:;<=>?@\[\\\]^_`{|}~-]"

_ENTITY_OR_ESCAPE_RE: re.Pattern[str] = re.compile(rf"\\{ESCAPABLE}|{ENTITY_PATTERN}")


def decode_codepoint(codepoint: int) -> str:
    """Map a numeric reference to text, replacing invalid code points."""
    if codepoint == 0 or codepoint > 0x10FFFF or 0xD800 <= codepoint <= 0xDFFF:
        return REPLACEMENT_CHARACTER
    return chr(codepoint)


def decode_entity(reference: str) -> str | None:
    """Resolve a complete ``&...;`` reference.

    Returns None when the reference is not a known named entity, so the
    caller can keep the original text.
    """
    if reference.startswith("&#"):
        digits = reference[2:-1]
        if digits[:1] in ("x", "X"):
            return decode_codepoint(int(digits[1:], 16))
        return decode_codepoint(int(digits))
    return _NAMED.get(reference[1:])


def _replace(match: re.Match[str]) -> str:
    text = match.group(0)
    if text[0] == "\\":
        return text[1]
    decoded = decode_entity(text)
    return text if decoded is None else decoded


def unescape_string(text: str) -> str:
    """Resolve backslash escapes and entity references in text.

    Used for link destinations, link titles and fenced code info strings.
    """
    if "\\" not in text and "&" not in text:
        return text
    return _ENTITY_OR_ESCAPE_RE.sub(_replace, text)
