"""Character sets for O(1) classification.

All sets are frozensets so membership tests are constant time and the
module-level constants are safe to share between threads.

Usage:
    from marmota.parsing.charsets import ASCII_PUNCTUATION

    if char in ASCII_PUNCTUATION:
        ...
"""

import unicodedata

# ASCII punctuation: the characters a backslash can escape
ASCII_PUNCTUATION: frozenset[str] = frozenset("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")


def is_unicode_punctuation(char: str) -> bool:
    """Check if character is punctuation for the emphasis flanking rules.

    ASCII punctuation plus the Unicode general categories Pc, Pd, Pe, Pf,
    Pi, Po and Ps. The empty string (start or end of text) is not
    punctuation.

    """
    if not char:
        return False
    if char in ASCII_PUNCTUATION:
        return True
    return unicodedata.category(char).startswith("P")


# Whitespace recognised by block structure: space, tab and line endings
WHITESPACE: frozenset[str] = frozenset(" \t\n\r\f\v")

SPACE_OR_TAB: frozenset[str] = frozenset(" \t")


def is_unicode_whitespace(char: str) -> bool:
    """Check if character is Unicode whitespace.

    Tab, line feed, form feed, carriage return and category Zs. The empty
    string counts as whitespace for boundary checks.

    """
    if not char:
        return True
    if char in WHITESPACE:
        return True
    return unicodedata.category(char) == "Zs"


# Characters that interrupt a plain text run during inline scanning
INLINE_SPECIAL: frozenset[str] = frozenset("\n`[]\\!<&*_")

# Extra specials when GFM extensions are enabled
GFM_INLINE_SPECIAL: frozenset[str] = INLINE_SPECIAL | frozenset("~w:")

# Emphasis delimiter characters
EMPHASIS_DELIMITERS: frozenset[str] = frozenset("*_")

# Bullet list markers
UNORDERED_LIST_MARKERS: frozenset[str] = frozenset("-*+")

# Characters that may start a block construct; anything else on a
# non-indented line is paragraph text
BLOCK_START_CHARS: frozenset[str] = frozenset("#`~*+_=<>0123456789-|:")

# ASCII alphanumerics used by the GFM autolink rules
ASCII_ALNUM: frozenset[str] = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
)
