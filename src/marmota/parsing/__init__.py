"""Parsing subsystem for marmota.

Provides mixin classes for modular parsing functionality:
- `BlockParsingMixin`: Block structure, built line by line
- `InlineParsingMixin`: Inline content (emphasis, links, code spans)

Architecture:
Parsing runs in two phases. The block phase turns lines into a tree of
open blocks and collects link reference definitions; the inline phase
then parses the text of paragraphs, headings and table cells.

Example:
    >>> from marmota.parsing import BlockParsingMixin, InlineParsingMixin
    >>> class Parser(InlineParsingMixin, BlockParsingMixin):
    ...     pass

"""

from marmota.parsing.blocks import BlockParsingMixin
from marmota.parsing.inline import InlineParsingMixin

__all__ = [
    "BlockParsingMixin",
    "InlineParsingMixin",
]
