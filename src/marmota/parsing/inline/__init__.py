"""Inline parsing for marmota.

Composes the inline mixins into a single InlineParsingMixin:

- core: scanning, line breaks, escapes and tree building
- emphasis: delimiter runs and the emphasis algorithm
- links: brackets, links, images and reference lookup
- special: code spans, angle autolinks, raw HTML and entities
- autolinks: GFM extended autolinks

"""

from marmota.parsing.inline.autolinks import GfmAutolinkMixin
from marmota.parsing.inline.core import InlineParsingCoreMixin
from marmota.parsing.inline.emphasis import EmphasisMixin
from marmota.parsing.inline.links import LinkParsingMixin
from marmota.parsing.inline.special import SpecialInlineMixin


class InlineParsingMixin(
    InlineParsingCoreMixin,
    EmphasisMixin,
    LinkParsingMixin,
    SpecialInlineMixin,
    GfmAutolinkMixin,
):
    """Combined inline parsing mixin."""


__all__ = [
    "EmphasisMixin",
    "GfmAutolinkMixin",
    "InlineParsingCoreMixin",
    "InlineParsingMixin",
    "LinkParsingMixin",
    "SpecialInlineMixin",
]
