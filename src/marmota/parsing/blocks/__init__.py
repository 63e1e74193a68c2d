"""Block parsing for marmota.

Composes the block mixins into a single BlockParsingMixin:

- core: line incorporation, opening and finalizing blocks
- continuation: whether a line continues each open block
- starts: recognition of new blocks
- link_ref: link reference definitions
- table: GFM tables

"""

from marmota.parsing.blocks.continuation import BlockContinuationMixin
from marmota.parsing.blocks.core import BlockParsingCoreMixin
from marmota.parsing.blocks.link_ref import LinkReferenceMixin
from marmota.parsing.blocks.starts import BlockStartsMixin
from marmota.parsing.blocks.state import BlockKind, OpenBlock
from marmota.parsing.blocks.table import TableParsingMixin


class BlockParsingMixin(
    BlockParsingCoreMixin,
    BlockContinuationMixin,
    BlockStartsMixin,
    LinkReferenceMixin,
    TableParsingMixin,
):
    """Combined block parsing mixin."""


__all__ = [
    "BlockContinuationMixin",
    "BlockKind",
    "BlockParsingCoreMixin",
    "BlockParsingMixin",
    "BlockStartsMixin",
    "LinkReferenceMixin",
    "OpenBlock",
    "TableParsingMixin",
]
