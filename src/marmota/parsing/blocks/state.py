"""Mutable open-block records used while building the block tree.

The block parser keeps the chain of open blocks on an explicit stack
(document at index 0, tip at the end). Each entry is an OpenBlock that
accumulates lines and children until it is finalized; after the whole
document has been consumed the tree is converted into frozen AST nodes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Literal


class BlockKind(Enum):
    DOCUMENT = auto()
    BLOCK_QUOTE = auto()
    LIST = auto()
    ITEM = auto()
    PARAGRAPH = auto()
    HEADING = auto()
    THEMATIC_BREAK = auto()
    CODE_BLOCK = auto()
    HTML_BLOCK = auto()
    TABLE = auto()


# Blocks whose raw lines are kept verbatim when matched as the last container
ACCEPTS_LINES: frozenset[BlockKind] = frozenset(
    {BlockKind.PARAGRAPH, BlockKind.CODE_BLOCK, BlockKind.HTML_BLOCK, BlockKind.TABLE}
)


# Deepest chain of open blocks; deeper block quote and list item markers stay text
MAX_OPEN_BLOCKS = 128


def can_contain(parent: BlockKind, child: BlockKind) -> bool:
    """Whether a block of kind parent may hold a child of kind child."""
    match parent:
        case BlockKind.DOCUMENT | BlockKind.BLOCK_QUOTE | BlockKind.ITEM:
            return child is not BlockKind.ITEM
        case BlockKind.LIST:
            return child is BlockKind.ITEM
        case _:
            return False


@dataclass(slots=True)
class ListMarker:
    """Data parsed from a list item marker.

    Attributes:
        ordered: ``1.``/``1)`` style rather than a bullet
        bullet: Bullet character for unordered lists
        delimiter: ``.`` or ``)`` for ordered lists
        start: Number of the first item of an ordered list
        marker_offset: Indentation of the marker, in columns
        padding: Columns from the marker start to the item content

    """

    ordered: bool
    bullet: Literal["-", "+", "*"] | None = None
    delimiter: Literal[".", ")"] | None = None
    start: int = 1
    marker_offset: int = 0
    padding: int = 0

    def continues(self, other: ListMarker) -> bool:
        """Whether an item with marker other belongs to this item's list."""
        return (
            self.ordered == other.ordered
            and self.delimiter == other.delimiter
            and self.bullet == other.bullet
        )


@dataclass(slots=True, eq=False)
class OpenBlock:
    """A block under construction."""

    kind: BlockKind
    start_line: int
    start_column: int
    end_line: int = 0
    children: list[OpenBlock] = field(default_factory=list)
    lines: list[str] = field(default_factory=list)
    last_line_blank: bool = False

    # headings
    level: int = 0
    setext: bool = False
    # code blocks
    fenced: bool = False
    fence_char: str = ""
    fence_length: int = 0
    fence_offset: int = 0
    info: str | None = None
    literal: str = ""
    # html blocks
    html_block_type: int = 0
    # lists and items
    list_marker: ListMarker | None = None
    tight: bool = True
    # tables
    alignments: list[Literal["left", "center", "right"] | None] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)

    @property
    def last_child(self) -> OpenBlock | None:
        return self.children[-1] if self.children else None

    @property
    def content(self) -> str:
        """Accumulated lines joined with newlines, each line terminated."""
        return "".join(line + "\n" for line in self.lines)

    def set_content(self, text: str) -> None:
        """Replace accumulated lines with the lines of text."""
        if text.endswith("\n"):
            text = text[:-1]
        self.lines = text.split("\n") if text else []

    def ends_with_blank_line(self) -> bool:
        """Whether this block ends in a blank line, looking into lists."""
        block: OpenBlock | None = self
        while block is not None:
            if block.last_line_blank:
                return True
            if block.kind in (BlockKind.LIST, BlockKind.ITEM):
                block = block.last_child
            else:
                break
        return False
