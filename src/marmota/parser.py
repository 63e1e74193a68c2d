"""Two-phase Markdown parser producing a typed AST.

The block phase consumes normalized lines and builds a tree of open
blocks, collecting link reference definitions as paragraphs close. Only
then does the inline phase run, so a reference may be used before it is
defined. The finished tree is converted to frozen dataclass nodes.

Architecture:
The parser uses a mixin-based design for separation of concerns:
- `BlockParsingMixin`: Block structure (containers, leaves, tables)
- `InlineParsingMixin`: Inline content (emphasis, links, code spans)

Thread Safety:
- Parser produces immutable AST (frozen dataclasses)
- Configuration is read from ContextVar (thread-local)
- Safe to share AST across threads

"""

from __future__ import annotations

import re
from types import MappingProxyType

from marmota.config import ParseConfig, get_parse_config
from marmota.errors import ParseError
from marmota.location import SourceLocation
from marmota.nodes import (
    Block,
    BlockQuote,
    Document,
    FencedCode,
    Heading,
    HtmlBlock,
    IndentedCode,
    LinkReference,
    List,
    ListItem,
    Paragraph,
    Table,
    TableCell,
    TableRow,
    ThematicBreak,
)
from marmota.parsing import BlockParsingMixin, InlineParsingMixin
from marmota.parsing.blocks.state import BlockKind, OpenBlock
from marmota.parsing.lines import LineCursor, normalize_source

_TASK_LIST_MARKER_RE = re.compile(r"\[([ xX])\](?=[ \t\n])[ \t]*")
_INLINE_STRIP = " \t\n\r\f\v"


class Parser(
    InlineParsingMixin,
    BlockParsingMixin,
):
    """Two-phase parser for CommonMark and GitHub Flavored Markdown.

    Usage:
        >>> parser = Parser("# Hello\\n\\nWorld")
        >>> doc = parser.parse()
        >>> doc.children[0]
        Heading(location=..., level=1, children=(Text(..., content='Hello'),), style='atx')

    Thread Safety:
        Parser instances are single-use and not thread-safe. Create one per
        parse operation. Configuration is read from ContextVar (thread-local).
        The resulting AST is immutable and thread-safe.

    """

    __slots__ = (
        # Per-parse state
        "_source",
        "_source_file",
        # Link reference definitions (per-document state)
        "_link_refs",
        # Block phase state
        "_stack",
        "_cursor",
        "_line_number",
        "_all_closed",
        "_last_matched",
    )

    def __init__(
        self,
        source: str,
        source_file: str | None = None,
    ) -> None:
        """Initialize parser with source text.

        Configuration is read from ContextVar, not passed as parameters.
        Use set_parse_config() or parse_config_context() before creating
        a Parser if you need non-default configuration.

        Args:
            source: Markdown source text
            source_file: Optional source file path recorded in node locations

        """
        self._source = source
        self._source_file = source_file
        self._link_refs: dict[str, LinkReference] = {}
        self._stack: list[OpenBlock] = []
        self._cursor = LineCursor("")
        self._line_number = 0
        self._all_closed = True
        self._last_matched = 0

    # =========================================================================
    # Configuration Properties (read from ContextVar)
    # =========================================================================

    @property
    def _config(self) -> ParseConfig:
        """Get current parse configuration (thread-local)."""
        return get_parse_config()

    @property
    def _tables_enabled(self) -> bool:
        """Whether GFM table parsing is enabled."""
        return self._config.tables_enabled

    @property
    def _strikethrough_enabled(self) -> bool:
        """Whether ~~strikethrough~~ syntax is enabled."""
        return self._config.strikethrough_enabled

    @property
    def _task_lists_enabled(self) -> bool:
        """Whether - [ ] task list items are enabled."""
        return self._config.task_lists_enabled

    @property
    def _autolinks_enabled(self) -> bool:
        """Whether bare URL and e-mail autolinks are enabled."""
        return self._config.autolinks_enabled

    def parse(self) -> Document:
        """Parse source into a Document.

        Returns:
            Document node holding the top-level blocks and the link
            reference definitions

        Thread Safety:
            Returns immutable AST (frozen dataclasses).
        """
        lines = normalize_source(self._source)
        root = self._parse_blocks(lines)
        return Document(
            location=SourceLocation(
                lineno=1,
                col_offset=1,
                end_lineno=max(len(lines), 1),
                source_file=self._source_file,
            ),
            children=self._convert_blocks(root.children),
            link_references=MappingProxyType(dict(self._link_refs)),
        )

    # =========================================================================
    # Open block tree -> AST
    # =========================================================================

    def _location(self, block: OpenBlock) -> SourceLocation:
        return SourceLocation(
            lineno=block.start_line,
            col_offset=block.start_column,
            end_lineno=block.end_line,
            source_file=self._source_file,
        )

    def _convert_blocks(self, blocks: list[OpenBlock]) -> tuple[Block, ...]:
        return tuple(self._convert_block(block) for block in blocks)

    def _convert_block(self, block: OpenBlock) -> Block:
        location = self._location(block)
        match block.kind:
            case BlockKind.PARAGRAPH:
                return Paragraph(
                    location=location,
                    children=self._parse_inline(block.content.strip(_INLINE_STRIP), location),
                )
            case BlockKind.HEADING:
                return Heading(
                    location=location,
                    level=block.level,  # type: ignore[arg-type]
                    children=self._parse_inline(block.content.strip(_INLINE_STRIP), location),
                    style="setext" if block.setext else "atx",
                )
            case BlockKind.CODE_BLOCK if block.fenced:
                return FencedCode(
                    location=location,
                    code=block.literal,
                    info=block.info or None,
                    marker=block.fence_char,  # type: ignore[arg-type]
                    fence_length=block.fence_length,
                    fence_indent=block.fence_offset,
                )
            case BlockKind.CODE_BLOCK:
                return IndentedCode(location=location, code=block.literal)
            case BlockKind.HTML_BLOCK:
                return HtmlBlock(location=location, html=block.literal)
            case BlockKind.THEMATIC_BREAK:
                return ThematicBreak(location=location)
            case BlockKind.BLOCK_QUOTE:
                return BlockQuote(location=location, children=self._convert_blocks(block.children))
            case BlockKind.LIST:
                return self._convert_list(block, location)
            case BlockKind.TABLE:
                return self._convert_table(block, location)
            case _:
                raise ParseError(
                    f"unexpected {block.kind.name} block in the open block tree",
                    lineno=location.lineno,
                    col_offset=location.col_offset,
                    source_file=self._source_file,
                )

    def _convert_list(self, block: OpenBlock, location: SourceLocation) -> List:
        marker = block.list_marker
        if marker is None:
            raise ParseError(
                "list block has no list marker",
                lineno=location.lineno,
                col_offset=location.col_offset,
                source_file=self._source_file,
            )
        return List(
            location=location,
            items=tuple(self._convert_item(item) for item in block.children),
            ordered=marker.ordered,
            start=marker.start,
            tight=block.tight,
            delimiter=marker.delimiter,
            bullet=marker.bullet,
        )

    def _convert_item(self, item: OpenBlock) -> ListItem:
        checked: bool | None = None
        first = item.children[0] if item.children else None
        if self._task_lists_enabled and first is not None and first.kind is BlockKind.PARAGRAPH:
            content = first.content
            match = _TASK_LIST_MARKER_RE.match(content)
            if match is not None:
                checked = match.group(1) != " "
                first.set_content(content[match.end() :])
        return ListItem(
            location=self._location(item),
            children=self._convert_blocks(item.children),
            checked=checked,
        )

    def _convert_table(self, block: OpenBlock, location: SourceLocation) -> Table:
        alignments = tuple(block.alignments)

        def row(cells: list[str], is_header: bool) -> TableRow:
            return TableRow(
                location=location,
                cells=tuple(
                    TableCell(
                        location=location,
                        children=self._parse_inline(text, location),
                        is_header=is_header,
                        align=alignments[i],
                    )
                    for i, text in enumerate(cells)
                ),
                is_header=is_header,
            )

        header, *body = block.rows
        return Table(
            location=location,
            head=(row(header, True),),
            body=tuple(row(cells, False) for cells in body),
            alignments=alignments,
        )
