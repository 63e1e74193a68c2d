"""Typed AST nodes for marmota.

All AST nodes are frozen dataclasses with slots, so a parsed Document can be
shared between threads and dispatched on with ``match`` statements.

Node Hierarchy:
Node (base)
├── Block (block-level elements)
│   ├── Document
│   ├── Heading
│   ├── Paragraph
│   ├── FencedCode
│   ├── IndentedCode
│   ├── BlockQuote
│   ├── List
│   ├── ListItem
│   ├── ThematicBreak
│   ├── HtmlBlock
│   └── Table (TableRow, TableCell)
└── Inline (inline elements)
    ├── Text
    ├── Entity
    ├── Emphasis
    ├── Strong
    ├── Strikethrough
    ├── Link
    ├── Image
    ├── Autolink
    ├── CodeSpan
    ├── LineBreak
    ├── SoftBreak
    └── HtmlInline

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal, TypeAlias

from marmota.location import SourceLocation

Alignment: TypeAlias = Literal["left", "center", "right"] | None


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all AST nodes."""

    location: SourceLocation


# =============================================================================
# Inline Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Literal text, with escapes already resolved."""

    content: str


@dataclass(frozen=True, slots=True)
class Entity(Node):
    """Resolved entity or numeric character reference.

    Markdown: &copy; or &#169; or &#xA9;
    HTML: the resolved characters, escaped

    """

    source: str
    content: str


@dataclass(frozen=True, slots=True)
class Emphasis(Node):
    """Emphasized (italic) text.

    Markdown: *text* or _text_
    HTML: <em>text</em>

    """

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Strong(Node):
    """Strong (bold) text.

    Markdown: **text** or __text__
    HTML: <strong>text</strong>

    """

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Strikethrough(Node):
    """Strikethrough (deleted) text, a GFM extension.

    Markdown: ~~deleted~~
    HTML: <del>deleted</del>

    """

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Link(Node):
    """Hyperlink.

    Markdown: [text](url "title") or [text][ref]
    HTML: <a href="url" title="title">text</a>

    The url is stored unescaped; percent-encoding happens at render time.

    """

    url: str
    title: str | None
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Image(Node):
    """Image.

    Markdown: ![alt](url "title")
    HTML: <img src="url" alt="alt" title="title" />

    ``alt`` is the plain-text flattening of the image description.

    """

    url: str
    alt: str
    title: str | None = None


@dataclass(frozen=True, slots=True)
class Autolink(Node):
    """Autolink.

    Markdown: <https://example.com>, <me@example.com>, or with the GFM
    extension bare www.example.com, https://example.com and me@example.com
    HTML: <a href="url">text</a>

    """

    url: str
    text: str
    kind: Literal["uri", "email", "www"] = "uri"


@dataclass(frozen=True, slots=True)
class CodeSpan(Node):
    """Inline code.

    Markdown: `code`
    HTML: <code>code</code>

    """

    code: str


@dataclass(frozen=True, slots=True)
class LineBreak(Node):
    """Hard line break.

    Markdown: ``\\`` at end of line or two trailing spaces
    HTML: <br />

    """


@dataclass(frozen=True, slots=True)
class SoftBreak(Node):
    """Soft line break (single newline inside a paragraph)."""


@dataclass(frozen=True, slots=True)
class HtmlInline(Node):
    """Inline raw HTML, passed through unchanged."""

    html: str


Inline: TypeAlias = (
    Text
    | Entity
    | Emphasis
    | Strong
    | Strikethrough
    | Link
    | Image
    | Autolink
    | CodeSpan
    | LineBreak
    | SoftBreak
    | HtmlInline
)


# =============================================================================
# Block Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Heading(Node):
    """ATX or setext heading.

    Markdown: # Heading or Heading\\n=======
    HTML: <h1>Heading</h1>

    """

    level: Literal[1, 2, 3, 4, 5, 6]
    children: tuple[Inline, ...]
    style: Literal["atx", "setext"] = "atx"


@dataclass(frozen=True, slots=True)
class Paragraph(Node):
    """Paragraph block."""

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class FencedCode(Node):
    """Fenced code block.

    Markdown: ```python\\ncode\\n```
    HTML: <pre><code class="language-python">code</code></pre>

    ``info`` is the full info string with escapes and entities resolved;
    the renderer uses its first word as the language.

    """

    code: str
    info: str | None = None
    marker: Literal["`", "~"] = "`"
    fence_length: int = 3
    fence_indent: int = 0

    @property
    def language(self) -> str | None:
        """First word of the info string, if any."""
        if not self.info:
            return None
        return self.info.split()[0]


@dataclass(frozen=True, slots=True)
class IndentedCode(Node):
    """Indented code block (4+ columns).

    HTML: <pre><code>code</code></pre>

    """

    code: str


@dataclass(frozen=True, slots=True)
class BlockQuote(Node):
    """Block quote.

    Markdown: > quoted text
    HTML: <blockquote>text</blockquote>

    """

    children: tuple[Block, ...]


@dataclass(frozen=True, slots=True)
class ListItem(Node):
    """List item.

    ``checked`` is None for ordinary items, True/False for GFM task items.

    """

    children: tuple[Block, ...]
    checked: bool | None = None


@dataclass(frozen=True, slots=True)
class List(Node):
    """Ordered or unordered list.

    A list is tight when no item is separated from its sibling by a blank
    line and no item contains direct children separated by one.

    """

    items: tuple[ListItem, ...]
    ordered: bool = False
    start: int = 1
    tight: bool = True
    delimiter: Literal[".", ")"] | None = None
    bullet: Literal["-", "+", "*"] | None = None


@dataclass(frozen=True, slots=True)
class ThematicBreak(Node):
    """Thematic break (horizontal rule).

    Markdown: --- or *** or ___
    HTML: <hr />

    """


@dataclass(frozen=True, slots=True)
class HtmlBlock(Node):
    """Raw HTML block, passed through unchanged."""

    html: str


@dataclass(frozen=True, slots=True)
class TableCell(Node):
    """Table cell (th or td)."""

    children: tuple[Inline, ...]
    is_header: bool = False
    align: Alignment = None


@dataclass(frozen=True, slots=True)
class TableRow(Node):
    """Table row."""

    cells: tuple[TableCell, ...]
    is_header: bool = False


@dataclass(frozen=True, slots=True)
class Table(Node):
    """GFM pipe table.

    Markdown:
        | A | B |
        |---|--:|
        | 1 | 2 |

    HTML: <table>...</table>, with no <tbody> when there are no body rows

    """

    head: tuple[TableRow, ...]
    body: tuple[TableRow, ...]
    alignments: tuple[Alignment, ...]


@dataclass(frozen=True, slots=True)
class LinkReference:
    """Link reference definition: ``[label]: url "title"``.

    Stored on the Document keyed by normalized label; never rendered.

    """

    label: str
    url: str
    title: str | None = None


@dataclass(frozen=True, slots=True)
class Document(Node):
    """Root document node."""

    children: tuple[Block, ...]
    link_references: Mapping[str, LinkReference] = field(default_factory=dict, compare=False)


Block: TypeAlias = (
    Document
    | Heading
    | Paragraph
    | FencedCode
    | IndentedCode
    | BlockQuote
    | List
    | ListItem
    | ThematicBreak
    | HtmlBlock
    | Table
)
