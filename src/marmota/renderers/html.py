"""HTML renderer using StringBuilder pattern.

Renders typed AST to HTML in the same layout as the CommonMark and GFM
reference implementations: every block starts on a new line, block tags
are followed by a newline, and inline content is emitted verbatim apart
from escaping.

Thread Safety:
All per-render state lives in the StringBuilder created for each render()
call. Multiple threads can safely share a single HtmlRenderer instance
and call render() concurrently without synchronization.
"""

import html
import logging
import re
from urllib.parse import quote as url_quote

from marmota.errors import RenderError
from marmota.nodes import (
    Autolink,
    Block,
    BlockQuote,
    CodeSpan,
    Document,
    Emphasis,
    Entity,
    FencedCode,
    Heading,
    HtmlBlock,
    HtmlInline,
    Image,
    IndentedCode,
    Inline,
    LineBreak,
    Link,
    List,
    ListItem,
    Paragraph,
    SoftBreak,
    Strikethrough,
    Strong,
    Table,
    TableRow,
    Text,
    ThematicBreak,
)
from marmota.stringbuilder import StringBuilder

logger = logging.getLogger(__name__)

# Percent-escapes are kept; anything outside this set is UTF-8 percent-encoded
_URL_UNSAFE_RE = re.compile(r"%[0-9A-Fa-f]{2}|[^A-Za-z0-9;/?:@&=+$,\-_.!~*'()#]")

# GFM disallowed raw HTML: the "<" of these tags is escaped
_DISALLOWED_TAG_RE = re.compile(
    r"<(?=/?(?:title|textarea|style|xmp|iframe|noembed|noframes|script|plaintext)(?:[\s>]|/>|$))",
    re.IGNORECASE,
)


def html_escape(s: str) -> str:
    """Escape HTML special characters.

    CommonMark-compliant: escapes <, >, &, " but NOT single quotes.
    Python's html.escape() escapes ' to &#x27; which CommonMark doesn't require.
    """
    return html.escape(s, quote=False).replace('"', "&quot;")


def _encode_url_piece(match: re.Match[str]) -> str:
    piece = match.group(0)
    if len(piece) == 3:
        return piece
    try:
        return url_quote(piece, safe="")
    except UnicodeEncodeError:
        # Lone surrogate
        return "%EF%BF%BD"


def normalize_url(url: str) -> str:
    """Percent-encode a link destination for use in an attribute.

    Existing ``%XX`` escapes are preserved; a ``%`` not starting one becomes
    ``%25``. The result still needs html_escape().

    Example:
        >>> normalize_url("foo%20bä")
        'foo%20b%C3%A4'

    """
    return _URL_UNSAFE_RE.sub(_encode_url_piece, url)


def filter_disallowed_tags(raw: str) -> str:
    """Neutralise GFM disallowed raw HTML tags by escaping their ``<``."""
    if "<" not in raw:
        return raw
    return _DISALLOWED_TAG_RE.sub("&lt;", raw)


class HtmlRenderer:
    """Render AST to HTML using StringBuilder pattern.

    Usage:
        >>> from marmota.parser import Parser
        >>> doc = Parser("# Hello **World**").parse()
        >>> HtmlRenderer().render(doc)
        '<h1>Hello <strong>World</strong></h1>\\n'

    Thread Safety:
        Multiple threads can safely share a single HtmlRenderer instance.
        Each render() call uses its own StringBuilder.
    """

    __slots__ = ("_tagfilter",)

    def __init__(self, *, tagfilter: bool = False) -> None:
        """Initialize renderer.

        Args:
            tagfilter: Escape the GFM disallowed raw HTML tags
        """
        self._tagfilter = tagfilter

    def render(self, node: Document) -> str:
        """Render document AST to HTML string.

        Args:
            node: Document AST root

        Returns:
            HTML string

        Raises:
            RenderError: The tree contains an object that is not a node

        """
        sb = StringBuilder()
        for child in node.children:
            self._render_block(child, sb)
        return sb.build()

    # =========================================================================
    # Block rendering
    # =========================================================================

    def _render_block(self, block: Block, sb: StringBuilder, tight: bool = False) -> None:
        """Render a block node.

        tight is True only for the direct children of an item in a tight
        list, where paragraphs lose their ``<p>`` tags.
        """
        match block:
            case Paragraph():
                if tight:
                    self._render_inlines(block.children, sb)
                else:
                    sb.ensure_newline().append("<p>")
                    self._render_inlines(block.children, sb)
                    sb.append("</p>\n")
            case Heading():
                sb.ensure_newline().append(f"<h{block.level}>")
                self._render_inlines(block.children, sb)
                sb.append(f"</h{block.level}>\n")
            case FencedCode():
                self._render_fenced_code(block, sb)
            case IndentedCode():
                sb.ensure_newline().append("<pre><code>")
                sb.append(html_escape(block.code))
                sb.append("</code></pre>\n")
            case BlockQuote():
                sb.ensure_newline().append("<blockquote>\n")
                for child in block.children:
                    self._render_block(child, sb)
                sb.ensure_newline().append("</blockquote>\n")
            case List():
                self._render_list(block, sb)
            case ThematicBreak():
                sb.ensure_newline().append("<hr />\n")
            case HtmlBlock():
                sb.ensure_newline()
                sb.append(filter_disallowed_tags(block.html) if self._tagfilter else block.html)
                sb.ensure_newline()
            case Table():
                self._render_table(block, sb)
            case _:
                logger.error("Cannot render block %r", block)
                raise RenderError(f"Cannot render {type(block).__name__} as a block")

    def _render_fenced_code(self, code: FencedCode, sb: StringBuilder) -> None:
        """Render fenced code block; the first word of the info string is the language."""
        lang = code.language
        lang_class = f' class="language-{html_escape(lang)}"' if lang else ""
        sb.ensure_newline().append(f"<pre><code{lang_class}>")
        sb.append(html_escape(code.code))
        sb.append("</code></pre>\n")

    def _render_list(self, lst: List, sb: StringBuilder) -> None:
        """Render ordered or unordered list."""
        sb.ensure_newline()
        if lst.ordered:
            start_attr = f' start="{lst.start}"' if lst.start != 1 else ""
            sb.append(f"<ol{start_attr}>\n")
        else:
            sb.append("<ul>\n")

        for item in lst.items:
            self._render_list_item(item, sb, lst.tight)

        sb.append("</ol>\n" if lst.ordered else "</ul>\n")

    def _render_list_item(self, item: ListItem, sb: StringBuilder, tight: bool) -> None:
        """Render list item.

        In a tight list the item's own paragraphs render as bare inline
        content; other blocks still start on their own line.
        """
        sb.ensure_newline().append("<li>")
        if item.checked is not None:
            checked = 'checked="" ' if item.checked else ""
            sb.append(f'<input type="checkbox" {checked}disabled="" /> ')
        for child in item.children:
            self._render_block(child, sb, tight=tight)
        sb.append("</li>\n")

    def _render_table(self, table: Table, sb: StringBuilder) -> None:
        """Render GFM table; ``<tbody>`` only appears when there are body rows."""
        sb.ensure_newline().append("<table>\n")

        sb.append("<thead>\n")
        for row in table.head:
            self._render_table_row(row, sb, "th")
        sb.append("</thead>\n")

        if table.body:
            sb.append("<tbody>\n")
            for row in table.body:
                self._render_table_row(row, sb, "td")
            sb.append("</tbody>\n")

        sb.append("</table>\n")

    def _render_table_row(self, row: TableRow, sb: StringBuilder, tag: str) -> None:
        sb.append("<tr>\n")
        for cell in row.cells:
            align = f' align="{cell.align}"' if cell.align else ""
            sb.append(f"<{tag}{align}>")
            self._render_inlines(cell.children, sb)
            sb.append(f"</{tag}>\n")
        sb.append("</tr>\n")

    # =========================================================================
    # Inline rendering
    # =========================================================================

    def _render_inlines(self, inlines: tuple[Inline, ...], sb: StringBuilder) -> None:
        """Render a sequence of inline nodes.

        Nested spans are walked with an explicit stack of nodes and closing
        tags, so arbitrarily deep emphasis renders without recursion.
        """
        pending: list[Inline | str] = list(reversed(inlines))
        while pending:
            inline = pending.pop()
            if isinstance(inline, str):
                sb.append(inline)
                continue
            match inline:
                case Text() | Entity():
                    sb.append(html_escape(inline.content))
                case SoftBreak():
                    sb.append("\n")
                case LineBreak():
                    sb.append("<br />\n")
                case CodeSpan():
                    sb.append("<code>").append(html_escape(inline.code)).append("</code>")
                case Emphasis():
                    sb.append("<em>")
                    pending.append("</em>")
                    pending.extend(reversed(inline.children))
                case Strong():
                    sb.append("<strong>")
                    pending.append("</strong>")
                    pending.extend(reversed(inline.children))
                case Strikethrough():
                    sb.append("<del>")
                    pending.append("</del>")
                    pending.extend(reversed(inline.children))
                case Link():
                    href = html_escape(normalize_url(inline.url))
                    title = f' title="{html_escape(inline.title)}"' if inline.title else ""
                    sb.append(f'<a href="{href}"{title}>')
                    pending.append("</a>")
                    pending.extend(reversed(inline.children))
                case Image():
                    src = html_escape(normalize_url(inline.url))
                    alt = html_escape(inline.alt)
                    title = f' title="{html_escape(inline.title)}"' if inline.title else ""
                    sb.append(f'<img src="{src}" alt="{alt}"{title} />')
                case Autolink():
                    href = html_escape(normalize_url(inline.url))
                    sb.append(f'<a href="{href}">{html_escape(inline.text)}</a>')
                case HtmlInline():
                    sb.append(filter_disallowed_tags(inline.html) if self._tagfilter else inline.html)
                case _:
                    logger.error("Cannot render inline %r", inline)
                    raise RenderError(f"Cannot render {type(inline).__name__} as inline content")
