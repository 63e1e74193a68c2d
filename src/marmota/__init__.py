"""
Marmota: CommonMark and GitHub Flavored Markdown to HTML.

Implements CommonMark 0.29 plus the GFM 0.29 extensions (tables, task
list items, strikethrough, extended autolinks and the disallowed raw HTML
filter). Any string is valid Markdown: rendering never fails on input.

Quick Start:
    >>> from marmota import render
    >>> render("# Hello *World*")
    '<h1>Hello <em>World</em></h1>\\n'

    >>> # Inspect the typed AST
    >>> from marmota import parse
    >>> doc = parse("> quoted")
    >>> type(doc.children[0]).__name__
    'BlockQuote'

    >>> # Choose extensions
    >>> from marmota import Markdown
    >>> md = Markdown(plugins=["table", "strikethrough"])
    >>> md("~~gone~~")
    '<p><del>gone</del></p>\\n'

Installation:
    pip install marmota
"""

from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor

from marmota.config import (
    BUILTIN_PLUGINS,
    ParseConfig,
    get_parse_config,
    parse_config_context,
    reset_parse_config,
    set_parse_config,
)
from marmota.errors import MarmotaError, ParseError, PluginError, RenderError
from marmota.location import SourceLocation
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
    LinkReference,
    List,
    ListItem,
    Node,
    Paragraph,
    SoftBreak,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)
from marmota.parser import Parser
from marmota.renderers.html import HtmlRenderer

__version__ = "0.1.0"


def parse(
    source: str,
    *,
    source_file: str | None = None,
    config: ParseConfig | None = None,
) -> Document:
    """Parse Markdown source into a typed AST.

    Args:
        source: Markdown source text
        source_file: Optional source file path recorded in node locations
        config: Parse configuration (uses the current context's config if None)

    Returns:
        Document AST root node

    Example:
        >>> doc = parse("# Hello **World**")
        >>> doc.children[0].level
        1
    """
    if not isinstance(source, str):
        raise TypeError(f"source must be str, not {type(source).__name__}")
    if config is None:
        return Parser(source, source_file=source_file).parse()
    with parse_config_context(config):
        return Parser(source, source_file=source_file).parse()


def render(source: str, *, config: ParseConfig | None = None) -> str:
    """Convert Markdown source to HTML.

    Every string is accepted; malformed constructs come out as literal
    text. The default configuration is GitHub Flavored Markdown.

    Args:
        source: Markdown source text
        config: Parse configuration (uses the current context's config if None)

    Returns:
        HTML string

    Raises:
        TypeError: source is not a str

    Example:
        >>> render("Hello *world*")
        '<p>Hello <em>world</em></p>\\n'
        >>> render("| a |\\n| - |", config=ParseConfig.commonmark())
        '<p>| a |\\n| - |</p>\\n'
    """
    if config is None:
        config = get_parse_config()
    doc = parse(source, config=config)
    return HtmlRenderer(tagfilter=config.tagfilter_enabled).render(doc)


def render_document(doc: Document, *, tagfilter: bool = False) -> str:
    """Render an already parsed Document to HTML.

    Args:
        doc: Document AST to render
        tagfilter: Escape the GFM disallowed raw HTML tags

    Returns:
        HTML string
    """
    return HtmlRenderer(tagfilter=tagfilter).render(doc)


class Markdown:
    """High-level Markdown processor combining parser and renderer.

    Usage:
        >>> md = Markdown()
        >>> md("# Hello **World**")
        '<h1>Hello <strong>World</strong></h1>\\n'

        >>> # Access the AST
        >>> doc = md.parse("# Heading")
        >>> doc.children[0].level
        1

        >>> # Plain CommonMark
        >>> Markdown(plugins=[])("www.example.com")
        '<p>www.example.com</p>\\n'

    Thread Safety:
        The configuration is immutable and installed through a ContextVar
        for each call. Safe to share one instance between threads.

    """

    __slots__ = ("_config", "_plugins", "_renderer")

    def __init__(self, plugins: Iterable[str] | None = None) -> None:
        """Initialize Markdown processor.

        Args:
            plugins: Extension names to enable (e.g., ["table", "autolinks"]).
                None or ["all"] enables every built-in extension; an empty
                list gives plain CommonMark.

        Raises:
            PluginError: If a plugin name is unknown
        """
        if plugins is None:
            self._plugins = list(BUILTIN_PLUGINS)
            self._config = ParseConfig.gfm()
        else:
            raw_plugins = list(plugins)
            self._config = ParseConfig.from_plugins(raw_plugins)
            self._plugins = list(BUILTIN_PLUGINS) if "all" in raw_plugins else raw_plugins
        self._renderer = HtmlRenderer(tagfilter=self._config.tagfilter_enabled)

    @property
    def config(self) -> ParseConfig:
        """The immutable configuration used for every call."""
        return self._config

    @property
    def plugins(self) -> tuple[str, ...]:
        """Enabled extension names."""
        return tuple(self._plugins)

    def __call__(self, source: str) -> str:
        """Parse and render Markdown in one call.

        Args:
            source: Markdown source text

        Returns:
            HTML string
        """
        return self._renderer.render(self.parse(source))

    def parse(self, source: str, *, source_file: str | None = None) -> Document:
        """Parse Markdown source into AST.

        Args:
            source: Markdown source text
            source_file: Optional source file path recorded in node locations

        Returns:
            Document AST root node

        Thread Safety:
            Sets config via ContextVar (thread-local). Safe for concurrent use.

        """
        return parse(source, source_file=source_file, config=self._config)

    def parse_many(
        self,
        sources: Iterable[str],
        *,
        max_workers: int | None = None,
    ) -> list[Document]:
        """Parse multiple Markdown sources into AST documents.

        Documents are parsed on a thread pool; each worker installs this
        instance's configuration in its own context. Results keep the order
        of sources.

        Args:
            sources: Iterable of Markdown source strings
            max_workers: Thread pool size (ThreadPoolExecutor default if None)

        Returns:
            List of Document AST nodes

        Example:
            >>> md = Markdown()
            >>> docs = md.parse_many(["# Doc 1", "# Doc 2", "# Doc 3"])
            >>> len(docs)
            3
        """
        source_list = list(sources)
        if not source_list:
            return []
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(self.parse, source_list))

    def render(self, doc: Document) -> str:
        """Render AST to HTML.

        Args:
            doc: Document AST to render

        Returns:
            HTML string
        """
        return self._renderer.render(doc)


__all__ = [  # noqa: RUF022 (grouped by category)
    # Version
    "__version__",
    # Core API
    "parse",
    "render",
    "render_document",
    "Markdown",
    # Base nodes
    "Node",
    "Block",
    "Inline",
    # Block nodes
    "BlockQuote",
    "Document",
    "FencedCode",
    "Heading",
    "HtmlBlock",
    "IndentedCode",
    "List",
    "ListItem",
    "Paragraph",
    "Table",
    "TableCell",
    "TableRow",
    "ThematicBreak",
    # Inline nodes
    "Autolink",
    "CodeSpan",
    "Emphasis",
    "Entity",
    "HtmlInline",
    "Image",
    "LineBreak",
    "Link",
    "SoftBreak",
    "Strikethrough",
    "Strong",
    "Text",
    # Link references
    "LinkReference",
    # Parser components
    "Parser",
    # Renderer
    "HtmlRenderer",
    # Configuration (ContextVar-based)
    "BUILTIN_PLUGINS",
    "ParseConfig",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
    # Errors
    "MarmotaError",
    "ParseError",
    "PluginError",
    "RenderError",
    # Location
    "SourceLocation",
]
