"""marmota renderers.

Renderers convert typed AST nodes into output formats.

Available Renderers:
- HtmlRenderer: Renders AST to HTML using StringBuilder pattern

Thread Safety:
All renderers use StringBuilder local to each render() call.
Safe for concurrent use from multiple threads.

"""

from marmota.renderers.html import HtmlRenderer, html_escape, normalize_url

__all__ = ["HtmlRenderer", "html_escape", "normalize_url"]
