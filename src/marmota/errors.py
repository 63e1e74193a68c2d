"""Exception classes for marmota.

Markdown input never produces an error: malformed constructs degrade to
literal text. These exceptions cover API misuse and internal faults.
"""

from __future__ import annotations


class MarmotaError(Exception):
    """Base exception for all marmota errors."""

    pass


class ParseError(MarmotaError):
    """Internal inconsistency detected while building the block tree.

    Never raised for any Markdown input; seeing one means the parser's own
    bookkeeping went wrong (for example, an attempt to close the document
    block while lines remain).
    """

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        col_offset: int | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize parse error with optional location.

        Args:
            message: Error description
            lineno: Line number where error occurred (1-indexed)
            col_offset: Column offset where error occurred (1-indexed)
            source_file: Path to source file (optional)
        """
        self.message = message
        self.lineno = lineno
        self.col_offset = col_offset
        self.source_file = source_file

        location = ""
        if source_file:
            location = f"{source_file}:"
        if lineno is not None:
            location += f"{lineno}:"
            if col_offset is not None:
                location += f"{col_offset}:"
        if location:
            location = location.rstrip(":") + " "

        super().__init__(f"{location}{message}")


class RenderError(MarmotaError):
    """Error during HTML rendering.

    Raised when the renderer is handed an object that is not a marmota node.
    """

    pass


class PluginError(MarmotaError):
    """Unknown or misconfigured built-in extension."""

    def __init__(self, plugin_name: str, message: str) -> None:
        """Initialize plugin error.

        Args:
            plugin_name: Name of the offending extension
            message: Description of the error
        """
        self.plugin_name = plugin_name
        super().__init__(f"Plugin '{plugin_name}': {message}")
