"""Source location tracking for AST nodes and error messages.

Thread Safety:
SourceLocation is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Position of a node in the source document.

    Line numbers and columns are 1-indexed. Inline nodes carry the location
    of the leaf block they were parsed from.

    Attributes:
        lineno: Starting line number
        col_offset: Starting column (character offset + 1)
        end_lineno: Last line of the construct (optional)
        source_file: Source file path (optional)

    Examples:
        >>> loc = SourceLocation(lineno=3, col_offset=1, source_file="guide.md")
        >>> str(loc)
        'guide.md:3:1'

    """

    lineno: int
    col_offset: int
    end_lineno: int | None = None
    source_file: str | None = None

    def __str__(self) -> str:
        if self.source_file:
            return f"{self.source_file}:{self.lineno}:{self.col_offset}"
        return f"{self.lineno}:{self.col_offset}"

    @classmethod
    def unknown(cls) -> SourceLocation:
        """Create a placeholder location for synthetic nodes."""
        return cls(lineno=0, col_offset=0)
