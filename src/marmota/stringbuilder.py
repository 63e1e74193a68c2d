"""Output buffer for the HTML renderer.

Fragments are collected in a list and joined once by build(), so a render
costs O(n) in the output size. ensure_newline() gives block elements the
"start on a fresh line" behaviour of the reference renderer without
inspecting the joined string.

Each render() call owns its builder; nothing is shared between threads.

"""

from __future__ import annotations


class StringBuilder:
    """Append-only string accumulator.

    Usage:
        >>> sb = StringBuilder()
        >>> _ = sb.append("<p>").append("Hello").append("</p>")
        >>> _ = sb.ensure_newline().append("<hr />\\n")
        >>> sb.build()
        '<p>Hello</p>\\n<hr />\\n'

    """

    __slots__ = ("_parts",)

    def __init__(self) -> None:
        self._parts: list[str] = []

    def append(self, s: str) -> StringBuilder:
        """Add a fragment; empty strings are dropped so the last part is never blank."""
        if s:
            self._parts.append(s)
        return self

    def ensure_newline(self) -> StringBuilder:
        """Start a new line unless at the very start or already after one."""
        if self._parts and not self._parts[-1].endswith("\n"):
            self._parts.append("\n")
        return self

    def build(self) -> str:
        return "".join(self._parts)

    def __len__(self) -> int:
        """Number of fragments, not characters."""
        return len(self._parts)

    def __bool__(self) -> bool:
        return bool(self._parts)
