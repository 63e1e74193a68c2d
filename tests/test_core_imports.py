"""Verify core module imports work correctly."""

from __future__ import annotations

import dataclasses

import pytest


def test_import_location() -> None:
    """Test SourceLocation import and instantiation."""
    from marmota.location import SourceLocation

    loc = SourceLocation(lineno=1, col_offset=1)
    assert loc.lineno == 1
    assert loc.col_offset == 1
    assert str(loc) == "1:1"
    assert str(SourceLocation(2, 3, source_file="a.md")) == "a.md:2:3"
    assert SourceLocation.unknown() == SourceLocation(0, 0)


def test_nodes_are_frozen() -> None:
    from marmota.location import SourceLocation
    from marmota.nodes import Text

    text = Text(location=SourceLocation(1, 1), content="a")
    with pytest.raises(dataclasses.FrozenInstanceError):
        text.content = "b"  # type: ignore[misc]


def test_nodes_are_slotted() -> None:
    from marmota.nodes import Heading, Paragraph, Text

    for cls in (Heading, Paragraph, Text):
        assert hasattr(cls, "__slots__")


def test_document_equality() -> None:
    from marmota import parse

    first = parse("[a]\n\n[a]: /x")
    second = parse("[a]\n\n[a]: /y")
    assert first.children != second.children
    assert parse("text") == parse("text")


def test_import_parser() -> None:
    from marmota.nodes import Document
    from marmota.parser import Parser

    doc = Parser("# Hi").parse()
    assert isinstance(doc, Document)
