"""Typed AST: collect headings for a table of contents."""

from marmota import parse
from marmota.nodes import Block, BlockQuote, Heading, List
from marmota.parsing.inline.links import plain_text


def collect_headings(blocks: tuple[Block, ...]) -> list[tuple[int, str]]:
    """Walk the block tree, including quotes and list items."""
    headings: list[tuple[int, str]] = []
    pending = list(reversed(blocks))
    while pending:
        block = pending.pop()
        match block:
            case Heading(level=level, children=children):
                headings.append((level, plain_text(children)))
            case BlockQuote(children=children):
                pending.extend(reversed(children))
            case List(items=items):
                for item in reversed(items):
                    pending.extend(reversed(item.children))
    return headings


source = """# Introduction

Welcome to the guide.

Getting *Started*
-----------------

First steps.

> ### Installation
>
> How to install.

## Advanced `Topics`
"""

doc = parse(source)

print("Table of Contents:")
for level, text in collect_headings(doc.children):
    indent = "  " * (level - 1)
    print(f"{indent}{'#' * level} {text}")
