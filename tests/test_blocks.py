"""Block structure tests.

Checks the AST the block parser produces for containers and leaves:
node types, levels, list metadata, code literals and locations.
"""

from marmota import ParseConfig, parse, render
from marmota.nodes import (
    BlockQuote,
    FencedCode,
    Heading,
    HtmlBlock,
    IndentedCode,
    List,
    Paragraph,
    Text,
    ThematicBreak,
)

COMMONMARK = ParseConfig.commonmark()


def blocks(source: str) -> tuple:
    return parse(source, config=COMMONMARK).children


class TestHeadings:
    def test_atx_levels(self) -> None:
        for level in range(1, 7):
            (heading,) = blocks("#" * level + " Title")
            assert isinstance(heading, Heading)
            assert heading.level == level
            assert heading.style == "atx"

    def test_atx_closing_sequence(self) -> None:
        (heading,) = blocks("## Title ##   ")
        assert heading.children == (Text(location=heading.location, content="Title"),)

    def test_atx_needs_space(self) -> None:
        (para,) = blocks("#hashtag")
        assert isinstance(para, Paragraph)

    def test_setext(self) -> None:
        first, second = blocks("Title\n=====\n\nSub\n---")
        assert isinstance(first, Heading) and first.level == 1 and first.style == "setext"
        assert isinstance(second, Heading) and second.level == 2

    def test_setext_multiline(self) -> None:
        assert render("a\nb\n===", config=COMMONMARK) == "<h1>a\nb</h1>\n"

    def test_dashes_after_blank_line_are_a_break(self) -> None:
        para, rule = blocks("Foo\n\n---")
        assert isinstance(para, Paragraph)
        assert isinstance(rule, ThematicBreak)

    def test_setext_after_reference_definition(self) -> None:
        doc = parse("[foo]: /url\n===", config=COMMONMARK)
        (para,) = doc.children
        assert isinstance(para, Paragraph)
        assert "foo" in doc.link_references


class TestThematicBreaks:
    def test_variants(self) -> None:
        for source in ("***", "---", "___", " - - -", "**  * ** * ** * **"):
            (rule,) = blocks(source)
            assert isinstance(rule, ThematicBreak), source

    def test_too_few(self) -> None:
        (para,) = blocks("--")
        assert isinstance(para, Paragraph)

    def test_interrupts_list(self) -> None:
        lst, rule, lst2 = blocks("- foo\n***\n- bar")
        assert isinstance(lst, List) and isinstance(lst2, List)
        assert isinstance(rule, ThematicBreak)


class TestCodeBlocks:
    def test_indented(self) -> None:
        (code,) = blocks("    a\n      b\n\n    c\n\n")
        assert isinstance(code, IndentedCode)
        assert code.code == "a\n  b\n\nc\n"

    def test_indented_cannot_interrupt_paragraph(self) -> None:
        (para,) = blocks("foo\n    bar")
        assert isinstance(para, Paragraph)

    def test_fenced(self) -> None:
        (code,) = blocks("```python extra\nprint(1)\n```")
        assert isinstance(code, FencedCode)
        assert code.info == "python extra"
        assert code.language == "python"
        assert code.code == "print(1)\n"
        assert code.marker == "`"
        assert code.fence_length == 3

    def test_fence_indent_removed(self) -> None:
        (code,) = blocks("  ```\n  aaa\n    b\n aa\n  ```")
        assert code.code == "aaa\n  b\naa\n"
        assert code.fence_indent == 2

    def test_closing_fence_must_be_long_enough(self) -> None:
        (code,) = blocks("~~~~\naaa\n~~~\n")
        assert code.code == "aaa\n~~~\n"

    def test_info_string_escapes(self) -> None:
        (code,) = blocks("``` f\\*o&amp;\n```")
        assert code.info == "f*o&"

    def test_backtick_info_cannot_contain_backtick(self) -> None:
        (para,) = blocks("``` a`b\nfoo")
        assert isinstance(para, Paragraph)

    def test_unclosed_fence_runs_to_end_of_container(self) -> None:
        quote, para = blocks("> ```\n> aaa\n\nbbb")
        assert isinstance(quote, BlockQuote)
        (code,) = quote.children
        assert code.code == "aaa\n"
        assert isinstance(para, Paragraph)

    def test_empty_fence(self) -> None:
        (code,) = blocks("```\n```")
        assert code.code == ""
        assert code.info is None


class TestHtmlBlocks:
    def test_type_1_ends_at_closing_tag(self) -> None:
        html, para = blocks("<pre>\nx\n\ny\n</pre>\nokay")
        assert isinstance(html, HtmlBlock)
        assert html.html == "<pre>\nx\n\ny\n</pre>"
        assert isinstance(para, Paragraph)

    def test_type_6_ends_at_blank_line(self) -> None:
        html, para = blocks("<div>\n*hi*\n\n*there*")
        assert html.html == "<div>\n*hi*"
        assert isinstance(para, Paragraph)

    def test_type_7_cannot_interrupt_paragraph(self) -> None:
        (para,) = blocks("Foo\n<a href=\"bar\">\nbaz")
        assert isinstance(para, Paragraph)

    def test_comment(self) -> None:
        (html,) = blocks("<!-- a\n\nb -->")
        assert html.html == "<!-- a\n\nb -->"


class TestBlockQuotes:
    def test_nested(self) -> None:
        (outer,) = blocks("> > inner")
        assert isinstance(outer, BlockQuote)
        (inner,) = outer.children
        assert isinstance(inner, BlockQuote)

    def test_lazy_continuation(self) -> None:
        (quote,) = blocks("> foo\nbar")
        (para,) = quote.children
        assert isinstance(para, Paragraph)
        assert len(para.children) == 3

    def test_lazy_line_cannot_continue_code(self) -> None:
        quote, code = blocks(">     code\n    more")
        assert isinstance(quote.children[0], IndentedCode)
        assert isinstance(code, IndentedCode)

    def test_blank_line_separates(self) -> None:
        first, second = blocks("> a\n\n> b")
        assert isinstance(first, BlockQuote) and isinstance(second, BlockQuote)

    def test_empty(self) -> None:
        (quote,) = blocks(">")
        assert quote.children == ()


class TestLists:
    def test_bullet_list(self) -> None:
        (lst,) = blocks("- a\n- b\n- c")
        assert isinstance(lst, List)
        assert not lst.ordered
        assert lst.bullet == "-"
        assert lst.tight
        assert len(lst.items) == 3

    def test_ordered_list_start(self) -> None:
        (lst,) = blocks("3) a\n4) b")
        assert lst.ordered
        assert lst.start == 3
        assert lst.delimiter == ")"

    def test_changing_bullet_starts_new_list(self) -> None:
        first, second = blocks("- a\n+ b")
        assert first.bullet == "-"
        assert second.bullet == "+"

    def test_changing_delimiter_starts_new_list(self) -> None:
        first, second = blocks("1. a\n2) b")
        assert first.delimiter == "." and second.delimiter == ")"

    def test_loose_list(self) -> None:
        (lst,) = blocks("- a\n\n- b")
        assert not lst.tight

    def test_blank_line_inside_nested_list_keeps_outer_tight(self) -> None:
        (lst,) = blocks("- a\n  - b\n\n    c\n- d")
        assert lst.tight
        inner = lst.items[0].children[1]
        assert isinstance(inner, List)
        assert not inner.tight

    def test_only_one_may_interrupt_paragraph(self) -> None:
        (para,) = blocks("The number of windows in my house is\n14.  The number of doors is 6.")
        assert isinstance(para, Paragraph)
        para, lst = blocks("The number of windows in my house is\n1.  The number of doors is 6.")
        assert isinstance(lst, List)

    def test_empty_item_cannot_interrupt_paragraph(self) -> None:
        first, second = blocks("foo\n*\n\nfoo\n1.")
        assert isinstance(first, Paragraph)
        assert isinstance(second, Paragraph)

    def test_item_starting_with_blank_line(self) -> None:
        (lst,) = blocks("-\n  foo\n-\n  ```\n  bar\n  ```")
        first, second = lst.items
        assert isinstance(first.children[0], Paragraph)
        assert isinstance(second.children[0], FencedCode)

    def test_indented_code_in_item(self) -> None:
        (lst,) = blocks("1.     indented code\n\n   paragraph")
        code, para = lst.items[0].children
        assert isinstance(code, IndentedCode)
        assert code.code == "indented code\n"
        assert isinstance(para, Paragraph)

    def test_start_number_too_long(self) -> None:
        (para,) = blocks("1234567890. not ok")
        assert isinstance(para, Paragraph)


class TestLocations:
    def test_line_numbers(self) -> None:
        doc = parse("# Title\n\npara\nmore\n\n- a\n- b", source_file="doc.md")
        heading, para, lst = doc.children
        assert heading.location.lineno == 1
        assert para.location.lineno == 3
        assert para.location.end_lineno == 4
        assert lst.location.lineno == 6
        assert lst.items[1].location.lineno == 7
        assert str(lst.location) == "doc.md:6:1"

    def test_document_spans_all_lines(self) -> None:
        doc = parse("a\nb\nc")
        assert doc.location.lineno == 1
        assert doc.location.end_lineno == 3

    def test_nested_column(self) -> None:
        (quote,) = parse("> para").children
        assert quote.children[0].location.col_offset == 3
