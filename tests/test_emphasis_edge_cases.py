"""Edge case tests for emphasis parsing.

These tests exercise the delimiter stack algorithm with various piece
types mixed in, and the flanking, intraword and rule-of-three rules.
"""

import pytest

from marmota import Markdown, ParseConfig, render
from marmota.nodes import (
    CodeSpan,
    Emphasis,
    Link,
    Paragraph,
    Strikethrough,
    Strong,
    Text,
)


def cm(source: str) -> str:
    return render(source, config=ParseConfig.commonmark())


class TestEmphasisWithMixedContent:
    """Test emphasis parsing with various inline elements mixed in."""

    @pytest.fixture
    def md(self) -> Markdown:
        return Markdown()

    def test_emphasis_around_code(self, md: Markdown) -> None:
        doc = md.parse("*before `code` after*")
        para = doc.children[0]
        assert isinstance(para, Paragraph)
        (em,) = para.children
        assert isinstance(em, Emphasis)
        assert [type(c) for c in em.children] == [Text, CodeSpan, Text]

    def test_strong_around_code(self, md: Markdown) -> None:
        doc = md.parse("**before `code` after**")
        (strong,) = doc.children[0].children
        assert isinstance(strong, Strong)

    def test_emphasis_around_link(self, md: Markdown) -> None:
        doc = md.parse("*click [here](url) now*")
        (em,) = doc.children[0].children
        assert isinstance(em, Emphasis)
        assert any(isinstance(c, Link) for c in em.children)

    def test_emphasis_inside_link_text(self, md: Markdown) -> None:
        doc = md.parse("[*a*](u)")
        (link,) = doc.children[0].children
        assert isinstance(link, Link)
        assert isinstance(link.children[0], Emphasis)

    def test_delimiter_inside_code_is_literal(self, md: Markdown) -> None:
        doc = md.parse("*a `*` b*")
        (em,) = doc.children[0].children
        assert isinstance(em.children[1], CodeSpan)
        assert em.children[1].code == "*"

    def test_link_closes_before_emphasis(self) -> None:
        assert cm("*[foo*](/u)") == '<p>*<a href="/u">foo*</a></p>\n'

    def test_strikethrough_around_strong(self, md: Markdown) -> None:
        doc = md.parse("~~**a**~~")
        (strike,) = doc.children[0].children
        assert isinstance(strike, Strikethrough)
        assert isinstance(strike.children[0], Strong)

    def test_adjacent_text_is_merged(self, md: Markdown) -> None:
        doc = md.parse("a * b [c d")
        (text,) = doc.children[0].children
        assert text == Text(location=text.location, content="a * b [c d")


class TestFlanking:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("a * foo bar*", "<p>a * foo bar*</p>\n"),
            ('a*"foo"*', "<p>a*&quot;foo&quot;*</p>\n"),
            ("foo*bar*", "<p>foo<em>bar</em></p>\n"),
            ("foo_bar_", "<p>foo_bar_</p>\n"),
            ("_foo_bar_baz_", "<p><em>foo_bar_baz</em></p>\n"),
            ("пристаням_стремятся_", "<p>пристаням_стремятся_</p>\n"),
            ("*(*foo*)*", "<p><em>(<em>foo</em>)</em></p>\n"),
            ("_(_foo_)_", "<p><em>(<em>foo</em>)</em></p>\n"),
            ("*foo bar *", "<p>*foo bar *</p>\n"),
        ],
    )
    def test_flanking_rules(self, source: str, expected: str) -> None:
        assert cm(source) == expected


class TestRuleOfThree:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("*foo**bar**baz*", "<p><em>foo<strong>bar</strong>baz</em></p>\n"),
            ("*foo**bar*", "<p><em>foo**bar</em></p>\n"),
            ("foo***bar***baz", "<p>foo<em><strong>bar</strong></em>baz</p>\n"),
            (
                "foo******bar*********baz",
                "<p>foo<strong><strong><strong>bar</strong></strong></strong>***baz</p>\n",
            ),
            ("**foo*bar*baz**", "<p><strong>foo<em>bar</em>baz</strong></p>\n"),
        ],
    )
    def test_multiple_of_three(self, source: str, expected: str) -> None:
        assert cm(source) == expected


class TestNesting:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("***strong emph***", "<p><em><strong>strong emph</strong></em></p>\n"),
            ("****foo****", "<p><strong><strong>foo</strong></strong></p>\n"),
            ("**foo*", "<p>*<em>foo</em></p>\n"),
            ("*foo**", "<p><em>foo</em>*</p>\n"),
            ("*foo _bar* baz_", "<p><em>foo _bar</em> baz_</p>\n"),
            ("**a<http://foo.bar/?q=**>", '<p>**a<a href="http://foo.bar/?q=**">http://foo.bar/?q=**</a></p>\n'),
        ],
    )
    def test_nesting(self, source: str, expected: str) -> None:
        assert cm(source) == expected


class TestStrikethrough:
    def test_basic(self) -> None:
        assert render("~~Hi~~ Hello, world!") == "<p><del>Hi</del> Hello, world!</p>\n"

    def test_single_tilde_is_text(self) -> None:
        assert render("~Hi~") == "<p>~Hi~</p>\n"

    def test_three_tildes_is_text(self) -> None:
        assert render("a ~~~Hi~~~ x") == "<p>a ~~~Hi~~~ x</p>\n"

    def test_does_not_span_paragraphs(self) -> None:
        assert render("This ~~has a\n\nnew paragraph~~.") == (
            "<p>This ~~has a</p>\n<p>new paragraph~~.</p>\n"
        )

    def test_disabled(self) -> None:
        assert cm("~~Hi~~") == "<p>~~Hi~~</p>\n"

    def test_mixed_with_emphasis(self) -> None:
        assert render("*a ~~b* c~~") == "<p><em>a ~~b</em> c~~</p>\n"
