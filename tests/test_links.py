"""Tests for links, images, reference definitions and other inline specials."""

import pytest

from marmota import ParseConfig, parse, render
from marmota.nodes import Autolink, CodeSpan, Entity, HtmlInline, Image, Link
from marmota.parsing.inline.links import (
    normalize_label,
    parse_link_destination,
    parse_link_title,
    plain_text,
)

COMMONMARK = ParseConfig.commonmark()


def cm(source: str) -> str:
    return render(source, config=COMMONMARK)


def inlines(source: str) -> tuple:
    return parse(source, config=COMMONMARK).children[0].children


class TestInlineLinks:
    def test_basic(self) -> None:
        (link,) = inlines('[link](/uri "title")')
        assert isinstance(link, Link)
        assert link.url == "/uri"
        assert link.title == "title"
        assert [child.content for child in link.children] == ["link"]

    def test_empty_destination(self) -> None:
        assert cm("[link]()") == '<p><a href="">link</a></p>\n'
        assert cm("[link](<>)") == '<p><a href="">link</a></p>\n'

    def test_angle_destination_with_spaces(self) -> None:
        assert cm("[link](</my uri>)") == '<p><a href="/my%20uri">link</a></p>\n'

    def test_bare_destination_with_space_fails(self) -> None:
        assert cm("[link](/my uri)") == "<p>[link](/my uri)</p>\n"

    def test_balanced_parentheses(self) -> None:
        assert cm("[link](foo(and(bar)))") == '<p><a href="foo(and(bar))">link</a></p>\n'

    def test_unbalanced_parentheses(self) -> None:
        assert cm("[link](foo(and(bar))") == "<p>[link](foo(and(bar))</p>\n"

    def test_escapes_and_entities_in_destination(self) -> None:
        assert cm("[link](foo\\)\\:)") == '<p><a href="foo):">link</a></p>\n'
        assert cm('[link](foo%20b&auml;)') == '<p><a href="foo%20b%C3%A4">link</a></p>\n'

    def test_title_delimiters(self) -> None:
        expected = '<a href="/url" title="title">link</a>'
        for source in ('[link](/url "title")', "[link](/url 'title')", "[link](/url (title))"):
            assert expected in cm(source)

    def test_title_needs_whitespace(self) -> None:
        assert cm('[link](/url"title")') == '<p><a href="/url%22title%22">link</a></p>\n'

    def test_no_links_inside_links(self) -> None:
        assert cm("[foo [bar](/uri)](/uri)") == '<p>[foo <a href="/uri">bar</a>](/uri)</p>\n'

    def test_images_may_contain_links(self) -> None:
        (image,) = inlines("![[foo](/a)](/b)")
        assert isinstance(image, Image)
        assert image.alt == "foo"

    def test_code_span_beats_link(self) -> None:
        assert cm("[foo`](/uri)`") == "<p>[foo<code>](/uri)</code></p>\n"

    def test_deep_paren_nesting_is_rejected(self) -> None:
        source = "[a](" + "(" * 40 + ")" * 40 + ")"
        assert cm(source).startswith("<p>[a](")


class TestReferenceLinks:
    def test_full_reference(self) -> None:
        assert cm('[foo][bar]\n\n[bar]: /url "title"') == (
            '<p><a href="/url" title="title">foo</a></p>\n'
        )

    def test_collapsed_and_shortcut(self) -> None:
        source = "[foo][]\n[foo]\n\n[foo]: /url"
        assert cm(source) == '<p><a href="/url">foo</a>\n<a href="/url">foo</a></p>\n'

    def test_case_insensitive_labels(self) -> None:
        assert cm("[ẞ]\n\n[SS]: /url") == '<p><a href="/url">ẞ</a></p>\n'

    def test_first_definition_wins(self) -> None:
        assert cm("[foo]\n\n[foo]: /first\n[foo]: /second") == (
            '<p><a href="/first">foo</a></p>\n'
        )

    def test_definition_after_use(self) -> None:
        assert cm("[foo]\n\n> [foo]: /url") == '<p><a href="/url">foo</a></p>\n<blockquote>\n</blockquote>\n'

    def test_definition_cannot_interrupt_paragraph(self) -> None:
        assert cm("Foo\n[bar]: /baz\n\n[bar]") == "<p>Foo\n[bar]: /baz</p>\n<p>[bar]</p>\n"

    def test_title_on_next_line(self) -> None:
        doc = parse('[foo]: /url\n"title"', config=COMMONMARK)
        assert doc.link_references["foo"].title == "title"
        assert doc.children == ()

    def test_invalid_title_keeps_definition(self) -> None:
        assert cm('[foo]: /url\n"title" ok') == '<p>&quot;title&quot; ok</p>\n'

    def test_label_too_long(self) -> None:
        label = "a" * 1000
        assert cm(f"[{label}]: /url\n\n[{label}]").count("<a ") == 0

    def test_image_reference(self) -> None:
        assert cm('![foo *bar*]\n\n[foo *bar*]: train.jpg "train & tracks"') == (
            '<p><img src="train.jpg" alt="foo bar" title="train &amp; tracks" /></p>\n'
        )


class TestAutolinksAndHtml:
    def test_uri_autolink(self) -> None:
        (link,) = inlines("<http://foo.bar.baz/test?q=hello&id=22&boolean>")
        assert isinstance(link, Autolink)
        assert link.kind == "uri"
        assert cm("<http://foo.bar/baz bim>") == "<p>&lt;http://foo.bar/baz bim&gt;</p>\n"

    def test_email_autolink(self) -> None:
        assert cm("<foo@bar.example.com>") == (
            '<p><a href="mailto:foo@bar.example.com">foo@bar.example.com</a></p>\n'
        )

    def test_autolink_backslash_is_literal(self) -> None:
        assert cm("<http://example.com/\\[\\>") == (
            '<p><a href="http://example.com/%5C%5B%5C">http://example.com/\\[\\</a></p>\n'
        )

    def test_raw_html(self) -> None:
        (_, html, _) = inlines('a <span class="x">b')
        assert isinstance(html, HtmlInline)
        assert html.html == '<span class="x">'

    def test_invalid_html_is_text(self) -> None:
        assert cm("<a h*#ref=\"hi\">") == "<p>&lt;a h*#ref=&quot;hi&quot;&gt;</p>\n"

    def test_html_comment(self) -> None:
        assert cm("foo <!-- this is a\ncomment - with hyphen -->") == (
            "<p>foo <!-- this is a\ncomment - with hyphen --></p>\n"
        )


class TestEscapesAndEntities:
    def test_backslash_escapes(self) -> None:
        assert cm("\\*not emphasized*") == "<p>*not emphasized*</p>\n"
        assert cm("\\\\*emphasis*") == "<p>\\<em>emphasis</em></p>\n"

    def test_backslash_before_other_characters(self) -> None:
        assert cm("\\→\\A\\a") == "<p>\\→\\A\\a</p>\n"

    def test_hard_break(self) -> None:
        assert cm("foo\\\nbar") == "<p>foo<br />\nbar</p>\n"
        assert cm("foo  \nbar") == "<p>foo<br />\nbar</p>\n"

    def test_trailing_spaces_at_end_are_dropped(self) -> None:
        assert cm("foo  ") == "<p>foo</p>\n"

    def test_entity_node(self) -> None:
        (entity,) = inlines("&copy;")
        assert isinstance(entity, Entity)
        assert entity.source == "&copy;"
        assert entity.content == "©"

    def test_unknown_entity(self) -> None:
        assert cm("&MadeUpEntity;") == "<p>&amp;MadeUpEntity;</p>\n"

    def test_entities_not_recognised_in_code(self) -> None:
        (code,) = inlines("`&ouml;`")
        assert isinstance(code, CodeSpan)
        assert code.code == "&ouml;"


class TestHelpers:
    @pytest.mark.parametrize(
        ("label", "expected"),
        [("Foo", "foo"), ("  a \n b  ", "a b"), ("ẞ", "ss"), ("A\tB", "a b")],
    )
    def test_normalize_label(self, label: str, expected: str) -> None:
        assert normalize_label(label) == expected

    def test_parse_link_destination(self) -> None:
        assert parse_link_destination("<a b>", 0) == ("a b", 5)
        assert parse_link_destination("a(b)c d", 0) == ("a(b)c", 5)
        assert parse_link_destination("<a\nb>", 0) is None
        assert parse_link_destination("(a", 0) is None

    def test_parse_link_title(self) -> None:
        assert parse_link_title('"a \\" b"', 0) == ('a " b', 8)
        assert parse_link_title("(a (b)", 0) is None

    def test_plain_text(self) -> None:
        (para,) = parse("*a* `b` [c](d) ![e](f)", config=COMMONMARK).children
        assert plain_text(para.children) == "a b c e"

    def test_image_alt_is_flattened(self) -> None:
        (image,) = inlines("![*a* `b` [c](d)](e)")
        assert image.alt == "a b c"
