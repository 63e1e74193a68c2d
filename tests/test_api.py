"""Tests for the high-level marmota API."""

import pytest


class TestParseFunction:
    """Tests for the parse() function."""

    def test_parse_heading(self) -> None:
        """Test parsing a heading."""
        from marmota import Heading, parse

        doc = parse("# Hello World")
        assert len(doc.children) == 1
        assert isinstance(doc.children[0], Heading)
        assert doc.children[0].level == 1

    def test_parse_paragraph(self) -> None:
        """Test parsing a paragraph."""
        from marmota import Paragraph, parse

        doc = parse("Hello World")
        assert len(doc.children) == 1
        assert isinstance(doc.children[0], Paragraph)

    def test_parse_with_source_file(self) -> None:
        """Test parsing with source file context."""
        from marmota import parse

        doc = parse("# Test", source_file="test.md")
        assert doc.location.source_file == "test.md"
        assert doc.children[0].location.source_file == "test.md"

    def test_parse_empty_document(self) -> None:
        from marmota import parse

        doc = parse("")
        assert doc.children == ()
        assert dict(doc.link_references) == {}

    def test_parse_collects_link_references(self) -> None:
        from marmota import LinkReference, parse

        doc = parse('[Foo Bar]: /url "title"\n\n[foo bar]')
        assert doc.link_references["foo bar"] == LinkReference(
            label="foo bar", url="/url", title="title"
        )

    def test_parse_with_config(self) -> None:
        from marmota import ParseConfig, Table, parse

        source = "| a |\n| - |"
        assert isinstance(parse(source).children[0], Table)
        assert not isinstance(parse(source, config=ParseConfig.commonmark()).children[0], Table)

    def test_parse_rejects_non_str(self) -> None:
        from marmota import parse

        with pytest.raises(TypeError, match="must be str"):
            parse(b"# bytes")  # type: ignore[arg-type]


class TestRenderFunction:
    """Tests for the render() function."""

    def test_render_heading(self) -> None:
        from marmota import render

        assert render("# Hello World") == "<h1>Hello World</h1>\n"

    def test_render_emphasis(self) -> None:
        from marmota import render

        assert render("Hello *World*") == "<p>Hello <em>World</em></p>\n"

    def test_render_empty(self) -> None:
        from marmota import render

        assert render("") == ""
        assert render("\n\n   \n") == ""

    def test_render_defaults_to_gfm(self) -> None:
        from marmota import render

        assert render("~~gone~~") == "<p><del>gone</del></p>\n"

    def test_render_commonmark_config(self) -> None:
        from marmota import ParseConfig, render

        assert render("~~gone~~", config=ParseConfig.commonmark()) == "<p>~~gone~~</p>\n"

    def test_render_uses_context_config(self) -> None:
        from marmota import ParseConfig, parse_config_context, render

        with parse_config_context(ParseConfig.commonmark()):
            assert render("www.example.com") == "<p>www.example.com</p>\n"

    def test_render_rejects_non_str(self) -> None:
        from marmota import render

        with pytest.raises(TypeError):
            render(None)  # type: ignore[arg-type]

    def test_render_document(self) -> None:
        from marmota import parse, render_document

        doc = parse("<script>x</script>\n")
        assert render_document(doc) == "<script>x</script>\n"
        assert render_document(doc, tagfilter=True) == "&lt;script>x&lt;/script>\n"


class TestMarkdownClass:
    """Tests for the Markdown class."""

    def test_basic_usage(self) -> None:
        from marmota import Markdown

        md = Markdown()
        html = md("# Hello **World**")
        assert html == "<h1>Hello <strong>World</strong></h1>\n"

    def test_parse_method(self) -> None:
        from marmota import Document, Markdown

        md = Markdown()
        doc = md.parse("# Test", source_file="a.md")
        assert isinstance(doc, Document)
        assert doc.location.source_file == "a.md"

    def test_render_method(self) -> None:
        from marmota import Markdown, parse

        md = Markdown()
        doc = parse("# Test")
        assert md.render(doc) == "<h1>Test</h1>\n"

    def test_default_enables_all_extensions(self) -> None:
        from marmota import BUILTIN_PLUGINS, Markdown, ParseConfig

        md = Markdown()
        assert md.config == ParseConfig.gfm()
        assert set(md.plugins) == set(BUILTIN_PLUGINS)

    def test_empty_plugins_is_commonmark(self) -> None:
        from marmota import Markdown, ParseConfig

        md = Markdown(plugins=[])
        assert md.config == ParseConfig.commonmark()
        assert md("www.example.com") == "<p>www.example.com</p>\n"

    def test_single_plugin(self) -> None:
        from marmota import Markdown

        md = Markdown(plugins=["strikethrough"])
        assert md("~~a~~ www.example.com") == "<p><del>a</del> www.example.com</p>\n"

    def test_all_plugin(self) -> None:
        from marmota import BUILTIN_PLUGINS, Markdown

        md = Markdown(plugins=["all"])
        assert md.plugins == tuple(BUILTIN_PLUGINS)
        assert md.config.tagfilter_enabled

    def test_unknown_plugin(self) -> None:
        from marmota import Markdown, PluginError

        with pytest.raises(PluginError) as exc_info:
            Markdown(plugins=["footnotes"])
        assert exc_info.value.plugin_name == "footnotes"

    def test_tagfilter_follows_plugins(self) -> None:
        from marmota import Markdown

        source = "<title>x</title>\n"
        assert Markdown(plugins=["tagfilter"])(source) == "&lt;title>x&lt;/title>\n"
        assert Markdown(plugins=["table"])(source) == "<title>x</title>\n"

    def test_parse_many_keeps_order(self) -> None:
        from marmota import Heading, Markdown

        md = Markdown()
        sources = [f"{'#' * (i % 6 + 1)} Doc {i}" for i in range(20)]
        docs = md.parse_many(sources, max_workers=4)
        assert len(docs) == 20
        for i, doc in enumerate(docs):
            heading = doc.children[0]
            assert isinstance(heading, Heading)
            assert heading.level == i % 6 + 1

    def test_parse_many_uses_instance_config(self) -> None:
        from marmota import Markdown, Paragraph

        md = Markdown(plugins=[])
        docs = md.parse_many(["| a |\n| - |"] * 3)
        assert all(isinstance(doc.children[0], Paragraph) for doc in docs)

    def test_parse_many_empty(self) -> None:
        from marmota import Markdown

        assert Markdown().parse_many([]) == []


class TestPublicExports:
    def test_all_names_resolve(self) -> None:
        import marmota

        for name in marmota.__all__:
            assert hasattr(marmota, name), name

    def test_version(self) -> None:
        import marmota

        assert marmota.__version__ == "0.1.0"
