"""Thread safety tests.

Parsers are per-call, configuration lives in a ContextVar and the
renderer keeps no state between calls. These tests verify that:
1. Markdown instances with different extensions work concurrently
2. One HtmlRenderer can be shared between threads
3. parse_many returns the same trees as sequential parsing

These tests use real threading to catch actual concurrency bugs.
"""

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed

from marmota import BUILTIN_PLUGINS, Markdown, ParseConfig, parse, render
from marmota.config import get_parse_config, parse_config_context
from marmota.renderers.html import HtmlRenderer

SAMPLE = """\
# Title

| a | b |
| - | - |
| ~~x~~ | www.example.com |

- [x] done
- [ ] todo

<style>p{}</style>
"""


class TestConcurrentMarkdown:
    def test_instances_with_different_plugins(self) -> None:
        """Each thread must see only the extensions its instance enables."""
        expected = {name: Markdown(plugins=[name])(SAMPLE) for name in BUILTIN_PLUGINS}
        errors: list[str] = []
        barrier = threading.Barrier(len(BUILTIN_PLUGINS) * 3)

        def work(name: str) -> None:
            md = Markdown(plugins=[name])
            barrier.wait()
            for _ in range(20):
                html = md(SAMPLE)
                if html != expected[name]:
                    errors.append(f"{name}: unexpected output")
                    return

        threads = [
            threading.Thread(target=work, args=(name,))
            for name in BUILTIN_PLUGINS
            for _ in range(3)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10.0)

        assert not errors, f"Thread errors: {errors}"

    def test_extension_outputs_differ(self) -> None:
        outputs = {Markdown(plugins=[name])(SAMPLE) for name in BUILTIN_PLUGINS}
        assert len(outputs) == len(BUILTIN_PLUGINS)

    def test_gfm_and_commonmark_side_by_side(self) -> None:
        gfm = render(SAMPLE, config=ParseConfig.gfm())
        commonmark = render(SAMPLE, config=ParseConfig.commonmark())

        def run(config: ParseConfig) -> str:
            return render(SAMPLE, config=config)

        configs = [ParseConfig.gfm(), ParseConfig.commonmark()] * 10
        with ThreadPoolExecutor(max_workers=8) as executor:
            futures = {executor.submit(run, config): config for config in configs}
            for future in as_completed(futures):
                config = futures[future]
                assert future.result() == (gfm if config.tables_enabled else commonmark)


class TestSharedRenderer:
    def test_one_renderer_many_threads(self) -> None:
        renderer = HtmlRenderer(tagfilter=True)
        docs = [parse(f"# Doc {i}\n\n*{i}* `x`") for i in range(32)]
        expected = [renderer.render(doc) for doc in docs]

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(renderer.render, docs))

        assert results == expected


class TestParseMany:
    def test_matches_sequential_parsing(self) -> None:
        md = Markdown()
        sources = [f"{'#' * (i % 6 + 1)} heading {i}\n\n- item {i}" for i in range(40)]

        assert md.parse_many(sources, max_workers=4) == [md.parse(s) for s in sources]

    def test_config_does_not_leak_into_caller(self) -> None:
        before = get_parse_config()
        Markdown(plugins=["table"]).parse_many(["| a |\n| - |"] * 8, max_workers=4)
        assert get_parse_config() is before

    def test_context_config_per_thread(self) -> None:
        seen: list[bool] = []
        lock = threading.Lock()

        def work(enabled: bool) -> None:
            config = ParseConfig.gfm() if enabled else ParseConfig.commonmark()
            with parse_config_context(config):
                html = render("~~x~~", config=get_parse_config())
            with lock:
                seen.append(("<del>" in html) == enabled)

        threads = [threading.Thread(target=work, args=(i % 2 == 0,)) for i in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5.0)

        assert seen == [True] * 16
