"""Parse and render Markdown: CommonMark core, GFM extensions on by default."""

from marmota import Markdown, ParseConfig, parse, render

doc = parse("# Hello **World**")
print(doc.children[0])

print(render("~~old~~ new, see www.example.com"))
print(render("~~old~~ new", config=ParseConfig.commonmark()))

md = Markdown(plugins=["table", "task_lists"])
print(md("| a | b |\n| - | - |\n| 1 | 2 |\n\n- [x] done\n- [ ] todo"))
