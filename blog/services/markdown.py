from __future__ import annotations

import re
from typing import List, Tuple

from markdown_it import MarkdownIt
from mdit_py_plugins.tasklists import tasklists_plugin

from blog.models.post import Heading


TOC_LEVELS = range(2, 6)

_markdown = MarkdownIt("commonmark", {"html": True}).enable("table").enable("strikethrough").enable("fence")
_markdown.use(tasklists_plugin)

_anchor_pattern = re.compile(r"[^a-zA-Z0-9]+")


def heading_anchor(text: str) -> str:
    """Turn heading text into the id the client links to, e.g. "Level.generate()" -> "level-generate-"."""
    return _anchor_pattern.sub("-", text.lower())


def render(body: str) -> Tuple[str, Tuple[Heading, ...]]:
    """Render markdown to HTML and collect the table of contents.

    Every heading gets an ``id`` attribute so the contents list can link to it;
    only levels 2-5 make it into the contents.
    """
    tokens = _markdown.parse(body)
    toc: List[Heading] = []
    for index, token in enumerate(tokens):
        if token.type != "heading_open":
            continue
        inline = tokens[index + 1]
        text = "".join(child.content for child in inline.children or [] if child.type in ("text", "code_inline"))
        anchor = heading_anchor(text)
        token.attrSet("id", anchor)
        level = int(token.tag[1:])
        if level in TOC_LEVELS:
            toc.append(Heading(level=level, text=text, anchor=anchor))
    html = _markdown.renderer.render(tokens, _markdown.options, {})
    return html, tuple(toc)
