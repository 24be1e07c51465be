"""Shared Markdown parsing and rendering helpers."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterator, cast

from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.deflist import deflist_plugin
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

from .paths import local_target

WIKILINK_RE = re.compile(r"(!?)\[\[([^\[\]|]+)(?:\|([^\[\]]*))?\]\]")
FENCE_RE = re.compile(r"^\s*(`{3,}|~{3,})")


@lru_cache(maxsize=1)
def _renderer() -> MarkdownIt:
    """Configure and cache a CommonMark-compliant renderer."""
    md = MarkdownIt("commonmark", {"html": True, "typographer": True})
    md.enable("table").enable("strikethrough")
    md.use(deflist_plugin)
    md.use(footnote_plugin)
    md.use(tasklists_plugin, label=True)
    return md


def expand_wikilinks(text: str) -> str:
    """Rewrite ``[[target|label]]`` and ``![[image]]`` into CommonMark links.

    Fenced code blocks are left untouched.
    """
    output: list[str] = []
    fence: str | None = None
    for line in text.splitlines(keepends=True):
        match = FENCE_RE.match(line)
        if fence is None and match:
            fence = match.group(1)[0]
        elif fence is not None and match and match.group(1)[0] == fence:
            fence = None
        elif fence is None:
            line = WIKILINK_RE.sub(_wikilink_replacement, line)
        output.append(line)
    return "".join(output)


def _wikilink_replacement(match: re.Match[str]) -> str:
    bang, target, label = match.groups()
    target = target.strip()
    label = (label or "").strip()
    if bang:
        return f"![{label}](<{target}>)"
    return f"[{label or target}](<{target}>)"


def parse_markdown(text: str) -> list[Token]:
    """Parse a note body, wiki-links included, into markdown-it tokens."""
    return _renderer().parse(expand_wikilinks(text))


def iter_inline_tokens(tokens: list[Token]) -> Iterator[Token]:
    for token in tokens:
        yield token
        if token.children:
            yield from iter_inline_tokens(token.children)


def find_local_links(text: str) -> list[str]:
    """Return the vault paths referenced by links and images, in document order."""
    links: list[str] = []
    for token in iter_inline_tokens(parse_markdown(text)):
        if token.type == "link_open":
            url = token.attrGet("href")
        elif token.type == "image":
            url = token.attrGet("src")
        else:
            continue
        target = local_target(str(url or ""))
        if target:
            links.append(target)
    return links


def render_tokens(tokens: list[Token]) -> str:
    md = _renderer()
    return cast(str, md.renderer.render(tokens, md.options, {}))
