"""Render note bodies to HTML, publishing the files they reference."""

from __future__ import annotations

import logging

from markdown_it.token import Token

from .config import ResponsiveConfig
from .content import ImageProperties, SourceItem, SourceKind, read_note
from .markdown import iter_inline_tokens, parse_markdown, render_tokens
from .media import Resizer, write_responsive_image
from .paths import local_target
from .site import Site
from .vault import Vault

logger = logging.getLogger(__name__)


class NoteRenderer:
    """Turn a note into HTML with vault links resolved to site URLs."""

    def __init__(
        self,
        vault: Vault,
        site: Site,
        resizer: Resizer,
        responsive: ResponsiveConfig | None = None,
    ) -> None:
        self._vault = vault
        self._site = site
        self._resizer = resizer
        self._responsive = responsive or ResponsiveConfig()

    def render(self, item: SourceItem) -> str:
        _, body = read_note(item.file_path)
        tokens = parse_markdown(body)
        for token in iter_inline_tokens(tokens):
            if token.type == "link_open":
                self._rewrite_link(token)
            elif token.type == "image":
                self._rewrite_image(token)
        return render_tokens(tokens)

    def _rewrite_link(self, token: Token) -> None:
        href = str(token.attrGet("href") or "")
        target = self._resolve(href)
        if target is None:
            return
        if target.kind is not SourceKind.NOTE:
            self._publish(target)
        _, _, fragment = href.partition("#")
        url = target.url()
        token.attrSet("href", f"{url}#{fragment}" if fragment else url)

    def _rewrite_image(self, token: Token) -> None:
        target = self._resolve(str(token.attrGet("src") or ""))
        if target is None:
            return
        token.attrSet("src", target.url())
        srcset = self._publish(target)
        if srcset:
            token.attrSet("srcset", srcset)
            token.attrSet("sizes", "auto")
            token.attrSet("loading", "lazy")
        properties = target.properties
        if isinstance(properties, ImageProperties) and properties.width and properties.height:
            token.attrSet("width", str(properties.width))
            token.attrSet("height", str(properties.height))
            token.attrSet("style", f"--aspect-ratio: {properties.width / properties.height:.3f}")

    def _resolve(self, url: str) -> SourceItem | None:
        target = local_target(url)
        if target is None:
            return None
        item = self._vault.get(target)
        if item is None:
            logger.debug("Unresolved local link %s", target)
        return item

    def _publish(self, item: SourceItem) -> str | None:
        """Copy a referenced file into the site; images also get their variants."""
        properties = item.properties
        if isinstance(properties, ImageProperties) and properties.width:
            return write_responsive_image(
                self._site,
                item.url(),
                item.file_path,
                item.mtime,
                properties.width,
                self._resizer,
                floor=self._responsive.floor,
                ratio=self._responsive.ratio,
            )
        self._site.write_file(item.url(), item.file_path, item.mtime)
        return None
