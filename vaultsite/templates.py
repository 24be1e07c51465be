"""Jinja2 page template used to wrap rendered notes."""

from __future__ import annotations

from typing import Any

from jinja2 import BaseLoader, ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape
from markupsafe import Markup

from .config import Config

PAGE_TEMPLATE = "page.html"


class PageTemplate:
    """Render full HTML pages; ``templates_dir`` may override the bundled layout."""

    def __init__(self, config: Config) -> None:
        self._config = config
        loaders: list[BaseLoader] = []
        if config.templates_dir is not None:
            loaders.append(FileSystemLoader(str(config.templates_dir)))
        loaders.append(PackageLoader("vaultsite", "layouts"))
        self._environment = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(["html", "xml"]),
            keep_trailing_newline=True,
        )

    def render(self, *, body: str, **context: Any) -> str:
        template = self._environment.get_template(PAGE_TEMPLATE)
        return template.render(
            site_name=self._config.site_name,
            lang=self._config.language,
            base=self._config.base_url,
            body=Markup(body),
            **context,
        )
