"""Build a static site from a vault: scan, render every note, clean up."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, cast

from .config import Config
from .content import NoteProperties, SourceItem, SourceKind
from .content.parsers import Extractor
from .media import Resizer, build_resizer
from .render import NoteRenderer
from .site import Site, SiteStats
from .templates import PageTemplate
from .vault import ScanStats, Vault

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildReport:
    """Counters returned by each stage of a build."""

    vault: ScanStats
    site: SiteStats
    pages: int
    duration_seconds: float


class SiteBuilder:
    """Coordinate one build run from ``config.source_dir`` to ``config.output_dir``."""

    def __init__(
        self,
        config: Config,
        resizer: Resizer | None = None,
        extractors: Mapping[SourceKind, Extractor] | None = None,
    ) -> None:
        self._config = config
        self._resizer = resizer or build_resizer(config.responsive)
        self._extractors = extractors

    def run(self) -> BuildReport:
        config = self._config
        if not config.source_dir.is_dir():
            raise FileNotFoundError(f"Vault directory not found: {config.source_dir}")

        start = time.perf_counter()
        site = Site(config.output_dir)
        cache_path = site.prepare(config.cache_url)
        vault = Vault.load(
            config.source_dir,
            cache_path,
            base=config.base_url,
            extractors=self._extractors,
        )

        renderer = NoteRenderer(vault, site, self._resizer, config.responsive)
        template = PageTemplate(config)
        current_year = datetime.now().year
        notes = vault.notes()
        for note in notes:
            self._make_page(site, renderer, template, note, current_year)

        site_stats = site.cleanup()
        return BuildReport(
            vault=vault.stats,
            site=site_stats,
            pages=len(notes),
            duration_seconds=time.perf_counter() - start,
        )

    def _make_page(
        self,
        site: Site,
        renderer: NoteRenderer,
        template: PageTemplate,
        note: SourceItem,
        current_year: int,
    ) -> None:
        properties = cast(NoteProperties, note.properties)
        url = note.url()
        html = template.render(
            body=renderer.render(note),
            url=url,
            title=note.title(),
            article=not properties.hide,
            date=properties.date,
            tags=properties.tags,
            current_year=current_year,
        )
        site.write_data(url, html)
