from __future__ import annotations

from barberbot.application.ports.style_catalog import StyleCatalogPort
from barberbot.domain.entities.style_catalog import StyleCatalogEntry
from barberbot.infrastructure.knowledge.style_catalog_data import STYLE_CATALOG


class StyleCatalogStore(StyleCatalogPort):
    def __init__(self, catalog: dict[str, StyleCatalogEntry] | None = None) -> None:
        self._catalog = catalog or STYLE_CATALOG

    def match_style(self, text: str) -> StyleCatalogEntry | None:
        normalized = " ".join(text.lower().split())
        for key, entry in self._catalog.items():
            if key in normalized:
                return entry
        return None
