from __future__ import annotations

from abc import ABC, abstractmethod

from barberbot.domain.entities.style_catalog import StyleCatalogEntry


class StyleCatalogPort(ABC):
    @abstractmethod
    def match_style(self, text: str) -> StyleCatalogEntry | None:
        """Return the first entry whose key appears in text (case-insensitive)."""
        raise NotImplementedError
