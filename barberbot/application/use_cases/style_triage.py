from __future__ import annotations

import logging

from barberbot.application.ports.style_catalog import StyleCatalogPort
from barberbot.application.utils import replies


class StyleTriageUseCase:
    def __init__(self, catalog: StyleCatalogPort) -> None:
        self._catalog = catalog
        self._logger = logging.getLogger(__name__)

    def execute(self, style_text: str, client_name: str) -> str:
        entry = self._catalog.match_style(style_text)
        if entry is None:
            self._logger.info("Style not recognised", extra={"reason": style_text})
            return replies.with_menu("Estilo não identificado. Descreva novamente (ex.: cabelo curto, barba cheia).")
        self._logger.info("Style suggested", extra={"reason": entry.style_key})
        return replies.style_suggestion(entry)
