from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StyleCatalogEntry:
    style_key: str
    suggestion: str
    barber: str
    price: int
