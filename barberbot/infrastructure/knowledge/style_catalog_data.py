from __future__ import annotations

from barberbot.domain.entities.style_catalog import StyleCatalogEntry

# Insertion order is the match priority.
STYLE_CATALOG: dict[str, StyleCatalogEntry] = {
    "cabelo curto": StyleCatalogEntry("cabelo curto", "Corte Militar", "Chocolate", 50),
    "cabelo longo": StyleCatalogEntry("cabelo longo", "Corte Surfer", "Chocolate", 60),
    "barba cheia": StyleCatalogEntry("barba cheia", "Barba Lenhador", "Chocolate", 40),
    "barba rala": StyleCatalogEntry("barba rala", "Barba Desenhada", "Chocolate", 35),
    "degrade": StyleCatalogEntry("degrade", "Degradê Navalhado", "Chocolate", 55),
}
