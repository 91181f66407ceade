"""Star Wars: Unlimited Plugin

Deck parsing, swu-db card data and annotations for Star Wars: Unlimited.
"""

from typing import Any, Dict

from .game import SwuGame

# Plugin metadata
PLUGIN: Dict[str, Any] = {
    "name": "swu",
    "version": "1.0.0",
    "description": "Star Wars: Unlimited deck lists resolved against swu-db",
    "games": ["swu", "star-wars-unlimited"],
    "features": ["deck_parsing", "card_data", "annotations", "deck_sections"],
}

GAME = SwuGame()
