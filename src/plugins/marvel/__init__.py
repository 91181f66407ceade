"""Marvel Champions Plugin

Deck parsing, MarvelCDB card data and annotations for Marvel Champions.
"""

from typing import Any, Dict

from .game import MarvelGame

# Plugin metadata
PLUGIN: Dict[str, Any] = {
    "name": "marvel",
    "version": "1.0.0",
    "description": "Marvel Champions deck lists resolved against MarvelCDB",
    "games": ["marvel", "marvel-champions", "mc"],
    "features": ["deck_parsing", "card_data", "annotations", "core_set_status"],
}

GAME = MarvelGame()
