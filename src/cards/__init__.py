"""Card data: snapshot loading, lookup index and entry resolution."""

from .cache import CardSource, load_card_payload, load_override_cards
from .index import AMBIGUOUS, CardIndex, build_card_index
from .models import CardImages
from .resolver import CardResolver, Resolution

__all__ = [
    "AMBIGUOUS",
    "CardImages",
    "CardIndex",
    "CardResolver",
    "CardSource",
    "Resolution",
    "build_card_index",
    "load_card_payload",
    "load_override_cards",
]
