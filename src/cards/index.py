"""Lookup structures over a loaded card list.

Two maps are built:
- by_code: exact code key -> card, or AMBIGUOUS when a short key (such as a
  bare SWU collector number) is shared by cards with different full codes
- by_name: normalized name key -> candidate cards in database order

Which keys a card contributes is decided by its game plugin.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from deck.names import normalize_card_key


class _Ambiguous:
    """Sentinel stored for a code key that maps to more than one card."""

    def __repr__(self) -> str:
        return "AMBIGUOUS"

    def __bool__(self) -> bool:
        return False


AMBIGUOUS = _Ambiguous()


@dataclass
class CardIndex:
    """Exact-code and name lookups for one game's cards."""

    by_code: Dict[str, Any] = field(default_factory=dict)
    by_name: Dict[str, List[Any]] = field(default_factory=dict)
    cards: List[Any] = field(default_factory=list)

    def lookup_code(self, key: str) -> Optional[Any]:
        """Card for a code key, AMBIGUOUS, or None when unknown."""
        return self.by_code.get(key)

    def candidates(self, name: str) -> List[Any]:
        """Cards whose name keys match name, in database order."""
        return list(self.by_name.get(normalize_card_key(name), ()))

    def __len__(self) -> int:
        return len(self.cards)


def _store_code(by_code: Dict[str, Any], key: str, card: Any, shared: bool) -> None:
    existing = by_code.get(key)
    if not shared or existing is None:
        by_code[key] = card
    elif existing is AMBIGUOUS:
        return
    elif existing.code != card.code:
        by_code[key] = AMBIGUOUS
    else:
        by_code[key] = card


def _store_name(by_name: Dict[str, List[Any]], key: str, card: Any) -> None:
    bucket = by_name.setdefault(key, [])
    for position, existing in enumerate(bucket):
        if existing.code == card.code:
            bucket[position] = card
            return
    bucket.append(card)


def build_card_index(cards: List[Any], game) -> CardIndex:
    """Build a CardIndex from normalized cards.

    Args:
        cards: Normalized cards in source order (overrides last)
        game: Game plugin that supplies code keys, name keys and the
            canonical printing for reprints

    Returns:
        CardIndex
    """
    index = CardIndex(cards=list(cards))

    for card in index.cards:
        for key, shared in game.code_keys(card):
            if key:
                _store_code(index.by_code, key, card, shared)

    for card in index.cards:
        canonical = game.canonical_card(card, index)
        for raw_key in game.name_keys(canonical):
            key = normalize_card_key(raw_key)
            if key:
                _store_name(index.by_name, key, canonical)

    return index


def dedupe_by_code(cards: List[Any]) -> List[Any]:
    """Keep the first card per code, preserving order."""
    seen = set()
    unique = []
    for card in cards:
        if card.code in seen:
            continue
        seen.add(card.code)
        unique.append(card)
    return unique
