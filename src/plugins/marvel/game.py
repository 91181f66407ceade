"""Marvel Champions game plugin."""

from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from cards.cache import CardSource
from cards.index import AMBIGUOUS
from cards.models import render_number, strip_html
from deck.models import Hint, PackHint
from deck.names import normalize_card_key
from plugins.base import GamePlugin

from .annotation import (
    build_marvel_comment,
    canonical_code,
    core_set_codes,
    is_in_core_set,
)
from .cards import MARVELCDB_BASE_URL, MarvelCard, normalize_marvel_card
from .deck_formats import looks_like_marvel_code, marvel_code_keys, split_marvel_name

PLAYER_DECK_TYPES = {
    "ally",
    "event",
    "upgrade",
    "support",
    "resource",
    "player_side_scheme",
}


class MarvelGame(GamePlugin):
    name = "marvel"
    title = "Marvel Champions"
    data_label = "MarvelCDB data"
    example_code = "01001a"

    def __init__(self, base_url: str = MARVELCDB_BASE_URL):
        self.base_url = base_url
        self._core_index = None
        self._core_codes = set()

    def card_sources(self, settings, cache_dir: Path) -> List[CardSource]:
        self.base_url = settings.marvel_base_url
        return [
            CardSource(
                name="marvelcdb-cards",
                url=settings.marvel_base_url.rstrip("/") + "/api/public/cards/",
                cache_path=Path(cache_dir) / "marvelcdb-cards.json",
            )
        ]

    def normalize_card(self, raw: Mapping[str, Any]) -> Optional[MarvelCard]:
        return normalize_marvel_card(raw, self.base_url)

    def looks_like_code(self, token: str) -> bool:
        return looks_like_marvel_code(token)

    def split_name_hint(self, name: str) -> Tuple[str, Optional[Hint]]:
        return split_marvel_name(name)

    def code_keys(self, card: MarvelCard) -> Iterable[Tuple[str, bool]]:
        return [(card.code, False)]

    def code_lookup_keys(self, code: str, default_face: str) -> List[str]:
        return marvel_code_keys(code, default_face)

    def name_keys(self, card: MarvelCard) -> Iterable[str]:
        keys = [card.code, card.name]
        if card.subname:
            keys.extend(
                [
                    f"{card.name}: {card.subname}",
                    f"{card.name} — {card.subname}",
                    f"{card.name} ({card.subname})",
                ]
            )
        return keys

    def canonical_card(self, card: MarvelCard, index) -> MarvelCard:
        """Reprints are indexed under the original printing."""
        if not card.duplicate_of_code:
            return card
        target = index.lookup_code(canonical_code(card, index))
        if target is None or target is AMBIGUOUS:
            return card
        return target

    def filter_by_hint(
        self, candidates: Sequence[MarvelCard], hint: Hint
    ) -> List[MarvelCard]:
        if not isinstance(hint, PackHint):
            return []

        filtered = list(candidates)
        if hint.pack_code:
            filtered = [card for card in filtered if card.pack_code == hint.pack_code]
        elif hint.pack_name:
            wanted = normalize_card_key(hint.pack_name)
            filtered = [
                card for card in filtered if normalize_card_key(card.pack_name) == wanted
            ]

        if hint.position is not None:
            filtered = [card for card in filtered if card.position == hint.position]
        return filtered

    def build_card_comment(
        self, card: MarvelCard, index, *, core_status: bool = False
    ) -> str:
        in_core = None
        if core_status:
            if self._core_index is not index:
                self._core_index = index
                self._core_codes = core_set_codes(index)
            in_core = is_in_core_set(card, index, self._core_codes)
        return build_marvel_comment(card, in_core)

    def card_type(self, card: MarvelCard) -> str:
        return card.type_code or "unknown"

    def card_identity(self, card: MarvelCard) -> List[str]:
        return [card.faction_code] if card.faction_code else []

    def counts_toward_deck(self, card: MarvelCard, entry) -> bool:
        """Hero and encounter cards are not part of the player deck size."""
        return card.type_code in PLAYER_DECK_TYPES

    def search_text(self, card: MarvelCard, scope: str) -> str:
        parts = []
        if scope in ("name", "all"):
            parts.extend([card.name, card.real_name, card.subname])
        if scope in ("text", "all"):
            parts.append(strip_html(card.text))
        if scope in ("traits", "all"):
            parts.extend(card.traits)
        return " ".join(part for part in parts if part)

    def card_pack(self, card: MarvelCard) -> Tuple[str, str]:
        return card.pack_code, card.pack_name

    def card_position(self, card: MarvelCard) -> Optional[int]:
        return card.position

    def pack_quantity(self, card: MarvelCard) -> int:
        return card.quantity

    def format_search_line(self, card: MarvelCard) -> str:
        """Example: "01003 Backflip — Event (Justice) — Cost 0 — Core Set #3"."""
        card_type = card.type_name or card.type_code
        faction = card.faction_name or card.faction_code
        meta = []
        if card_type and faction:
            meta.append(f"{card_type} ({faction})")
        elif card_type or faction:
            meta.append(card_type or faction)
        if card.cost is not None:
            meta.append(f"Cost {render_number(card.cost)}")
        position = f"#{card.position}" if card.position is not None else ""
        pack = " ".join(part for part in (card.set_label, position) if part)
        if pack:
            meta.append(pack)
        return " — ".join([f"{card.code} {card.display_name}", *meta])
