"""Star Wars: Unlimited game plugin."""

from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from cards.cache import CardSource
from cards.models import capitalize_first, render_number, strip_html
from deck.models import Hint, Section, SetNumberHint
from plugins.base import GamePlugin

from .annotation import build_swu_comment
from .cards import SET_NAMES, SwuCard, normalize_swu_card
from .deck_formats import (
    infer_swu_code,
    looks_like_swu_code,
    numeric_code_key,
    split_swu_name,
    swu_code_keys,
)

IDENTITY_TYPES = {"leader", "base"}
MAIN_DECK_SECTIONS = {Section.DECK, Section.OTHER}


class SwuGame(GamePlugin):
    name = "swu"
    title = "Star Wars: Unlimited"
    data_label = "the SWU card database"
    example_code = "SOR-001"
    single_card_sections = (Section.LEADER, Section.BASE)

    def card_sources(self, settings, cache_dir: Path) -> List[CardSource]:
        base_url = settings.swu_api_url.rstrip("/")
        return [
            CardSource(
                name=f"swu-{set_code.lower()}",
                url=f"{base_url}/cards/{set_code.lower()}?format=json",
                cache_path=Path(cache_dir) / f"swu-{set_code.lower()}.json",
            )
            for set_code in settings.swu_sets
        ]

    def normalize_card(self, raw: Mapping[str, Any]) -> Optional[SwuCard]:
        return normalize_swu_card(raw)

    def looks_like_code(self, token: str) -> bool:
        return looks_like_swu_code(token)

    def infer_code(self, name: str) -> Optional[str]:
        return infer_swu_code(name)

    def split_name_hint(self, name: str) -> Tuple[str, Optional[Hint]]:
        return split_swu_name(name)

    def code_keys(self, card: SwuCard) -> Iterable[Tuple[str, bool]]:
        return [
            (card.code, False),
            (numeric_code_key(str(card.number)), True),
        ]

    def code_lookup_keys(self, code: str, default_face: str) -> List[str]:
        return swu_code_keys(code)

    def name_keys(self, card: SwuCard) -> Iterable[str]:
        keys = [card.code, card.full_name, card.name]
        if card.name and card.title:
            keys.extend(
                [
                    f"{card.name}, {card.title}",
                    f"{card.name} — {card.title}",
                    f"{card.name}: {card.title}",
                    f"{card.name} ({card.title})",
                ]
            )
        return keys

    def filter_by_hint(
        self, candidates: Sequence[SwuCard], hint: Hint
    ) -> List[SwuCard]:
        if not isinstance(hint, SetNumberHint):
            return []

        filtered = list(candidates)
        if hint.set_code:
            filtered = [card for card in filtered if card.set_code == hint.set_code]
        if hint.number is not None:
            filtered = [card for card in filtered if card.number == hint.number]
        return filtered

    def build_card_comment(
        self, card: SwuCard, index, *, core_status: bool = False
    ) -> str:
        return build_swu_comment(card)

    def card_type(self, card: SwuCard) -> str:
        return card.type or "unknown"

    def card_identity(self, card: SwuCard) -> List[str]:
        return list(card.aspects)

    def counts_toward_deck(self, card: SwuCard, entry) -> bool:
        """Leaders, bases and sideboard cards are outside the main deck count."""
        return entry.section in MAIN_DECK_SECTIONS and card.type not in IDENTITY_TYPES

    def search_text(self, card: SwuCard, scope: str) -> str:
        parts = []
        if scope in ("name", "all"):
            parts.extend([card.full_name, card.name, card.title, card.code])
        if scope in ("text", "all"):
            parts.extend([strip_html(card.text_front), strip_html(card.text_back)])
        if scope in ("traits", "all"):
            parts.extend(card.traits)
        return " ".join(part for part in parts if part)

    def card_pack(self, card: SwuCard) -> Tuple[str, str]:
        return card.set_code, SET_NAMES.get(card.set_code, "")

    def card_position(self, card: SwuCard) -> Optional[int]:
        return card.number

    def format_search_line(self, card: SwuCard) -> str:
        """Example: "SOR-150 Takedown — Event — Vigilance — Cost 4 — Common"."""
        meta = [
            capitalize_first(card.type),
            "/".join(capitalize_first(aspect) for aspect in card.aspects),
            capitalize_first(card.arena),
        ]
        if card.cost is not None:
            meta.append(f"Cost {render_number(card.cost)}")
        meta.append(card.rarity)
        return " — ".join([f"{card.code} {card.display_name}", *filter(None, meta)])
