"""One-line Marvel Champions card summaries for "//? " annotations.

Example:
    [Core] Ally — Justice. Cost 3. THW 2, ATK 1, HP 3. S.H.I.E.L.D. Maria Hill ...
"""

from typing import Optional, Set

from cards.index import AMBIGUOUS
from cards.models import capitalize_first, render_number, strip_html

from .cards import MarvelCard

CORE_PACK_CODE = "core"
MAX_DUPLICATE_HOPS = 10


def canonical_code(card: MarvelCard, index=None) -> str:
    """Follow duplicate_of_code links to the original printing's code.

    Stops after MAX_DUPLICATE_HOPS, on a cycle, or at a dangling link.
    """
    if not card.code:
        return ""
    if index is None:
        return card.code

    current = card
    visited: Set[str] = set()
    for _ in range(MAX_DUPLICATE_HOPS):
        if not current.code or current.code in visited:
            break
        visited.add(current.code)

        if not current.duplicate_of_code:
            return current.code
        target = index.lookup_code(current.duplicate_of_code)
        if target is None or target is AMBIGUOUS:
            return current.code
        current = target

    return card.code


def core_set_codes(index) -> Set[str]:
    return {card.code for card in index.cards if card.pack_code == CORE_PACK_CODE}


def is_in_core_set(
    card: MarvelCard, index, core_codes: Optional[Set[str]] = None
) -> bool:
    """True when the card, or the printing it duplicates, is in the Core Set."""
    codes = core_codes if core_codes is not None else core_set_codes(index)
    return canonical_code(card, index) in codes


def format_stats(card: MarvelCard) -> str:
    stats = []
    for label, attr in (
        ("THW", "thwart"),
        ("ATK", "attack"),
        ("DEF", "defense"),
        ("REC", "recover"),
        ("HP", "health"),
    ):
        if getattr(card, f"{attr}_star"):
            stats.append(f"{label} *")
            continue
        value = getattr(card, attr)
        if value is not None:
            stats.append(f"{label} {render_number(value)}")

    if card.hand_size is not None:
        stats.append(f"HAND {render_number(card.hand_size)}")
    return ", ".join(stats)


def build_marvel_comment(
    card: MarvelCard, core_status: Optional[bool] = None
) -> str:
    """Summarize a card: core status, type/faction, cost, stats, traits, text.

    Args:
        card: Card to describe
        core_status: True/False to prefix [Core]/[Not Core], None to omit
    """
    parts = []

    if core_status is not None:
        parts.append("[Core]" if core_status else "[Not Core]")

    card_type = capitalize_first(card.type_name or card.type_code)
    faction = card.faction_name or card.faction_code
    if card_type and faction:
        parts.append(f"{card_type} — {faction}.")
    elif card_type or faction:
        parts.append(f"{card_type or faction}.")

    if card.cost is not None:
        parts.append(f"Cost {render_number(card.cost)}.")
    elif card.cost_text:
        parts.append(f"Cost {card.cost_text}.")

    stats = format_stats(card)
    if stats:
        parts.append(f"{stats}.")

    if card.traits:
        parts.append(", ".join(card.traits) + ".")

    text = strip_html(card.text)
    if text:
        parts.append(text)

    return " ".join(" ".join(parts).split())
