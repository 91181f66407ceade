"""One-line Star Wars: Unlimited card summaries for "//? " annotations.

Example:
    [SOR-010] Leader — Aggression/Villainy — Ground. Cost 7. POW 5, HP 8. ...
"""

import re

from cards.models import capitalize_first, render_number, strip_html

from .cards import SwuCard


def format_rules_text(card: SwuCard) -> str:
    pieces = []
    front = strip_html(card.text_front)
    if front:
        pieces.append(front)
    back = strip_html(card.text_back)
    if back:
        pieces.append(f"Back: {back}")
    joined = " ".join(pieces)
    return re.sub(r"[.;]\s*Back:\s*", ". Back: ", joined).strip()


def build_swu_comment(card: SwuCard) -> str:
    """Summarize a card: code, type/aspects/arena, cost, stats, traits, text."""
    parts = [f"[{card.code}]"]

    header = [
        value
        for value in (
            capitalize_first(card.type),
            "/".join(capitalize_first(aspect) for aspect in card.aspects),
            capitalize_first(card.arena),
        )
        if value
    ]
    if header:
        parts.append(" — ".join(header) + ".")

    if card.cost is not None:
        parts.append(f"Cost {render_number(card.cost)}.")

    stats = []
    if card.power is not None:
        stats.append(f"POW {render_number(card.power)}")
    if card.hp is not None:
        stats.append(f"HP {render_number(card.hp)}")
    if stats:
        parts.append(", ".join(stats) + ".")

    if card.traits:
        parts.append(", ".join(card.traits) + ".")

    text = format_rules_text(card)
    if text:
        parts.append(text)

    return " ".join(" ".join(parts).split())
