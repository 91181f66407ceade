"""Deck composition analysis.

Summarizes a resolved deck: card totals, how many cards count against the
deck size limit, how many are skipped for proxies, and breakdowns by card
type, faction/aspect and cost.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from core.logging import get_logger

from .deck import ResolvedDeck, should_skip_proxy

logger = get_logger(__name__)

BAR_WIDTH = 30
NO_COST = "-"


@dataclass
class DeckReport:
    """Totals and breakdowns for one resolved deck."""

    game: str
    total_cards: int = 0
    unique_cards: int = 0
    deck_limit_cards: int = 0
    skipped_proxy_cards: int = 0
    by_type: Dict[str, int] = field(default_factory=dict)
    by_identity: Dict[str, int] = field(default_factory=dict)
    cost_curve: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "game": self.game,
            "totalCards": self.total_cards,
            "uniqueCards": self.unique_cards,
            "deckLimitCards": self.deck_limit_cards,
            "skippedProxyCards": self.skipped_proxy_cards,
            "byType": dict(self.by_type),
            "byIdentity": dict(self.by_identity),
            "costCurve": dict(self.cost_curve),
        }


def _cost_label(cost: Any) -> str:
    if cost is None or cost == "":
        return NO_COST
    if isinstance(cost, float) and cost.is_integer():
        cost = int(cost)
    return str(cost)


def _cost_sort_key(label: str) -> Tuple[int, float, str]:
    """Numeric costs first in numeric order, then everything else by label."""
    try:
        return (0, float(label), label)
    except ValueError:
        return (1, 0.0, label)


def _sorted_counts(counter: Counter) -> Dict[str, int]:
    return dict(sorted(counter.items(), key=lambda item: (-item[1], item[0])))


def analyze_deck(deck: ResolvedDeck, game) -> DeckReport:
    """Build a DeckReport from resolved cards.

    Cards marked [ignoreForDeckLimit] or [permanent], and cards the game says
    sit outside the player deck (heroes, leaders, bases), do not count
    against the deck limit.
    """
    report = DeckReport(game=game.name)
    by_type: Counter = Counter()
    by_identity: Counter = Counter()
    cost_curve: Counter = Counter()
    codes = set()

    for item in deck.cards:
        card, entry, count = item.card, item.entry, item.count
        codes.add(card.code)
        report.total_cards += count

        if should_skip_proxy(entry):
            report.skipped_proxy_cards += count

        annotations = entry.annotations
        if (
            not annotations.ignore_deck_limit
            and not annotations.permanent
            and game.counts_toward_deck(card, entry)
        ):
            report.deck_limit_cards += count

        by_type[game.card_type(card)] += count
        for identity in game.card_identity(card) or ["none"]:
            by_identity[identity] += count
        cost_curve[_cost_label(game.card_cost(card))] += count

    report.unique_cards = len(codes)
    report.by_type = _sorted_counts(by_type)
    report.by_identity = _sorted_counts(by_identity)
    report.cost_curve = {
        label: cost_curve[label] for label in sorted(cost_curve, key=_cost_sort_key)
    }

    logger.debug(
        "Analyzed {} cards ({} unique) for {}",
        report.total_cards,
        report.unique_cards,
        game.name,
    )
    return report


def render_bar(value: int, maximum: int, width: int = BAR_WIDTH) -> str:
    if maximum <= 0 or value <= 0:
        return ""
    return "#" * max(1, round(value * width / maximum))


def _format_breakdown(title: str, counts: Dict[str, int]) -> List[str]:
    lines = [f"{title}:"]
    if not counts:
        lines.append("  (none)")
        return lines

    label_width = max(len(label) for label in counts)
    count_width = max(len(str(value)) for value in counts.values())
    maximum = max(counts.values())
    for label, value in counts.items():
        bar = render_bar(value, maximum)
        row = f"  {label.ljust(label_width)}  {str(value).rjust(count_width)}  {bar}"
        lines.append(row.rstrip())
    return lines


def format_report(report: DeckReport, title: str = "") -> str:
    """Human-readable report with ASCII bar charts."""
    lines = []
    if title:
        lines.extend([title, "=" * len(title)])
    lines.extend(
        [
            f"Total cards:       {report.total_cards}",
            f"Unique cards:      {report.unique_cards}",
            f"Deck limit cards:  {report.deck_limit_cards}",
            f"Skipped (proxy):   {report.skipped_proxy_cards}",
            "",
        ]
    )
    lines.extend(_format_breakdown("By type", report.by_type))
    lines.append("")
    lines.extend(_format_breakdown("By faction/aspect", report.by_identity))
    lines.append("")
    lines.extend(_format_breakdown("Cost curve", report.cost_curve))
    return "\n".join(lines)
