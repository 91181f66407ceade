"""Card Search Service

Finds cards in a loaded card index by name, rules text or traits, narrowed
by type, faction/aspect, pack/set, cost and code. Reprints collapse onto the
printing the index uses for names, so each card is listed once.

Also groups cards by pack (Marvel) or set (SWU) so a whole pack can be
listed as deck list entries.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from cards.index import AMBIGUOUS
from core.logging import get_logger
from errors import ValidationError

logger = get_logger(__name__)

SEARCH_SCOPES = ("name", "text", "traits", "all")
SORT_MODES = ("cost", "name")
ANNOTATION_PREFIX = "//? "

_COST_FILTER = re.compile(r"^(\d+(?:\.\d+)?)([+-])?$")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_DIGITS = re.compile(r"(\d+)")


def normalize_for_search(text: Any) -> str:
    """Lower-case text with every run of other characters turned into one space.

    Examples:
        >>> normalize_for_search("S.H.I.E.L.D. Agent")
        's h i e l d agent'
    """
    if text is None:
        return ""
    return _NON_ALNUM.sub(" ", str(text).lower()).strip()


def natural_code_key(code: str) -> List[Any]:
    """Sort key that orders "SOR-9" before "SOR-10"."""
    return [int(part) if part.isdigit() else part for part in _DIGITS.split(code)]


@dataclass(frozen=True)
class CostFilter:
    """Exact cost, or a bound: "2" is eq, "2-" is lte, "2+" is gte."""

    op: str
    value: float

    def matches(self, cost: Any) -> bool:
        if cost is None or isinstance(cost, bool) or not isinstance(cost, (int, float)):
            return False
        if self.op == "lte":
            return cost <= self.value
        if self.op == "gte":
            return cost >= self.value
        return cost == self.value


def parse_cost_filter(raw: Optional[str]) -> Optional[CostFilter]:
    """Parse "2", "2-" or "2+"; None or blank means no filter.

    Raises:
        ValidationError: For anything else
    """
    if raw is None or not str(raw).strip():
        return None
    match = _COST_FILTER.match(str(raw).strip())
    if not match:
        raise ValidationError(f'--cost must be like "2", "2-", or "2+" (got "{raw}")')
    op = {"+": "gte", "-": "lte"}.get(match.group(2) or "", "eq")
    return CostFilter(op=op, value=float(match.group(1)))


@dataclass(frozen=True)
class SearchFilters:
    """Result filters; text filters are normalized substrings."""

    code: str = ""
    type: str = ""
    aspect: str = ""
    pack: str = ""
    cost: Optional[CostFilter] = None

    @classmethod
    def from_options(
        cls,
        *,
        code: Optional[str] = None,
        type: Optional[str] = None,
        aspect: Optional[str] = None,
        pack: Optional[str] = None,
        cost: Optional[str] = None,
    ) -> "SearchFilters":
        if code is not None and not code.strip():
            raise ValidationError("--code cannot be empty")
        return cls(
            code=(code or "").strip(),
            type=normalize_for_search(type),
            aspect=normalize_for_search(aspect),
            pack=normalize_for_search(pack),
            cost=parse_cost_filter(cost),
        )

    def matches(self, card: Any, game) -> bool:
        if self.code and card.code.lower() != self.code.lower():
            return False
        if self.cost is not None and not self.cost.matches(game.card_cost(card)):
            return False
        if self.type and self.type not in normalize_for_search(game.card_type(card)):
            return False
        if self.aspect and not any(
            self.aspect in normalize_for_search(identity)
            for identity in game.card_identity(card)
        ):
            return False
        if self.pack:
            pack_code, pack_name = game.card_pack(card)
            if self.pack not in normalize_for_search(
                pack_code
            ) and self.pack not in normalize_for_search(pack_name):
                return False
        return True


def canonical_cards(index, game) -> List[Any]:
    """Every card once, reprints replaced by the printing named in the index.

    The latest row per code wins, so override rows replace upstream ones.
    """
    seen = set()
    result = []
    for card in index.cards:
        current = index.lookup_code(card.code)
        if current is None or current is AMBIGUOUS:
            current = card
        canonical = game.canonical_card(current, index)
        if canonical.code in seen:
            continue
        seen.add(canonical.code)
        result.append(canonical)
    return result


def _sort_cost(game, card: Any) -> float:
    cost = game.card_cost(card)
    if isinstance(cost, (int, float)) and not isinstance(cost, bool):
        return float(cost)
    return float("inf")


def search_cards(
    index,
    game,
    query: str = "",
    *,
    scope: str = "all",
    filters: Optional[SearchFilters] = None,
    sort: str = "cost",
) -> List[Any]:
    """Find cards whose search text contains every query term.

    Args:
        index: Card index to search
        game: Game plugin for the index
        query: Space-separated terms; empty matches every filtered card
        scope: One of SEARCH_SCOPES
        filters: Optional result filters
        sort: "cost" (cards without a cost last) or "name"

    Returns:
        Matching cards, sorted by cost or name, then name, then code

    Raises:
        ValidationError: For an unknown scope or sort mode
    """
    if scope not in SEARCH_SCOPES:
        raise ValidationError(f"--in must be one of: {', '.join(SEARCH_SCOPES)}")
    if sort not in SORT_MODES:
        raise ValidationError(f"--sort must be one of: {', '.join(SORT_MODES)}")

    filters = filters or SearchFilters()
    terms = normalize_for_search(query).split()

    results = []
    for card in canonical_cards(index, game):
        if not filters.matches(card, game):
            continue
        if terms:
            haystack = normalize_for_search(game.search_text(card, scope))
            if not all(term in haystack for term in terms):
                continue
        results.append(card)

    def sort_key(card: Any) -> Tuple[Any, ...]:
        name_key = (normalize_for_search(card.name), natural_code_key(card.code))
        if sort == "cost":
            return (_sort_cost(game, card),) + name_key
        return name_key

    results.sort(key=sort_key)
    logger.debug("Search {!r} in {}: {} matches", query, scope, len(results))
    return results


def card_summary(card: Any, game, index) -> Dict[str, Any]:
    """JSON-friendly description of a search result."""
    pack_code, pack_name = game.card_pack(card)
    return {
        "code": card.code,
        "name": card.display_name,
        "type": game.card_type(card),
        "identity": game.card_identity(card),
        "cost": game.card_cost(card),
        "pack": pack_code,
        "packName": pack_name,
        "summary": game.build_card_comment(card, index),
    }


def format_search_annotations(cards: List[Any], game, index) -> str:
    """Render results as "1x Name [CODE]" lines, each with its "//? " summary."""
    lines = []
    for card in cards:
        lines.append(f"1x {card.display_name} [{card.code}]")
        lines.append(ANNOTATION_PREFIX + game.build_card_comment(card, index))
    return "\n".join(lines)


@dataclass
class Pack:
    """Cards printed in one pack (Marvel) or set (SWU)."""

    code: str
    name: str = ""
    cards: List[Any] = field(default_factory=list)

    @property
    def label(self) -> str:
        return f"{self.code} — {self.name or '(unknown name)'}"


def build_pack_index(index, game) -> Dict[str, Pack]:
    """Group the index's cards by pack code, in database order."""
    packs: Dict[str, Pack] = {}
    seen = set()
    for card in index.cards:
        if card.code in seen:
            continue
        seen.add(card.code)
        current = index.lookup_code(card.code)
        if current is None or current is AMBIGUOUS:
            current = card

        code, name = game.card_pack(current)
        if not code:
            continue
        pack = packs.setdefault(code, Pack(code=code, name=name))
        if not pack.name and name:
            pack.name = name
        pack.cards.append(current)
    return packs


def _similarity(haystack: str, needle: str) -> int:
    if haystack == needle:
        return 1000
    if haystack.startswith(needle):
        return 200
    if needle in haystack:
        return 100
    return 10 * sum(1 for term in needle.split() if term in haystack)


def resolve_pack(query: str, packs: Dict[str, Pack]) -> Pack:
    """Find a pack by code, then exact name, then a name containing the query.

    Raises:
        ValidationError: If nothing matches (with suggestions) or the
            query matches several packs
    """
    wanted = normalize_for_search(query)
    if not wanted:
        raise ValidationError("Pack query is empty.")

    by_code = [p for p in packs.values() if normalize_for_search(p.code) == wanted]
    by_name = [p for p in packs.values() if normalize_for_search(p.name) == wanted]
    by_part = [
        p for p in packs.values() if p.name and wanted in normalize_for_search(p.name)
    ]
    candidates = by_code or by_name or by_part
    if len(candidates) == 1:
        return candidates[0]

    if not candidates:
        scored = []
        for pack in packs.values():
            haystack = f"{normalize_for_search(pack.code)} {normalize_for_search(pack.name)}"
            score = _similarity(haystack.strip(), wanted)
            if score:
                scored.append((score, pack))
        scored.sort(key=lambda item: -item[0])
        message = f'No pack matched "{query}".'
        if scored:
            suggestions = "\n".join(f"- {pack.label}" for _, pack in scored[:10])
            message += f"\n\nDid you mean:\n{suggestions}"
        raise ValidationError(message)

    details = "\n".join(f"- {pack.label}" for pack in candidates[:20])
    raise ValidationError(f'Pack "{query}" is ambiguous; choose one of:\n{details}')


def format_pack_list(packs: Dict[str, Pack]) -> str:
    """One "code — name | cards:N" line per pack, sorted by name."""
    ordered = sorted(
        packs.values(),
        key=lambda pack: (
            normalize_for_search(pack.name),
            natural_code_key(normalize_for_search(pack.code)),
        ),
    )
    return "\n".join(f"{pack.label} | cards:{len(pack.cards)}" for pack in ordered)


def pack_entries(
    pack: Pack, game, index, *, type_filter: Optional[str] = None
) -> List[Tuple[int, Any]]:
    """(count, card) pairs for a pack, one per card, in collector order.

    A reprint whose original printing is in the same pack is listed as the
    original; reprints of cards from other packs stay as they are.
    """
    wanted_type = normalize_for_search(type_filter)
    seen = set()
    entries = []
    for card in pack.cards:
        canonical = game.canonical_card(card, index)
        if game.card_pack(canonical)[0] != pack.code:
            canonical = card
        if canonical.code in seen:
            continue
        seen.add(canonical.code)
        if wanted_type and wanted_type not in normalize_for_search(game.card_type(canonical)):
            continue
        entries.append((game.pack_quantity(canonical), canonical))

    def sort_key(entry: Tuple[int, Any]) -> Tuple[Any, ...]:
        card = entry[1]
        position = game.card_position(card)
        return (
            position is None,
            position or 0,
            normalize_for_search(card.name),
            natural_code_key(card.code),
        )

    entries.sort(key=sort_key)
    return entries


def format_pack_entries(
    entries: List[Tuple[int, Any]], include_codes: bool = True
) -> str:
    """Deck list text: "N Name [CODE]", or "N Name" without codes."""
    lines = []
    for count, card in entries:
        base = f"{count} {card.display_name}"
        lines.append(f"{base} [{card.code}]" if include_codes else base)
    return "\n".join(lines)
