"""Map deck entries to cards.

Resolution order for one entry:
1. An explicit code is looked up in the exact-code map only. A shared short
   code that collides across sets is an AmbiguousCodeError; a miss is a
   CardNotFoundError naming the code.
2. Otherwise the normalized name is looked up. No candidates is a
   CardNotFoundError naming the name as typed.
3. Candidates are deduplicated by code; a single survivor wins.
4. With [All], every candidate is returned along with a warning diagnostic
   listing them.
5. Otherwise the entry's set/pack hint filters the candidates; if exactly one
   is left it wins, else AmbiguousCardError carries the full list.

The resolver never logs. Warnings are returned as Diagnostic records.
"""

from dataclasses import dataclass, field
from typing import Any, List

from deck.models import DeckEntry, Diagnostic
from errors import AmbiguousCardError, AmbiguousCodeError, CardNotFoundError

from .index import AMBIGUOUS, CardIndex, dedupe_by_code

DEFAULT_DISPLAY_LIMIT = 10


@dataclass
class Resolution:
    """Cards an entry resolved to, plus diagnostics for the caller to render."""

    cards: List[Any] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)


def format_candidate(card: Any) -> str:
    """Describe a card as "code — name (set)"."""
    set_label = getattr(card, "set_label", "") or "unknown set"
    return f"{card.code} — {card.display_name} ({set_label})"


def format_candidate_lines(
    cards: List[Any], indent: str = "- ", limit: int = 0
) -> List[str]:
    """One line per candidate, capped at limit (0 means no cap)."""
    shown = cards[:limit] if limit > 0 else cards
    lines = [f"{indent}{format_candidate(card)}" for card in shown]
    hidden = len(cards) - len(shown)
    if hidden > 0:
        lines.append(f"{indent}...and {hidden} more")
    return lines


class CardResolver:
    """Resolves DeckEntry records against a CardIndex."""

    def __init__(
        self,
        index: CardIndex,
        game,
        default_face: str = "a",
        display_limit: int = DEFAULT_DISPLAY_LIMIT,
    ):
        self.index = index
        self.game = game
        self.default_face = default_face
        self.display_limit = display_limit

    def resolve(self, entry: DeckEntry) -> Any:
        """Resolve an entry to exactly one card.

        [All] is not honoured here; use resolve_all for that.

        Raises:
            CardNotFoundError: No card matches the code or name
            AmbiguousCodeError: The code is shared by cards from several sets
            AmbiguousCardError: Several cards match and hints do not narrow them
        """
        if entry.code:
            return self._resolve_code(entry)

        candidates = self._name_candidates(entry)
        if len(candidates) == 1:
            return candidates[0]
        return self._disambiguate(entry, candidates)

    def resolve_all(self, entry: DeckEntry) -> Resolution:
        """Resolve an entry, returning every match when it carries [All]."""
        if entry.code:
            return Resolution(cards=[self._resolve_code(entry)])

        candidates = self._name_candidates(entry)
        if len(candidates) == 1:
            return Resolution(cards=candidates)

        if entry.match_all:
            return Resolution(
                cards=candidates,
                diagnostics=[self._match_all_diagnostic(entry, candidates)],
            )

        return Resolution(cards=[self._disambiguate(entry, candidates)])

    def _resolve_code(self, entry: DeckEntry) -> Any:
        code = entry.code.strip()
        for key in self.game.code_lookup_keys(code, self.default_face):
            hit = self.index.lookup_code(key)
            if hit is AMBIGUOUS:
                raise AmbiguousCodeError(
                    f'Card code "{code}" is ambiguous across multiple sets; '
                    f'use a full code like "{self.game.example_code}".',
                    code=code,
                    entry=entry,
                )
            if hit is not None:
                return hit

        raise CardNotFoundError(
            f'Card code "{code}" was not found in {self.game.data_label}.',
            reference=code,
            entry=entry,
        )

    def _name_candidates(self, entry: DeckEntry) -> List[Any]:
        candidates = dedupe_by_code(self.index.candidates(entry.name))
        if not candidates:
            raise CardNotFoundError(
                f'Card "{entry.name}" was not found in {self.game.data_label}.',
                reference=entry.name,
                entry=entry,
            )
        return candidates

    def _disambiguate(self, entry: DeckEntry, candidates: List[Any]) -> Any:
        if entry.hint is not None:
            narrowed = self.game.filter_by_hint(candidates, entry.hint)
            if len(narrowed) == 1:
                return narrowed[0]

        details = "\n".join(format_candidate_lines(candidates))
        raise AmbiguousCardError(
            f'Card "{entry.name}" is ambiguous. Add a code like '
            f'"[{candidates[0].code}]" to disambiguate.\n{details}',
            entry=entry,
            candidates=candidates,
        )

    def _match_all_diagnostic(
        self, entry: DeckEntry, candidates: List[Any]
    ) -> Diagnostic:
        where = entry.source.label()
        header = (
            f'"{entry.name}" matched {len(candidates)} cards; '
            f"[All] includes every one of them"
        )
        if where:
            header = f"{where}: {header}"
        lines = [header]
        lines.extend(
            format_candidate_lines(candidates, indent="  - ", limit=self.display_limit)
        )
        return Diagnostic("warning", "\n".join(lines))
