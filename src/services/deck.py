"""Deck Processing Service

Business logic for turning a deck list into resolved cards.
Separated from CLI interface for better testability and reusability.

Resolution never stops at the first bad line: every entry is tried, and all
not-found and ambiguous entries are reported together in one
DeckResolutionError, sorted by file, line and name so the message is stable
across runs.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from cards.index import build_card_index
from cards.resolver import CardResolver, format_candidate_lines
from config.settings import DeckToolSettings, settings as default_settings
from core.logging import get_logger
from deck.models import DeckEntry, Diagnostic, PageBreak, Section
from deck.parser import ParsedDeck, parse_deck_file, parse_deck_text
from errors import (
    AmbiguousCardError,
    AmbiguousCodeError,
    CardResolutionError,
    DeckResolutionError,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class ResolvedCard:
    """A card paired with the deck entry that asked for it."""

    card: Any
    entry: DeckEntry

    @property
    def count(self) -> int:
        return self.entry.count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.entry.count,
            "code": self.card.code,
            "name": self.card.display_name,
            "set": self.card.set_label,
            "entry": self.entry.to_dict(),
        }


ResolvedItem = Union[ResolvedCard, PageBreak]


@dataclass
class ResolvedDeck:
    """Resolved cards and page breaks in list order."""

    items: List[ResolvedItem] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def cards(self) -> List[ResolvedCard]:
        return [item for item in self.items if isinstance(item, ResolvedCard)]

    @property
    def total_count(self) -> int:
        return sum(item.count for item in self.cards)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "totalCards": self.total_count,
            "diagnostics": [diagnostic.to_dict() for diagnostic in self.diagnostics],
        }


def _failure_sort_key(failure: CardResolutionError) -> Tuple[str, int, str]:
    entry = failure.entry
    if entry is None:
        return ("", 0, "")
    return entry.sort_key()


def format_resolution_failures(failures: List[CardResolutionError]) -> str:
    """Render resolution failures as one multi-line message.

    The header gives the total and the ambiguous/not-found split; each
    problem follows as "- name (xN) — file:line" with the reason and, for
    ambiguous names, the candidates indented underneath.
    """
    ordered = sorted(failures, key=_failure_sort_key)
    ambiguous = sum(
        1
        for failure in ordered
        if isinstance(failure, (AmbiguousCardError, AmbiguousCodeError))
    )
    missing = len(ordered) - ambiguous
    noun = "problem" if len(ordered) == 1 else "problems"

    lines = [
        f"Found {len(ordered)} card resolution {noun} "
        f"({ambiguous} ambiguous, {missing} not found):"
    ]
    for failure in ordered:
        entry = failure.entry
        name = entry.name if entry is not None else "(unknown)"
        count = f" (x{entry.count})" if entry is not None and entry.count > 0 else ""
        where = entry.source.label() if entry is not None else ""
        lines.append(f"- {name}{count}" + (f" — {where}" if where else ""))

        message = str(failure) or type(failure).__name__
        reason = message.splitlines()[0]
        lines.append(f"  {reason}")
        if isinstance(failure, AmbiguousCardError):
            lines.extend(format_candidate_lines(failure.candidates, indent="    - "))

    return "\n".join(lines)


def raise_for_failures(failures: List[CardResolutionError]) -> None:
    """Raise one DeckResolutionError for all failures, if there are any."""
    if failures:
        ordered = sorted(failures, key=_failure_sort_key)
        raise DeckResolutionError(format_resolution_failures(ordered), ordered)


def should_skip_proxy(entry: DeckEntry) -> bool:
    return entry.annotations.skip_proxy


def should_skip_back(entry: DeckEntry) -> bool:
    return entry.annotations.skip_back


def split_proxy_items(
    items: List[ResolvedItem],
) -> Tuple[List[ResolvedItem], List[ResolvedCard]]:
    """Split resolved items into (items to proxy, cards marked [skipproxy]).

    Page breaks always stay with the items to proxy.
    """
    kept: List[ResolvedItem] = []
    skipped: List[ResolvedCard] = []
    for item in items:
        if isinstance(item, ResolvedCard) and should_skip_proxy(item.entry):
            skipped.append(item)
        else:
            kept.append(item)
    return kept, skipped


def format_resolved_entries(
    items: List[ResolvedItem], include_codes: bool = True
) -> str:
    """Render resolved items back into deck list text.

    Each card becomes "N Name [CODE]"; entries with a zone get a "Section:"
    header whenever the zone changes, and page breaks are kept.

    Examples:
        1 Darth Vader, Dark Lord of the Sith [SOR-010]
    """
    lines: List[str] = []
    current_section: Optional[Section] = None
    needs_blank_line = False

    for item in items:
        if isinstance(item, PageBreak):
            lines.append("[proxypagebreak]")
            needs_blank_line = False
            continue

        section = item.entry.section
        if section is not Section.OTHER and section is not current_section:
            if needs_blank_line:
                lines.append("")
            lines.append(f"{section.value.capitalize()}:")
            current_section = section
            needs_blank_line = False

        base = f"{item.count} {item.card.display_name}".strip()
        lines.append(f"{base} [{item.card.code}]" if include_codes else base)
        needs_blank_line = True

    return "\n".join(lines).strip()


class DeckService:
    """Service for deck parsing and resolution for one game."""

    def __init__(self, game, settings: Optional[DeckToolSettings] = None):
        self.game = game
        self.settings = settings or default_settings

    def parse_deck_file(self, file_path: Path) -> ParsedDeck:
        """Parse a deck file, expanding includes."""
        return parse_deck_file(
            file_path,
            self.game,
            warn_on_missing_include=self.settings.warn_on_missing_include,
        )

    def parse_deck_text(
        self,
        content: str,
        base_dir: Optional[Path] = None,
        source_path: Optional[Path] = None,
    ) -> ParsedDeck:
        """Parse deck text content, expanding includes relative to base_dir."""
        return parse_deck_text(
            content,
            self.game,
            base_dir=base_dir,
            source_path=source_path,
            warn_on_missing_include=self.settings.warn_on_missing_include,
        )

    def build_resolver(
        self,
        *,
        refresh: bool = False,
        data_file: Optional[Path] = None,
        cache_dir: Optional[Path] = None,
        max_age_days: Optional[float] = None,
        default_face: Optional[str] = None,
    ) -> CardResolver:
        """Load card data for the game and return a resolver over it."""
        cards = self.game.load_cards(
            self.settings,
            refresh=refresh,
            data_file=data_file,
            cache_dir=cache_dir,
            max_age_days=max_age_days,
        )
        index = build_card_index(cards, self.game)
        logger.info("Loaded {} {} cards", len(index), self.game.title)
        return CardResolver(
            index,
            self.game,
            default_face=default_face or self.settings.default_face,
            display_limit=self.settings.match_all_display_limit,
        )

    def resolve_deck(self, parsed: ParsedDeck, resolver: CardResolver) -> ResolvedDeck:
        """Resolve every entry, or raise one error listing all failures.

        Raises:
            DeckResolutionError: If any entry is not found or ambiguous
        """
        resolved = ResolvedDeck(diagnostics=list(parsed.diagnostics))
        failures: List[CardResolutionError] = []

        for item in parsed.items:
            if isinstance(item, PageBreak):
                resolved.items.append(item)
                continue

            try:
                resolution = resolver.resolve_all(item)
            except CardResolutionError as error:
                failures.append(error)
                continue

            resolved.diagnostics.extend(resolution.diagnostics)
            for card in resolution.cards:
                resolved.items.append(ResolvedCard(card=card, entry=item))

        raise_for_failures(failures)
        return resolved
