"""Game plugin interface.

A game plugin owns everything that differs between games: where card data
comes from and how its fields are named, what a card code looks like, which
keys a card is indexed under, how name hints filter candidates and how a
card is summarized in annotations. The parser, index, resolver and services
only talk to games through this interface.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from cards.cache import CardSource, load_card_payload, load_override_cards
from core.logging import get_logger, log_operation
from deck.models import Hint, Section

logger = get_logger(__name__)


class GamePlugin(ABC):
    """Base class for a supported card game."""

    #: Registry key, e.g. "marvel"
    name: str = ""
    #: Human-readable game name
    title: str = ""
    #: Where card data comes from, used in "not found in ..." messages
    data_label: str = "the card database"
    #: Example of a full code, used in ambiguity hints
    example_code: str = ""
    #: Zones where a bare card name (no count) means one copy
    single_card_sections: Tuple[Section, ...] = ()

    # Card data

    @abstractmethod
    def card_sources(self, settings, cache_dir: Path) -> List[CardSource]:
        """Remote snapshots to load, each with its cache path."""

    @abstractmethod
    def normalize_card(self, raw: Mapping[str, Any]) -> Optional[Any]:
        """Map one raw upstream object onto this game's card type.

        Returns None for rows that are not usable cards.
        """

    def normalize_cards(self, raw_cards: Iterable[Any]) -> List[Any]:
        cards = []
        for raw in raw_cards:
            if not isinstance(raw, Mapping):
                continue
            card = self.normalize_card(raw)
            if card is not None:
                cards.append(card)
        return cards

    def load_cards(
        self,
        settings,
        *,
        refresh: bool = False,
        data_file: Optional[Path] = None,
        cache_dir: Optional[Path] = None,
        max_age_days: Optional[float] = None,
    ) -> List[Any]:
        """Load remote card data (cached) plus an optional override file.

        Override rows are appended after the remote rows.
        """
        cache_dir = Path(cache_dir or settings.cache_dir)
        max_age = (
            settings.card_data_max_age_days if max_age_days is None else max_age_days
        )

        raw_cards: List[Any] = []
        with log_operation("Loading card data", game=self.name):
            for source in self.card_sources(settings, cache_dir):
                raw_cards.extend(
                    load_card_payload(
                        source,
                        refresh=refresh,
                        max_age_days=max_age,
                        timeout=settings.http_timeout,
                        user_agent=settings.user_agent,
                    )
                )
            if data_file is not None:
                overrides = load_override_cards(data_file)
                logger.debug(
                    "Loaded {} override rows from {}", len(overrides), data_file
                )
                raw_cards.extend(overrides)

        cards = self.normalize_cards(raw_cards)
        logger.debug(
            "{}: {} cards normalized from {} rows", self.name, len(cards), len(raw_cards)
        )
        return cards

    # Deck list parsing

    @abstractmethod
    def looks_like_code(self, token: str) -> bool:
        """True when a bracket token is this game's card code."""

    def infer_code(self, name: str) -> Optional[str]:
        """Code implied by a name that is itself a code (e.g. "1 SOR-005")."""
        return None

    @abstractmethod
    def split_name_hint(self, name: str) -> Tuple[str, Optional[Hint]]:
        """Strip a printing suffix from a name and return it as a hint."""

    # Index and resolution

    @abstractmethod
    def code_keys(self, card: Any) -> Iterable[Tuple[str, bool]]:
        """Exact-code keys for a card as (key, shared) pairs.

        Shared keys may legitimately belong to several cards; a collision
        stores the ambiguity sentinel instead of a card.
        """

    @abstractmethod
    def code_lookup_keys(self, code: str, default_face: str) -> List[str]:
        """Keys to try, in order, for a code typed in a deck list."""

    @abstractmethod
    def name_keys(self, card: Any) -> Iterable[str]:
        """Spellings a card can be referred to by (normalized by the index)."""

    def canonical_card(self, card: Any, index) -> Any:
        """The printing a card is indexed under by name."""
        return card

    @abstractmethod
    def filter_by_hint(self, candidates: Sequence[Any], hint: Hint) -> List[Any]:
        """Candidates consistent with a set/pack hint."""

    # Output

    @abstractmethod
    def build_card_comment(
        self, card: Any, index, *, core_status: bool = False
    ) -> str:
        """One-line summary written after "//? " by the annotator."""

    @abstractmethod
    def card_type(self, card: Any) -> str:
        """Card type label for deck analysis."""

    @abstractmethod
    def card_identity(self, card: Any) -> List[str]:
        """Faction/aspect labels for deck analysis."""

    def card_cost(self, card: Any) -> Optional[Any]:
        return getattr(card, "cost", None)

    def counts_toward_deck(self, card: Any, entry) -> bool:
        """Whether a resolved card belongs to the player deck for totals."""
        return True

    # Search and pack listing

    @abstractmethod
    def search_text(self, card: Any, scope: str) -> str:
        """Text a search query is matched against.

        Args:
            card: Card to describe
            scope: "name", "text", "traits" or "all"
        """

    @abstractmethod
    def card_pack(self, card: Any) -> Tuple[str, str]:
        """(code, name) of the pack or set the card was printed in."""

    def card_position(self, card: Any) -> Optional[int]:
        """Collector number within the pack, used to order pack listings."""
        return None

    def pack_quantity(self, card: Any) -> int:
        """Copies of the card in one pack."""
        return 1

    @abstractmethod
    def format_search_line(self, card: Any) -> str:
        """One result line for `deck-tools search`: "CODE Name — details"."""
