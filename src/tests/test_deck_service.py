"""Tests for services/deck.py.

Deck-level resolution: every entry is tried, and all failures come back in
one DeckResolutionError.
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.settings import DeckToolSettings  # noqa: E402
from deck.models import PageBreak, Section  # noqa: E402
from errors import (  # noqa: E402
    AmbiguousCardError,
    AmbiguousCodeError,
    CardNotFoundError,
    DeckResolutionError,
)
from services.deck import (  # noqa: E402
    DeckService,
    ResolvedCard,
    format_resolved_entries,
    should_skip_back,
    split_proxy_items,
)


@pytest.fixture
def marvel_service(marvel_game):
    return DeckService(marvel_game, DeckToolSettings(_env_file=None))


@pytest.fixture
def swu_service(swu_game):
    return DeckService(swu_game, DeckToolSettings(_env_file=None))


class TestResolveDeck:
    """Tests for DeckService.resolve_deck()."""

    def test_resolves_entries_in_order(self, marvel_service, marvel_resolver, tmp_path):
        parsed = marvel_service.parse_deck_text(
            "2 Ally Card[skipback]\n[proxypagebreak]\n1 Backflip (core, 3)\n",
            base_dir=tmp_path,
        )

        resolved = marvel_service.resolve_deck(parsed, marvel_resolver)

        assert isinstance(resolved.items[1], PageBreak)
        assert [item.card.code for item in resolved.cards] == ["01002", "01003"]
        assert resolved.total_count == 3

        ally = resolved.cards[0]
        assert ally.count == 2
        assert should_skip_back(ally.entry) is True

    def test_match_all_expands(self, marvel_service, marvel_resolver, tmp_path):
        parsed = marvel_service.parse_deck_text("1 Heroic Rescue[All]\n", base_dir=tmp_path)

        resolved = marvel_service.resolve_deck(parsed, marvel_resolver)

        assert [item.card.code for item in resolved.cards] == ["01004", "03004", "04004"]
        assert all(item.count == 1 for item in resolved.cards)
        assert resolved.total_count == 3
        assert len(resolved.diagnostics) == 1

    def test_parse_diagnostics_are_kept(self, marvel_service, marvel_resolver, tmp_path):
        parsed = marvel_service.parse_deck_text(
            "1 Ally Card\n[include:missing]\n", base_dir=tmp_path
        )

        resolved = marvel_service.resolve_deck(parsed, marvel_resolver)

        assert len(resolved.diagnostics) == 1
        assert "missing" in resolved.diagnostics[0].message

    def test_all_failures_reported_together(self, marvel_service, marvel_resolver, tmp_path):
        deck = tmp_path / "deck.txt"
        deck.write_text(
            "\n".join(
                [
                    "1 Unknown Zeta",
                    "2 Backflip",
                    "1 Ally Card",
                    "1 Heroic Rescue",
                    "3 Haymaker",
                    "1 Unknown Alpha",
                    "1 Backflip",
                ]
            )
            + "\n",
            encoding="utf-8",
        )
        parsed = marvel_service.parse_deck_file(deck)

        with pytest.raises(DeckResolutionError) as excinfo:
            marvel_service.resolve_deck(parsed, marvel_resolver)

        error = excinfo.value
        assert len(error.failures) == 5
        assert [failure.entry.source.line for failure in error.failures] == [1, 2, 4, 6, 7]
        assert [type(failure) for failure in error.failures] == [
            CardNotFoundError,
            AmbiguousCardError,
            AmbiguousCardError,
            CardNotFoundError,
            AmbiguousCardError,
        ]

        message = str(error)
        assert message.startswith(
            "Found 5 card resolution problems (3 ambiguous, 2 not found):"
        )
        positions = [
            message.index(f"- {name}")
            for name in (
                "Unknown Zeta",
                "Backflip (x2)",
                "Heroic Rescue",
                "Unknown Alpha",
                "Backflip (x1)",
            )
        ]
        assert positions == sorted(positions)
        assert "deck.txt:2" in message
        assert "    - 01003 — Backflip (Core Set)" in message

    def test_ambiguous_code_counts_as_ambiguous(self, swu_service, swu_resolver, tmp_path):
        parsed = swu_service.parse_deck_text(
            "1 Vader [10]\n1 Dup Card[SOR-001]\n", base_dir=tmp_path
        )

        with pytest.raises(DeckResolutionError) as excinfo:
            swu_service.resolve_deck(parsed, swu_resolver)

        failures = excinfo.value.failures
        assert isinstance(failures[0], AmbiguousCodeError)
        assert isinstance(failures[1], CardNotFoundError)
        assert "(1 ambiguous, 1 not found)" in str(excinfo.value)
        assert 'Card code "SOR-001" was not found' in str(excinfo.value)


class TestProxyItems:
    def test_skipproxy_split(self, marvel_service, marvel_resolver, tmp_path):
        parsed = marvel_service.parse_deck_text(
            "1 Ally Card\n[proxypagebreak]\n2 Haymaker [skipproxy]\n",
            base_dir=tmp_path,
        )
        resolved = marvel_service.resolve_deck(parsed, marvel_resolver)

        kept, skipped = split_proxy_items(resolved.items)

        assert len(kept) == 2
        assert isinstance(kept[1], PageBreak)
        assert [item.card.code for item in skipped] == ["01005"]


class TestFormatResolvedEntries:
    """Normalized deck text output."""

    def test_marvel_list(self, marvel_service, marvel_resolver, tmp_path):
        parsed = marvel_service.parse_deck_text(
            "1 Spider-Man (Peter Parker)\n2x Backflip (core, 3)\n[proxypagebreak]\n1 Ally Card\n",
            base_dir=tmp_path,
        )
        resolved = marvel_service.resolve_deck(parsed, marvel_resolver)

        assert format_resolved_entries(resolved.items) == (
            "1 Spider-Man (Peter Parker) [01001a]\n"
            "2 Backflip [01003]\n"
            "[proxypagebreak]\n"
            "1 Ally Card [01002]"
        )

    def test_swu_sections(self, swu_service, swu_resolver, tmp_path):
        parsed = swu_service.parse_deck_text(
            "Leader:\nDarth Vader\nBase:\nChopper Base\nDeck:\n3 Battlefield Marine (SOR) 100\n",
            base_dir=tmp_path,
        )
        resolved = swu_service.resolve_deck(parsed, swu_resolver)

        assert format_resolved_entries(resolved.items) == (
            "Leader:\n"
            "1 Darth Vader, Dark Lord of the Sith [SOR-010]\n"
            "\n"
            "Base:\n"
            "1 Chopper Base [SOR-020]\n"
            "\n"
            "Deck:\n"
            "3 Battlefield Marine [SOR-100]"
        )
        assert resolved.cards[0].entry.section is Section.LEADER

    def test_to_dict(self, marvel_service, marvel_resolver, tmp_path):
        parsed = marvel_service.parse_deck_text("2 Ally Card[skipback]\n", base_dir=tmp_path)
        resolved = marvel_service.resolve_deck(parsed, marvel_resolver)

        data = resolved.to_dict()

        assert data["totalCards"] == 2
        assert data["items"][0]["code"] == "01002"
        assert data["items"][0]["entry"]["annotations"]["skipBack"] is True
        assert isinstance(resolved.cards[0], ResolvedCard)
