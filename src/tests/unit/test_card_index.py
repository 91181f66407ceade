"""Unit tests for cards/index.py"""

import sys
from dataclasses import replace
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from cards.index import AMBIGUOUS, build_card_index, dedupe_by_code  # noqa: E402


def test_ambiguous_sentinel_is_falsy():
    """The sentinel must never be mistaken for a card."""
    assert not AMBIGUOUS
    assert repr(AMBIGUOUS) == "AMBIGUOUS"


def test_variant_rows_are_skipped(swu_cards):
    """Hyperspace and other variants do not become cards."""
    assert len(swu_cards) == 6
    assert "SOR-300" not in {card.code for card in swu_cards}


def test_full_codes(swu_index, swu_game):
    """SET-NNN is stored; SETNNN is rewritten to it before lookup."""
    assert swu_index.lookup_code("SOR-010").full_name == "Darth Vader, Dark Lord of the Sith"
    assert swu_index.lookup_code("SOR010") is None

    keys = swu_game.code_lookup_keys("SOR010", "a")
    assert keys == ["SOR-010"]
    assert swu_index.lookup_code(keys[0]).code == "SOR-010"


def test_shared_number_collision_is_ambiguous(swu_index):
    """A bare number printed in two sets maps to the sentinel."""
    assert swu_index.lookup_code("010") is AMBIGUOUS
    assert swu_index.lookup_code("100") is AMBIGUOUS
    assert swu_index.lookup_code("020").name == "Chopper Base"


def test_unknown_code(swu_index):
    assert swu_index.lookup_code("SOR-999") is None


def test_name_candidates_in_database_order(marvel_index):
    """Same-named cards are all candidates, in source order."""
    assert [card.code for card in marvel_index.candidates("Backflip")] == ["01003", "02010"]
    assert len(marvel_index.candidates("heroic rescue")) == 3


def test_subname_spellings(marvel_index):
    """Name + subname spellings all find the hero face."""
    for spelling in (
        "Spider-Man (Peter Parker)",
        "Spider-Man: Peter Parker",
        "Spider-Man — Peter Parker",
    ):
        assert [card.code for card in marvel_index.candidates(spelling)] == ["01001a"]


def test_reprints_indexed_under_original(marvel_index):
    """Reprint chains collapse onto the original printing by name."""
    assert [card.code for card in marvel_index.candidates("Haymaker")] == ["01005"]
    assert marvel_index.lookup_code("07005").pack_code == "mut_gen"


def test_override_row_replaces_same_code(marvel_game, marvel_cards):
    """An override appended later wins for its code and name."""
    original = next(card for card in marvel_cards if card.code == "01002")
    override = replace(original, cost=4)

    index = build_card_index(marvel_cards + [override], marvel_game)

    assert index.lookup_code("01002").cost == 4
    candidates = index.candidates("Ally Card")
    assert len(candidates) == 1
    assert candidates[0].cost == 4


def test_swu_title_spellings(swu_index):
    """Name/title separators are interchangeable."""
    for spelling in (
        "Darth Vader, Dark Lord of the Sith",
        "Darth Vader — Dark Lord of the Sith",
        "Darth Vader: Dark Lord of the Sith",
        "Darth Vader (Dark Lord of the Sith)",
        "darth vader",
    ):
        assert [card.code for card in swu_index.candidates(spelling)] == ["SOR-010"]


def test_dedupe_by_code(marvel_cards):
    doubled = marvel_cards[:3] + marvel_cards[:3]
    assert [card.code for card in dedupe_by_code(doubled)] == [
        card.code for card in marvel_cards[:3]
    ]
