"""Tests for services/search.py"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from cards.index import build_card_index  # noqa: E402
from errors import ValidationError  # noqa: E402
from services.search import (  # noqa: E402
    CostFilter,
    SearchFilters,
    build_pack_index,
    card_summary,
    format_pack_entries,
    format_pack_list,
    format_search_annotations,
    natural_code_key,
    normalize_for_search,
    pack_entries,
    parse_cost_filter,
    resolve_pack,
    search_cards,
)


def codes(cards):
    return [card.code for card in cards]


class TestSearchMarvel:
    """Searching MarvelCDB cards."""

    def test_name_query(self, marvel_index, marvel_game):
        results = search_cards(marvel_index, marvel_game, "backflip")

        assert codes(results) == ["01003", "02010"]

    def test_reprints_listed_once(self, marvel_index, marvel_game):
        results = search_cards(marvel_index, marvel_game, "Haymaker")

        assert codes(results) == ["01005"]

    def test_every_term_must_match(self, marvel_index, marvel_game):
        assert codes(search_cards(marvel_index, marvel_game, "heroic rescue")) == [
            "01004",
            "03004",
            "04004",
        ]
        assert search_cards(marvel_index, marvel_game, "heroic backflip") == []

    def test_scope(self, marvel_index, marvel_game):
        by_text = search_cards(
            marvel_index, marvel_game, "villain activates", scope="text"
        )
        by_name = search_cards(
            marvel_index, marvel_game, "villain activates", scope="name"
        )
        by_traits = search_cards(marvel_index, marvel_game, "avenger", scope="traits")

        assert codes(by_text) == ["01001a"]
        assert by_name == []
        assert codes(by_traits) == ["01001a"]

    def test_aspect_filter_sorted_by_cost(self, marvel_index, marvel_game):
        filters = SearchFilters.from_options(aspect="Protection")

        results = search_cards(marvel_index, marvel_game, filters=filters)

        assert codes(results) == ["01004", "03004", "04004", "02020"]

    def test_sort_by_name(self, marvel_index, marvel_game):
        filters = SearchFilters.from_options(aspect="protection")

        results = search_cards(marvel_index, marvel_game, filters=filters, sort="name")

        assert codes(results) == ["02020", "01004", "03004", "04004"]

    def test_cost_bounds(self, marvel_index, marvel_game):
        at_least_two = SearchFilters.from_options(cost="2+")
        free = SearchFilters.from_options(cost="0-")

        assert codes(search_cards(marvel_index, marvel_game, filters=at_least_two)) == [
            "02020",
            "01005",
            "01002",
        ]
        assert codes(search_cards(marvel_index, marvel_game, filters=free)) == ["01003"]

    def test_pack_type_and_code_filters(self, marvel_index, marvel_game):
        captain = SearchFilters.from_options(pack="captain")
        alter_ego = SearchFilters.from_options(type="alter_ego")
        exact = SearchFilters.from_options(code="01002")

        assert codes(search_cards(marvel_index, marvel_game, filters=captain)) == [
            "02010",
            "02020",
        ]
        assert codes(search_cards(marvel_index, marvel_game, filters=alter_ego)) == [
            "01001b"
        ]
        assert codes(search_cards(marvel_index, marvel_game, filters=exact)) == ["01002"]

    def test_unknown_scope_or_sort(self, marvel_index, marvel_game):
        with pytest.raises(ValidationError, match="--in"):
            search_cards(marvel_index, marvel_game, "x", scope="flavor")
        with pytest.raises(ValidationError, match="--sort"):
            search_cards(marvel_index, marvel_game, "x", sort="power")

    def test_search_line(self, marvel_index, marvel_game):
        backflip, heroic = (
            marvel_index.lookup_code("01003"),
            marvel_index.lookup_code("01004"),
        )

        assert marvel_game.format_search_line(backflip) == (
            "01003 Backflip — Event (Justice) — Cost 0 — Core Set #3"
        )
        assert marvel_game.format_search_line(heroic) == (
            "01004 Heroic Rescue — event (protection) — Cost 1 — Core Set #4"
        )

    def test_annotated_results(self, marvel_index, marvel_game):
        ally = marvel_index.lookup_code("01002")

        text = format_search_annotations([ally], marvel_game, marvel_index)

        assert text == (
            "1x Ally Card [01002]\n"
            "//? Ally — Basic. Cost 3. THW 2, ATK 1, HP 3. S.H.I.E.L.D."
        )

    def test_card_summary(self, marvel_index, marvel_game):
        summary = card_summary(marvel_index.lookup_code("01002"), marvel_game, marvel_index)

        assert summary["code"] == "01002"
        assert summary["name"] == "Ally Card"
        assert summary["type"] == "ally"
        assert summary["identity"] == ["basic"]
        assert summary["cost"] == 3
        assert (summary["pack"], summary["packName"]) == ("core", "Core Set")
        assert summary["summary"].startswith("Ally — Basic.")


class TestSearchSwu:
    def test_same_name_in_two_sets(self, swu_index, swu_game):
        results = search_cards(swu_index, swu_game, "marine")

        assert codes(results) == ["SHD-100", "SOR-100"]

    def test_set_filter_by_code_or_name(self, swu_index, swu_game):
        sor = SearchFilters.from_options(pack="sor", type="unit")
        shadows = SearchFilters.from_options(pack="Shadows")

        assert codes(search_cards(swu_index, swu_game, filters=sor)) == ["SOR-100"]
        assert codes(search_cards(swu_index, swu_game, filters=shadows)) == [
            "SHD-100",
            "SHD-010",
        ]

    def test_aspect_filter(self, swu_index, swu_game):
        filters = SearchFilters.from_options(aspect="villainy")

        assert codes(search_cards(swu_index, swu_game, filters=filters)) == [
            "SHD-010",
            "SOR-010",
        ]

    def test_search_line(self, swu_index, swu_game):
        assert swu_game.format_search_line(swu_index.lookup_code("SOR-150")) == (
            "SOR-150 Takedown — Event — Vigilance — Cost 4"
        )
        assert swu_game.format_search_line(swu_index.lookup_code("SOR-010")) == (
            "SOR-010 Darth Vader, Dark Lord of the Sith — Leader — "
            "Aggression/Villainy — Ground — Cost 7"
        )


class TestCostFilter:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("3", CostFilter("eq", 3.0)),
            ("2-", CostFilter("lte", 2.0)),
            (" 4+ ", CostFilter("gte", 4.0)),
            ("1.5", CostFilter("eq", 1.5)),
            (None, None),
            ("", None),
        ],
    )
    def test_parse(self, raw, expected):
        assert parse_cost_filter(raw) == expected

    @pytest.mark.parametrize("raw", ["two", "-2", "2+-", "X"])
    def test_invalid(self, raw):
        with pytest.raises(ValidationError, match="--cost"):
            parse_cost_filter(raw)

    def test_cards_without_cost_never_match(self):
        assert CostFilter("gte", 0.0).matches(None) is False
        assert CostFilter("lte", 2.0).matches(2) is True

    def test_empty_code_rejected(self):
        with pytest.raises(ValidationError):
            SearchFilters.from_options(code="  ")


class TestPacks:
    """Pack listing and pack deck entries."""

    def test_pack_list_sorted_by_name(self, marvel_index, marvel_game):
        packs = build_pack_index(marvel_index, marvel_game)

        assert format_pack_list(packs).splitlines() == [
            "bw — Black Widow | cards:1",
            "cap — Captain America | cards:2",
            "core — Core Set | cards:6",
            "gob — Green Goblin | cards:1",
            "mut_gen — Mutant Genesis | cards:1",
            "thor — Thor | cards:1",
        ]

    def test_resolve_by_code_name_or_part(self, marvel_index, marvel_game):
        packs = build_pack_index(marvel_index, marvel_game)

        assert resolve_pack("core", packs).code == "core"
        assert resolve_pack("Core Set", packs).code == "core"
        assert resolve_pack("captain", packs).code == "cap"

    def test_ambiguous_pack(self, marvel_index, marvel_game):
        packs = build_pack_index(marvel_index, marvel_game)

        with pytest.raises(ValidationError, match="ambiguous; choose one of") as excinfo:
            resolve_pack("e", packs)
        assert "- core — Core Set" in str(excinfo.value)

    def test_no_match_suggests(self, marvel_index, marvel_game):
        packs = build_pack_index(marvel_index, marvel_game)

        with pytest.raises(ValidationError) as excinfo:
            resolve_pack("goblin green", packs)
        message = str(excinfo.value)
        assert message.startswith('No pack matched "goblin green".')
        assert "Did you mean:\n- gob — Green Goblin" in message

        with pytest.raises(ValidationError, match="empty"):
            resolve_pack(" - ", packs)

    def test_core_entries(self, marvel_index, marvel_game):
        packs = build_pack_index(marvel_index, marvel_game)

        entries = pack_entries(packs["core"], marvel_game, marvel_index)

        assert format_pack_entries(entries) == (
            "1 Peter Parker [01001b]\n"
            "1 Spider-Man (Peter Parker) [01001a]\n"
            "1 Ally Card [01002]\n"
            "1 Backflip [01003]\n"
            "1 Heroic Rescue [01004]\n"
            "1 Haymaker [01005]"
        )

    def test_type_filter_and_no_codes(self, marvel_index, marvel_game):
        packs = build_pack_index(marvel_index, marvel_game)

        entries = pack_entries(
            packs["core"], marvel_game, marvel_index, type_filter="event"
        )

        assert format_pack_entries(entries, include_codes=False) == (
            "1 Backflip\n1 Heroic Rescue\n1 Haymaker"
        )

    def test_reprint_of_other_pack_keeps_its_code(self, marvel_index, marvel_game):
        packs = build_pack_index(marvel_index, marvel_game)

        entries = pack_entries(packs["gob"], marvel_game, marvel_index)

        assert format_pack_entries(entries) == "1 Haymaker [06005]"

    def test_quantity_from_card_data(self, marvel_game):
        cards = marvel_game.normalize_cards(
            [
                {
                    "code": "01040",
                    "name": "Mockingbird",
                    "pack_code": "core",
                    "pack_name": "Core Set",
                    "position": 40,
                    "quantity": 1,
                },
                {
                    "code": "01088",
                    "name": "Energy",
                    "type_code": "resource",
                    "pack_code": "core",
                    "pack_name": "Core Set",
                    "position": 88,
                    "quantity": 3,
                },
            ]
        )
        index = build_card_index(cards, marvel_game)
        packs = build_pack_index(index, marvel_game)

        entries = pack_entries(packs["core"], marvel_game, index)

        assert format_pack_entries(entries) == "1 Mockingbird [01040]\n3 Energy [01088]"

    def test_swu_sets(self, swu_index, swu_game):
        packs = build_pack_index(swu_index, swu_game)

        assert format_pack_list(packs).splitlines() == [
            "SHD — Shadows of the Galaxy | cards:2",
            "SOR — Spark of Rebellion | cards:4",
        ]
        entries = pack_entries(resolve_pack("sor", packs), swu_game, swu_index)
        assert format_pack_entries(entries) == (
            "1 Darth Vader, Dark Lord of the Sith [SOR-010]\n"
            "1 Chopper Base [SOR-020]\n"
            "1 Battlefield Marine [SOR-100]\n"
            "1 Takedown [SOR-150]"
        )


def test_normalize_for_search():
    assert normalize_for_search("Spider-Man (Peter Parker)") == "spider man peter parker"
    assert normalize_for_search(None) == ""


def test_natural_code_key():
    assert sorted(["SOR-100", "SOR-9", "SOR-10"], key=natural_code_key) == [
        "SOR-9",
        "SOR-10",
        "SOR-100",
    ]
