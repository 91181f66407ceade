"""Shared fixtures: small MarvelCDB and swu-db card sets, indexes and resolvers."""

import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from cards.index import build_card_index  # noqa: E402
from cards.resolver import CardResolver  # noqa: E402
from plugins.marvel.game import MarvelGame  # noqa: E402
from plugins.swu.game import SwuGame  # noqa: E402

MARVEL_ROWS = [
    {
        "code": "01001a",
        "name": "Spider-Man",
        "subname": "Peter Parker",
        "type_code": "hero",
        "type_name": "Hero",
        "faction_code": "hero",
        "faction_name": "Hero",
        "pack_code": "core",
        "pack_name": "Core Set",
        "position": 1,
        "thwart": 1,
        "attack": 2,
        "defense": 3,
        "health": 10,
        "hand_size": 5,
        "traits": "Avenger.",
        "text": "<b>Response</b>: After a villain activates against you, draw 1 card.",
    },
    {
        "code": "01001b",
        "name": "Peter Parker",
        "type_code": "alter_ego",
        "type_name": "Alter-Ego",
        "faction_code": "hero",
        "pack_code": "core",
        "pack_name": "Core Set",
        "position": 1,
        "recover": 3,
        "health": 10,
        "hand_size": 6,
    },
    {
        "code": "01002",
        "name": "Ally Card",
        "type_code": "ally",
        "type_name": "Ally",
        "faction_code": "basic",
        "faction_name": "Basic",
        "pack_code": "core",
        "pack_name": "Core Set",
        "position": 2,
        "cost": 3,
        "thwart": 2,
        "attack": 1,
        "health": 3,
        "traits": "S.H.I.E.L.D.",
    },
    {
        "code": "01003",
        "name": "Backflip",
        "type_code": "event",
        "type_name": "Event",
        "faction_code": "justice",
        "faction_name": "Justice",
        "pack_code": "core",
        "pack_name": "Core Set",
        "position": 3,
        "cost": 0,
    },
    {
        "code": "02010",
        "name": "Backflip",
        "type_code": "event",
        "type_name": "Event",
        "faction_code": "aggression",
        "faction_name": "Aggression",
        "pack_code": "cap",
        "pack_name": "Captain America",
        "position": 10,
        "cost": 1,
    },
    {
        "code": "01004",
        "name": "Heroic Rescue",
        "type_code": "event",
        "faction_code": "protection",
        "pack_code": "core",
        "pack_name": "Core Set",
        "position": 4,
        "cost": 1,
    },
    {
        "code": "03004",
        "name": "Heroic Rescue",
        "type_code": "event",
        "faction_code": "protection",
        "pack_code": "thor",
        "pack_name": "Thor",
        "position": 4,
        "cost": 1,
    },
    {
        "code": "04004",
        "name": "Heroic Rescue",
        "type_code": "event",
        "faction_code": "protection",
        "pack_code": "bw",
        "pack_name": "Black Widow",
        "position": 4,
        "cost": 1,
    },
    {
        "code": "01005",
        "name": "Haymaker",
        "type_code": "event",
        "type_name": "Event",
        "faction_code": "aggression",
        "faction_name": "Aggression",
        "pack_code": "core",
        "pack_name": "Core Set",
        "position": 5,
        "cost": 2,
    },
    {
        "code": "06005",
        "name": "Haymaker",
        "type_code": "event",
        "type_name": "Event",
        "faction_code": "aggression",
        "faction_name": "Aggression",
        "pack_code": "gob",
        "pack_name": "Green Goblin",
        "position": 5,
        "cost": 2,
        "duplicate_of_code": "01005",
    },
    {
        "code": "07005",
        "name": "Haymaker",
        "type_code": "event",
        "faction_code": "aggression",
        "pack_code": "mut_gen",
        "pack_name": "Mutant Genesis",
        "position": 5,
        "cost": 2,
        "duplicate_of_code": "06005",
    },
    {
        "code": "02020",
        "name": "Energy Barrier",
        "type_code": "upgrade",
        "type_name": "Upgrade",
        "faction_code": "protection",
        "faction_name": "Protection",
        "pack_code": "cap",
        "pack_name": "Captain America",
        "position": 20,
        "cost": 2,
    },
]

SWU_ROWS = [
    {
        "Set": "SOR",
        "Number": "010",
        "Name": "Darth Vader",
        "Subtitle": "Dark Lord of the Sith",
        "Type": "Leader",
        "Aspects": ["Aggression", "Villainy"],
        "Arenas": ["Ground"],
        "Cost": "7",
        "Power": "5",
        "HP": "8",
        "Traits": ["Force", "Imperial", "Sith"],
        "FrontText": "Action [C=1]: Deal 1 damage to a unit.",
        "BackText": "On Attack: You may deal 2 damage to a unit.",
        "VariantType": "Normal",
    },
    {
        "Set": "SHD",
        "Number": "010",
        "Name": "Boba Fett",
        "Subtitle": "Collecting the Bounty",
        "Type": "Leader",
        "Aspects": ["Cunning", "Villainy"],
        "Cost": "5",
        "VariantType": "Normal",
    },
    {
        "Set": "SOR",
        "Number": "020",
        "Name": "Chopper Base",
        "Type": "Base",
        "Aspects": ["Command"],
        "HP": "28",
        "VariantType": "Normal",
    },
    {
        "Set": "SOR",
        "Number": "100",
        "Name": "Battlefield Marine",
        "Type": "Unit",
        "Aspects": ["Command", "Heroism"],
        "Arenas": ["Ground"],
        "Cost": "2",
        "Power": "3",
        "HP": "3",
        "Traits": ["Rebel", "Trooper"],
        "VariantType": "Normal",
    },
    {
        "Set": "SOR",
        "Number": "300",
        "Name": "Battlefield Marine",
        "Type": "Unit",
        "Aspects": ["Command", "Heroism"],
        "Cost": "2",
        "VariantType": "Hyperspace",
    },
    {
        "Set": "SHD",
        "Number": "100",
        "Name": "Battlefield Marine",
        "Type": "Unit",
        "Aspects": ["Command", "Heroism"],
        "Arenas": ["Ground"],
        "Cost": "2",
        "Power": "3",
        "HP": "3",
        "VariantType": "Normal",
    },
    {
        "Set": "SOR",
        "Number": "150",
        "Name": "Takedown",
        "Type": "Event",
        "Aspects": ["Vigilance"],
        "Cost": "4",
        "FrontText": "Defeat a unit with 5 or less remaining HP.",
        "VariantType": "Normal",
    },
]


@pytest.fixture
def marvel_game():
    return MarvelGame()


@pytest.fixture
def marvel_cards(marvel_game):
    return marvel_game.normalize_cards(MARVEL_ROWS)


@pytest.fixture
def marvel_index(marvel_game, marvel_cards):
    return build_card_index(marvel_cards, marvel_game)


@pytest.fixture
def marvel_resolver(marvel_game, marvel_index):
    return CardResolver(marvel_index, marvel_game)


@pytest.fixture
def swu_game():
    return SwuGame()


@pytest.fixture
def swu_cards(swu_game):
    return swu_game.normalize_cards(SWU_ROWS)


@pytest.fixture
def swu_index(swu_game, swu_cards):
    return build_card_index(swu_cards, swu_game)


@pytest.fixture
def swu_resolver(swu_game, swu_index):
    return CardResolver(swu_index, swu_game)
