"""MarvelCDB card records.

MarvelCDB's public API returns one JSON object per card face, with snake_case
fields (code, name, subname, type_code, faction_code, pack_code, ...). Reprints
are separate rows whose duplicate_of_code points at the original printing.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

from cards.models import (
    CardImages,
    coerce_number,
    coerce_stat,
    first_present,
    string_or_empty,
)

MARVELCDB_BASE_URL = "https://marvelcdb.com"

_TRAIT_SPLIT = re.compile(r"\.\s+|;\s*")


@dataclass(frozen=True)
class MarvelCard:
    code: str
    name: str
    subname: str = ""
    real_name: str = ""
    type_code: str = ""
    type_name: str = ""
    faction_code: str = ""
    faction_name: str = ""
    pack_code: str = ""
    pack_name: str = ""
    position: Optional[int] = None
    quantity: int = 1
    cost: Optional[float] = None
    cost_text: str = ""
    thwart: Optional[float] = None
    thwart_star: bool = False
    attack: Optional[float] = None
    attack_star: bool = False
    defense: Optional[float] = None
    defense_star: bool = False
    recover: Optional[float] = None
    recover_star: bool = False
    health: Optional[float] = None
    health_star: bool = False
    hand_size: Optional[float] = None
    traits: Tuple[str, ...] = ()
    text: str = ""
    images: CardImages = field(default_factory=CardImages)
    duplicate_of_code: str = ""
    linked_to_code: str = ""
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def display_name(self) -> str:
        if self.subname:
            return f"{self.name} ({self.subname})"
        return self.name

    @property
    def set_label(self) -> str:
        return self.pack_name or self.pack_code


def split_traits(value: Any) -> Tuple[str, ...]:
    """Split MarvelCDB's "Avenger. S.H.I.E.L.D." trait string.

    Examples:
        >>> split_traits("Avenger. S.H.I.E.L.D.")
        ('Avenger', 'S.H.I.E.L.D')
    """
    if isinstance(value, (list, tuple)):
        return tuple(string_or_empty(item) for item in value if string_or_empty(item))
    text = re.sub(r"\s+", " ", string_or_empty(value)).rstrip(".;, ")
    if not text:
        return ()
    return tuple(part.strip() for part in _TRAIT_SPLIT.split(text) if part.strip())


def image_url(path: Any, base_url: str = MARVELCDB_BASE_URL) -> str:
    """Absolute image URL for MarvelCDB's relative imagesrc values."""
    value = string_or_empty(path)
    if not value or "://" in value:
        return value
    return base_url.rstrip("/") + "/" + value.lstrip("/")


def normalize_marvel_card(
    raw: Mapping[str, Any], base_url: str = MARVELCDB_BASE_URL
) -> Optional[MarvelCard]:
    """Build a MarvelCard from a MarvelCDB row; None without code and name."""
    code = string_or_empty(first_present(raw, "code", "Code")).lower()
    name = string_or_empty(first_present(raw, "name", "Name"))
    real_name = string_or_empty(raw.get("real_name"))
    if not code or not (name or real_name):
        return None

    cost_value = first_present(raw, "cost", "Cost")
    cost = coerce_number(cost_value)

    stats = {}
    for stat in ("thwart", "attack", "defense", "recover", "health"):
        value, star = coerce_stat(raw.get(stat), raw.get(f"{stat}_star"))
        stats[stat] = value
        stats[f"{stat}_star"] = star

    position = coerce_number(raw.get("position"))
    quantity = coerce_number(raw.get("quantity"))

    return MarvelCard(
        code=code,
        name=name or real_name,
        subname=string_or_empty(raw.get("subname")),
        real_name=real_name,
        type_code=string_or_empty(raw.get("type_code")).lower(),
        type_name=string_or_empty(raw.get("type_name")),
        faction_code=string_or_empty(raw.get("faction_code")).lower(),
        faction_name=string_or_empty(raw.get("faction_name")),
        pack_code=string_or_empty(raw.get("pack_code")).lower(),
        pack_name=string_or_empty(raw.get("pack_name")),
        position=int(position) if position is not None else None,
        quantity=int(quantity) if quantity else 1,
        cost=cost,
        cost_text="" if cost is not None else string_or_empty(cost_value),
        hand_size=coerce_number(raw.get("hand_size")),
        traits=split_traits(raw.get("traits")),
        text=string_or_empty(raw.get("text")),
        images=CardImages(
            front=image_url(raw.get("imagesrc"), base_url),
            back=image_url(raw.get("backimagesrc"), base_url),
        ),
        duplicate_of_code=string_or_empty(raw.get("duplicate_of_code")).lower(),
        linked_to_code=string_or_empty(raw.get("linked_to_code")).lower(),
        raw=dict(raw),
        **stats,
    )
