"""Star Wars: Unlimited card records.

Card rows come from the swu-db API ("Set", "Number", "Name", "Subtitle",
"Aspects", "FrontArt", ...) or from hand-written override files that follow
older export conventions ("Card Name", "#", "Title", "Aspect1", "Image Url
Front", ...). Both are mapped onto SwuCard.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

from cards.models import (
    CardImages,
    coerce_bool,
    coerce_number,
    coerce_string_list,
    first_present,
    string_or_empty,
)

_TRAIT_KEY = re.compile(r"^trait\d+$", re.IGNORECASE)

SET_NAMES = {
    "SOR": "Spark of Rebellion",
    "SHD": "Shadows of the Galaxy",
    "TWI": "Twilight of the Republic",
    "JTL": "Jump to Lightspeed",
    "LOF": "Legends of the Force",
}


@dataclass(frozen=True)
class SwuCard:
    set_code: str
    number: int
    code: str
    name: str
    title: str = ""
    full_name: str = ""
    type: str = ""
    rarity: str = ""
    arena: str = ""
    unique: bool = False
    aspects: Tuple[str, ...] = ()
    cost: Optional[float] = None
    power: Optional[float] = None
    hp: Optional[float] = None
    traits: Tuple[str, ...] = ()
    text_front: str = ""
    text_back: str = ""
    double_sided: bool = False
    images: CardImages = field(default_factory=CardImages)
    landscape_front: bool = False
    landscape_back: bool = False
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def display_name(self) -> str:
        return self.full_name or self.name

    @property
    def set_label(self) -> str:
        return self.set_code


def format_card_code(set_code: str, number: int) -> str:
    return f"{set_code.upper()}-{number:03d}"


def normalize_set_code(value: Any) -> str:
    raw = string_or_empty(value).upper()
    if re.fullmatch(r"[A-Z0-9]{2,5}", raw):
        return raw
    return re.sub(r"[^A-Z0-9]", "", raw)[:5]


def normalize_card_number(value: Any) -> Optional[int]:
    number = coerce_number(value)
    if number is None:
        return None
    number = int(number)
    if number <= 0 or number > 999:
        return None
    return number


def build_full_name(name: str, title: str) -> str:
    if name and title:
        return f"{name}, {title}"
    return name or title


def _nested_url(value: Any) -> Any:
    if isinstance(value, Mapping):
        return value.get("url")
    return None


def _nested_flag(value: Any, key: str) -> bool:
    return isinstance(value, Mapping) and coerce_bool(value.get(key))


def _aspects(raw: Mapping[str, Any]) -> Tuple[str, ...]:
    listed = first_present(raw, "Aspects", "aspects")
    if listed is not None:
        values = coerce_string_list(listed)
    else:
        values = coerce_string_list(
            [
                first_present(raw, "Aspect1", "aspect1"),
                first_present(raw, "Aspect2", "aspect2"),
            ]
        )
    return tuple(value.lower() for value in values)


def _traits(raw: Mapping[str, Any]) -> Tuple[str, ...]:
    listed = first_present(raw, "Traits", "traits")
    if listed is not None:
        return coerce_string_list(listed)
    return tuple(
        string_or_empty(value)
        for key, value in raw.items()
        if _TRAIT_KEY.match(str(key)) and string_or_empty(value)
    )


def _arena(raw: Mapping[str, Any]) -> str:
    value = first_present(raw, "Arenas", "Arena", "arena", "arenas")
    if isinstance(value, (list, tuple)):
        value = value[0] if value else ""
    return string_or_empty(value).lower()


def normalize_swu_card(raw: Mapping[str, Any]) -> Optional[SwuCard]:
    """Build a SwuCard from an upstream row.

    Rows without a set, a valid number or any name are skipped, as are
    alternate-art variants (Hyperspace, Showcase, ...) that would otherwise
    make every name ambiguous.
    """
    variant = string_or_empty(first_present(raw, "VariantType", "variantType"))
    if variant and variant.lower() != "normal":
        return None

    set_code = normalize_set_code(first_present(raw, "Set", "set"))
    number = normalize_card_number(first_present(raw, "Number", "#", "number", "no"))
    name = string_or_empty(first_present(raw, "Name", "Card Name", "name"))
    title = string_or_empty(
        first_present(raw, "Subtitle", "Title", "subtitle", "title")
    )
    if not set_code or number is None or not (name or title):
        return None

    card_type = string_or_empty(first_present(raw, "Type", "type", "cardType")).lower()

    front_landscape = first_present(raw, "Front Landscape", "frontLandscape")
    if front_landscape is not None:
        landscape_front = coerce_bool(front_landscape)
    else:
        landscape_front = _nested_flag(raw.get("image"), "horizontal") or card_type in (
            "leader",
            "base",
        )
    landscape_back = coerce_bool(
        first_present(raw, "Back Landscape", "backLandscape")
    ) or _nested_flag(raw.get("imageBackside"), "horizontal")

    return SwuCard(
        set_code=set_code,
        number=number,
        code=format_card_code(set_code, number),
        name=name,
        title=title,
        full_name=build_full_name(name, title),
        type=card_type,
        rarity=string_or_empty(first_present(raw, "Rarity", "rarity")).upper(),
        arena=_arena(raw),
        unique=coerce_bool(first_present(raw, "Unique", "unique")),
        aspects=_aspects(raw),
        cost=coerce_number(first_present(raw, "Cost", "cost")),
        power=coerce_number(first_present(raw, "Power", "power")),
        hp=coerce_number(first_present(raw, "HP", "hp")),
        traits=_traits(raw),
        text_front=string_or_empty(
            first_present(
                raw, "FrontText", "Front Text", "textFront", "front_text", "frontText"
            )
        ),
        text_back=string_or_empty(
            first_present(
                raw, "BackText", "Back Text", "textBack", "back_text", "backText"
            )
        ),
        double_sided=coerce_bool(first_present(raw, "DoubleSided", "doubleSided")),
        images=CardImages(
            front=string_or_empty(
                first_present(
                    raw, "FrontArt", "Image Url Front", "imageUrlFront", "image_front"
                )
                or _nested_url(raw.get("image"))
            ),
            back=string_or_empty(
                first_present(
                    raw,
                    "BackArt",
                    "Image Url back",
                    "Image Url Back",
                    "imageUrlBack",
                    "image_back",
                )
                or _nested_url(raw.get("imageBackside"))
            ),
        ),
        landscape_front=landscape_front,
        landscape_back=landscape_back,
        raw=dict(raw),
    )
