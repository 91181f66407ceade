"""Card name normalization and disambiguation hints.

Deck exports often append where a card was printed:
- MarvelCDB: "Backflip (core, 3)", "Maria Hill (Core Set, 12)"
- SWU tools: "Luke Skywalker (SOR) 5", "Vader (SHD-010)"

These helpers split such suffixes off the display name and turn them into
structured hints the resolver can filter candidates with.
"""

import re
from typing import Optional, Tuple

from .models import PackHint, SetNumberHint

# Trailing "(...)" containing at least one digit; "(Peter Parker)" is left alone.
_PACK_SUFFIX = re.compile(r"\s*\(([^)]*\d[^)]*)\)\s*$")

_SET_NUMBER_SUFFIX = re.compile(r"\s*\(([^)]*[A-Z]{2,4}[^)]*\d[^)]*)\)\s*$")
_CODE_SUFFIX = re.compile(r"\s*\(\s*([A-Za-z]{3,5}[_-]\d{1,3})\s*\)\s*$")
_SET_NUMBER_HINT = re.compile(r"\b([A-Za-z]{2,4})\s*[-#_]?\s*(\d{1,3})\b")
_SET_ONLY_HINT = re.compile(r"^\s*([A-Za-z]{2,4})\s*$")
_SET_NUMBER_CODE = re.compile(r"^([A-Z]{3,5})[_-](\d{1,3})$")

_SEPARATORS = re.compile(r"\s+[-]\s+|[,:—–]")
_WHITESPACE = re.compile(r"\s+")


def normalize_card_key(text: str) -> str:
    """Build the case-insensitive lookup key for a card name.

    Commas, colons, em/en dashes and spaced hyphens all count as the same
    separator, so "Name — Sub", "Name, Sub" and "Name: Sub" share one key.

    Examples:
        >>> normalize_card_key("Darth Vader, Dark Lord of the Sith")
        'darth vader dark lord of the sith'
        >>> normalize_card_key("Darth Vader — Dark Lord of the Sith")
        'darth vader dark lord of the sith'
    """
    if not text:
        return ""
    key = _SEPARATORS.sub(" ", text.casefold())
    return _WHITESPACE.sub(" ", key).strip()


def parse_pack_position_hint(suffix: str) -> Optional[PackHint]:
    """Parse "core, 3" / "Core Set 3" / "core" into a PackHint.

    Examples:
        >>> parse_pack_position_hint("core, 3")
        PackHint(pack_code='core', pack_name=None, position=3, raw='core, 3')
        >>> parse_pack_position_hint("Core Set, 3").pack_name
        'Core Set'
    """
    raw = (suffix or "").strip()
    if not raw:
        return None

    if "," in raw:
        pack_part, position_part = raw.split(",", 1)
        pack_part = pack_part.strip()
        position_part = position_part.strip()
    else:
        tokens = raw.split()
        if tokens and tokens[-1].isdigit():
            position_part = tokens[-1]
            pack_part = " ".join(tokens[:-1]).strip()
        else:
            position_part = ""
            pack_part = raw

    position = int(position_part) if position_part.isdigit() else None
    normalized_pack = pack_part.lower()
    is_code = bool(normalized_pack) and bool(re.fullmatch(r"[a-z0-9]+", normalized_pack))

    return PackHint(
        pack_code=normalized_pack if is_code else None,
        pack_name=None if is_code else (pack_part or None),
        position=position,
        raw=raw,
    )


def split_pack_suffix(raw_name: str) -> Tuple[str, Optional[PackHint]]:
    """Strip a MarvelCDB pack/position suffix from a name.

    Examples:
        >>> split_pack_suffix("Backflip (core, 3)")
        ('Backflip', PackHint(pack_code='core', pack_name=None, position=3, raw='core, 3'))
        >>> split_pack_suffix("Spider-Man (Peter Parker)")
        ('Spider-Man (Peter Parker)', None)
    """
    raw = (raw_name or "").strip()
    match = _PACK_SUFFIX.search(raw)
    if not match:
        return raw, None

    name = raw[: match.start()].strip()
    hint = parse_pack_position_hint(match.group(1))
    return (name or raw), hint


def parse_set_number_hint(text: str) -> Optional[SetNumberHint]:
    """Parse "SOR 12", "SOR-012", "sor_12" or bare "SOR" into a SetNumberHint."""
    raw = (text or "").strip()
    match = _SET_NUMBER_HINT.search(raw)
    if match:
        return SetNumberHint(set_code=match.group(1).upper(), number=int(match.group(2)))

    set_only = _SET_ONLY_HINT.match(raw)
    if set_only:
        return SetNumberHint(set_code=set_only.group(1).upper(), number=None)
    return None


def split_set_number_suffix(raw_name: str) -> Tuple[str, Optional[SetNumberHint]]:
    """Strip a set/number suffix like "(SOR-012)" or "(SOR) 12" from a name.

    Examples:
        >>> split_set_number_suffix("Luke Skywalker (SOR) 5")
        ('Luke Skywalker', SetNumberHint(set_code='SOR', number=5))
        >>> split_set_number_suffix("Vader (SHD-010)")
        ('Vader', SetNumberHint(set_code='SHD', number=10))
    """
    raw = (raw_name or "").strip()

    match = _SET_NUMBER_SUFFIX.search(raw) or _CODE_SUFFIX.search(raw)
    if match:
        hint = parse_set_number_hint(match.group(1))
        if hint is not None:
            name = raw[: match.start()].strip()
            return (name or raw), hint

    # "(SOR) 12": set code alone in parentheses, number after
    trailing = re.search(r"\s*\(\s*([A-Za-z]{2,4})\s*\)\s*(\d{1,3})\s*$", raw)
    if trailing:
        name = raw[: trailing.start()].strip()
        hint = SetNumberHint(
            set_code=trailing.group(1).upper(), number=int(trailing.group(2))
        )
        return (name or raw), hint

    return raw, None


def parse_set_number_code(text: str) -> Optional[str]:
    """Normalize "sor_5" / "SOR-005" to "SOR-005"; None if not code-shaped.

    Examples:
        >>> parse_set_number_code("sor_5")
        'SOR-005'
        >>> parse_set_number_code("Vader") is None
        True
    """
    raw = (text or "").strip().upper()
    match = _SET_NUMBER_CODE.match(raw)
    if not match:
        return None

    number = int(match.group(2))
    if number <= 0:
        return None
    return f"{match.group(1)}-{number:03d}"
