"""Shared pieces of the per-game card records.

Each game keeps its own card dataclass (see plugins/<game>/cards.py); this
module holds what they share: image references and the coercion helpers
that turn loosely-typed upstream JSON into clean values.
"""

import html
import re
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

Number = Union[int, float]

_TAG = re.compile(r"<[^>]+>")
_STAR_MARKERS = {"*", "★", "x", "X"}


@dataclass(frozen=True)
class CardImages:
    """Front/back image URLs or local paths (either may be empty)."""

    front: str = ""
    back: str = ""


def string_or_empty(value: Any) -> str:
    """Trimmed string form of a value; None becomes ""."""
    if value is None:
        return ""
    return str(value).strip()


def first_present(raw: Mapping[str, Any], *keys: str) -> Any:
    """Value of the first key present with a non-None value.

    Upstream card exports disagree on field names ("Name", "Card Name", "name"),
    so callers list every spelling they accept.

    Examples:
        >>> first_present({"Card Name": "Vader"}, "Name", "Card Name", "name")
        'Vader'
    """
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def coerce_number(value: Any) -> Optional[Number]:
    """Coerce a number or numeric string; anything else is None.

    Zero stays 0 rather than collapsing to None.

    Examples:
        >>> coerce_number("3")
        3
        >>> coerce_number(0)
        0
        >>> coerce_number("X") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value

    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return None


def coerce_stat(value: Any, star: Any = None) -> Tuple[Optional[Number], bool]:
    """Coerce a gameplay stat into (value, is_star).

    A star marker ("*") has no numeric value, so it becomes (None, True).
    An explicit star flag from upstream wins over the value.

    Examples:
        >>> coerce_stat("*")
        (None, True)
        >>> coerce_stat(0)
        (0, False)
        >>> coerce_stat(1, star=True)
        (1, True)
    """
    if isinstance(value, str) and value.strip() in _STAR_MARKERS:
        return None, True
    return coerce_number(value), coerce_bool(star)


def coerce_bool(value: Any) -> bool:
    """Interpret True/"true"/"yes"/1 as True."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return string_or_empty(value).lower() in ("true", "yes", "1")


def coerce_string_list(value: Any) -> Tuple[str, ...]:
    """Normalize a list or a delimited string into a tuple of strings."""
    if value is None:
        return ()
    if isinstance(value, str):
        parts: Iterable[Any] = re.split(r"[,;]", value)
    elif isinstance(value, (list, tuple)):
        parts = value
    else:
        parts = [value]
    return tuple(text for text in (string_or_empty(part) for part in parts) if text)


def strip_html(text: str) -> str:
    """Remove HTML tags and entities from rules text for one-line display.

    Examples:
        >>> strip_html("<b>Hero Action</b>: Draw 1 card.<br/>Max 1.")
        'Hero Action: Draw 1 card. Max 1.'
    """
    if not text:
        return ""
    without_tags = _TAG.sub(" ", text)
    unescaped = html.unescape(without_tags)
    collapsed = re.sub(r"\s+", " ", unescaped).strip()
    return re.sub(r"\s+([.,:;!?])", r"\1", collapsed)


def render_number(value: Any) -> str:
    """Render 3.0 as "3" and leave other values as they are."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def capitalize_first(value: str) -> str:
    return value[:1].upper() + value[1:] if value else ""
