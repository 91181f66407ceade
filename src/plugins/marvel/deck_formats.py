"""Marvel Champions deck list conventions.

Codes are five digits with an optional face letter ("01001a", "01043").
MarvelCDB "download as text" exports append "(pack, position)" to names.
"""

import re
from typing import List, Optional, Tuple

from deck.models import PackHint
from deck.names import split_pack_suffix

MARVEL_CODE = re.compile(r"^(\d{1,5})([a-z]?)$", re.IGNORECASE)
FACES = ("a", "b")


def looks_like_marvel_code(token: str) -> bool:
    return bool(MARVEL_CODE.match((token or "").strip()))


def split_marvel_name(name: str) -> Tuple[str, Optional[PackHint]]:
    return split_pack_suffix(name)


def marvel_code_keys(code: str, default_face: str = "a") -> List[str]:
    """Lookup keys for a typed code, most specific first.

    Short numbers are padded to five digits; a code without a face letter
    also tries the default face.

    Examples:
        >>> marvel_code_keys("1001")
        ['1001', '01001', '1001a', '01001a']
        >>> marvel_code_keys("01001B")
        ['01001b']
    """
    raw = (code or "").strip().lower()
    keys = [raw]

    match = MARVEL_CODE.match(raw)
    if match:
        digits, face = match.groups()
        padded = digits.zfill(5) + face
        keys.append(padded)
        if not face and default_face in FACES:
            keys.append(raw + default_face)
            keys.append(padded + default_face)

    unique = []
    for key in keys:
        if key and key not in unique:
            unique.append(key)
    return unique
