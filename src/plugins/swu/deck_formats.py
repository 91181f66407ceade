"""Star Wars: Unlimited deck list conventions.

Codes are a set code plus collector number ("SOR-010", "sor_10", legacy
"SOR010"); a bare number ("[10]") is accepted when it is unique across sets.
Deck exports group cards under Leader/Base/Deck/Sideboard headers.
"""

import re
from typing import List, Optional, Tuple

from deck.models import SetNumberHint
from deck.names import parse_set_number_code, split_set_number_suffix

SWU_CODE = re.compile(r"^([A-Z]{2,5})[-_]?(\d{1,3})$")
SWU_NUMBER = re.compile(r"^\d{1,3}$")


def looks_like_swu_code(token: str) -> bool:
    compact = re.sub(r"\s+", "", (token or "").upper())
    return bool(SWU_CODE.match(compact) or SWU_NUMBER.match(compact))


def infer_swu_code(name: str) -> Optional[str]:
    """A name that is itself a code, e.g. "1 SOR-005"."""
    return parse_set_number_code(name)


def split_swu_name(name: str) -> Tuple[str, Optional[SetNumberHint]]:
    return split_set_number_suffix(name)


def numeric_code_key(value: str) -> str:
    raw = (value or "").strip()
    return raw.zfill(3) if SWU_NUMBER.match(raw) else ""


def swu_code_keys(code: str) -> List[str]:
    """Lookup keys for a typed code: the full "SET-NNN" form, then a bare number.

    Examples:
        >>> swu_code_keys("sor_5")
        ['SOR-005']
        >>> swu_code_keys("10")
        ['10', '010']
    """
    compact = re.sub(r"\s+", "", (code or "").upper())
    match = SWU_CODE.match(compact)
    if match:
        return [f"{match.group(1)}-{int(match.group(2)):03d}"]

    keys = [compact]
    numeric = numeric_code_key(compact)
    if numeric and numeric not in keys:
        keys.append(numeric)
    return keys
