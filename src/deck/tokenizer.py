"""Single-line tokenizer for deck lists.

Accepted card lines:
    2 Backflip
    2x Backflip (core, 3)
    3 × Heroic Intuition [skipback]
    1 Energy Barrier [01043a]
    1 Heroic Rescue [All, skipproxy]

In zones the game marks as single-card (SWU leader/base), a bare name is a
count-1 entry. Anything else is prose and yields None.
"""

import re
from typing import List, Optional, Tuple

from .models import Annotations, DeckEntry, EntrySource, Section

_COUNT_WITH_MULTIPLIER = re.compile(r"^(\d+)\s*[xX×]\s+(.+)$")
_COUNT_GLUED_MULTIPLIER = re.compile(r"^(\d+)[xX×](.+)$")
_COUNT_WITH_SPACE = re.compile(r"^(\d+)\s+(.+)$")

_TRAILING_BRACKETS = re.compile(r"^(.*?)((?:\s*\[[^\]]*\])+)\s*$")
_BRACKET_CONTENT = re.compile(r"\[([^\]]*)\]")

KEYWORD_FLAGS = {
    "all": "match_all",
    "skipproxy": "skip_proxy",
    "skipback": "skip_back",
    "ignorefordecklimit": "ignore_deck_limit",
    "permanent": "permanent",
}


def split_count(text: str) -> Optional[Tuple[int, str]]:
    """Split "2x Name" / "2 Name" into (count, rest)."""
    for pattern in (_COUNT_WITH_MULTIPLIER, _COUNT_GLUED_MULTIPLIER, _COUNT_WITH_SPACE):
        match = pattern.match(text)
        if match:
            return int(match.group(1)), match.group(2).strip()
    return None


def split_brackets(text: str) -> Tuple[str, List[str]]:
    """Separate trailing "[...]" blocks from a name.

    Bracket contents are split on commas; empty tokens are dropped.

    Examples:
        >>> split_brackets("Heroic Rescue [All, skipproxy][note]")
        ('Heroic Rescue', ['All', 'skipproxy', 'note'])
    """
    match = _TRAILING_BRACKETS.match(text)
    if not match:
        return text.strip(), []

    tokens = []
    for content in _BRACKET_CONTENT.findall(match.group(2)):
        for token in content.split(","):
            token = token.strip()
            if token:
                tokens.append(token)
    return match.group(1).strip(), tokens


def build_annotations(tokens: List[str]) -> Annotations:
    """Map bracket keyword tokens onto Annotations flags."""
    flags = {}
    for token in tokens:
        flag = KEYWORD_FLAGS.get(token.lower())
        if flag:
            flags[flag] = True
    return Annotations(keywords=tuple(tokens), **flags)


def parse_deck_line(
    text: str,
    section: Section = Section.OTHER,
    game=None,
    source: Optional[EntrySource] = None,
) -> Optional[DeckEntry]:
    """Parse one comment-free, non-directive line into a DeckEntry.

    Args:
        text: Trimmed line content
        section: Zone the line appears in
        game: Game plugin supplying code shape and name hint rules
        source: Provenance attached to the entry

    Returns:
        DeckEntry, or None when the line is not a card line
    """
    text = (text or "").strip()
    if not text:
        return None

    counted = split_count(text)
    if counted is not None:
        count, rest = counted
        if count <= 0:
            return None
    elif game is not None and section in game.single_card_sections:
        count, rest = 1, text
    else:
        return None

    name, tokens = split_brackets(rest)
    if not name:
        return None

    code = None
    keywords = []
    for token in tokens:
        if (
            code is None
            and token.lower() not in KEYWORD_FLAGS
            and game is not None
            and game.looks_like_code(token)
        ):
            code = token
            continue
        keywords.append(token)

    hint = None
    if game is not None:
        if code is None:
            code = game.infer_code(name)
        name, hint = game.split_name_hint(name)

    return DeckEntry(
        count=count,
        name=name,
        code=code,
        hint=hint,
        annotations=build_annotations(keywords),
        section=section,
        source=source or EntrySource(text=text),
    )
