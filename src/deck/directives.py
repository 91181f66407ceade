"""Structural directives inside deck lists.

Recognized (case-insensitive, after comments are stripped):
- "[proxypagebreak]" forces a new page in proxy output
- "[include:path]" splices another deck list in place
- Section headers: "Leader", "Base", "Deck", "Main Deck", "Sideboard" (plurals
  and a trailing colon allowed)
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .models import Section

_PAGE_BREAK = re.compile(r"^\[\s*proxypagebreak\s*\]$", re.IGNORECASE)
_INCLUDE = re.compile(r"^\[\s*include\s*:\s*(.+?)\s*\]$", re.IGNORECASE)
_SECTION_HEADER = re.compile(
    r"^(leaders?|bases?|deck|main\s+deck|sideboard)\s*:?$", re.IGNORECASE
)

_SECTION_NAMES = {
    "leader": Section.LEADER,
    "leaders": Section.LEADER,
    "base": Section.BASE,
    "bases": Section.BASE,
    "deck": Section.DECK,
    "main deck": Section.DECK,
    "sideboard": Section.SIDEBOARD,
}


@dataclass(frozen=True)
class PageBreakDirective:
    pass


@dataclass(frozen=True)
class IncludeDirective:
    target: str


@dataclass(frozen=True)
class SectionDirective:
    section: Section


Directive = Union[PageBreakDirective, IncludeDirective, SectionDirective]


def parse_directive(text: str) -> Optional[Directive]:
    """Classify comment-free line text as a directive, or return None.

    Examples:
        >>> parse_directive("[ProxyPageBreak]")
        PageBreakDirective()
        >>> parse_directive("[include: shared/villains]")
        IncludeDirective(target='shared/villains')
        >>> parse_directive("Main Deck:")
        SectionDirective(section=<Section.DECK: 'deck'>)
    """
    stripped = text.strip()
    if not stripped:
        return None

    if _PAGE_BREAK.match(stripped):
        return PageBreakDirective()

    include = _INCLUDE.match(stripped)
    if include:
        return IncludeDirective(target=include.group(1))

    header = _SECTION_HEADER.match(stripped)
    if header:
        key = re.sub(r"\s+", " ", header.group(1).lower())
        return SectionDirective(section=_SECTION_NAMES[key])

    return None


def resolve_include_path(target: str, base_dir: Path) -> Path:
    """Resolve an include target relative to the including file's directory.

    ".txt" is appended when the target has no extension. The result is an
    absolute, normalized path suitable for cycle detection.
    """
    path = Path(target).expanduser()
    if not path.suffix:
        path = path.with_name(path.name + ".txt")
    if not path.is_absolute():
        path = base_dir / path
    return path.resolve()
