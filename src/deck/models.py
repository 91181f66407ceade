"""Deck list data model.

A parsed deck list is an ordered sequence of DeckEntry records (one per card
line) interleaved with PageBreak markers. Entries are immutable once the
tokenizer has produced them.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple, Union


class Section(str, Enum):
    """Logical deck zone an entry belongs to."""

    LEADER = "leader"
    BASE = "base"
    DECK = "deck"
    SIDEBOARD = "sideboard"
    OTHER = "other"


@dataclass(frozen=True)
class PackHint:
    """Pack/position hint from a suffix like "(core, 3)"."""

    pack_code: Optional[str] = None
    pack_name: Optional[str] = None
    position: Optional[int] = None
    raw: str = ""


@dataclass(frozen=True)
class SetNumberHint:
    """Set/number hint from a suffix like "(SOR) 12"."""

    set_code: Optional[str] = None
    number: Optional[int] = None


Hint = Union[PackHint, SetNumberHint]


@dataclass(frozen=True)
class Annotations:
    """Bracket keywords attached to a deck line.

    Attributes:
        skip_proxy: Leave the card out of proxy sheets ([skipproxy])
        skip_back: Print the front face only ([skipback])
        match_all: Resolve to every matching card ([All])
        ignore_deck_limit: Do not count toward deck size ([ignoreForDeckLimit])
        permanent: Permanent card, also outside the deck limit ([permanent])
        keywords: Every non-code bracket token, unrecognized ones verbatim
    """

    skip_proxy: bool = False
    skip_back: bool = False
    match_all: bool = False
    ignore_deck_limit: bool = False
    permanent: bool = False
    keywords: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "skipProxy": self.skip_proxy,
            "skipBack": self.skip_back,
            "matchAll": self.match_all,
            "ignoreDeckLimit": self.ignore_deck_limit,
            "permanent": self.permanent,
            "keywords": list(self.keywords),
        }


@dataclass(frozen=True)
class EntrySource:
    """Where a deck entry came from, for error messages."""

    file: Optional[Path] = None
    line: Optional[int] = None
    text: str = ""

    def label(self, relative_to: Optional[Path] = None) -> str:
        """Render as "file:line", "file" or "line N"."""
        display = ""
        if self.file is not None:
            display = str(self.file)
            base = relative_to or Path.cwd()
            try:
                display = str(Path(self.file).resolve().relative_to(base.resolve()))
            except ValueError:
                pass

        if display and self.line is not None:
            return f"{display}:{self.line}"
        if display:
            return display
        if self.line is not None:
            return f"line {self.line}"
        return ""


@dataclass(frozen=True)
class DeckEntry:
    """One card line of a deck list."""

    count: int
    name: str
    code: Optional[str] = None
    hint: Optional[Hint] = None
    annotations: Annotations = field(default_factory=Annotations)
    section: Section = Section.OTHER
    source: EntrySource = field(default_factory=EntrySource)

    @property
    def match_all(self) -> bool:
        return self.annotations.match_all

    def sort_key(self) -> Tuple[str, int, str]:
        """(file, line, name) ordering used for deterministic diagnostics."""
        file_part = str(self.source.file) if self.source.file is not None else ""
        return (file_part, self.source.line or 0, self.name)

    def to_dict(self) -> dict:
        data = {
            "count": self.count,
            "name": self.name,
            "section": self.section.value,
            "annotations": self.annotations.to_dict(),
        }
        if self.code:
            data["code"] = self.code
        if self.source.file is not None or self.source.line is not None:
            data["source"] = {
                "file": str(self.source.file) if self.source.file else None,
                "line": self.source.line,
            }
        return data


@dataclass(frozen=True)
class PageBreak:
    """Forces a new physical page in proxy output."""

    proxy_page_break: bool = True

    def to_dict(self) -> dict:
        return {"proxyPageBreak": True}


DeckItem = Union[DeckEntry, PageBreak]


@dataclass(frozen=True)
class Diagnostic:
    """A warning or info message returned to the caller instead of logged."""

    level: str
    message: str

    def to_dict(self) -> dict:
        return {"level": self.level, "message": self.message}
