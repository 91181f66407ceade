"""Deck list parsing: comments, directives, line tokenizing and name hints."""

from .models import (
    Annotations,
    DeckEntry,
    Diagnostic,
    EntrySource,
    PackHint,
    PageBreak,
    Section,
    SetNumberHint,
)
from .names import normalize_card_key
from .parser import ParsedDeck, count_cards, parse_deck_file, parse_deck_text
from .tokenizer import parse_deck_line

__all__ = [
    "Annotations",
    "DeckEntry",
    "Diagnostic",
    "EntrySource",
    "PackHint",
    "PageBreak",
    "ParsedDeck",
    "Section",
    "SetNumberHint",
    "count_cards",
    "normalize_card_key",
    "parse_deck_file",
    "parse_deck_line",
    "parse_deck_text",
]
