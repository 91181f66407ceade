"""Write card summaries under deck list lines.

Each card line gets a generated "//? " line directly beneath it, indented like
the card line. Existing "//? " lines under a card line are replaced, so
annotating an annotated file changes nothing. Included files are not touched;
only the lines of the given text are annotated.
"""

from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from cards.resolver import CardResolver
from core.logging import get_logger
from deck.comments import (
    ANNOTATION_PREFIX,
    CommentState,
    is_annotation_line,
    visible_text,
)
from deck.directives import SectionDirective, parse_directive
from deck.models import DeckEntry, EntrySource, Section
from deck.parser import split_lines
from deck.tokenizer import parse_deck_line
from errors import CardResolutionError

from .deck import raise_for_failures

logger = get_logger(__name__)

BOM = "\ufeff"


def detect_newline(text: str) -> str:
    return "\r\n" if "\r\n" in text else "\n"


def _leading_whitespace(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


def iter_card_lines(
    lines: List[str], game, source_path: Optional[Path] = None
) -> Iterator[Tuple[int, DeckEntry]]:
    """Yield (line index, entry) for every card line, tracking sections and comments."""
    state = CommentState.NORMAL
    section = Section.OTHER

    for index, line in enumerate(lines):
        if state is CommentState.NORMAL and is_annotation_line(line):
            continue

        content, state = visible_text(line, state)
        if not content:
            continue

        directive = parse_directive(content)
        if isinstance(directive, SectionDirective):
            section = directive.section
            continue
        if directive is not None:
            continue

        entry = parse_deck_line(
            content, section, game, source=EntrySource(source_path, index + 1, line)
        )
        if entry is not None:
            yield index, entry


def resolve_card_lines(
    lines: List[str], resolver: CardResolver, game, source_path: Optional[Path] = None
) -> Dict[int, List]:
    """Resolve every card line, or raise one error listing all failures.

    Raises:
        DeckResolutionError: If any card line is not found or ambiguous
    """
    resolved: Dict[int, List] = {}
    failures: List[CardResolutionError] = []

    for index, entry in iter_card_lines(lines, game, source_path):
        try:
            resolved[index] = resolver.resolve_all(entry).cards
        except CardResolutionError as error:
            failures.append(error)

    raise_for_failures(failures)
    return resolved


def annotate_deck_text(
    text: str,
    resolver: CardResolver,
    game,
    source_path: Optional[Path] = None,
    core_status: bool = False,
) -> str:
    """Return the deck text with a "//? " summary under each card line.

    Line endings, the trailing newline and a leading byte order mark are
    kept as they were.

    Args:
        text: Deck list text as read from disk (newline="")
        resolver: Resolver over the game's card index
        game: Game plugin that formats the summaries
        source_path: File the text came from, used in error messages
        core_status: Prefix Marvel summaries with [Core]/[Not Core]

    Raises:
        DeckResolutionError: If any card line cannot be resolved; nothing is
            written in that case
    """
    bom = BOM if text.startswith(BOM) else ""
    body = text[len(bom):]
    newline = detect_newline(body)
    lines = split_lines(body)

    resolved = resolve_card_lines(lines, resolver, game, source_path)

    output: List[str] = []
    index = 0
    while index < len(lines):
        line = lines[index]
        output.append(line)
        index += 1

        cards = resolved.get(index - 1)
        if cards is None:
            continue

        while index < len(lines) and is_annotation_line(lines[index]):
            index += 1

        indent = _leading_whitespace(line)
        for card in cards:
            comment = game.build_card_comment(
                card, resolver.index, core_status=core_status
            )
            comment = " ".join(comment.split())
            output.append(f"{indent}{ANNOTATION_PREFIX}{comment}")

    logger.debug("Annotated {} card lines", len(resolved))
    return bom + newline.join(output)
