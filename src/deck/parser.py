"""Deck list parsing with include expansion.

Supports:
- Card lines: "2 Backflip", "2x Backflip (core, 3)", "1 Vader [SOR-010]"
- Comments: "#", "//" and "/* ... */" (block comments may span lines)
- Generated annotation lines ("//? ..."), which are ignored
- Directives: "[proxypagebreak]", "[include:path]" and section headers

Includes are expanded with an explicit stack of open files instead of
recursion. A file that is already open higher up the stack is skipped, so
A -> B -> A terminates after one pass over each file.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from core.logging import get_logger
from errors import DeckParsingError

from .comments import CommentState, is_annotation_line, visible_text
from .directives import (
    IncludeDirective,
    PageBreakDirective,
    SectionDirective,
    parse_directive,
    resolve_include_path,
)
from .models import DeckEntry, DeckItem, Diagnostic, EntrySource, PageBreak, Section
from .tokenizer import parse_deck_line

logger = get_logger(__name__)


@dataclass
class ParsedDeck:
    """Entries and page breaks in list order, plus parse diagnostics."""

    items: List[DeckItem] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def entries(self) -> List[DeckEntry]:
        return [item for item in self.items if isinstance(item, DeckEntry)]


@dataclass
class _Frame:
    lines: List[str]
    path: Optional[Path]
    base_dir: Path
    section: Section
    index: int = 0
    state: CommentState = CommentState.NORMAL


def split_lines(text: str) -> List[str]:
    """Split on "\\n" and drop a trailing "\\r", keeping blank lines."""
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def read_deck_text(path: Path) -> str:
    """Read a deck file as UTF-8 without translating line endings."""
    with open(path, "r", encoding="utf-8-sig", newline="") as handle:
        return handle.read()


def parse_deck_text(
    text: str,
    game,
    *,
    base_dir: Optional[Path] = None,
    source_path: Optional[Path] = None,
    initial_section: Section = Section.OTHER,
    warn_on_missing_include: bool = True,
) -> ParsedDeck:
    """Parse deck list text into entries, expanding includes.

    Args:
        text: Deck list text
        game: Game plugin providing code and hint rules
        base_dir: Directory include targets are relative to (defaults to the
            source file's directory, then the working directory)
        source_path: File the text came from, recorded on each entry
        initial_section: Zone to start in
        warn_on_missing_include: Report unreadable include targets as warnings

    Returns:
        ParsedDeck with entries, page breaks and diagnostics
    """
    if source_path is not None:
        source_path = Path(source_path).resolve()
    if base_dir is None:
        base_dir = source_path.parent if source_path is not None else Path.cwd()

    result = ParsedDeck()
    root = _Frame(split_lines(text or ""), source_path, Path(base_dir), initial_section)
    stack = [root]
    open_paths = {source_path} if source_path is not None else set()

    while stack:
        frame = stack[-1]
        if frame.index >= len(frame.lines):
            stack.pop()
            open_paths.discard(frame.path)
            continue

        line = frame.lines[frame.index]
        frame.index += 1
        line_number = frame.index

        if frame.state is CommentState.NORMAL and is_annotation_line(line):
            continue

        content, frame.state = visible_text(line, frame.state)
        if not content:
            continue

        directive = parse_directive(content)
        if isinstance(directive, PageBreakDirective):
            result.items.append(PageBreak())
            continue
        if isinstance(directive, SectionDirective):
            frame.section = directive.section
            continue
        if isinstance(directive, IncludeDirective):
            include_path = resolve_include_path(directive.target, frame.base_dir)
            if include_path in open_paths:
                logger.debug("Skipping recursive include of {}", include_path)
                continue
            try:
                include_text = read_deck_text(include_path)
            except OSError as error:
                where = EntrySource(frame.path, line_number).label()
                logger.debug("Include {} unreadable: {}", include_path, error)
                if warn_on_missing_include:
                    result.diagnostics.append(
                        Diagnostic(
                            "warning",
                            f"{where}: skipped [include:{directive.target}], "
                            f"could not read {include_path}",
                        )
                    )
                continue

            open_paths.add(include_path)
            stack.append(
                _Frame(
                    split_lines(include_text),
                    include_path,
                    include_path.parent,
                    frame.section,
                )
            )
            continue

        entry = parse_deck_line(
            content,
            frame.section,
            game,
            source=EntrySource(frame.path, line_number, line),
        )
        if entry is not None:
            result.items.append(entry)

    return result


def parse_deck_file(path: Path, game, **options) -> ParsedDeck:
    """Parse a deck file, expanding includes relative to its directory.

    Raises:
        DeckParsingError: If the file cannot be read
    """
    path = Path(path)
    try:
        text = read_deck_text(path)
    except FileNotFoundError as error:
        raise DeckParsingError(f"Deck file not found: {path}") from error
    except OSError as error:
        raise DeckParsingError(f"Could not read deck file '{path}': {error}") from error

    return parse_deck_text(text, game, source_path=path, **options)


def count_cards(entries: List[DeckEntry]) -> int:
    """Count total cards in a list of entries.

    Examples:
        >>> count_cards([DeckEntry(count=3, name="Backflip"), DeckEntry(count=1, name="Haymaker")])
        4
    """
    return sum(entry.count for entry in entries if isinstance(entry, DeckEntry))
