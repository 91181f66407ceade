"""Comment handling for deck list text.

Deck lists accept three comment styles:
- Line comments starting with "#" or "//" (escape with a backslash to keep them)
- Block comments "/* ... */", which may span several lines
- Annotation lines starting with "//? ", written by the annotate command

Block comment tracking is a two-state machine: strip_block_comments() takes the
state carried over from the previous line and returns the state for the next one.
"""

import re
from enum import Enum
from typing import Tuple

ANNOTATION_PREFIX = "//? "

_ANNOTATION_LINE = re.compile(r"^\s*//\?\s")


class CommentState(Enum):
    """Whether the scanner is inside a /* */ block at a line boundary."""

    NORMAL = "normal"
    IN_BLOCK_COMMENT = "in_block_comment"


def strip_block_comments(line: str, state: CommentState) -> Tuple[str, CommentState]:
    """Remove /* */ spans from one line.

    Args:
        line: Raw line text, without its line ending
        state: State carried in from the previous line

    Returns:
        Tuple of (visible text, state for the next line)

    Examples:
        >>> strip_block_comments("1 Foo /* note */ [skipback]", CommentState.NORMAL)
        ('1 Foo  [skipback]', <CommentState.NORMAL: 'normal'>)
        >>> strip_block_comments("1 Foo /* opens", CommentState.NORMAL)
        ('1 Foo ', <CommentState.IN_BLOCK_COMMENT: 'in_block_comment'>)
    """
    cursor = 0
    visible = []

    while cursor < len(line):
        if state is CommentState.IN_BLOCK_COMMENT:
            end = line.find("*/", cursor)
            if end == -1:
                return "".join(visible), CommentState.IN_BLOCK_COMMENT
            cursor = end + 2
            state = CommentState.NORMAL
            continue

        start = line.find("/*", cursor)
        if start == -1:
            visible.append(line[cursor:])
            break

        visible.append(line[cursor:start])
        cursor = start + 2
        state = CommentState.IN_BLOCK_COMMENT

    return "".join(visible), state


def strip_line_comment(text: str) -> str:
    """Cut text at the first unescaped "#" or "//".

    A backslash before "#" or "/" keeps the character literally.

    Examples:
        >>> strip_line_comment("2 Backflip  # cheap")
        '2 Backflip  '
        >>> strip_line_comment(r"1 Card \\#1")
        '1 Card #1'
    """
    out = []
    index = 0
    length = len(text)

    while index < length:
        char = text[index]
        if char == "\\" and index + 1 < length and text[index + 1] in "#/":
            out.append(text[index + 1])
            index += 2
            continue
        if char == "#":
            break
        if char == "/" and index + 1 < length and text[index + 1] == "/":
            break
        out.append(char)
        index += 1

    return "".join(out)


def is_annotation_line(line: str) -> bool:
    """True for generated "//? " annotation lines."""
    return bool(_ANNOTATION_LINE.match(line))


def visible_text(line: str, state: CommentState) -> Tuple[str, CommentState]:
    """Strip both comment styles and surrounding whitespace from a line."""
    text, next_state = strip_block_comments(line, state)
    return strip_line_comment(text).strip(), next_state
