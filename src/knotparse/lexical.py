"""
Lexical atoms of the story script language.

Every matcher takes the full source and a position and returns either
None (no match, nothing consumed) or a tuple whose last element is the
position right after the match. Matchers never raise: a failed match
lets the caller try its next alternative.
"""

import re
from typing import Optional, Tuple


IDENTIFIER = r"[A-Za-z_][A-Za-z0-9_]*"

IDENTIFIER_RE = re.compile(IDENTIFIER)
ADDRESS_RE = re.compile(rf"{IDENTIFIER}(?:\.{IDENTIFIER}){{0,2}}")
SPACES_RE = re.compile(r"[ \t]*")
WHITESPACE_RE = re.compile(r"[ \t\r\n]*")
LABEL_RE = re.compile(rf"\([ \t]*({IDENTIFIER})[ \t]*\)")

COMMENT_LINE_RE = re.compile(r"[ \t]*//[^\r\n]*")
COMMENT_BLOCK_RE = re.compile(r"[ \t]*/\*.*?\*/", re.DOTALL)
TODO_RE = re.compile(r"[ \t]*TODO:[^\r\n]*")

# A "-" that starts a jump arrow is not a gather mark.
GATHER_MARKS_RE = re.compile(r"(?:[ \t]*-(?!>))*")
STICKY_MARKS_RE = re.compile(r"(?:[ \t]*\+)+")
CHOICE_MARKS_RE = re.compile(r"(?:[ \t]*\*)+")

JUMP_SIGIL = "->"
NEWLINE_CHARS = "\r\n"
SPACE_CHARS = " \t"


def skip_spaces(source: str, pos: int) -> int:
    """Skip spaces and tabs (never line breaks)."""
    return SPACES_RE.match(source, pos).end()


def skip_whitespace(source: str, pos: int) -> int:
    """Skip spaces, tabs and line breaks."""
    return WHITESPACE_RE.match(source, pos).end()


def match_keyword(source: str, pos: int, keyword: str) -> Optional[int]:
    """
    Match a keyword that is not the prefix of a longer identifier.

    "VAR x" matches VAR, "VARIETY" does not.
    """
    if not source.startswith(keyword, pos):
        return None
    end = pos + len(keyword)
    if end < len(source) and (source[end].isalnum() or source[end] == "_"):
        return None
    return end


def match_identifier(source: str, pos: int) -> Optional[Tuple[str, int]]:
    m = IDENTIFIER_RE.match(source, pos)
    if not m:
        return None
    return m.group(0), m.end()


def match_address(source: str, pos: int) -> Optional[Tuple[str, int]]:
    """Match 1 to 3 dot-joined identifiers (knot.stitch.label)."""
    m = ADDRESS_RE.match(source, pos)
    if not m:
        return None
    return m.group(0), m.end()


def match_divert(source: str, pos: int) -> Optional[Tuple[str, int]]:
    """Match a jump to an address: -> knot.stitch"""
    if not source.startswith(JUMP_SIGIL, pos):
        return None
    return match_address(source, skip_spaces(source, pos + len(JUMP_SIGIL)))


def match_divert_or_nothing(source: str, pos: int) -> Optional[Tuple[Optional[str], int]]:
    """Match a jump whose address may be missing (-> alone jumps to nothing)."""
    matched = match_divert(source, pos)
    if matched:
        return matched
    if source.startswith(JUMP_SIGIL, pos):
        return None, pos + len(JUMP_SIGIL)
    return None


def match_label(source: str, pos: int) -> Optional[Tuple[str, int]]:
    m = LABEL_RE.match(source, pos)
    if not m:
        return None
    return m.group(1), m.end()


def match_comment(source: str, pos: int) -> Optional[int]:
    """Match // line comments and /* block comments */ (leading spaces allowed)."""
    m = COMMENT_LINE_RE.match(source, pos) or COMMENT_BLOCK_RE.match(source, pos)
    if not m:
        return None
    return m.end()


def match_todo(source: str, pos: int) -> Optional[int]:
    m = TODO_RE.match(source, pos)
    if not m:
        return None
    return m.end()


def match_gather_level(source: str, pos: int) -> Tuple[int, int]:
    """Count gather marks (- - text). Always succeeds, possibly with level 0."""
    m = GATHER_MARKS_RE.match(source, pos)
    return m.group(0).count("-"), m.end()


def match_choice_level(source: str, pos: int) -> Optional[Tuple[int, bool, int]]:
    """
    Count choice marks.

    Returns:
        (level, sticky, end) where sticky is True for "+" marks.
        "+" and "*" are never mixed on one line.
    """
    m = STICKY_MARKS_RE.match(source, pos)
    if m:
        return m.group(0).count("+"), True, m.end()
    m = CHOICE_MARKS_RE.match(source, pos)
    if m:
        return m.group(0).count("*"), False, m.end()
    return None
