"""
Script grammar: segmentation and statement recognition.

The grammar is an ordered choice: at every point the first alternative
that matches wins, and a committed alternative is never revisited.
Several rules are prefixes of others (sticky vs normal choice marks,
"===" knot vs "=" stitch headers, conditionals vs sequences vs plain
expressions inside braces), so the order below is significant.

Recognition is pure. Matchers return statement records or parts and
never touch the document under construction; the dispatcher in
knotparse.parser applies a record only once its line has matched.
Because matchers are pure, text and segment matches are memoized by
position (packrat style).
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple, Union

from knotparse.lexical import (
    IDENTIFIER,
    NEWLINE_CHARS,
    SPACE_CHARS,
    match_choice_level,
    match_comment,
    match_divert,
    match_divert_or_nothing,
    match_gather_level,
    match_identifier,
    match_keyword,
    match_label,
    match_todo,
    skip_spaces,
)
from knotparse.model import SequenceMode
from knotparse.parts import (
    ConditionPart,
    ExpressionPart,
    JumpPart,
    Part,
    SequencePart,
    TextPart,
)


KNOT_RE = re.compile(rf"===[ \t]*({IDENTIFIER})[ \t]*=*")
STITCH_RE = re.compile(rf"=[ \t]*({IDENTIFIER})[ \t]*=*")

INCREMENT_RE = re.compile(r"(\w*)\s*([+-])[+-]")
COMPOUND_ASSIGN_RE = re.compile(r"(\w*)\s*([+-])=\s*(.*)")
ASSIGN_RE = re.compile(r"(\w*)\s*=\s*(.*)")

SEQUENCE_SIGILS = {
    "!": (SequenceMode.ONCE, False),
    "&": (SequenceMode.CYCLE, False),
    "~": (SequenceMode.STOP, True),
}

TEXT_STOP_CHARS = NEWLINE_CHARS + "{|}"
LINE_END_RE = re.compile(r"[\r\n]")


# =========================================================================
# Statement records
# =========================================================================


@dataclass(frozen=True)
class Include:
    path: str


@dataclass(frozen=True)
class ListDecl:
    name: str
    value: str


@dataclass(frozen=True)
class ConstDecl:
    name: str
    value: str


@dataclass(frozen=True)
class VarDecl:
    name: str
    value: str


@dataclass(frozen=True)
class Choice:
    """
    Choice line. text is None for a fallback choice ("* -> target").
    """

    level: int
    sticky: bool
    condition: Optional[str]
    text: Optional[str]
    divert: Optional[str]


@dataclass(frozen=True)
class KnotHeader:
    name: str


@dataclass(frozen=True)
class StitchHeader:
    name: str


@dataclass(frozen=True)
class Assignment:
    level: int
    temporary: bool
    variable: Optional[str]
    value: str


@dataclass(frozen=True)
class Comment:
    """Comment or TODO line; produces nothing."""


@dataclass(frozen=True)
class Paragraph:
    level: int
    label: Optional[str]
    parts: Optional[List[Part]]
    tags: Optional[List[str]]


Statement = Union[
    Include,
    ListDecl,
    ConstDecl,
    VarDecl,
    Choice,
    KnotHeader,
    StitchHeader,
    Assignment,
    Comment,
    Paragraph,
]


def split_assignment(expression: str) -> Tuple[Optional[str], str]:
    """
    Normalize an assignment expression and split it into name and value.

    Shorthands are rewritten first:
        x++     -> x = x + 1
        x -= 2  -> x = x - 2

    Returns:
        (variable, value_expression). variable is None when the
        expression assigns nothing (e.g. a bare function call).
    """
    unwrapped = INCREMENT_RE.sub(r"\1 = \1 \2 1", expression)
    unwrapped = COMPOUND_ASSIGN_RE.sub(r"\1 = \1 \2 \3", unwrapped)
    m = ASSIGN_RE.search(unwrapped)
    if not m:
        return None, expression
    return m.group(1), m.group(2)


class ScriptGrammar:
    """
    Matchers over one source text.

    All match_* methods take a position and return None or a tuple whose
    last element is the end position of the match.
    """

    def __init__(self, source: str):
        self.source = source
        self.length = len(source)
        self._text_cache: Dict[int, Optional[Tuple[str, int]]] = {}
        self._segments_cache: Dict[int, Optional[Tuple[List[Part], int]]] = {}
        self._tag_cache: Dict[int, bool] = {}

    def _at(self, pos: int, literal: str) -> bool:
        return self.source.startswith(literal, pos)

    # =========================================================================
    # Text runs
    # =========================================================================

    def _sentence(self, pos: int, stops: Callable[[int], bool]) -> Optional[Tuple[str, int]]:
        """
        Match words separated by spaces, up to a stop position.

        Trailing spaces are consumed. They are kept in the captured text
        only when a "{" follows, so "Hello {name}" keeps its gap.
        """
        source = self.source
        end = None
        cursor = pos
        while True:
            start = skip_spaces(source, cursor)
            probe = start
            while probe < self.length and source[probe] not in SPACE_CHARS and not stops(probe):
                probe += 1
            if probe == start:
                break
            end = cursor = probe

        if end is None:
            return None

        tail = skip_spaces(source, end)
        if self._at(tail, "{"):
            return source[pos:tail], tail
        return source[pos:end], tail

    def _stops_text(self, pos: int) -> bool:
        char = self.source[pos]
        if char in TEXT_STOP_CHARS:
            return True
        if char == "-" and match_divert(self.source, pos) is not None:
            return True
        if char == "/" and match_comment(self.source, pos) is not None:
            return True
        if char == "#" and self._starts_tag(pos):
            return True
        return False

    def _starts_tag(self, pos: int) -> bool:
        if pos not in self._tag_cache:
            self._tag_cache[pos] = self.match_tag(pos) is not None
        return self._tag_cache[pos]

    def _resolve_tags(self, pos: int) -> None:
        """
        Decide every "#" of the line from the last one backwards.

        Whether a "#" starts a tag depends only on the text after it, so
        resolving right to left keeps each check one level deep.
        """
        source = self.source
        m = LINE_END_RE.search(source, pos)
        line_end = m.start() if m else self.length

        hash_pos = source.rfind("#", pos, line_end)
        while hash_pos != -1:
            self._starts_tag(hash_pos)
            hash_pos = source.rfind("#", pos, hash_pos)

    def match_text(self, pos: int) -> Optional[Tuple[str, int]]:
        """Plain text run. Never starts where a statement would match."""
        if pos not in self._text_cache:
            self._resolve_tags(pos)
            if self.match_statement(pos) is not None:
                self._text_cache[pos] = None
            else:
                self._text_cache[pos] = self._sentence(pos, self._stops_text)
        return self._text_cache[pos]

    # =========================================================================
    # Segmentation
    # =========================================================================

    def match_segments(self, pos: int) -> Optional[Tuple[List[Part], int]]:
        """
        Split text into parts until nothing more matches.

        Returns None if not even one part matched.
        """
        if pos not in self._segments_cache:
            parts = []
            cursor = pos
            while True:
                matched = self._match_segment(cursor)
                if matched is None:
                    break
                part, cursor = matched
                parts.append(part)
            self._segments_cache[pos] = (parts, cursor) if parts else None
        return self._segments_cache[pos]

    def _match_segment(self, pos: int) -> Optional[Tuple[Part, int]]:
        for matcher in (self.match_condition, self.match_sequence, self.match_expression):
            matched = matcher(pos)
            if matched is not None:
                return matched

        text = self.match_text(pos)
        if text is not None:
            value, end = text
            end = skip_spaces(self.source, end)
            divert = match_divert(self.source, end)
            if divert is not None:
                return TextPart(value, divert=divert[0]), divert[1]
            return TextPart(value), end

        divert = match_divert(self.source, pos)
        if divert is not None:
            return JumpPart(divert[0]), divert[1]
        return None

    def match_condition(self, pos: int) -> Optional[Tuple[ConditionPart, int]]:
        """{condition: success} or {condition: success|failure}"""
        if not self._at(pos, "{"):
            return None
        source = self.source

        matched = self._sentence(skip_spaces(source, pos + 1), lambda q: source[q] in ":}")
        if matched is None:
            return None
        condition, cursor = matched
        cursor = skip_spaces(source, cursor)
        if not self._at(cursor, ":"):
            return None

        success = self.match_segments(skip_spaces(source, cursor + 1))
        if success is None:
            return None
        success_parts, cursor = success
        cursor = skip_spaces(source, cursor)

        if self._at(cursor, "|"):
            failure = self.match_segments(skip_spaces(source, cursor + 1))
            if failure is None:
                return None
            failure_parts, end = failure
            end = skip_spaces(source, end)
            if not self._at(end, "}"):
                return None
            return ConditionPart(condition, success_parts, failure_parts), end + 1

        if not self._at(cursor, "}"):
            return None
        return ConditionPart(condition, success_parts), cursor + 1

    def match_sequence(self, pos: int) -> Optional[Tuple[SequencePart, int]]:
        """{a|b}, {!a|b} (once), {&a|b} (cycle), {~a|b} (shuffled stop)"""
        if not self._at(pos, "{"):
            return None
        source = self.source
        start = skip_spaces(source, pos + 1)

        attempts = []
        if start < self.length and source[start] in SEQUENCE_SIGILS:
            mode, shuffle = SEQUENCE_SIGILS[source[start]]
            attempts.append((skip_spaces(source, start + 1), mode, shuffle))
        attempts.append((start, SequenceMode.STOP, False))

        for cursor, mode, shuffle in attempts:
            matched = self._match_alternatives(cursor)
            if matched is not None:
                alternatives, end = matched
                end = skip_spaces(source, end)
                if not self._at(end, "}"):
                    return None
                return SequencePart(mode, alternatives, shuffle), end + 1
        return None

    def _match_alternatives(self, pos: int) -> Optional[Tuple[List[List[Part]], int]]:
        """At least two alternatives separated by "|"."""
        source = self.source
        alternatives = []
        cursor = pos
        while True:
            parts, end = self._match_alternative(skip_spaces(source, cursor))
            end = skip_spaces(source, end)
            if not self._at(end, "|"):
                break
            alternatives.append(parts)
            cursor = end + 1

        if not alternatives:
            return None
        parts, end = self._match_alternative(skip_spaces(source, cursor))
        alternatives.append(parts)
        return alternatives, end

    def _match_alternative(self, pos: int) -> Tuple[List[Part], int]:
        """An empty alternative is an empty text run."""
        segments = self.match_segments(pos)
        if segments is not None:
            return segments
        return [TextPart("")], pos

    def match_expression(self, pos: int) -> Optional[Tuple[ExpressionPart, int]]:
        """{expression} with an opaque payload."""
        if not self._at(pos, "{"):
            return None
        source = self.source
        matched = self._sentence(skip_spaces(source, pos + 1), lambda q: source[q] == "}")
        if matched is None:
            return None
        expression, end = matched
        end = skip_spaces(source, end)
        if not self._at(end, "}"):
            return None
        return ExpressionPart(expression), end + 1

    # =========================================================================
    # Tags
    # =========================================================================

    def match_tag(self, pos: int) -> Optional[Tuple[str, int]]:
        if not self._at(pos, "#"):
            return None
        return self.match_text(skip_spaces(self.source, pos + 1))

    def match_tags(self, pos: int) -> Optional[Tuple[List[str], int]]:
        matched = self.match_tag(pos)
        if matched is None:
            return None
        tag, cursor = matched
        tags = [tag]
        while True:
            matched = self.match_tag(skip_spaces(self.source, cursor))
            if matched is None:
                break
            tag, cursor = matched
            tags.append(tag)
        return tags, cursor

    # =========================================================================
    # Statements
    # =========================================================================

    def match_line(self, pos: int) -> Optional[Tuple[Statement, int]]:
        """One logical line: a statement, or a paragraph by default."""
        cursor = skip_spaces(self.source, pos)
        return self.match_statement(cursor) or self.match_paragraph(cursor)

    def match_statement(self, pos: int) -> Optional[Tuple[Statement, int]]:
        for matcher in (
            self.match_include,
            self.match_list,
            self.match_const,
            self.match_var,
            self.match_choice,
            self.match_knot,
            self.match_stitch,
            self.match_assignment,
            self.match_comment,
        ):
            matched = matcher(pos)
            if matched is not None:
                return matched
        return None

    def match_include(self, pos: int) -> Optional[Tuple[Include, int]]:
        cursor = match_keyword(self.source, pos, "INCLUDE")
        if cursor is None:
            return None
        text = self.match_text(skip_spaces(self.source, cursor))
        if text is None:
            return None
        return Include(text[0]), text[1]

    def _match_declaration(self, pos: int, keyword: str) -> Optional[Tuple[str, str, int]]:
        """KEYWORD name = value"""
        source = self.source
        cursor = match_keyword(source, pos, keyword)
        if cursor is None:
            return None
        identifier = match_identifier(source, skip_spaces(source, cursor))
        if identifier is None:
            return None
        name, cursor = identifier
        cursor = skip_spaces(source, cursor)
        if not self._at(cursor, "="):
            return None
        value = self.match_text(skip_spaces(source, cursor + 1))
        if value is None:
            return None
        return name, value[0], value[1]

    def match_list(self, pos: int) -> Optional[Tuple[ListDecl, int]]:
        matched = self._match_declaration(pos, "LIST")
        if matched is None:
            return None
        name, value, end = matched
        return ListDecl(name, value), end

    def match_const(self, pos: int) -> Optional[Tuple[ConstDecl, int]]:
        matched = self._match_declaration(pos, "CONST")
        if matched is None:
            return None
        name, value, end = matched
        return ConstDecl(name, value), end

    def match_var(self, pos: int) -> Optional[Tuple[VarDecl, int]]:
        matched = self._match_declaration(pos, "VAR")
        if matched is None:
            return None
        name, value, end = matched
        return VarDecl(name, value), end

    def match_choice(self, pos: int) -> Optional[Tuple[Choice, int]]:
        """
        Fallback form first: marks, optional {condition}, then a jump
        (possibly to nothing) and no text. Otherwise the normal form:
        marks, optional {condition}, text, optional jump.
        """
        source = self.source
        marks = match_choice_level(source, pos)
        if marks is None:
            return None
        level, sticky, cursor = marks
        cursor = skip_spaces(source, cursor)

        condition = None
        expression = self.match_expression(cursor)
        if expression is not None:
            condition = expression[0].expression
            cursor = expression[1]
        cursor = skip_spaces(source, cursor)

        fallback = match_divert_or_nothing(source, cursor)
        if fallback is not None:
            divert, end = fallback
            return Choice(level, sticky, condition, None, divert), end

        text = self.match_text(cursor)
        if text is None:
            return None
        value, end = text
        end = skip_spaces(source, end)
        divert = match_divert(source, end)
        if divert is not None:
            return Choice(level, sticky, condition, value, divert[0]), divert[1]
        return Choice(level, sticky, condition, value, None), end

    def match_knot(self, pos: int) -> Optional[Tuple[KnotHeader, int]]:
        m = KNOT_RE.match(self.source, pos)
        if not m:
            return None
        return KnotHeader(m.group(1)), m.end()

    def match_stitch(self, pos: int) -> Optional[Tuple[StitchHeader, int]]:
        m = STITCH_RE.match(self.source, pos)
        if not m:
            return None
        return StitchHeader(m.group(1)), m.end()

    def match_assignment(self, pos: int) -> Optional[Tuple[Assignment, int]]:
        """[- ...] ~ [temp] expression"""
        source = self.source
        level, cursor = match_gather_level(source, pos)
        cursor = skip_spaces(source, cursor)
        if not self._at(cursor, "~"):
            return None
        cursor = skip_spaces(source, cursor + 1)

        temporary = False
        after_temp = match_keyword(source, cursor, "temp")
        if after_temp is not None:
            temporary = True
            cursor = skip_spaces(source, after_temp)

        text = self.match_text(cursor)
        if text is None:
            return None
        expression, end = text
        variable, value = split_assignment(expression)
        return Assignment(level, temporary, variable, value), end

    def match_comment(self, pos: int) -> Optional[Tuple[Comment, int]]:
        end = match_comment(self.source, pos)
        if end is None:
            end = match_todo(self.source, pos)
        if end is None:
            return None
        return Comment(), end

    def match_paragraph(self, pos: int) -> Optional[Tuple[Paragraph, int]]:
        """
        [gather marks] [(label)] [text] [#tags], at least one of the last three.
        """
        source = self.source
        level, cursor = match_gather_level(source, pos)
        cursor = skip_spaces(source, cursor)

        label = None
        matched_label = match_label(source, cursor)
        if matched_label is not None:
            label, cursor = matched_label
            cursor = skip_spaces(source, cursor)

        parts = None
        segments = self.match_segments(cursor)
        if segments is not None:
            parts, cursor = segments
            cursor = skip_spaces(source, cursor)

        tags = None
        matched_tags = self.match_tags(cursor)
        if matched_tags is not None:
            tags, cursor = matched_tags

        if label is None and parts is None and tags is None:
            return None
        return Paragraph(level, label, parts, tags), cursor
