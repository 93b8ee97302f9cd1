"""
Segmented Line Parts

A line of prose is split into an ordered list of parts before it is
turned into document items:

    Hello {name}, {visited: welcome back|nice to meet you}. -> hub

    TextPart("Hello ")
    ExpressionPart("name")
    TextPart(", ")
    ConditionPart("visited", [TextPart("welcome back")], [TextPart("nice to meet you")])
    TextPart(".", divert="hub")

Parts are intermediate values. They never appear in a Document.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from knotparse.model import SequenceMode


@dataclass(frozen=True)
class TextPart:
    """Plain text run, optionally followed by a jump."""

    text: str
    divert: Optional[str] = None


@dataclass(frozen=True)
class ExpressionPart:
    """Inline expression ({expr}); the payload is opaque."""

    expression: str


@dataclass(frozen=True)
class JumpPart:
    """Jump with no text before it (-> address)."""

    divert: str


@dataclass(frozen=True)
class ConditionPart:
    """Inline conditional ({cond: success|failure})."""

    condition: str
    success: List["Part"] = field(default_factory=list)
    failure: Optional[List["Part"]] = None


@dataclass(frozen=True)
class SequencePart:
    """Inline sequence ({a|b}, {!a|b}, {&a|b}, {~a|b})."""

    mode: SequenceMode
    alternatives: List[List["Part"]] = field(default_factory=list)
    shuffle: bool = False


Part = Union[TextPart, ExpressionPart, JumpPart, ConditionPart, SequencePart]


def carries_text(part: Part) -> bool:
    """True for parts that extend the currently open text item."""
    return isinstance(part, (TextPart, ExpressionPart, JumpPart))


def part_divert(part: Part) -> Optional[str]:
    if isinstance(part, (TextPart, JumpPart)):
        return part.divert
    return None
