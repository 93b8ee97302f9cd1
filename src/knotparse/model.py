"""
Core Story Document Objects

Defines the data structures produced by the script parser.

These are pure data classes representing:
    - Text lines (with optional label, tags and jump)
    - Conditions (inline or wrapping a conditional choice)
    - Sequences (randomized / cycled / stopping text variants)
    - Choices (player-selectable branches with nested content)
    - Assignments (variable updates)
    - Documents (root container)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about the playback runtime
        - Never evaluate expressions (expressions are opaque strings)
        - Are not modified once the parser has returned them
        - Represent structure, not behavior
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


ENGINE_VERSION = 1
TREE_VERSION = 1

# Name of the implicit knot and of the implicit stitch of every knot.
ROOT_NAME = "_"

# Markers embedded in text for the runtime.
GLUE = "<>"
EXPRESSION_MARK = "#"


class SequenceMode(Enum):
    """
    Selection modes of an inline sequence.

    ONCE:  each alternative is shown once, then nothing ({!a|b})
    CYCLE: alternatives loop forever ({&a|b})
    STOP:  the last alternative sticks ({a|b}, {~a|b} with shuffle)
    """

    ONCE = "once"
    CYCLE = "cycle"
    STOP = "stop"


@dataclass
class TextItem:
    """
    A run of narrated text.

    Properties:
        text:
            Text to print. May contain embedded expressions (#expr#)
            and glue markers (<>). None when the item only carries a
            jump, a label or tags.

        label:
            Optional label name, used as a jump target inside a stitch.

        tags:
            Free-form tags attached to the line.

        divert:
            Dotted address (knot, knot.stitch, knot.stitch.label) to jump
            to once the text is printed. Left unresolved.
    """

    text: Optional[str] = None
    label: Optional[str] = None
    tags: Optional[List[str]] = None
    divert: Optional[str] = None


@dataclass
class ConditionItem:
    """
    Content that is shown only when a condition holds.

    Example:
        {visited: Welcome back|Hello}

    Becomes:
        ConditionItem(
            condition="visited",
            success=[TextItem(text="<>Welcome back<>")],
            failure=[TextItem(text="<>Hello<>")]
        )

    The condition is an opaque expression; evaluating it is the
    runtime's job.
    """

    condition: str
    success: List["Item"] = field(default_factory=list)
    failure: Optional[List["Item"]] = None


@dataclass
class SequenceItem:
    """
    Inline list of alternatives, one of which is picked at playback time.

    Properties:
        mode: SequenceMode
        alternatives: Non-empty list of item sequences
        shuffle: Pick alternatives in random order ({~a|b})
    """

    mode: SequenceMode
    alternatives: List[List["Item"]] = field(default_factory=list)
    shuffle: bool = False


@dataclass
class ChoiceItem:
    """
    A player-selectable branch.

    Properties:
        choice_label:
            Text shown in the list of choices. None for a fallback choice
            (a choice with no text that is taken automatically).

        text:
            Text narrated once the choice is taken.

        sticky:
            Sticky choices (+) stay available after being chosen.

        divert:
            Optional jump performed after the choice is taken.

        node:
            Nested content reached after the choice is taken. Lines with a
            deeper level than the choice itself are appended here.
    """

    choice_label: Optional[str] = None
    text: Optional[str] = None
    sticky: bool = False
    divert: Optional[str] = None
    node: List["Item"] = field(default_factory=list)

    @property
    def is_fallback(self) -> bool:
        return self.choice_label is None


@dataclass
class AssignItem:
    """
    Variable assignment (~ x = expr, ~ temp y = expr).

    variable is None for bare expressions such as "~ f()".
    """

    variable: Optional[str]
    value_expr: str
    temporary: bool = False


Item = Union[TextItem, ConditionItem, SequenceItem, ChoiceItem, AssignItem]


def _empty_root() -> Dict[str, Dict[str, List[Item]]]:
    return {ROOT_NAME: {ROOT_NAME: []}}


@dataclass
class Document:
    """
    Root container for a parsed story script.

    ARCHITECTURAL PRINCIPLE:
        Document is the single hand-off artifact to the runtime.
        It is built once per parse call and is plain data.

    Properties:
        root:
            knot name -> stitch name -> ordered items.
            root["_"]["_"] always exists and holds content that precedes
            the first knot header.

        includes:
            Paths of INCLUDE directives, in source order (not opened).

        constants / variables:
            Declared names -> deserialized literal values.
            A LIST declaration also defines a variable whose value is
            {list_name: {active_member: True, ...}}.

        lists:
            List name -> ordered member names.
    """

    engine_version: int = ENGINE_VERSION
    tree_version: int = TREE_VERSION
    root: Dict[str, Dict[str, List[Item]]] = field(default_factory=_empty_root)
    includes: List[str] = field(default_factory=list)
    constants: Dict[str, Any] = field(default_factory=dict)
    variables: Dict[str, Any] = field(default_factory=dict)
    lists: Dict[str, List[str]] = field(default_factory=dict)

    def get_knot(self, name: str) -> Optional[Dict[str, List[Item]]]:
        """
        Retrieve the stitches of a knot.

        Args:
            name: Knot name

        Returns:
            Mapping of stitch name to items, or None if not found
        """
        return self.root.get(name)

    def get_stitch(self, knot: str, stitch: str = ROOT_NAME) -> Optional[List[Item]]:
        """
        Retrieve the items of a stitch.

        Args:
            knot: Knot name
            stitch: Stitch name ("_" for the knot's own content)

        Returns:
            List of items or None if not found
        """
        stitches = self.get_knot(knot)
        if stitches is None:
            return None
        return stitches.get(stitch)

    def items(self, knot: str = ROOT_NAME, stitch: str = ROOT_NAME) -> List[Item]:
        """Items of a stitch; raises KeyError when it does not exist."""
        return self.root[knot][stitch]
