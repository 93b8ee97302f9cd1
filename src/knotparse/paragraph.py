"""
Paragraph to items conversion.

Turns the parts of one segmented line into document items:

    - Conditionals and sequences become standalone items whose branches
      are converted recursively.
    - Text, expressions and jumps are merged into one open text item,
      which is emitted when a jump is met or when the next part cannot
      extend it.

Glue rules:
    A top-level paragraph starts and ends with a text item, so the
    runtime always has a text anchor to glue conditional output to.
    Branches of conditionals and sequences are glued to the surrounding
    text: their text items start and end with a glue marker.
"""

import re
from typing import List, Optional, Tuple

from knotparse.model import (
    EXPRESSION_MARK,
    GLUE,
    ConditionItem,
    Item,
    SequenceItem,
    TextItem,
)
from knotparse.parts import (
    ConditionPart,
    ExpressionPart,
    Part,
    SequencePart,
    TextPart,
    carries_text,
    part_divert,
)


CHOICE_TEXT_RE = re.compile(r"(.*)\[(.*)\](.*)", re.DOTALL)


def convert_parts(parts: Optional[List[Part]], is_root: bool = False) -> List[Item]:
    """
    Convert segmented parts into items.

    Args:
        parts: Parts of a line or of a conditional/sequence branch
        is_root: True for a whole paragraph, False for branches

    Returns:
        Ordered items
    """
    if not parts:
        return []

    items: List[Item] = []
    item: Optional[TextItem] = None

    for index, part in enumerate(parts):
        next_part = parts[index + 1] if index + 1 < len(parts) else None

        if isinstance(part, ConditionPart):
            items.append(ConditionItem(
                condition=part.condition,
                success=convert_parts(part.success),
                failure=convert_parts(part.failure) if part.failure is not None else None,
            ))
            item = None
            continue

        if isinstance(part, SequencePart):
            items.append(SequenceItem(
                mode=part.mode,
                alternatives=[convert_parts(alternative) for alternative in part.alternatives],
                shuffle=part.shuffle,
            ))
            item = None
            continue

        divert = part_divert(part)
        if item is None:
            item = TextItem(text="" if is_root or divert is not None else GLUE)

        if isinstance(part, TextPart):
            item.text += part.text
        elif isinstance(part, ExpressionPart):
            item.text += f"{EXPRESSION_MARK}{part.expression}{EXPRESSION_MARK}"

        if divert is not None:
            item.divert = divert
            item.text = item.text or None
            items.append(item)
            item = None
        elif next_part is None or not carries_text(next_part):
            if not is_root:
                item.text += GLUE
            items.append(item)
            item = None

    if is_root:
        if _needs_anchor(items[0]):
            items.insert(0, TextItem(text=""))
        if _needs_anchor(items[-1]):
            items.append(TextItem(text=""))

    return items


def _needs_anchor(item: Item) -> bool:
    return isinstance(item, (ConditionItem, SequenceItem))


def split_choice_text(text: str) -> Tuple[str, str]:
    """
    Split choice text around its bracketed segment.

    "Hello [back] world" is listed as "Hello back" and narrated as
    "Hello  world": the spaces on both sides of the brackets are kept,
    so the narrated text can hold a double space. Without brackets both
    are the whole text.

    Returns:
        (choice_label, narrated_text)
    """
    m = CHOICE_TEXT_RE.match(text)
    if not m:
        return text, text
    before, inside, after = m.groups()
    return before + inside, before + after
