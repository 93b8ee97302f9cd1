"""
Per-parse document construction state.

ParseContext owns everything that changes while one script is parsed:

    - the Document under construction
    - the current knot and stitch names
    - the chain of open containers (nodes_chain)

nodes_chain[0] is the item list of the current knot/stitch. Every choice
pushes its (initially empty) node, so nodes_chain[n] is the content of
the choice opened at level n. Levels are mark counts, not braces:
appending at level L first closes every container deeper than L.

A ParseContext is created per parse call and never shared.
"""

import logging
import re
from typing import List, Optional

from knotparse.config import ParserConfigRequired
from knotparse.model import (
    ROOT_NAME,
    AssignItem,
    ChoiceItem,
    ConditionItem,
    Document,
    Item,
    TextItem,
)
from knotparse.paragraph import convert_parts, split_choice_text
from knotparse.parts import Part


logger = logging.getLogger(__name__)

LIST_MEMBER_RE = re.compile(r"[\w.]+")
LIST_ACTIVE_RE = re.compile(r"\(([^()]*)\)")


class ParseContext:
    def __init__(self, config: ParserConfigRequired):
        self.config = config
        self.document = Document(
            engine_version=config["engine_version"],
            tree_version=config["tree_version"],
        )
        self.current_knot = ROOT_NAME
        self.current_stitch = ROOT_NAME
        self.nodes_chain: List[List[Item]] = [self.document.root[ROOT_NAME][ROOT_NAME]]

    # =========================================================================
    # Tree building
    # =========================================================================

    def add_item(self, level: int, item: Item) -> None:
        """
        Append an item at a nesting level.

        Level 0 appends to the innermost open container. Otherwise the
        containers opened deeper than level are closed first.
        """
        level = level if level > 0 else len(self.nodes_chain)
        del self.nodes_chain[level:]
        self.nodes_chain[-1].append(item)

    def push_node(self, node: List[Item]) -> None:
        self.nodes_chain.append(node)

    def add_knot(self, knot: str) -> None:
        self.current_knot = knot
        self.current_stitch = ROOT_NAME

        node: List[Item] = []
        self.document.root[knot] = {ROOT_NAME: node}
        self.nodes_chain = [node]
        logger.debug("Entering knot %r", knot)

    def add_stitch(self, stitch: str) -> None:
        self.current_stitch = stitch

        node: List[Item] = []
        self.document.root[self.current_knot][stitch] = node
        self.nodes_chain = [node]
        logger.debug("Entering stitch %r of knot %r", stitch, self.current_knot)

    def add_paragraph(
        self,
        level: int,
        label: Optional[str],
        parts: Optional[List[Part]],
        tags: Optional[List[str]],
    ) -> None:
        items = convert_parts(parts, is_root=True)

        # Label and tags belong to the first text item of the paragraph.
        if label is not None or tags is not None:
            if items and isinstance(items[0], TextItem):
                first_item = items[0]
            else:
                first_item = TextItem()
                items.append(first_item)
            first_item.label = label
            first_item.tags = tags

        logger.debug("Paragraph at level %d produced %d item(s)", level, len(items))
        for item in items:
            self.add_item(level, item)

    def add_choice(
        self,
        level: int,
        sticky: bool,
        condition: Optional[str],
        text: Optional[str],
        divert: Optional[str],
    ) -> None:
        choice = ChoiceItem(sticky=sticky, divert=divert)
        if text is not None:
            choice.choice_label, choice.text = split_choice_text(text)

        if condition is not None:
            self.add_item(level, ConditionItem(condition=condition, success=[choice]))
        else:
            self.add_item(level, choice)

        self.push_node(choice.node)

    def add_assign(self, level: int, temporary: bool, variable: Optional[str], value: str) -> None:
        self.add_item(level, AssignItem(variable=variable, value_expr=value, temporary=temporary))

    # =========================================================================
    # Declarations (last write wins)
    # =========================================================================

    def add_include(self, include: str) -> None:
        self.document.includes.append(include)
        logger.debug("Include %r", include)

    def add_list(self, name: str, value: str) -> None:
        """
        LIST Colors = red, green, (blue)

        lists["Colors"] = ["red", "green", "blue"]
        variables["Colors"] = {"Colors": {"blue": True}}
        """
        self.document.lists[name] = LIST_MEMBER_RE.findall(value)
        active = [member.strip() for member in LIST_ACTIVE_RE.findall(value)]
        self.document.variables[name] = {name: {member: True for member in active}}
        logger.debug("List %r with %d member(s)", name, len(self.document.lists[name]))

    def add_constant(self, name: str, value: str) -> None:
        self.document.constants[name] = self.config["deserialize"](value)
        logger.debug("Constant %r = %r", name, self.document.constants[name])

    def add_variable(self, name: str, value: str) -> None:
        self.document.variables[name] = self.config["deserialize"](value)
        logger.debug("Variable %r = %r", name, self.document.variables[name])
