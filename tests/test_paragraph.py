"""
Tests for converting segmented parts into items.
"""

from knotparse.model import ConditionItem, SequenceItem, SequenceMode, TextItem
from knotparse.paragraph import convert_parts, split_choice_text
from knotparse.parts import ConditionPart, ExpressionPart, JumpPart, SequencePart, TextPart


class TestRootParagraphs:
    """Whole lines converted with is_root=True."""

    def test_plain_text(self):
        assert convert_parts([TextPart("Hello")], is_root=True) == [TextItem(text="Hello")]

    def test_expression_joins_text(self):
        parts = [TextPart("Hi "), ExpressionPart("name"), TextPart("!")]
        assert convert_parts(parts, is_root=True) == [TextItem(text="Hi #name#!")]

    def test_text_with_jump(self):
        parts = [TextPart("Go", divert="forest")]
        assert convert_parts(parts, is_root=True) == [TextItem(text="Go", divert="forest")]

    def test_bare_jump_has_no_text(self):
        assert convert_parts([JumpPart("forest")], is_root=True) == [TextItem(divert="forest")]

    def test_jump_closes_the_text_item(self):
        parts = [TextPart("a", divert="x"), TextPart("b")]
        assert convert_parts(parts, is_root=True) == [
            TextItem(text="a", divert="x"),
            TextItem(text="b"),
        ]

    def test_jump_after_expression_continues_the_item(self):
        parts = [ExpressionPart("x"), JumpPart("y")]
        assert convert_parts(parts, is_root=True) == [TextItem(text="#x#", divert="y")]

    def test_trailing_conditional_gets_anchor(self):
        parts = [TextPart("a "), ConditionPart("c", [TextPart("yes")])]
        assert convert_parts(parts, is_root=True) == [
            TextItem(text="a "),
            ConditionItem(condition="c", success=[TextItem(text="<>yes<>")]),
            TextItem(text=""),
        ]

    def test_lone_sequence_gets_both_anchors(self):
        parts = [SequencePart(SequenceMode.ONCE, [[TextPart("a")], [TextPart("")]])]
        assert convert_parts(parts, is_root=True) == [
            TextItem(text=""),
            SequenceItem(
                mode=SequenceMode.ONCE,
                alternatives=[[TextItem(text="<>a<>")], [TextItem(text="<><>")]],
            ),
            TextItem(text=""),
        ]

    def test_text_between_branches(self):
        parts = [
            ConditionPart("a", [TextPart("x")]),
            TextPart(" and "),
            SequencePart(SequenceMode.CYCLE, [[TextPart("y")], [TextPart("z")]]),
        ]
        items = convert_parts(parts, is_root=True)
        assert [type(item) for item in items] == [
            TextItem, ConditionItem, TextItem, SequenceItem, TextItem,
        ]
        assert items[2] == TextItem(text=" and ")

    def test_no_parts(self):
        assert convert_parts(None, is_root=True) == []


class TestBranches:
    """Branch content is glued to the surrounding text."""

    def test_branch_text_is_glued(self):
        assert convert_parts([TextPart("yes")]) == [TextItem(text="<>yes<>")]

    def test_branch_expression(self):
        assert convert_parts([ExpressionPart("n")]) == [TextItem(text="<>#n#<>")]

    def test_branch_with_jump_is_not_glued(self):
        assert convert_parts([TextPart("go", divert="x")]) == [TextItem(text="go", divert="x")]

    def test_branch_expression_then_jump(self):
        parts = [ExpressionPart("x"), JumpPart("y")]
        assert convert_parts(parts) == [TextItem(text="<>#x#", divert="y")]

    def test_nested_failure_branch(self):
        parts = [ConditionPart("a", [TextPart("x")], [TextPart("y")])]
        item = convert_parts(parts)[0]
        assert item.failure == [TextItem(text="<>y<>")]


class TestChoiceText:
    def test_brackets_split_label_and_text(self):
        assert split_choice_text("Hello [back]world") == ("Hello back", "Hello world")

    def test_spaces_around_brackets_are_kept(self):
        assert split_choice_text("Hello [there] friend") == ("Hello there", "Hello  friend")

    def test_label_only(self):
        assert split_choice_text("[Nod]") == ("Nod", "")

    def test_no_brackets(self):
        assert split_choice_text("Leave") == ("Leave", "Leave")
