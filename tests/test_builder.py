"""
Tests for ParseContext, the per-parse document builder.
"""

import pytest
from knotparse.builder import ParseContext
from knotparse.config import DEFAULT_CONFIG, resolve_config
from knotparse.model import AssignItem, ChoiceItem, ConditionItem, TextItem
from knotparse.parts import ConditionPart, TextPart


@pytest.fixture
def context():
    return ParseContext(resolve_config({}, DEFAULT_CONFIG))


def root_items(context):
    return context.document.items()


class TestNesting:
    """Choice marks decide which container receives an item."""

    def test_level_zero_goes_into_open_choice(self, context):
        context.add_choice(1, False, None, "a", None)
        context.add_paragraph(0, None, [TextPart("inside")], None)
        choice = root_items(context)[0]
        assert choice.node == [TextItem(text="inside")]

    def test_gather_closes_choices(self, context):
        context.add_choice(1, False, None, "a", None)
        context.add_choice(2, False, None, "b", None)
        context.add_paragraph(1, None, [TextPart("after")], None)
        items = root_items(context)
        assert len(items) == 2
        assert items[1] == TextItem(text="after")
        assert items[0].node[0].choice_label == "b"

    def test_conditional_choice_is_wrapped(self, context):
        context.add_choice(1, True, "seen", "[Again]", None)
        context.add_assign(0, False, "x", "1")
        wrapper = root_items(context)[0]
        assert isinstance(wrapper, ConditionItem)
        assert wrapper.condition == "seen"
        choice = wrapper.success[0]
        assert choice.sticky
        assert choice.choice_label == "Again"
        assert choice.node == [AssignItem(variable="x", value_expr="1")]

    def test_fallback_choice(self, context):
        context.add_choice(1, False, None, None, "DONE")
        assert root_items(context) == [ChoiceItem(divert="DONE")]


class TestKnotsAndStitches:
    def test_knot_resets_chain(self, context):
        context.add_choice(1, False, None, "a", None)
        context.add_knot("forest")
        context.add_paragraph(0, None, [TextPart("Trees.")], None)
        assert context.document.items("forest") == [TextItem(text="Trees.")]
        assert root_items(context)[0].node == []

    def test_stitch_belongs_to_current_knot(self, context):
        context.add_knot("forest")
        context.add_stitch("clearing")
        context.add_paragraph(0, None, [TextPart("Sun.")], None)
        assert context.document.root["forest"] == {
            "_": [],
            "clearing": [TextItem(text="Sun.")],
        }
        assert context.current_stitch == "clearing"


class TestParagraphs:
    def test_label_and_tags_on_first_text(self, context):
        context.add_paragraph(0, "top", [TextPart("Hi")], ["greet"])
        assert root_items(context) == [TextItem(text="Hi", label="top", tags=["greet"])]

    def test_label_without_text(self, context):
        context.add_paragraph(0, "here", None, None)
        assert root_items(context) == [TextItem(label="here")]

    def test_label_goes_on_anchor(self, context):
        context.add_paragraph(0, "top", [ConditionPart("c", [TextPart("x")])], None)
        first = root_items(context)[0]
        assert first == TextItem(text="", label="top")


class TestDeclarations:
    def test_list(self, context):
        context.add_list("Colors", "red, green, (blue)")
        assert context.document.lists == {"Colors": ["red", "green", "blue"]}
        assert context.document.variables == {"Colors": {"Colors": {"blue": True}}}

    def test_list_without_active_members(self, context):
        context.add_list("Days", "mon, tue")
        assert context.document.variables["Days"] == {"Days": {}}

    def test_constants_and_variables_are_deserialized(self, context):
        context.add_constant("LIMIT", "5")
        context.add_variable("name", '"Bob"')
        assert context.document.constants == {"LIMIT": 5}
        assert context.document.variables == {"name": "Bob"}

    def test_last_declaration_wins(self, context):
        context.add_variable("x", "1")
        context.add_variable("x", "2")
        assert context.document.variables["x"] == 2

    def test_custom_deserializer(self):
        context = ParseContext(resolve_config({"deserialize": str.upper}, DEFAULT_CONFIG))
        context.add_constant("A", "abc")
        assert context.document.constants == {"A": "ABC"}

    def test_includes_keep_order(self, context):
        context.add_include("a.ink")
        context.add_include("b.ink")
        assert context.document.includes == ["a.ink", "b.ink"]
