"""
Test the example story shipped with the package.

Checks the document built from EXAMPLE_STORY item by item, so changes
to glue, anchors or nesting show up here first.
"""

from knotparse.examples import build_example_document
from knotparse.model import (
    AssignItem,
    ChoiceItem,
    ConditionItem,
    SequenceItem,
    SequenceMode,
    TextItem,
)


def test_example_declarations():
    doc = build_example_document()

    assert doc.includes == ["common/characters.ink"]
    assert doc.lists == {"Mood": ["calm", "curious", "angry"]}
    assert doc.constants == {"MAX_COINS": 10}
    assert doc.variables == {
        "Mood": {"Mood": {"curious": True}},
        "coins": 3,
        "name": "Traveller",
    }


def test_example_root_jumps_to_harbour():
    doc = build_example_document()
    assert doc.items() == [TextItem(divert="harbour")]
    assert set(doc.root) == {"_", "harbour", "ending"}
    assert set(doc.root["harbour"]) == {"_", "captain"}


def test_example_harbour():
    items = build_example_document().items("harbour")

    assert items[0] == TextItem(text="The ship creaks.", tags=["mood: calm"])
    assert items[1] == TextItem(text="")
    assert items[2] == ConditionItem(
        condition="coins > 0",
        success=[TextItem(text="<>You count your coins.<>")],
        failure=[TextItem(text="<>Your purse is empty.<>")],
    )
    assert items[3] == TextItem(text="")
    assert items[4] == ChoiceItem(
        choice_label="Talk to the captain",
        text=' "Captain!" you call.',
        divert="captain",
    )

    # Conditional choice with nested content and a sub-choice
    wrapper = items[5]
    assert isinstance(wrapper, ConditionItem)
    assert wrapper.condition == "coins >= 3"
    buy = wrapper.success[0]
    assert buy.choice_label == "Buy a map"
    assert buy.text == ""
    assert buy.node == [
        AssignItem(variable="coins", value_expr="coins - 3"),
        TextItem(text="You buy a map from #name#."),
        ChoiceItem(choice_label="Thank the seller", text=' "Thanks."'),
    ]

    assert items[6] == ChoiceItem(choice_label="Leave", text="Leave", divert="DONE")
    assert items[7] == TextItem(text="The gulls ", label="wait")
    assert items[8] == SequenceItem(
        mode=SequenceMode.CYCLE,
        alternatives=[
            [TextItem(text="<>scream<>")],
            [TextItem(text="<>circle<>")],
            [TextItem(text="<>dive<>")],
        ],
    )
    assert items[9] == TextItem(text=".")
    assert len(items) == 10


def test_example_captain():
    items = build_example_document().items("harbour", "captain")

    assert items == [
        AssignItem(variable="greeted", value_expr="true", temporary=True),
        TextItem(text='"Ahoy, #name#!" the captain ', tags=["speaker: captain"]),
        SequenceItem(
            mode=SequenceMode.STOP,
            alternatives=[[TextItem(text="<>grins<>")], [TextItem(text="<>nods<>")]],
            shuffle=True,
        ),
        TextItem(text="."),
        ChoiceItem(choice_label="Nod", text="", sticky=True, divert="harbour.wait"),
        ChoiceItem(sticky=True, divert="DONE"),
    ]


def test_example_ending():
    items = build_example_document().items("ending")

    assert items == [
        TextItem(text=""),
        SequenceItem(
            mode=SequenceMode.ONCE,
            alternatives=[
                [TextItem(text="<>The end.<>")],
                [TextItem(text="<>The end, again.<>")],
                [TextItem(text="<><>")],
            ],
        ),
        TextItem(text=""),
    ]
