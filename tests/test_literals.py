"""
Tests for scalar literal deserialization (CONST / VAR values).
"""

import pytest
from knotparse.literals import deserialize_literal


@pytest.mark.parametrize("text, expected", [
    ("42", 42),
    ("-3", -3),
    ("1.5", 1.5),
    (".5", 0.5),
    ("2e3", 2000.0),
    ("true", True),
    ("false", False),
    ('"Traveller"', "Traveller"),
    ("'single'", "single"),
    ('"say \\"hi\\""', 'say "hi"'),
    ('""', ""),
])
def test_supported_literals(text, expected):
    assert deserialize_literal(text) == expected


def test_types_are_preserved():
    assert isinstance(deserialize_literal("3"), int)
    assert isinstance(deserialize_literal("3.0"), float)
    assert deserialize_literal("true") is True


def test_surrounding_whitespace_ignored():
    assert deserialize_literal("  7  ") == 7


def test_unknown_forms_stay_opaque():
    """Expressions and diverts are returned as text."""
    assert deserialize_literal("-> harbour") == "-> harbour"
    assert deserialize_literal("coins + 1") == "coins + 1"
    assert deserialize_literal("True") == "True"
