"""
Story script parser (Layer 1: Script Text → Document).

Matches the whole script once, top to bottom, one logical line at a
time. Each matched line is dispatched to the ParseContext, which builds
the document tree and records declarations.

Line alternatives, first match wins:
    INCLUDE path
    LIST name = members
    CONST name = literal
    VAR name = literal
    * / + choice
    === knot ===
    = stitch
    ~ assignment
    // comment, /* comment */, TODO: note
    paragraph (default)

The parse either consumes the whole script or raises ScriptSyntaxError;
no partial document is ever returned.
"""

import logging
from typing import Optional, Tuple

from knotparse.builder import ParseContext
from knotparse.config import DEFAULT_CONFIG, ParserConfig, resolve_config
from knotparse.grammar import (
    Assignment,
    Choice,
    Comment,
    ConstDecl,
    Include,
    KnotHeader,
    ListDecl,
    Paragraph,
    ScriptGrammar,
    Statement,
    StitchHeader,
    VarDecl,
)
from knotparse.lexical import skip_whitespace
from knotparse.model import Document


logger = logging.getLogger(__name__)


class ScriptSyntaxError(Exception):
    """Raised when part of the script matches no grammar rule."""

    def __init__(self, message: str, line: int, column: int, context: str = ""):
        self.message = message
        self.line = line
        self.column = column
        self.context = context
        super().__init__(f"{message} at line {line}, column {column}")


def _locate(source: str, pos: int) -> Tuple[int, int, str]:
    """Line number, column (both 1-based) and source line of a position."""
    line = source.count("\n", 0, pos) + 1
    line_start = source.rfind("\n", 0, pos) + 1
    line_end = source.find("\n", pos)
    if line_end == -1:
        line_end = len(source)
    return line, pos - line_start + 1, source[line_start:line_end].rstrip("\r")


def _dispatch(context: ParseContext, statement: Statement) -> None:
    if isinstance(statement, Include):
        context.add_include(statement.path)
    elif isinstance(statement, ListDecl):
        context.add_list(statement.name, statement.value)
    elif isinstance(statement, ConstDecl):
        context.add_constant(statement.name, statement.value)
    elif isinstance(statement, VarDecl):
        context.add_variable(statement.name, statement.value)
    elif isinstance(statement, Choice):
        context.add_choice(
            statement.level,
            statement.sticky,
            statement.condition,
            statement.text,
            statement.divert,
        )
    elif isinstance(statement, KnotHeader):
        context.add_knot(statement.name)
    elif isinstance(statement, StitchHeader):
        context.add_stitch(statement.name)
    elif isinstance(statement, Assignment):
        context.add_assign(statement.level, statement.temporary, statement.variable, statement.value)
    elif isinstance(statement, Paragraph):
        context.add_paragraph(statement.level, statement.label, statement.parts, statement.tags)
    elif isinstance(statement, Comment):
        pass
    else:
        raise TypeError(f"Unsupported statement type: {type(statement)}")


def parse_string(content: str, config: Optional[ParserConfig] = None) -> Document:
    """
    Parse a story script into a Document.

    Args:
        content: Script text
        config: Optional ParserConfig overrides

    Returns:
        Document with knots, stitches, items and declarations

    Raises:
        ScriptSyntaxError: If some of the script cannot be matched
    """
    context = ParseContext(resolve_config(config or {}, DEFAULT_CONFIG))
    grammar = ScriptGrammar(content)

    pos = skip_whitespace(content, 0)
    while pos < len(content):
        matched = grammar.match_line(pos)
        if matched is None:
            break
        statement, end = matched
        _dispatch(context, statement)
        pos = skip_whitespace(content, end)

    if pos < len(content):
        line, column, text = _locate(content, pos)
        raise ScriptSyntaxError(f"Unexpected input {text[column - 1:column + 19]!r}", line, column, text)

    document = context.document
    logger.info(
        "Parsed script: %d knot(s), %d include(s)",
        len(document.root),
        len(document.includes),
    )
    return document


def parse_file(filepath: str, config: Optional[ParserConfig] = None) -> Document:
    """
    Parse a script file into a Document.

    Included files are recorded in Document.includes, not opened.

    Raises:
        FileNotFoundError: If file doesn't exist
        ScriptSyntaxError: If parsing fails
    """
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            content = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"Script file not found: {filepath}")

    return parse_string(content, config=config)


__all__ = [
    "parse_string",
    "parse_file",
    "ScriptSyntaxError",
]
