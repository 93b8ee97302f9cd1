"""
Best-effort scalar literal deserialization for CONST and VAR declarations.

Supported forms:
    42, -3          -> int
    1.5, .5, 2e3    -> float
    true, false     -> bool
    "text", 'text'  -> str (quotes removed, backslash escapes of the quote honoured)

Anything else (lists, diverts, expressions) is returned as the stripped
source text; interpreting it is left to the runtime.
"""

import re
from typing import Any


INTEGER_RE = re.compile(r"[+-]?\d+")
FLOAT_RE = re.compile(r"[+-]?(?:\d+\.\d*|\.\d+|\d+(?=[eE]))(?:[eE][+-]?\d+)?")

BOOLEANS = {"true": True, "false": False}


def deserialize_literal(text: str) -> Any:
    value = text.strip()
    if INTEGER_RE.fullmatch(value):
        return int(value)
    if FLOAT_RE.fullmatch(value):
        return float(value)
    if value in BOOLEANS:
        return BOOLEANS[value]
    if len(value) >= 2 and value[0] in "\"'" and value[-1] == value[0]:
        quote = value[0]
        return value[1:-1].replace("\\" + quote, quote)
    return value
