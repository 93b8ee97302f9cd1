"""
Parser configuration.

Every key is optional; resolve_config() fills the gaps from DEFAULT_CONFIG.

    parse_string(text, config={"deserialize": my_literal_parser})
"""

from typing import Any, Callable, Mapping, NotRequired, TypedDict

from knotparse.literals import deserialize_literal
from knotparse.model import ENGINE_VERSION, TREE_VERSION


class ParserConfig(TypedDict):
    engine_version: NotRequired[int]
    tree_version: NotRequired[int]
    deserialize: NotRequired[Callable[[str], Any]]


class ParserConfigRequired(TypedDict):
    engine_version: int
    tree_version: int
    deserialize: Callable[[str], Any]


DEFAULT_CONFIG: ParserConfigRequired = {
    "engine_version": ENGINE_VERSION,
    "tree_version": TREE_VERSION,
    "deserialize": deserialize_literal,
}


def resolve_config(config: Mapping[str, Any], default_config: ParserConfigRequired) -> ParserConfigRequired:
    """Copy the defaults, overriding the keys present in config. Unknown keys are ignored."""
    _config = default_config.copy()
    if config:
        for key in _config:
            if key in config:
                _config[key] = config[key]
    return _config
