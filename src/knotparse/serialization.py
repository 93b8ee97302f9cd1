"""
Serialization helpers for Document objects.

Converts documents to the plain table shape the playback runtime reads,
and back. JSON and YAML wrappers go through the same dict form.
Optional fields that are unset (None / False) are omitted.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List

import yaml

from knotparse.model import (
    AssignItem,
    ChoiceItem,
    ConditionItem,
    Document,
    Item,
    SequenceItem,
    SequenceMode,
    TextItem,
)


TEXT_KEYS = {"text", "label", "tags", "divert"}

# Fallback choices have no label; the runtime marks them with 0.
FALLBACK_CHOICE = 0


def items_to_list(items: List[Item] | None) -> List[Dict[str, Any]] | None:
    if items is None:
        return None
    return [item_to_dict(item) for item in items]


def items_from_list(data: List[Dict[str, Any]] | None) -> List[Item] | None:
    if data is None:
        return None
    return [item_from_dict(d) for d in data]


def item_to_dict(item: Item) -> Dict[str, Any]:
    if isinstance(item, TextItem):
        d: Dict[str, Any] = {}
        if item.text is not None:
            d["text"] = item.text
        if item.label is not None:
            d["label"] = item.label
        if item.tags is not None:
            d["tags"] = list(item.tags)
        if item.divert is not None:
            d["divert"] = item.divert
        return d
    if isinstance(item, ConditionItem):
        d = {"condition": item.condition, "success": items_to_list(item.success)}
        if item.failure is not None:
            d["failure"] = items_to_list(item.failure)
        return d
    if isinstance(item, SequenceItem):
        d = {"seq": item.mode.value, "alts": [items_to_list(alt) for alt in item.alternatives]}
        if item.shuffle:
            d["shuffle"] = True
        return d
    if isinstance(item, ChoiceItem):
        d = {
            "choice": item.choice_label if item.choice_label is not None else FALLBACK_CHOICE,
            "node": items_to_list(item.node),
        }
        if item.text is not None:
            d["text"] = item.text
        if item.sticky:
            d["sticky"] = True
        if item.divert is not None:
            d["divert"] = item.divert
        return d
    if isinstance(item, AssignItem):
        d = {"value": item.value_expr}
        if item.variable is not None:
            d["var"] = item.variable
        if item.temporary:
            d["temp"] = True
        return d
    raise TypeError(f"Unsupported item type: {type(item)}")


def item_from_dict(d: Dict[str, Any]) -> Item:
    if "condition" in d:
        return ConditionItem(
            condition=d["condition"],
            success=items_from_list(d.get("success", [])),
            failure=items_from_list(d.get("failure")),
        )
    if "seq" in d:
        return SequenceItem(
            mode=SequenceMode(d["seq"]),
            alternatives=[items_from_list(alt) for alt in d.get("alts", [])],
            shuffle=bool(d.get("shuffle", False)),
        )
    if "choice" in d:
        label = d["choice"]
        return ChoiceItem(
            choice_label=None if label == FALLBACK_CHOICE else label,
            text=d.get("text"),
            sticky=bool(d.get("sticky", False)),
            divert=d.get("divert"),
            node=items_from_list(d.get("node", [])),
        )
    if "value" in d:
        return AssignItem(
            variable=d.get("var"),
            value_expr=d["value"],
            temporary=bool(d.get("temp", False)),
        )
    if set(d) <= TEXT_KEYS:
        tags = d.get("tags")
        return TextItem(
            text=d.get("text"),
            label=d.get("label"),
            tags=list(tags) if tags is not None else None,
            divert=d.get("divert"),
        )
    raise TypeError(f"Unsupported item dict keys: {sorted(d)}")


def document_to_dict(doc: Document) -> Dict[str, Any]:
    return {
        "version": {"engine": doc.engine_version, "tree": doc.tree_version},
        "root": {
            knot: {stitch: items_to_list(items) for stitch, items in stitches.items()}
            for knot, stitches in doc.root.items()
        },
        "includes": list(doc.includes),
        "constants": dict(doc.constants),
        "variables": dict(doc.variables),
        "lists": {name: list(members) for name, members in doc.lists.items()},
    }


def document_from_dict(d: Dict[str, Any]) -> Document:
    version = d.get("version", {})
    doc = Document()
    doc.engine_version = version.get("engine", doc.engine_version)
    doc.tree_version = version.get("tree", doc.tree_version)
    doc.root = {
        knot: {stitch: items_from_list(items) for stitch, items in stitches.items()}
        for knot, stitches in d.get("root", {}).items()
    }
    doc.includes = list(d.get("includes", []))
    doc.constants = dict(d.get("constants", {}))
    doc.variables = dict(d.get("variables", {}))
    doc.lists = {name: list(members) for name, members in d.get("lists", {}).items()}
    return doc


def document_to_json(doc: Document) -> str:
    return json.dumps(document_to_dict(doc), sort_keys=True, ensure_ascii=False)


def document_from_json(s: str) -> Document:
    d = json.loads(s)
    return document_from_dict(d)


def document_to_yaml(doc: Document) -> str:
    return yaml.safe_dump(document_to_dict(doc), allow_unicode=True)


def document_from_yaml(s: str) -> Document:
    d = yaml.safe_load(s)
    return document_from_dict(d)
