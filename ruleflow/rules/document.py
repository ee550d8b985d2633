"""Rule source reading.

Turns YAML rule text into a node tree of sequences, mappings and scalars.
Scalars are kept as raw strings: typing them is the parser's job, since
only the fact schema knows what type a literal should have.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

from ruleflow.core.errors import RulesError


def read_source(filename: str | Path | None = None, content: str | None = None) -> str:
    """Return rule source text, reading `filename` only if `content` is None."""
    if content is not None:
        return content

    if filename is None:
        raise RulesError("Either a rules file or rules content must be supplied")

    try:
        with open(filename, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as exc:
        raise RulesError(f"Cannot read file {filename}: {exc}") from exc


def compose_document(text: str) -> Node:
    """Compose the first YAML document in `text` into a node tree."""
    try:
        root = next(iter(yaml.compose_all(text, Loader=yaml.SafeLoader)), None)
    except yaml.YAMLError as exc:
        raise RulesError(f"Failed to parse YAML: {exc}") from exc

    if root is None:
        raise RulesError("No rules found")

    return root


def as_sequence(node: Node) -> list[Node] | None:
    """Children of a sequence node, or None if it is not a sequence."""
    return node.value if isinstance(node, SequenceNode) else None


def as_mapping(node: Node) -> list[tuple[Node, Node]] | None:
    """Key/value pairs of a mapping node in source order, or None."""
    return node.value if isinstance(node, MappingNode) else None


def as_string(node: Node) -> str | None:
    """Text of a scalar node, or None if it is not a scalar or is empty."""
    if not isinstance(node, ScalarNode):
        return None
    return node.value or None


def to_plain(node: Node) -> Any:
    """Convert a node tree to plain lists, dicts and strings."""
    if isinstance(node, SequenceNode):
        return [to_plain(child) for child in node.value]
    if isinstance(node, MappingNode):
        plain = {}
        for key, value in node.value:
            key_plain = to_plain(key)
            if not isinstance(key_plain, str):
                key_plain = str(key_plain)
            plain[key_plain] = to_plain(value)
        return plain
    return node.value


def describe(node: Node) -> str:
    """Single-line rendering of a node for error messages."""
    plain = to_plain(node)
    if isinstance(plain, str):
        return repr(plain)
    return yaml.safe_dump(
        plain,
        default_flow_style=True,
        sort_keys=False,
        allow_unicode=True,
        width=float("inf"),
    ).strip()
